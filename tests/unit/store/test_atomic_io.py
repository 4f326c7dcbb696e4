"""Unit tests for atomic config file IO."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from core.errors import VConfigIOError, VConfigNotFoundError
from store.atomic_io import read_stored_text, write_text_atomic


def test_read_missing_file_is_not_found(tmp_path: Path) -> None:
    """A missing file should raise the dedicated not-found error."""
    with pytest.raises(VConfigNotFoundError):
        read_stored_text(tmp_path / "absent.json")


def test_not_found_is_a_file_not_found_error(tmp_path: Path) -> None:
    """Callers using the builtin exception should still catch it."""
    with pytest.raises(FileNotFoundError):
        read_stored_text(tmp_path / "absent.json")


def test_read_directory_is_io_error(tmp_path: Path) -> None:
    """Reading a directory should surface a wrapped IO error."""
    with pytest.raises(VConfigIOError):
        read_stored_text(tmp_path)


def test_read_non_utf8_is_io_error(tmp_path: Path) -> None:
    """Bytes that are not UTF-8 should not be decoded silently."""
    path = tmp_path / "latin.json"
    path.write_bytes(b'{"Version": "\xff"}')

    with pytest.raises(VConfigIOError):
        read_stored_text(path)


def test_write_replaces_content_and_leaves_no_temp_files(tmp_path: Path) -> None:
    """Atomic writes should fully replace content without leftovers."""
    path = tmp_path / "config.json"
    path.write_text("old content that is longer than the new one", encoding="utf-8")

    write_text_atomic(path, "new\n", fsync=False)

    assert path.read_bytes() == b"new\n" and os.listdir(tmp_path) == ["config.json"]


def test_write_keeps_lf_line_endings(tmp_path: Path) -> None:
    """Written text should not be translated to platform line endings."""
    path = tmp_path / "config.json"

    write_text_atomic(path, "a\nb\n", fsync=True)

    assert path.read_bytes() == b"a\nb\n"


def test_write_creates_parent_directories(tmp_path: Path) -> None:
    """Missing parent directories should be created."""
    path = tmp_path / "nested" / "dir" / "config.json"

    write_text_atomic(path, "{}\n", fsync=False)

    assert path.exists()


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_write_preserves_existing_mode(tmp_path: Path) -> None:
    """Replacing a file should keep its permission bits."""
    path = tmp_path / "config.json"
    path.write_text("{}", encoding="utf-8")
    path.chmod(0o600)

    write_text_atomic(path, "{}\n", fsync=False)

    assert path.stat().st_mode & 0o777 == 0o600


def test_write_failure_leaves_target_untouched(tmp_path: Path) -> None:
    """A failed rename should keep the previous content and clean up."""
    target = tmp_path / "config.json"
    target.mkdir()
    (target / "keep").write_text("x", encoding="utf-8")

    with pytest.raises(VConfigIOError):
        write_text_atomic(target, "{}\n", fsync=False)

    assert sorted(os.listdir(tmp_path)) == ["config.json"]


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_new_file_mode_comes_from_umask_without_changing_it(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """New files should get 0o644 minus the umask without touching the umask."""
    path = tmp_path / "config.json"
    previous_umask = os.umask(0o027)

    def _reject_umask_call(mask: int) -> int:
        raise AssertionError("process umask must not change during a write")

    monkeypatch.setattr(os, "umask", _reject_umask_call)
    try:
        write_text_atomic(path, "{}\n", fsync=False)
    finally:
        monkeypatch.undo()
        os.umask(previous_umask)

    assert path.stat().st_mode & 0o777 == 0o640
