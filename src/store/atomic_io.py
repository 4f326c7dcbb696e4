"""Atomic text file IO for stored config records.

Reads classify missing files separately from other OS failures.
Writes go through a sibling temporary file that replaces the target in a
single rename, so readers never observe a truncated config.
"""

from __future__ import annotations

import os
from pathlib import Path
from uuid import uuid4

from core.constants import (
    DEFAULT_NEW_FILE_MODE,
    STORED_LINE_ENDING,
    TEMP_FILE_PREFIX,
    TEMP_FILE_SUFFIX,
    TEXT_ENCODING,
)
from core.errors import VConfigIOError, VConfigNotFoundError

_TEMP_OPEN_FLAGS = os.O_CREAT | os.O_EXCL | os.O_WRONLY | getattr(os, "O_BINARY", 0)


def read_stored_text(source: Path) -> str:
    """Read stored config text.

    Args:
        source: Config file path.

    Returns:
        Decoded file text, line endings untouched.

    Raises:
        VConfigNotFoundError: If the file does not exist.
        VConfigIOError: If the file cannot be read or is not UTF-8.
    """
    try:
        raw_bytes = source.read_bytes()
    except FileNotFoundError as error:
        raise VConfigNotFoundError(
            f"Config file not found at {source}. Create it with save_config first."
        ) from error
    except OSError as error:
        raise VConfigIOError(f"Failed to read config file {source}: {error}.") from error
    try:
        return raw_bytes.decode(TEXT_ENCODING)
    except UnicodeDecodeError as error:
        raise VConfigIOError(
            f"Failed to read config file {source}: content is not valid UTF-8."
        ) from error


def write_text_atomic(destination: Path, text: str, fsync: bool) -> None:
    """Replace ``destination`` with ``text`` in one atomic rename.

    Args:
        destination: Target config file path.
        text: Full file content, written with LF line endings.
        fsync: Whether to flush content to disk before the rename.

    Raises:
        VConfigIOError: If any write step fails; the target is left as it was.
    """
    temp_path = destination.parent / (
        f"{TEMP_FILE_PREFIX}{destination.name}.{uuid4().hex}{TEMP_FILE_SUFFIX}"
    )
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        existing_mode = _existing_file_mode(destination)
        # New files get DEFAULT_NEW_FILE_MODE with the process umask applied by the kernel.
        fd = os.open(temp_path, _TEMP_OPEN_FLAGS, DEFAULT_NEW_FILE_MODE)
    except OSError as error:
        raise VConfigIOError(f"Failed to prepare config file {destination}: {error}.") from error
    try:
        with os.fdopen(fd, "w", encoding=TEXT_ENCODING, newline=STORED_LINE_ENDING) as handle:
            handle.write(text)
            handle.flush()
            if fsync:
                os.fsync(handle.fileno())
        if existing_mode is not None:
            os.chmod(temp_path, existing_mode)
        temp_path.replace(destination)
    except OSError as error:
        _discard_temp_file(temp_path)
        raise VConfigIOError(f"Failed to write config file {destination}: {error}.") from error
    except BaseException:
        _discard_temp_file(temp_path)
        raise


def _existing_file_mode(destination: Path) -> int | None:
    """Return the permission bits of an existing target, if any."""
    try:
        return destination.stat().st_mode & 0o7777
    except FileNotFoundError:
        return None


def _discard_temp_file(temp_path: Path) -> None:
    try:
        temp_path.unlink(missing_ok=True)
    except OSError:
        pass
