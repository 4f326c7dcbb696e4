"""Unit tests for vconfig structured logging."""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Iterator

import pytest
import structlog

from core.config import VConfigSettings
from core.errors import VConfigConfigError
from core.logging_config import configure_logging, current_log_level, get_logger
from store.versioned_codec import save_config


@dataclass
class AppConfig:
    Version: str


@pytest.fixture(autouse=True)
def _follow_environment_level() -> Iterator[None]:
    configure_logging(None)
    yield
    configure_logging(None)


def test_debug_level_from_environment_emits_save_event(
    tmp_path: Path, capsys, monkeypatch: pytest.MonkeyPatch
) -> None:
    """VCONFIG_LOG_LEVEL=DEBUG should surface library debug events."""
    monkeypatch.setenv("VCONFIG_LOG_LEVEL", "DEBUG")

    save_config(AppConfig(Version="1"), tmp_path / "config.json", VConfigSettings(fsync=False))
    event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])

    assert (event["event"], event["level"], event["version"]) == ("config_saved", "debug", "1")


def test_default_level_hides_debug_events(
    tmp_path: Path, capsys, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Without VCONFIG_LOG_LEVEL only warnings and above are emitted."""
    monkeypatch.delenv("VCONFIG_LOG_LEVEL", raising=False)

    save_config(AppConfig(Version="1"), tmp_path / "config.json", VConfigSettings(fsync=False))

    assert capsys.readouterr().err == ""


def test_logging_leaves_global_structlog_unconfigured(capsys) -> None:
    """Emitting vconfig events must not configure structlog for the host."""
    structlog.reset_defaults()

    get_logger("vconfig.test").warning("library_event", field=1)

    assert not structlog.is_configured() and "library_event" in capsys.readouterr().err


def test_configure_logging_overrides_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """An explicit level should win over VCONFIG_LOG_LEVEL until cleared."""
    monkeypatch.setenv("VCONFIG_LOG_LEVEL", "ERROR")

    configure_logging("info")

    assert current_log_level() == "INFO"


def test_configure_logging_rejects_unknown_level() -> None:
    """Unsupported level names should raise a config error."""
    with pytest.raises(VConfigConfigError):
        configure_logging("chatty")
