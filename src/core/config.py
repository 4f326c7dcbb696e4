"""Runtime configuration model for vconfig.

This module owns all environment variable parsing and validation.
Other modules consume a typed settings object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_FSYNC,
    DEFAULT_JSON_INDENT,
    DEFAULT_LOG_LEVEL,
    ENV_FSYNC,
    ENV_JSON_INDENT,
    ENV_LOG_LEVEL,
    FALSE_ENV_VALUES,
    SUPPORTED_LOG_LEVELS,
    TRUE_ENV_VALUES,
)
from core.errors import VConfigConfigError


@dataclass(frozen=True)
class VConfigSettings:
    """Validated runtime settings.

    Attributes:
        json_indent: Spaces per indentation level in stored files.
        fsync: Whether saves flush file contents to disk before replacing.
        log_level: Minimum structured log level emitted by vconfig.
    """

    json_indent: int = DEFAULT_JSON_INDENT
    fsync: bool = DEFAULT_FSYNC
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "VConfigSettings":
        """Build settings from process environment variables.

        Returns:
            A validated settings object.

        Raises:
            VConfigConfigError: If environment values are invalid.
        """
        return cls(
            json_indent=_parse_json_indent(os.getenv(ENV_JSON_INDENT, str(DEFAULT_JSON_INDENT))),
            fsync=_parse_bool(ENV_FSYNC, os.getenv(ENV_FSYNC), DEFAULT_FSYNC),
            log_level=parse_log_level(os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)),
        )


def resolve_settings(settings: VConfigSettings | None) -> VConfigSettings:
    """Return explicit settings or fall back to the environment."""
    return settings if settings is not None else VConfigSettings.from_env()


def _parse_json_indent(raw_value: str) -> int:
    """Parse the JSON indent environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Non-negative indent width.

    Raises:
        VConfigConfigError: If value is not a non-negative integer.
    """
    try:
        indent = int(raw_value)
    except ValueError as error:
        raise VConfigConfigError(
            f"Invalid {ENV_JSON_INDENT} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {ENV_JSON_INDENT} to a numeric value."
        ) from error
    if indent < 0:
        raise VConfigConfigError(
            f"Invalid {ENV_JSON_INDENT} value: expected zero or more spaces, got {indent}."
        )
    return indent


def _parse_bool(env_name: str, raw_value: str | None, default: bool) -> bool:
    if raw_value is None or not raw_value.strip():
        return default
    normalized = raw_value.strip().lower()
    if normalized in TRUE_ENV_VALUES:
        return True
    if normalized in FALSE_ENV_VALUES:
        return False
    raise VConfigConfigError(
        f"Invalid {env_name} value: expected one of "
        f"{', '.join(TRUE_ENV_VALUES + FALSE_ENV_VALUES)}, got '{raw_value}'."
    )


def parse_log_level(raw_value: str) -> str:
    """Validate and upper-case a log level name.

    Raises:
        VConfigConfigError: If the name is not a supported level.
    """
    level = raw_value.strip().upper()
    if level not in SUPPORTED_LOG_LEVELS:
        raise VConfigConfigError(
            f"Invalid {ENV_LOG_LEVEL} value: expected one of "
            f"{', '.join(SUPPORTED_LOG_LEVELS)}, got '{raw_value}'."
        )
    return level
