"""vconfig exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each operation raises a specific error type so callers can branch on cause.
"""

from __future__ import annotations

from typing import Literal

ValidationErrorKind = Literal[
    "not_a_record",
    "missing_version_field",
    "wrong_version_field_type",
]


class VConfigError(Exception):
    """Base exception for all vconfig failures."""


class VConfigConfigError(VConfigError):
    """Raised for invalid runtime configuration."""


class VConfigValidationError(VConfigError):
    """Raised when a value is not a record with a textual Version field.

    Attributes:
        kind: Which structural condition was unmet.
    """

    def __init__(self, kind: ValidationErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind: ValidationErrorKind = kind


class VConfigNotFoundError(VConfigError, FileNotFoundError):
    """Raised when a stored config file does not exist."""


class VConfigDecodeError(VConfigError):
    """Raised when stored content is not a well-formed config record."""


class VConfigMissingVersionError(VConfigDecodeError):
    """Raised when stored content has no Version field."""


class VConfigEncodeError(VConfigError):
    """Raised when a record holds values that cannot be encoded."""


class VConfigIOError(VConfigError):
    """Raised for underlying read and write failures."""


class VConfigMigrationError(VConfigError):
    """Raised when a stored version has no registered migration path."""
