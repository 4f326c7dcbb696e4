"""Public SDK surface for vconfig.

This module provides a stable import path for applications.
It re-exports the four core operations, the error types and the store.
"""

from __future__ import annotations

from core.config import VConfigSettings
from core.errors import (
    VConfigConfigError,
    VConfigDecodeError,
    VConfigEncodeError,
    VConfigError,
    VConfigIOError,
    VConfigMigrationError,
    VConfigMissingVersionError,
    VConfigNotFoundError,
    VConfigValidationError,
)
from core.record_validation import VersionedRecord, has_version_capability, validate_record
from migration.workflow import MigrationStep, MigrationWorkflow
from store.config_store import VersionedConfigStore
from store.version_peek import peek_version, peek_version_text
from store.versioned_codec import decode_record, encode_record, load_config, save_config

__all__ = [
    "MigrationStep",
    "MigrationWorkflow",
    "VConfigConfigError",
    "VConfigDecodeError",
    "VConfigEncodeError",
    "VConfigError",
    "VConfigIOError",
    "VConfigMigrationError",
    "VConfigMissingVersionError",
    "VConfigNotFoundError",
    "VConfigSettings",
    "VConfigValidationError",
    "VersionedConfigStore",
    "VersionedRecord",
    "decode_record",
    "encode_record",
    "has_version_capability",
    "load_config",
    "peek_version",
    "peek_version_text",
    "save_config",
]
