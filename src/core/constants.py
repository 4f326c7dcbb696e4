"""Core constants used across vconfig modules.

This module centralizes format and environment constants.
Keeping values here avoids magic literals in codec logic.
"""

from __future__ import annotations

VERSION_FIELD_NAME = "Version"
SERIALIZED_NAME_METADATA_KEY = "name"
TEXT_ENCODING = "utf-8"
UTF8_BOM = "\ufeff"
STORED_LINE_ENDING = "\n"
DEFAULT_JSON_INDENT = 2
DEFAULT_FSYNC = True
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_NEW_FILE_MODE = 0o644
TEMP_FILE_PREFIX = ".vconfig-"
TEMP_FILE_SUFFIX = ".tmp"
ENV_JSON_INDENT = "VCONFIG_JSON_INDENT"
ENV_FSYNC = "VCONFIG_FSYNC"
ENV_LOG_LEVEL = "VCONFIG_LOG_LEVEL"
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
TRUE_ENV_VALUES = ("1", "true", "yes", "on")
FALSE_ENV_VALUES = ("0", "false", "no", "off")
