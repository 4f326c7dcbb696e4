"""Version lookup for stored config records.

Peeking reads only the Version value of a stored record, whatever shape
wrote it, so callers can pick a migration path before a full decode.
"""

from __future__ import annotations

import os
from pathlib import Path

from core.constants import VERSION_FIELD_NAME
from core.errors import VConfigDecodeError, VConfigMissingVersionError
from core.logging_config import get_logger
from store.atomic_io import read_stored_text
from store.record_payload import match_payload_key, parse_stored_text

logger = get_logger(__name__)


def peek_version(source: str | os.PathLike[str]) -> str:
    """Return the Version value of a stored config file.

    Args:
        source: Config file path.

    Returns:
        The stored version text.

    Raises:
        VConfigNotFoundError: If the file does not exist.
        VConfigIOError: If the file cannot be read.
        VConfigMissingVersionError: If the stored object has no Version key.
        VConfigDecodeError: If content is malformed or Version is not text.
    """
    source_path = Path(source)
    version = peek_version_text(read_stored_text(source_path), str(source_path))
    logger.debug("config_version_peeked", path=str(source_path), version=version)
    return version


def peek_version_text(text: str, source: str = "<text>") -> str:
    """Return the Version value of stored config text."""
    payload = parse_stored_text(text, source)
    key = match_payload_key(payload, VERSION_FIELD_NAME)
    if key is None:
        raise VConfigMissingVersionError(
            f"Config at {source} has no {VERSION_FIELD_NAME} field. "
            "The file was not written by save_config or predates versioning."
        )
    version = payload[key]
    if not isinstance(version, str):
        raise VConfigDecodeError(
            f"Config at {source} stores {VERSION_FIELD_NAME} as "
            f"{type(version).__name__}; expected text."
        )
    return version
