"""Versioned save and load of dataclass config records.

Every record is validated before it is written and again after it is
decoded, so each stored file and each returned value carries a textual
Version field.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, TypeVar

from core.config import VConfigSettings, resolve_settings
from core.constants import VERSION_FIELD_NAME
from core.logging_config import get_logger
from core.record_validation import validate_record
from store.atomic_io import read_stored_text, write_text_atomic
from store.record_payload import (
    parse_stored_text,
    payload_to_text,
    record_from_payload,
    record_to_payload,
)

RecordT = TypeVar("RecordT")

logger = get_logger(__name__)


def encode_record(record: Any, settings: VConfigSettings | None = None) -> str:
    """Validate and render a record as stored text.

    Args:
        record: Dataclass record with a textual Version field.
        settings: Optional runtime settings; read from environment if omitted.

    Returns:
        JSON text with LF line endings and a trailing newline.

    Raises:
        VConfigValidationError: If the record fails structural validation.
        VConfigEncodeError: If a field holds an unsupported value.
    """
    validate_record(record)
    resolved = resolve_settings(settings)
    return payload_to_text(record_to_payload(record), resolved.json_indent)


def decode_record(shape: type[RecordT], text: str, source: str = "<text>") -> RecordT:
    """Decode stored text into a validated ``shape`` instance.

    Args:
        shape: Target dataclass type declaring ``Version: str``.
        text: Stored text in any line-ending convention.
        source: Location used in error messages.

    Returns:
        Decoded record.

    Raises:
        VConfigDecodeError: If text is malformed or does not fit the shape.
        VConfigValidationError: If the shape or the result lacks a textual Version.
    """
    payload = parse_stored_text(text, source)
    validate_record(shape)
    record = record_from_payload(shape, payload)
    validate_record(record)
    return record


def save_config(
    record: Any,
    destination: str | os.PathLike[str],
    settings: VConfigSettings | None = None,
) -> None:
    """Validate a record and atomically write it to ``destination``.

    The destination is not touched when validation or encoding fails.

    Args:
        record: Dataclass record with a textual Version field.
        destination: Target file path; missing parent directories are created.
        settings: Optional runtime settings; read from environment if omitted.

    Raises:
        VConfigValidationError: If the record fails structural validation.
        VConfigEncodeError: If a field holds an unsupported value.
        VConfigIOError: If the file cannot be written.
    """
    validate_record(record)
    resolved = resolve_settings(settings)
    destination_path = Path(destination)
    text = encode_record(record, resolved)
    write_text_atomic(destination_path, text, fsync=resolved.fsync)
    logger.debug(
        "config_saved",
        path=str(destination_path),
        version=getattr(record, VERSION_FIELD_NAME),
        record_type=type(record).__name__,
    )


def load_config(shape: type[RecordT], source: str | os.PathLike[str]) -> RecordT:
    """Load a stored record into an instance of ``shape``.

    Args:
        shape: Target dataclass type declaring ``Version: str``.
        source: Config file path.

    Returns:
        Decoded and validated record.

    Raises:
        VConfigNotFoundError: If the file does not exist.
        VConfigIOError: If the file cannot be read.
        VConfigDecodeError: If content is malformed or does not fit the shape.
        VConfigValidationError: If the shape lacks a textual Version field.
    """
    source_path = Path(source)
    record = decode_record(shape, read_stored_text(source_path), str(source_path))
    logger.debug(
        "config_loaded",
        path=str(source_path),
        version=getattr(record, VERSION_FIELD_NAME),
        record_type=shape.__name__,
    )
    return record
