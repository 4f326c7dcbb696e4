"""Structural validation of versioned config records.

A record is a dataclass instance (or the dataclass type describing its
shape) that declares a ``Version`` field of type ``str``. Every value the
codec writes or returns passes through ``validate_record`` first.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Protocol, get_type_hints, runtime_checkable

from core.constants import VERSION_FIELD_NAME
from core.errors import VConfigValidationError


@runtime_checkable
class VersionedRecord(Protocol):
    """Capability exposed by every storable config record."""

    Version: str


def validate_record(record: object) -> None:
    """Validate that a record or record shape exposes a textual Version field.

    Args:
        record: Dataclass instance or dataclass type.

    Raises:
        VConfigValidationError: With kind ``not_a_record``,
            ``missing_version_field`` or ``wrong_version_field_type``.
    """
    record_type = record_shape(record)
    version_field = _find_version_field(record_type)
    declared_type = _declared_version_type(record_type, version_field)
    if declared_type is not str:
        raise VConfigValidationError(
            "wrong_version_field_type",
            f"Record type {record_type.__name__} declares {VERSION_FIELD_NAME} as "
            f"{_describe_annotation(declared_type)}; expected str. "
            f"Declare `{VERSION_FIELD_NAME}: str` on the record.",
        )
    if isinstance(record, type):
        return
    value = getattr(record, VERSION_FIELD_NAME)
    if not isinstance(value, str):
        raise VConfigValidationError(
            "wrong_version_field_type",
            f"Record {record_type.__name__} holds a {type(value).__name__} in "
            f"{VERSION_FIELD_NAME}; expected str.",
        )


def has_version_capability(record: object) -> bool:
    """Return whether a value passes structural validation."""
    try:
        validate_record(record)
    except VConfigValidationError:
        return False
    return True


def record_shape(record: object) -> type[Any]:
    """Resolve the dataclass type behind a record or record shape.

    Args:
        record: Dataclass instance or dataclass type.

    Returns:
        The dataclass type.

    Raises:
        VConfigValidationError: With kind ``not_a_record`` for anything else.
    """
    if record is None:
        raise VConfigValidationError(
            "not_a_record",
            "Expected a dataclass record, got None. Pass a record instance or type.",
        )
    if isinstance(record, type):
        if dataclasses.is_dataclass(record):
            return record
        raise VConfigValidationError(
            "not_a_record",
            f"Expected a dataclass record type, got type {record.__name__}.",
        )
    if dataclasses.is_dataclass(record):
        return type(record)
    raise VConfigValidationError(
        "not_a_record",
        f"Expected a dataclass record, got {type(record).__name__}. "
        "Config values must be dataclass instances.",
    )


def _find_version_field(record_type: type[Any]) -> dataclasses.Field[Any]:
    for record_field in dataclasses.fields(record_type):
        if record_field.name == VERSION_FIELD_NAME:
            return record_field
    raise VConfigValidationError(
        "missing_version_field",
        f"Record type {record_type.__name__} has no {VERSION_FIELD_NAME} field. "
        f"Add `{VERSION_FIELD_NAME}: str` to the record.",
    )


def _declared_version_type(record_type: type[Any], version_field: dataclasses.Field[Any]) -> Any:
    """Resolve the Version annotation, including postponed string annotations."""
    annotation = version_field.type
    if not isinstance(annotation, str):
        return annotation
    try:
        return get_type_hints(record_type).get(VERSION_FIELD_NAME, annotation)
    except (NameError, TypeError):
        # Unresolvable sibling annotations; judge Version by its own text.
        return str if annotation.strip() in ("str", "builtins.str") else annotation


def _describe_annotation(annotation: Any) -> str:
    if isinstance(annotation, type):
        return annotation.__name__
    return str(annotation)
