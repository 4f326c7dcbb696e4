"""JSON payload conversion for dataclass config records.

This module maps dataclass records to JSON-safe payloads and back,
checking every decoded value against the field's declared type.
"""

from __future__ import annotations

import collections.abc
import dataclasses
from datetime import datetime
from enum import Enum
import json
from pathlib import PurePath
import types
from typing import Any, Literal, Union, get_args, get_origin, get_type_hints

from core.constants import SERIALIZED_NAME_METADATA_KEY, STORED_LINE_ENDING, UTF8_BOM
from core.errors import VConfigDecodeError, VConfigEncodeError

_LIST_ORIGINS = (list, collections.abc.Sequence, collections.abc.MutableSequence)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def serialized_name(record_field: dataclasses.Field[Any]) -> str:
    """Return the JSON key used for one dataclass field."""
    override = record_field.metadata.get(SERIALIZED_NAME_METADATA_KEY)
    return str(override) if override else record_field.name


def record_to_payload(record: Any) -> dict[str, object]:
    """Serialize a dataclass record into a JSON-safe payload.

    Keys follow field declaration order; nested mappings are key-sorted.

    Args:
        record: Dataclass instance.

    Returns:
        Dictionary payload for JSON encoding.

    Raises:
        VConfigEncodeError: If a field holds an unsupported value type.
    """
    return _record_to_payload(record, type(record).__name__)


def record_from_payload(shape: type[Any], payload: dict[str, Any]) -> Any:
    """Deserialize a JSON payload into an instance of ``shape``.

    Args:
        shape: Target dataclass type.
        payload: Parsed top-level JSON object.

    Returns:
        A new ``shape`` instance.

    Raises:
        VConfigDecodeError: If the payload does not fit the shape.
    """
    return _record_from_payload(shape, payload, shape.__name__)


def payload_to_text(payload: dict[str, object], indent: int) -> str:
    """Render a payload as stored text with a trailing newline.

    Raises:
        VConfigEncodeError: If the payload holds non-finite floats.
    """
    try:
        text = json.dumps(
            payload,
            indent=indent if indent > 0 else None,
            ensure_ascii=False,
            allow_nan=False,
        )
    except ValueError as error:
        raise VConfigEncodeError(f"Failed to encode config payload: {error}.") from error
    return text + STORED_LINE_ENDING


def normalize_stored_text(text: str) -> str:
    """Strip a byte-order mark and convert CRLF and CR line endings to LF."""
    if text.startswith(UTF8_BOM):
        text = text[len(UTF8_BOM) :]
    return text.replace("\r\n", "\n").replace("\r", "\n")


def parse_stored_text(text: str, source: str) -> dict[str, Any]:
    """Parse normalized stored text into its top-level JSON object.

    Args:
        text: Stored text, line endings in any convention.
        source: Location used in error messages.

    Returns:
        Parsed top-level object.

    Raises:
        VConfigDecodeError: If text is not a JSON object.
    """
    try:
        payload = json.loads(normalize_stored_text(text), parse_constant=_reject_constant)
    except json.JSONDecodeError as error:
        raise VConfigDecodeError(
            f"Failed to parse config at {source}: {error.msg} "
            f"(line {error.lineno}, column {error.colno}). "
            "Fix or recreate the config file."
        ) from error
    except ValueError as error:
        raise VConfigDecodeError(f"Failed to parse config at {source}: {error}.") from error
    if not isinstance(payload, dict):
        raise VConfigDecodeError(
            f"Failed to parse config at {source}: "
            "expected JSON object at top level. Recreate the config file."
        )
    return payload


def match_payload_key(payload: dict[str, Any], name: str) -> str | None:
    """Find the payload key for a field name, exact match first."""
    if name in payload:
        return name
    folded_name = name.casefold()
    for key in payload:
        if key.casefold() == folded_name:
            return key
    return None


def _reject_constant(constant: str) -> object:
    raise ValueError(f"non-standard JSON constant {constant}")


def _record_to_payload(record: Any, path: str) -> dict[str, object]:
    payload: dict[str, object] = {}
    for record_field in dataclasses.fields(record):
        name = serialized_name(record_field)
        payload[name] = _encode_value(getattr(record, record_field.name), f"{path}.{name}")
    return payload


def _encode_value(value: Any, path: str) -> object:
    if isinstance(value, Enum):
        return _encode_value(value.value, path)
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, PurePath):
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _record_to_payload(value, path)
    if isinstance(value, collections.abc.Mapping):
        encoded: dict[str, object] = {}
        for key in sorted(value, key=str):
            if not isinstance(key, str):
                raise VConfigEncodeError(
                    f"Cannot encode {path}: mapping key {key!r} is not a string."
                )
            encoded[key] = _encode_value(value[key], f"{path}.{key}")
        return encoded
    if isinstance(value, (list, tuple)):
        return [_encode_value(item, f"{path}[{index}]") for index, item in enumerate(value)]
    raise VConfigEncodeError(
        f"Cannot encode {path}: unsupported value type {type(value).__name__}."
    )


def _record_from_payload(shape: type[Any], payload: dict[str, Any], path: str) -> Any:
    hints = _resolve_type_hints(shape)
    arguments: dict[str, Any] = {}
    for record_field in dataclasses.fields(shape):
        if not record_field.init:
            continue
        name = serialized_name(record_field)
        key = match_payload_key(payload, name)
        if key is None:
            if (
                record_field.default is dataclasses.MISSING
                and record_field.default_factory is dataclasses.MISSING
            ):
                raise VConfigDecodeError(f"Missing required field {path}.{name}.")
            continue
        annotation = hints.get(record_field.name, Any)
        arguments[record_field.name] = _decode_value(annotation, payload[key], f"{path}.{name}")
    try:
        return shape(**arguments)
    except (TypeError, ValueError) as error:
        raise VConfigDecodeError(f"Failed to build {path}: {error}.") from error


def _resolve_type_hints(shape: type[Any]) -> dict[str, Any]:
    try:
        return get_type_hints(shape)
    except (NameError, TypeError) as error:
        raise VConfigDecodeError(
            f"Cannot resolve field annotations of {shape.__name__}: {error}. "
            "Define record types at module level."
        ) from error


def _decode_value(annotation: Any, value: Any, path: str) -> Any:
    if annotation is Any or annotation is object:
        return value
    origin = get_origin(annotation)
    arguments = get_args(annotation)
    if origin is Union or origin is types.UnionType:
        return _decode_union(arguments, value, path)
    if origin is Literal:
        if value in arguments:
            return value
        raise _type_mismatch(path, f"one of {arguments!r}", value)
    if origin is not None:
        return _decode_generic(origin, arguments, value, path)
    return _decode_plain(annotation, value, path)


def _decode_union(arguments: tuple[Any, ...], value: Any, path: str) -> Any:
    if value is None and type(None) in arguments:
        return None
    for option in arguments:
        if option is type(None):
            continue
        try:
            return _decode_value(option, value, path)
        except VConfigDecodeError:
            continue
    names = " | ".join(_annotation_name(option) for option in arguments)
    raise _type_mismatch(path, names, value)


def _decode_generic(origin: Any, arguments: tuple[Any, ...], value: Any, path: str) -> Any:
    if origin in _LIST_ORIGINS:
        item_type = arguments[0] if arguments else Any
        return [
            _decode_value(item_type, item, f"{path}[{index}]")
            for index, item in enumerate(_require_list(value, path))
        ]
    if origin is tuple:
        items = _require_list(value, path)
        if len(arguments) == 2 and arguments[1] is Ellipsis:
            return tuple(
                _decode_value(arguments[0], item, f"{path}[{index}]")
                for index, item in enumerate(items)
            )
        if arguments and len(arguments) != len(items):
            raise VConfigDecodeError(
                f"Invalid value at {path}: expected {len(arguments)} items, got {len(items)}."
            )
        item_types = arguments or (Any,) * len(items)
        return tuple(
            _decode_value(item_type, item, f"{path}[{index}]")
            for index, (item_type, item) in enumerate(zip(item_types, items))
        )
    if origin in _MAPPING_ORIGINS:
        if not isinstance(value, dict):
            raise _type_mismatch(path, "object", value)
        value_type = arguments[1] if len(arguments) == 2 else Any
        return {
            key: _decode_value(value_type, item, f"{path}.{key}") for key, item in value.items()
        }
    raise VConfigDecodeError(f"Unsupported field type at {path}: {_annotation_name(origin)}.")


def _decode_plain(annotation: Any, value: Any, path: str) -> Any:
    if annotation is type(None) or annotation is None:
        if value is None:
            return None
        raise _type_mismatch(path, "null", value)
    if annotation is bool:
        if isinstance(value, bool):
            return value
        raise _type_mismatch(path, "bool", value)
    if annotation is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        raise _type_mismatch(path, "int", value)
    if annotation is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        raise _type_mismatch(path, "float", value)
    if not isinstance(annotation, type):
        raise VConfigDecodeError(f"Unsupported field type at {path}: {annotation!r}.")
    if issubclass(annotation, Enum):
        try:
            return annotation(value)
        except ValueError as error:
            raise VConfigDecodeError(
                f"Invalid value at {path}: {value!r} is not a {annotation.__name__}."
            ) from error
    if annotation is str:
        if isinstance(value, str):
            return value
        raise _type_mismatch(path, "str", value)
    if issubclass(annotation, datetime):
        return _decode_datetime(value, path)
    if issubclass(annotation, PurePath):
        if isinstance(value, str):
            return annotation(value)
        raise _type_mismatch(path, "path string", value)
    if dataclasses.is_dataclass(annotation):
        if not isinstance(value, dict):
            raise _type_mismatch(path, "object", value)
        return _record_from_payload(annotation, value, path)
    if annotation in (list, tuple):
        return annotation(_require_list(value, path))
    if annotation is dict:
        if isinstance(value, dict):
            return dict(value)
        raise _type_mismatch(path, "object", value)
    raise VConfigDecodeError(f"Unsupported field type at {path}: {annotation.__name__}.")


def _decode_datetime(value: Any, path: str) -> datetime:
    if not isinstance(value, str):
        raise _type_mismatch(path, "ISO-8601 timestamp", value)
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(text)
    except ValueError as error:
        raise VConfigDecodeError(
            f"Invalid value at {path}: {value!r} is not an ISO-8601 timestamp."
        ) from error


def _require_list(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise _type_mismatch(path, "array", value)
    return value


def _type_mismatch(path: str, expected: str, value: Any) -> VConfigDecodeError:
    return VConfigDecodeError(
        f"Invalid value at {path}: expected {expected}, got {_json_type_name(value)}."
    )


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _annotation_name(annotation: Any) -> str:
    if isinstance(annotation, type):
        return annotation.__name__
    return str(annotation)
