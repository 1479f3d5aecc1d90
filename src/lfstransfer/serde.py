"""Shared validation utilities for to_dict / from_dict decoding."""

from collections.abc import Mapping


def to_plain_data(value: object) -> object:
    """Recursively normalize Mapping/tuple containers into plain dict/list values."""
    if isinstance(value, Mapping):
        return {str(key): to_plain_data(item) for key, item in value.items()}
    if isinstance(value, (tuple, list)):
        return [to_plain_data(item) for item in value]
    return value


def as_str_object_dict(value: object, *, field_name: str) -> dict[str, object]:
    """Validate and normalize a mapping value into ``dict[str, object]``."""
    if not isinstance(value, Mapping):
        msg = f"{field_name} must be a mapping."
        raise TypeError(msg)
    return {str(key): item for key, item in value.items()}


def require_string(value: object, *, field_name: str) -> str:
    """Validate a required non-empty string field."""
    if not isinstance(value, str) or not value:
        msg = f"{field_name} must be a non-empty string."
        raise TypeError(msg)
    return value


def optional_string(value: object, *, field_name: str) -> str | None:
    """Validate an optional string field."""
    if value is None:
        return None
    if not isinstance(value, str):
        msg = f"{field_name} must be a string or None."
        raise TypeError(msg)
    return value


def require_int(value: object, *, field_name: str) -> int:
    """Validate a required integer field (rejects booleans)."""
    if not isinstance(value, int) or isinstance(value, bool):
        msg = f"{field_name} must be an int."
        raise TypeError(msg)
    return value


def optional_float(value: object, *, field_name: str) -> float | None:
    """Validate an optional float field (rejects booleans)."""
    if value is None:
        return None
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        msg = f"{field_name} must be a float or None."
        raise TypeError(msg)
    return float(value)


def string_mapping(value: object, *, field_name: str) -> dict[str, str]:
    """Validate an optional mapping of string keys to string values."""
    if value is None:
        return {}
    items = as_str_object_dict(value, field_name=field_name)
    result: dict[str, str] = {}
    for key, item in items.items():
        if not isinstance(item, str):
            msg = f"{field_name}[{key!r}] must be a string."
            raise TypeError(msg)
        result[key] = item
    return result
