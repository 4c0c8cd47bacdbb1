"""
Field extraction helpers for declared configuration blocks.

Every helper takes a `context` string (e.g. "job_input[0].event_hub") so
SchemaError messages point at the offending block.
"""

from dataclasses import asdict
from enum import Enum
from typing import Any, Mapping, Optional

from asaprov.errors import SchemaError


def expect_mapping(value: Any, context: str) -> Mapping[str, Any]:
    """Ensure a declared block is a mapping."""
    if not isinstance(value, Mapping):
        raise SchemaError(f"{context}: expected a mapping, got {type(value).__name__}")
    return value


def expect_list(value: Any, context: str) -> list[Any]:
    """Ensure a repeated block is a list. None is treated as empty."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise SchemaError(f"{context}: expected a list, got {type(value).__name__}")
    return list(value)


def require_str(data: Mapping[str, Any], key: str, context: str) -> str:
    """Get a required non-empty string attribute."""
    value = data.get(key)
    if value is None or value == "":
        raise SchemaError(f"{context}: missing required attribute '{key}'")
    if not isinstance(value, str):
        raise SchemaError(f"{context}.{key}: expected a string, got {type(value).__name__}")
    return value


def optional_str(data: Mapping[str, Any], key: str, context: str) -> Optional[str]:
    """Get an optional string attribute (None when absent)."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise SchemaError(f"{context}.{key}: expected a string, got {type(value).__name__}")
    return value


def optional_int(data: Mapping[str, Any], key: str, context: str) -> Optional[int]:
    """Get an optional integer attribute (None when absent). Booleans are rejected."""
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise SchemaError(f"{context}.{key}: expected an integer, got {type(value).__name__}")
    return value


def reject_unknown(data: Mapping[str, Any], allowed: set[str], context: str) -> None:
    """Fail on attributes the block does not define."""
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise SchemaError(f"{context}: unsupported attribute(s): {', '.join(unknown)}")


def compact_dict(obj: Any) -> dict[str, Any]:
    """
    Serialize a declaration dataclass to a plain dict.

    Enum members become their values and None-valued keys are dropped, so
    the result round-trips through the matching from_dict().
    """
    return _compact(asdict(obj))


def _compact(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _compact(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_compact(v) for v in value]
    return value
