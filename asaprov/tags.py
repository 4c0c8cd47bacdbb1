"""
Tag helpers shared by Azure resources.

Declared tags are a flat str -> str map. The API returns None when a
resource carries no tags, which is flattened to an empty map so state
comparisons stay stable.
"""

from typing import Any, Mapping, Optional

from asaprov.errors import SchemaError


MAX_TAG_COUNT = 50
MAX_TAG_KEY_LENGTH = 512
MAX_TAG_VALUE_LENGTH = 256


def validate_tags(tags: Mapping[str, Any]) -> None:
    """
    Validate a declared tag map against Azure limits.

    Raises:
        SchemaError: If the map is too large or a key/value is out of bounds
    """
    if len(tags) > MAX_TAG_COUNT:
        raise SchemaError(f"tags: a maximum of {MAX_TAG_COUNT} tags is allowed, got {len(tags)}")

    for key, value in tags.items():
        if not isinstance(key, str) or not key:
            raise SchemaError(f"tags: keys must be non-empty strings, got {key!r}")
        if len(key) > MAX_TAG_KEY_LENGTH:
            raise SchemaError(f"tags: key {key[:32]!r}... exceeds {MAX_TAG_KEY_LENGTH} characters")
        if isinstance(value, (dict, list)):
            raise SchemaError(f"tags: value for {key!r} must be a scalar")
        if len(str(value)) > MAX_TAG_VALUE_LENGTH:
            raise SchemaError(f"tags: value for {key!r} exceeds {MAX_TAG_VALUE_LENGTH} characters")


def expand_tags(tags: Mapping[str, Any]) -> dict[str, str]:
    """Convert declared tags into the map sent to the API (values stringified)."""
    return {key: str(value) for key, value in tags.items()}


def flatten_tags(tags: Optional[Mapping[str, Optional[str]]]) -> dict[str, str]:
    """Convert tags returned by the API into the map stored in state."""
    if not tags:
        return {}
    return {key: value if value is not None else "" for key, value in tags.items()}
