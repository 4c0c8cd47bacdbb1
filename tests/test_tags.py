"""Tests for tag validation and conversion."""

import pytest

from asaprov.errors import SchemaError
from asaprov.tags import (
    MAX_TAG_COUNT,
    MAX_TAG_KEY_LENGTH,
    MAX_TAG_VALUE_LENGTH,
    expand_tags,
    flatten_tags,
    validate_tags,
)


class TestValidateTags:
    """Tests for validate_tags."""

    def test_accepts_limits(self):
        validate_tags({f"k{i}": "v" for i in range(MAX_TAG_COUNT)})
        validate_tags({"k" * MAX_TAG_KEY_LENGTH: "v" * MAX_TAG_VALUE_LENGTH})

    def test_too_many(self):
        with pytest.raises(SchemaError, match="maximum"):
            validate_tags({f"k{i}": "v" for i in range(MAX_TAG_COUNT + 1)})

    def test_key_too_long(self):
        with pytest.raises(SchemaError, match="exceeds 512"):
            validate_tags({"k" * (MAX_TAG_KEY_LENGTH + 1): "v"})

    def test_value_too_long(self):
        with pytest.raises(SchemaError, match="exceeds 256"):
            validate_tags({"k": "v" * (MAX_TAG_VALUE_LENGTH + 1)})

    def test_nested_value(self):
        with pytest.raises(SchemaError, match="scalar"):
            validate_tags({"k": {"nested": "v"}})


class TestConversions:
    """Tests for expand_tags and flatten_tags."""

    def test_expand_stringifies_values(self):
        assert expand_tags({"port": 8080, "debug": False}) == {"port": "8080", "debug": "False"}

    def test_flatten_none(self):
        assert flatten_tags(None) == {}

    def test_flatten_none_values(self):
        assert flatten_tags({"owner": None, "env": "prod"}) == {"owner": "", "env": "prod"}
