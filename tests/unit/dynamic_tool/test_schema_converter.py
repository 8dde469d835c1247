"""
Unit tests for schema_converter.py module.

Tests conversion of JSON-Schema-shaped parameter descriptions into runtime
validators: required/optional handling, defaults, scalar strictness,
nesting and error paths.
"""

import pytest

from graphql_metatool.dynamic_tool.schema_converter import (
    ParameterValidator,
    convert_json_schema,
)
from graphql_metatool.exceptions import ParameterValidationError


def issues_for(validator, params):
    with pytest.raises(ParameterValidationError) as exc_info:
        validator.validate(params)
    return exc_info.value


class TestRequiredAndOptional:
    """Test presence rules for object properties."""

    @pytest.fixture
    def validator(self):
        return ParameterValidator(
            {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "name": {"type": "string"},
                    "limit": {"type": "integer", "default": 10},
                },
                "required": ["id"],
            }
        )

    def test_required_property_rejects_absence(self, validator):
        """Test that a missing required property fails with its path."""
        error = issues_for(validator, {})
        assert error.paths == ["id"]
        assert "Field required" in str(error)

    def test_optional_property_accepts_absence(self, validator):
        """Test that plain optional properties are omitted, not None."""
        result = validator.validate({"id": "1"})
        assert "name" not in result

    def test_default_substituted_when_absent(self, validator):
        """Test that a declared default is filled in."""
        assert validator.validate({"id": "1"}) == {"id": "1", "limit": 10}

    def test_default_not_used_when_present(self, validator):
        """Test that a provided value wins over the default."""
        assert validator.validate({"id": "1", "limit": 3})["limit"] == 3

    def test_unknown_keys_are_dropped(self, validator):
        """Test that undeclared keys do not reach the output."""
        result = validator.validate({"id": "1", "extra": True})
        assert "extra" not in result

    def test_none_params_treated_as_empty(self):
        """Test that missing arguments validate like an empty mapping."""
        validator = ParameterValidator(
            {"type": "object", "properties": {"limit": {"type": "integer", "default": 5}}}
        )
        assert validator.validate(None) == {"limit": 5}


class TestScalarTypes:
    """Test strictness of the scalar validators."""

    @pytest.fixture
    def validator(self):
        return ParameterValidator(
            {
                "type": "object",
                "properties": {
                    "s": {"type": "string"},
                    "n": {"type": "number"},
                    "i": {"type": "integer"},
                    "b": {"type": "boolean"},
                },
            }
        )

    def test_string_rejects_number(self, validator):
        """Test that a number is not coerced to a string."""
        assert issues_for(validator, {"s": 42}).paths == ["s"]

    def test_number_accepts_int_and_float(self, validator):
        """Test that number accepts both numeric kinds."""
        assert validator.validate({"n": 1}) == {"n": 1}
        assert validator.validate({"n": 1.5}) == {"n": 1.5}

    def test_number_rejects_string_and_bool(self, validator):
        """Test that number rejects numeric strings and booleans."""
        assert issues_for(validator, {"n": "1"}).paths == ["n"]
        assert issues_for(validator, {"n": True}).paths == ["n"]

    def test_number_rejects_non_finite(self, validator):
        """Test that infinity is rejected."""
        assert issues_for(validator, {"n": float("inf")}).paths == ["n"]

    def test_integer_accepts_integral_float(self, validator):
        """Test that 3.0 counts as an integer and is passed on as 3."""
        value = validator.validate({"i": 3.0})["i"]
        assert value == 3
        assert type(value) is int

    def test_integer_rejects_fraction(self, validator):
        """Test that 3.5 is not an integer."""
        assert issues_for(validator, {"i": 3.5}).paths == ["i"]

    def test_boolean_is_strict(self, validator):
        """Test that truthy values are not booleans."""
        assert validator.validate({"b": False}) == {"b": False}
        assert issues_for(validator, {"b": 1}).paths == ["b"]
        assert issues_for(validator, {"b": "true"}).paths == ["b"]

    def test_all_failures_reported(self, validator):
        """Test that every failing field is listed in the error."""
        error = issues_for(validator, {"s": 1, "b": "x"})
        assert sorted(error.paths) == ["b", "s"]
        assert str(error).startswith("Parameter validation error: ")


class TestNestedSchemas:
    """Test arrays, nested objects and free-form objects."""

    @pytest.fixture
    def validator(self):
        return ParameterValidator(
            {
                "type": "object",
                "properties": {
                    "tags": {"type": "array", "items": {"type": "string"}},
                    "anything": {"type": "array"},
                    "filter": {
                        "type": "object",
                        "properties": {
                            "status": {"type": "string"},
                            "page": {"type": "integer", "default": 1},
                        },
                        "required": ["status"],
                    },
                    "meta": {"type": "object"},
                },
            }
        )

    def test_array_items_validated(self, validator):
        """Test that array items use the items schema and report their index."""
        assert validator.validate({"tags": ["a", "b"]}) == {"tags": ["a", "b"]}
        assert issues_for(validator, {"tags": ["a", 2]}).paths == ["tags.1"]

    def test_array_without_items_accepts_anything(self, validator):
        """Test that arrays without items accept mixed values."""
        assert validator.validate({"anything": [1, "x", None]}) == {"anything": [1, "x", None]}

    def test_nested_object_path(self, validator):
        """Test that nested failures use dotted paths."""
        error = issues_for(validator, {"filter": {}})
        assert error.paths == ["filter.status"]

    def test_nested_defaults_applied(self, validator):
        """Test that defaults inside a provided nested object are filled in."""
        result = validator.validate({"filter": {"status": "open"}})
        assert result == {"filter": {"status": "open", "page": 1}}

    def test_object_without_properties_accepts_mapping(self, validator):
        """Test that a free-form object passes through unchanged."""
        assert validator.validate({"meta": {"k": [1]}}) == {"meta": {"k": [1]}}
        assert issues_for(validator, {"meta": "x"}).paths == ["meta"]


class TestDegradedSchemas:
    """Test that conversion never fails."""

    def test_unknown_type_accepts_any(self):
        """Test that an unrecognized type degrades to any value."""
        validator = convert_json_schema(
            {"type": "object", "properties": {"x": {"type": "uuid"}, "y": "junk"}}
        )
        assert validator.validate({"x": 1, "y": [2]}) == {"x": 1, "y": [2]}

    def test_non_object_root_accepts_any_mapping(self):
        """Test that a bare scalar root schema yields a validator with no fields."""
        validator = convert_json_schema({"type": "string"})
        assert validator.validate({"whatever": 1}) == {}

    def test_non_mapping_params_fail_at_root(self):
        """Test that non-mapping arguments fail with the root path."""
        validator = convert_json_schema({"type": "object", "properties": {"a": {"type": "string"}}})
        assert issues_for(validator, ["a"]).paths == ["(root)"]

    def test_property_names_are_not_identifiers(self):
        """Test that arbitrary property names round-trip."""
        validator = convert_json_schema(
            {"type": "object", "properties": {"first-name": {"type": "string"}, "class": {"type": "string"}}}
        )
        assert validator.validate({"first-name": "A", "class": "B"}) == {"first-name": "A", "class": "B"}


class TestInputSchema:
    """Test the schema advertised to MCP clients."""

    def test_input_schema_keeps_properties_and_required(self):
        schema = {
            "type": "object",
            "properties": {"id": {"type": "string", "description": "User id"}},
            "required": ["id"],
        }
        assert ParameterValidator(schema).input_schema() == schema

    def test_input_schema_for_non_object_root(self):
        assert ParameterValidator({"type": "string"}).input_schema() == {
            "type": "object",
            "properties": {},
        }
