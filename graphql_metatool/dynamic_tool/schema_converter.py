"""
JSON Schema to runtime validator conversion.

Builds pydantic models from JSON-Schema-shaped parameter descriptions with
a fixed type table. Conversion never fails: unknown or malformed
sub-schemas accept any value.

Absent optional fields are left out of the validated output, except when
the schema declares a ``default``, in which case the default is filled in.
"""

import math
from typing import Annotated, Any, Dict, FrozenSet, List, Optional, Tuple, Type

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainValidator,
    StrictBool,
    StrictStr,
    ValidationError,
    create_model,
)
from pydantic_core import PydanticCustomError

from ..exceptions import ParameterValidationError
from ..logging_config import get_logger

logger = get_logger("schema_converter")


def _number(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PydanticCustomError("number_type", "Input should be a valid number")
    if isinstance(value, float) and not math.isfinite(value):
        raise PydanticCustomError("finite_number", "Input should be a finite number")
    return value


def _integer(value: Any) -> Any:
    value = _number(value)
    if isinstance(value, float) and not value.is_integer():
        raise PydanticCustomError("int_type", "Input should be a valid integer")
    # 2.0 is sent as 2
    return int(value)


Number = Annotated[Any, PlainValidator(_number)]
Integer = Annotated[Any, PlainValidator(_integer)]

SCALAR_TYPES = {
    "string": StrictStr,
    "number": Number,
    "integer": Integer,
    "boolean": StrictBool,
}

MODEL_CONFIG = ConfigDict(extra="ignore", populate_by_name=False)


class ParameterValidator:
    """Runtime validator for one tool's ``parameter_schema``.

    Example:
        >>> validator = ParameterValidator({
        ...     "type": "object",
        ...     "properties": {"limit": {"type": "integer", "default": 10}},
        ... })
        >>> validator.validate({})
        {'limit': 10}
    """

    def __init__(self, schema: Dict[str, Any], name: str = "Parameters"):
        self.schema = schema if isinstance(schema, dict) else {}
        # model class -> attribute names whose schema declares a default
        self._defaulted: Dict[Type[BaseModel], FrozenSet[str]] = {}
        self.model = self._build_model(name, self._root_properties(), self._root_required())

    def _root_properties(self) -> Dict[str, Any]:
        properties = self.schema.get("properties")
        if self.schema.get("type") == "object" and isinstance(properties, dict):
            return properties
        return {}

    def _root_required(self) -> List[str]:
        required = self.schema.get("required")
        return [r for r in required if isinstance(r, str)] if isinstance(required, list) else []

    def _build_model(
        self, name: str, properties: Dict[str, Any], required: List[str]
    ) -> Type[BaseModel]:
        fields: Dict[str, Tuple[Any, Any]] = {}
        defaulted = set()

        for index, (key, prop_schema) in enumerate(properties.items()):
            # Property names are arbitrary strings; attribute names stay internal
            attr = f"field_{index}"
            annotation = self._annotation(f"{name}_{index}", prop_schema)

            if key in required:
                fields[attr] = (annotation, Field(..., alias=key))
            elif isinstance(prop_schema, dict) and "default" in prop_schema:
                fields[attr] = (annotation, Field(default=prop_schema["default"], alias=key))
                defaulted.add(attr)
            else:
                fields[attr] = (annotation, Field(default=None, alias=key))

        model = create_model(name, __config__=MODEL_CONFIG, **fields)
        self._defaulted[model] = frozenset(defaulted)
        return model

    def _annotation(self, name: str, schema: Any) -> Any:
        if not isinstance(schema, dict):
            return Any

        schema_type = schema.get("type")
        if isinstance(schema_type, str) and schema_type in SCALAR_TYPES:
            return SCALAR_TYPES[schema_type]

        if schema_type == "array":
            if "items" in schema:
                return List[self._annotation(f"{name}_item", schema["items"])]
            return List[Any]

        if schema_type == "object":
            properties = schema.get("properties")
            if isinstance(properties, dict):
                required = schema.get("required")
                required = [r for r in required if isinstance(r, str)] if isinstance(required, list) else []
                return self._build_model(name, properties, required)
            return Dict[str, Any]

        if schema_type is not None:
            logger.debug(f"Unrecognized schema type {schema_type!r} for {name}, accepting any value")
        return Any

    def validate(self, params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Validate call arguments and apply declared defaults.

        Args:
            params: Raw tool call arguments

        Returns:
            Validated arguments keyed by property name

        Raises:
            ParameterValidationError: With one (path, reason) pair per failure
        """
        try:
            instance = self.model.model_validate(params if params is not None else {})
        except ValidationError as e:
            issues = [
                (".".join(str(part) for part in error["loc"]) or "(root)", error["msg"])
                for error in e.errors()
            ]
            raise ParameterValidationError(issues) from e
        return self._export(instance)

    def _export(self, value: Any) -> Any:
        if isinstance(value, BaseModel):
            model = type(value)
            keep = value.model_fields_set | self._defaulted.get(model, frozenset())
            return {
                field_info.alias: self._export(getattr(value, attr))
                for attr, field_info in model.model_fields.items()
                if attr in keep
            }
        if isinstance(value, list):
            return [self._export(item) for item in value]
        return value

    def input_schema(self) -> Dict[str, Any]:
        """Input schema advertised to MCP clients for this tool."""
        schema: Dict[str, Any] = {"type": "object", "properties": dict(self._root_properties())}
        required = [r for r in self._root_required() if r in schema["properties"]]
        if required:
            schema["required"] = required
        return schema


def convert_json_schema(schema: Dict[str, Any], name: str = "Parameters") -> ParameterValidator:
    """Build a :class:`ParameterValidator` from a JSON Schema."""
    return ParameterValidator(schema, name=name)
