"""Declarative input schemas for MCP tools, checked with JSON Schema."""
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from jsonschema import Draft202012Validator, validators
from jsonschema.exceptions import ValidationError

from ..utils.errors import ToolInputError

ROOT_PATH = "(root)"


def _anchored_pattern(
    validator: Draft202012Validator, pattern: str, instance: Any, schema: Mapping[str, Any]
) -> Iterator[ValidationError]:
    # JSON Schema patterns are searches; "QNA\n" would otherwise satisfy "^[A-Z]+$".
    if validator.is_type(instance, "string") and re.fullmatch(pattern, instance) is None:
        yield ValidationError(f"{instance!r} does not match {pattern!r}")


ArgumentValidator = validators.extend(Draft202012Validator, {"pattern": _anchored_pattern})


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


@dataclass(frozen=True)
class StringField:
    name: str
    description: str = ""
    required: bool = False
    default: Optional[str] = None
    min_length: Optional[int] = None
    min_length_message: Optional[str] = None
    max_length: Optional[int] = None
    max_length_message: Optional[str] = None
    pattern: Optional[str] = None
    pattern_message: str = "Invalid"

    json_type = "string"

    def json_schema(self) -> Dict[str, object]:
        schema: Dict[str, object] = {"type": "string"}
        if self.description:
            schema["description"] = self.description
        if self.min_length is not None:
            schema["minLength"] = self.min_length
        if self.max_length is not None:
            schema["maxLength"] = self.max_length
        if self.pattern is not None:
            schema["pattern"] = self.pattern
        if self.default is not None:
            schema["default"] = self.default
        return schema

    def messages(self) -> Dict[str, str]:
        return {
            "minLength": self.min_length_message
            or f"String must contain at least {self.min_length} character(s)",
            "maxLength": self.max_length_message
            or f"String must contain at most {self.max_length} character(s)",
            "pattern": self.pattern_message,
        }

    def coerce(self, value: Any) -> Any:
        return value


@dataclass(frozen=True)
class NumberField:
    name: str
    description: str = ""
    required: bool = False
    default: Optional[Union[int, float]] = None
    minimum: Optional[Union[int, float]] = None
    minimum_message: Optional[str] = None
    maximum: Optional[Union[int, float]] = None
    maximum_message: Optional[str] = None
    integer: bool = False
    integer_message: str = "Expected integer, received float"

    json_type = "number"

    def json_schema(self) -> Dict[str, object]:
        schema: Dict[str, object] = {"type": "number"}
        if self.description:
            schema["description"] = self.description
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.maximum is not None:
            schema["maximum"] = self.maximum
        if self.integer:
            # ``multipleOf`` keeps 20.0 valid while rejecting 20.5.
            schema["multipleOf"] = 1
        if self.default is not None:
            schema["default"] = self.default
        return schema

    def messages(self) -> Dict[str, str]:
        return {
            "minimum": self.minimum_message
            or f"Number must be greater than or equal to {self.minimum}",
            "maximum": self.maximum_message
            or f"Number must be less than or equal to {self.maximum}",
            "multipleOf": self.integer_message,
        }

    def coerce(self, value: Any) -> Any:
        if self.integer and isinstance(value, float):
            return int(value)
        return value


@dataclass(frozen=True)
class EnumField:
    name: str
    choices: Tuple[str, ...]
    description: str = ""
    required: bool = False
    default: Optional[str] = None

    json_type = "string"

    def json_schema(self) -> Dict[str, object]:
        schema: Dict[str, object] = {"type": "string", "enum": list(self.choices)}
        if self.description:
            schema["description"] = self.description
        if self.default is not None:
            schema["default"] = self.default
        return schema

    def messages(self) -> Dict[str, str]:
        expected = " | ".join(f"'{choice}'" for choice in self.choices)
        return {"enum": f"Invalid enum value. Expected {expected}"}

    def coerce(self, value: Any) -> Any:
        return value


Field = Union[StringField, NumberField, EnumField]

# Report order for several failures on one field.
_KEYWORD_RANK = {
    "type": 0,
    "minLength": 1,
    "minimum": 1,
    "maxLength": 2,
    "maximum": 2,
    "multipleOf": 3,
    "pattern": 3,
    "enum": 3,
}


@dataclass(frozen=True)
class InputSchema:
    """Ordered field constraints for one tool.

    Undeclared keys are ignored unless ``closed`` is set.
    """

    fields: Tuple[Field, ...] = ()
    closed: bool = False

    def field(self, name: str) -> Optional[Field]:
        for candidate in self.fields:
            if candidate.name == name:
                return candidate
        return None

    def json_schema(self) -> Dict[str, object]:
        """Return the JSON Schema advertised to MCP clients."""

        schema: Dict[str, object] = {
            "type": "object",
            "properties": {field.name: field.json_schema() for field in self.fields},
        }
        required = [field.name for field in self.fields if field.required]
        if required:
            schema["required"] = required
        if self.closed:
            schema["additionalProperties"] = False
        return schema


@lru_cache(maxsize=None)
def _validator(schema: InputSchema) -> Draft202012Validator:
    # Required and unknown keys are checked by ``validate_input`` so that each
    # issue can be attributed to a field path.
    properties = {field.name: field.json_schema() for field in schema.fields}
    return ArgumentValidator({"type": "object", "properties": properties})


def _describe(schema: InputSchema, error: ValidationError) -> Tuple[int, int, str, str]:
    path = ".".join(str(part) for part in error.absolute_path) or ROOT_PATH
    field_name = str(error.absolute_path[0]) if error.absolute_path else None
    field = schema.field(field_name) if field_name is not None else None
    if field is None:
        return (len(schema.fields), 0, path, error.message)
    index = schema.fields.index(field)
    rank = _KEYWORD_RANK.get(str(error.validator), 4)
    if error.validator == "type":
        message = f"Expected {field.json_type}, received {_type_name(error.instance)}"
    else:
        message = field.messages().get(str(error.validator), error.message)
    return (index, rank, path, message)


def validate_input(
    schema: InputSchema, arguments: Any, tool_name: str
) -> Dict[str, Any]:
    """Validate raw tool arguments and return a defaulted copy.

    Every declared field is checked and all violations are reported together
    in one :class:`ToolInputError`. Optional fields that are absent (or
    ``null``) take their default, which is ``None`` when none is declared.
    """

    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise ToolInputError(
            tool_name, [(ROOT_PATH, f"Expected object, received {_type_name(arguments)}")]
        )

    declared = {field.name for field in schema.fields}
    present = {key: value for key, value in arguments.items() if value is not None}

    ranked: List[Tuple[int, int, str, str]] = []
    for index, field in enumerate(schema.fields):
        if field.required and field.name not in present:
            ranked.append((index, 0, field.name, "Required"))

    failed_type = set()
    described = [_describe(schema, error) for error in _validator(schema).iter_errors(present)]
    for index, rank, path, message in described:
        if rank == 0:
            failed_type.add(path)
    for index, rank, path, message in described:
        # A wrong type makes the remaining constraints on that field meaningless.
        if path in failed_type and rank != 0:
            continue
        ranked.append((index, rank, path, message))

    if schema.closed:
        unknown = [key for key in arguments if key not in declared]
        if unknown:
            names = ", ".join(f"'{key}'" for key in unknown)
            ranked.append(
                (len(schema.fields), 0, ROOT_PATH, f"Unrecognized key(s) in object: {names}")
            )

    if ranked:
        ranked.sort(key=lambda item: (item[0], item[1]))
        raise ToolInputError(tool_name, [(path, message) for _, _, path, message in ranked])

    validated: Dict[str, Any] = {}
    for field in schema.fields:
        if field.name in present:
            validated[field.name] = field.coerce(present[field.name])
        else:
            validated[field.name] = field.default
    return validated


__all__ = [
    "EnumField",
    "Field",
    "InputSchema",
    "NumberField",
    "StringField",
    "validate_input",
]
