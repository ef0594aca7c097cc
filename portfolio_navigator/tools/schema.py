"""JSON-Schema argument validation with remediation hints.

validate_arguments() is a pure function: schema + value in, a
SchemaValidation out. Both BaseTool and the execution middleware use it;
only the middleware surfaces the per-issue suggestions.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError, UnknownType, ValidationError


@dataclass(frozen=True)
class SchemaIssue:
    keyword: str
    path: str
    message: str
    suggestion: str


@dataclass(frozen=True)
class SchemaValidation:
    valid: bool
    issues: list[SchemaIssue] = field(default_factory=list)
    schema_error: str | None = None

    @property
    def errors(self) -> list[str]:
        if self.schema_error is not None:
            return [f"Schema validation error: {self.schema_error}"]
        return [f"{issue.path}: {issue.message}" for issue in self.issues]

    @property
    def suggestions(self) -> list[str]:
        return [issue.suggestion for issue in self.issues]

    @property
    def message(self) -> str:
        if self.schema_error is not None:
            return self.errors[0]
        return f"Validation failed: {', '.join(self.errors)}"


def json_type_name(value: Any) -> str:
    """JSON type name of a Python value (as a schema author would write it)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def close_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """Copy of an object schema with additionalProperties=false unless declared."""
    if schema.get("type") != "object" or "additionalProperties" in schema:
        return schema
    closed = copy.deepcopy(schema)
    closed["additionalProperties"] = False
    return closed


def _path_of(error: ValidationError) -> str:
    parts = [str(p) for p in error.absolute_path]
    return "/" + "/".join(parts) if parts else "root"


def _suggestions_for(error: ValidationError) -> list[str]:
    keyword = error.validator
    value = error.validator_value
    match keyword:
        case "required":
            instance = error.instance if isinstance(error.instance, dict) else {}
            missing = [p for p in value if p not in instance]
            return [f"Missing required property: {p}" for p in missing]
        case "type":
            expected = value if isinstance(value, str) else " or ".join(value)
            return [f"Expected {expected} but got {json_type_name(error.instance)}"]
        case "enum":
            return [f"Value must be one of: {', '.join(str(v) for v in value)}"]
        case "minLength":
            return [f"Value must be at least {value} characters long"]
        case "maxLength":
            return [f"Value must be no more than {value} characters long"]
        case "minimum" | "exclusiveMinimum":
            return [f"Value must be at least {value}"]
        case "maximum" | "exclusiveMaximum":
            return [f"Value must be no more than {value}"]
        case "additionalProperties":
            instance = error.instance if isinstance(error.instance, dict) else {}
            declared = error.schema.get("properties", {})
            extra = [k for k in instance if k not in declared]
            return [f"Remove unexpected property: {k}" for k in extra] or [
                f"Check the value format for {_path_of(error)}"
            ]
        case _:
            path = _path_of(error)
            return [f"Check the value format for {'the parameter' if path == 'root' else path}"]


def validate_arguments(
    schema: dict[str, Any],
    arguments: Any,
    *,
    check_schema: bool = False,
    allow_additional_properties: bool = True,
) -> SchemaValidation:
    """Validate arguments against a JSON Schema (draft 2020-12).

    check_schema: also reject a malformed schema (reported as schema_error).
    allow_additional_properties: when False, object schemas that do not
    declare additionalProperties are treated as closed.
    """
    if not allow_additional_properties:
        schema = close_schema(schema)

    if check_schema:
        try:
            Draft202012Validator.check_schema(schema)
        except SchemaError as e:
            return SchemaValidation(valid=False, schema_error=e.message)

    try:
        validator = Draft202012Validator(schema)
        errors = sorted(
            validator.iter_errors(arguments), key=lambda err: [str(p) for p in err.path]
        )
    except SchemaError as e:
        return SchemaValidation(valid=False, schema_error=e.message)
    except UnknownType as e:
        return SchemaValidation(valid=False, schema_error=f"unknown type {e.type!r}")

    if not errors:
        return SchemaValidation(valid=True)

    issues: list[SchemaIssue] = []
    seen: set[tuple[str, str]] = set()
    for error in errors:
        for suggestion in _suggestions_for(error):
            # one error per missing property, each listing every required name
            if (error.validator, suggestion) in seen:
                continue
            seen.add((error.validator, suggestion))
            issues.append(
                SchemaIssue(
                    keyword=str(error.validator),
                    path=_path_of(error),
                    message=error.message,
                    suggestion=suggestion,
                )
            )
    return SchemaValidation(valid=False, issues=issues)
