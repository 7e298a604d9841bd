"""Declared-argument validation for tools.

Checks decoded arguments against the subset of JSON Schema that tool
declarations use (top-level ``properties`` with primitive ``type`` and a
``required`` list) before the tool body runs.
"""

from __future__ import annotations

from typing import Any

from ..protocol.errors import InvalidParamsError
from ..protocol.params import as_mapping

_TYPE_CHECKS: dict[str, Any] = {
    "string": lambda v: isinstance(v, str),
    "number": lambda v: isinstance(v, int | float) and not isinstance(v, bool),
    "integer": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "boolean": lambda v: isinstance(v, bool),
    "object": lambda v: isinstance(v, dict),
    "array": lambda v: isinstance(v, list),
    "null": lambda v: v is None,
}


def object_schema(
    properties: dict[str, dict[str, Any]] | None = None,
    required: list[str] | None = None,
) -> dict[str, Any]:
    """Build an object input schema."""
    schema: dict[str, Any] = {"type": "object", "properties": properties or {}}
    if required:
        schema["required"] = list(required)
    return schema


def validate_arguments(schema: dict[str, Any], arguments: Any) -> dict[str, Any]:
    """Validate arguments against a declared object schema.

    Returns the arguments as a dict (None becomes {}).

    Raises:
        InvalidParamsError: arguments are not an object, a required
            argument is missing, or a declared argument has the wrong type
    """
    args = as_mapping(arguments)
    properties: dict[str, Any] = schema.get("properties") or {}

    for name in schema.get("required") or []:
        if args.get(name) is None:
            raise InvalidParamsError(f"{name} is required")

    for name, value in args.items():
        declared = properties.get(name)
        if not declared or value is None:
            continue
        expected = declared.get("type")
        if expected is None:
            continue
        types = expected if isinstance(expected, list) else [expected]
        checks = [_TYPE_CHECKS[t] for t in types if t in _TYPE_CHECKS]
        if checks and not any(check(value) for check in checks):
            raise InvalidParamsError(f"{name} must be of type {' or '.join(types)}")

    return args
