"""Boundary checks of action arguments against their parameter schema."""

from __future__ import annotations

from typing import Any, Mapping

from rtp_core.schema.catalog import FunctionSchema, ParameterSchema

_TYPE_LABELS = {
    "object": "an object",
    "array": "a list",
    "string": "a string",
    "number": "a number",
    "boolean": "true or false",
}


def _matches_type(param: ParameterSchema, value: Any) -> bool:
    if param.type == "object":
        return isinstance(value, Mapping)
    if param.type == "array":
        return isinstance(value, list)
    if param.type == "string":
        return isinstance(value, str)
    if param.type == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, bool)


def _label(path: str) -> str:
    return f"'{path}'" if path else "arguments"


def _check(param: ParameterSchema, value: Any, path: str, problems: list[str]) -> None:
    if not _matches_type(param, value):
        problems.append(f"{_label(path)} must be {_TYPE_LABELS[param.type]}")
        return

    if param.enum and value not in param.enum:
        allowed = ", ".join(param.enum)
        problems.append(f"{_label(path)} must be one of: {allowed}")

    if param.type == "object":
        for key in param.required or []:
            if value.get(key) is None:
                problems.append(f"missing required field '{path + '.' if path else ''}{key}'")
        for key, child in (param.properties or {}).items():
            if value.get(key) is not None:
                _check(child, value[key], f"{path}.{key}" if path else key, problems)
    elif param.type == "array" and param.items is not None:
        for index, item in enumerate(value):
            _check(param.items, item, f"{path}[{index}]", problems)


def validate_arguments(schema: FunctionSchema, arguments: Any) -> list[str]:
    """
    Return every problem found in `arguments` for `schema`; empty means valid.

    Required fields must be present and non-null, primitive types must match
    and enum values must be listed. Unknown extra keys are tolerated here;
    handlers only read the columns they know.
    """
    problems: list[str] = []
    _check(schema.parameters, arguments, "", problems)
    return problems
