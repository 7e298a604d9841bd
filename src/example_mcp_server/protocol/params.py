"""Typed extraction of decoded request arguments.

Arguments arrive as plain JSON values (str, int/float, bool, dict, list,
None). These helpers keep the permissive decoding of the wire while
failing with InvalidParamsError on a type mismatch.
"""

from __future__ import annotations

from typing import Any

from .errors import InvalidParamsError

_MISSING = object()


def as_mapping(value: Any, what: str = "arguments") -> dict[str, Any]:
    """Return ``value`` as a dict; None becomes an empty dict."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidParamsError(f"{what} must be an object")
    return value


def _lookup(args: dict[str, Any], key: str, required: bool) -> Any:
    value = args.get(key, _MISSING)
    if value is _MISSING or value is None:
        if required:
            raise InvalidParamsError(f"{key} is required")
        return _MISSING
    return value


def get_string(args: dict[str, Any], key: str, *, required: bool = True, default: str | None = None) -> str | None:
    value = _lookup(args, key, required)
    if value is _MISSING:
        return default
    if not isinstance(value, str):
        raise InvalidParamsError(f"{key} must be a string")
    return value


def get_number(args: dict[str, Any], key: str, *, required: bool = True, default: float | None = None) -> float | None:
    value = _lookup(args, key, required)
    if value is _MISSING:
        return default
    # bool is an int subclass but never a valid number argument
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise InvalidParamsError(f"{key} must be a number")
    return float(value)


def get_bool(args: dict[str, Any], key: str, *, required: bool = True, default: bool | None = None) -> bool | None:
    value = _lookup(args, key, required)
    if value is _MISSING:
        return default
    if not isinstance(value, bool):
        raise InvalidParamsError(f"{key} must be a boolean")
    return value


def get_object(
    args: dict[str, Any], key: str, *, required: bool = True
) -> dict[str, Any] | None:
    value = _lookup(args, key, required)
    if value is _MISSING:
        return None
    if not isinstance(value, dict):
        raise InvalidParamsError(f"{key} must be an object")
    return value


def get_array(args: dict[str, Any], key: str, *, required: bool = True) -> list[Any] | None:
    value = _lookup(args, key, required)
    if value is _MISSING:
        return None
    if not isinstance(value, list):
        raise InvalidParamsError(f"{key} must be an array")
    return value
