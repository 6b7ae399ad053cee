from __future__ import annotations

import dataclasses
import types
from functools import lru_cache
from typing import Any, Union, get_args, get_origin

from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

_FALSE_WORDS = frozenset({"", "0", "f", "false", "n", "no", "off"})


class CoercionFailure(ValueError):
    """Raised by coerce_value; callers wrap it with field and section context."""


def unwrap_optional(tp: Any) -> tuple[Any, bool]:
    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(tp) if arg is not type(None)]
        if len(members) == 1 and len(members) != len(get_args(tp)):
            return members[0], True
    return tp, False


@lru_cache(maxsize=None)
def _cached_adapter(tp: Any) -> TypeAdapter[Any]:
    return TypeAdapter(tp)


def _adapter(tp: Any) -> TypeAdapter[Any]:
    try:
        return _cached_adapter(tp)
    except TypeError:
        # unhashable annotation metadata
        return TypeAdapter(tp)


def coerce_value(tp: Any, value: object) -> Any:
    """Convert ``value`` into the declared type ``tp``.

    Text is the common source (heading labels, option values, table cells),
    but already typed values from custom converters pass through the same
    path. Booleans are fuzzy: any text other than an explicit false word is
    true, so table markers such as ``X`` work.
    """
    target, optional = unwrap_optional(tp)
    if value is None:
        if optional:
            return None
        raise CoercionFailure(f"None is not a valid {_type_name(tp)}")
    if target is Any:
        return value
    if target is bool:
        if isinstance(value, str):
            return value.strip().lower() not in _FALSE_WORDS
        if isinstance(value, (bool, int)):
            return bool(value)
    if target is str and not isinstance(value, str):
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)
    if target in (int, float) and isinstance(value, str) and not value.strip():
        return target()
    if isinstance(target, type) and get_origin(target) is None and isinstance(value, target):
        return value
    if isinstance(value, str) and target in (int, float):
        value = value.strip()
    try:
        return _adapter(tp).validate_python(value)
    except ValidationError as exc:
        detail = exc.errors()[0].get("msg", str(exc)) if exc.errors() else str(exc)
        raise CoercionFailure(f"can't convert {value!r} to {_type_name(tp)}: {detail}") from exc
    except PydanticSchemaGenerationError as exc:
        raise CoercionFailure(f"unsupported field type {_type_name(tp)}") from exc


def _type_name(tp: Any) -> str:
    if isinstance(tp, type) and not get_args(tp):
        return tp.__name__
    return str(tp).replace("typing.", "")


def is_record_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)
