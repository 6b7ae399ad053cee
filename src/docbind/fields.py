"""Field accessors for record types.

Record types are dataclasses. Each type gets one ``FieldTable`` built from its
type hints; binding code reads and writes through the table's slots instead of
looking attributes up ad hoc.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, get_args, get_origin, get_type_hints

from docbind.coerce import CoercionFailure, coerce_value, is_record_type, unwrap_optional
from docbind.exceptions import ConversionError, DuplicateAssignment, SchemaMismatch


@dataclass(frozen=True)
class FieldSlot:
    name: str
    annotation: Any
    value_type: Any
    optional: bool
    is_list: bool
    element_type: Any = None

    @property
    def is_record(self) -> bool:
        return is_record_type(self.value_type)

    @property
    def element_is_record(self) -> bool:
        return self.is_list and is_record_type(self.element_type)

    def get(self, target: object) -> Any:
        return getattr(target, self.name)

    def set(self, target: object, value: Any) -> None:
        setattr(target, self.name, value)


@dataclass(frozen=True)
class FieldTable:
    type_name: str
    slots: dict[str, FieldSlot]

    @staticmethod
    def for_type(record_type: type) -> FieldTable:
        return _field_table(record_type)

    def slot(self, name: str) -> FieldSlot | None:
        return self.slots.get(name)

    def require(self, name: str, *, kind: str = "", section: str = "") -> FieldSlot:
        found = self.slots.get(name)
        if found is None:
            raise SchemaMismatch.missing_field(
                self.type_name, name, kind=kind, section=section
            )
        return found


@lru_cache(maxsize=None)
def _field_table(record_type: type) -> FieldTable:
    if not is_record_type(record_type):
        raise TypeError(f"{record_type!r} is not a dataclass record type")
    hints = get_type_hints(record_type)
    slots: dict[str, FieldSlot] = {}
    for item in dataclasses.fields(record_type):
        annotation = hints.get(item.name, Any)
        value_type, optional = unwrap_optional(annotation)
        origin = get_origin(value_type)
        is_list = origin is list
        element_type = None
        if is_list:
            args = get_args(value_type)
            element_type = args[0] if args else Any
        slots[item.name] = FieldSlot(
            name=item.name,
            annotation=annotation,
            value_type=value_type,
            optional=optional,
            is_list=is_list,
            element_type=element_type,
        )
    return FieldTable(type_name=record_type.__name__, slots=slots)


def table_for(target: object) -> FieldTable:
    return FieldTable.for_type(type(target))


def zero_value(tp: Any) -> Any:
    value_type, optional = unwrap_optional(tp)
    if optional:
        return None
    origin = get_origin(value_type)
    if origin is list or value_type is list:
        return []
    if origin is dict or value_type is dict:
        return {}
    if is_record_type(value_type):
        return new_record(value_type)
    if value_type in (str, int, float, bool):
        return value_type()
    return None


def new_record(record_type: type) -> Any:
    """Instantiate ``record_type`` with zero values for fields lacking defaults."""
    table = FieldTable.for_type(record_type)
    kwargs: dict[str, Any] = {}
    for item in dataclasses.fields(record_type):
        if not item.init:
            continue
        if item.default is not dataclasses.MISSING:
            continue
        if item.default_factory is not dataclasses.MISSING:
            continue
        kwargs[item.name] = zero_value(table.slots[item.name].annotation)
    return record_type(**kwargs)


def is_zero(value: object) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (str, bytes, list, tuple, dict, set)):
        return len(value) == 0
    if isinstance(value, (int, float)):
        return value == 0
    return False


def assign_value(
    target: object,
    field_name: str,
    value: object,
    *,
    kind: str,
    section: str,
) -> None:
    """Write a bound value into an empty field, coercing it to the field's type."""
    if not field_name:
        return
    slot = table_for(target).require(field_name, kind=kind, section=section)
    if not is_zero(slot.get(target)):
        raise DuplicateAssignment(field_name, kind, section)
    slot.set(target, coerce_into(slot, value, section=section))


def coerce_into(slot: FieldSlot, value: object, *, section: str) -> Any:
    try:
        return coerce_value(slot.annotation, value)
    except CoercionFailure as exc:
        raise ConversionError(
            f"can't assign value '{value}' to field '{slot.name}' (inside '{section}' section): {exc}",
            field_name=slot.name,
            value=value,
            section=section,
        ) from exc
