"""Error taxonomy for document binding."""

from __future__ import annotations

from typing import Sequence


class BindError(ValueError):
    """Base class for every failure raised while building a schema or binding a document."""


class SchemaBuildError(BindError):
    """The schema declaration itself is invalid (too deep, second table, bad names)."""


class SchemaMismatch(BindError):
    """A declared field does not exist (or has the wrong shape) on the target record type."""

    def __init__(
        self,
        message: str,
        *,
        type_name: str,
        field_name: str,
        section: str = "",
    ) -> None:
        super().__init__(message)
        self.type_name = type_name
        self.field_name = field_name
        self.section = section

    @classmethod
    def missing_field(
        cls,
        type_name: str,
        field_name: str,
        *,
        kind: str = "",
        section: str = "",
    ) -> SchemaMismatch:
        purpose = f" for {kind}" if kind else ""
        message = f"{type_name} doesn't have field '{field_name}'{purpose}"
        if section:
            message += f" (inside '{section}' section)"
        return cls(message, type_name=type_name, field_name=field_name, section=section)

    @classmethod
    def not_a_list(cls, type_name: str, field_name: str, *, section: str = "") -> SchemaMismatch:
        return cls(
            f"field '{field_name}' of {type_name} is not list type (inside '{section}' section)",
            type_name=type_name,
            field_name=field_name,
            section=section,
        )


class DuplicateAssignment(BindError):
    """A destination field already holds a non-zero value."""

    def __init__(self, field_name: str, kind: str, section: str) -> None:
        super().__init__(
            f"field '{field_name}' for {kind} is already filled (inside '{section}' section)"
        )
        self.field_name = field_name
        self.kind = kind
        self.section = section


class MissingRequiredColumn(BindError):
    """One or more required table columns could not be resolved from the header row."""

    def __init__(self, columns: Sequence[str], section: str) -> None:
        self.columns = tuple(columns)
        self.section = section
        super().__init__(
            f"required column({', '.join(self.columns)}) are missing (inside '{section}' section)"
        )


class ConversionError(BindError):
    """Coercion of a label, option or cell value (or a custom conversion) failed."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str = "",
        value: object = None,
        section: str = "",
    ) -> None:
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.section = section
