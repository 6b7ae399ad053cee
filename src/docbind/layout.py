"""Schema tree: the heading sections, fences, tables and options a document is expected to have.

A tree is declared once with the fluent builder methods on ``LayoutNode`` and
is read-only while documents are bound.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from docbind.coerce import is_record_type
from docbind.exceptions import SchemaBuildError
from docbind.fields import FieldTable
from docbind.options import OptionSlot

MAX_DEPTH = 6
SAME_TARGET = "."

CellConverter = Callable[[str, Any], Any]


@dataclass
class FenceSlot:
    body_field: str
    languages: tuple[str, ...] = ()
    language_field: str = ""
    info_field: str = ""
    sample_code_text: str = ""
    sample_info_text: str = ""

    def language(self, field_name: str) -> FenceSlot:
        self.language_field = field_name
        return self

    def info(self, field_name: str) -> FenceSlot:
        self.info_field = field_name
        return self

    def sample_code(self, code: str) -> FenceSlot:
        self.sample_code_text = code
        return self

    def sample_info(self, info: str) -> FenceSlot:
        self.sample_info_text = info
        return self

    def accepts(self, language: str) -> bool:
        return not self.languages or language in self.languages


@dataclass
class ColumnSpec:
    field_name: str
    key: str
    is_required: bool = False
    converter: CellConverter | None = None
    sample_values: tuple[object, ...] = ()

    def required(self) -> ColumnSpec:
        self.is_required = True
        return self

    def convert(self, converter: CellConverter) -> ColumnSpec:
        """Use ``converter(cell_text, document)`` instead of the default coercion."""
        self.converter = converter
        return self

    def samples(self, *values: object) -> ColumnSpec:
        self.sample_values = values
        return self


@dataclass
class TableSlot:
    list_field: str
    columns: list[ColumnSpec] = field(default_factory=list)
    map_mode: bool = False

    def field(self, field_name: str, key: str = "") -> ColumnSpec:
        column = ColumnSpec(field_name=field_name, key=key or field_name)
        self.columns.append(column)
        return column

    def as_map(self) -> TableSlot:
        self.map_mode = True
        return self


@dataclass(eq=False)
class LayoutNode:
    level: int
    pattern: str = ""
    instance_field: str = ""
    repeated: bool = False
    label_field: str = ""
    record_type: type | None = None
    children_nodes: list[LayoutNode] = field(default_factory=list)
    fences: list[FenceSlot] = field(default_factory=list)
    table_slot: TableSlot | None = None
    options: list[OptionSlot] = field(default_factory=list)
    samples: tuple[str, ...] = ()
    sample_contents: tuple[str, ...] = ()

    def label(self, field_name: str, pattern: str = "") -> LayoutNode:
        self.label_field = field_name
        if pattern:
            self.pattern = pattern
        return self

    def child(self, instance_field: str, pattern: str = "") -> LayoutNode:
        return self._add_child(instance_field, pattern, repeated=False)

    def children(self, instance_field: str, pattern: str = "") -> LayoutNode:
        return self._add_child(instance_field, pattern, repeated=True)

    def code_fence(self, field_name: str, *languages: str) -> FenceSlot:
        slot = FenceSlot(body_field=field_name, languages=tuple(languages))
        self.fences.append(slot)
        return slot

    def table(self, field_name: str) -> TableSlot:
        if self.table_slot is not None:
            raise SchemaBuildError(
                f"section at level {self.level} already has a table bound to '{self.table_slot.list_field}'"
            )
        self.table_slot = TableSlot(list_field=field_name)
        return self.table_slot

    def option(self, field_name: str, key: str = "") -> OptionSlot:
        slot = OptionSlot(dest_field=field_name, match_key=key or field_name)
        self.options.append(slot)
        return slot

    def sample(self, *labels: str) -> LayoutNode:
        self.samples = labels
        return self

    def sample_content(self, *texts: str) -> LayoutNode:
        self.sample_contents = texts
        return self

    def find_fence(self, language: str) -> FenceSlot | None:
        for slot in self.fences:
            if slot.accepts(language):
                return slot
        return None

    def _add_child(self, instance_field: str, pattern: str, *, repeated: bool) -> LayoutNode:
        if self.level >= MAX_DEPTH:
            raise SchemaBuildError(
                f"cannot nest '{instance_field}' below level {MAX_DEPTH}; headings stop at level {MAX_DEPTH}"
            )
        if not instance_field:
            raise SchemaBuildError(
                f"child section at level {self.level + 1} needs a field name or '{SAME_TARGET}'"
            )
        node = LayoutNode(
            level=self.level + 1,
            pattern=pattern,
            instance_field=instance_field,
            repeated=repeated,
            record_type=self._child_record_type(instance_field, repeated),
        )
        self.children_nodes.append(node)
        return node

    def _child_record_type(self, instance_field: str, repeated: bool) -> type | None:
        if self.record_type is None:
            return None
        if instance_field == SAME_TARGET:
            return self.record_type
        slot = FieldTable.for_type(self.record_type).slot(instance_field)
        if slot is None:
            return None
        candidate = slot.element_type if repeated else slot.value_type
        if is_record_type(candidate):
            FieldTable.for_type(candidate)
            return candidate
        return None
