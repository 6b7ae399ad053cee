from __future__ import annotations

import logging
from typing import Any

from docbind.aliases import AliasTable
from docbind.blocks import Table
from docbind.coerce import is_record_type
from docbind.exceptions import ConversionError, MissingRequiredColumn, SchemaMismatch
from docbind.fields import FieldTable, coerce_into, new_record, table_for
from docbind.layout import LayoutNode, TableSlot
from docbind.matching import canonical_header, resolve_column

logger = logging.getLogger(__name__)


def bind_table(
    node: LayoutNode,
    target: object,
    block: Table,
    *,
    aliases: AliasTable,
    document: object,
    section: str,
) -> int:
    """Append one row per table body row to the node's table field.

    Returns the number of rows appended; a node without a table slot ignores
    the table entirely.
    """
    slot = node.table_slot
    if slot is None:
        logger.debug("ignoring table in section %r", section)
        return 0
    table = table_for(target)
    list_slot = table.require(slot.list_field, kind="table", section=section)
    if not list_slot.is_list:
        raise SchemaMismatch.not_a_list(table.type_name, slot.list_field, section=section)
    rows = list_slot.get(target)
    if rows is None:
        rows = []
        list_slot.set(target, rows)
    if slot.map_mode:
        bound = _map_rows(block, aliases)
    else:
        bound = _struct_rows(
            slot,
            block,
            aliases=aliases,
            element_type=list_slot.element_type,
            owner=table.type_name,
            document=document,
            section=section,
        )
    rows.extend(bound)
    return len(bound)


def _struct_rows(
    slot: TableSlot,
    block: Table,
    *,
    aliases: AliasTable,
    element_type: Any,
    owner: str,
    document: object,
    section: str,
) -> list[object]:
    if not is_record_type(element_type):
        raise SchemaMismatch(
            f"field '{slot.list_field}' of {owner} does not hold records (inside '{section}' section)",
            type_name=owner,
            field_name=slot.list_field,
            section=section,
        )
    row_table = FieldTable.for_type(element_type)
    indices = [resolve_column(aliases, column.key, block.headers) for column in slot.columns]
    missing = [
        column.key
        for column, index in zip(slot.columns, indices)
        if column.is_required and index is None
    ]
    if missing:
        raise MissingRequiredColumn(missing, section)

    result: list[object] = []
    for cells in block.rows:
        record = new_record(element_type)
        for column, index in zip(slot.columns, indices):
            if index is None:
                continue
            field_slot = row_table.require(column.field_name, kind="table column", section=section)
            cell = cells[index] if index < len(cells) else ""
            value: object = cell
            if column.converter is not None:
                try:
                    value = column.converter(cell, document)
                except Exception as exc:
                    raise ConversionError(
                        f"can't convert value '{cell}' at field '{column.key}' (inside '{section}' section): {exc}",
                        field_name=column.field_name,
                        value=cell,
                        section=section,
                    ) from exc
            field_slot.set(record, coerce_into(field_slot, value, section=section))
        result.append(record)
    return result


def _map_rows(block: Table, aliases: AliasTable) -> list[dict[str, str]]:
    keys = {header: canonical_header(aliases, header) for header in block.headers}
    seen: set[str] = set()
    for header in block.headers:
        if keys[header] in seen:
            logger.warning("header %r collapses onto column %r; later cells win", header, keys[header])
        seen.add(keys[header])
    return [
        {keys[header]: cell for header, cell in cells.items()}
        for cells in block.row_maps()
    ]
