"""Skeleton documents rendered from a layout tree.

This is the inverse of binding: every section is written out with sample or
placeholder labels so authors can start from a document the binder accepts.
"""

from __future__ import annotations

from typing import Sequence

from tabulate import tabulate

from docbind.aliases import AliasTable
from docbind.layout import SAME_TARGET, FenceSlot, LayoutNode, TableSlot

PLACEHOLDER_TITLE = "Title"
PLACEHOLDER_LABEL = "Lorem Ipsum"
PLACEHOLDER_CELL = "..."
MIN_SAMPLE_ROWS = 2


def generate_template(root: LayoutNode, aliases: AliasTable, *, lang: str = "") -> str:
    chunks: list[str] = []
    _render_node(root, aliases, lang, chunks)
    return "".join(chunks)


def _render_node(node: LayoutNode, aliases: AliasTable, lang: str, chunks: list[str]) -> None:
    def tr(text: str) -> str:
        return aliases.translate(text, lang)

    for index in range(2 if node.repeated else 1):
        chunks.append(f"{'#' * node.level} {heading_label(node, index, aliases, lang)}\n\n")
        if node.sample_contents:
            content = node.sample_contents[min(index, len(node.sample_contents) - 1)]
            chunks.append(f"{tr(content)}\n\n")
        for fence in node.fences:
            chunks.append(_render_fence(fence))
        if node.table_slot is not None and node.table_slot.columns:
            chunks.append(_render_table(node.table_slot, aliases, lang))
        for child in node.children_nodes:
            _render_node(child, aliases, lang, chunks)


def heading_label(node: LayoutNode, index: int, aliases: AliasTable, lang: str) -> str:
    def tr(text: str) -> str:
        return aliases.translate(text, lang)

    named = node.instance_field not in ("", SAME_TARGET)
    if node.pattern:
        if node.label_field:
            sample = node.samples[index] if index < len(node.samples) else PLACEHOLDER_LABEL
            result = f"{tr(node.pattern)}: [{tr(sample)}]"
        else:
            result = tr(node.pattern)
    elif node.samples:
        result = f"[{tr(node.samples[index])}]" if index < len(node.samples) else "[...]"
    elif named:
        result = f"[{tr(node.instance_field)}]" if node.label_field else tr(node.instance_field)
    else:
        result = f"[{tr(PLACEHOLDER_TITLE)}]"

    options = []
    for option in node.options:
        if option.sample_value is None:
            continue
        if option.sample_value is True:
            options.append(tr(option.match_key))
        else:
            options.append(f"{tr(option.match_key)}=[{_cell_text(option.sample_value)}]")
    if options:
        result += f" ({', '.join(options)})"
    return result


def _render_fence(fence: FenceSlot) -> str:
    language = fence.languages[0] if fence.languages else ""
    code = fence.sample_code_text + "\n" if fence.sample_code_text else ""
    return f"```{language}{fence.sample_info_text}\n{code}```\n\n"


def _render_table(slot: TableSlot, aliases: AliasTable, lang: str) -> str:
    headers = [aliases.translate(column.key, lang) for column in slot.columns]
    row_count = max([MIN_SAMPLE_ROWS, *(len(column.sample_values) for column in slot.columns)])
    rows = [
        [
            _cell_text(column.sample_values[row])
            if row < len(column.sample_values)
            else PLACEHOLDER_CELL
            for column in slot.columns
        ]
        for row in range(row_count)
    ]
    return render_markdown_table(headers, rows) + "\n"


def render_markdown_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """GitHub-style pipe table; wide characters are measured with wcwidth."""
    text = tabulate(rows, headers=headers, tablefmt="github", disable_numparse=True, stralign="left")
    return text + "\n"


def _cell_text(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
