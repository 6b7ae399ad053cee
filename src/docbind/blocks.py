"""Block-level view of a markdown document.

The binder consumes a flat sequence of headings, code blocks and tables. This
module builds that sequence with markdown-it-py; only top-level blocks are
kept, so fences nested in lists or quotes are not part of the stream.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence, Union

from markdown_it import MarkdownIt
from markdown_it.token import Token


@dataclass(frozen=True)
class Heading:
    level: int
    text: str


@dataclass(frozen=True)
class CodeBlock:
    info: str
    literal: str


@dataclass(frozen=True)
class Table:
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = field(default_factory=tuple)

    def row_maps(self) -> list[dict[str, str]]:
        result: list[dict[str, str]] = []
        for row in self.rows:
            cells = {}
            for index, header in enumerate(self.headers):
                cells[header] = row[index] if index < len(row) else ""
            result.append(cells)
        return result


Block = Union[Heading, CodeBlock, Table]


def _parser() -> MarkdownIt:
    return MarkdownIt("commonmark").enable("table")


def plain_text(children: Iterable[Token] | None) -> str:
    """Literal text of an inline run: text and code spans, never image alt text."""
    parts: list[str] = []
    for child in children or ():
        if child.type == "image":
            continue
        if child.type in ("text", "code_inline"):
            parts.append(child.content)
    return "".join(parts)


def tokenize(source: str) -> list[Block]:
    tokens = _parser().parse(source)
    return list(_iter_blocks(tokens))


def _iter_blocks(tokens: Sequence[Token]) -> Iterator[Block]:
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token.level != 0:
            index += 1
            continue
        if token.type == "heading_open":
            inline = tokens[index + 1]
            yield Heading(level=int(token.tag[1:]), text=plain_text(inline.children).strip())
            index += 3
            continue
        if token.type == "fence":
            yield CodeBlock(info=token.info, literal=token.content)
        elif token.type == "code_block":
            yield CodeBlock(info="", literal=token.content)
        elif token.type == "table_open":
            table, index = _read_table(tokens, index)
            yield table
            continue
        index += 1


def _read_table(tokens: Sequence[Token], start: int) -> tuple[Table, int]:
    headers: list[str] = []
    rows: list[tuple[str, ...]] = []
    current: list[str] = []
    in_head = False
    index = start + 1
    while index < len(tokens):
        token = tokens[index]
        if token.type == "table_close":
            index += 1
            break
        if token.type == "thead_open":
            in_head = True
        elif token.type == "thead_close":
            in_head = False
        elif token.type == "tr_open":
            current = []
        elif token.type == "tr_close":
            if in_head:
                headers = current
            else:
                rows.append(tuple(current))
        elif token.type == "inline":
            current.append(plain_text(token.children).strip())
        index += 1
    width = len(headers)
    padded = tuple(row + ("",) * (width - len(row)) for row in rows)
    return Table(headers=tuple(headers), rows=padded), index
