"""Single-pass binding of a block stream onto a record."""

from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Generic, Iterable, Sequence, TextIO, TypeVar

from docbind.aliases import DEFAULT_LANG, AliasBuilder, AliasTable
from docbind.blocks import Block, CodeBlock, Heading, Table, tokenize
from docbind.exceptions import SchemaMismatch
from docbind.fence import bind_fence
from docbind.fields import FieldTable, assign_value, new_record, table_for
from docbind.layout import MAX_DEPTH, SAME_TARGET, LayoutNode
from docbind.matching import match_label
from docbind.options import apply_options
from docbind.table import bind_table
from docbind.template import generate_template

logger = logging.getLogger(__name__)

T = TypeVar("T")
PostProcess = Callable[[T], None]


@dataclass(frozen=True)
class _Frame:
    node: LayoutNode
    target: object
    label: str
    heading: str

    @property
    def section(self) -> str:
        return self.label or self.heading


class _Walk:
    """Per-call parse stack.

    ``frames[d]`` is valid for every ``d <= depth``; deeper entries are stale
    and only ever overwritten. While ``skipping`` is set, blocks belong to a
    heading that matched nothing and are dropped.
    """

    def __init__(self, root: LayoutNode, aliases: AliasTable, document: object) -> None:
        self.root = root
        self.aliases = aliases
        self.document = document
        self.frames: list[_Frame | None] = [None] * (MAX_DEPTH + 1)
        self.frames[1] = _Frame(root, document, "", "")
        self.depth = 1
        self.skipping = False

    def run(self, blocks: Iterable[Block]) -> None:
        for block in blocks:
            if isinstance(block, Heading):
                self.heading(block)
            elif isinstance(block, CodeBlock):
                frame = self._active("fence")
                if frame is not None:
                    bind_fence(frame.node, frame.target, block, section=frame.section)
            elif isinstance(block, Table):
                frame = self._active("table")
                if frame is not None:
                    bind_table(
                        frame.node,
                        frame.target,
                        block,
                        aliases=self.aliases,
                        document=self.document,
                        section=frame.section,
                    )

    def heading(self, heading: Heading) -> None:
        level = heading.level
        text = heading.text
        if level == 1:
            node = self.root
            target = self.document
            suffix, label_matched = match_label(self.aliases, node.pattern, text)
        else:
            parent = self.frames[level - 1] if level - 1 <= self.depth else None
            found = self._match_child(parent, text) if parent is not None else None
            if found is None:
                logger.debug("skipping unmatched heading %r at level %d", text, level)
                self.depth = min(self.depth, level - 1)
                self.skipping = True
                return
            node, target, suffix = found
            label_matched = True
        label = apply_options(node.options, self.aliases, suffix, target, section=text)
        self.frames[level] = _Frame(node, target, label, text)
        self.depth = level
        self.skipping = False
        if label_matched and node.label_field:
            assign_value(target, node.label_field, label, kind="heading title", section=text)

    def _match_child(self, parent: _Frame, text: str) -> tuple[LayoutNode, object, str] | None:
        for child in parent.node.children_nodes:
            suffix, matched = match_label(self.aliases, child.pattern, text)
            if matched:
                return child, self._child_target(parent.target, child, text), suffix
        return None

    def _child_target(self, parent_target: object, child: LayoutNode, section: str) -> object:
        if child.instance_field == SAME_TARGET:
            return parent_target
        table = table_for(parent_target)
        slot = table.require(child.instance_field, kind="section", section=section)
        if child.repeated:
            if not slot.is_list:
                raise SchemaMismatch.not_a_list(table.type_name, slot.name, section=section)
            if not slot.element_is_record:
                raise SchemaMismatch(
                    f"field '{slot.name}' of {table.type_name} does not hold records (inside '{section}' section)",
                    type_name=table.type_name,
                    field_name=slot.name,
                    section=section,
                )
            items = slot.get(parent_target)
            if items is None:
                items = []
                slot.set(parent_target, items)
            items.append(new_record(slot.element_type))
            return items[-1]
        current = slot.get(parent_target)
        if current is None and slot.is_record:
            current = new_record(slot.value_type)
            slot.set(parent_target, current)
        if not slot.is_record or not isinstance(current, slot.value_type):
            raise SchemaMismatch(
                f"field '{slot.name}' of {table.type_name} is not a record (inside '{section}' section)",
                type_name=table.type_name,
                field_name=slot.name,
                section=section,
            )
        return current

    def _active(self, kind: str) -> _Frame | None:
        if self.skipping:
            logger.debug("dropping %s under an unmatched heading", kind)
            return None
        return self.frames[self.depth]


class Binder(Generic[T]):
    """Declarative binding of markdown documents onto ``record_type`` instances.

    Configure aliases and the layout tree once, then call any of the
    ``parse_*`` methods as often as needed, from as many threads as needed.
    """

    def __init__(
        self,
        record_type: type[T],
        *,
        aliases: AliasTable | None = None,
        default_lang: str = DEFAULT_LANG,
        post_process: PostProcess[T] | None = None,
        max_workers: int | None = None,
    ) -> None:
        FieldTable.for_type(record_type)
        self.record_type = record_type
        self.aliases = aliases if aliases is not None else AliasTable(default_lang)
        self.post_process = post_process
        self.max_workers = max_workers
        self._root = LayoutNode(level=1, record_type=record_type)

    @property
    def default_lang(self) -> str:
        return self.aliases.default_lang

    def alias(self, primary_label: str, *aliases: str) -> AliasBuilder:
        return self.aliases.alias(primary_label, *aliases)

    def root(self, pattern: str = "") -> LayoutNode:
        if pattern:
            self._root.pattern = pattern
        return self._root

    def parse_blocks(self, blocks: Sequence[Block]) -> T:
        document = new_record(self.record_type)
        _Walk(self._root, self.aliases, document).run(blocks)
        hook = getattr(document, "post_process", None)
        if callable(hook):
            hook()
        if self.post_process is not None:
            self.post_process(document)
        return document

    def parse_string(self, source: str) -> T:
        return self.parse_blocks(tokenize(source))

    def parse(self, stream: TextIO) -> T:
        return self.parse_string(stream.read())

    def parse_file(self, path: Path | str) -> T:
        return self.parse_string(Path(path).read_text(encoding="utf-8"))

    def parse_paths(self, paths: Iterable[Path | str]) -> dict[str, T]:
        ordered = [Path(path) for path in paths]
        results: dict[str, T] = {}
        if not ordered:
            return results
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(self.parse_file, path) for path in ordered]
            for path, future in zip(ordered, futures):
                results[path.as_posix()] = future.result()
        return results

    def parse_glob(self, *patterns: str, root: Path | str | None = None) -> dict[str, T]:
        base = Path(root) if root is not None else Path(".")
        matched: dict[str, Path] = {}
        for pattern in patterns:
            for path in sorted(base.glob(pattern)):
                if path.is_file():
                    key = path.relative_to(base).as_posix() if root is not None else path.as_posix()
                    matched.setdefault(key, path)
        parsed = self.parse_paths(matched.values())
        return {key: parsed[path.as_posix()] for key, path in matched.items()}

    def generate_template(self, lang: str = "") -> str:
        return generate_template(self._root, self.aliases, lang=lang)
