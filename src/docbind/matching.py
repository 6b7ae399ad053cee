from __future__ import annotations

from typing import Sequence

from docbind.aliases import AliasTable

_SEPARATORS = " :\t"


def match_label(aliases: AliasTable, pattern: str, text: str) -> tuple[str, bool]:
    """Match heading ``text`` against ``pattern`` or one of its aliases.

    Returns ``(suffix, True)`` where ``suffix`` is the text left after the
    consumed prefix, or ``(text, False)``. An empty pattern matches anything
    and consumes nothing.
    """
    if not pattern:
        return text.strip(_SEPARATORS), True
    if text[: len(pattern)].casefold() == pattern.casefold():
        return text[len(pattern) :].lstrip(_SEPARATORS), True
    for surface in aliases.surfaces(pattern):
        size = len(surface.label)
        if size and text[:size].casefold() == surface.label.casefold():
            return text[size:].lstrip(_SEPARATORS), True
    return text, False


def resolve_column(aliases: AliasTable, key: str, headers: Sequence[str]) -> int | None:
    """Index of the header that supplies column ``key``, or None."""
    entry = aliases.entry(key)
    if entry is not None:
        for index, header in enumerate(headers):
            if entry.matches(header):
                return index
    folded = key.casefold()
    for index, header in enumerate(headers):
        if header.casefold() == folded:
            return index
    return None


def canonical_header(aliases: AliasTable, header: str) -> str:
    entry = aliases.find_entry_for(header)
    return entry.canonical if entry is not None else header
