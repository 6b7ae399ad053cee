from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from docbind.aliases import AliasTable
from docbind.fields import coerce_into, table_for

_OPTION_CLAUSE = re.compile(r"^(.*)\((.*)\)\s*$", re.DOTALL)


@dataclass
class OptionSlot:
    dest_field: str
    match_key: str
    sample_value: object = None

    def sample(self, value: object) -> OptionSlot:
        self.sample_value = value
        return self

    def accepts(self, aliases: AliasTable, key: str) -> bool:
        if key.casefold() == self.match_key.casefold():
            return True
        entry = aliases.entry(self.match_key)
        return entry is not None and entry.matches(key)


def split_option_clause(label: str) -> tuple[str, list[tuple[str, object]] | None]:
    """Split ``"Title (a=1, b)"`` into ``("Title", [("a", "1"), ("b", True)])``.

    Labels without a trailing parenthesized clause come back unchanged with
    ``None`` in place of the option list.
    """
    found = _OPTION_CLAUSE.match(label)
    if found is None:
        return label, None
    options: list[tuple[str, object]] = []
    for raw in found.group(2).split(","):
        token = raw.strip()
        if not token:
            continue
        if "=" in token:
            key, value = token.split("=", 1)
            options.append((key.strip(), value.strip()))
        else:
            options.append((token, True))
    return found.group(1).strip(), options


def apply_options(
    slots: Sequence[OptionSlot],
    aliases: AliasTable,
    label: str,
    target: object,
    *,
    section: str,
) -> str:
    clean, options = split_option_clause(label)
    if options is None:
        return label
    for key, value in options:
        for slot in slots:
            if slot.accepts(aliases, key):
                field_slot = table_for(target).require(
                    slot.dest_field, kind="heading option", section=section
                )
                field_slot.set(target, coerce_into(field_slot, value, section=section))
                break
    return clean
