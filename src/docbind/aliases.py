from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_LANG = "en"


@dataclass(frozen=True)
class Surface:
    lang: str
    label: str


@dataclass
class AliasEntry:
    key: str
    surfaces: list[Surface] = field(default_factory=list)

    @property
    def canonical(self) -> str:
        """First surface registered for the default language."""
        return self.surfaces[0].label if self.surfaces else self.key

    def matches(self, text: str) -> bool:
        folded = text.casefold()
        return any(surface.label.casefold() == folded for surface in self.surfaces)

    def for_lang(self, lang: str) -> str | None:
        for surface in self.surfaces:
            if surface.lang == lang:
                return surface.label
        return None


class AliasTable:
    """Canonical label keys mapped to alternate and translated surface strings.

    Built once while the schema is configured and only read afterwards, so a
    single table can serve any number of concurrent parses.
    """

    def __init__(self, default_lang: str = DEFAULT_LANG) -> None:
        self.default_lang = default_lang
        self._entries: dict[str, AliasEntry] = {}

    def alias(self, primary_label: str, *aliases: str) -> AliasBuilder:
        key = primary_label.casefold()
        entry = self._entries.get(key)
        if entry is None:
            entry = AliasEntry(key=key)
            entry.surfaces.append(Surface(self.default_lang, primary_label))
            self._entries[key] = entry
        for label in aliases:
            entry.surfaces.append(Surface(self.default_lang, label))
        return AliasBuilder(self, entry)

    def entry(self, label: str) -> AliasEntry | None:
        return self._entries.get(label.casefold())

    def surfaces(self, label: str) -> list[Surface]:
        entry = self._entries.get(label.casefold())
        return list(entry.surfaces) if entry is not None else []

    def entries(self) -> list[AliasEntry]:
        return list(self._entries.values())

    def find_entry_for(self, text: str) -> AliasEntry | None:
        """Entry that lists ``text`` among its surfaces, in registration order."""
        for entry in self._entries.values():
            if entry.matches(text):
                return entry
        return None

    def translate(self, text: str, lang: str) -> str:
        if not lang:
            return text
        entry = self._entries.get(text.casefold()) or self.find_entry_for(text)
        if entry is None:
            return text
        translated = entry.for_lang(lang)
        return translated if translated is not None else text


@dataclass(frozen=True)
class AliasBuilder:
    table: AliasTable
    entry: AliasEntry

    def lang(self, lang: str, *aliases: str) -> AliasBuilder:
        for label in aliases:
            self.entry.surfaces.append(Surface(lang, label))
        return self
