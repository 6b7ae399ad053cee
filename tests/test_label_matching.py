from __future__ import annotations

import pytest

from docbind.aliases import AliasTable
from docbind.matching import canonical_header, match_label, resolve_column


def _aliases() -> AliasTable:
    table = AliasTable()
    table.alias("Sample", "Example").lang("ja", "例", "サンプル")
    return table


@pytest.mark.parametrize(
    ("pattern", "heading", "suffix", "matched"),
    [
        ("Sample", "Sample", "", True),
        ("Sample", "sample", "", True),
        ("Sample", "Sample: Suffix", "Suffix", True),
        ("Sample", "SAMPLE\t:  tabbed", "tabbed", True),
        ("Sample", "Sampler", "r", True),
        ("Sample", "Example", "", True),
        ("Sample", "example: from alias", "from alias", True),
        ("Sample", "サンプル: Suffix", "Suffix", True),
        ("Sample", "例", "", True),
        ("Sample", "Other heading", "Other heading", False),
        ("Unregistered", "Sample", "Sample", False),
        ("", "  Anything: ", "Anything", True),
    ],
)
def test_match_label(pattern: str, heading: str, suffix: str, matched: bool) -> None:
    assert match_label(_aliases(), pattern, heading) == (suffix, matched)


def test_match_label_prefers_pattern_over_aliases() -> None:
    table = AliasTable()
    table.alias("Query", "Query Name")
    assert match_label(table, "Query", "Query Name: users") == ("Name: users", True)


def test_alias_table_keeps_first_default_language_surface_as_canonical() -> None:
    table = AliasTable()
    table.alias("Description", "Desc")
    table.alias("description", "Detail").lang("ja", "説明")
    entry = table.entry("DESCRIPTION")
    assert entry is not None
    assert entry.canonical == "Description"
    assert [surface.label for surface in entry.surfaces] == ["Description", "Desc", "Detail", "説明"]


def test_alias_table_translate() -> None:
    table = AliasTable()
    table.alias("Level2").lang("ja", "レベル2")
    assert table.translate("Level2", "ja") == "レベル2"
    assert table.translate("level2", "ja") == "レベル2"
    assert table.translate("Level2", "fr") == "Level2"
    assert table.translate("Level2", "") == "Level2"
    assert table.translate("Unknown", "ja") == "Unknown"


def test_resolve_column_uses_aliases_then_literal_key() -> None:
    table = AliasTable()
    table.alias("Description", "Desc").lang("ja", "詳細")
    headers = ["Name", "詳細", "description"]
    assert resolve_column(table, "Description", headers) == 1
    assert resolve_column(table, "name", headers) == 0
    assert resolve_column(table, "Missing", headers) is None


def test_canonical_header_collapses_translations() -> None:
    table = AliasTable()
    table.alias("Description", "Desc").lang("ja", "説明")
    assert canonical_header(table, "説明") == "Description"
    assert canonical_header(table, "desc") == "Description"
    assert canonical_header(table, "Other") == "Other"


def test_alias_entries_in_registration_order() -> None:
    table = AliasTable(default_lang="ja")
    table.alias("説明").lang("en", "Description")
    table.alias("名前")
    assert [entry.canonical for entry in table.entries()] == ["説明", "名前"]
    assert table.translate("説明", "en") == "Description"
    assert table.default_lang == "ja"
