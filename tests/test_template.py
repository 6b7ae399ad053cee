from __future__ import annotations

from dataclasses import dataclass, field

import pytest
from wcwidth import wcswidth

from docbind import Binder, Table, tokenize
from docbind.template import render_markdown_table
from tests.markdown_helpers import doc
from tests.sample_binders import make_query_binder


@dataclass
class Child:
    name: str = ""


@dataclass
class TemplateDoc:
    name: str = ""
    string_opt: str = ""
    bool_opt: bool = False
    level2: Child = field(default_factory=Child)


@dataclass
class Row:
    name: str = ""
    count: int = 0
    active: bool = False


@dataclass
class TableTemplateDoc:
    rows: list[Row] = field(default_factory=list)


@pytest.fixture
def template_binder() -> Binder[TemplateDoc]:
    binder = Binder(TemplateDoc)
    binder.root().label("name")
    return binder


def test_root_only(template_binder: Binder[TemplateDoc]) -> None:
    assert template_binder.generate_template() == "# [Title]\n\n"


def test_child_without_pattern_uses_field_name(template_binder: Binder[TemplateDoc]) -> None:
    template_binder.root().child("level2").label("name")
    assert template_binder.generate_template() == "# [Title]\n\n## [level2]\n\n"


def test_child_pattern_without_label_is_written_as_is(template_binder: Binder[TemplateDoc]) -> None:
    template_binder.root().child("level2", "Level 2")
    assert template_binder.generate_template() == "# [Title]\n\n## Level 2\n\n"


def test_samples_fill_labels(template_binder: Binder[TemplateDoc]) -> None:
    template_binder.root().sample("Doc Title")
    template_binder.root().child("level2", "Level2").label("name").sample("Child Title")
    assert template_binder.generate_template() == "# [Doc Title]\n\n## Level2: [Child Title]\n\n"


def test_pattern_with_label_but_no_sample_uses_placeholder(
    template_binder: Binder[TemplateDoc],
) -> None:
    template_binder.root().child("level2", "Level2").label("name")
    assert template_binder.generate_template() == "# [Title]\n\n## Level2: [Lorem Ipsum]\n\n"


def test_sample_content_is_written_below_heading(template_binder: Binder[TemplateDoc]) -> None:
    template_binder.root().sample_content("Describe the document here.")
    assert template_binder.generate_template() == "# [Title]\n\nDescribe the document here.\n\n"


def test_options_with_samples_render_in_clause(template_binder: Binder[TemplateDoc]) -> None:
    root = template_binder.root().sample("Doc Title")
    root.option("string_opt", "StringOpt").sample("Test")
    root.option("bool_opt", "BoolOpt").sample(True)
    root.option("name", "Unsampled")
    assert template_binder.generate_template() == "# [Doc Title] (StringOpt=[Test], BoolOpt)\n\n"


def test_translation(template_binder: Binder[TemplateDoc]) -> None:
    template_binder.alias("Doc Title").lang("ja", "ドキュメントタイトル")
    template_binder.alias("Level2").lang("ja", "レベル2")
    template_binder.alias("Child Title").lang("ja", "子タイトル")
    template_binder.root().sample("Doc Title")
    template_binder.root().child("level2", "Level2").label("name").sample("Child Title")

    assert template_binder.generate_template("ja") == (
        "# [ドキュメントタイトル]\n\n## レベル2: [子タイトル]\n\n"
    )
    assert template_binder.generate_template("fr") == "# [Doc Title]\n\n## Level2: [Child Title]\n\n"


def test_repeated_node_is_written_twice_with_code_fence() -> None:
    binder = make_query_binder()
    assert binder.generate_template() == doc(
        """
        # [Title]

        ## Query: [Lorem Ipsum]

        ```sql
        select 1;
        ```

        ## Query: [Lorem Ipsum]

        ```sql
        select 1;
        ```

        """
    )


def test_fence_sample_info() -> None:
    binder = make_query_binder()
    binder.root().children_nodes[0].fences[0].sample_code("select * from users;").sample_info(":test")
    template = binder.generate_template()
    assert "```sql:test\nselect * from users;\n```\n" in template


def test_table_with_samples_is_aligned() -> None:
    binder = Binder(TableTemplateDoc)
    table = binder.root().table("rows")
    table.field("name", "Name").samples("Alice", "Bob", "Charlotte")
    table.field("count", "Count").samples(1, 20)
    table.field("active", "Active").samples(True)
    assert binder.generate_template() == doc(
        """
        # [Title]

        | Name      | Count   | Active   |
        |-----------|---------|----------|
        | Alice     | 1       | true     |
        | Bob       | 20      | ...      |
        | Charlotte | ...     | ...      |

        """
    )


def test_table_without_samples_has_two_placeholder_rows() -> None:
    binder = Binder(TableTemplateDoc)
    binder.alias("Name").lang("ja", "名前")
    table = binder.root().table("rows")
    table.field("name", "Name")
    table.field("count", "Count")
    template = binder.generate_template("ja")
    assert template.startswith("# [Title]\n\n")
    assert template.endswith("|\n\n")

    lines = template.splitlines()[2:-1]
    assert len(lines) == 4
    assert len({wcswidth(line) for line in lines}) == 1
    assert lines[1].strip("|-") == ""
    (rendered,) = tokenize(template)[1:]
    assert rendered == Table(headers=("名前", "Count"), rows=(("...", "..."), ("...", "...")))


def test_render_markdown_table() -> None:
    assert render_markdown_table(["A", "Long"], [["x", "y"]]) == (
        "| A   | Long   |\n|-----|--------|\n| x   | y      |\n"
    )


def test_generated_template_parses_back() -> None:
    binder = make_query_binder()
    parsed = binder.parse_string(binder.generate_template())
    assert parsed.title == "[Title]"
    assert [query.name for query in parsed.queries] == ["[Lorem Ipsum]", "[Lorem Ipsum]"]
    assert [query.sql for query in parsed.queries] == ["select 1;", "select 1;"]


def test_translated_template_parses_back() -> None:
    binder = make_query_binder()
    parsed = binder.parse_string(binder.generate_template("ja"))
    assert [query.name for query in parsed.queries] == ["[Lorem Ipsum]", "[Lorem Ipsum]"]
