from __future__ import annotations

from dataclasses import dataclass, field

from docbind import Binder


@dataclass
class Query:
    name: str = ""
    sql: str = ""


@dataclass
class QueryDoc:
    title: str = ""
    queries: list[Query] = field(default_factory=list)


def make_query_binder() -> Binder[QueryDoc]:
    binder = Binder(QueryDoc)
    binder.alias("Query").lang("ja", "クエリ")
    root = binder.root()
    root.label("title")
    queries = root.children("queries", "Query").label("name")
    queries.code_fence("sql", "sql").sample_code("select 1;")
    return binder


query_binder = make_query_binder()
