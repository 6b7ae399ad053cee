from __future__ import annotations

import dataclasses
import importlib
import json
import logging
from pathlib import Path
from typing import Callable, List, Mapping, Optional

import typer

from docbind.binder import Binder
from docbind.blocks import tokenize
from docbind.config import (
    as_positive_int,
    as_text,
    bind_defaults,
    merge_payload,
    template_defaults,
)
from docbind.exceptions import BindError

app = typer.Typer(add_completion=False)

_STDOUT_ALIAS = "-"

BinderLoader = Callable[[str], Binder]


def load_binder(target: str) -> Binder:
    """Resolve ``module:attribute`` to a configured binder (or a factory returning one)."""
    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise typer.BadParameter(f"expected 'module:attribute', got {target!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise typer.BadParameter(f"cannot import {module_name!r}: {exc}") from exc
    candidate = module
    for part in attribute.split("."):
        if not hasattr(candidate, part):
            raise typer.BadParameter(f"{module_name!r} has no attribute {attribute!r}")
        candidate = getattr(candidate, part)
    if not isinstance(candidate, Binder) and callable(candidate):
        candidate = candidate()
    if not isinstance(candidate, Binder):
        raise typer.BadParameter(f"{target!r} is not a Binder")
    return candidate


def _context_load_binder(ctx: typer.Context) -> BinderLoader:
    obj = ctx.obj
    if isinstance(obj, Mapping):
        candidate = obj.get("load_binder")
        if callable(candidate):
            return candidate
    return load_binder


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _write_output(output: str, text: str) -> None:
    if output == _STDOUT_ALIAS:
        typer.echo(text, nl=False)
        return
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _to_jsonable(value: object) -> object:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


@app.command()
def parse(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Binder to use, as module:attribute."),
    paths: List[Path] = typer.Argument(..., help="Markdown files to bind."),
    output: str = typer.Option(_STDOUT_ALIAS, "--output", "-o"),
    config: Optional[Path] = typer.Option(None, "--config"),
    max_workers: Optional[int] = typer.Option(None, "--max-workers", min=1),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Bind markdown files and print the records as JSON keyed by path."""
    _configure_logging(verbose)
    binder = _context_load_binder(ctx)(target)
    settings = merge_payload({"max_workers": max_workers}, bind_defaults(config_path=config))
    workers = as_positive_int(settings.get("max_workers"))
    if workers is not None:
        binder.max_workers = workers
    try:
        records = binder.parse_paths(paths)
    except BindError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1)
    except OSError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2)
    payload = {key: _to_jsonable(record) for key, record in records.items()}
    _write_output(output, json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False, default=str) + "\n")


@app.command()
def template(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Binder to use, as module:attribute."),
    lang: Optional[str] = typer.Option(None, "--lang", help="Translate labels into this language."),
    output: str = typer.Option(_STDOUT_ALIAS, "--output", "-o"),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Print a skeleton document for a binder."""
    binder = _context_load_binder(ctx)(target)
    settings = merge_payload({"lang": lang}, template_defaults(config_path=config))
    _write_output(output, binder.generate_template(as_text(settings.get("lang"))))


@app.command()
def blocks(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
) -> None:
    """Dump the heading, code block and table stream of a markdown file."""
    stream = tokenize(path.read_text(encoding="utf-8"))
    payload = [
        {"kind": type(block).__name__, **dataclasses.asdict(block)}
        for block in stream
    ]
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def main() -> None:
    app()
