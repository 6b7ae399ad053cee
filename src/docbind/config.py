from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

DEFAULT_CONFIG_NAME = "docbind.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    """Read `docbind.toml` from `root` (default: cwd) or `config_path`; unusable files give `{}`."""
    if config_path is None:
        config_path = (root if root is not None else Path.cwd()) / DEFAULT_CONFIG_NAME
    try:
        return tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return {}


def _section(name: str, root: Path | None, config_path: Path | None) -> TomlTable:
    section = load_config(root=root, config_path=config_path).get(name, {})
    return section if isinstance(section, dict) else {}


def bind_defaults(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    return _section("bind", root, config_path)


def template_defaults(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    return _section("template", root, config_path)


def as_positive_int(value: TomlValue) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        parsed = int(value.strip())
        return parsed if parsed > 0 else None
    return None


def as_text(value: TomlValue, default: str = "") -> str:
    if isinstance(value, str):
        return value.strip()
    return default


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged
