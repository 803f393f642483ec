from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import Mapping, Sequence, TypeAlias
import tomllib

from makehelp.model.builder import BuilderConfig
from makehelp.ordering import OrderingConfig

DEFAULT_CONFIG_NAME = "makehelp.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def _section(name: str, root: Path | None, config_path: Path | None) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get(name, {})
    return section if isinstance(section, dict) else {}


def build_defaults(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    return _section("build", root, config_path)


def lint_defaults(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    return _section("lint", root, config_path)


def fix_defaults(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    return _section("fix", root, config_path)


def ordering_defaults(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    return _section("ordering", root, config_path)


def _normalize_name_list(value: TomlValue) -> list[str]:
    # Accepts a list of names or one comma separated string.
    if isinstance(value, str):
        raw = [value]
    elif isinstance(value, (list, tuple, set)):
        raw = [item for item in value if isinstance(item, str)]
    else:
        return []
    return [part.strip() for item in raw for part in item.split(",") if part.strip()]


def _as_bool(value: TomlValue) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return False


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged


def builder_config_from_section(
    section: TomlTable,
    *,
    phony_targets: Mapping[str, bool] | None = None,
    dependencies: Mapping[str, Sequence[str]] | None = None,
    has_recipe: Mapping[str, bool] | None = None,
    not_alias_marks: Mapping[str, bool] | None = None,
) -> BuilderConfig:
    default_category = section.get("default_category")
    return BuilderConfig(
        default_category=default_category if isinstance(default_category, str) else "",
        include_targets=frozenset(_normalize_name_list(section.get("include_targets"))),
        include_all_phony=_as_bool(section.get("include_all_phony")),
        phony_targets=dict(phony_targets or {}),
        dependencies={name: list(deps) for name, deps in (dependencies or {}).items()},
        has_recipe=dict(has_recipe or {}),
        not_alias_marks=dict(not_alias_marks or {}),
    )


def ordering_config_from_section(section: TomlTable) -> OrderingConfig:
    return OrderingConfig(
        keep_order_categories=_as_bool(section.get("keep_order_categories")),
        keep_order_targets=_as_bool(section.get("keep_order_targets")),
        category_order=tuple(_normalize_name_list(section.get("category_order"))),
    )


def lint_disabled_checks(section: TomlTable) -> list[str]:
    return _normalize_name_list(section.get("disable"))


def lint_generated_help_targets(section: TomlTable) -> list[str]:
    return _normalize_name_list(section.get("generated_help_targets"))


def fix_dry_run(section: TomlTable) -> bool:
    return _as_bool(section.get("dry_run"))
