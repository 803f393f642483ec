from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from makehelp.lint.model import CheckContext
from makehelp.model.types import HelpModel
from makehelp.parsed import ParsedFile, attributed_directives, target_locations

# Targets emitted by the help-target generator; they are never documented.
GENERATED_HELP_TARGETS = frozenset({"help", "update-help"})
GENERATED_HELP_PREFIX = "help-"


def generated_help_targets(model: HelpModel, extra: Iterable[str] = ()) -> frozenset[str]:
    names = set(GENERATED_HELP_TARGETS)
    names.update(extra)
    names.update(GENERATED_HELP_PREFIX + target.name for target in model.iter_targets())
    return frozenset(names)


def implicit_alias_names(
    documented: Mapping[str, bool],
    phony_targets: Mapping[str, bool],
    has_recipe: Mapping[str, bool],
    dependencies: Mapping[str, Sequence[str]],
    not_alias_targets: Mapping[str, bool],
) -> set[str]:
    """Undocumented phony targets that only forward to another phony target."""
    names: set[str] = set()
    for name in sorted(phony_targets):
        if not phony_targets[name] or documented.get(name):
            continue
        if has_recipe.get(name) or not_alias_targets.get(name):
            continue
        deps = list(dependencies.get(name, ()))
        if len(deps) == 1 and deps[0] != name and phony_targets.get(deps[0]):
            names.add(name)
    return names


def build_check_context(
    model: HelpModel,
    parsed_files: Sequence[ParsedFile],
    *,
    makefile_path: str = "",
    phony_targets: Mapping[str, bool] | None = None,
    has_recipe: Mapping[str, bool] | None = None,
    dependencies: Mapping[str, Sequence[str]] | None = None,
    not_alias_targets: Mapping[str, bool] | None = None,
    extra_generated_help_targets: Iterable[str] = (),
) -> CheckContext:
    files = list(parsed_files)
    if not makefile_path and files:
        makefile_path = files[0].path
    phony = dict(phony_targets or {})
    recipes = dict(has_recipe or {})
    deps = {name: list(items) for name, items in (dependencies or {}).items()}
    not_alias = dict(not_alias_targets or {})
    documented = {target.name: True for target in model.iter_targets() if target.documentation}
    aliases = {alias: True for target in model.iter_targets() for alias in target.aliases}
    for name in implicit_alias_names(documented, phony, recipes, deps, not_alias):
        aliases.setdefault(name, True)
    return CheckContext(
        help_model=model,
        makefile_path=makefile_path,
        phony_targets=phony,
        documented_targets=documented,
        aliases=aliases,
        has_recipe=recipes,
        dependencies=deps,
        not_alias_targets=not_alias,
        target_locations=target_locations(files),
        generated_help_targets=generated_help_targets(model, extra_generated_help_targets),
        directive_sites=attributed_directives(files),
    )
