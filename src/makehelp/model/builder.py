"""Assemble a :class:`HelpModel` from scanner output.

Directives and target definitions of each file are merged in line order:
documentation, ``!var``, ``!alias`` and ``!notalias`` directives accumulate
until the next target definition claims them, while ``!category`` changes
the category of every following target in that file.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence

from makehelp.model.types import (
    UNCATEGORIZED,
    Category,
    FileDoc,
    HelpModel,
    Target,
    Variable,
)
from makehelp.model.validator import apply_default_category, validate_categorization
from makehelp.parsed import Directive, DirectiveType, ParsedFile
from makehelp.summary import SummaryExtractor

logger = logging.getLogger(__name__)

CATEGORY_RESET = "_"

_NO_LINE = sys.maxsize


@dataclass(frozen=True)
class BuilderConfig:
    default_category: str = ""
    include_targets: frozenset[str] = frozenset()
    include_all_phony: bool = False
    phony_targets: Mapping[str, bool] = field(default_factory=dict)
    dependencies: Mapping[str, Sequence[str]] = field(default_factory=dict)
    has_recipe: Mapping[str, bool] = field(default_factory=dict)
    not_alias_marks: Mapping[str, bool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "include_targets", frozenset(self.include_targets))


def parse_var_directive(value: str) -> Variable:
    name, separator, description = value.partition(" - ")
    if not separator:
        return Variable(name=value.strip())
    return Variable(name=name.strip(), description=description.strip())


def parse_alias_directive(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class _Pending:
    docs: List[str] = field(default_factory=list)
    variables: List[Variable] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)
    not_alias: bool = False

    def is_empty(self) -> bool:
        return not (self.docs or self.variables or self.aliases or self.not_alias)


class ModelBuilder:
    def __init__(self, config: BuilderConfig | None = None) -> None:
        self.config = config or BuilderConfig()
        self._extractor = SummaryExtractor()
        self._not_alias: set[str] = set()

    @property
    def not_alias_targets(self) -> Dict[str, bool]:
        """Targets flagged with ``!notalias`` by the last build or the config."""
        return {name: True for name in sorted(self._not_alias)}

    def build(self, parsed_files: Sequence[ParsedFile]) -> HelpModel:
        self._not_alias = {name for name, flag in self.config.not_alias_marks.items() if flag}
        model = HelpModel(default_category=self.config.default_category)
        targets: Dict[str, Target] = {}
        target_category: Dict[str, str] = {}
        categories: Dict[str, Category] = {}
        file_docs: Dict[str, FileDoc] = {}

        for index, parsed in enumerate(parsed_files):
            self._process_file(
                parsed,
                is_entry_point=index == 0,
                model=model,
                targets=targets,
                target_category=target_category,
                categories=categories,
                file_docs=file_docs,
            )

        model.file_docs = sorted(file_docs.values(), key=lambda doc: doc.discovery_order)
        kept = [target for target in targets.values() if self._is_included(target)]
        kept = self._resolve_implicit_aliases(kept)
        for target in kept:
            target.summary = self._extractor.extract(target.documentation)
            target.is_phony = bool(self.config.phony_targets.get(target.name, False))

        for target in kept:
            name = target_category[target.name]
            category = categories.get(name)
            if category is None:
                category = Category(name=name, discovery_order=len(categories))
                categories[name] = category
            category.targets.append(target)
        model.categories = [
            category
            for category in sorted(categories.values(), key=lambda item: item.discovery_order)
            if category.targets
        ]

        validate_categorization(model, self.config.default_category)
        if model.has_categories and self.config.default_category:
            apply_default_category(model, self.config.default_category)
        return model

    def _process_file(
        self,
        parsed: ParsedFile,
        *,
        is_entry_point: bool,
        model: HelpModel,
        targets: Dict[str, Target],
        target_category: Dict[str, str],
        categories: Dict[str, Category],
        file_docs: Dict[str, FileDoc],
    ) -> None:
        directives: List[Directive] = sorted(
            parsed.directives, key=lambda directive: directive.line_number
        )
        target_lines = parsed.sorted_targets()
        pending = _Pending()
        current_category = UNCATEGORIZED
        directive_idx = 0
        target_idx = 0

        while directive_idx < len(directives) or target_idx < len(target_lines):
            next_directive_line = (
                directives[directive_idx].line_number
                if directive_idx < len(directives)
                else _NO_LINE
            )
            next_target_line = (
                target_lines[target_idx][1] if target_idx < len(target_lines) else _NO_LINE
            )

            if next_directive_line < next_target_line:
                directive = directives[directive_idx]
                directive_idx += 1
                if directive.type is DirectiveType.FILE:
                    if directive.value:
                        self._append_file_doc(parsed, directive.value, is_entry_point, file_docs)
                elif directive.type is DirectiveType.CATEGORY:
                    model.has_categories = True
                    if directive.value == CATEGORY_RESET:
                        current_category = UNCATEGORIZED
                        continue
                    current_category = directive.value
                    if current_category not in categories:
                        categories[current_category] = Category(
                            name=current_category,
                            discovery_order=len(categories),
                        )
                elif directive.type is DirectiveType.VAR:
                    pending.variables.append(parse_var_directive(directive.value))
                elif directive.type is DirectiveType.ALIAS:
                    pending.aliases.extend(parse_alias_directive(directive.value))
                elif directive.type is DirectiveType.NOTALIAS:
                    pending.not_alias = True
                else:
                    pending.docs.append(directive.value)
                continue

            name, line = target_lines[target_idx]
            target_idx += 1
            if name in targets:
                logger.debug(
                    "%s:%d: target %r already defined in %s; ignoring redefinition",
                    parsed.path,
                    line,
                    name,
                    targets[name].source_file,
                )
                pending = _Pending()
                continue
            targets[name] = Target(
                name=name,
                aliases=pending.aliases,
                documentation=pending.docs,
                variables=pending.variables,
                discovery_order=len(targets),
                source_file=parsed.path,
                line_number=line,
            )
            target_category[name] = current_category
            if pending.not_alias:
                self._not_alias.add(name)
            pending = _Pending()

        if not pending.is_empty():
            logger.debug("%s: discarding directives after the last target", parsed.path)

    @staticmethod
    def _append_file_doc(
        parsed: ParsedFile,
        value: str,
        is_entry_point: bool,
        file_docs: Dict[str, FileDoc],
    ) -> None:
        doc = file_docs.get(parsed.path)
        if doc is None:
            doc = FileDoc(
                source_file=parsed.path,
                discovery_order=len(file_docs),
                is_entry_point=is_entry_point,
            )
            file_docs[parsed.path] = doc
        elif doc.documentation:
            doc.documentation.append("")
        doc.documentation.extend(value.split("\n"))

    def _is_included(self, target: Target) -> bool:
        if target.documentation:
            return True
        if target.name in self.config.include_targets:
            return True
        return self.config.include_all_phony and bool(
            self.config.phony_targets.get(target.name, False)
        )

    def _implicit_alias_dependency(self, target: Target) -> str | None:
        config = self.config
        if not config.include_all_phony:
            return None
        if target.documentation or target.name in config.include_targets:
            return None
        if not config.phony_targets.get(target.name, False):
            return None
        if config.has_recipe.get(target.name, False):
            return None
        if target.name in self._not_alias:
            return None
        dependencies = list(config.dependencies.get(target.name, ()))
        if len(dependencies) != 1:
            return None
        dependency = dependencies[0]
        if dependency == target.name or not config.phony_targets.get(dependency, False):
            return None
        return dependency

    def _resolve_implicit_aliases(self, kept: List[Target]) -> List[Target]:
        by_name = {target.name: target for target in kept}
        candidates: Dict[str, str] = {}
        for target in kept:
            dependency = self._implicit_alias_dependency(target)
            if dependency is not None:
                candidates[target.name] = dependency

        promoted: Dict[str, str] = {}
        for name in candidates:
            seen = {name}
            current = candidates[name]
            while current in candidates and current not in seen:
                seen.add(current)
                current = candidates[current]
            if current in seen or current not in by_name:
                continue
            promoted[name] = current

        survivors = [target for target in kept if target.name not in promoted]
        claimed: set[str] = set()
        for target in survivors:
            unique: List[str] = []
            for alias in target.aliases:
                if alias in claimed:
                    logger.debug(
                        "alias %r of %r already belongs to another target", alias, target.name
                    )
                    continue
                claimed.add(alias)
                unique.append(alias)
            target.aliases = unique

        for target in kept:
            root_name = promoted.get(target.name)
            if root_name is None:
                continue
            root = by_name[root_name]
            logger.debug("treating %r as an implicit alias of %r", target.name, root_name)
            for alias in [target.name, *target.aliases]:
                if alias in claimed or alias == root_name:
                    continue
                claimed.add(alias)
                root.aliases.append(alias)
        return survivors


def build_model(
    parsed_files: Sequence[ParsedFile],
    config: BuilderConfig | None = None,
) -> HelpModel:
    return ModelBuilder(config).build(parsed_files)
