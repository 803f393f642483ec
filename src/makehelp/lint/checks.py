"""Documentation lint checks.

Each check is a plain function over a :class:`CheckContext`; the ones whose
findings can be repaired mechanically are paired with a fix generator in
:func:`all_checks`.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from makehelp.lint.graph import strongly_connected_components
from makehelp.lint.model import Check, CheckContext, Fix, FixOperation, LintWarning
from makehelp.model.builder import parse_alias_directive, parse_var_directive
from makehelp.model.types import Target
from makehelp.parsed import Directive, DirectiveType

UNDOCUMENTED_PHONY = "undocumented-phony"
SUMMARY_PUNCTUATION = "summary-punctuation"
LONG_SUMMARIES = "long-summaries"
EMPTY_DOCUMENTATION = "empty-documentation"
MISSING_VAR_DESCRIPTIONS = "missing-var-descriptions"
INCONSISTENT_NAMING = "inconsistent-naming"
ORPHAN_ALIASES = "orphan-aliases"
CIRCULAR_DEPENDENCIES = "circular-dependencies"
REDUNDANT_DIRECTIVES = "redundant-directives"

MAX_SUMMARY_LENGTH = 80
SENTENCE_TERMINATORS = ".!?"
EMPTY_DOC_LINE = "##"

_KEBAB_CASE_RE = re.compile(r"^[a-z][a-z0-9]*(-[a-z0-9]+)*$")
_ALIAS_PREFIX = "## !alias"
_NOTALIAS_PREFIX = "## !notalias"


def _sites(ctx: CheckContext, name: str, kind: DirectiveType) -> List[Directive]:
    return [directive for directive in ctx.directive_sites.get(name, ()) if directive.type is kind]


def _doc_line_numbers(ctx: CheckContext, target: Target) -> List[int]:
    lines = [directive.line_number for directive in _sites(ctx, target.name, DirectiveType.DOC)]
    if len(lines) == len(target.documentation):
        return lines
    # Without scanner positions, assume the block sits right above the rule.
    first = target.line_number - len(target.documentation)
    return [first + offset for offset in range(len(target.documentation))]


def _doc_source_line(value: str) -> str:
    return f"## {value}".rstrip()


def check_undocumented_phony(ctx: CheckContext) -> List[LintWarning]:
    warnings: List[LintWarning] = []
    for name in sorted(ctx.phony_targets):
        if not ctx.phony_targets[name]:
            continue
        if ctx.documented_targets.get(name) or ctx.aliases.get(name):
            continue
        if name in ctx.generated_help_targets:
            continue
        location = ctx.target_locations.get(name)
        warnings.append(
            LintWarning(
                file=location.file if location else ctx.makefile_path,
                line=location.line if location else 0,
                message=f"undocumented phony target '{name}'",
                check_name=UNDOCUMENTED_PHONY,
                target=name,
            )
        )
    return warnings


def check_summary_punctuation(ctx: CheckContext) -> List[LintWarning]:
    warnings: List[LintWarning] = []
    for target in ctx.help_model.iter_targets():
        summary = target.summary.plain_text().strip()
        if not summary or summary[-1] in SENTENCE_TERMINATORS:
            continue
        docs = target.documentation
        last = max(index for index, line in enumerate(docs) if line.strip())
        warnings.append(
            LintWarning(
                file=target.source_file,
                line=_doc_line_numbers(ctx, target)[last],
                message=f"summary for '{target.name}' does not end with punctuation",
                check_name=SUMMARY_PUNCTUATION,
                context=_doc_source_line(docs[last]),
                fixable=True,
                target=target.name,
            )
        )
    return warnings


def fix_summary_punctuation(warning: LintWarning) -> Optional[Fix]:
    if not warning.context:
        return None
    return Fix(
        file=warning.file,
        line=warning.line,
        operation=FixOperation.REPLACE,
        old_content=warning.context,
        new_content=warning.context + ".",
    )


def check_long_summaries(ctx: CheckContext) -> List[LintWarning]:
    warnings: List[LintWarning] = []
    for target in ctx.help_model.iter_targets():
        summary = target.summary.plain_text().strip()
        if len(summary) <= MAX_SUMMARY_LENGTH:
            continue
        warnings.append(
            LintWarning(
                file=target.source_file,
                line=target.line_number,
                message=(
                    f"summary for '{target.name}' is too long "
                    f"({len(summary)} characters, max {MAX_SUMMARY_LENGTH})"
                ),
                check_name=LONG_SUMMARIES,
                context=summary,
                target=target.name,
            )
        )
    return warnings


def check_empty_documentation(ctx: CheckContext) -> List[LintWarning]:
    warnings: List[LintWarning] = []
    for target in ctx.help_model.iter_targets():
        docs = target.documentation
        if not docs:
            continue
        lines = _doc_line_numbers(ctx, target)
        for index, position in ((0, "beginning"), (len(docs) - 1, "end")):
            if docs[index].strip():
                continue
            warnings.append(
                LintWarning(
                    file=target.source_file,
                    line=lines[index],
                    message=(
                        f"target '{target.name}' has empty documentation line "
                        f"at the {position}"
                    ),
                    check_name=EMPTY_DOCUMENTATION,
                    context=EMPTY_DOC_LINE,
                    fixable=True,
                    target=target.name,
                )
            )
    return warnings


def fix_empty_documentation(warning: LintWarning) -> Optional[Fix]:
    return Fix(
        file=warning.file,
        line=warning.line,
        operation=FixOperation.DELETE,
        old_content=EMPTY_DOC_LINE,
    )


def check_missing_var_descriptions(ctx: CheckContext) -> List[LintWarning]:
    warnings: List[LintWarning] = []
    for target in ctx.help_model.iter_targets():
        var_lines = {
            parse_var_directive(directive.value).name: directive.line_number
            for directive in reversed(_sites(ctx, target.name, DirectiveType.VAR))
        }
        for variable in target.variables:
            if variable.description.strip():
                continue
            warnings.append(
                LintWarning(
                    file=target.source_file,
                    line=var_lines.get(variable.name, target.line_number),
                    message=(
                        f"variable '{variable.name}' in target '{target.name}' "
                        "is missing a description"
                    ),
                    check_name=MISSING_VAR_DESCRIPTIONS,
                    target=target.name,
                )
            )
    return warnings


def check_inconsistent_naming(ctx: CheckContext) -> List[LintWarning]:
    warnings: List[LintWarning] = []
    for target in ctx.help_model.iter_targets():
        if _KEBAB_CASE_RE.match(target.name):
            continue
        warnings.append(
            LintWarning(
                file=target.source_file,
                line=target.line_number,
                message=f"target '{target.name}' does not follow kebab-case naming convention",
                check_name=INCONSISTENT_NAMING,
                context=target.name,
                target=target.name,
            )
        )
    return warnings


def check_orphan_aliases(ctx: CheckContext) -> List[LintWarning]:
    known = (
        set(ctx.documented_targets)
        | set(ctx.phony_targets)
        | set(ctx.has_recipe)
        | set(ctx.target_locations)
    )
    warnings: List[LintWarning] = []
    for target in ctx.help_model.iter_targets():
        for alias in target.aliases:
            if alias in known:
                continue
            warnings.append(
                LintWarning(
                    file=target.source_file,
                    line=target.line_number,
                    message=(
                        f"alias '{alias}' points to non-existent target "
                        f"(referenced by '{target.name}')"
                    ),
                    check_name=ORPHAN_ALIASES,
                    context=f"!alias {alias}",
                    target=target.name,
                )
            )
    warnings.sort(key=lambda warning: warning.message)
    return warnings


def check_circular_dependencies(ctx: CheckContext) -> List[LintWarning]:
    nodes = sorted(
        name
        for name, phony in ctx.phony_targets.items()
        if phony and not ctx.has_recipe.get(name, False)
    )
    graph = {name: list(ctx.dependencies.get(name, ())) for name in nodes}
    cycles = sorted(
        sorted(component)
        for component in strongly_connected_components(graph)
        if len(component) > 1
    )
    warnings: List[LintWarning] = []
    for cycle in cycles:
        location = ctx.target_locations.get(cycle[0])
        warnings.append(
            LintWarning(
                file=location.file if location else ctx.makefile_path,
                line=location.line if location else 0,
                message=f"circular dependency detected between targets: {', '.join(cycle)}",
                check_name=CIRCULAR_DEPENDENCIES,
                target=cycle[0],
            )
        )
    return warnings


def _redundant_not_alias_reason(ctx: CheckContext, name: str) -> Optional[str]:
    if ctx.documented_targets.get(name):
        return "documented targets are never implicit aliases"
    if ctx.has_recipe.get(name):
        return "targets with recipes are never implicit aliases"
    if not ctx.phony_targets.get(name):
        return "non-phony targets are never implicit aliases"
    dependencies: Sequence[str] = ctx.dependencies.get(name, ())
    if len(dependencies) != 1:
        return "only targets with exactly one dependency can be implicit aliases"
    if not ctx.phony_targets.get(dependencies[0]):
        return (
            f"its dependency '{dependencies[0]}' is not phony, "
            "so it can't be an implicit alias"
        )
    return None


def check_redundant_directives(ctx: CheckContext) -> List[LintWarning]:
    warnings: List[LintWarning] = []
    for name in sorted(ctx.not_alias_targets):
        if not ctx.not_alias_targets[name]:
            continue
        reason = _redundant_not_alias_reason(ctx, name)
        if reason is None:
            continue
        location = ctx.target_locations.get(name)
        file = location.file if location else ctx.makefile_path
        sites = _sites(ctx, name, DirectiveType.NOTALIAS)
        if sites:
            site = sites[-1]
            warnings.append(
                LintWarning(
                    file=site.source_file or file,
                    line=site.line_number,
                    message=f"!notalias on '{name}' is redundant: {reason}",
                    check_name=REDUNDANT_DIRECTIVES,
                    context=site.source_line(),
                    fixable=True,
                    target=name,
                )
            )
            continue
        warnings.append(
            LintWarning(
                file=file,
                line=location.line if location else 0,
                message=f"!notalias on '{name}' is redundant: {reason}",
                check_name=REDUNDANT_DIRECTIVES,
                target=name,
            )
        )

    for target in ctx.help_model.iter_targets():
        if target.name not in target.aliases:
            continue
        site = next(
            (
                directive
                for directive in _sites(ctx, target.name, DirectiveType.ALIAS)
                if target.name in parse_alias_directive(directive.value)
            ),
            None,
        )
        warnings.append(
            LintWarning(
                file=(site.source_file if site else "") or target.source_file,
                line=site.line_number if site else target.line_number,
                message=f"target '{target.name}' has itself as an alias",
                check_name=REDUNDANT_DIRECTIVES,
                context=site.source_line() if site else "",
                fixable=site is not None,
                target=target.name,
            )
        )
    return warnings


def fix_redundant_directives(warning: LintWarning) -> Optional[Fix]:
    context = warning.context
    if context.startswith(_NOTALIAS_PREFIX):
        return Fix(
            file=warning.file,
            line=warning.line,
            operation=FixOperation.DELETE,
            old_content=context,
        )
    if context.startswith(_ALIAS_PREFIX) and warning.target:
        remaining = [
            alias
            for alias in parse_alias_directive(context[len(_ALIAS_PREFIX) :])
            if alias != warning.target
        ]
        if not remaining:
            return Fix(
                file=warning.file,
                line=warning.line,
                operation=FixOperation.DELETE,
                old_content=context,
            )
        return Fix(
            file=warning.file,
            line=warning.line,
            operation=FixOperation.REPLACE,
            old_content=context,
            new_content=f"{_ALIAS_PREFIX} {', '.join(remaining)}",
        )
    return None


def all_checks() -> List[Check]:
    return [
        Check(UNDOCUMENTED_PHONY, check_undocumented_phony),
        Check(SUMMARY_PUNCTUATION, check_summary_punctuation, fix_summary_punctuation),
        Check(LONG_SUMMARIES, check_long_summaries),
        Check(EMPTY_DOCUMENTATION, check_empty_documentation, fix_empty_documentation),
        Check(MISSING_VAR_DESCRIPTIONS, check_missing_var_descriptions),
        Check(INCONSISTENT_NAMING, check_inconsistent_naming),
        Check(ORPHAN_ALIASES, check_orphan_aliases),
        Check(CIRCULAR_DEPENDENCIES, check_circular_dependencies),
        Check(REDUNDANT_DIRECTIVES, check_redundant_directives, fix_redundant_directives),
    ]
