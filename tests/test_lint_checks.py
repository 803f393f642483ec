from __future__ import annotations

from makehelp.lint import (
    CheckContext,
    Fix,
    FixOperation,
    LintWarning,
    all_checks,
    build_check_context,
    format_warning,
    run_lint,
    select_checks,
)
from makehelp.lint import checks
from makehelp.model import BuilderConfig, HelpModel, ModelBuilder
from makehelp.parsed import DirectiveType

DOC = DirectiveType.DOC
VAR = DirectiveType.VAR
ALIAS = DirectiveType.ALIAS
NOTALIAS = DirectiveType.NOTALIAS


def _context(parsed_files, **facts) -> CheckContext:
    config = BuilderConfig(
        default_category=facts.pop("default_category", ""),
        include_all_phony=facts.pop("include_all_phony", False),
        phony_targets=facts.get("phony_targets", {}),
        dependencies=facts.get("dependencies", {}),
        has_recipe=facts.get("has_recipe", {}),
        not_alias_marks=facts.pop("not_alias_marks", {}),
    )
    builder = ModelBuilder(config)
    model = builder.build(parsed_files)
    return build_check_context(
        model,
        parsed_files,
        not_alias_targets=builder.not_alias_targets,
        **facts,
    )


def _messages(warnings: list[LintWarning]) -> list[str]:
    return [warning.message for warning in warnings]


def test_undocumented_phony_skips_documented_and_generated(make_parsed_file) -> None:
    parsed = make_parsed_file(
        "Makefile",
        [(1, DOC, "Build it.")],
        {"build": 2, "clean": 4, "help": 6, "help-build": 7},
    )
    ctx = _context(
        [parsed],
        phony_targets={name: True for name in ("build", "clean", "help", "help-build", "fmt")},
        has_recipe={name: True for name in ("build", "clean", "help", "help-build", "fmt")},
    )
    warnings = checks.check_undocumented_phony(ctx)
    assert _messages(warnings) == [
        "undocumented phony target 'clean'",
        "undocumented phony target 'fmt'",
    ]
    assert (warnings[0].file, warnings[0].line) == ("Makefile", 4)
    assert (warnings[1].file, warnings[1].line) == ("Makefile", 0)


def test_undocumented_phony_skips_implicit_aliases(make_parsed_file) -> None:
    parsed = make_parsed_file(
        "Makefile",
        [(1, DOC, "Run unit tests.")],
        {"test-unit": 2, "t": 4},
    )
    ctx = _context(
        [parsed],
        phony_targets={"test-unit": True, "t": True},
        dependencies={"t": ["test-unit"]},
        has_recipe={"test-unit": True},
    )
    assert checks.check_undocumented_phony(ctx) == []


def test_summary_punctuation_points_at_last_doc_line(make_parsed_file) -> None:
    parsed = make_parsed_file(
        "Makefile",
        [
            (1, DOC, "Build the project"),
            (2, DOC, "with all features"),
            (4, DOC, "Run tests!"),
        ],
        {"build": 3, "test": 5},
    )
    warnings = checks.check_summary_punctuation(_context([parsed]))
    assert len(warnings) == 1
    warning = warnings[0]
    assert warning.message == "summary for 'build' does not end with punctuation"
    assert warning.line == 2
    assert warning.context == "## with all features"
    assert warning.fixable is True


def test_summary_punctuation_fix() -> None:
    warning = LintWarning(
        file="Makefile",
        line=10,
        message="summary for 'build' does not end with punctuation",
        check_name=checks.SUMMARY_PUNCTUATION,
        context="## Build the project",
        fixable=True,
    )
    assert checks.fix_summary_punctuation(warning) == Fix(
        file="Makefile",
        line=10,
        operation=FixOperation.REPLACE,
        old_content="## Build the project",
        new_content="## Build the project.",
    )


def test_long_summary_boundary(make_parsed_file) -> None:
    exact = "a" * 79 + "."
    over = "b" * 80 + "."
    parsed = make_parsed_file(
        "Makefile",
        [(1, DOC, exact), (3, DOC, over)],
        {"exact": 2, "over": 4},
    )
    warnings = checks.check_long_summaries(_context([parsed]))
    assert _messages(warnings) == ["summary for 'over' is too long (81 characters, max 80)"]
    assert warnings[0].line == 4
    assert warnings[0].context == over


def test_empty_documentation_at_both_ends(make_parsed_file) -> None:
    parsed = make_parsed_file(
        "Makefile",
        [(1, DOC, ""), (2, DOC, "Build it."), (3, DOC, "")],
        {"build": 4},
    )
    warnings = checks.check_empty_documentation(_context([parsed]))
    assert [(warning.line, warning.message) for warning in warnings] == [
        (1, "target 'build' has empty documentation line at the beginning"),
        (3, "target 'build' has empty documentation line at the end"),
    ]
    assert all(warning.fixable and warning.context == "##" for warning in warnings)
    assert checks.fix_empty_documentation(warnings[0]) == Fix(
        file="Makefile", line=1, operation=FixOperation.DELETE, old_content="##"
    )


def test_single_blank_doc_line_reports_both_ends(make_parsed_file) -> None:
    parsed = make_parsed_file("Makefile", [(1, DOC, "")], {"build": 2})
    warnings = checks.check_empty_documentation(_context([parsed]))
    assert [warning.line for warning in warnings] == [1, 1]


def test_missing_var_descriptions(make_parsed_file) -> None:
    parsed = make_parsed_file(
        "Makefile",
        [(1, DOC, "Deploy."), (2, VAR, "ENV"), (3, VAR, "REGION - Cloud region")],
        {"deploy": 4},
    )
    warnings = checks.check_missing_var_descriptions(_context([parsed]))
    assert _messages(warnings) == ["variable 'ENV' in target 'deploy' is missing a description"]
    assert warnings[0].line == 2


def test_inconsistent_naming(make_parsed_file) -> None:
    parsed = make_parsed_file(
        "Makefile",
        [(1, DOC, "Ok."), (3, DOC, "Bad."), (5, DOC, "Also bad.")],
        {"build2-x": 2, "Build_All": 4, "-lead": 6},
    )
    warnings = checks.check_inconsistent_naming(_context([parsed]))
    assert _messages(warnings) == [
        "target 'Build_All' does not follow kebab-case naming convention",
        "target '-lead' does not follow kebab-case naming convention",
    ]


def test_orphan_aliases(make_parsed_file) -> None:
    parsed = make_parsed_file(
        "Makefile",
        [(1, DOC, "Deploy."), (2, ALIAS, "ship, d")],
        {"deploy": 3},
    )
    ctx = _context([parsed], phony_targets={"deploy": True, "ship": True})
    warnings = checks.check_orphan_aliases(ctx)
    assert _messages(warnings) == ["alias 'd' points to non-existent target (referenced by 'deploy')"]
    assert warnings[0].context == "!alias d"


def test_circular_dependencies_reports_cycle_once() -> None:
    ctx = CheckContext(
        help_model=HelpModel(),
        makefile_path="Makefile",
        phony_targets={"a": True, "b": True, "c": True},
        dependencies={"a": ["b"], "b": ["c"], "c": ["a"]},
        has_recipe={},
    )
    warnings = checks.check_circular_dependencies(ctx)
    assert len(warnings) == 1
    assert warnings[0].message == "circular dependency detected between targets: a, b, c"
    assert (warnings[0].file, warnings[0].line) == ("Makefile", 0)


def test_circular_dependencies_ignores_targets_with_recipes() -> None:
    ctx = CheckContext(
        help_model=HelpModel(),
        makefile_path="Makefile",
        phony_targets={"a": True, "b": True},
        dependencies={"a": ["b"], "b": ["a"]},
        has_recipe={"b": True},
    )
    assert checks.check_circular_dependencies(ctx) == []


def test_redundant_notalias_on_documented_target(make_parsed_file) -> None:
    parsed = make_parsed_file(
        "Makefile",
        [(1, DOC, "Build."), (2, NOTALIAS, "")],
        {"build": 3},
    )
    warnings = checks.check_redundant_directives(_context([parsed]))
    assert _messages(warnings) == [
        "!notalias on 'build' is redundant: documented targets are never implicit aliases"
    ]
    warning = warnings[0]
    assert (warning.line, warning.context, warning.fixable) == (2, "## !notalias", True)
    assert checks.fix_redundant_directives(warning) == Fix(
        file="Makefile", line=2, operation=FixOperation.DELETE, old_content="## !notalias"
    )


def test_needed_notalias_is_not_redundant(make_parsed_file) -> None:
    parsed = make_parsed_file(
        "Makefile",
        [(1, DOC, "Unit tests."), (3, NOTALIAS, "")],
        {"test-unit": 2, "test": 4},
    )
    ctx = _context(
        [parsed],
        include_all_phony=True,
        phony_targets={"test-unit": True, "test": True},
        dependencies={"test": ["test-unit"]},
        has_recipe={"test-unit": True},
    )
    assert checks.check_redundant_directives(ctx) == []


def test_configured_notalias_without_site_is_not_fixable(make_parsed_file) -> None:
    parsed = make_parsed_file("Makefile", [(1, DOC, "Build.")], {"build": 2, "gen": 4})
    ctx = _context(
        [parsed],
        phony_targets={"build": True, "gen": True},
        has_recipe={"gen": True},
        not_alias_marks={"gen": True},
    )
    warnings = checks.check_redundant_directives(ctx)
    assert _messages(warnings) == [
        "!notalias on 'gen' is redundant: targets with recipes are never implicit aliases"
    ]
    assert (warnings[0].line, warnings[0].fixable) == (4, False)


def test_self_alias_is_redundant(make_parsed_file) -> None:
    parsed = make_parsed_file(
        "Makefile",
        [(1, DOC, "Build."), (2, ALIAS, "build, b")],
        {"build": 3},
    )
    warnings = checks.check_redundant_directives(_context([parsed]))
    assert _messages(warnings) == ["target 'build' has itself as an alias"]
    assert warnings[0].context == "## !alias build, b"
    assert checks.fix_redundant_directives(warnings[0]) == Fix(
        file="Makefile",
        line=2,
        operation=FixOperation.REPLACE,
        old_content="## !alias build, b",
        new_content="## !alias b",
    )


def test_run_lint_in_registration_order(make_parsed_file) -> None:
    parsed = make_parsed_file(
        "Makefile",
        [(1, DOC, "Build it"), (3, VAR, "ENV")],
        {"Build_It": 2, "clean": 5},
    )
    ctx = _context(
        [parsed],
        phony_targets={"clean": True},
        has_recipe={"clean": True},
    )
    result = run_lint(ctx, all_checks())
    assert [warning.check_name for warning in result.warnings] == [
        checks.UNDOCUMENTED_PHONY,
        checks.SUMMARY_PUNCTUATION,
        checks.INCONSISTENT_NAMING,
    ]
    assert result.has_warnings is True
    assert result.fixable_count == 1

    enabled = select_checks(all_checks(), [checks.INCONSISTENT_NAMING])
    assert checks.INCONSISTENT_NAMING not in [check.name for check in enabled]
    assert len(run_lint(ctx, enabled).warnings) == 2


def test_format_warning() -> None:
    warning = LintWarning(
        file="Makefile",
        line=3,
        message="summary for 'x' does not end with punctuation",
        check_name=checks.SUMMARY_PUNCTUATION,
        context="## Build it",
    )
    assert format_warning(warning) == (
        "Makefile:3: warning: summary for 'x' does not end with punctuation\n  | ## Build it"
    )
    lineless = LintWarning(file="Makefile", line=0, message="m", check_name="c")
    assert format_warning(lineless) == "Makefile: warning: m"
