from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from pydantic import ValidationError

from makehelp.config import (
    build_defaults,
    builder_config_from_section,
    fix_defaults,
    fix_dry_run,
    lint_defaults,
    lint_disabled_checks,
    lint_generated_help_targets,
    merge_payload,
    ordering_config_from_section,
    ordering_defaults,
)
from makehelp.exceptions import (
    FixApplicationError,
    MixedCategorizationError,
    PayloadError,
    UnknownCategoryError,
)
from makehelp.lint import (
    FixResult,
    LintWarning,
    all_checks,
    build_check_context,
    collect_fixes,
    format_warning,
    run_lint,
    select_checks,
)
from makehelp.lint.fixer import Fixer, FixerConfig
from makehelp.model import HelpModel, ModelBuilder
from makehelp.ordering import apply_ordering
from makehelp.schema import (
    AnalysisPayloadDTO,
    FixResultDTO,
    HelpModelDTO,
    LintResponseDTO,
    WarningDTO,
)

app = typer.Typer(add_completion=False)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


def load_payload(path: Path) -> AnalysisPayloadDTO:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PayloadError(f"cannot read payload {path}: {exc}") from exc
    try:
        return AnalysisPayloadDTO.model_validate_json(raw)
    except ValidationError as exc:
        raise PayloadError(f"invalid payload {path}: {exc}") from exc


def _build(
    payload: AnalysisPayloadDTO,
    *,
    root: Path,
    config: Optional[Path],
    default_category: Optional[str],
) -> tuple[HelpModel, ModelBuilder]:
    section = merge_payload(
        {"default_category": default_category},
        build_defaults(root=root, config_path=config),
    )
    builder = ModelBuilder(
        builder_config_from_section(
            section,
            phony_targets=payload.phony_map(),
            dependencies=payload.dependencies,
            has_recipe=payload.recipe_map(),
            not_alias_marks=payload.not_alias_map(),
        )
    )
    return builder.build(payload.to_parsed_files()), builder


def _fail(message: str, code: int) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=code)


@app.command("build")
def build(
    payload_path: Path = typer.Argument(..., help="Scanner payload JSON."),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    default_category: Optional[str] = typer.Option(None, "--default-category"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Build the help model and print it as JSON."""
    _configure_logging(verbose)
    try:
        payload = load_payload(payload_path)
        model, _ = _build(payload, root=root, config=config, default_category=default_category)
        apply_ordering(
            model, ordering_config_from_section(ordering_defaults(root=root, config_path=config))
        )
    except (PayloadError, MixedCategorizationError, UnknownCategoryError) as exc:
        _fail(str(exc), 2)
    typer.echo(HelpModelDTO.from_model(model).model_dump_json(indent=2))


def _summary_line(warnings: List[LintWarning]) -> str:
    count = len(warnings)
    fixable = sum(1 for warning in warnings if warning.fixable)
    if fixable:
        return f"Found {count} warning(s) ({fixable} fixable)"
    if count == 1:
        return "Found 1 warning"
    return f"Found {count} warnings"


def _fix_line(result: FixResult, dry_run: bool) -> str:
    verb = "Would fix" if dry_run else "Fixed"
    return f"{verb} {result.total_fixed} issue(s) in {len(result.files_modified)} file(s)"


@app.command("lint")
def lint(
    payload_path: Path = typer.Argument(..., help="Scanner payload JSON."),
    fix: bool = typer.Option(False, "--fix", help="Apply automatic fixes."),
    dry_run: Optional[bool] = typer.Option(
        None, "--dry-run/--no-dry-run", help="Report fixes without writing files."
    ),
    as_json: bool = typer.Option(False, "--json"),
    fail_on_warnings: bool = typer.Option(True, "--fail-on-warnings/--no-fail-on-warnings"),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    default_category: Optional[str] = typer.Option(None, "--default-category"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Lint Makefile documentation and optionally fix what can be fixed."""
    _configure_logging(verbose)
    try:
        payload = load_payload(payload_path)
        model, builder = _build(
            payload, root=root, config=config, default_category=default_category
        )
    except (PayloadError, MixedCategorizationError) as exc:
        _fail(str(exc), 2)

    lint_section = lint_defaults(root=root, config_path=config)
    fix_section = merge_payload(
        {"dry_run": dry_run}, fix_defaults(root=root, config_path=config)
    )
    dry_run_enabled = fix_dry_run(fix_section)

    parsed_files = payload.to_parsed_files()
    ctx = build_check_context(
        model,
        parsed_files,
        makefile_path=payload.entry_makefile or "",
        phony_targets=payload.phony_map(),
        has_recipe=payload.recipe_map(),
        dependencies=payload.dependencies,
        not_alias_targets=builder.not_alias_targets,
        extra_generated_help_targets=lint_generated_help_targets(lint_section),
    )
    checks = select_checks(all_checks(), lint_disabled_checks(lint_section))
    result = run_lint(ctx, checks)

    fix_result: FixResult | None = None
    errors: List[str] = []
    if fix and result.fixable_count:
        fixes = collect_fixes(checks, result.warnings)
        try:
            fix_result = Fixer(FixerConfig(dry_run=dry_run_enabled)).apply_fixes(fixes)
        except FixApplicationError as exc:
            fix_result = exc.result
            errors = [str(error) for error in exc.errors]

    shown = list(result.warnings)
    if fix_result is not None and not dry_run_enabled and fix_result.total_fixed:
        shown = [warning for warning in shown if not warning.fixable]

    if as_json:
        response = LintResponseDTO(
            warnings=[WarningDTO.from_warning(warning) for warning in shown],
            fixable_count=sum(1 for warning in shown if warning.fixable),
            fix=(
                FixResultDTO.from_result(fix_result, dry_run=dry_run_enabled)
                if fix_result is not None
                else None
            ),
            errors=errors,
        )
        typer.echo(json.dumps(response.model_dump(), indent=2, sort_keys=True))
    else:
        for warning in shown:
            typer.echo(format_warning(warning))
        if shown:
            typer.echo(_summary_line(shown))
        if fix_result is not None:
            typer.echo(_fix_line(fix_result, dry_run_enabled))
        for error in errors:
            typer.echo(error, err=True)

    if errors:
        raise typer.Exit(code=2)
    if shown and fail_on_warnings:
        raise typer.Exit(code=1)
