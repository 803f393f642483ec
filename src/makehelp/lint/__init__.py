from makehelp.lint.checks import MAX_SUMMARY_LENGTH, all_checks
from makehelp.lint.context import build_check_context, generated_help_targets
from makehelp.lint.engine import format_warning, run_lint, select_checks
from makehelp.lint.fixer import Fixer, FixerConfig, apply_fixes, collect_fixes
from makehelp.lint.model import (
    Check,
    CheckContext,
    Fix,
    FixOperation,
    FixResult,
    LintResult,
    LintWarning,
    Severity,
)

__all__ = [
    "MAX_SUMMARY_LENGTH",
    "Check",
    "CheckContext",
    "Fix",
    "FixOperation",
    "FixResult",
    "Fixer",
    "FixerConfig",
    "LintResult",
    "LintWarning",
    "Severity",
    "all_checks",
    "apply_fixes",
    "build_check_context",
    "collect_fixes",
    "format_warning",
    "generated_help_targets",
    "run_lint",
    "select_checks",
]
