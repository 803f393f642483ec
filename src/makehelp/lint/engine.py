from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from makehelp.lint.model import Check, CheckContext, LintResult, LintWarning

logger = logging.getLogger(__name__)


def run_lint(ctx: CheckContext, checks: Sequence[Check]) -> LintResult:
    warnings: List[LintWarning] = []
    for check in checks:
        found = check.check_fn(ctx)
        logger.debug("check %s produced %d warning(s)", check.name, len(found))
        warnings.extend(found)
    return LintResult(warnings=warnings)


def select_checks(checks: Sequence[Check], disabled: Iterable[str] = ()) -> List[Check]:
    skip = set(disabled)
    return [check for check in checks if check.name not in skip]


def format_warning(warning: LintWarning) -> str:
    if warning.line > 0:
        head = f"{warning.file}:{warning.line}: {warning.severity.value}: {warning.message}"
    else:
        head = f"{warning.file}: {warning.severity.value}: {warning.message}"
    if warning.context:
        return f"{head}\n  | {warning.context}"
    return head
