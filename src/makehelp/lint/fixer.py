"""Apply lint fixes to Makefiles.

Fixes are single-line edits. Each one carries the content it expects to
find, so a file edited after the lint run gets the stale fixes skipped
instead of corrupted. Files are rewritten through a temporary sibling and an
atomic rename.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Sequence, TextIO

from makehelp.exceptions import FixApplicationError, FixFileError
from makehelp.lint.model import Check, Fix, FixOperation, FixResult, LintWarning

logger = logging.getLogger(__name__)


def collect_fixes(checks: Sequence[Check], warnings: Sequence[LintWarning]) -> List[Fix]:
    by_name = {check.name: check for check in checks}
    fixes: List[Fix] = []
    for warning in warnings:
        if not warning.fixable:
            continue
        check = by_name.get(warning.check_name)
        if check is None or check.fix_fn is None:
            continue
        fix = check.fix_fn(warning)
        if fix is not None:
            fixes.append(fix)
    return fixes


@dataclass(frozen=True)
class FixerConfig:
    dry_run: bool = False


def read_lines(path: Path) -> List[str]:
    # Only "\n" ends a line; a lone "\r" stays part of it.
    text = path.read_bytes().decode("utf-8")
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


@contextmanager
def _atomic_output(path: Path) -> Iterator[TextIO]:
    mode = stat.S_IMODE(path.stat().st_mode)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".fix-", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            yield handle
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def write_lines_atomic(path: Path, lines: Sequence[str]) -> None:
    with _atomic_output(path) as handle:
        for line in lines:
            handle.write(line)
            handle.write("\n")


def _fix_mismatch(fix: Fix, lines: Sequence[str], deleted: set[int]) -> str | None:
    if fix.line < 1 or fix.line > len(lines):
        return f"line {fix.line} out of range (file has {len(lines)} lines)"
    index = fix.line - 1
    if index in deleted:
        return f"line {fix.line} is already deleted"
    expected = fix.old_content.strip()
    actual = lines[index].strip()
    if expected and actual != expected:
        return f"line {fix.line} content mismatch: expected {expected!r}, got {actual!r}"
    return None


class Fixer:
    def __init__(self, config: FixerConfig | None = None) -> None:
        self.config = config or FixerConfig()

    def apply_fixes(self, fixes: Sequence[Fix]) -> FixResult:
        grouped: Dict[str, List[Fix]] = {}
        for fix in fixes:
            grouped.setdefault(fix.file, []).append(fix)

        result = FixResult()
        errors: List[FixFileError] = []
        for file in sorted(grouped):
            try:
                count = self._apply_file_fixes(file, grouped[file])
            except (OSError, UnicodeDecodeError) as exc:
                errors.append(FixFileError(file, exc))
                continue
            if count:
                result.files_modified[file] = count
            result.total_fixed += count
        if errors:
            raise FixApplicationError(result, errors)
        return result

    def _apply_file_fixes(self, file: str, fixes: Sequence[Fix]) -> int:
        path = Path(os.path.abspath(file))
        lines = read_lines(path)
        deleted: set[int] = set()
        applied = 0
        # Highest line first; sorted() is stable for fixes on the same line.
        for fix in sorted(fixes, key=lambda item: item.line, reverse=True):
            problem = _fix_mismatch(fix, lines, deleted)
            if problem is not None:
                logger.debug("%s: skipping fix: %s", path, problem)
                continue
            if fix.operation is FixOperation.REPLACE:
                lines[fix.line - 1] = fix.new_content
            else:
                deleted.add(fix.line - 1)
            applied += 1

        if applied == 0:
            return 0
        if self.config.dry_run:
            return applied
        kept = [line for index, line in enumerate(lines) if index not in deleted]
        write_lines_atomic(path, kept)
        logger.debug("%s: applied %d fix(es)", path, applied)
        return applied


def apply_fixes(fixes: Sequence[Fix], *, dry_run: bool = False) -> FixResult:
    return Fixer(FixerConfig(dry_run=dry_run)).apply_fixes(fixes)
