from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from makehelp.parsed import Directive, DirectiveType, ParsedFile


def _directive(path: str, line: int, kind: DirectiveType, value: str = "") -> Directive:
    return Directive(type=kind, value=value, source_file=path, line_number=line)


@pytest.fixture
def make_parsed_file():
    """Build a ParsedFile from ``(line, kind, value)`` triples and a target map."""

    def _make(
        path: str,
        directives: list[tuple[int, DirectiveType, str]] | None = None,
        targets: dict[str, int] | None = None,
    ) -> ParsedFile:
        return ParsedFile(
            path=path,
            directives=[
                _directive(path, line, kind, value) for line, kind, value in directives or []
            ],
            target_map=dict(targets or {}),
        )

    return _make
