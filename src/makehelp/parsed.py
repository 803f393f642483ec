"""Records produced by the Makefile scanner and consumed by the core."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping


class DirectiveType(str, Enum):
    FILE = "file"
    CATEGORY = "category"
    DOC = "doc"
    VAR = "var"
    ALIAS = "alias"
    NOTALIAS = "notalias"


@dataclass(frozen=True)
class Directive:
    type: DirectiveType
    value: str = ""
    source_file: str = ""
    line_number: int = 0

    def source_line(self) -> str:
        """Render the directive the way it is written in a Makefile."""
        if self.type is DirectiveType.DOC:
            return f"## {self.value}".rstrip()
        return f"## !{self.type.value} {self.value}".rstrip()


@dataclass(frozen=True)
class ParsedFile:
    path: str
    directives: List[Directive] = field(default_factory=list)
    target_map: Mapping[str, int] = field(default_factory=dict)

    def sorted_targets(self) -> list[tuple[str, int]]:
        # Ties on the same line (several targets in one rule) fall back to name.
        return sorted(self.target_map.items(), key=lambda item: (item[1], item[0]))


@dataclass(frozen=True)
class TargetLocation:
    file: str
    line: int


def target_locations(parsed_files: List[ParsedFile]) -> Dict[str, TargetLocation]:
    """Map every target to the file and line of its first definition."""
    locations: Dict[str, TargetLocation] = {}
    for parsed in parsed_files:
        for name, line in parsed.sorted_targets():
            if name not in locations:
                locations[name] = TargetLocation(file=parsed.path, line=line)
    return locations


def attributed_directives(parsed_files: List[ParsedFile]) -> Dict[str, List[Directive]]:
    """Directives that precede each target's first definition.

    A target owns the directives between the previous target line of the same
    file and its own line, which is the window the model builder uses when it
    attaches pending documentation to a target.
    """
    sites: Dict[str, List[Directive]] = {}
    for parsed in parsed_files:
        directives = sorted(parsed.directives, key=lambda directive: directive.line_number)
        previous_line = 0
        for name, line in parsed.sorted_targets():
            window = [
                directive
                for directive in directives
                if previous_line <= directive.line_number < line
                and directive.type not in (DirectiveType.FILE, DirectiveType.CATEGORY)
            ]
            previous_line = line
            if name not in sites:
                sites[name] = window
    return sites
