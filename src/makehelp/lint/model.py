from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Mapping, Optional, Sequence

from makehelp.model.types import HelpModel
from makehelp.parsed import Directive, TargetLocation


class Severity(str, Enum):
    WARNING = "warning"


class FixOperation(str, Enum):
    REPLACE = "replace"
    DELETE = "delete"


@dataclass(frozen=True)
class LintWarning:
    file: str
    line: int
    message: str
    check_name: str
    severity: Severity = Severity.WARNING
    context: str = ""
    fixable: bool = False
    target: str = ""


@dataclass(frozen=True)
class Fix:
    file: str
    line: int
    operation: FixOperation
    old_content: str = ""
    new_content: str = ""


@dataclass(frozen=True)
class CheckContext:
    help_model: HelpModel
    makefile_path: str = ""
    phony_targets: Mapping[str, bool] = field(default_factory=dict)
    documented_targets: Mapping[str, bool] = field(default_factory=dict)
    aliases: Mapping[str, bool] = field(default_factory=dict)
    has_recipe: Mapping[str, bool] = field(default_factory=dict)
    dependencies: Mapping[str, Sequence[str]] = field(default_factory=dict)
    not_alias_targets: Mapping[str, bool] = field(default_factory=dict)
    target_locations: Mapping[str, TargetLocation] = field(default_factory=dict)
    generated_help_targets: FrozenSet[str] = frozenset()
    directive_sites: Mapping[str, List[Directive]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "generated_help_targets", frozenset(self.generated_help_targets)
        )


CheckFn = Callable[[CheckContext], List[LintWarning]]
FixFn = Callable[[LintWarning], Optional[Fix]]


@dataclass(frozen=True)
class Check:
    name: str
    check_fn: CheckFn
    fix_fn: Optional[FixFn] = None


@dataclass(frozen=True)
class LintResult:
    warnings: List[LintWarning] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def fixable_count(self) -> int:
        return sum(1 for warning in self.warnings if warning.fixable)


@dataclass
class FixResult:
    total_fixed: int = 0
    files_modified: Dict[str, int] = field(default_factory=dict)
