from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List

from makehelp.richtext import RichText

# The uncategorized bucket. It is created on first use and, when a default
# category is configured, folded into that category after validation.
UNCATEGORIZED = ""


@dataclass(frozen=True)
class Variable:
    name: str
    description: str = ""


@dataclass
class Target:
    name: str
    aliases: List[str] = field(default_factory=list)
    documentation: List[str] = field(default_factory=list)
    summary: RichText = field(default_factory=RichText)
    variables: List[Variable] = field(default_factory=list)
    discovery_order: int = 0
    source_file: str = ""
    line_number: int = 0
    is_phony: bool = False


@dataclass
class Category:
    name: str
    targets: List[Target] = field(default_factory=list)
    discovery_order: int = 0


@dataclass
class FileDoc:
    source_file: str
    documentation: List[str] = field(default_factory=list)
    discovery_order: int = 0
    is_entry_point: bool = False


@dataclass
class HelpModel:
    file_docs: List[FileDoc] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    has_categories: bool = False
    default_category: str = ""

    def iter_targets(self) -> Iterator[Target]:
        for category in self.categories:
            yield from category.targets

    def get_target(self, name: str) -> Target | None:
        for target in self.iter_targets():
            if target.name == name:
                return target
        return None

    def target_count(self) -> int:
        return sum(len(category.targets) for category in self.categories)

    def category_names(self) -> List[str]:
        return [category.name for category in self.categories if category.name != UNCATEGORIZED]

    def has_category(self, name: str) -> bool:
        return any(category.name == name for category in self.categories)
