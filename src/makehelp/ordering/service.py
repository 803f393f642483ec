from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Tuple

from makehelp.exceptions import UnknownCategoryError
from makehelp.model.types import Category, HelpModel, Target


@dataclass(frozen=True)
class OrderingConfig:
    keep_order_categories: bool = False
    keep_order_targets: bool = False
    category_order: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "category_order", tuple(self.category_order))


def _alphabetical_categories(categories: Sequence[Category]) -> list[Category]:
    return sorted(categories, key=lambda category: category.name.lower())


def _explicit_category_order(
    categories: Sequence[Category], order: Sequence[str]
) -> list[Category]:
    by_name = {category.name: category for category in categories}
    for name in order:
        if name not in by_name:
            raise UnknownCategoryError(name, sorted(by_name))
    ordered: list[Category] = []
    used: set[str] = set()
    for name in order:
        if name in used:
            continue
        used.add(name)
        ordered.append(by_name[name])
    ordered.extend(
        _alphabetical_categories([category for category in categories if category.name not in used])
    )
    return ordered


def _ordered_targets(targets: Sequence[Target], keep_order: bool) -> list[Target]:
    if keep_order:
        return sorted(targets, key=lambda target: target.discovery_order)
    return sorted(targets, key=lambda target: target.name.lower())


def apply_ordering(model: HelpModel, config: OrderingConfig | None = None) -> HelpModel:
    """Reorder categories and their targets in place and return the model."""
    config = config or OrderingConfig()
    if config.category_order:
        model.categories = _explicit_category_order(model.categories, config.category_order)
    elif config.keep_order_categories:
        model.categories = sorted(model.categories, key=lambda category: category.discovery_order)
    else:
        model.categories = _alphabetical_categories(model.categories)
    for category in model.categories:
        category.targets = _ordered_targets(category.targets, config.keep_order_targets)
    return model
