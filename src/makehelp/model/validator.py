"""Categorization rules.

Once any ``!category`` directive appears, every target has to be
categorized unless a default category is configured to absorb the rest.
"""

from __future__ import annotations

from makehelp.exceptions import MixedCategorizationError
from makehelp.model.types import UNCATEGORIZED, Category, HelpModel


def validate_categorization(model: HelpModel, default_category: str = "") -> None:
    if not model.has_categories:
        return
    categorized = 0
    uncategorized: list[str] = []
    for category in model.categories:
        if category.name == UNCATEGORIZED:
            uncategorized.extend(target.name for target in category.targets)
        else:
            categorized += len(category.targets)
    if categorized and uncategorized and not default_category:
        raise MixedCategorizationError(uncategorized)


def apply_default_category(model: HelpModel, default_category: str) -> None:
    """Move the uncategorized bucket into ``default_category``."""
    if not default_category:
        return
    bucket_index = next(
        (
            index
            for index, category in enumerate(model.categories)
            if category.name == UNCATEGORIZED
        ),
        None,
    )
    if bucket_index is None:
        return
    bucket = model.categories.pop(bucket_index)
    if not bucket.targets:
        return
    for category in model.categories:
        if category.name == default_category:
            category.targets.extend(bucket.targets)
            return
    model.categories.append(
        Category(
            name=default_category,
            targets=list(bucket.targets),
            discovery_order=bucket.discovery_order,
        )
    )
