from makehelp.model.builder import (
    CATEGORY_RESET,
    BuilderConfig,
    ModelBuilder,
    build_model,
    parse_alias_directive,
    parse_var_directive,
)
from makehelp.model.types import (
    UNCATEGORIZED,
    Category,
    FileDoc,
    HelpModel,
    Target,
    Variable,
)
from makehelp.model.validator import apply_default_category, validate_categorization

__all__ = [
    "CATEGORY_RESET",
    "UNCATEGORIZED",
    "BuilderConfig",
    "Category",
    "FileDoc",
    "HelpModel",
    "ModelBuilder",
    "Target",
    "Variable",
    "apply_default_category",
    "build_model",
    "parse_alias_directive",
    "parse_var_directive",
    "validate_categorization",
]
