"""Exception types raised by the makehelp core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from makehelp.lint.model import FixResult


class MakeHelpError(Exception):
    """Base class for errors surfaced to the caller."""


class MixedCategorizationError(MakeHelpError):
    """Raised when categorized and uncategorized targets coexist.

    Only raised when no default category is configured to absorb the
    uncategorized targets. The offending target names are kept on the
    instance so front ends can render them however they like.
    """

    def __init__(self, uncategorized_targets: Sequence[str]):
        self.uncategorized_targets = list(uncategorized_targets)
        super().__init__(
            "mixed categorization: found both categorized and uncategorized targets\n"
            f"Uncategorized targets: {', '.join(self.uncategorized_targets)}\n"
            "Set a default category to assign uncategorized targets"
        )


class UnknownCategoryError(MakeHelpError):
    """An explicit category order names a category the model does not have."""

    def __init__(self, category_name: str, available: Sequence[str]):
        self.category_name = category_name
        self.available = list(available)
        super().__init__(
            f"unknown category {category_name!r} in category order\n"
            f"Available categories: {', '.join(self.available)}"
        )


class FixFileError(MakeHelpError):
    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"failed to fix {path}: {cause}")


class FixApplicationError(MakeHelpError):
    """One or more files could not be rewritten.

    `result` still reports the fixes applied to the files that succeeded.
    """

    def __init__(self, result: FixResult, errors: Sequence[FixFileError]):
        self.result = result
        self.errors = list(errors)
        super().__init__("; ".join(str(error) for error in self.errors))


class PayloadError(MakeHelpError):
    """A parser payload could not be loaded or validated."""
