"""makehelp package root."""

from makehelp.exceptions import MakeHelpError, MixedCategorizationError
from makehelp.model import HelpModel, ModelBuilder, build_model

__all__ = [
    "__version__",
    "HelpModel",
    "MakeHelpError",
    "MixedCategorizationError",
    "ModelBuilder",
    "build_model",
]

__version__ = "0.1.0"
