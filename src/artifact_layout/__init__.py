"""Layout abstraction and artifact lifecycle core for multi-format artifact storage."""

from .constants import LAYOUT_VERSION
from .context import LayoutContext
from .layout import LayoutProvider, LayoutProviderRegistry, TrashSweepResult
from .models import Configuration, Repository, Storage

__version__ = LAYOUT_VERSION

__all__ = [
    "Configuration",
    "LayoutContext",
    "LayoutProvider",
    "LayoutProviderRegistry",
    "Repository",
    "Storage",
    "TrashSweepResult",
]
