"""Layout providers: per-format path layout, checksums and trash handling."""

from .checksums import ChecksumPipeline
from .classifier import ArtifactClassifier
from .formats import LayoutFormat, Maven2Layout, NugetHierarchicalLayout, RawLayout
from .provider import LayoutProvider
from .registry import LayoutProviderRegistry, register_default_layouts
from .resolver import PathResolver
from .trash import TrashManager, TrashSweepResult

__all__ = [
    "ArtifactClassifier",
    "ChecksumPipeline",
    "LayoutFormat",
    "LayoutProvider",
    "LayoutProviderRegistry",
    "Maven2Layout",
    "NugetHierarchicalLayout",
    "PathResolver",
    "RawLayout",
    "TrashManager",
    "TrashSweepResult",
    "register_default_layouts",
]
