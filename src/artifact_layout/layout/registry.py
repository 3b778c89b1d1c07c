"""Layout provider registry and explicit startup registration."""

import logging
from typing import Dict, Iterable, List, Type

from ..config import ConfigurationManager
from ..errors import LayoutProviderNotFoundError
from ..storage import StorageProviderRegistry
from .formats import DEFAULT_FORMATS, LayoutFormat
from .provider import LayoutProvider

logger = logging.getLogger(__name__)


class LayoutProviderRegistry:
    """Layout providers keyed by human-readable alias.

    Populated once during startup, read by request handling afterwards.
    """

    def __init__(self):
        self._providers: Dict[str, LayoutProvider] = {}

    def add_provider(self, alias: str, provider: LayoutProvider) -> None:
        if alias in self._providers:
            raise ValueError(f"Layout provider alias '{alias}' is already registered")
        self._providers[alias] = provider
        logger.info("Registered layout provider '%s' with alias '%s'.",
                    type(provider.layout_format).__name__, alias)

    def get_provider(self, alias: str) -> LayoutProvider:
        """
        Look up a layout provider.

        Raises:
            LayoutProviderNotFoundError: If the alias is unknown
        """
        try:
            return self._providers[alias]
        except KeyError:
            raise LayoutProviderNotFoundError(alias) from None

    def aliases(self) -> List[str]:
        return list(self._providers)

    def providers(self) -> List[LayoutProvider]:
        return list(self._providers.values())

    def __contains__(self, alias: str) -> bool:
        return alias in self._providers


def register_default_layouts(
    registry: LayoutProviderRegistry,
    storage_registry: StorageProviderRegistry,
    configuration: ConfigurationManager,
    formats: Iterable[Type[LayoutFormat]] = DEFAULT_FORMATS,
) -> LayoutProviderRegistry:
    """Build one provider per format and register it under the format alias."""
    for format_class in formats:
        provider = LayoutProvider(format_class(), storage_registry, configuration)
        registry.add_provider(provider.alias, provider)
    return registry
