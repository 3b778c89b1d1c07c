"""Registry and factory for storage provider instances."""

import logging
from pathlib import Path
from typing import Dict, List

from ..errors import StorageProviderNotFoundError
from ..models import Configuration
from .base import StorageProvider
from .fs import FilesystemStorageProvider

logger = logging.getLogger(__name__)


class StorageProviderRegistry:
    """Storage providers keyed by implementation tag.

    Populated once at startup, read afterwards.
    """

    def __init__(self):
        self._providers: Dict[str, StorageProvider] = {}

    def add_provider(self, implementation: str, provider: StorageProvider) -> None:
        if implementation in self._providers:
            raise ValueError(f"Storage provider '{implementation}' is already registered")
        self._providers[implementation] = provider
        logger.info("Registered storage provider '%s' for implementation '%s'.",
                    type(provider).__name__, implementation)

    def get_provider(self, implementation: str) -> StorageProvider:
        """
        Look up the provider for an implementation tag.

        Raises:
            StorageProviderNotFoundError: If nothing is registered under the tag
        """
        try:
            return self._providers[implementation]
        except KeyError:
            raise StorageProviderNotFoundError(implementation) from None

    def implementations(self) -> List[str]:
        return sorted(self._providers)

    def __contains__(self, implementation: str) -> bool:
        return implementation in self._providers


def make_storage_provider_registry(configuration: Configuration) -> StorageProviderRegistry:
    """
    Create the storage provider registry for a configuration.

    Args:
        configuration: Loaded configuration (supplies base and storage dirs)

    Returns:
        Registry with the built-in filesystem provider
    """
    registry = StorageProviderRegistry()
    storage_basedirs = {
        storage.id: storage.basedir
        for storage in configuration.storages.values()
        if storage.basedir
    }
    provider = FilesystemStorageProvider(Path(configuration.base_dir), storage_basedirs)
    registry.add_provider(provider.alias, provider)
    return registry
