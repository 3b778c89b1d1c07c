"""Storage package: storage provider protocol, filesystem backend and registry."""

from .base import ArtifactPath, RepositoryPath, StorageProvider
from .fs import FilesystemStorageProvider
from .registry import StorageProviderRegistry, make_storage_provider_registry

__all__ = [
    "ArtifactPath",
    "FilesystemStorageProvider",
    "RepositoryPath",
    "StorageProvider",
    "StorageProviderRegistry",
    "make_storage_provider_registry",
]
