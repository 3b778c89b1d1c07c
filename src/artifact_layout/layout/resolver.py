"""Translate logical references into storage path handles."""

from typing import Optional

from ..coordinates import ArtifactCoordinates
from ..errors import InvalidCoordinatesError
from ..models import Repository
from ..storage import ArtifactPath, RepositoryPath, StorageProvider, StorageProviderRegistry
from .formats import LayoutFormat


class PathResolver:
    """Delegates every resolution to the repository's storage provider.

    No caching: each call looks the provider up again.
    """

    def __init__(self, storage_registry: StorageProviderRegistry, layout_format: LayoutFormat):
        self.storage_registry = storage_registry
        self.layout_format = layout_format

    def storage_provider(self, repository: Repository) -> StorageProvider:
        return self.storage_registry.get_provider(repository.implementation)

    def resolve_repository_root(self, repository: Repository) -> RepositoryPath:
        return self.storage_provider(repository).resolve(repository)

    def resolve_relative(self, repository: Repository, path: str) -> RepositoryPath:
        return self.storage_provider(repository).resolve(repository, path)

    def resolve_artifact(self, repository: Repository, coordinates: ArtifactCoordinates) -> ArtifactPath:
        return self.storage_provider(repository).resolve_artifact(repository, coordinates)

    def coordinates_for(self, path: str) -> Optional[ArtifactCoordinates]:
        """Format coordinates for ``path``, or None when the format cannot parse it."""
        try:
            return self.layout_format.get_artifact_coordinates(path)
        except InvalidCoordinatesError:
            return None

    def resolve(self, repository: Repository, path: str) -> RepositoryPath:
        """Resolve through coordinates, falling back to the raw relative path."""
        coordinates = self.coordinates_for(path)
        if coordinates is None:
            return self.resolve_relative(repository, path)
        return self.resolve_artifact(repository, coordinates)
