"""Base protocol for storage providers and the path handles they hand out."""

import posixpath
from typing import BinaryIO, List, Optional, Protocol

from ..coordinates import ArtifactCoordinates
from ..models import Repository


def _normalize(relative: str) -> str:
    relative = relative.replace("\\", "/").strip("/")
    if not relative:
        return ""
    normalized = posixpath.normpath(relative)
    return "" if normalized == "." else normalized


class RepositoryPath:
    """Repository-relative path bound to a repository and its storage provider.

    Handles are created per call and never cached. ``relative`` is a POSIX
    path without leading slash; the empty string is the repository root.
    """

    def __init__(self, provider: "StorageProvider", repository: Repository, relative: str = ""):
        self.provider = provider
        self.repository = repository
        self.relative = _normalize(relative)

    @property
    def name(self) -> str:
        return posixpath.basename(self.relative)

    @property
    def is_root(self) -> bool:
        return self.relative == ""

    @property
    def parent(self) -> "RepositoryPath":
        return RepositoryPath(self.provider, self.repository, posixpath.dirname(self.relative))

    def resolve(self, other: str) -> "RepositoryPath":
        if not other.strip("/"):
            return RepositoryPath(self.provider, self.repository, self.relative)
        return RepositoryPath(self.provider, self.repository, posixpath.join(self.relative, other.strip("/")))

    def resolve_sibling(self, name: str) -> "RepositoryPath":
        return self.parent.resolve(name)

    def exists(self) -> bool:
        return self.provider.exists(self)

    def is_dir(self) -> bool:
        return self.provider.is_directory(self)

    def iterdir(self, include_service: bool = False) -> List["RepositoryPath"]:
        return self.provider.list_directory(self, include_service)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RepositoryPath):
            return NotImplemented
        return (self.repository.key, self.relative) == (other.repository.key, other.relative)

    def __hash__(self) -> int:
        return hash((self.repository.key, self.relative))

    def __str__(self) -> str:
        return f"{self.repository.key}:/{self.relative}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


class ArtifactPath(RepositoryPath):
    """Path handle resolved from artifact coordinates."""

    def __init__(self, provider: "StorageProvider", repository: Repository, coordinates: ArtifactCoordinates):
        super().__init__(provider, repository, coordinates.to_path())
        self.coordinates = coordinates


class StorageProvider(Protocol):
    """
    Protocol for storage provider implementations.

    The provider owns the physical medium: byte I/O, existence checks and
    trash relocation. The layout core only talks to it through path handles.
    """

    alias: str

    def resolve(self, repository: Repository, path: str = "") -> RepositoryPath:
        """Resolve a repository-relative path (root when empty)."""
        ...

    def resolve_artifact(self, repository: Repository, coordinates: ArtifactCoordinates) -> ArtifactPath:
        """Resolve artifact coordinates to a path handle."""
        ...

    def get_input_stream_implementation(self, path: RepositoryPath) -> BinaryIO:
        """Open the raw byte stream for reading."""
        ...

    def get_output_stream_implementation(self, path: RepositoryPath) -> BinaryIO:
        """Open the raw byte stream for writing, creating parents as needed."""
        ...

    def exists(self, path: RepositoryPath) -> bool:
        ...

    def is_directory(self, path: RepositoryPath) -> bool:
        ...

    def list_directory(self, path: RepositoryPath, include_service: bool = False) -> List[RepositoryPath]:
        """Children of a directory; service folders are excluded unless ``include_service``."""
        ...

    def delete(self, path: RepositoryPath) -> None:
        """
        Remove a file or an empty directory.

        Files are moved into the repository trash when trash is enabled,
        unlinked otherwise. A soft delete never overwrites a trashed
        directory, nor a trashed file standing where a parent directory
        is needed; it raises ``InvalidTargetError`` instead.
        """
        ...

    def delete_trash(self, path: RepositoryPath) -> None:
        """Purge the trash copy of ``path``; the root empties the whole trash."""
        ...

    def restore_trash(self, path: RepositoryPath) -> Optional[RepositoryPath]:
        """
        Move the trash copy of ``path`` back into place.

        The root restores the whole trash. Returns the restored handle, or
        None when there was nothing to restore.
        """
        ...
