"""Layout provider: the per-format entry point used by the service layer.

One ``LayoutProvider`` class serves every format; the format-specific parts
come from the ``LayoutFormat`` it is built with. It composes the path
resolver, the classifier, the checksum pipeline and the trash manager.
"""

import logging
import shutil
from typing import BinaryIO, Dict, Optional, Tuple

from ..config import ConfigurationManager
from ..coordinates import ArtifactCoordinates
from ..errors import UnsupportedOperationError
from ..hashing import checksum_path
from ..models import Repository, Storage
from ..storage import RepositoryPath, StorageProviderRegistry
from ..streams import ArtifactInputStream, ArtifactOutputStream
from .checksums import ChecksumPipeline
from .classifier import ArtifactClassifier
from .formats import LayoutFormat
from .resolver import PathResolver
from .trash import TrashManager, TrashSweepResult

logger = logging.getLogger(__name__)


class LayoutProvider:
    """Artifact I/O, deletion and trash handling for one layout format.

    Stateless apart from its collaborators; every operation takes the full
    ``(storage_id, repository_id, path)`` address.
    """

    def __init__(
        self,
        layout_format: LayoutFormat,
        storage_registry: StorageProviderRegistry,
        configuration: ConfigurationManager,
    ):
        self.layout_format = layout_format
        self.storage_registry = storage_registry
        self.configuration = configuration

        self.resolver = PathResolver(storage_registry, layout_format)
        self.classifier = ArtifactClassifier(layout_format, self.resolver)
        self.checksums = ChecksumPipeline(layout_format, self.get_input_stream)
        self.trash = TrashManager(layout_format, self.resolver, configuration)

    @property
    def alias(self) -> str:
        return self.layout_format.alias

    @property
    def digest_algorithms(self) -> Tuple[str, ...]:
        return self.layout_format.digest_algorithms

    def get_artifact_coordinates(self, path: str) -> ArtifactCoordinates:
        return self.layout_format.get_artifact_coordinates(path)

    def is_metadata(self, path: str) -> bool:
        return self.layout_format.is_metadata(path)

    def get_storage(self, storage_id: str) -> Storage:
        return self.configuration.get_storage(storage_id)

    def get_repository(self, storage_id: str, repository_id: str) -> Repository:
        return self.configuration.get_repository(storage_id, repository_id)

    # ---- Streams ------------------------------------------------------------

    def _resolve_for_io(
        self, repository: Repository, path: str, strict: bool
    ) -> Tuple[RepositoryPath, Optional[ArtifactCoordinates]]:
        coordinates = None
        if self.classifier.is_artifact(repository, path, strict):
            coordinates = self.resolver.coordinates_for(path)

        if coordinates is None:
            return self.resolver.resolve_relative(repository, path), None
        return self.resolver.resolve_artifact(repository, coordinates), coordinates

    def get_input_stream(self, storage_id: str, repository_id: str, path: str) -> ArtifactInputStream:
        """
        Open an artifact, metadata or checksum file for reading.

        Digests recorded in companion checksum files are attached to the
        returned stream; missing companions are simply absent.

        Raises:
            ArtifactNotFoundError: If the path does not exist
            InvalidTargetError: If the path is a directory
        """
        repository = self.get_repository(storage_id, repository_id)
        logger.debug("Checking in %s:%s...", storage_id, repository_id)

        handle, coordinates = self._resolve_for_io(repository, path, strict=True)
        raw = handle.provider.get_input_stream_implementation(handle)

        logger.debug("Resolved %s!", path)
        return self.checksums.decorate_for_read(storage_id, repository_id, path, raw, coordinates)

    def get_output_stream(self, storage_id: str, repository_id: str, path: str) -> ArtifactOutputStream:
        """
        Open a path for writing; digests are computed as bytes are written.

        Raises:
            InvalidTargetError: If the path is an existing directory
        """
        repository = self.get_repository(storage_id, repository_id)

        handle, coordinates = self._resolve_for_io(repository, path, strict=False)
        raw = handle.provider.get_output_stream_implementation(handle)

        return self.checksums.decorate_for_write(path, raw, coordinates)

    def write_checksums(self, storage_id: str, repository_id: str, path: str, digests: Dict[str, str]) -> None:
        """Write one companion checksum file per digest."""
        for algorithm, value in digests.items():
            with self.get_output_stream(storage_id, repository_id, checksum_path(path, algorithm)) as out:
                out.write(value.encode("utf-8"))

    def store(
        self,
        storage_id: str,
        repository_id: str,
        path: str,
        source: BinaryIO,
        write_checksums: bool = True,
    ) -> Dict[str, str]:
        """
        Stream ``source`` into the repository.

        Args:
            write_checksums: Also persist the computed digests as companions

        Returns:
            Algorithm -> encoded digest (empty for checksum paths)
        """
        with self.get_output_stream(storage_id, repository_id, path) as out:
            shutil.copyfileobj(source, out)

        digests = out.digests
        if write_checksums and digests:
            self.write_checksums(storage_id, repository_id, path, digests)
        logger.debug("Stored %s:%s/%s %s", storage_id, repository_id, path, sorted(digests))
        return digests

    # ---- Copy / move --------------------------------------------------------

    def copy(self, src_storage_id: str, src_repository_id: str,
             dest_storage_id: str, dest_repository_id: str, path: str) -> None:
        raise UnsupportedOperationError(f"copy is not supported by the '{self.alias}' layout")

    def move(self, src_storage_id: str, src_repository_id: str,
             dest_storage_id: str, dest_repository_id: str, path: str) -> None:
        raise UnsupportedOperationError(f"move is not supported by the '{self.alias}' layout")

    # ---- Delete / trash -----------------------------------------------------

    def delete(self, storage_id: str, repository_id: str, path: str, force: bool = False) -> None:
        self.trash.delete(storage_id, repository_id, path, force)

    def delete_metadata(self, storage_id: str, repository_id: str, metadata_path: str) -> None:
        """Remove the format's metadata files at ``metadata_path`` (no-op for NuGet and Raw)."""
        for path in self.layout_format.metadata_files(metadata_path):
            self.trash.delete(storage_id, repository_id, path)

    def delete_trash(
        self, storage_id: Optional[str] = None, repository_id: Optional[str] = None
    ) -> Optional[TrashSweepResult]:
        """Empty one repository's trash, or every repository's when called without ids."""
        if storage_id is None and repository_id is None:
            return self.trash.delete_trash_all()
        if storage_id is None or repository_id is None:
            raise ValueError("storage_id and repository_id must be given together")
        self.trash.delete_trash(storage_id, repository_id)
        return None

    def undelete(self, storage_id: str, repository_id: str, path: str) -> None:
        self.trash.undelete(storage_id, repository_id, path)

    def undelete_trash(
        self, storage_id: Optional[str] = None, repository_id: Optional[str] = None
    ) -> Optional[TrashSweepResult]:
        """Restore one repository's trash, or every repository's when called without ids."""
        if storage_id is None and repository_id is None:
            return self.trash.undelete_trash_all()
        if storage_id is None or repository_id is None:
            raise ValueError("storage_id and repository_id must be given together")
        self.trash.undelete_trash(storage_id, repository_id)
        return None

    # ---- Existence ----------------------------------------------------------

    def contains(self, storage_id: str, repository_id: str, path: str) -> bool:
        repository = self.get_repository(storage_id, repository_id)
        return self.resolver.resolve(repository, path).exists()

    def contains_artifact(self, repository: Repository, coordinates: ArtifactCoordinates) -> bool:
        return self.resolver.resolve_artifact(repository, coordinates).exists()

    def contains_path(self, repository: Repository, path: str) -> bool:
        return self.resolver.resolve_relative(repository, path).exists()

    def __repr__(self) -> str:
        return f"LayoutProvider(alias={self.alias!r})"
