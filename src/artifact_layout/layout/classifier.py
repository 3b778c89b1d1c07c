"""Path classification: artifact, metadata, checksum or service folder.

Classification runs before decoration and before deletion dispatch, since
checksum and metadata files follow different rules than artifact payloads.
"""

from ..constants import INDEX_DIR, TEMP_DIR, TRASH_DIR
from ..errors import ArtifactNotFoundError, InvalidTargetError
from ..hashing import is_checksum
from ..models import Repository
from .formats import LayoutFormat
from .resolver import PathResolver


class ArtifactClassifier:
    """Format-aware path predicates."""

    def __init__(self, layout_format: LayoutFormat, resolver: PathResolver):
        self.layout_format = layout_format
        self.resolver = resolver

    def is_metadata(self, path: str) -> bool:
        return self.layout_format.is_metadata(path)

    def is_checksum(self, path: str) -> bool:
        return is_checksum(path)

    def is_trash(self, path: str) -> bool:
        return TRASH_DIR in path

    def is_temp(self, path: str) -> bool:
        return TEMP_DIR in path

    def is_index(self, path: str) -> bool:
        return INDEX_DIR in path

    def is_service_folder(self, path: str) -> bool:
        return self.is_temp(path) or self.is_trash(path) or self.is_index(path)

    def is_artifact(self, repository: Repository, path: str, strict: bool) -> bool:
        """
        Check whether ``path`` holds an artifact payload.

        Args:
            repository: Repository the path belongs to
            path: Repository-relative path
            strict: Require the path to exist

        Raises:
            ArtifactNotFoundError: If strict and the path does not exist
            InvalidTargetError: If the path is a directory
        """
        handle = self.resolver.resolve_relative(repository, path)
        exists = handle.exists()
        if not exists and strict:
            raise ArtifactNotFoundError(str(handle))
        if exists and handle.is_dir():
            raise InvalidTargetError(f"The artifact path is a directory: path-[{handle}]")

        return not self.is_metadata(path) and not self.is_checksum(path) and not self.is_service_folder(path)
