"""Checksum decoration for artifact streams.

Writes compute every digest of the format's algorithm set while bytes flow
through. Reads only look up companion checksum files written earlier, so
large payloads are never re-hashed on read. Checksum files themselves are
never decorated (no checksum of a checksum).
"""

import logging
from typing import BinaryIO, Callable, Optional

from ..coordinates import ArtifactCoordinates
from ..errors import ArtifactNotFoundError, LayoutError
from ..hashing import checksum_path, is_checksum, read_checksum_file
from ..streams import ArtifactInputStream, ArtifactOutputStream
from .formats import LayoutFormat

logger = logging.getLogger(__name__)

# (storage_id, repository_id, path) -> readable stream
CompanionOpener = Callable[[str, str, str], BinaryIO]


class ChecksumPipeline:
    """Attach the format's digest algorithms to raw streams."""

    def __init__(self, layout_format: LayoutFormat, open_companion: CompanionOpener):
        """
        Args:
            layout_format: Supplies the algorithm set and digest encoding
            open_companion: Opens companion files through the normal read path
        """
        self.layout_format = layout_format
        self.open_companion = open_companion

    def decorate_for_write(
        self,
        path: str,
        raw: BinaryIO,
        coordinates: Optional[ArtifactCoordinates] = None,
    ) -> ArtifactOutputStream:
        stream = ArtifactOutputStream(raw, coordinates, self.layout_format.encode_digest)
        if is_checksum(path):
            return stream

        for algorithm in self.layout_format.digest_algorithms:
            if not stream.add_algorithm(algorithm):
                logger.warning("Digest algorithm not supported: alg-[%s]; path-[%s]", algorithm, path)
        return stream

    def decorate_for_read(
        self,
        storage_id: str,
        repository_id: str,
        path: str,
        raw: BinaryIO,
        coordinates: Optional[ArtifactCoordinates] = None,
    ) -> ArtifactInputStream:
        stream = ArtifactInputStream(raw, coordinates)
        if is_checksum(path):
            return stream

        for algorithm in self.layout_format.digest_algorithms:
            checksum = self.read_checksum(storage_id, repository_id, path, algorithm)
            if checksum is not None:
                stream.digests[algorithm] = checksum
        return stream

    def read_checksum(self, storage_id: str, repository_id: str, path: str, algorithm: str) -> Optional[str]:
        """Read one companion checksum; None when it is missing or unreadable."""
        companion = checksum_path(path, algorithm)
        try:
            return read_checksum_file(self.open_companion(storage_id, repository_id, companion), companion)
        except ArtifactNotFoundError:
            logger.debug("No checksum companion: alg-[%s]; path-[%s]", algorithm, companion)
        except (LayoutError, OSError) as e:
            logger.warning("Failed to read checksum: alg-[%s]; path-[%s]; %s", algorithm, companion, e)
        return None
