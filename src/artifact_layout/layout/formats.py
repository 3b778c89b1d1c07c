"""Per-format layout capabilities.

A ``LayoutFormat`` bundles everything that differs between package
ecosystems: coordinate type, metadata classification, digest algorithm set,
digest encoding, companion files cascaded by delete/undelete, and metadata
files removed by ``delete_metadata``. The shared orchestration lives in
``LayoutProvider``.
"""

import posixpath
from typing import List, Tuple, Type

from ..constants import DEFAULT_DIGEST_ALGORITHMS, MD5, SHA_1, SHA_512
from ..coordinates import (
    ArtifactCoordinates,
    MavenArtifactCoordinates,
    NugetArtifactCoordinates,
    RawArtifactCoordinates,
)
from ..hashing import checksum_extension, to_base64, to_hex


class LayoutFormat:
    """Base capability set; ``is_metadata`` must be defined by every format."""

    alias: str = ""
    coordinates_class: Type[ArtifactCoordinates] = RawArtifactCoordinates
    digest_algorithms: Tuple[str, ...] = DEFAULT_DIGEST_ALGORITHMS

    def get_artifact_coordinates(self, path: str) -> ArtifactCoordinates:
        return self.coordinates_class.from_path(path)

    def is_metadata(self, path: str) -> bool:
        raise NotImplementedError(f"{type(self).__name__} must define is_metadata()")

    def encode_digest(self, digest: bytes) -> str:
        return to_hex(digest)

    def checksum_companions(self, filename: str) -> List[str]:
        """Checksum files, one per algorithm, deleted and restored together with ``filename``."""
        return [f"{filename}.{checksum_extension(a)}" for a in self.digest_algorithms]

    def metadata_files(self, metadata_path: str) -> List[str]:
        """Repository-relative metadata files removed by ``delete_metadata``."""
        return []

    def __repr__(self) -> str:
        return f"{type(self).__name__}(alias={self.alias!r})"


class Maven2Layout(LayoutFormat):
    """Maven 2 repository layout.

    <group/as/dirs>/<artifactId>/<version>/<artifactId>-<version>.<ext>,
    with ``maven-metadata.xml`` at artifact and version level and
    ``.md5``/``.sha1`` companions next to every file.
    """

    alias = "Maven 2"
    coordinates_class = MavenArtifactCoordinates
    digest_algorithms = (MD5, SHA_1)

    METADATA_FILE = "maven-metadata.xml"

    def is_metadata(self, path: str) -> bool:
        name = posixpath.basename(path)
        return name.startswith("maven-metadata") and name.endswith(".xml")

    def metadata_files(self, metadata_path: str) -> List[str]:
        base = metadata_path.strip("/")
        if self.is_metadata(base):
            return [base]
        return [posixpath.join(base, self.METADATA_FILE) if base else self.METADATA_FILE]


class NugetHierarchicalLayout(LayoutFormat):
    """NuGet package repository layout.

    <packageID>/<version>/<packageID>.<version>.nupkg
    <packageID>/<version>/<packageID>.<version>.nupkg.sha512
    <packageID>/<version>/<packageID>.nuspec

    The package hash is SHA-512, base64 encoded.
    """

    alias = "Nuget Hierarchical"
    coordinates_class = NugetArtifactCoordinates
    digest_algorithms = (SHA_512,)

    def is_metadata(self, path: str) -> bool:
        return path.endswith("nuspec")

    def encode_digest(self, digest: bytes) -> str:
        return to_base64(digest)


class RawLayout(LayoutFormat):
    """Plain files, addressed by their path."""

    alias = "Raw"
    coordinates_class = RawArtifactCoordinates

    def is_metadata(self, path: str) -> bool:
        return False


DEFAULT_FORMATS = (Maven2Layout, NugetHierarchicalLayout, RawLayout)
