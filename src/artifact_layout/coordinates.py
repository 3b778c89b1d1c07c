"""Artifact coordinates: structured, format-specific artifact identity.

Each coordinates type parses a repository-relative path and renders it back;
``cls.from_path(p).to_path() == p`` for every path the type accepts.
"""

from typing import ClassVar, Optional

from pydantic import BaseModel, ConfigDict

from .errors import InvalidCoordinatesError


class ArtifactCoordinates(BaseModel):
    """Base class for coordinates; immutable once constructed."""

    model_config = ConfigDict(frozen=True)

    layout: ClassVar[str] = ""

    @classmethod
    def from_path(cls, path: str) -> "ArtifactCoordinates":
        raise NotImplementedError

    def to_path(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.to_path()


class RawArtifactCoordinates(ArtifactCoordinates):
    """Coordinates that are just the path itself."""

    layout: ClassVar[str] = "Raw"

    path: str

    @classmethod
    def from_path(cls, path: str) -> "RawArtifactCoordinates":
        path = path.strip("/")
        if not path:
            raise InvalidCoordinatesError(path, cls.layout)
        return cls(path=path)

    def to_path(self) -> str:
        return self.path


class MavenArtifactCoordinates(ArtifactCoordinates):
    """Maven 2 coordinates.

    Path form::

        <group/as/dirs>/<artifactId>/<version>/<artifactId>-<version>[-<classifier>].<extension>
    """

    layout: ClassVar[str] = "Maven 2"

    group_id: str
    artifact_id: str
    version: str
    classifier: Optional[str] = None
    extension: str = "jar"

    @classmethod
    def from_path(cls, path: str) -> "MavenArtifactCoordinates":
        parts = path.strip("/").split("/")
        if len(parts) < 4:
            raise InvalidCoordinatesError(path, cls.layout)

        *group, artifact_id, version, filename = parts
        prefix = f"{artifact_id}-{version}"
        if not filename.startswith(prefix):
            raise InvalidCoordinatesError(path, cls.layout)

        rest = filename[len(prefix):]
        classifier = None
        if rest.startswith("-"):
            classifier, dot, extension = rest[1:].partition(".")
            if not classifier or not dot:
                raise InvalidCoordinatesError(path, cls.layout)
        elif rest.startswith("."):
            extension = rest[1:]
        else:
            raise InvalidCoordinatesError(path, cls.layout)

        if not extension:
            raise InvalidCoordinatesError(path, cls.layout)

        return cls(
            group_id=".".join(group),
            artifact_id=artifact_id,
            version=version,
            classifier=classifier,
            extension=extension,
        )

    def to_path(self) -> str:
        filename = f"{self.artifact_id}-{self.version}"
        if self.classifier:
            filename += f"-{self.classifier}"
        filename += f".{self.extension}"
        return "/".join([self.group_id.replace(".", "/"), self.artifact_id, self.version, filename])


class NugetArtifactCoordinates(ArtifactCoordinates):
    """NuGet hierarchical coordinates.

    Path form::

        <packageId>/<version>/<packageId>.<version>.<extension>
    """

    layout: ClassVar[str] = "Nuget Hierarchical"

    package_id: str
    version: str
    extension: str = "nupkg"

    @classmethod
    def from_path(cls, path: str) -> "NugetArtifactCoordinates":
        parts = path.strip("/").split("/")
        if len(parts) != 3:
            raise InvalidCoordinatesError(path, cls.layout)

        package_id, version, filename = parts
        prefix = f"{package_id}.{version}."
        if not filename.startswith(prefix) or len(filename) == len(prefix):
            raise InvalidCoordinatesError(path, cls.layout)

        return cls(package_id=package_id, version=version, extension=filename[len(prefix):])

    def to_path(self) -> str:
        return f"{self.package_id}/{self.version}/{self.package_id}.{self.version}.{self.extension}"
