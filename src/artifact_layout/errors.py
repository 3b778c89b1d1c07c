"""Custom exceptions for artifact-layout.

This module defines typed exceptions for better error handling and clearer
error messages throughout the layout and trash operations.
"""


class LayoutError(RuntimeError):
    """Base class for all layout-related errors."""
    pass


# Path classification errors
class ArtifactNotFoundError(LayoutError):
    """Path is absent where it is required."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Path not found: path-[{path}]")


class InvalidTargetError(LayoutError):
    """Path has the wrong kind (directory where a file was expected, escapes the repository, ...)."""
    pass


class InvalidCoordinatesError(LayoutError):
    """Path cannot be parsed into the format's artifact coordinates."""

    def __init__(self, path: str, layout: str):
        self.path = path
        self.layout = layout
        super().__init__(f"Path '{path}' is not a valid {layout} artifact path")


# Digest errors (degraded locally, never fatal to a read or write)
class DigestError(LayoutError):
    """Base class for checksum-related errors."""
    pass


class UnsupportedAlgorithmError(DigestError):
    """Digest algorithm not available in this interpreter."""

    def __init__(self, algorithm: str):
        self.algorithm = algorithm
        super().__init__(f"Digest algorithm not supported: alg-[{algorithm}]")


class CompanionReadError(DigestError):
    """Checksum companion file could not be read or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Failed to read checksum: path-[{path}]; {reason}")


class UnsupportedOperationError(LayoutError):
    """Operation is part of the contract but deliberately not implemented."""
    pass


# Configuration errors
class ConfigError(LayoutError):
    """Base class for configuration errors."""
    pass


class StorageNotFoundError(ConfigError):
    """Storage id not present in the configuration."""

    def __init__(self, storage_id: str):
        self.storage_id = storage_id
        super().__init__(f"Storage '{storage_id}' is not configured")


class RepositoryNotFoundError(ConfigError):
    """Repository id not present in the storage."""

    def __init__(self, storage_id: str, repository_id: str):
        self.storage_id = storage_id
        self.repository_id = repository_id
        super().__init__(f"Repository '{storage_id}:{repository_id}' is not configured")


class StorageProviderNotFoundError(ConfigError):
    """No storage provider registered for an implementation tag."""

    def __init__(self, implementation: str):
        self.implementation = implementation
        super().__init__(f"No storage provider registered for implementation '{implementation}'")


class LayoutProviderNotFoundError(ConfigError):
    """No layout provider registered under an alias."""

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(f"No layout provider registered with alias '{alias}'")
