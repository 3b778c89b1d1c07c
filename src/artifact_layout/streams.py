"""Checksum-decorated artifact streams.

``ArtifactOutputStream`` hashes every byte on its way to the raw stream and
freezes the encoded digests on close. ``ArtifactInputStream`` carries digests
looked up from companion files; it never re-hashes the payload.
"""

from typing import BinaryIO, Callable, Dict, List, Optional

from .coordinates import ArtifactCoordinates
from .errors import UnsupportedAlgorithmError
from .hashing import new_digest, to_hex

DigestStringifier = Callable[[bytes], str]


class ArtifactOutputStream:
    """Write-side wrapper computing digests incrementally."""

    def __init__(
        self,
        raw: BinaryIO,
        coordinates: Optional[ArtifactCoordinates] = None,
        digest_stringifier: DigestStringifier = to_hex,
    ):
        self.raw = raw
        self.coordinates = coordinates
        self.digest_stringifier = digest_stringifier
        self._hashers = {}
        self._final: Optional[Dict[str, str]] = None
        self.unsupported_algorithms: List[str] = []

    def add_algorithm(self, algorithm: str) -> bool:
        """Attach a digest algorithm.

        Returns:
            False if the algorithm is unavailable; the stream keeps working
            without it.
        """
        try:
            self._hashers[algorithm] = new_digest(algorithm)
        except UnsupportedAlgorithmError:
            self.unsupported_algorithms.append(algorithm)
            return False
        return True

    @property
    def algorithms(self) -> List[str]:
        return list(self._hashers)

    @property
    def digests(self) -> Dict[str, str]:
        """Encoded digests; frozen once the stream is closed."""
        if self._final is not None:
            return dict(self._final)
        return self._encode()

    def _encode(self) -> Dict[str, str]:
        return {
            algorithm: self.digest_stringifier(hasher.digest())
            for algorithm, hasher in self._hashers.items()
        }

    @property
    def closed(self) -> bool:
        return self._final is not None

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        if self.closed:
            raise ValueError("write to closed artifact stream")
        written = self.raw.write(data)
        for hasher in self._hashers.values():
            hasher.update(data)
        return len(data) if written is None else written

    def flush(self) -> None:
        self.raw.flush()

    def close(self) -> None:
        if self.closed:
            return
        try:
            self.raw.close()
        finally:
            self._final = self._encode()

    def __enter__(self) -> "ArtifactOutputStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ArtifactInputStream:
    """Read-side wrapper carrying previously persisted digests."""

    def __init__(self, raw: BinaryIO, coordinates: Optional[ArtifactCoordinates] = None):
        self.raw = raw
        self.coordinates = coordinates
        self.digests: Dict[str, str] = {}

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        return self.raw.read(size)

    def readinto(self, buffer) -> int:
        return self.raw.readinto(buffer)

    @property
    def closed(self) -> bool:
        return self.raw.closed

    def close(self) -> None:
        self.raw.close()

    def __enter__(self) -> "ArtifactInputStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self):
        return iter(lambda: self.read(8192), b"")
