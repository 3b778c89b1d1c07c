"""Digest algorithm helpers shared by every layout format.

Algorithm names use the conventional spelling ("MD5", "SHA-1", "SHA-512").
Checksum companion files live next to the artifact and are named after the
algorithm: lowercase, hyphens stripped (``foo.jar.sha1``).
"""

import base64
import hashlib
from typing import BinaryIO

from .constants import CHECKSUM_EXTENSIONS
from .errors import CompanionReadError, UnsupportedAlgorithmError


def checksum_extension(algorithm: str) -> str:
    """Companion file extension for an algorithm ("SHA-512" -> "sha512")."""
    return algorithm.lower().replace("-", "")


def checksum_path(path: str, algorithm: str) -> str:
    """Path of the checksum companion file for ``path``."""
    return f"{path}.{checksum_extension(algorithm)}"


def is_checksum(path: str) -> bool:
    """Check whether the final path segment is a checksum companion file."""
    name = path.rstrip("/").rsplit("/", 1)[-1].lower()
    return name.endswith(CHECKSUM_EXTENSIONS)


def new_digest(algorithm: str):
    """Create a hashlib object for an algorithm name.

    Args:
        algorithm: Algorithm name, e.g. "SHA-1"

    Returns:
        Fresh hashlib digest object

    Raises:
        UnsupportedAlgorithmError: If the interpreter cannot provide it
    """
    try:
        return hashlib.new(checksum_extension(algorithm))
    except (ValueError, TypeError) as e:
        raise UnsupportedAlgorithmError(algorithm) from e


def to_hex(digest: bytes) -> str:
    """Default digest encoding."""
    return digest.hex()


def to_base64(digest: bytes) -> str:
    """Base64 digest encoding (NuGet package hashes)."""
    return base64.b64encode(digest).decode("ascii")


def read_checksum_file(stream: BinaryIO, path: str = "") -> str:
    """Parse a checksum file.

    Accepts both the bare form (``<digest>``) and the coreutils form
    (``<digest>  <filename>``); only the first token is returned.

    Raises:
        CompanionReadError: If the file is empty or not text
    """
    with stream:
        content = stream.read()
    try:
        text = content.decode("utf-8").strip()
    except UnicodeDecodeError as e:
        raise CompanionReadError(path, "not a text file") from e
    if not text:
        raise CompanionReadError(path, "empty checksum file")
    return text.split()[0]


__all__ = [
    "checksum_extension",
    "checksum_path",
    "is_checksum",
    "new_digest",
    "read_checksum_file",
    "to_base64",
    "to_hex",
]
