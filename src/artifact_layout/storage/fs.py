"""Filesystem storage provider with a per-repository trash area.

Repository content lives under ``<base_dir>/<storage>/<repository>`` (or the
configured basedirs); soft-deleted files are shadowed at the same relative
path under ``<repository>/.trash``.
"""

import contextlib
import logging
import os
import shutil
from pathlib import Path
from typing import BinaryIO, Dict, Iterator, List, Optional

import portalocker

from ..constants import (
    FILE_SYSTEM_IMPLEMENTATION,
    SERVICE_MARKERS,
    TRASH_DIR,
    TRASH_LOCK_FILE,
    TRASH_LOCK_TIMEOUT,
)
from ..coordinates import ArtifactCoordinates
from ..errors import InvalidTargetError
from ..models import Repository
from .base import ArtifactPath, RepositoryPath

logger = logging.getLogger(__name__)


def _is_service_name(name: str) -> bool:
    return name.startswith(SERVICE_MARKERS)


class FilesystemStorageProvider:
    """
    Local filesystem storage provider.

    Trash relocation is serialised per repository with a portalocker lock
    file so concurrent deletes and restores of one repository do not race.
    """

    alias = FILE_SYSTEM_IMPLEMENTATION

    def __init__(self, base_dir: Path, storage_basedirs: Optional[Dict[str, str]] = None):
        """
        Initialize filesystem provider.

        Args:
            base_dir: Root directory for storages without an explicit basedir
            storage_basedirs: Storage id -> explicit storage directory
        """
        self.base_dir = Path(base_dir)
        self.storage_basedirs = dict(storage_basedirs or {})

    # ---- Resolution ---------------------------------------------------------

    def repository_dir(self, repository: Repository) -> Path:
        """Physical root directory of a repository."""
        if repository.basedir:
            return Path(repository.basedir)
        storage_dir = self.storage_basedirs.get(repository.storage_id)
        if storage_dir is None:
            storage_dir = self.base_dir / repository.storage_id
        return Path(storage_dir) / repository.id

    def resolve(self, repository: Repository, path: str = "") -> RepositoryPath:
        handle = RepositoryPath(self, repository, path)
        self._check_inside(handle)
        return handle

    def resolve_artifact(self, repository: Repository, coordinates: ArtifactCoordinates) -> ArtifactPath:
        handle = ArtifactPath(self, repository, coordinates)
        self._check_inside(handle)
        return handle

    def _check_inside(self, path: RepositoryPath) -> None:
        if path.relative == ".." or path.relative.startswith("../"):
            raise InvalidTargetError(f"Path escapes repository {path.repository.key}: {path.relative}")

    def target(self, path: RepositoryPath) -> Path:
        """Physical location of a path handle."""
        root = self.repository_dir(path.repository)
        return root / path.relative if path.relative else root

    def trash_target(self, path: RepositoryPath) -> Path:
        """Physical location of the trash copy of a path handle."""
        trash = self.repository_dir(path.repository) / TRASH_DIR
        return trash / path.relative if path.relative else trash

    # ---- Byte I/O -----------------------------------------------------------

    def get_input_stream_implementation(self, path: RepositoryPath) -> BinaryIO:
        return open(self.target(path), "rb")

    def get_output_stream_implementation(self, path: RepositoryPath) -> BinaryIO:
        target = self.target(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        return open(target, "wb")

    # ---- Filesystem queries -------------------------------------------------

    def exists(self, path: RepositoryPath) -> bool:
        return self.target(path).exists()

    def is_directory(self, path: RepositoryPath) -> bool:
        return self.target(path).is_dir()

    def list_directory(self, path: RepositoryPath, include_service: bool = False) -> List[RepositoryPath]:
        target = self.target(path)
        return [
            path.resolve(child.name)
            for child in sorted(target.iterdir())
            if include_service or not _is_service_name(child.name)
        ]

    # ---- Deletion and trash -------------------------------------------------

    @contextlib.contextmanager
    def _trash_lock(self, repository: Repository) -> Iterator[None]:
        root = self.repository_dir(repository)
        root.mkdir(parents=True, exist_ok=True)
        with portalocker.Lock(str(root / TRASH_LOCK_FILE), "w", timeout=TRASH_LOCK_TIMEOUT):
            yield

    def _check_trash_slot(self, path: RepositoryPath, shadow: Path) -> None:
        """Refuse a soft delete that would clobber or be blocked by older trash content."""
        if shadow.is_dir():
            raise InvalidTargetError(
                f"Trash already holds a directory at {path}; restore or empty it first"
            )
        trash = self.repository_dir(path.repository) / TRASH_DIR
        for parent in shadow.parents:
            if parent.exists() and not parent.is_dir():
                raise InvalidTargetError(
                    f"Trash holds a file where {path} needs a directory; restore or empty it first"
                )
            if parent == trash:
                break

    def delete(self, path: RepositoryPath) -> None:
        target = self.target(path)
        if target.is_dir():
            target.rmdir()
            logger.debug("Removed directory %s", path)
            return

        if not path.repository.trash_enabled:
            target.unlink()
            logger.debug("Unlinked %s (trash disabled)", path)
            return

        shadow = self.trash_target(path)
        with self._trash_lock(path.repository):
            self._check_trash_slot(path, shadow)
            shadow.parent.mkdir(parents=True, exist_ok=True)
            os.replace(target, shadow)
        logger.debug("Moved %s to trash", path)

    def delete_trash(self, path: RepositoryPath) -> None:
        shadow = self.trash_target(path)
        with self._trash_lock(path.repository):
            if shadow.is_dir():
                shutil.rmtree(shadow)
            elif shadow.exists():
                shadow.unlink()
            else:
                logger.debug("Nothing in trash for %s", path)
                return
        logger.debug("Purged trash for %s", path)

    def restore_trash(self, path: RepositoryPath) -> Optional[RepositoryPath]:
        shadow = self.trash_target(path)
        with self._trash_lock(path.repository):
            if not shadow.exists():
                logger.debug("Nothing in trash for %s", path)
                return None

            if shadow.is_dir():
                destination = self.target(path)
                for source in sorted(p for p in shadow.rglob("*") if not p.is_dir()):
                    dest = destination / source.relative_to(shadow)
                    dest.parent.mkdir(parents=True, exist_ok=True)
                    os.replace(source, dest)
                shutil.rmtree(shadow)
            else:
                dest = self.target(path)
                dest.parent.mkdir(parents=True, exist_ok=True)
                os.replace(shadow, dest)

        logger.debug("Restored %s from trash", path)
        return path
