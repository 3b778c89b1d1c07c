"""Deletion, trash emptying and restoration.

Per path::

    Present --delete--> Trashed --undelete--> Present
    Present --delete(force), policy allows--> Gone
    Trashed --empty trash--> Gone

Soft delete is the storage provider's default (it moves files into the
repository trash when trash is enabled); ``force`` additionally purges the
trash copy, but only for repositories with ``allows_force_deletion``.
"""

import logging
from typing import List

from pydantic import BaseModel, Field

from ..config import ConfigurationManager
from ..errors import LayoutError
from ..storage import RepositoryPath
from .formats import LayoutFormat
from .resolver import PathResolver

logger = logging.getLogger(__name__)


class TrashSweepResult(BaseModel):
    """Outcome of a sweep over every repository (``storage:repository`` keys)."""

    processed: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class TrashManager:
    """Delete / undelete operations for one layout format."""

    def __init__(self, layout_format: LayoutFormat, resolver: PathResolver, configuration: ConfigurationManager):
        self.layout_format = layout_format
        self.resolver = resolver
        self.configuration = configuration

    # ---- Delete -------------------------------------------------------------

    def delete(self, storage_id: str, repository_id: str, path: str, force: bool = False) -> None:
        """
        Delete a file or a directory tree.

        A missing path is not an error. Directories are removed bottom-up:
        every file first, then each directory once its children are gone.
        The repository root itself is emptied but kept, along with its
        service folders.
        """
        repository = self.configuration.get_repository(storage_id, repository_id)
        target = self.resolver.resolve_relative(repository, path)

        logger.debug("Checking in %s:%s(%s)...", storage_id, repository_id, path)
        if not target.exists():
            logger.warning("Path not found: path-[%s]", target)
            return

        if not target.is_dir():
            self.do_delete_path(target, force, True)
        else:
            self._delete_tree(target, force)

        logger.debug("Removed /%s/%s", repository_id, path)

    def _delete_tree(self, directory: RepositoryPath, force: bool) -> None:
        # below the root, service entries go with their directory
        for child in directory.iterdir(include_service=not directory.is_root):
            if child.is_dir():
                self._delete_tree(child, force)
            else:
                self.do_delete_path(child, force, False)

        if directory.is_root:
            return
        directory.provider.delete(directory)

    def do_delete_path(self, path: RepositoryPath, force: bool, delete_checksum: bool) -> None:
        """
        Remove one file, then its format companions when ``delete_checksum``.

        Args:
            path: File to remove
            force: Purge the trash copy too (only if the repository allows it)
            delete_checksum: Cascade to the format's companion files
        """
        provider = path.provider
        provider.delete(path)

        if force and path.repository.allows_force_deletion:
            provider.delete_trash(path)

        if not delete_checksum:
            return

        for name in self.layout_format.checksum_companions(path.name):
            companion = path.resolve_sibling(name)
            if not companion.exists():
                logger.debug("No companion to delete: %s", companion)
                continue
            self.do_delete_path(companion, force, False)

    # ---- Trash --------------------------------------------------------------

    def delete_trash(self, storage_id: str, repository_id: str) -> None:
        """Empty one repository's trash."""
        logger.debug("Emptying trash for repositoryId %s...", repository_id)
        repository = self.configuration.get_repository(storage_id, repository_id)
        root = self.resolver.resolve_repository_root(repository)
        root.provider.delete_trash(root)

    def delete_trash_all(self) -> TrashSweepResult:
        """
        Empty the trash of every repository in every storage.

        Repositories with ``allows_deletion`` off are skipped with a warning;
        a failing repository is logged and the sweep goes on.
        """
        result = TrashSweepResult()
        for storage in self.configuration.get_storages().values():
            for repository in storage.repositories.values():
                if not repository.allows_deletion:
                    logger.warning("Repository %s does not support removal of trash.", repository.key)
                    result.skipped.append(repository.key)
                    continue
                try:
                    self.delete_trash(storage.id, repository.id)
                except (LayoutError, OSError) as e:
                    logger.error("Failed to empty trash of %s: %s", repository.key, e)
                    result.failed.append(repository.key)
                else:
                    result.processed.append(repository.key)
        return result

    # ---- Undelete -----------------------------------------------------------

    def undelete(self, storage_id: str, repository_id: str, path: str) -> None:
        """Restore a path and its format companions from trash."""
        logger.debug("Attempting to restore: storageId-[%s]; repoId-[%s]; path-[%s];",
                     storage_id, repository_id, path)

        repository = self.configuration.get_repository(storage_id, repository_id)
        artifact_path = self.resolver.resolve(repository, path)
        provider = artifact_path.provider

        if provider.restore_trash(artifact_path) is None:
            logger.warning("Nothing to restore from trash: path-[%s]", artifact_path)
        if artifact_path.is_root:
            return

        for name in self.layout_format.checksum_companions(artifact_path.name):
            provider.restore_trash(artifact_path.resolve_sibling(name))

    def undelete_trash(self, storage_id: str, repository_id: str) -> None:
        """
        Restore a repository's whole trash.

        Repositories without trash only get a warning; restoration is still
        attempted so files trashed before the policy changed come back.
        """
        repository = self.configuration.get_repository(storage_id, repository_id)

        logger.debug("Restoring all artifacts from the trash of %s...", repository.key)
        if not repository.trash_enabled:
            logger.warning("Repository %s does not have trash enabled.", repository.key)

        root = self.resolver.resolve_repository_root(repository)
        root.provider.restore_trash(root)

    def undelete_trash_all(self) -> TrashSweepResult:
        """Restore the trash of every repository, regardless of policy."""
        result = TrashSweepResult()
        for storage in self.configuration.get_storages().values():
            for repository in storage.repositories.values():
                try:
                    self.undelete_trash(storage.id, repository.id)
                except (LayoutError, OSError) as e:
                    logger.error("Failed to restore trash of %s: %s", repository.key, e)
                    result.failed.append(repository.key)
                else:
                    result.processed.append(repository.key)
        return result
