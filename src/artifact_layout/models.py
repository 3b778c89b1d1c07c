"""Configuration data models: storages and their repositories.

The configuration is loaded once at startup and treated as read-only
afterwards. A repository keeps a back-reference to its storage by id only.
"""

from pathlib import Path
from typing import Dict, List, Optional

import platformdirs
from pydantic import BaseModel, Field, model_validator

from .constants import APP_NAME, FILE_SYSTEM_IMPLEMENTATION
from .errors import RepositoryNotFoundError, StorageNotFoundError


def default_base_dir() -> str:
    """Platform-appropriate root for filesystem-backed storages."""
    return str(Path(platformdirs.user_data_dir(APP_NAME, APP_NAME)) / "storages")


class Repository(BaseModel):
    """A repository inside a storage.

    Attributes:
        implementation: Storage provider tag ("file-system")
        layout: Layout provider alias ("Maven 2", "Nuget Hierarchical", "Raw")
        allows_force_deletion: Force delete may purge the trash copy
        allows_deletion: Trash may be emptied
        trash_enabled: Deleted files are moved to trash instead of unlinked
    """
    id: str = ""
    storage_id: str = ""
    implementation: str = FILE_SYSTEM_IMPLEMENTATION
    layout: str = "Maven 2"
    basedir: Optional[str] = None
    allows_force_deletion: bool = False
    allows_deletion: bool = True
    trash_enabled: bool = True

    @property
    def key(self) -> str:
        """Display key ``storage:repository``."""
        return f"{self.storage_id}:{self.id}"


class Storage(BaseModel):
    """A named collection of repositories."""
    id: str = ""
    basedir: Optional[str] = None
    repositories: Dict[str, Repository] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _bind_repositories(self):
        for repository_id, repository in self.repositories.items():
            if not repository.id:
                repository.id = repository_id
            elif repository.id != repository_id:
                raise ValueError(
                    f"Repository id '{repository.id}' does not match its key '{repository_id}'"
                )
            repository.storage_id = self.id
        return self

    def get_repository(self, repository_id: str) -> Repository:
        try:
            return self.repositories[repository_id]
        except KeyError:
            raise RepositoryNotFoundError(self.id, repository_id) from None


class Configuration(BaseModel):
    """Root configuration (stored in storages.yaml)."""
    base_dir: str = Field(default_factory=default_base_dir)
    storages: Dict[str, Storage] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _bind_storages(self):
        for storage_id, storage in self.storages.items():
            if not storage.id:
                storage.id = storage_id
            elif storage.id != storage_id:
                raise ValueError(f"Storage id '{storage.id}' does not match its key '{storage_id}'")
            for repository in storage.repositories.values():
                repository.storage_id = storage.id
        return self

    def get_storage(self, storage_id: str) -> Storage:
        try:
            return self.storages[storage_id]
        except KeyError:
            raise StorageNotFoundError(storage_id) from None

    def repositories(self) -> List[Repository]:
        """All repositories across all storages."""
        return [
            repository
            for storage in self.storages.values()
            for repository in storage.repositories.values()
        ]
