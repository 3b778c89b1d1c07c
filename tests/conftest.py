"""Shared test fixtures and utilities."""

from pathlib import Path

import pytest

from artifact_layout.context import LayoutContext
from artifact_layout.models import Configuration, Repository, Storage

STORAGE = "storage0"


@pytest.fixture
def configuration(tmp_path):
    """One storage with a repository per layout and per trash policy."""
    return Configuration(
        base_dir=str(tmp_path / "storages"),
        storages={
            STORAGE: Storage(repositories={
                "releases": Repository(layout="Maven 2"),
                "nuget": Repository(layout="Nuget Hierarchical"),
                "raw": Repository(layout="Raw"),
                "forceable": Repository(layout="Raw", allows_force_deletion=True),
                "no-trash": Repository(layout="Raw", trash_enabled=False),
            }),
        },
    )


@pytest.fixture
def context(configuration):
    """Layout context with the built-in providers registered."""
    return LayoutContext(configuration)


@pytest.fixture
def repo_dir(context):
    """Factory fixture returning the physical directory of a repository."""
    def _repo_dir(repository_id: str, storage_id: str = STORAGE) -> Path:
        repository = context.configuration.get_repository(storage_id, repository_id)
        provider = context.storage_registry.get_provider(repository.implementation)
        return provider.repository_dir(repository)
    return _repo_dir


@pytest.fixture
def write_file(repo_dir):
    """Factory fixture to write files straight into a repository directory."""
    def _write(repository_id: str, path: str, content: bytes = b"test content") -> Path:
        file_path = repo_dir(repository_id) / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(content)
        return file_path
    return _write
