"""Configuration loading and lookup."""

import os
from pathlib import Path
from typing import Optional, Union

import platformdirs
import yaml
from pydantic import ValidationError

from .constants import APP_NAME, CONFIG_ENV_VAR, CONFIG_FILE
from .errors import ConfigError
from .models import Configuration, Repository, Storage


def default_config_path() -> Path:
    """Config file location when neither --config nor the env var is set."""
    return Path(platformdirs.user_config_dir(APP_NAME, APP_NAME)) / CONFIG_FILE


def resolve_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Resolution order: explicit path > ARTIFACT_LAYOUT_CONFIG > platform default."""
    if path:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return default_config_path()


def load_configuration(path: Optional[Union[str, Path]] = None) -> Configuration:
    """Load storages.yaml into a Configuration.

    Raises:
        ConfigError: If the file is missing, not YAML, or fails validation
    """
    cfg_path = resolve_config_path(path)
    if not cfg_path.exists():
        raise ConfigError(f"Configuration file not found: {cfg_path}")

    try:
        data = yaml.safe_load(cfg_path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {cfg_path}: {e}") from e

    try:
        return Configuration.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {cfg_path}: {e}") from e


def save_configuration(configuration: Configuration, path: Union[str, Path]) -> None:
    """Write a configuration back as YAML (ids are implied by the mapping keys)."""
    data = configuration.model_dump(
        exclude={"storages": {"__all__": {"id": True, "repositories": {"__all__": {"id", "storage_id"}}}}},
        exclude_none=True,
    )
    Path(path).write_text(yaml.safe_dump(data, sort_keys=True))


class ConfigurationManager:
    """Read-only access to the loaded configuration."""

    def __init__(self, configuration: Configuration):
        self.configuration = configuration

    @classmethod
    def from_file(cls, path: Optional[Union[str, Path]] = None) -> "ConfigurationManager":
        return cls(load_configuration(path))

    def get_storage(self, storage_id: str) -> Storage:
        return self.configuration.get_storage(storage_id)

    def get_repository(self, storage_id: str, repository_id: str) -> Repository:
        return self.get_storage(storage_id).get_repository(repository_id)

    def get_storages(self):
        return self.configuration.storages
