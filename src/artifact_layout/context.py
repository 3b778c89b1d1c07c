"""Process context: configuration plus the provider registries built from it."""

from pathlib import Path
from typing import List, Optional, Union

from .config import ConfigurationManager, load_configuration
from .errors import ConfigError
from .layout import LayoutProvider, LayoutProviderRegistry, RawLayout, register_default_layouts
from .models import Configuration
from .storage import StorageProviderRegistry, make_storage_provider_registry


class LayoutContext:
    """Startup wiring for layout providers.

    Built once before any request handling: loads the configuration, creates
    both registries, registers the built-in layouts and checks that every
    repository maps to exactly one storage provider and one layout provider.
    """

    def __init__(self, configuration: Configuration):
        """Initialize context from an already loaded configuration.

        Raises:
            ConfigError: If a repository names an unregistered implementation or layout
        """
        self.configuration = ConfigurationManager(configuration)
        self.storage_registry: StorageProviderRegistry = make_storage_provider_registry(configuration)
        self.layout_registry = LayoutProviderRegistry()
        register_default_layouts(self.layout_registry, self.storage_registry, self.configuration)
        self.validate()

    @classmethod
    def from_file(cls, path: Optional[Union[str, Path]] = None) -> "LayoutContext":
        """Load configuration (see ``config.resolve_config_path``) and build the context."""
        return cls(load_configuration(path))

    def validate(self) -> None:
        """Check every repository against both registries."""
        problems: List[str] = []
        for repository in self.configuration.configuration.repositories():
            if repository.implementation not in self.storage_registry:
                problems.append(f"{repository.key}: unknown implementation '{repository.implementation}'")
            if repository.layout not in self.layout_registry:
                problems.append(f"{repository.key}: unknown layout '{repository.layout}'")
        if problems:
            raise ConfigError("Invalid repository configuration:\n  " + "\n  ".join(problems))

    def get_provider(self, alias: str) -> LayoutProvider:
        return self.layout_registry.get_provider(alias)

    def provider_for(self, storage_id: str, repository_id: str) -> LayoutProvider:
        """Layout provider handling a repository."""
        repository = self.configuration.get_repository(storage_id, repository_id)
        return self.layout_registry.get_provider(repository.layout)

    @property
    def sweep_provider(self) -> LayoutProvider:
        """Provider used for whole-configuration trash sweeps (format independent)."""
        return self.layout_registry.get_provider(RawLayout.alias)
