"""
CLI Context for managing application dependencies.

Provides a clean way to manage CLI-level dependencies like settings and the
object store, avoiding global state and enabling proper dependency injection.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .operations import Operations, OpsConfig
from .repository import open_store
from .settings import Settings, create_settings_from_env
from .storage.object_store import ObjectStore


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.

    Manages application-level dependencies (settings, store) that are
    initialized once and shared across a CLI command execution.
    """
    settings: Settings
    _store: Optional[ObjectStore] = None

    @classmethod
    def from_env(cls) -> CLIContext:
        """
        Create CLI context from environment variables.

        Returns:
            CLIContext with settings loaded from environment
        """
        return cls(settings=create_settings_from_env())

    @property
    def store(self) -> ObjectStore:
        """
        Get or create the object store (lazy initialization).

        Returns:
            ObjectStore rooted at the repository's objects directory
        """
        if self._store is None:
            self._store = open_store(self.settings)
        return self._store

    def operations(self, config: Optional[OpsConfig] = None) -> Operations:
        return Operations(config=config or OpsConfig(), settings=self.settings, store=self.store)
