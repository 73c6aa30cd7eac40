"""
Base classes and protocols for world-vacancy modules.

Modules are plug-ins that add behavior on top of the server's zones.
"""

from abc import ABC, abstractmethod
from typing import Dict


class ZoneModule(ABC):
    """
    Base class for zone modules.

    A module:
    - Receives events from the Event Bus
    - Uses the server adapter to read live zone state and issue commands
    - Maintains its own runtime state
    - Emits semantic events that other modules can consume
    """

    @property
    @abstractmethod
    def id(self) -> str:
        """Unique identifier for this module type."""
        pass

    @property
    @abstractmethod
    def CURRENT_CONFIG_VERSION(self) -> int:
        """Current configuration version for this module."""
        pass

    @abstractmethod
    def attach(self, bus, adapter) -> None:
        """
        Attach the module to the host.

        Register event subscriptions and capture references to bus and adapter.

        Args:
            bus: EventBus instance
            adapter: ServerAdapter instance
        """
        pass

    @abstractmethod
    def default_config(self) -> Dict:
        """
        Get default configuration for this module.

        Returns:
            Default configuration dict
        """
        pass

    @abstractmethod
    def config_schema(self) -> Dict:
        """
        Get JSON-schema-like definition of the module configuration.

        Returns:
            Schema dict that UIs and validators can use
        """
        pass

    def migrate_config(self, config: Dict) -> Dict:
        """
        Migrate configuration to current version.

        Default implementation returns config unchanged.
        Override to handle version upgrades.

        Args:
            config: Configuration dict (potentially older version)

        Returns:
            Migrated configuration dict
        """
        return config
