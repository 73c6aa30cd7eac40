"""
Server adapter interface for the vacancy module.

The adapter provides an abstraction layer between the vacancy core and the
host game server. The integration layer provides a concrete implementation.

Design Principle:
    The adapter is intentionally minimal. The core only ever needs to ask
    "who is in this zone right now?" and to fire a command at the subsystem
    that owns view/simulation distances. Commands are fire-and-forget: the
    adapter has no way to report whether the subsystem accepted them.
"""

from abc import ABC, abstractmethod
from typing import AbstractSet, Dict, List, Optional, Set

from .models import Command, RELOAD, SET_SIM_DISTANCE, SET_VIEW_DISTANCE


class ServerAdapter(ABC):
    """
    Abstract interface for server operations.

    This interface is intentionally minimal:
    - list_occupants: Live occupancy query
    - execute_command: Fire a command at the distance subsystem
    - is_subsystem_available: Whether that subsystem is loaded at all
    """

    @abstractmethod
    def list_occupants(self, zone: str) -> Optional[AbstractSet[str]]:
        """
        Get the entities currently present in a zone.

        Must read the server's live state (never a cache), so that a query
        reflects in-flight transfers.

        Args:
            zone: Zone name

        Returns:
            Set of entity IDs, or None if the zone is unknown/unloaded
        """
        pass

    @abstractmethod
    def execute_command(self, command: Command) -> None:
        """
        Execute a command on the distance subsystem (fire-and-forget).

        Args:
            command: The command to execute
        """
        pass

    def is_subsystem_available(self) -> bool:
        """
        Check whether the distance subsystem is loaded.

        Returns:
            True if commands have somewhere to go
        """
        return True


def format_console_command(command: Command, prefix: str = "viewdistancetweaks") -> str:
    """
    Render a command as a server console line.

    Args:
        command: The command to render
        prefix: Console command of the distance subsystem

    Returns:
        Console line, e.g. "viewdistancetweaks viewdistance 4 world_nether"

    Raises:
        ValueError: If the command name is unknown or its arguments are missing
    """
    if command.name == RELOAD:
        return f"{prefix} reload"

    keywords = {
        SET_VIEW_DISTANCE: "viewdistance",
        SET_SIM_DISTANCE: "simulationdistance",
    }
    keyword = keywords.get(command.name)
    if keyword is None:
        raise ValueError(f"Unknown command: {command.name}")
    if command.zone is None or command.value is None:
        raise ValueError(f"Command {command.name} requires a zone and a value")
    return f"{prefix} {keyword} {command.value} {command.zone}"


class ConsoleServerAdapter(ServerAdapter):
    """
    Adapter for servers driven through console commands.

    Subclasses provide list_occupants() and dispatch_console(); commands are
    rendered with format_console_command().
    """

    def __init__(self, command_prefix: str = "viewdistancetweaks") -> None:
        self.command_prefix = command_prefix

    @abstractmethod
    def dispatch_console(self, line: str) -> None:
        """
        Dispatch a line on the server console.

        Args:
            line: Full console command line
        """
        pass

    def execute_command(self, command: Command) -> None:
        self.dispatch_console(format_console_command(command, self.command_prefix))


class MockServerAdapter(ServerAdapter):
    """
    Mock adapter for testing.

    Tracks executed commands and lets tests move occupants between zones.

    Example:
        adapter = MockServerAdapter(["world", "world_nether"])
        adapter.place("steve", "world")
        adapter.move("steve", "world_nether")
        adapter.remove("steve")
    """

    def __init__(self, zones: Optional[List[str]] = None) -> None:
        self._zones: Dict[str, Set[str]] = {z: set() for z in zones or []}
        self._commands: List[Command] = []
        self._queries: Dict[str, int] = {}
        self.subsystem_available = True

    # Test setup

    def load_zone(self, zone: str) -> None:
        """Make a zone live (empty)."""
        self._zones.setdefault(zone, set())

    def unload_zone(self, zone: str) -> None:
        """Unload a zone; its occupants are dropped."""
        self._zones.pop(zone, None)

    def set_occupants(self, zone: str, entities: List[str]) -> None:
        """Replace a zone's occupants (loads the zone if needed)."""
        for occupants in self._zones.values():
            occupants.difference_update(entities)
        self._zones[zone] = set(entities)

    def place(self, entity_id: str, zone: str) -> None:
        """Put an entity into a zone, removing it from wherever it was."""
        if zone not in self._zones:
            raise ValueError(f"Zone '{zone}' is not loaded")
        self.remove(entity_id)
        self._zones[zone].add(entity_id)

    def move(self, entity_id: str, zone: str) -> None:
        """Transfer an entity to another zone."""
        self.place(entity_id, zone)

    def remove(self, entity_id: str) -> None:
        """Take an entity out of every zone (quit)."""
        for occupants in self._zones.values():
            occupants.discard(entity_id)

    def get_commands(self) -> List[Command]:
        """Get executed commands, in order."""
        return self._commands.copy()

    def clear_commands(self) -> None:
        """Clear recorded commands."""
        self._commands.clear()

    def query_count(self, zone: str) -> int:
        """How many times a zone's occupants were queried."""
        return self._queries.get(zone, 0)

    # ServerAdapter implementation

    def list_occupants(self, zone: str) -> Optional[AbstractSet[str]]:
        self._queries[zone] = self._queries.get(zone, 0) + 1
        occupants = self._zones.get(zone)
        if occupants is None:
            return None
        return frozenset(occupants)

    def execute_command(self, command: Command) -> None:
        self._commands.append(command)

    def is_subsystem_available(self) -> bool:
        return self.subsystem_available
