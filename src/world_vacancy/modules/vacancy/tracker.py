"""Occupancy tracking on top of the server adapter."""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from .adapter import ServerAdapter

logger = logging.getLogger(__name__)

OccupancyListener = Callable[[str], None]


class OccupancyTracker:
    """
    Live occupant counts per zone.

    Counts are never cached: every query goes to the server adapter so it
    reflects the instantaneous occupancy, including in-flight transfers.
    A zone the server does not know about yields None, which callers must
    treat as "skip", not as an empty zone.
    """

    def __init__(self, adapter: ServerAdapter) -> None:
        self._adapter = adapter
        self._listeners: List[OccupancyListener] = []
        self.notifications: Dict[str, int] = {}

    def add_listener(self, listener: OccupancyListener) -> None:
        """Register a callable to receive zone names on every change notification."""
        self._listeners.append(listener)

    def on_occupancy_changed(self, zone: str) -> None:
        """
        Record that something may have changed who is present in a zone.

        Called by the event boundary on entry, exit and transfers.

        Args:
            zone: Zone that may have changed
        """
        self.notifications[zone] = self.notifications.get(zone, 0) + 1
        logger.debug(f"Occupancy change notified for {zone}")
        for listener in self._listeners:
            listener(zone)

    def current_occupant_count(self, zone: str) -> Optional[int]:
        """
        Get the live occupant count of a zone.

        Args:
            zone: Zone name

        Returns:
            Number of occupants, or None if the zone is absent
        """
        occupants = self._adapter.list_occupants(zone)
        if occupants is None:
            return None
        return len(occupants)

    def snapshot(self, zones: Iterable[str]) -> Dict[str, Optional[int]]:
        """Read the live count of several zones at once."""
        return {zone: self.current_occupant_count(zone) for zone in zones}
