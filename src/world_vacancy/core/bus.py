"""
Event Bus implementation for zone-aware event routing.

The Event Bus is a simple, synchronous dispatcher for domain events.
"""

from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Optional, Dict, Any, Callable, List
import logging

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    """Get current UTC time (for default factory)."""
    return datetime.now(UTC)


# Player events published by the host integration
PLAYER_JOINED = "player.joined"
PLAYER_QUIT = "player.quit"
PLAYER_CHANGED_ZONE = "player.changed_zone"
PLAYER_TELEPORTED = "player.teleported"

PLAYER_EVENT_TYPES = (
    PLAYER_JOINED,
    PLAYER_QUIT,
    PLAYER_CHANGED_ZONE,
    PLAYER_TELEPORTED,
)


@dataclass
class Event:
    """
    A domain event in the world-vacancy system.

    Attributes:
        type: Event type (e.g., "player.joined", "vacancy.changed")
        source: Event source (e.g., "server", "vacancy")
        zone: Optional zone name this event relates to
        entity_id: Optional entity (player) ID this event relates to
        payload: Event-specific data
        timestamp: When the event occurred
    """

    type: str
    source: str
    zone: Optional[str] = None
    entity_id: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=_utc_now)


class EventFilter:
    """
    Filter for event subscriptions.

    Allows subscribers to filter events by type and zone.
    """

    def __init__(
        self,
        event_type: Optional[str] = None,
        zone: Optional[str] = None,
    ):
        """
        Initialize an event filter.

        Args:
            event_type: Filter by event type (None = all types)
            zone: Filter by zone name (None = all zones)
        """
        self.event_type = event_type
        self.zone = zone

    def matches(self, event: Event) -> bool:
        """
        Check if an event matches this filter.

        A zone filter also matches transfer events whose payload names the
        filtered zone as ``from_zone``.

        Args:
            event: The event to check

        Returns:
            True if the event matches the filter
        """
        if self.event_type and event.type != self.event_type:
            return False

        if self.zone:
            return self.zone in (event.zone, event.payload.get("from_zone"))

        return True

    def __repr__(self) -> str:
        return f"EventFilter(event_type={self.event_type!r}, zone={self.zone!r})"


EventHandler = Callable[[Event], None]


class EventBus:
    """
    Simple, synchronous event bus for world-vacancy events.

    Handlers are wrapped in try/except to prevent one bad module from crashing the host.
    """

    def __init__(self) -> None:
        """Initialize the event bus."""
        self._handlers: List[tuple[EventFilter, EventHandler]] = []

    def subscribe(
        self,
        handler: EventHandler,
        event_filter: Optional[EventFilter] = None,
    ) -> None:
        """
        Subscribe to events.

        Args:
            handler: Callable that receives Event objects
            event_filter: Optional filter for events (None = receive all events)
        """
        if event_filter is None:
            event_filter = EventFilter()

        self._handlers.append((event_filter, handler))
        logger.debug(f"Subscribed handler {handler.__name__} with filter {event_filter}")

    def publish(self, event: Event) -> None:
        """
        Publish an event to all matching subscribers.

        Handlers are called synchronously and wrapped in try/except.

        Args:
            event: The event to publish
        """
        logger.debug(f"Publishing event: {event.type} from {event.source}")

        for event_filter, handler in list(self._handlers):
            if event_filter.matches(event):
                try:
                    handler(event)
                except Exception as e:
                    logger.error(
                        f"Error in event handler {handler.__name__} "
                        f"for event {event.type}: {e}",
                        exc_info=True,
                    )

    def unsubscribe(self, handler: EventHandler) -> None:
        """
        Unsubscribe a handler from all events.

        Args:
            handler: The handler to unsubscribe
        """
        self._handlers = [(f, h) for f, h in self._handlers if h != handler]
        logger.debug(f"Unsubscribed handler {handler.__name__}")
