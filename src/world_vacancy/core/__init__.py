"""
Core components of the world-vacancy kernel.

This package contains:
- bus: Event Bus implementation
- sequencer: Clocks and the single-threaded deferred-task sequencer
"""

from world_vacancy.core.bus import Event, EventBus, EventFilter
from world_vacancy.core.sequencer import (
    AsyncioSequencer,
    Clock,
    ManualClock,
    ManualSequencer,
    MonotonicClock,
    Sequencer,
)

__all__ = [
    "Event",
    "EventBus",
    "EventFilter",
    "Clock",
    "MonotonicClock",
    "ManualClock",
    "Sequencer",
    "ManualSequencer",
    "AsyncioSequencer",
]
