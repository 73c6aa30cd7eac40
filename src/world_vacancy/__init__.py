"""
world-vacancy: Reduce distances of game worlds nobody is playing in.

This library provides:
- Live occupancy tracking per zone (world)
- Debounced, race-tolerant vacancy state machine
- Ordered reload/reduce commands for an external distance subsystem
- A synchronous Event Bus and a deferred-task sequencer
"""

from world_vacancy.core.bus import Event, EventBus, EventFilter
from world_vacancy.core.sequencer import ManualSequencer, AsyncioSequencer

__version__ = "0.1.0"

__all__ = [
    "Event",
    "EventBus",
    "EventFilter",
    "ManualSequencer",
    "AsyncioSequencer",
]
