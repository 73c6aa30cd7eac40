"""
Vacancy module for world-vacancy.

Reduces view/simulation distances of zones that have been empty for a
cooldown, and restores them when players come back.

Features:
- Live occupancy reads (no cached counts)
- Debounced evaluation of join/quit/transfer/teleport bursts
- Per-zone POPULATED / PENDING_VACANT / REDUCED state machine
- Single reload before deferred, re-validated reductions
- Stale timers are harmless no-ops
"""

from .module import VacancyModule
from .models import (
    Command,
    ConfigError,
    EngineResult,
    EvaluationPass,
    StateTransition,
    VacancyConfig,
    ZoneAction,
    ZoneConfig,
    ZoneRuntimeState,
    ZoneStatus,
    ZoneStep,
)
from .engine import VacancyEngine, step_zone
from .tracker import OccupancyTracker
from .debounce import DebounceScheduler
from .coordinator import ActionCoordinator
from .adapter import (
    ServerAdapter,
    ConsoleServerAdapter,
    MockServerAdapter,
    format_console_command,
)
from .config import load_config, load_config_file

__all__ = [
    "VacancyModule",
    "VacancyEngine",
    "step_zone",
    "OccupancyTracker",
    "DebounceScheduler",
    "ActionCoordinator",
    "ServerAdapter",
    "ConsoleServerAdapter",
    "MockServerAdapter",
    "format_console_command",
    "load_config",
    "load_config_file",
    "Command",
    "ConfigError",
    "EngineResult",
    "EvaluationPass",
    "StateTransition",
    "VacancyConfig",
    "ZoneAction",
    "ZoneConfig",
    "ZoneRuntimeState",
    "ZoneStatus",
    "ZoneStep",
]
