"""Data models for the vacancy module.

This module defines the core data structures used throughout the vacancy system.
Config and state classes are frozen (immutable); the engine replaces a zone's
state on every transition instead of mutating it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class ConfigError(ValueError):
    """Raised when vacancy configuration is invalid."""


class ZoneStatus(Enum):
    """Vacancy status of a zone.

    POPULATED: At least one occupant (or never seen empty).
    PENDING_VACANT: Empty since vacated_at; cooldown running or elapsed.
    REDUCED: Reduced distances applied and not yet restored.
    """

    POPULATED = "populated"
    PENDING_VACANT = "pending_vacant"
    REDUCED = "reduced"


class ZoneAction(Enum):
    """Action a single zone step asks the coordinator to take."""

    RELOAD = "reload"  # Restore every zone on the external subsystem
    REDUCE = "reduce"  # Apply this zone's reduced distances


@dataclass(frozen=True)
class ZoneConfig:
    """Configuration for a zone.

    Attributes:
        name: Zone (world) name as known to the server.
        reduced_view_distance: View distance applied once the zone is reduced.
        reduced_sim_distance: Simulation distance applied once the zone is reduced.
    """

    name: str
    reduced_view_distance: int
    reduced_sim_distance: int

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigError("Zone name must not be empty")
        for attr in ("reduced_view_distance", "reduced_sim_distance"):
            value = getattr(self, attr)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"Zone '{self.name}': {attr} must be an integer, got {value!r}")
            if value < 0:
                raise ConfigError(f"Zone '{self.name}': {attr} must be >= 0, got {value}")


@dataclass(frozen=True)
class VacancyConfig:
    """Global vacancy configuration.

    Attributes:
        zones: Configured zones, in evaluation order.
        cooldown_seconds: Seconds a zone must stay empty before reduction (default: 10).
        settle_delay: Seconds to coalesce bursts of occupancy changes (default: 1.0).
        reload_settle_delay: Seconds between a reload and the reductions that follow it
            (default: 0.5).
        command_prefix: Console command prefix of the external subsystem.
    """

    zones: Tuple[ZoneConfig, ...] = ()
    cooldown_seconds: int = 10
    settle_delay: float = 1.0
    reload_settle_delay: float = 0.5
    command_prefix: str = "viewdistancetweaks"

    def __post_init__(self) -> None:
        if isinstance(self.cooldown_seconds, bool) or not isinstance(self.cooldown_seconds, int):
            raise ConfigError(f"cooldown_seconds must be an integer, got {self.cooldown_seconds!r}")
        if self.cooldown_seconds <= 0:
            raise ConfigError(f"cooldown_seconds must be > 0, got {self.cooldown_seconds}")
        for attr in ("settle_delay", "reload_settle_delay"):
            value = getattr(self, attr)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{attr} must be a number, got {value!r}")
        if self.settle_delay <= 0:
            raise ConfigError(f"settle_delay must be > 0, got {self.settle_delay}")
        if self.reload_settle_delay < 0:
            raise ConfigError(f"reload_settle_delay must be >= 0, got {self.reload_settle_delay}")

        names = [z.name for z in self.zones]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ConfigError(f"Duplicate zone names: {', '.join(duplicates)}")

    def get_zone(self, name: str) -> Optional[ZoneConfig]:
        """Look up a zone config by name."""
        for zone in self.zones:
            if zone.name == name:
                return zone
        return None


@dataclass(frozen=True)
class ZoneRuntimeState:
    """Runtime state for a zone (Immutable).

    The occupant count is deliberately absent: it is read live from the
    occupancy tracker on every evaluation pass.

    Attributes:
        vacated_at: Monotonic time the zone was first seen empty in this episode.
                    Kept while reduced so repopulation can be detected.
        reduced: Whether reduced distances have been applied.
    """

    vacated_at: Optional[float] = None
    reduced: bool = False

    @property
    def status(self) -> ZoneStatus:
        if self.reduced:
            return ZoneStatus.REDUCED
        if self.vacated_at is not None:
            return ZoneStatus.PENDING_VACANT
        return ZoneStatus.POPULATED


@dataclass(frozen=True)
class ZoneStep:
    """Outcome of evaluating one zone against one occupancy reading."""

    zone: str
    previous_state: ZoneRuntimeState
    new_state: ZoneRuntimeState
    action: Optional[ZoneAction] = None
    reason: str = "unchanged"

    @property
    def changed(self) -> bool:
        return self.previous_state != self.new_state


@dataclass(frozen=True)
class StateTransition:
    """A record of a committed state change."""

    zone: str
    previous_state: ZoneRuntimeState
    new_state: ZoneRuntimeState
    reason: str


@dataclass(frozen=True)
class EngineResult:
    """Result of one engine evaluation.

    Attributes:
        transitions: State changes committed during the evaluation.
        reductions: Zones due for reduction. Not committed: the coordinator
            commits each one when it actually issues the reduce commands.
        reload_required: True if any zone went REDUCED -> POPULATED.
        newly_vacated: Zones that went POPULATED -> PENDING_VACANT.
        skipped: Zones with no live counterpart (unknown/unloaded).
        next_check_in: Seconds until the earliest pending-vacant zone becomes
            due for reduction, or None if no zone is waiting.
    """

    transitions: list[StateTransition] = field(default_factory=list)
    reductions: list[ZoneStep] = field(default_factory=list)
    reload_required: bool = False
    newly_vacated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    next_check_in: Optional[float] = None


# Command names understood by the command-execution subsystem
RELOAD = "reload"
SET_VIEW_DISTANCE = "set-view-distance"
SET_SIM_DISTANCE = "set-sim-distance"


@dataclass(frozen=True)
class Command:
    """A fire-and-forget command for the external subsystem.

    Attributes:
        name: RELOAD, SET_VIEW_DISTANCE or SET_SIM_DISTANCE.
        zone: Target zone (None for system-wide commands).
        value: Distance to apply (None for RELOAD).
    """

    name: str
    zone: Optional[str] = None
    value: Optional[int] = None

    @classmethod
    def reload(cls) -> "Command":
        return cls(RELOAD)

    @classmethod
    def set_view_distance(cls, zone: str, value: int) -> "Command":
        return cls(SET_VIEW_DISTANCE, zone, value)

    @classmethod
    def set_sim_distance(cls, zone: str, value: int) -> "Command":
        return cls(SET_SIM_DISTANCE, zone, value)


@dataclass(frozen=True)
class EvaluationPass:
    """Everything one coordinator pass did, for the scheduler and for callers."""

    at: float
    engine_result: EngineResult
    transitions: list[StateTransition] = field(default_factory=list)
    commands: list[Command] = field(default_factory=list)
    deferred: bool = False

    @property
    def newly_vacated(self) -> list[str]:
        return self.engine_result.newly_vacated

    @property
    def next_check_in(self) -> Optional[float]:
        return self.engine_result.next_check_in
