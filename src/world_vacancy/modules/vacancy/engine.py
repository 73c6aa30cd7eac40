"""The Core Logic Engine for zone vacancy.

This module contains the pure business logic. It accepts occupancy readings
and time, and returns state transitions plus the actions they require. It
never reads the world or issues commands itself.

Licensed under MIT License
"""

import logging
from typing import Any, Mapping

from .models import (
    EngineResult,
    StateTransition,
    ZoneAction,
    ZoneConfig,
    ZoneRuntimeState,
    ZoneStatus,
    ZoneStep,
)

_LOGGER = logging.getLogger(__name__)

# Slack when comparing against a due time; float sums like (t + 10) - t can
# land just short of 10.
DUE_TOLERANCE = 1e-6


def step_zone(
    config: ZoneConfig,
    occupant_count: int,
    prior: ZoneRuntimeState,
    now: float,
    cooldown: float,
) -> ZoneStep:
    """Compute the next state of one zone from a fresh occupancy reading.

    Args:
        config: The zone's configuration.
        occupant_count: Live occupant count (never a cached value).
        prior: The zone's current state.
        now: Current monotonic time.
        cooldown: Seconds the zone must stay empty before reduction.

    Returns:
        ZoneStep with the new state and the action it requires, if any.
    """
    if occupant_count > 0:
        if prior.reduced:
            return ZoneStep(config.name, prior, ZoneRuntimeState(), ZoneAction.RELOAD, "repopulated")
        if prior.vacated_at is not None:
            return ZoneStep(config.name, prior, ZoneRuntimeState(), None, "repopulated")
        return ZoneStep(config.name, prior, prior)

    # Empty zone
    if prior.reduced:
        return ZoneStep(config.name, prior, prior)

    if prior.vacated_at is None:
        return ZoneStep(config.name, prior, ZoneRuntimeState(vacated_at=now), None, "vacated")

    if time_until_due(prior, now, cooldown) <= DUE_TOLERANCE:
        return ZoneStep(
            config.name,
            prior,
            ZoneRuntimeState(vacated_at=prior.vacated_at, reduced=True),
            ZoneAction.REDUCE,
            "cooldown_elapsed",
        )

    return ZoneStep(config.name, prior, prior)


def time_until_due(state: ZoneRuntimeState, now: float, cooldown: float) -> float:
    """Seconds left before a pending-vacant zone may be reduced."""
    assert state.vacated_at is not None
    return state.vacated_at + cooldown - now


class VacancyEngine:
    """The functional core of the vacancy system."""

    def __init__(
        self,
        configs: list[ZoneConfig],
        cooldown_seconds: float,
        initial_state: dict[str, ZoneRuntimeState] | None = None,
    ) -> None:
        """Initialize the engine with static configuration.

        Args:
            configs: List of zone configurations.
            cooldown_seconds: Seconds a zone must stay empty before reduction.
            initial_state: Optional initial state dictionary (tests, restarts).
        """
        self.configs: dict[str, ZoneConfig] = {c.name: c for c in configs}
        self.cooldown_seconds = cooldown_seconds

        self.state: dict[str, ZoneRuntimeState] = {c.name: ZoneRuntimeState() for c in configs}
        if initial_state:
            for name, state in initial_state.items():
                if name in self.configs:
                    self.state[name] = state

    @property
    def zone_names(self) -> list[str]:
        return list(self.configs)

    def evaluate(self, snapshot: Mapping[str, int | None], now: float) -> EngineResult:
        """Run one evaluation pass over every configured zone.

        Zones due for reduction are returned in ``reductions`` but NOT
        committed; see commit_reduction().

        Args:
            snapshot: zone name -> live occupant count (None = zone absent).
            now: Current monotonic time.

        Returns:
            EngineResult with committed transitions and pending reductions.
        """
        _LOGGER.debug(f"Evaluating {len(self.configs)} zones at {now}")
        transitions: list[StateTransition] = []
        reductions: list[ZoneStep] = []
        newly_vacated: list[str] = []
        skipped: list[str] = []
        reload_required = False
        next_check_in: float | None = None

        for name, config in self.configs.items():
            count = snapshot.get(name)
            if count is None:
                _LOGGER.warning(f"Zone not found, skipping: {name}")
                skipped.append(name)
                continue

            step = step_zone(config, count, self.state[name], now, self.cooldown_seconds)

            if step.action == ZoneAction.REDUCE:
                reductions.append(step)
                continue

            if step.action == ZoneAction.RELOAD:
                reload_required = True

            if step.changed:
                transitions.append(self._commit(step))
                if step.new_state.status == ZoneStatus.PENDING_VACANT:
                    newly_vacated.append(name)

            if step.new_state.status == ZoneStatus.PENDING_VACANT:
                remaining = time_until_due(step.new_state, now, self.cooldown_seconds)
                if next_check_in is None or remaining < next_check_in:
                    next_check_in = remaining

        return EngineResult(
            transitions=transitions,
            reductions=reductions,
            reload_required=reload_required,
            newly_vacated=newly_vacated,
            skipped=skipped,
            next_check_in=next_check_in,
        )

    def commit_reduction(self, step: ZoneStep) -> StateTransition | None:
        """Commit a reduction previously returned by evaluate().

        The step is only applied if the zone's state is still the one the
        step was computed from; otherwise it is stale and ignored.

        Returns:
            The committed transition, or None if the step was stale.
        """
        if self.state.get(step.zone) != step.previous_state:
            _LOGGER.debug(f"  {step.zone}: Stale reduction ignored")
            return None
        return self._commit(step)

    def mark_restored(self, snapshot: Mapping[str, int | None]) -> list[StateTransition]:
        """Record that a reload restored every zone's distances.

        Zones that are reduced and not populated keep their vacancy timestamp
        but lose the reduced flag, so a later pass reduces them again. Zones
        absent from the snapshot count as not populated: the reload restored
        them too.

        Args:
            snapshot: The occupancy snapshot the reload decision was made on.

        Returns:
            Transitions for every zone put back into PENDING_VACANT.
        """
        transitions = []
        for name, state in self.state.items():
            count = snapshot.get(name)
            if not state.reduced or (count is not None and count > 0):
                continue
            step = ZoneStep(
                name,
                state,
                ZoneRuntimeState(vacated_at=state.vacated_at),
                None,
                "restored_by_reload",
            )
            transitions.append(self._commit(step))
        return transitions

    def _commit(self, step: ZoneStep) -> StateTransition:
        self.state[step.zone] = step.new_state
        _LOGGER.info(
            f"  {step.zone}: {step.previous_state.status.name} -> "
            f"{step.new_state.status.name} ({step.reason})"
        )
        return StateTransition(
            zone=step.zone,
            previous_state=step.previous_state,
            new_state=step.new_state,
            reason=step.reason,
        )

    def export_state(self) -> dict[str, dict[str, Any]]:
        """Creates a JSON-serializable dump of the current state.

        Returns:
            dict: { "world_nether": { "status": "reduced", "vacated_at": 12.5,
                "reduced": true } }
        """
        return {
            name: {
                "status": state.status.value,
                "vacated_at": state.vacated_at,
                "reduced": state.reduced,
            }
            for name, state in self.state.items()
        }
