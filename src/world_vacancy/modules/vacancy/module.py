"""VacancyModule - Reduce distances in zones nobody is in.

This module wires the vacancy engine to the host: player events from the
EventBus feed the occupancy tracker, the debounce scheduler turns bursts of
events into evaluation passes, and the coordinator issues commands through
the server adapter.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from world_vacancy.modules.base import ZoneModule
from world_vacancy.core.bus import Event, EventBus, EventFilter, PLAYER_EVENT_TYPES
from world_vacancy.core.sequencer import Sequencer

from .adapter import ConsoleServerAdapter, ServerAdapter
from .config import load_config
from .coordinator import ActionCoordinator
from .debounce import DebounceScheduler
from .engine import VacancyEngine
from .models import Command, EvaluationPass, StateTransition, VacancyConfig
from .tracker import OccupancyTracker

logger = logging.getLogger(__name__)


class VacancyModule(ZoneModule):
    """
    Zone vacancy module.

    Features:
    - Debounced evaluation of bursts of join/quit/transfer/teleport events
    - Cooldown before reducing an empty zone, cancelled by any repopulation
    - One system-wide reload when a reduced zone fills up again
    - Reductions deferred and re-validated after a reload

    Events Emitted:
    - vacancy.changed: When a zone changes status
    - vacancy.command: When a command is issued

    Events Consumed:
    - player.joined, player.quit, player.changed_zone, player.teleported
    """

    def __init__(
        self,
        config: Union[VacancyConfig, Dict[str, Any]],
        sequencer: Sequencer,
    ) -> None:
        if isinstance(config, dict):
            config = load_config(self.migrate_config(dict(config)))
        self.config = config
        self._sequencer = sequencer

        self._bus: Optional[EventBus] = None
        self._adapter: Optional[ServerAdapter] = None
        self._tracker: Optional[OccupancyTracker] = None
        self._engine: Optional[VacancyEngine] = None
        self._coordinator: Optional[ActionCoordinator] = None
        self._debouncer: Optional[DebounceScheduler] = None

    @property
    def id(self) -> str:
        return "vacancy"

    @property
    def CURRENT_CONFIG_VERSION(self) -> int:
        return 1

    def attach(self, bus: EventBus, adapter: ServerAdapter) -> None:
        """Attach to the host and initialize engine."""
        logger.info("Attaching VacancyModule")
        self._bus = bus
        self._adapter = adapter

        if not adapter.is_subsystem_available():
            logger.warning("Distance subsystem is not loaded - commands may fail.")

        if isinstance(adapter, ConsoleServerAdapter):
            logger.debug(f"Using console command prefix '{self.config.command_prefix}'")
            adapter.command_prefix = self.config.command_prefix

        self._tracker = OccupancyTracker(adapter)
        self._engine = VacancyEngine(list(self.config.zones), self.config.cooldown_seconds)
        self._coordinator = ActionCoordinator(
            self._engine,
            self._tracker,
            adapter,
            self._sequencer,
            reload_settle_delay=self.config.reload_settle_delay,
        )
        self._debouncer = DebounceScheduler(
            self._sequencer,
            self._evaluate,
            settle_delay=self.config.settle_delay,
            cooldown_seconds=self.config.cooldown_seconds,
        )

        self._tracker.add_listener(self._debouncer.notify)
        self._coordinator.pass_listener = self._debouncer.after_pass
        self._coordinator.transition_listener = self._emit_vacancy_changed
        self._coordinator.command_listener = self._emit_command
        logger.info(f"Vacancy engine initialized with {len(self.config.zones)} zones")

        for event_type in PLAYER_EVENT_TYPES:
            bus.subscribe(self._on_player_event, EventFilter(event_type=event_type))

    def start(self) -> EvaluationPass:
        """
        Run the initial evaluation pass.

        Zones that are already empty when the host starts begin their
        cooldown here instead of waiting for the first player event.
        """
        assert self._debouncer is not None
        logger.info("Running initial vacancy check...")
        result = self._evaluate()
        self._debouncer.after_pass(result)
        return result

    def _evaluate(self) -> EvaluationPass:
        assert self._coordinator is not None
        return self._coordinator.run_pass()

    def _on_player_event(self, event: Event) -> None:
        """Translate a player event into occupancy notifications."""
        assert self._tracker is not None and self._debouncer is not None
        zones = [z for z in (event.zone, event.payload.get("from_zone")) if z]
        for zone in zones:
            self._tracker.on_occupancy_changed(zone)
        if not zones:
            # A quit without a known zone can still have emptied one
            logger.debug(f"{event.type} without a zone; scheduling a full evaluation")
            self._debouncer.notify()

    def on_occupancy_changed(self, zone: str) -> None:
        """Notify the module directly, bypassing the bus."""
        assert self._tracker is not None
        self._tracker.on_occupancy_changed(zone)

    def _emit_vacancy_changed(self, transition: StateTransition) -> None:
        """Emit semantic vacancy.changed event."""
        assert self._bus is not None
        new_state = transition.new_state
        self._bus.publish(
            Event(
                type="vacancy.changed",
                source="vacancy",
                zone=transition.zone,
                payload={
                    "status": new_state.status.value,
                    "previous_status": transition.previous_state.status.value,
                    "vacated_at": new_state.vacated_at,
                    "reduced": new_state.reduced,
                    "reason": transition.reason,
                },
                timestamp=datetime.now(timezone.utc),
            )
        )

    def _emit_command(self, command: Command) -> None:
        """Emit vacancy.command event."""
        assert self._bus is not None
        self._bus.publish(
            Event(
                type="vacancy.command",
                source="vacancy",
                zone=command.zone,
                payload={
                    "command": command.name,
                    "zone": command.zone,
                    "value": command.value,
                },
                timestamp=datetime.now(timezone.utc),
            )
        )

    def get_zone_state(self, zone: str) -> Optional[Dict]:
        """Get current vacancy state for a zone."""
        if not self._engine or zone not in self._engine.state:
            return None

        state = self._engine.state[zone]
        return {
            "status": state.status.value,
            "vacated_at": state.vacated_at,
            "reduced": state.reduced,
        }

    def all_zone_states(self) -> Dict[str, Dict]:
        """Get current vacancy state for every configured zone."""
        if not self._engine:
            return {}
        return self._engine.export_state()

    def default_config(self) -> Dict:
        """Default module configuration."""
        return {
            "version": self.CURRENT_CONFIG_VERSION,
            "cooldown-seconds": 10,
            "settle-delay": 1.0,
            "reload-settle-delay": 0.5,
            "command-prefix": "viewdistancetweaks",
            "worlds": {},
        }

    def config_schema(self) -> Dict:
        """JSON schema for module configuration."""
        return {
            "type": "object",
            "properties": {
                "cooldown-seconds": {
                    "type": "integer",
                    "title": "Cooldown (seconds)",
                    "description": "How long a zone must stay empty before it is reduced",
                    "exclusiveMinimum": 0,
                    "default": 10,
                },
                "settle-delay": {
                    "type": "number",
                    "title": "Settle Delay (seconds)",
                    "description": "Wait for correlated player events before evaluating",
                    "exclusiveMinimum": 0,
                    "default": 1.0,
                },
                "reload-settle-delay": {
                    "type": "number",
                    "title": "Reload Settle Delay (seconds)",
                    "description": "Wait after a reload before applying reductions",
                    "minimum": 0,
                    "default": 0.5,
                },
                "command-prefix": {
                    "type": "string",
                    "title": "Command Prefix",
                    "default": "viewdistancetweaks",
                },
                "worlds": {
                    "type": "object",
                    "title": "Worlds",
                    "additionalProperties": {
                        "type": "object",
                        "properties": {
                            "view-distance": {"type": "integer", "minimum": 0},
                            "simulation-distance": {"type": "integer", "minimum": 0},
                        },
                        "required": ["view-distance", "simulation-distance"],
                    },
                },
            },
        }

    def migrate_config(self, config: Dict) -> Dict:
        """Migrate configuration from older versions."""
        version = config.get("version", 1)
        if version == self.CURRENT_CONFIG_VERSION:
            return config

        # No migrations yet (v1 is first version)
        config["version"] = self.CURRENT_CONFIG_VERSION
        return config
