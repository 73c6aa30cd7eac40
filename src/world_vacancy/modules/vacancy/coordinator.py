"""Turns evaluation results into ordered commands for the distance subsystem."""

import logging
from typing import Callable, List, Optional

from world_vacancy.core.sequencer import Sequencer

from .adapter import ServerAdapter
from .engine import VacancyEngine
from .models import Command, EvaluationPass, StateTransition
from .tracker import OccupancyTracker

logger = logging.getLogger(__name__)

PassListener = Callable[[EvaluationPass], None]
CommandListener = Callable[[Command], None]


class ActionCoordinator:
    """
    Runs evaluation passes and issues the commands they require.

    Ordering rules for one pass:
    1. If any zone went REDUCED -> POPULATED, issue exactly one reload.
       A reload restores every zone, so reductions due in this pass (and
       zones that were reduced and are still empty) are applied by a
       deferred pass after the reload settle delay. That pass re-reads
       occupancy before deciding anything. Reductions found by any other
       pass inside the settle window wait for it as well.
    2. Otherwise issue the reduce commands (view distance, then simulation
       distance) for every zone due in this pass.
    """

    def __init__(
        self,
        engine: VacancyEngine,
        tracker: OccupancyTracker,
        adapter: ServerAdapter,
        sequencer: Sequencer,
        reload_settle_delay: float = 0.5,
    ) -> None:
        self._engine = engine
        self._tracker = tracker
        self._adapter = adapter
        self._sequencer = sequencer
        self.reload_settle_delay = reload_settle_delay
        self._settling_until: Optional[float] = None

        # Set by the owning module
        self.pass_listener: Optional[PassListener] = None
        self.transition_listener: Optional[Callable[[StateTransition], None]] = None
        self.command_listener: Optional[CommandListener] = None

    def run_pass(self) -> EvaluationPass:
        """
        Evaluate every zone against a fresh snapshot and act on the result.

        Returns:
            EvaluationPass describing transitions and issued commands
        """
        now = self._sequencer.now()
        snapshot = self._tracker.snapshot(self._engine.zone_names)
        result = self._engine.evaluate(snapshot, now)
        transitions = list(result.transitions)
        commands: List[Command] = []
        deferred = False

        if result.reload_required:
            logger.info("Zone repopulated after reduction. Reloading distances...")
            self._issue(Command.reload(), commands)
            self._settling_until = now + self.reload_settle_delay

            restored = self._engine.mark_restored(snapshot)
            transitions.extend(restored)

            if result.reductions or restored:
                deferred = True
                logger.info(
                    f"Deferring reductions by {self.reload_settle_delay}s until reload settles"
                )
                self._schedule_deferred_pass(self.reload_settle_delay)
        elif result.reductions and self._settling_until is not None and now < self._settling_until:
            # Another pass landed while a reload is still settling
            deferred = True
            logger.debug(f"Reload still settling; deferring {len(result.reductions)} reductions")
            self._schedule_deferred_pass(self._settling_until - now)
        else:
            for step in result.reductions:
                transition = self._engine.commit_reduction(step)
                if transition is None:
                    continue
                transitions.append(transition)
                config = self._engine.configs[step.zone]
                logger.info(
                    f"Reducing {config.name} to view={config.reduced_view_distance} "
                    f"sim={config.reduced_sim_distance}"
                )
                self._issue(
                    Command.set_view_distance(config.name, config.reduced_view_distance), commands
                )
                self._issue(
                    Command.set_sim_distance(config.name, config.reduced_sim_distance), commands
                )

        if self.transition_listener:
            for transition in transitions:
                self.transition_listener(transition)

        return EvaluationPass(
            at=now,
            engine_result=result,
            transitions=transitions,
            commands=commands,
            deferred=deferred,
        )

    def _schedule_deferred_pass(self, delay: float) -> None:
        self._sequencer.call_later(delay, self._run_deferred_pass, name="vacancy.after_reload")

    def _run_deferred_pass(self) -> None:
        result = self.run_pass()
        if self.pass_listener:
            self.pass_listener(result)

    def _issue(self, command: Command, issued: List[Command]) -> None:
        logger.debug(f"Executing command: {command}")
        self._adapter.execute_command(command)
        issued.append(command)
        if self.command_listener:
            self.command_listener(command)
