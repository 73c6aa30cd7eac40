"""Debounced scheduling of vacancy evaluations."""

import logging
from functools import partial
from typing import Callable

from world_vacancy.core.sequencer import Sequencer

from .engine import DUE_TOLERANCE
from .models import EvaluationPass

logger = logging.getLogger(__name__)


class DebounceScheduler:
    """
    Coalesces bursts of occupancy notifications into single evaluations.

    - The first notification schedules one evaluation after the settle delay;
      later notifications are absorbed until that evaluation has run. There
      is one pending evaluation per scheduler, not per zone.
    - Any pass that leaves a zone newly pending-vacant gets a follow-up
      evaluation after the cooldown. Cooldown checks are independent of the
      debounce flag and are never cancelled; the evaluation re-reads live
      state, so a stale one is a no-op.
    - A pass that still sees a zone waiting out its cooldown, with no check
      scheduled at or before its due time, re-arms one for the remainder.
      This covers checks that fire a hair early.
    """

    def __init__(
        self,
        sequencer: Sequencer,
        evaluate: Callable[[], EvaluationPass],
        settle_delay: float = 1.0,
        cooldown_seconds: float = 10,
    ) -> None:
        self._sequencer = sequencer
        self._evaluate = evaluate
        self.settle_delay = settle_delay
        self.cooldown_seconds = cooldown_seconds
        self._pending = False
        # Due times of cooldown checks that have not fired yet
        self._check_dues: list[float] = []
        self.evaluations_run = 0
        self.cooldown_checks_scheduled = 0

    @property
    def is_pending(self) -> bool:
        """Whether a debounced evaluation is waiting to run."""
        return self._pending

    def notify(self, zone: str | None = None) -> None:
        """Handle an occupancy-change notification."""
        if self._pending:
            logger.debug(f"Evaluation already pending, coalescing change in {zone}")
            return
        self._pending = True
        self._sequencer.call_later(self.settle_delay, self._run_debounced, name="vacancy.settle")

    def after_pass(self, result: EvaluationPass) -> None:
        """Schedule the cooldown checks a finished pass calls for."""
        if result.newly_vacated:
            logger.debug(
                f"Zones newly vacant: {', '.join(result.newly_vacated)}; "
                f"re-checking in {self.cooldown_seconds}s"
            )
            self._schedule_check(self.cooldown_seconds)

        remaining = result.next_check_in
        if remaining is None:
            return
        due = self._sequencer.now() + remaining
        if any(scheduled <= due + DUE_TOLERANCE for scheduled in self._check_dues):
            return
        logger.debug(f"No cooldown check covers t={due}; re-arming in {remaining}s")
        self._schedule_check(remaining)

    def _schedule_check(self, delay: float) -> None:
        due = self._sequencer.now() + delay
        self._check_dues.append(due)
        self.cooldown_checks_scheduled += 1
        self._sequencer.call_later(
            delay, partial(self._run_cooldown_check, due), name="vacancy.cooldown"
        )

    def _run_debounced(self) -> None:
        self._pending = False
        self._run()

    def _run_cooldown_check(self, due: float) -> None:
        self._check_dues.remove(due)
        self._run()

    def _run(self) -> None:
        self.evaluations_run += 1
        self.after_pass(self._evaluate())
