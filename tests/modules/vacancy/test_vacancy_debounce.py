"""Tests for the DebounceScheduler."""

import pytest

from world_vacancy.core.sequencer import ManualSequencer
from world_vacancy.modules.vacancy import DebounceScheduler, EngineResult, EvaluationPass


class FakeEvaluator:
    """Counts evaluations and returns canned passes."""

    def __init__(self, sequencer):
        self._sequencer = sequencer
        self.calls = []
        self.newly_vacated = []
        self.next_check_in = None

    def __call__(self):
        self.calls.append(self._sequencer.now())
        result = EvaluationPass(
            at=self._sequencer.now(),
            engine_result=EngineResult(
                newly_vacated=list(self.newly_vacated), next_check_in=self.next_check_in
            ),
        )
        self.newly_vacated = []
        self.next_check_in = None
        return result


@pytest.fixture
def sequencer():
    return ManualSequencer()


@pytest.fixture
def evaluator(sequencer):
    return FakeEvaluator(sequencer)


@pytest.fixture
def debouncer(sequencer, evaluator):
    return DebounceScheduler(sequencer, evaluator, settle_delay=1.0, cooldown_seconds=10)


class TestCoalescing:
    """Bursts of notifications produce one evaluation."""

    def test_single_notification_runs_after_settle_delay(self, sequencer, evaluator, debouncer):
        debouncer.notify("alpha")

        sequencer.advance(0.9)
        assert evaluator.calls == []

        sequencer.advance(0.1)
        assert evaluator.calls == [1.0]

    def test_burst_coalesced_into_one_evaluation(self, sequencer, evaluator, debouncer):
        for _ in range(25):
            debouncer.notify("alpha")
            sequencer.advance(0.01)

        sequencer.advance(5)

        assert len(evaluator.calls) == 1
        assert debouncer.evaluations_run == 1

    def test_notifications_for_different_zones_share_one_evaluation(
        self, sequencer, evaluator, debouncer
    ):
        debouncer.notify("alpha")
        debouncer.notify("beta")
        debouncer.notify("gamma")

        sequencer.advance(2)

        assert len(evaluator.calls) == 1

    def test_new_notification_after_evaluation_schedules_again(
        self, sequencer, evaluator, debouncer
    ):
        debouncer.notify("alpha")
        sequencer.advance(1)
        assert not debouncer.is_pending

        debouncer.notify("alpha")
        assert debouncer.is_pending
        sequencer.advance(1)

        assert evaluator.calls == [1.0, 2.0]


class TestCooldownChecks:
    """Follow-up evaluations after a zone becomes pending-vacant."""

    def test_cooldown_check_scheduled_for_newly_vacant(self, sequencer, evaluator, debouncer):
        evaluator.newly_vacated = ["alpha"]
        debouncer.notify("alpha")

        sequencer.advance(1)
        assert debouncer.cooldown_checks_scheduled == 1

        sequencer.advance(10)
        assert evaluator.calls == [1.0, 11.0]

    def test_no_cooldown_check_without_vacancy(self, sequencer, evaluator, debouncer):
        debouncer.notify("alpha")
        sequencer.advance(30)

        assert evaluator.calls == [1.0]
        assert debouncer.cooldown_checks_scheduled == 0

    def test_cooldown_check_independent_of_debounce(self, sequencer, evaluator, debouncer):
        evaluator.newly_vacated = ["alpha"]
        debouncer.notify("alpha")
        sequencer.advance(1)

        # A debounced evaluation is pending when the cooldown check is due
        sequencer.advance(9.5)
        debouncer.notify("beta")
        sequencer.advance(0.5)

        assert evaluator.calls == [1.0, 11.0]
        assert debouncer.is_pending

        sequencer.advance(0.5)
        assert evaluator.calls == [1.0, 11.0, 11.5]

    def test_after_pass_ignores_passes_without_vacancy(self, sequencer, debouncer):
        debouncer.after_pass(EvaluationPass(at=0.0, engine_result=EngineResult()))

        assert sequencer.pending_count() == 0

    def test_early_cooldown_check_rearms_for_remainder(self, sequencer, evaluator, debouncer):
        evaluator.newly_vacated = ["alpha"]
        debouncer.notify("alpha")
        sequencer.advance(1)

        # The check at t=11 finds alpha not quite due yet
        evaluator.next_check_in = 0.25
        sequencer.advance(10)
        assert evaluator.calls == [1.0, 11.0]
        assert sequencer.pending_names() == ["vacancy.cooldown"]

        sequencer.advance(0.25)
        assert evaluator.calls == [1.0, 11.0, 11.25]
        assert sequencer.pending_count() == 0

    def test_no_extra_check_when_one_is_scheduled(self, sequencer, evaluator, debouncer):
        evaluator.newly_vacated = ["alpha"]
        evaluator.next_check_in = 10.0
        debouncer.notify("alpha")
        sequencer.advance(1)

        # A later pass sees alpha waiting with the original check still queued
        evaluator.next_check_in = 9.0
        debouncer.notify("beta")
        sequencer.advance(4)

        assert debouncer.cooldown_checks_scheduled == 1
        assert sequencer.pending_names() == ["vacancy.cooldown"]

    def test_pending_zone_without_check_gets_one(self, sequencer, debouncer):
        debouncer.after_pass(
            EvaluationPass(at=0.0, engine_result=EngineResult(next_check_in=3.0))
        )

        assert debouncer.cooldown_checks_scheduled == 1
        assert sequencer.pending_names() == ["vacancy.cooldown"]
