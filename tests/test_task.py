import random

import pytest

from pyberrydial.core import MotionSuperseded
from pyberrydial.motion import MotionTask, quad_in_out, ProfileEasing


class TestClaimOwedSteps:

    def test_linear_schedule(self, clock):
        task = MotionTask(100, 1, duration=10.0, clock=clock)
        clock.advance(2.5)
        assert task.claim_owed_steps() == 25
        assert task.claim_owed_steps() == 0
        clock.advance(2.5)
        assert task.claim_owed_steps() == 25
        assert not task.is_complete
        clock.advance(5.0)
        assert task.claim_owed_steps() == 50
        assert task.is_complete
        assert task.steps_claimed == 100

    def test_late_tick_catches_up(self, clock):
        task = MotionTask(4096, -1, duration=4.0, clock=clock)
        clock.advance(100.0)
        assert task.claim_owed_steps() == 4096
        assert task.is_complete

    @pytest.mark.parametrize("easing", [None, quad_in_out, ProfileEasing("S-curved")])
    def test_deltas_never_negative_and_sum_to_total(self, clock, easing):
        rng = random.Random(7)
        task = MotionTask(1234, 1, duration=3.0, easing=easing, clock=clock)
        deltas = []
        while not task.is_complete:
            clock.advance(rng.uniform(0.0, 0.1))
            deltas.append(task.claim_owed_steps())
        assert min(deltas) >= 0
        assert sum(deltas) == 1234

    def test_completed_task_owes_nothing(self, clock):
        task = MotionTask(10, 1, duration=1.0, clock=clock)
        clock.advance(1.0)
        assert task.claim_owed_steps() == 10
        clock.advance(1.0)
        assert task.claim_owed_steps() == 0
        assert task.steps_claimed == 10

    def test_zero_duration_owes_everything_at_once(self, clock):
        task = MotionTask(7, -1, duration=0.0, clock=clock)
        assert task.claim_owed_steps() == 7
        assert task.is_complete

    def test_zero_steps(self, clock):
        task = MotionTask(0, 1, duration=1.0, clock=clock)
        clock.advance(1.0)
        assert task.claim_owed_steps() == 0
        assert task.is_complete
        assert task.progress == 1.0

    def test_clock_before_start(self, clock):
        task = MotionTask(10, 1, duration=1.0, clock=clock, start_time=clock() + 5)
        assert task.claim_owed_steps() == 0

    def test_clock_stepping_back_does_not_give_back_steps(self, clock):
        task = MotionTask(100, 1, duration=10.0, clock=clock)
        clock.advance(5.0)
        assert task.claim_owed_steps() == 50
        clock.advance(-3600.0)
        assert task.claim_owed_steps() == 0
        assert task.steps_claimed == 50
        clock.advance(3605.0)
        assert task.claim_owed_steps() == 50
        assert task.steps_claimed == 100
        assert task.is_complete


class TestTaskAttributes:

    def test_timing(self, clock):
        task = MotionTask(10, 1, duration=4.0, clock=clock)
        assert task.start_time == clock()
        assert task.finish_time == clock() + 4.0
        assert task.duration == 4.0
        clock.advance(1.0)
        assert task.time_remaining() == 3.0
        clock.advance(10.0)
        assert task.time_remaining() == 0.0

    def test_progress(self, clock):
        task = MotionTask(10, 1, duration=4.0, clock=clock)
        clock.advance(2.0)
        task.claim_owed_steps()
        assert task.progress == 0.5
        assert task.remaining_steps == 5

    @pytest.mark.parametrize("kwargs", [
        {"total_steps": -1, "direction": 1, "duration": 1.0},
        {"total_steps": 1, "direction": 0, "duration": 1.0},
        {"total_steps": 1, "direction": 2, "duration": 1.0},
        {"total_steps": 1, "direction": 1, "duration": -1.0},
    ])
    def test_invalid_arguments(self, clock, kwargs):
        with pytest.raises(ValueError):
            MotionTask(clock=clock, **kwargs)


class TestSettlement:

    def test_resolve(self, clock):
        task = MotionTask(1, 1, duration=1.0, clock=clock)
        assert not task.settled
        assert task.resolve()
        assert task.settled
        assert task.future.result(timeout=0) is task

    def test_reject(self, clock):
        task = MotionTask(1, 1, duration=1.0, clock=clock)
        assert task.reject()
        error = task.future.exception(timeout=0)
        assert isinstance(error, MotionSuperseded)
        assert error.task is task
        assert error.reason == "superseded"

    def test_settles_exactly_once(self, clock):
        task = MotionTask(1, 1, duration=1.0, clock=clock)
        assert task.resolve()
        assert not task.resolve()
        assert not task.reject("cancelled")
        assert task.future.result(timeout=0) is task

    def test_cancelled_future_is_not_settled_again(self, clock):
        task = MotionTask(1, 1, duration=1.0, clock=clock)
        assert task.future.cancel()
        assert not task.resolve()
        assert not task.reject()
