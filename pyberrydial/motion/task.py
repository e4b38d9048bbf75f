from typing import Callable
from concurrent.futures import Future, InvalidStateError
import math
import threading
import time

from pyberrydial.core.exceptions import MotionSuperseded
from .easing import Easing, linear


class MotionTask:
    """
    A bounded, open-loop motion goal: move `total_steps` steps in one
    direction within a given duration, with the progress over time shaped by
    an easing function.

    The task does not move anything itself. Each time the owning device
    ticks, it asks the task how many steps are owed by now
    (`claim_owed_steps()`) and executes them. Because the owed amount is
    always computed from the elapsed time, a tick that comes late is caught up
    at the next one, and the total number of claimed steps ends up exactly at
    `total_steps`.

    The outcome of the task is published through `future`, a
    `concurrent.futures.Future` that is settled exactly once: its result is
    the task itself when the motion finished normally, or it holds a
    `MotionSuperseded` exception when the task was replaced or cancelled.
    """
    def __init__(
        self,
        total_steps: int,
        direction: int,
        duration: float,
        easing: Easing | None = None,
        clock: Callable[[], float] = time.monotonic,
        start_time: float | None = None
    ) -> None:
        """
        Creates a `MotionTask`.

        Parameters
        ----------
        total_steps:
            Number of steps to move (non-negative).
        direction:
            +1 (clockwise, increasing clock time) or -1.
        duration:
            Motion time in seconds.
        easing:
            Easing function; linear if `None`.
        clock:
            Returns the current time in seconds. Defaults to `time.monotonic`,
            so that wall-clock corrections (e.g. by NTP) do not disturb the
            schedule. Start and finish time are readings of this clock.
        start_time:
            Start time of the motion; the current time of `clock` if `None`.
        """
        if total_steps < 0:
            raise ValueError("Number of steps must be non-negative.")
        if direction not in (1, -1):
            raise ValueError("Direction must be +1 or -1.")
        if duration < 0:
            raise ValueError("Duration must be non-negative.")
        self.total_steps = int(total_steps)
        self.direction = int(direction)
        self.easing = easing or linear
        self._clock = clock
        self.start_time = clock() if start_time is None else start_time
        self.finish_time = self.start_time + duration
        self.steps_claimed = 0
        self.is_complete = False
        self.future: Future = Future()
        self._settle_lock = threading.Lock()

    @property
    def duration(self) -> float:
        return self.finish_time - self.start_time

    @property
    def remaining_steps(self) -> int:
        return self.total_steps - self.steps_claimed

    @property
    def progress(self) -> float:
        """Fraction of the total steps that has been claimed so far."""
        if self.total_steps == 0:
            return 1.0 if self.is_complete else 0.0
        return self.steps_claimed / self.total_steps

    def time_remaining(self) -> float:
        """Seconds left until the finish time, never negative."""
        return max(self.finish_time - self._clock(), 0.0)

    @property
    def settled(self) -> bool:
        return self.future.done()

    def claim_owed_steps(self) -> int:
        """
        Returns the number of steps that should be executed now to keep up
        with the eased time schedule, and books them as claimed.

        Once the full duration has elapsed, all remaining steps are owed and
        the task is marked complete. A completed task owes nothing.
        """
        if self.is_complete:
            return 0
        elapsed = self._clock() - self.start_time
        if self.duration <= 0:
            ratio_elapsed = 1.0
        else:
            ratio_elapsed = min(max(elapsed / self.duration, 0.0), 1.0)
        if ratio_elapsed >= 1.0:
            owed_total = self.total_steps
            self.is_complete = True
        else:
            owed_total = math.floor(self.total_steps * self.easing(ratio_elapsed))
            # claimed steps are never given back, even if the clock steps back
            owed_total = min(max(owed_total, self.steps_claimed), self.total_steps)
        steps = owed_total - self.steps_claimed
        self.steps_claimed = owed_total
        return steps

    def _settle(self, settler: Callable[[], None]) -> bool:
        with self._settle_lock:
            if self.future.done():
                return False
            try:
                settler()
            except InvalidStateError:
                # the future was cancelled by its consumer
                return False
            return True

    def resolve(self) -> bool:
        """
        Signals successful completion. Returns `False` if the task had
        already been settled.
        """
        return self._settle(lambda: self.future.set_result(self))

    def reject(self, reason: str = "superseded") -> bool:
        """
        Signals that the task will not complete, because it was superseded by
        a new motion command or cancelled. Returns `False` if the task had
        already been settled.
        """
        return self._settle(
            lambda: self.future.set_exception(MotionSuperseded(self, reason))
        )

    def __repr__(self) -> str:
        return (
            f"MotionTask(total_steps={self.total_steps}, "
            f"direction={self.direction:+d}, "
            f"duration={self.duration:.3f}, "
            f"steps_claimed={self.steps_claimed})"
        )
