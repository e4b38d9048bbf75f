from typing import Any, Callable, Mapping, Sequence
from concurrent.futures import Future
import logging
import threading
import time

from gpiozero.pins import Factory

from pyberrydial.core import GPIO, DigitalOutput, EventEmitter
from pyberrydial.core.exceptions import ContractViolation, ConfigurationError
from pyberrydial.motion import (
    ClockTime,
    Easing,
    MotionTask,
    RotationDirection,
    as_step_direction,
    clock_to_ratio,
    ratio_to_clock
)
from pyberrydial.utils.timing import precise_sleep
from .profiles import MotorProfile, get_motor_profile


class StepperDevice(EventEmitter):
    """
    A multi-phase (unipolar) stepper motor that moves the pointer of a
    clock-face dial.

    The device drives the motor coils directly through one digital output per
    coil, stepping through the phase pattern of its motor profile. It keeps
    the authoritative model of the pointer position: `current_step` counts
    the steps taken since start-up (offset by the start position) and is
    never wrapped, its value modulo `steps_per_rotation` is the position on
    the dial.

    Motion commands (`turn_to_time()`, `turn_rotations()`) only install a
    `MotionTask`; the steps are executed each time `tick()` is called, which
    is normally done by a `WorldScheduler`. A new motion command supersedes
    the task in progress.

    Notifications
    -------------
    - `start(task)`: a new motion task has been installed.
    - `step(position, task)`: one step has been taken; `position` is the new
      value of `current_step`.
    - `finish(task)`: the motion task has been completed.
    - `change()`: the serializable state of the device has changed.
    """
    def __init__(
        self,
        pins: Sequence[int | str | GPIO],
        model: str = "28BYJ-48",
        gear_ratio: float = 1.0,
        start_hour: float = 12,
        name: str = "",
        pin_factory: Factory | None = None,
        logger: logging.Logger | None = None,
        profiles: Mapping[str, MotorProfile] | None = None,
        idle_power_down: bool = True,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = precise_sleep,
        wall_clock: Callable[[], float] = time.time
    ) -> None:
        """
        Creates a `StepperDevice`.

        Parameters
        ----------
        pins:
            GPIO pins connected to the coil inputs of the driver board, in the
            order of the levels in the phase pattern. Ready-made `GPIO`
            objects are used as they are.
        model:
            Key of the motor profile in `profiles`.
        gear_ratio:
            Number of motor shaft revolutions for one revolution of the
            pointer.
        start_hour:
            Clock-face hour (0...12) the pointer points to at start-up. Both
            0 and 12 mean the 12 o'clock position.
        name:
            Name to identify the device, e.g. in a log file.
        pin_factory:
            `gpiozero` pin factory used to create the digital outputs. If
            `None`, the default pin factory of `gpiozero` is used.
        logger:
            `logging.Logger` object for the device. If `None`, the module
            logger is used.
        profiles:
            Table of motor profiles. If `None`, the built-in table is used.
        idle_power_down:
            Release all coils when a motion task has finished.
        clock:
            Monotonic time source in seconds that paces the motion tasks.
        sleep:
            Blocks for the given number of seconds; used for the settle delay
            after each phase change.
        wall_clock:
            Returns the current timestamp; only used to report the finish
            time of a motion in `to_serializable()`.

        Raises
        ------
        ConfigurationError
            If the motor model is unknown, or if the number of pins does not
            match the phase pattern of the motor.
        """
        super().__init__()
        self.profile = get_motor_profile(model, profiles)
        self.name = name or self.__class__.__name__
        self.logger = logger or logging.getLogger(__name__)
        if len(pins) != self.profile.num_pins:
            raise ConfigurationError(
                f"[{self.name}] motor `{self.profile.name}` needs "
                f"{self.profile.num_pins} pins, got {len(pins)}"
            )
        if gear_ratio <= 0:
            raise ConfigurationError(f"[{self.name}] gear ratio must be positive")
        if not 0 <= start_hour <= 12:
            raise ConfigurationError(f"[{self.name}] start hour must be in [0, 12]")

        self.gear_ratio = gear_ratio
        self.steps_per_rotation = round(self.profile.steps_per_rotation * gear_ratio)
        self.idle_power_down = idle_power_down
        self.pins: list[GPIO] = [
            pin if isinstance(pin, GPIO)
            else DigitalOutput(pin, f"{self.name}.IN{i + 1}", pin_factory=pin_factory)
            for i, pin in enumerate(pins)
        ]
        self._clock = clock
        self._sleep = sleep
        self._wall_clock = wall_clock

        self._phase_index = 0
        self.current_step = round((start_hour % 12) / 12 * self.steps_per_rotation)
        self.destination_step: int | None = None
        self.task: MotionTask | None = None
        self._powered_on = False
        self._closed = False
        self._lock = threading.RLock()

    @property
    def phase_index(self) -> int:
        return self._phase_index

    @property
    def powered_on(self) -> bool:
        return self._powered_on

    @property
    def busy(self) -> bool:
        """Returns whether a motion task is in progress."""
        return self.task is not None

    @property
    def position_ratio(self) -> float:
        """Position of the pointer as a fraction of one revolution."""
        return (self.current_step % self.steps_per_rotation) / self.steps_per_rotation

    # Phase state machine

    def _write_phase(self, index: int) -> None:
        """Writes the pin levels of phase `index` to the coil outputs."""
        if self.profile.reset_before_set:
            for pin in self.pins:
                pin.write(0)
        for pin, level in zip(self.pins, self.profile.phase_pattern[index]):
            pin.write(level)
        self._powered_on = True

    def _release_coils(self) -> None:
        for pin in self.pins:
            pin.write(0)
        self._powered_on = False

    def _apply_step(self, direction: int) -> int:
        if self.task is None:
            raise ContractViolation(
                f"[{self.name}] advancing the phase state requires an active "
                f"motion task"
            )
        self._phase_index = (self._phase_index + direction) % self.profile.num_phases
        self._write_phase(self._phase_index)
        self.current_step += direction
        return self.current_step

    def advance_one_step(self, direction: RotationDirection | int) -> int:
        """
        Moves the motor one step in the given direction: the next (or
        previous) phase of the pattern is written to the coils, the position
        model is updated, and the settle delay of the motor is waited out.
        Returns the new step position.

        Raises
        ------
        ContractViolation
            If the device has no active motion task.
        """
        direction = as_step_direction(direction)
        with self._lock:
            position = self._apply_step(direction)
        self._sleep(self.profile.settle_delay)
        return position

    # Motion commands

    def arc_distances(self, destination: int) -> tuple[int, int]:
        """
        Returns the number of steps from the current position to dial position
        `destination` (0 <= destination < steps_per_rotation) when turning
        clockwise and when turning counterclockwise.
        """
        n = self.steps_per_rotation
        forward = (destination - self.current_step) % n
        backward = (n - forward) % n
        return forward, backward

    def _install_task(self, task: MotionTask, destination: int | None) -> Future:
        with self._lock:
            previous = self.task
            self.task = task
            self.destination_step = destination
        if previous is not None and previous.reject("superseded"):
            self.logger.info(f"[{self.name}] Motion superseded: {previous!r}")
        self.logger.info(f"[{self.name}] Motion started: {task!r}")
        self.emit("start", task)
        self.emit("change")
        return task.future

    def turn_to_time(
        self,
        time: str | ClockTime | tuple,
        duration: float,
        direction: RotationDirection | int | None = None,
        easing: Easing | None = None
    ) -> Future:
        """
        Moves the pointer to the given clock-face time within `duration`
        seconds.

        Parameters
        ----------
        time:
            Target clock time, e.g. `"9:30:00"`.
        duration:
            Motion time in seconds.
        direction:
            Direction of rotation. If `None`, the shorter way around the dial
            is taken; when both ways are equally long, the pointer turns
            counterclockwise.
        easing:
            Easing function that shapes the motion; linear if `None`.

        Returns
        -------
        The future of the new motion task. It is resolved with the task when
        the pointer has arrived, or fails with `MotionSuperseded` when the
        motion is interrupted.
        """
        ratio = clock_to_ratio(time)
        n = self.steps_per_rotation
        with self._lock:
            destination = round(ratio * n) % n
            forward, backward = self.arc_distances(destination)
            if direction is None:
                step_direction = 1 if backward > forward else -1
            else:
                step_direction = as_step_direction(direction)
            steps = forward if step_direction == 1 else backward
            task = MotionTask(steps, step_direction, duration, easing, clock=self._clock)
            return self._install_task(task, self.current_step + step_direction * steps)

    def turn_rotations(
        self,
        rotations: float = 1,
        direction: RotationDirection | int = 1,
        duration: float = 5,
        easing: Easing | None = None
    ) -> Future:
        """
        Turns the pointer over a number of full revolutions (a relative move,
        fractions allowed) within `duration` seconds. Returns the future of
        the new motion task.
        """
        if rotations < 0:
            raise ValueError("Number of rotations must be non-negative.")
        step_direction = as_step_direction(direction)
        steps = round(rotations * self.profile.steps_per_rotation * self.gear_ratio)
        with self._lock:
            task = MotionTask(steps, step_direction, duration, easing, clock=self._clock)
            return self._install_task(task, self.current_step + step_direction * steps)

    def stop(self) -> MotionTask | None:
        """
        Cancels the motion task in progress. The coils stay energized, so the
        motor keeps its holding torque. Returns the cancelled task, if any.
        """
        with self._lock:
            task = self.task
            self.task = None
            self.destination_step = None
        if task is not None:
            task.reject("cancelled")
            self.logger.info(f"[{self.name}] Motion cancelled: {task!r}")
            self.emit("change")
        return task

    # Scan cycle

    def tick(self) -> int:
        """
        Claims the steps owed by the active motion task and executes them one
        after the other. Returns the number of steps taken.

        When the task is superseded or cancelled while the steps are being
        executed, the remaining steps of the burst are dropped. When the task
        is complete, it is retired and its future is resolved.
        """
        with self._lock:
            task = self.task
            if task is None:
                return 0
            steps = task.claim_owed_steps()

        executed = 0
        for _ in range(steps):
            with self._lock:
                if self.task is not task:
                    break
                position = self._apply_step(task.direction)
            executed += 1
            self.emit("step", position, task)
            self._sleep(self.profile.settle_delay)
        if executed:
            self.logger.debug(f"[{self.name}] {executed} step(s) taken, position {self.current_step}")

        with self._lock:
            finished = task.is_complete and self.task is task
            if finished:
                self.task = None
                self.destination_step = None
                if self.idle_power_down:
                    self._release_coils()
        if finished:
            task.resolve()
            self.logger.info(f"[{self.name}] Motion finished at {self.get_clock_time_string()}")
            self.emit("finish", task)
            self.emit("change")
        return executed

    # Power

    def turn_on(self) -> None:
        """
        Energizes the coils of the current phase (holding torque). At start-up
        this is the first phase of the pattern; after motion it is the phase
        the rotor was left in, so re-energizing does not jolt the rotor.
        """
        with self._lock:
            was_on = self._powered_on
            self._write_phase(self._phase_index)
        if not was_on:
            self.logger.info(f"[{self.name}] Coils energized")
            self.emit("change")

    def turn_off(self) -> None:
        """
        Cancels the motion task in progress, if any, and releases all coils.
        """
        self.stop()
        with self._lock:
            was_on = self._powered_on
            self._release_coils()
        if was_on:
            self.logger.info(f"[{self.name}] Coils released")
            self.emit("change")

    def close(self) -> None:
        """Releases the coils and the GPIO pins of the device."""
        if self._closed:
            return
        self.turn_off()
        self._closed = True
        for pin in self.pins:
            pin.close()

    # Queries

    def get_clock_time(self) -> ClockTime:
        return ratio_to_clock(self.position_ratio)

    def get_clock_time_string(self) -> str:
        return str(self.get_clock_time())

    def to_serializable(self) -> dict[str, Any]:
        """
        Returns a snapshot of the device state:
        - `currentPosition`: clock time the pointer points to,
        - `destination`: clock time the pointer is moving to,
        - `taskFinishTime`: `time.time()` timestamp the motion should end.

        The keys are always present; `destination` and `taskFinishTime` are
        `None` while no motion task is active.
        """
        with self._lock:
            task = self.task
            destination = self.destination_step
            current = self.current_step
        n = self.steps_per_rotation
        snapshot = {
            "currentPosition": str(ratio_to_clock((current % n) / n)),
            "destination": None,
            "taskFinishTime": None
        }
        if task is not None:
            if destination is not None:
                snapshot["destination"] = str(ratio_to_clock((destination % n) / n))
            snapshot["taskFinishTime"] = self._wall_clock() + task.time_remaining()
        return snapshot

    def __repr__(self) -> str:
        return (
            f"StepperDevice(name={self.name!r}, model={self.profile.name!r}, "
            f"position={self.get_clock_time_string()!r})"
        )
