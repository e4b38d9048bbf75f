"""
pyberrydial: drive multi-phase stepper motors on a Raspberry Pi to move the
pointers of a clock-face dial.

Typical use::

    from pyberrydial import StepperDevice, WorldScheduler
    from pyberrydial.motion import quad_in_out

    world = WorldScheduler()
    hours = world.add_item("hours", StepperDevice([5, 6, 13, 25], "28BYJ-48"))
    world.start()
    hours.turn_to_time("9:00:00", duration=4, easing=quad_in_out).result()
    world.turn_off()
"""

from .core import ContractViolation, MotionSuperseded, ConfigurationError
from .motion import ClockTime, MotionTask, RotationDirection, clock_to_ratio, ratio_to_clock
from .stepper import MotorProfile, MOTOR_PROFILES, StepperDevice
from .world import WorldScheduler
from .config import WorldConfig, load_config, setup_logging

__all__ = [
    "ContractViolation",
    "MotionSuperseded",
    "ConfigurationError",
    "ClockTime",
    "MotionTask",
    "RotationDirection",
    "clock_to_ratio",
    "ratio_to_clock",
    "MotorProfile",
    "MOTOR_PROFILES",
    "StepperDevice",
    "WorldScheduler",
    "WorldConfig",
    "load_config",
    "setup_logging"
]
