"""
GPIO-driven multi-phase stepper motors and their electrical profiles.
"""

from .profiles import (
    MotorProfile,
    MOTOR_PROFILES,
    get_motor_profile,
    load_motor_profiles
)
from .device import StepperDevice

__all__ = [
    "MotorProfile",
    "MOTOR_PROFILES",
    "get_motor_profile",
    "load_motor_profiles",
    "StepperDevice"
]
