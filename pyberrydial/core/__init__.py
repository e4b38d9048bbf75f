"""
Core components shared by the stepper devices and the world scheduler:
digital outputs, the notification registry and the exception taxonomy.
"""

from .gpio import GPIO, DigitalOutput, create_pin_factory
from .events import EventEmitter
from .exceptions import ContractViolation, MotionSuperseded, ConfigurationError


__all__ = [
    "GPIO",
    "DigitalOutput",
    "create_pin_factory",
    "EventEmitter",
    "ContractViolation",
    "MotionSuperseded",
    "ConfigurationError"
]
