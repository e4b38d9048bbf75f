"""
Scheduling of stepper devices on a shared tick timer.
"""

from .timer import RecurringTimer
from .scheduler import WorldScheduler, DeviceWorker

__all__ = [
    "RecurringTimer",
    "WorldScheduler",
    "DeviceWorker"
]
