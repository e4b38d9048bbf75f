"""
Motion planning: clock-face positions, easing curves and motion tasks.
"""

from .clock import (
    ClockTime,
    ratio_to_clock,
    clock_to_ratio,
    parse_clock_time,
    format_clock_time
)
from .easing import (
    Easing,
    linear,
    quad_in,
    quad_out,
    quad_in_out,
    cubic_in_out,
    sine_in_out,
    poly_in,
    poly_out,
    ProfileType,
    ProfileEasing
)
from .direction import RotationDirection, as_step_direction
from .task import MotionTask

__all__ = [
    "ClockTime",
    "ratio_to_clock",
    "clock_to_ratio",
    "parse_clock_time",
    "format_clock_time",
    "Easing",
    "linear",
    "quad_in",
    "quad_out",
    "quad_in_out",
    "cubic_in_out",
    "sine_in_out",
    "poly_in",
    "poly_out",
    "ProfileType",
    "ProfileEasing",
    "RotationDirection",
    "as_step_direction",
    "MotionTask"
]
