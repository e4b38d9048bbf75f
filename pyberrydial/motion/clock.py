"""
Conversion between a position on the dial, expressed as a fraction of one
full revolution (the *ratio*, in [0, 1)), and the clock-face time the
pointer shows at that position.

Ratio 0 is the 12 o'clock position. It is displayed as hour 12, and hour 12
converts back to ratio 0.
"""
from typing import NamedTuple
import math


class ClockTime(NamedTuple):
    hour: int
    minute: int
    second: float

    def __str__(self) -> str:
        return format_clock_time(self)


def ratio_to_clock(ratio: float) -> ClockTime:
    """
    Returns the clock-face time that corresponds with `ratio`. Ratios outside
    [0, 1) are wrapped onto the dial.
    """
    hours = (ratio * 12) % 12
    minutes = (hours % 1) * 60
    seconds = (minutes % 1) * 60
    hour = 12 if hours < 1 else math.floor(hours)
    return ClockTime(hour, math.floor(minutes), seconds)


def clock_to_ratio(time: ClockTime | tuple | str) -> float:
    """
    Returns the ratio of one revolution that corresponds with the clock-face
    time `time`, which is either a `ClockTime`, a `(hour, minute, second)`
    tuple or a clock string like `"9:30:00"`.
    """
    if isinstance(time, str):
        time = parse_clock_time(time)
    hour, minute, second = time
    return ((hour % 12) + minute / 60 + second / 3600) / 12


def parse_clock_time(text: str) -> ClockTime:
    """
    Parses a clock string of the form `H`, `H:MM` or `H:MM:SS` (seconds may
    have a fractional part).

    Raises
    ------
    ValueError
        If the string is malformed or a field is out of range. Hours must be
        in [0, 12], minutes in [0, 59] and seconds in [0, 60).
    """
    parts = text.strip().split(":")
    if not 1 <= len(parts) <= 3:
        raise ValueError(f"Invalid clock time: {text!r}")
    parts += ["0"] * (3 - len(parts))
    try:
        hour = int(parts[0])
        minute = int(parts[1])
        second = float(parts[2])
    except ValueError:
        raise ValueError(f"Invalid clock time: {text!r}") from None
    if not 0 <= hour <= 12:
        raise ValueError(f"Hour out of range in clock time {text!r}")
    if not 0 <= minute <= 59:
        raise ValueError(f"Minute out of range in clock time {text!r}")
    if not 0.0 <= second < 60.0:
        raise ValueError(f"Second out of range in clock time {text!r}")
    return ClockTime(hour, minute, second)


def format_clock_time(time: ClockTime | tuple) -> str:
    """
    Returns the canonical string form `H:MM:SS` of a clock time. Fractional
    seconds are truncated.
    """
    hour, minute, second = time
    whole_seconds = min(int(round(second, 6)), 59)
    return f"{hour}:{minute:02d}:{whole_seconds:02d}"
