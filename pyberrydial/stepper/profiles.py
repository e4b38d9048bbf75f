"""
Electrical profiles of the supported stepper motors.

A profile describes how a motor must be driven: the number of steps for one
revolution of the output shaft, the phase pattern (which coils are energized
in each step of the cycle), whether all coils must be released before the
next phase is written, and the settle delay that must pass after each phase
change. The settle delay bounds the maximum step rate of the motor.

The built-in table is read-only. Additional profiles can be defined in the
`[motor_profiles]` section of a TOML configuration file (see
`load_motor_profiles()`).
"""
from types import MappingProxyType
from typing import Any, Mapping
from dataclasses import dataclass
from pathlib import Path
import tomllib

from pyberrydial.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class MotorProfile:
    """
    Attributes
    ----------
    name : str
        Model name of the motor, used as key in the profile table.
    steps_per_rotation : int
        Number of (half-)steps for one revolution of the output shaft.
    reset_before_set : bool
        Release all coils before writing the next phase.
    settle_delay_ms : float
        Pause in milliseconds after each phase change.
    phase_pattern : tuple[tuple[int, ...], ...]
        Cyclic sequence of coil levels, one tuple (one level per pin) for each
        phase.
    """
    name: str
    steps_per_rotation: int
    reset_before_set: bool
    settle_delay_ms: float
    phase_pattern: tuple[tuple[int, ...], ...]

    def __post_init__(self):
        if not isinstance(self.steps_per_rotation, int) or self.steps_per_rotation <= 0:
            raise ConfigurationError(
                f"Motor profile `{self.name}`: steps per rotation must be a "
                f"positive integer."
            )
        if self.settle_delay_ms < 0:
            raise ConfigurationError(
                f"Motor profile `{self.name}`: settle delay must be non-negative."
            )
        if not self.phase_pattern:
            raise ConfigurationError(
                f"Motor profile `{self.name}`: phase pattern is empty."
            )
        widths = {len(phase) for phase in self.phase_pattern}
        if len(widths) != 1:
            raise ConfigurationError(
                f"Motor profile `{self.name}`: all phases must have the same "
                f"number of pin levels."
            )
        for phase in self.phase_pattern:
            if any(level not in (0, 1) for level in phase):
                raise ConfigurationError(
                    f"Motor profile `{self.name}`: pin levels must be 0 or 1."
                )

    @property
    def num_phases(self) -> int:
        return len(self.phase_pattern)

    @property
    def num_pins(self) -> int:
        return len(self.phase_pattern[0])

    @property
    def settle_delay(self) -> float:
        """Settle delay in seconds."""
        return self.settle_delay_ms / 1000.0

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> 'MotorProfile':
        """
        Creates a `MotorProfile` from a table of a TOML configuration file.
        """
        try:
            return cls(
                name=name,
                steps_per_rotation=data["steps_per_rotation"],
                reset_before_set=bool(data.get("reset_before_set", False)),
                settle_delay_ms=float(data.get("settle_delay_ms", 0.0)),
                phase_pattern=tuple(tuple(phase) for phase in data["phase_pattern"])
            )
        except KeyError as e:
            raise ConfigurationError(
                f"Motor profile `{name}`: missing key {e}."
            ) from None
        except TypeError as e:
            raise ConfigurationError(f"Motor profile `{name}`: {e}") from None


# 28BYJ-48 geared unipolar motor on an ULN2003 board, driven in half-steps.
_28BYJ_48 = MotorProfile(
    name="28BYJ-48",
    steps_per_rotation=4096,
    reset_before_set=True,
    settle_delay_ms=1.2,
    phase_pattern=(
        (0, 0, 0, 1),
        (0, 0, 1, 1),
        (0, 0, 1, 0),
        (0, 1, 1, 0),
        (0, 1, 0, 0),
        (1, 1, 0, 0),
        (1, 0, 0, 0),
        (1, 0, 0, 1),
    )
)

MOTOR_PROFILES: Mapping[str, MotorProfile] = MappingProxyType({
    _28BYJ_48.name: _28BYJ_48,
})


def get_motor_profile(
    model: str,
    profiles: Mapping[str, MotorProfile] | None = None
) -> MotorProfile:
    """
    Returns the profile of motor `model` from `profiles` (the built-in table
    if `None`).

    Raises
    ------
    ConfigurationError
        If the model is unknown.
    """
    profiles = MOTOR_PROFILES if profiles is None else profiles
    try:
        return profiles[model]
    except KeyError:
        raise ConfigurationError(
            f"unknown motor model `{model}` "
            f"(known models: {', '.join(sorted(profiles))})"
        ) from None


def load_motor_profiles(
    source: str | Path | Mapping[str, Any],
    base: Mapping[str, MotorProfile] | None = None
) -> Mapping[str, MotorProfile]:
    """
    Returns a new read-only profile table holding the profiles of `base` (the
    built-in table if `None`) extended with the profiles defined in the
    `[motor_profiles]` section of a TOML file, or in an already parsed
    mapping of profile tables.
    """
    if isinstance(source, (str, Path)):
        with Path(source).open("rb") as f:
            source = tomllib.load(f).get("motor_profiles", {})
    table = dict(MOTOR_PROFILES if base is None else base)
    for name, data in source.items():
        table[name] = MotorProfile.from_dict(name, data)
    return MappingProxyType(table)
