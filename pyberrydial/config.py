"""
Loading of the TOML configuration of a dial installation.

Example
-------
```toml
[world]
tick_period_us = 50
pin_factory = "pigpio"

[logging]
level = "INFO"
file = "logs/pyberrydial.log"
console = true
backup_count = 7

[motor_profiles."28BYJ-48-full-step"]
steps_per_rotation = 2048
reset_before_set = false
settle_delay_ms = 2.0
phase_pattern = [[1, 1, 0, 0], [0, 1, 1, 0], [0, 0, 1, 1], [1, 0, 0, 1]]

[devices.hours]
pins = [5, 6, 13, 25]
model = "28BYJ-48"
gear_ratio = 1.0
start_hour = 12
```
"""
from typing import Any, Mapping
from dataclasses import dataclass, field
from pathlib import Path
import logging
import tomllib

from pyberrydial.core.exceptions import ConfigurationError
from pyberrydial.stepper.profiles import (
    MotorProfile,
    MOTOR_PROFILES,
    get_motor_profile,
    load_motor_profiles
)
from pyberrydial.utils.log_utils import init_logger


PIN_FACTORIES = ("default", "pigpio", "mock")


@dataclass(frozen=True)
class DeviceConfig:
    pins: tuple[int | str, ...]
    model: str = "28BYJ-48"
    gear_ratio: float = 1.0
    start_hour: float = 12
    idle_power_down: bool = True


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    file: str | None = "logs/pyberrydial.log"
    console: bool = True
    backup_count: int = 7


@dataclass(frozen=True)
class WorldConfig:
    tick_period_us: float = 50.0
    pin_factory: str = "default"
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    motor_profiles: Mapping[str, MotorProfile] = field(default_factory=lambda: MOTOR_PROFILES)
    devices: dict[str, DeviceConfig] = field(default_factory=dict)


def _section(config: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    section = config.get(key, {})
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"`[{key}]` must be a table")
    return section


def _device_config(name: str, cfg: Mapping[str, Any]) -> DeviceConfig:
    pins = cfg.get("pins")
    if not isinstance(pins, list) or not pins:
        raise ConfigurationError(f"device `{name}`: `pins` must be a non-empty list")
    try:
        return DeviceConfig(
            pins=tuple(pins),
            model=str(cfg.get("model", "28BYJ-48")),
            gear_ratio=float(cfg.get("gear_ratio", 1.0)),
            start_hour=float(cfg.get("start_hour", 12)),
            idle_power_down=bool(cfg.get("idle_power_down", True))
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"device `{name}`: {e}") from None


def load_config(source: str | Path | Mapping[str, Any]) -> WorldConfig:
    """
    Reads the configuration from a TOML file, or from an already parsed
    mapping, and returns a `WorldConfig`.

    Raises
    ------
    ConfigurationError
        If a section is malformed or a device refers to an unknown motor
        model.
    """
    if isinstance(source, (str, Path)):
        try:
            with Path(source).open("rb") as f:
                source = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"invalid configuration file: {e}") from None

    world_cfg = _section(source, "world")
    log_cfg = _section(source, "logging")
    profiles = load_motor_profiles(_section(source, "motor_profiles"))

    devices: dict[str, DeviceConfig] = {}
    for name, cfg in _section(source, "devices").items():
        if not isinstance(cfg, Mapping):
            raise ConfigurationError(f"`[devices.{name}]` must be a table")
        device_cfg = _device_config(name, cfg)
        get_motor_profile(device_cfg.model, profiles)
        devices[name] = device_cfg

    tick_period_us = float(world_cfg.get("tick_period_us", 50.0))
    if tick_period_us <= 0:
        raise ConfigurationError("`tick_period_us` must be positive")

    pin_factory = str(world_cfg.get("pin_factory", "default"))
    if pin_factory not in PIN_FACTORIES:
        raise ConfigurationError(
            f"`pin_factory` must be one of {', '.join(PIN_FACTORIES)}, got `{pin_factory}`"
        )

    return WorldConfig(
        tick_period_us=tick_period_us,
        pin_factory=pin_factory,
        logging=LoggingConfig(
            level=str(log_cfg.get("level", "INFO")).upper(),
            file=log_cfg.get("file", "logs/pyberrydial.log") or None,
            console=bool(log_cfg.get("console", True)),
            backup_count=int(log_cfg.get("backup_count", 7))
        ),
        motor_profiles=profiles,
        devices=devices
    )


def setup_logging(
    config: WorldConfig | LoggingConfig,
    name: str = "pyberrydial"
) -> logging.Logger:
    """
    Initializes the package logger with the `[logging]` settings of a
    `WorldConfig`, or with a `LoggingConfig` directly.
    """
    log_cfg = config.logging if isinstance(config, WorldConfig) else config
    return init_logger(
        name=name,
        log_file=log_cfg.file,
        level=log_cfg.level,
        console=log_cfg.console,
        backup_count=log_cfg.backup_count
    )
