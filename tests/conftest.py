import pytest
from gpiozero.pins.mock import MockFactory

from pyberrydial.stepper import StepperDevice, MotorProfile, load_motor_profiles


PINS = [5, 6, 13, 25]


class FakeClock:
    """Manually advanced replacement for `time.monotonic` and `time.time`."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# 4-phase full-step motor with 64 steps per rotation and no settle delay, to
# keep threaded tests fast.
FAST_PROFILE = MotorProfile(
    name="fast-64",
    steps_per_rotation=64,
    reset_before_set=False,
    settle_delay_ms=0.0,
    phase_pattern=(
        (1, 1, 0, 0),
        (0, 1, 1, 0),
        (0, 0, 1, 1),
        (1, 0, 0, 1),
    )
)


@pytest.fixture
def pin_factory():
    factory = MockFactory()
    yield factory
    factory.reset()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def fast_profiles():
    return load_motor_profiles({
        FAST_PROFILE.name: {
            "steps_per_rotation": FAST_PROFILE.steps_per_rotation,
            "reset_before_set": FAST_PROFILE.reset_before_set,
            "settle_delay_ms": FAST_PROFILE.settle_delay_ms,
            "phase_pattern": [list(phase) for phase in FAST_PROFILE.phase_pattern],
        }
    })


@pytest.fixture
def make_device(pin_factory, clock, sleeps):
    """Creates 28BYJ-48 devices on mock pins with a fake clock and no real sleeping."""
    created = []
    next_pin = iter([16, 17, 18, 19, 20, 21, 22, 23, 24, 26, 27, 12, 7, 8, 9, 10])

    def factory(pins=None, **kwargs) -> StepperDevice:
        if pins is None:
            pins = [next(next_pin) for _ in range(4)]
        kwargs.setdefault("pin_factory", pin_factory)
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("wall_clock", clock)
        kwargs.setdefault("sleep", sleeps.append)
        device = StepperDevice(pins, **kwargs)
        created.append(device)
        return device

    yield factory
    for device in created:
        device.close()


@pytest.fixture
def device(make_device) -> StepperDevice:
    return make_device(PINS, model="28BYJ-48", name="hours")
