from abc import ABC, abstractmethod
from gpiozero import DigitalOutputDevice
from gpiozero.pins import Factory

from .exceptions import ConfigurationError


class GPIO(ABC):

    def __init__(
        self,
        pin: int | str,
        label: str,
        pin_factory: Factory | None = None
    ) -> None:
        self.pin = pin
        self.label = label
        self.pin_factory = pin_factory

    @abstractmethod
    def read(self) -> int:
        pass

    @abstractmethod
    def write(self, value: bool | int) -> None:
        pass

    def close(self) -> None:
        pass


class DigitalOutput(GPIO):

    def __init__(
        self,
        pin: int | str,
        label: str,
        active_high: bool = True,
        pin_factory: Factory | None = None,
        initial_value: bool | int | None = False
    ) -> None:
        """Creates a `DigitalOutput` object that drives one coil input of a
        stepper motor driver board (e.g. an ULN2003 channel).

        Parameters
        ----------
        pin:
            GPIO pin the coil input is connected to.
        label:
            Meaningful name for the output, used in log messages.
        active_high:
            If `True`, the output will be HIGH (e.g. at 3.3 V) when writing 1
            to it. If `False`, the opposite happens.
        pin_factory:
            Abstraction layer that allows `gpiozero` to interface with the
            hardware-specific GPIO implementation behind the scenes. If `None`,
            the default pin factory of `gpiozero` is used. Tests pass a
            `gpiozero.pins.mock.MockFactory` here.
        initial_value:
            The value that must be written to the output at the start-up of
            the program. Coils are de-energized by default.
        """
        super().__init__(pin, label, pin_factory)
        self.initial_value = initial_value
        self._device = DigitalOutputDevice(
            self.pin,
            active_high=active_high,
            initial_value=initial_value,
            pin_factory=self.pin_factory
        )

    def read(self) -> int:
        return int(self._device.value)

    def write(self, value: bool | int) -> None:
        if value not in (0, 1):
            raise ValueError(f"Level must be 0 or 1, got {value!r}.")
        self._device.value = bool(value)

    def close(self) -> None:
        self._device.close()


def create_pin_factory(kind: str | None = None) -> Factory | None:
    """
    Returns a `gpiozero` pin factory by name:
    - `None` or `"default"`: `None`, so `gpiozero` picks its default factory.
    - `"pigpio"`: `PiGPIOFactory`. This requires that `pigpio` is installed on
      the Raspberry Pi, and that the `pigpiod` daemon is running in the
      background.
    - `"mock"`: `MockFactory`, simulated pins for running without hardware.

    Raises
    ------
    ConfigurationError
        If the name is unknown.
    """
    if kind is None or kind == "default":
        return None
    if kind == "pigpio":
        from gpiozero.pins.pigpio import PiGPIOFactory
        return PiGPIOFactory()
    if kind == "mock":
        from gpiozero.pins.mock import MockFactory
        return MockFactory()
    raise ConfigurationError(f"unknown pin factory `{kind}`")
