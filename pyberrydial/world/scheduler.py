from typing import Any, Callable, Mapping
from pathlib import Path
import atexit
import logging
import threading

from gpiozero.pins import Factory

from pyberrydial.config import WorldConfig, load_config
from pyberrydial.core import EventEmitter, create_pin_factory
from pyberrydial.core.exceptions import ContractViolation, ConfigurationError
from pyberrydial.stepper import StepperDevice
from .timer import RecurringTimer


class DeviceWorker(threading.Thread):
    """
    Runs the ticks of one stepper device on a dedicated thread, so that the
    settle delays of one device never hold up the other devices.

    Tick requests do not queue up: requests that arrive while a step burst is
    being executed collapse into a single pending request. If a tick raises
    an exception, the worker stores it in `error` and stops ticking the
    device.
    """
    def __init__(
        self,
        name: str,
        device: StepperDevice,
        logger: logging.Logger | None = None
    ) -> None:
        super().__init__(name=f"DeviceWorker-{name}", daemon=True)
        self.item_name = name
        self.device = device
        self.logger = logger or logging.getLogger(__name__)
        self.error: Exception | None = None
        self._requested = threading.Event()
        self._stopped = threading.Event()

    def request_tick(self) -> None:
        self._requested.set()

    def stop(self) -> None:
        self._stopped.set()
        self._requested.set()

    def run(self) -> None:
        while True:
            self._requested.wait()
            if self._stopped.is_set():
                break
            self._requested.clear()
            try:
                self.device.tick()
            except Exception as e:
                self.error = e
                self.logger.error(
                    f"[{self.item_name}] Tick failed, device halted: {e!r}"
                )
                break


class WorldScheduler(EventEmitter):
    """
    Registry of stepper devices that are advanced together by one shared
    fixed-period timer.

    The timer period only gates how often the devices are asked to catch up
    with their motion tasks; the speed of the motion itself is set by the
    tasks and bounded by the settle delays of the motors. Keep the period far
    below the smallest settle delay.

    Notifications
    -------------
    - `start()`: the scheduler has been started.
    - `itemChange(name, snapshot)`: the state of device `name` has changed;
      `snapshot` is the result of its `to_serializable()`.
    """
    def __init__(
        self,
        tick_period_us: float = 50.0,
        logger: logging.Logger | None = None
    ) -> None:
        """
        Creates a `WorldScheduler`.

        Parameters
        ----------
        tick_period_us:
            Period of the shared tick timer in microseconds.
        logger:
            `logging.Logger` object. If `None`, the module logger is used.
        """
        super().__init__()
        if tick_period_us <= 0:
            raise ConfigurationError("Tick period must be positive.")
        self.tick_period_us = tick_period_us
        self.logger = logger or logging.getLogger(__name__)
        self.items: dict[str, StepperDevice] = {}
        self.timer: RecurringTimer | None = None
        self._workers: dict[str, DeviceWorker] = {}
        self._change_handlers: dict[str, Callable[[], None]] = {}
        self._registry_lock = threading.RLock()
        self._exit_hook_registered = False

    @property
    def running(self) -> bool:
        return self.timer is not None and self.timer.active

    def start(self) -> None:
        """
        Energizes the coils of every device and starts ticking. Calling
        `start()` on a started scheduler has no effect.
        """
        if self.timer is not None:
            return
        for device in self._devices():
            device.turn_on()
        self.timer = RecurringTimer(name="WorldTimer", logger=self.logger)
        self.resume()
        if not self._exit_hook_registered:
            atexit.register(self.turn_off)
            self._exit_hook_registered = True
        self.logger.info(f"World started with {len(self.items)} device(s)")
        self.emit("start")

    def pause(self) -> None:
        """Stops ticking; the devices keep their state."""
        if self.timer is not None:
            self.timer.clear_recurring()

    def resume(self) -> None:
        """
        Restarts ticking after `pause()`.

        Raises
        ------
        ContractViolation
            If the scheduler was never started.
        """
        if self.timer is None:
            raise ContractViolation("Must start before resuming")
        self.timer.set_recurring(self._dispatch, self.tick_period_us)

    def turn_off(self) -> None:
        """Stops ticking and releases the coils of every device."""
        self.pause()
        for device in self._devices():
            device.turn_off()

    def close(self) -> None:
        """
        Turns everything off and ends the device worker threads. May be
        called from a device listener, i.e. on a worker thread; that worker
        ends once the current tick has returned.
        """
        if self._exit_hook_registered:
            atexit.unregister(self.turn_off)
            self._exit_hook_registered = False
        self.turn_off()
        with self._registry_lock:
            workers = list(self._workers.values())
        for worker in workers:
            worker.stop()
            if worker is not threading.current_thread():
                worker.join()

    def _devices(self) -> list[StepperDevice]:
        with self._registry_lock:
            return list(self.items.values())

    def _dispatch(self) -> None:
        """Timer callback: asks every device worker to tick its device."""
        with self._registry_lock:
            workers = list(self._workers.values())
        for worker in workers:
            worker.request_tick()

    def tick(self) -> None:
        """
        Ticks every device synchronously on the calling thread. Exceptions
        raised by a device propagate to the caller.

        Raises
        ------
        ContractViolation
            If the scheduler is running; the device workers own the ticks
            then.
        """
        if self.running:
            raise ContractViolation("Cannot tick synchronously while running")
        for device in self._devices():
            device.tick()

    def check_workers(self) -> None:
        """Re-raises the first exception that halted a device worker."""
        with self._registry_lock:
            workers = list(self._workers.values())
        for worker in workers:
            if worker.error is not None:
                raise worker.error

    def add_item(self, name: str, device: StepperDevice) -> StepperDevice:
        """
        Registers `device` under `name`. Changes of the device are republished
        as `itemChange(name, snapshot)`. A device added to a started
        scheduler is energized immediately.

        Raises
        ------
        ConfigurationError
            If a device with the same name is already registered.
        """
        with self._registry_lock:
            if name in self.items:
                raise ConfigurationError(f"device `{name}` already exists")

            def on_change() -> None:
                self.emit("itemChange", name, device.to_serializable())

            device.on("change", on_change)
            self.items[name] = device
            self._change_handlers[name] = on_change
            worker = DeviceWorker(name, device, self.logger)
            self._workers[name] = worker
            worker.start()
        if self.timer is not None:
            device.turn_on()
        self.logger.info(f"[{name}] Device added")
        return device

    def remove_item(self, name: str) -> StepperDevice | None:
        """
        Unregisters the device with the given name and releases its coils.
        Returns the device, or `None` if no device has this name.
        """
        with self._registry_lock:
            device = self.items.pop(name, None)
            handler = self._change_handlers.pop(name, None)
            worker = self._workers.pop(name, None)
        if device is None:
            return None
        if handler is not None:
            device.off("change", handler)
        device.turn_off()
        if worker is not None:
            worker.stop()
            if worker is not threading.current_thread():
                worker.join()
        self.logger.info(f"[{name}] Device removed")
        return device

    def serialize(self) -> dict[str, dict[str, Any]]:
        """Returns the `to_serializable()` snapshot of every device by name."""
        with self._registry_lock:
            items = list(self.items.items())
        return {name: device.to_serializable() for name, device in items}

    def __contains__(self, name: str) -> bool:
        return name in self.items

    def __getitem__(self, name: str) -> StepperDevice:
        return self.items[name]

    def __len__(self) -> int:
        return len(self.items)

    @classmethod
    def from_config(
        cls,
        source: str | Path | Mapping[str, Any] | WorldConfig,
        pin_factory: Factory | None = None,
        logger: logging.Logger | None = None,
        **device_kwargs: Any
    ) -> 'WorldScheduler':
        """
        Creates a scheduler and registers the devices described by a TOML
        configuration file, an already parsed configuration mapping, or a
        `WorldConfig`. Extra keyword arguments are passed to every
        `StepperDevice` (e.g. `clock` or `sleep`).

        If `pin_factory` is `None`, the pin factory named in the `[world]`
        section is used.
        """
        config = source if isinstance(source, WorldConfig) else load_config(source)
        if pin_factory is None:
            pin_factory = create_pin_factory(config.pin_factory)
        world = cls(tick_period_us=config.tick_period_us, logger=logger)
        for name, device_cfg in config.devices.items():
            device = StepperDevice(
                pins=device_cfg.pins,
                model=device_cfg.model,
                gear_ratio=device_cfg.gear_ratio,
                start_hour=device_cfg.start_hour,
                name=name,
                pin_factory=pin_factory,
                logger=logger,
                profiles=config.motor_profiles,
                idle_power_down=device_cfg.idle_power_down,
                **device_kwargs
            )
            world.add_item(name, device)
        return world
