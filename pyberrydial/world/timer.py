from typing import Callable
import logging
import threading
import time


class RecurringTimer:
    """
    Calls a callback at a fixed period on a background (daemon) thread.

    When the callback takes longer than the period, the timer does not try to
    catch up on the missed calls: the next call is scheduled one period after
    the late one.
    """
    def __init__(
        self,
        name: str = "RecurringTimer",
        logger: logging.Logger | None = None
    ) -> None:
        self.name = name
        self.logger = logger or logging.getLogger(__name__)
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._period: float = 0.0

    @property
    def active(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def set_recurring(self, callback: Callable[[], None], period_us: float) -> None:
        """
        Starts calling `callback` every `period_us` microseconds. A callback
        that was set before is cleared first.
        """
        if period_us <= 0:
            raise ValueError("Period must be positive.")
        self.clear_recurring()
        self._period = period_us * 1e-6
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(callback, self._stop_event),
            name=self.name,
            daemon=True
        )
        self._thread.start()

    def clear_recurring(self) -> None:
        """Stops calling the callback. Returns when the timer thread has ended."""
        thread = self._thread
        if thread is None:
            return
        self._stop_event.set()
        if thread is not threading.current_thread():
            thread.join()
        self._thread = None

    def _run(self, callback: Callable[[], None], stop_event: threading.Event) -> None:
        t_ref = time.perf_counter()
        while not stop_event.is_set():
            t_ref += self._period
            try:
                callback()
            except Exception:
                self.logger.exception(f"[{self.name}] Callback failed, timer stopped")
                break
            if (sleep_time := t_ref - time.perf_counter()) > 0:
                time.sleep(sleep_time)
            else:
                t_ref = time.perf_counter()
