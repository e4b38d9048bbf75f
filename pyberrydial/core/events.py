"""
Minimal in-process publish/subscribe registry.

Stepper devices publish `start`, `step`, `finish` and `change` notifications;
the world scheduler subscribes to `change` and republishes it as
`itemChange`. Listeners are called synchronously, in subscription order, on
the thread that emits the event.
"""
from typing import Callable, Any
import threading


Listener = Callable[..., Any]


class EventEmitter:

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        self._listener_lock = threading.RLock()

    def on(self, event: str, listener: Listener) -> Listener:
        """
        Registers `listener` to be called each time `event` is emitted.
        Returns the listener.
        """
        with self._listener_lock:
            self._listeners.setdefault(event, []).append(listener)
        return listener

    add_listener = on

    def once(self, event: str, listener: Listener) -> Listener:
        """
        Registers `listener` to be called only the next time `event` is
        emitted.
        """
        def wrapper(*args, **kwargs):
            self.off(event, wrapper)
            return listener(*args, **kwargs)

        wrapper.listener = listener
        return self.on(event, wrapper)

    def off(self, event: str, listener: Listener) -> None:
        """
        Removes a previously registered listener. Unknown listeners are
        ignored.
        """
        with self._listener_lock:
            listeners = self._listeners.get(event, [])
            for registered in listeners:
                if registered == listener or getattr(registered, "listener", None) == listener:
                    listeners.remove(registered)
                    break
            if not listeners:
                self._listeners.pop(event, None)

    remove_listener = off

    def emit(self, event: str, *args: Any) -> bool:
        """
        Calls every listener of `event` with `args`. Returns `True` if the
        event had listeners.
        """
        with self._listener_lock:
            listeners = list(self._listeners.get(event, []))
        for listener in listeners:
            listener(*args)
        return bool(listeners)

    def listener_count(self, event: str) -> int:
        with self._listener_lock:
            return len(self._listeners.get(event, []))

    def remove_all_listeners(self, event: str | None = None) -> None:
        with self._listener_lock:
            if event is None:
                self._listeners.clear()
            else:
                self._listeners.pop(event, None)
