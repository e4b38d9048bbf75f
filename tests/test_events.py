from pyberrydial.core import EventEmitter


class TestEventEmitter:

    def test_listeners_called_in_subscription_order(self):
        emitter = EventEmitter()
        calls = []
        emitter.on("change", lambda value: calls.append(("a", value)))
        emitter.on("change", lambda value: calls.append(("b", value)))
        assert emitter.emit("change", 1)
        assert calls == [("a", 1), ("b", 1)]

    def test_emit_without_listeners(self):
        assert not EventEmitter().emit("change")

    def test_off(self):
        emitter = EventEmitter()
        calls = []

        def listener():
            calls.append(1)

        emitter.on("change", listener)
        emitter.off("change", listener)
        emitter.off("change", listener)
        emitter.emit("change")
        assert calls == []
        assert emitter.listener_count("change") == 0

    def test_once(self):
        emitter = EventEmitter()
        calls = []
        emitter.once("start", calls.append)
        emitter.emit("start", 1)
        emitter.emit("start", 2)
        assert calls == [1]

    def test_off_removes_once_listener(self):
        emitter = EventEmitter()
        calls = []
        emitter.once("start", calls.append)
        emitter.off("start", calls.append)
        emitter.emit("start", 1)
        assert calls == []

    def test_listener_may_unsubscribe_during_emit(self):
        emitter = EventEmitter()
        calls = []

        def first():
            calls.append("first")
            emitter.off("change", first)

        emitter.on("change", first)
        emitter.on("change", lambda: calls.append("second"))
        emitter.emit("change")
        emitter.emit("change")
        assert calls == ["first", "second", "second"]

    def test_remove_all_listeners(self):
        emitter = EventEmitter()
        emitter.on("start", print)
        emitter.on("finish", print)
        emitter.remove_all_listeners("start")
        assert emitter.listener_count("start") == 0
        assert emitter.listener_count("finish") == 1
        emitter.remove_all_listeners()
        assert emitter.listener_count("finish") == 0
