import time


def precise_sleep(seconds: float, spin_threshold: float = 2e-3) -> None:
    """
    Blocks the calling thread for `seconds` with sub-millisecond resolution.

    `time.sleep()` alone may overshoot by a scheduler quantum, so the last
    `spin_threshold` seconds are spent in a busy-wait on
    `time.perf_counter()`.
    """
    if seconds <= 0.0:
        return
    t_end = time.perf_counter() + seconds
    if seconds > spin_threshold:
        time.sleep(seconds - spin_threshold)
    while time.perf_counter() < t_end:
        pass
