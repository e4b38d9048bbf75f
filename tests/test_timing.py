import time

from pyberrydial.utils import precise_sleep


def test_sleeps_at_least_the_requested_time():
    t_start = time.perf_counter()
    precise_sleep(0.005)
    assert time.perf_counter() - t_start >= 0.005


def test_spin_only_below_threshold():
    t_start = time.perf_counter()
    precise_sleep(0.0005)
    assert time.perf_counter() - t_start >= 0.0005


def test_non_positive_returns_immediately():
    t_start = time.perf_counter()
    precise_sleep(0)
    precise_sleep(-1)
    assert time.perf_counter() - t_start < 0.05
