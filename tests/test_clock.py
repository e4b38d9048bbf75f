import pytest

from pyberrydial.motion import (
    ClockTime,
    clock_to_ratio,
    format_clock_time,
    parse_clock_time,
    ratio_to_clock
)


class TestRatioToClock:

    @pytest.mark.parametrize("ratio, expected", [
        (0.0, (12, 0, 0)),
        (0.25, (3, 0, 0)),
        (0.5, (6, 0, 0)),
        (0.75, (9, 0, 0)),
        (0.125, (1, 30, 0)),
    ])
    def test_dial_positions(self, ratio, expected):
        hour, minute, second = ratio_to_clock(ratio)
        assert (hour, minute) == expected[:2]
        assert second == pytest.approx(expected[2], abs=1e-6)

    def test_full_revolution_wraps_to_twelve(self):
        assert ratio_to_clock(1.0) == (12, 0, 0)

    def test_negative_ratio_wraps(self):
        assert ratio_to_clock(-0.25) == (9, 0, 0)

    def test_returns_clock_time(self):
        time = ratio_to_clock(0.5)
        assert isinstance(time, ClockTime)
        assert time.hour == 6

    @pytest.mark.parametrize("ratio", [
        0.0, 0.01, 0.125, 0.25, 1 / 3, 0.5, 0.6180339, 0.75, 0.999
    ])
    def test_round_trip(self, ratio):
        assert clock_to_ratio(ratio_to_clock(ratio)) == pytest.approx(ratio, abs=1e-9)


class TestClockToRatio:

    def test_twelve_is_zero(self):
        assert clock_to_ratio((12, 0, 0)) == 0.0
        assert clock_to_ratio("12:00:00") == 0.0

    def test_hour_zero_is_twelve(self):
        assert clock_to_ratio("0:00:00") == clock_to_ratio("12:00:00")

    def test_accepts_strings(self):
        assert clock_to_ratio("9:00:00") == pytest.approx(0.75)
        assert clock_to_ratio("6:30") == pytest.approx(6.5 / 12)
        assert clock_to_ratio("3") == pytest.approx(0.25)

    def test_seconds(self):
        assert clock_to_ratio(ClockTime(1, 0, 36.0)) == pytest.approx((1 + 0.01) / 12)


class TestParseAndFormat:

    def test_parse(self):
        assert parse_clock_time("11:00:00") == (11, 0, 0.0)
        assert parse_clock_time(" 7:05:30.5 ") == (7, 5, 30.5)

    @pytest.mark.parametrize("text", [
        "13:00:00", "5:60:00", "5:00:60", "-1:00", "abc", "1:2:3:4", ""
    ])
    def test_parse_invalid(self, text):
        with pytest.raises(ValueError):
            parse_clock_time(text)

    def test_canonical_string(self):
        assert str(ratio_to_clock(0.75)) == "9:00:00"
        assert str(ratio_to_clock(0.0)) == "12:00:00"
        assert format_clock_time((3, 5, 7.9)) == "3:05:07"

    def test_string_round_trip(self):
        assert str(parse_clock_time("10:15:45")) == "10:15:45"
