"""Unit tests for httpcurl/utils/duration.py: ?timeout= parsing."""

from __future__ import annotations

import pytest

from httpcurl.utils.duration import MAX_DURATION_SECONDS, DurationParseError, parse_duration


class TestParseDuration:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("10s", 10.0),
            ("1.5s", 1.5),
            ("300ms", 0.3),
            ("2m", 120.0),
            ("1h", 3600.0),
            ("1h30m", 5400.0),
            ("2h45m30.5s", 9930.5),
            ("1m1s1ms", 61.001),
            ("500us", 0.0005),
            ("500µs", 0.0005),
            ("500μs", 0.0005),
            ("1000000ns", 0.001),
            (".5s", 0.5),
            ("1.s", 1.0),
            ("+5s", 5.0),
            ("-5s", -5.0),
            ("0", 0.0),
            ("-0", 0.0),
            ("0s", 0.0),
        ],
    )
    def test_valid(self, value: str, expected: float) -> None:
        assert parse_duration(value) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "value",
        [
            "", "10", "1.5", "s", ".s", "10 s", " 10s", "10s ", "10sec", "10d", "1x", "abc",
            "--1s", "1s-2s", "1e3s",
            # beyond the int64 nanosecond range, including values that overflow a float
            "2562048h", "-2562048h", "9223372037s", "9" * 400 + "s", "9" * 400 + "h1s",
        ],
    )
    def test_invalid(self, value: str) -> None:
        with pytest.raises(DurationParseError) as exc_info:
            parse_duration(value)
        assert exc_info.value.value == value

    def test_longest_accepted_duration(self) -> None:
        assert parse_duration("2562047h") == pytest.approx(2562047 * 3600.0)
        assert parse_duration("9223372036s") <= MAX_DURATION_SECONDS

    def test_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_duration("forever")
