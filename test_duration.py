"""Tests for duration strings and timestamp helpers."""

from datetime import date

import pytest

from duration import (
    InvalidDurationUnit,
    add_minutes,
    compare,
    format_duration,
    parse_duration,
    to_iso,
    truncate_to_date,
)


# ---------------------------------------------------------------------------
# parse_duration
# ---------------------------------------------------------------------------

class TestParseDuration:

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("1h", 60),
            ("45m", 45),
            ("1d", 480),
            ("1d 2h", (8 + 2) * 60),
            ("2d 3h 25m", (16 + 3) * 60 + 25),
            ("1d 7h 40m", 480 + 7 * 60 + 40),
            ("2H 30M", 150),
            ("  2h   30m ", 150),
        ],
    )
    def test_parses(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["1x", "2h 30s", "90", "1w"])
    def test_rejects_unknown_unit(self, value):
        with pytest.raises(InvalidDurationUnit):
            parse_duration(value)

    def test_rejects_empty(self):
        with pytest.raises(InvalidDurationUnit):
            parse_duration("   ")

    def test_unreadable_amount_counts_as_zero(self, capsys):
        assert parse_duration("xh 30m") == 30
        assert "WARNING" in capsys.readouterr().out

    def test_invalid_unit_is_value_error(self):
        with pytest.raises(ValueError, match="'x'"):
            parse_duration("3x")


# ---------------------------------------------------------------------------
# format_duration
# ---------------------------------------------------------------------------

class TestFormatDuration:

    @pytest.mark.parametrize(
        "minutes, expected",
        [
            (0, "0m"),
            (-5, "0m"),
            (1, "1m"),
            (60, "1h"),
            (160, "2h 40m"),
            (480, "8h"),
            (1500, "25h"),
        ],
    )
    def test_formats(self, minutes, expected):
        assert format_duration(minutes) == expected

    @pytest.mark.parametrize(
        "value, canonical",
        [
            ("1h", "1h"),
            ("2h 30m", "2h 30m"),
            ("1d 2h", "10h"),
            ("90m", "1h 30m"),
        ],
    )
    def test_canonical_round_trip(self, value, canonical):
        assert format_duration(parse_duration(value)) == canonical


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------

class TestTimestamps:

    def test_truncate_to_date(self):
        assert truncate_to_date("14 Apr 2020 10:00") == date(2020, 4, 14)

    def test_truncate_with_custom_pattern(self):
        assert truncate_to_date("2020-04-14 23:59", "%Y-%m-%d %H:%M") == date(2020, 4, 14)

    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ("14 Apr 2020 10:00", "14 Apr 2020 11:00", -1),
            ("14 Apr 2020 10:00", "14 Apr 2020 10:00", 0),
            ("15 Apr 2020 08:00", "14 Apr 2020 18:00", 1),
        ],
    )
    def test_compare(self, a, b, expected):
        assert compare(a, b) == expected

    def test_add_minutes_crosses_hour(self):
        assert add_minutes("14 Apr 2020 10:40", 95) == "14 Apr 2020 12:15"

    def test_to_iso_has_millis_and_offset(self):
        iso = to_iso("17 Apr 2020 08:20")
        assert iso.startswith("2020-04-17T08:20:00.000")
        assert iso[-5] in "+-"
        assert iso[-4:].isdigit()
