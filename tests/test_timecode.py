"""Tests for timecode parsing."""

import pytest

from timed_lyrics.lyrics.timecode import parse_timecode, resolve_span_times


class TestParseTimecode:
    """Tests for parse_timecode."""

    def test_seconds_only(self):
        """Test a bare seconds value."""
        assert parse_timecode("15.417") == pytest.approx(15.417, abs=1e-4)

    def test_integer_seconds(self):
        """Test seconds without a fraction."""
        assert parse_timecode("42") == pytest.approx(42.0)

    def test_minutes_and_seconds(self):
        """Test the MM:SS.mmm notation."""
        assert parse_timecode("1:02.915") == pytest.approx(62.915, abs=1e-4)

    def test_hours_minutes_seconds(self):
        """Test the H:MM:SS.mmm notation."""
        assert parse_timecode("1:02:03.500") == pytest.approx(3723.5, abs=1e-4)

    def test_comma_decimal_separator(self):
        """Test that a comma works as the decimal separator."""
        assert parse_timecode("12,25") == pytest.approx(12.25, abs=1e-4)
        assert parse_timecode("01:00,5") == pytest.approx(60.5, abs=1e-4)

    def test_surrounding_whitespace(self):
        """Test that surrounding whitespace is ignored."""
        assert parse_timecode("  2.5 ") == pytest.approx(2.5)

    def test_bare_fraction(self):
        """Test fractions without a leading digit."""
        assert parse_timecode(".5") == pytest.approx(0.5)
        assert parse_timecode("5.") == pytest.approx(5.0)

    def test_absent_value(self):
        """Test that an absent attribute is reported as None."""
        assert parse_timecode(None) is None

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "   ",
            "abc",
            "1:2:3:4",
            "1:",
            ":5",
            "-1.0",
            "1.2.3",
            "1_000",
            "nan",
            "1e3",
            "10s",
            "9" * 400,
            "9" * 400 + ":00",
        ],
    )
    def test_unparsable_values_yield_zero(self, value):
        """Test that unparsable values degrade to zero."""
        assert parse_timecode(value) == 0.0

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("0:00:00.000", 0.0),
            ("2:05:09.125", 2 * 3600 + 5 * 60 + 9.125),
            ("59:59.999", 59 * 60 + 59.999),
            ("03:07,250", 3 * 60 + 7.25),
            ("7.001", 7.001),
            ("0,040", 0.04),
        ],
    )
    def test_notation_matches_component_sum(self, value, expected):
        """Test that every notation equals hours*3600 + minutes*60 + seconds."""
        assert parse_timecode(value) == pytest.approx(expected, abs=1e-4)


class TestResolveSpanTimes:
    """Tests for begin/end defaulting."""

    def test_both_present(self):
        """Test a span with both bounds."""
        assert resolve_span_times("0.5", "0.9") == pytest.approx((0.5, 0.9))

    def test_end_only(self):
        """Test that an end-only span starts at zero and keeps its end."""
        start, end = resolve_span_times(None, "2.5")
        assert start == 0.0
        assert end == pytest.approx(2.5)

    def test_begin_only_is_zero_length(self):
        """Test that a missing end mirrors the resolved begin."""
        assert resolve_span_times("3.25", None) == pytest.approx((3.25, 3.25))

    def test_neither_present(self):
        """Test a span without timing attributes."""
        assert resolve_span_times(None, None) == (0.0, 0.0)

    def test_unparsable_end_never_precedes_start(self):
        """Test that an unparsable end is clamped to the start."""
        assert resolve_span_times("4.0", "garbage") == pytest.approx((4.0, 4.0))

    def test_end_before_begin_is_clamped(self):
        """Test that the end is never earlier than the start."""
        assert resolve_span_times("5.0", "4.0") == pytest.approx((5.0, 5.0))
