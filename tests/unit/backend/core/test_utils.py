"""
Unit Tests for Core Utilities.

Timestamp helpers shared by the model layer and the wire format.
"""

from datetime import datetime, timedelta, timezone

import pytest

from notehub.backend.core.utils import (
    format_timestamp,
    parse_timestamp,
    to_naive_utc,
    truncate_to_seconds,
    utc_now,
    utc_now_seconds,
)


class TestUtcNow:
    """Tests for the clock helpers."""

    def test_utc_now_is_naive(self):
        assert utc_now().tzinfo is None

    def test_utc_now_close_to_system_utc(self):
        reference = datetime.now(timezone.utc).replace(tzinfo=None)
        assert abs(utc_now() - reference) < timedelta(seconds=5)

    def test_utc_now_seconds_has_no_microseconds(self):
        assert utc_now_seconds().microsecond == 0


class TestConversions:
    """Tests for timezone and precision normalization."""

    def test_aware_converted_to_naive_utc(self):
        aware = datetime(2024, 6, 1, 9, 30, tzinfo=timezone(timedelta(hours=-4)))
        assert to_naive_utc(aware) == datetime(2024, 6, 1, 13, 30)

    def test_naive_returned_unchanged(self):
        naive = datetime(2024, 6, 1, 9, 30)
        assert to_naive_utc(naive) is naive

    def test_truncate_to_seconds(self):
        assert truncate_to_seconds(datetime(2024, 1, 1, 0, 0, 1, 999_999)) == datetime(2024, 1, 1, 0, 0, 1)


class TestTimestampFormat:
    """Tests for the YYYY-MM-DDTHH:MM:SSZ text format."""

    def test_format(self):
        assert format_timestamp(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05Z"

    def test_format_drops_microseconds(self):
        assert format_timestamp(datetime(2024, 1, 2, 3, 4, 5, 678)) == "2024-01-02T03:04:05Z"

    def test_format_converts_aware_to_utc(self):
        aware = datetime(2024, 1, 2, 3, 0, 0, tzinfo=timezone(timedelta(hours=3)))
        assert format_timestamp(aware) == "2024-01-02T00:00:00Z"

    def test_parse(self):
        assert parse_timestamp("2024-12-31T23:59:59Z") == datetime(2024, 12, 31, 23, 59, 59)

    @pytest.mark.parametrize("value", ["2024-12-31", "2024-12-31 23:59:59", "not a date", ""])
    def test_parse_rejects_other_formats(self, value):
        with pytest.raises(ValueError):
            parse_timestamp(value)

    def test_lexical_order_matches_chronological_order(self):
        times = [datetime(2024, 1, 1) + timedelta(hours=7 * i) for i in range(50)]
        formatted = [format_timestamp(t) for t in reversed(times)]
        assert sorted(formatted) == [format_timestamp(t) for t in times]

    def test_early_years_are_zero_padded(self):
        assert format_timestamp(datetime(999, 1, 1)) == "0999-01-01T00:00:00Z"
        assert format_timestamp(datetime(1, 2, 3, 4, 5, 6)) == "0001-02-03T04:05:06Z"

    def test_padded_year_parses_back(self):
        assert parse_timestamp("0999-01-01T00:00:00Z") == datetime(999, 1, 1)

    def test_lexical_order_holds_across_year_widths(self):
        early, late = format_timestamp(datetime(999, 12, 31)), format_timestamp(datetime(2024, 1, 1))
        assert early < late
