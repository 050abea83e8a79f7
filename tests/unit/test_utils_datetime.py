"""
Tests for taskdesk/utils/datetime_utils.py

Tests the UTC storage conversions and ISO rendering used at the API edges.
"""

import pytest
from datetime import datetime, timedelta
import pytz
from taskdesk.utils.datetime_utils import (
    get_local_tz,
    get_utc_now,
    to_naive_utc,
    to_iso_utc,
)


class TestGetLocalTz:
    """Tests for get_local_tz function."""

    def test_returns_timezone_object(self):
        """Test that get_local_tz returns a pytz timezone."""
        tz = get_local_tz()
        assert isinstance(tz, pytz.BaseTzInfo)

    def test_defaults_to_utc(self):
        """Test the default configured timezone."""
        assert get_local_tz().zone == "UTC"


class TestGetUtcNow:
    """Tests for get_utc_now function."""

    def test_returns_naive_datetime(self):
        """Test that get_utc_now returns naive datetime."""
        now = get_utc_now()
        assert isinstance(now, datetime)
        assert now.tzinfo is None

    def test_matches_utc_clock(self):
        """Test the value is the current UTC wall time."""
        reference = datetime.now(pytz.UTC).replace(tzinfo=None)
        assert abs(get_utc_now() - reference) < timedelta(seconds=5)


class TestToNaiveUtc:
    """Tests for to_naive_utc function."""

    def test_none_returns_none(self):
        assert to_naive_utc(None) is None

    def test_naive_is_unchanged(self):
        """Test naive input is assumed to already be UTC."""
        dt = datetime(2024, 1, 15, 9, 30)
        assert to_naive_utc(dt) == dt

    def test_aware_is_converted(self):
        """Test aware datetimes are shifted to UTC and stripped."""
        tz = pytz.timezone("Asia/Dubai")
        dt = tz.localize(datetime(2024, 1, 15, 13, 30))

        result = to_naive_utc(dt)

        assert result == datetime(2024, 1, 15, 9, 30)
        assert result.tzinfo is None


class TestToIsoUtc:
    """Tests for to_iso_utc function."""

    def test_none_returns_none(self):
        assert to_iso_utc(None) is None

    def test_naive_rendered_as_utc(self):
        assert to_iso_utc(datetime(2024, 1, 15, 9, 30)) == "2024-01-15T09:30:00+00:00"

    def test_microseconds_kept(self):
        assert to_iso_utc(datetime(2024, 1, 15, 9, 30, 0, 250000)) == "2024-01-15T09:30:00.250000+00:00"

    def test_aware_rendered_in_utc(self):
        """Test aware datetimes are rendered in UTC."""
        dt = pytz.timezone("America/New_York").localize(datetime(2024, 7, 1, 8, 0))
        assert to_iso_utc(dt) == "2024-07-01T12:00:00+00:00"

    @pytest.mark.parametrize("dt", [
        datetime(2024, 2, 29, 23, 59, 59),
        datetime(2025, 12, 31, 0, 0),
    ])
    def test_round_trips_through_storage(self, dt):
        """Test a rendered timestamp parses back to the stored value."""
        assert to_naive_utc(datetime.fromisoformat(to_iso_utc(dt))) == dt
