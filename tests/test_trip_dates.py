"""Tests for trip date normalization."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from pob_tracker.errors import ValidationFailed
from pob_tracker.services.trip_dates import normalize_trip_date


def test_canonical_date_is_kept():
    """Test a YYYY-MM-DD date passes through unchanged."""
    assert normalize_trip_date("2024-01-05") == "2024-01-05"


def test_surrounding_whitespace_is_ignored():
    """Test whitespace around a date is stripped."""
    assert normalize_trip_date("  2024-01-05 ") == "2024-01-05"


def test_iso_timestamp_string():
    """Test a full ISO timestamp is reduced to its UTC day."""
    assert normalize_trip_date("2024-01-05T10:30:00.000Z") == "2024-01-05"
    assert normalize_trip_date("2024-01-05T23:30:00-05:00") == "2024-01-06"


def test_fallback_formats():
    """Test common non-ISO layouts."""
    assert normalize_trip_date("01/05/2024") == "2024-01-05"
    assert normalize_trip_date("January 5, 2024") == "2024-01-05"
    assert normalize_trip_date("Fri, 05 Jan 2024 00:00:00 GMT") == "2024-01-05"


def test_date_and_datetime_objects():
    """Test native date and datetime values."""
    assert normalize_trip_date(date(2024, 1, 5)) == "2024-01-05"
    assert normalize_trip_date(datetime(2024, 1, 5, 12, 0, tzinfo=UTC)) == "2024-01-05"

    plus_ten = timezone(timedelta(hours=10))
    assert normalize_trip_date(datetime(2024, 1, 5, 5, 0, tzinfo=plus_ten)) == "2024-01-04"


def test_epoch_milliseconds():
    """Test numbers are read as epoch milliseconds."""
    millis = int(datetime(2024, 1, 5, 8, 0, tzinfo=UTC).timestamp() * 1000)
    assert normalize_trip_date(millis) == "2024-01-05"


@pytest.mark.parametrize("value", ["", "   ", "not a date", "2024-13-45", "2024-02-30", True, None])
def test_invalid_dates_raise(value):
    """Test unparseable values are rejected."""
    with pytest.raises(ValidationFailed) as exc_info:
        normalize_trip_date(value)

    assert "Invalid trip date format" in exc_info.value.message
