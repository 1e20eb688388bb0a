"""
Tests for domain models.
"""

import pytest
from dateutil.parser import isoparse

from timeslotgen.domain.exceptions import InvalidRangeError
from timeslotgen.domain.models import CalendarDate, Slot, TimeOfDay, TimeRange


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        start = isoparse("2024-11-25T09:00:00+01:00")
        end = isoparse("2024-11-25T17:00:00+01:00")

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end
        assert tr.duration_minutes() == 480  # 8 hours

    def test_invalid_time_range_raises_error(self):
        """Test that creating an inverted time range raises InvalidRangeError."""
        start = isoparse("2024-11-25T17:00:00Z")
        end = isoparse("2024-11-25T09:00:00Z")

        with pytest.raises(InvalidRangeError, match="Start time .* must be before end time"):
            TimeRange(start=start, end=end)

    def test_zero_length_time_range_raises_error(self):
        """Test that start == end is rejected; the error is also a ValueError."""
        instant = isoparse("2024-11-25T09:00:00Z")

        with pytest.raises(ValueError):
            TimeRange(start=instant, end=instant)

    def test_overlaps(self):
        """Test overlap detection. Touching ranges do not overlap."""
        tr1 = TimeRange(start=isoparse("2024-11-25T09:00:00Z"), end=isoparse("2024-11-25T12:00:00Z"))
        tr2 = TimeRange(start=isoparse("2024-11-25T11:00:00Z"), end=isoparse("2024-11-25T14:00:00Z"))
        tr3 = TimeRange(start=isoparse("2024-11-25T14:00:00Z"), end=isoparse("2024-11-25T17:00:00Z"))

        assert tr1.overlaps(tr2)
        assert tr2.overlaps(tr1)
        assert not tr1.overlaps(tr3)
        assert not tr2.overlaps(tr3)


class TestCivilValues:
    """Tests for CalendarDate and TimeOfDay."""

    def test_calendar_date_string(self):
        assert str(CalendarDate(2024, 3, 5)) == "2024-03-05"

    def test_calendar_date_round_trips_through_date(self):
        value = CalendarDate(2024, 2, 29)
        assert CalendarDate.from_date(value.to_date()) == value

    def test_time_of_day_defaults(self):
        assert TimeOfDay(hour=9) == TimeOfDay(hour=9, minute=0, second=0)
        assert str(TimeOfDay(hour=9, minute=5)) == "09:05:00"


class TestSlot:
    """Tests for Slot model."""

    def test_duration_minutes(self):
        slot = Slot(start=isoparse("2024-11-25T08:00:00Z"), end=isoparse("2024-11-25T08:20:30Z"))

        assert slot.duration_minutes() == 20.5
        assert slot.metadata is None
