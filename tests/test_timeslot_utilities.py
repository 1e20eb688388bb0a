"""
Tests for slot helpers: creation, overlap, containment, merging and gaps.
"""

from datetime import datetime

import pytest
from dateutil.parser import isoparse

from timeslotgen.domain.exceptions import InvalidInputError, InvalidRangeError
from timeslotgen.domain.models import Slot, SlotMetadata, TimeRange
from timeslotgen.domain.timeslot import contains, create_timeslot, find_gaps, merge_slots, overlaps


def _slot(start: str, end: str, index=None) -> Slot:
    metadata = SlotMetadata(index=index, duration_minutes=0) if index is not None else None
    return Slot(start=isoparse(f"2024-01-15T{start}:00Z"), end=isoparse(f"2024-01-15T{end}:00Z"), metadata=metadata)


class TestCreateTimeslot:
    """Tests for create_timeslot."""

    def test_converts_to_utc(self):
        slot = create_timeslot(isoparse("2024-01-15T10:00:00+01:00"), isoparse("2024-01-15T11:00:00+01:00"))

        assert slot == _slot("09:00", "10:00")
        assert slot.start.utcoffset().total_seconds() == 0
        assert slot.metadata is None

    @pytest.mark.parametrize("end", ["2024-01-15T09:00:00Z", "2024-01-15T08:00:00Z"])
    def test_end_must_follow_start(self, end):
        with pytest.raises(InvalidRangeError, match="end must be after its start"):
            create_timeslot(isoparse("2024-01-15T09:00:00Z"), isoparse(end))

    def test_naive_datetimes_rejected(self):
        with pytest.raises(InvalidInputError, match="start must be timezone-aware"):
            create_timeslot(datetime(2024, 1, 15, 9), isoparse("2024-01-15T10:00:00Z"))

    def test_non_datetime_rejected(self):
        with pytest.raises(InvalidInputError, match="end must be a datetime"):
            create_timeslot(isoparse("2024-01-15T09:00:00Z"), "2024-01-15T10:00:00Z")


class TestOverlapAndContains:
    """Tests for overlaps and contains."""

    def test_overlaps(self):
        assert overlaps(_slot("09:00", "10:00"), _slot("09:30", "10:30"))
        assert not overlaps(_slot("09:00", "10:00"), _slot("10:00", "11:00"))

    def test_overlaps_accepts_time_ranges(self):
        other = TimeRange(start=isoparse("2024-01-15T09:59:00Z"), end=isoparse("2024-01-15T12:00:00Z"))

        assert overlaps(_slot("09:00", "10:00"), other)

    def test_contains_is_half_open(self):
        slot = _slot("09:00", "10:00")

        assert contains(slot, isoparse("2024-01-15T09:00:00Z"))
        assert contains(slot, isoparse("2024-01-15T09:59:59Z"))
        assert not contains(slot, isoparse("2024-01-15T10:00:00Z"))


class TestMergeSlots:
    """Tests for merge_slots."""

    def test_merges_sorted_and_drops_metadata(self):
        merged = merge_slots([_slot("10:00", "11:00", 1), _slot("09:00", "10:00", 0), _slot("13:00", "14:00", 2)])

        assert merged == [_slot("09:00", "11:00"), _slot("13:00", "14:00")]
        assert all(slot.metadata is None for slot in merged)

    def test_empty(self):
        assert merge_slots([]) == []


class TestFindGaps:
    """Tests for find_gaps."""

    def test_gaps_between_booked_slots(self):
        gaps = find_gaps(
            [_slot("10:00", "11:00"), _slot("10:30", "12:00"), _slot("14:00", "15:00")],
            _slot("09:00", "17:00"),
        )

        assert gaps == [_slot("09:00", "10:00"), _slot("12:00", "14:00"), _slot("15:00", "17:00")]

    def test_booked_slots_outside_range_ignored(self):
        gaps = find_gaps([_slot("07:00", "09:30"), _slot("16:30", "18:00")], _slot("09:00", "17:00"))

        assert gaps == [_slot("09:30", "16:30")]

    def test_fully_booked(self):
        assert find_gaps([_slot("08:00", "18:00")], _slot("09:00", "17:00")) == []

    def test_nothing_booked(self):
        assert find_gaps([], _slot("09:00", "17:00")) == [_slot("09:00", "17:00")]
