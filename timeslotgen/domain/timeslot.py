"""
Helpers for working with generated slots.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Union

from .civil_time import UTC
from .exceptions import InvalidInputError, InvalidRangeError
from .models import Slot, TimeRange


def _as_utc(value: datetime, name: str) -> datetime:
    if not isinstance(value, datetime):
        raise InvalidInputError(f"{name} must be a datetime, got {value!r}", value=value, field=name)
    if value.tzinfo is None or value.utcoffset() is None:
        raise InvalidInputError(f"{name} must be timezone-aware: {value!r}", value=value, field=name)
    return value.astimezone(UTC)


def create_timeslot(start: datetime, end: datetime) -> Slot:
    """
    Create a validated slot ensuring the start is before the end.

    Raises:
        InvalidInputError: If either value is not an aware datetime
        InvalidRangeError: If end is not after start
    """
    start_utc = _as_utc(start, "start")
    end_utc = _as_utc(end, "end")

    if end_utc <= start_utc:
        raise InvalidRangeError("Timeslot end must be after its start", value=(start, end))

    return Slot(start=start_utc, end=end_utc)


def overlaps(a: Union[Slot, TimeRange], b: Union[Slot, TimeRange]) -> bool:
    """Determine if two slots overlap. Touching slots do not."""
    return a.start < b.end and b.start < a.end


def contains(slot: Union[Slot, TimeRange], instant: datetime) -> bool:
    """Return True if the instant falls within the slot (inclusive start, exclusive end)."""
    return slot.start <= instant < slot.end


def merge_slots(slots: Iterable[Slot]) -> List[Slot]:
    """
    Sort slots by start time and merge any overlapping or adjacent ones.

    Merged slots do not carry metadata.
    """
    ordered = sorted(slots, key=lambda s: s.start)
    if not ordered:
        return []

    merged: List[Slot] = [Slot(start=ordered[0].start, end=ordered[0].end)]

    for current in ordered[1:]:
        last = merged[-1]
        if current.start <= last.end:
            if current.end > last.end:
                merged[-1] = Slot(start=last.start, end=current.end)
        else:
            merged.append(Slot(start=current.start, end=current.end))

    return merged


def find_gaps(slots: Iterable[Slot], within: Union[Slot, TimeRange]) -> List[Slot]:
    """
    Given booked slots and a range, return the free time within that range.
    """
    booked = merge_slots(s for s in slots if s.start < within.end and s.end > within.start)

    gaps: List[Slot] = []
    cursor = within.start

    for slot in booked:
        slot_start = max(slot.start, within.start)
        if cursor < slot_start:
            gaps.append(Slot(start=cursor, end=slot_start))
        slot_end = min(slot.end, within.end)
        if slot_end > cursor:
            cursor = slot_end

    if cursor < within.end:
        gaps.append(Slot(start=cursor, end=within.end))

    return gaps
