"""
Domain models for schedule descriptions, time ranges and generated slots.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Union

from .exceptions import InvalidRangeError


@dataclass(frozen=True)
class CalendarDate:
    """A civil date with no time-of-day or zone attached."""
    year: int
    month: int
    day: int

    @classmethod
    def from_date(cls, value: date) -> "CalendarDate":
        return cls(year=value.year, month=value.month, day=value.day)

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True)
class TimeOfDay:
    """A civil clock reading with no date or zone attached."""
    hour: int
    minute: int = 0
    second: int = 0

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"


MIDNIGHT = TimeOfDay(hour=0, minute=0, second=0)


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end instant.

    Invariant: start must be before end.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidRangeError(
                f"Start time {self.start} must be before end time {self.end}",
                value=(self.start, self.end),
            )

    def duration_minutes(self) -> float:
        """Return the duration in minutes."""
        return (self.end - self.start).total_seconds() / 60

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start


DateValue = Union[datetime, date, CalendarDate, str]
TimeOfDayInput = Union[str, time, TimeOfDay, Mapping[str, Any]]


@dataclass(frozen=True)
class TimeBoundary:
    """
    A boundary given as a time of day, optionally paired with a date.

    Without a date, the boundary borrows the default day of its context.
    """
    time: TimeOfDayInput
    date: Optional[DateValue] = None


BoundaryInput = Union[datetime, str, TimeBoundary, Mapping[str, Any]]


@dataclass(frozen=True)
class RangeInput:
    """A pair of unresolved boundaries."""
    start: BoundaryInput
    end: BoundaryInput


class Alignment(str, Enum):
    """Anchoring policy used to tile slots across a segment."""
    START = "start"
    END = "end"
    CENTER = "center"


LabelFormatter = Callable[[TimeRange, int, float], Optional[str]]


@dataclass
class GenerationConfig:
    """
    Declarative description of the slots to generate for one day.

    Durations are expressed in minutes. ``day`` provides the calendar date for
    time-only boundaries; ``timezone`` is an IANA zone name and falls back to
    the local zone of the host when omitted.
    """
    range: Union[RangeInput, Mapping[str, BoundaryInput]]
    slot_duration_minutes: float
    slot_interval_minutes: Optional[float] = None
    buffer_before_minutes: Optional[float] = None
    buffer_after_minutes: Optional[float] = None
    excluded_windows: List[Union[RangeInput, Mapping[str, BoundaryInput]]] = field(default_factory=list)
    timezone: Optional[str] = None
    day: Optional[DateValue] = None
    minimum_slot_duration_minutes: Optional[float] = None
    max_slots: Optional[int] = None
    include_edge: bool = True
    alignment: Union[Alignment, str] = Alignment.START
    label_formatter: Optional[LabelFormatter] = None


@dataclass(frozen=True)
class NormalizedConfig:
    """Validated, millisecond-based view of a GenerationConfig used for packing."""
    duration_ms: int
    interval_ms: int
    min_duration_ms: int
    include_edge: bool
    alignment: Alignment
    max_slots: Optional[int] = None
    label_formatter: Optional[LabelFormatter] = None

    def cap_reached(self, produced: int) -> bool:
        return self.max_slots is not None and produced >= self.max_slots


@dataclass(frozen=True)
class SlotMetadata:
    """Derived information attached to a generated slot."""
    index: int
    duration_minutes: float
    label: Optional[str] = None


@dataclass(frozen=True)
class Slot:
    """
    A generated slot: inclusive start, exclusive end.
    """
    start: datetime
    end: datetime
    metadata: Optional[SlotMetadata] = None

    def duration_minutes(self) -> float:
        """Return the duration in minutes."""
        return (self.end - self.start).total_seconds() / 60
