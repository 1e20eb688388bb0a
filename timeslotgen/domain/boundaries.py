"""
Resolution of heterogeneous boundary inputs into instants.

A boundary may be an absolute instant, a time-only string, a date-only
string, a full datetime string or an object carrying a time and an optional
date. Shapes are detected in that order and each has its own resolver.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Mapping, Optional, Union

from dateutil.parser import isoparse

from .civil_time import UTC, CivilTimeResolver, Zone
from .exceptions import (
    FieldRangeError,
    InvalidFormatError,
    InvalidInputError,
    InvalidRangeError,
    MissingContextError,
)
from .models import (
    MIDNIGHT,
    BoundaryInput,
    CalendarDate,
    DateValue,
    RangeInput,
    TimeBoundary,
    TimeOfDay,
    TimeOfDayInput,
    TimeRange,
)

_DATE_ONLY = re.compile(r"^([0-9]{4})-([0-9]{2})-([0-9]{2})$")
_TIME_ONLY = re.compile(r"^([0-9]{1,2}):([0-9]{2})(?::([0-9]{2}))?$")
_TIME_PREFIX = re.compile(r"^([0-9]{2}):([0-9]{2})(?::([0-9]{2}))?")


def is_date_only_string(value: str) -> bool:
    return _DATE_ONLY.match(value.strip()) is not None


def is_time_only_string(value: str) -> bool:
    return _TIME_ONLY.match(value.strip()) is not None


def _check_range(value: int, low: int, high: int, what: str, raw: Any) -> None:
    if not low <= value <= high:
        raise FieldRangeError(f"{what.capitalize()} out of range: {raw!r}", value=raw, field=what)


def parse_date_only(value: str) -> CalendarDate:
    """
    Parse a ``YYYY-MM-DD`` string.

    Raises:
        InvalidFormatError: If the string is not date-only
        FieldRangeError: If month or day is out of range
    """
    match = _DATE_ONLY.match(value.strip())
    if not match:
        raise InvalidFormatError(f"Invalid date string: {value!r}", value=value, field="date")

    year, month, day = (int(part) for part in match.groups())
    _check_range(month, 1, 12, "month", value)
    _check_range(day, 1, calendar.monthrange(year, month)[1], "day", value)
    return CalendarDate(year=year, month=month, day=day)


def _time_field(raw: Any, name: str, source: Any) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise InvalidFormatError(f"{name.capitalize()} must be an integer: {source!r}", value=source, field=name)
    return raw


def parse_time_of_day(value: TimeOfDayInput) -> TimeOfDay:
    """
    Parse a time of day given as ``H:MM[:SS]``, a mapping, a ``datetime.time`` or a TimeOfDay.

    Raises:
        InvalidFormatError: If the value has the wrong shape
        FieldRangeError: If hour, minute or second is out of range
    """
    if isinstance(value, TimeOfDay):
        hour, minute, second = value.hour, value.minute, value.second
    elif isinstance(value, time):
        hour, minute, second = value.hour, value.minute, value.second
    elif isinstance(value, str):
        match = _TIME_ONLY.match(value.strip())
        if not match:
            raise InvalidFormatError(f"Invalid time string: {value!r}", value=value, field="time")
        hour = int(match.group(1))
        minute = int(match.group(2))
        second = int(match.group(3)) if match.group(3) else 0
    elif isinstance(value, Mapping) and "hour" in value:
        hour = _time_field(value["hour"], "hour", value)
        minute = _time_field(value.get("minute", 0), "minute", value)
        second = _time_field(value.get("second", 0), "second", value)
    else:
        raise InvalidInputError(f"Unsupported time input: {value!r}", value=value, field="time")

    _check_range(hour, 0, 23, "hour", value)
    _check_range(minute, 0, 59, "minute", value)
    _check_range(second, 0, 59, "second", value)
    return TimeOfDay(hour=hour, minute=minute, second=second)


class BoundaryKind(str, Enum):
    """Recognised boundary shapes, in detection order."""
    INSTANT = "instant"
    TIME_ONLY = "time-only"
    DATE_ONLY = "date-only"
    DATETIME = "datetime"
    TIME_OBJECT = "time-object"


def classify_boundary(value: Any) -> BoundaryKind:
    """Determine which shape a boundary input has."""
    if isinstance(value, datetime):
        return BoundaryKind.INSTANT
    if isinstance(value, str):
        trimmed = value.strip()
        if is_time_only_string(trimmed):
            return BoundaryKind.TIME_ONLY
        if is_date_only_string(trimmed):
            return BoundaryKind.DATE_ONLY
        return BoundaryKind.DATETIME
    if isinstance(value, TimeBoundary):
        return BoundaryKind.TIME_OBJECT
    if isinstance(value, Mapping) and "time" in value:
        return BoundaryKind.TIME_OBJECT
    raise InvalidInputError(f"Unsupported boundary input: {value!r}", value=value, field="boundary")


@dataclass(frozen=True)
class BoundaryContext:
    """Zone and fallback date used when resolving boundaries."""
    zone: Zone = Zone()
    default_calendar_date: Optional[CalendarDate] = None


@dataclass(frozen=True)
class ResolvedBoundary:
    instant: datetime
    calendar: CalendarDate


def coerce_range(value: Union[RangeInput, Mapping[str, Any]], field: str = "range") -> RangeInput:
    """Accept a RangeInput or a mapping with ``start`` and ``end`` keys."""
    if isinstance(value, RangeInput):
        return value
    if isinstance(value, Mapping) and "start" in value and "end" in value:
        return RangeInput(start=value["start"], end=value["end"])
    raise InvalidInputError(f"{field} must provide a start and an end: {value!r}", value=value, field=field)


class BoundaryResolver:
    """
    Interprets boundary inputs against a BoundaryContext.
    """

    def __init__(self, civil_time: CivilTimeResolver | None = None):
        self.civil_time = civil_time or CivilTimeResolver()

    def resolve_boundary(self, value: BoundaryInput, context: BoundaryContext) -> ResolvedBoundary:
        """
        Resolve one boundary to an instant plus its calendar date.

        Args:
            value: Boundary in any supported shape
            context: Zone and default calendar date

        Returns:
            ResolvedBoundary

        Raises:
            MissingContextError: If a time is given without any available date
            InvalidFormatError: If a string has no recognised shape
            FieldRangeError: If a field is out of range
            InvalidInputError: If the value is not a usable instant or type
        """
        kind = classify_boundary(value)

        if kind is BoundaryKind.INSTANT:
            instant = self._instant_from_datetime(value)
            return ResolvedBoundary(instant, self.civil_time.instant_to_calendar(instant, context.zone))

        if kind is BoundaryKind.TIME_ONLY:
            if context.default_calendar_date is None:
                raise MissingContextError(
                    f'Time-only boundary "{value}" requires a default day (set day or provide a date).',
                    value=value,
                    field="boundary",
                )
            time_of_day = parse_time_of_day(value)
            instant = self.civil_time.civil_to_instant(context.default_calendar_date, time_of_day, context.zone)
            return ResolvedBoundary(instant, context.default_calendar_date)

        if kind is BoundaryKind.DATE_ONLY:
            calendar_date = parse_date_only(value)
            instant = self.civil_time.civil_to_instant(calendar_date, MIDNIGHT, context.zone)
            return ResolvedBoundary(instant, calendar_date)

        if kind is BoundaryKind.DATETIME:
            instant = self.parse_datetime_string(value, context.zone)
            return ResolvedBoundary(instant, self.civil_time.instant_to_calendar(instant, context.zone))

        return self._resolve_time_object(value, context)

    def _resolve_time_object(self, value: Any, context: BoundaryContext) -> ResolvedBoundary:
        if isinstance(value, TimeBoundary):
            time_value, date_value = value.time, value.date
        else:
            time_value, date_value = value["time"], value.get("date")

        time_of_day = parse_time_of_day(time_value)
        if date_value is not None and date_value != "":
            calendar_date = self.calendar_from_date_value(date_value, context.zone)
        else:
            calendar_date = context.default_calendar_date

        if calendar_date is None:
            raise MissingContextError(
                "Time boundary requires a date when no default day is provided.",
                value=value,
                field="boundary",
            )

        instant = self.civil_time.civil_to_instant(calendar_date, time_of_day, context.zone)
        return ResolvedBoundary(instant, calendar_date)

    def resolve_range(self, value: Union[RangeInput, Mapping[str, Any]], context: BoundaryContext) -> TimeRange:
        """
        Resolve a start/end pair into a TimeRange.

        The end borrows the start's calendar date as its default day, so
        ``{"start": "09:00", "end": "17:00"}`` shares one implied day.

        Raises:
            InvalidRangeError: If the end is not strictly after the start
        """
        range_input = coerce_range(value)
        start = self.resolve_boundary(range_input.start, context)
        end_context = replace(
            context,
            default_calendar_date=start.calendar or context.default_calendar_date,
        )
        end = self.resolve_boundary(range_input.end, end_context)

        if end.instant <= start.instant:
            raise InvalidRangeError(
                "Timeslot range end must be after its start",
                value=(range_input.start, range_input.end),
                field="range",
            )

        return TimeRange(start=start.instant, end=end.instant)

    def calendar_from_date_value(self, value: DateValue, zone: Zone) -> CalendarDate:
        """
        Derive a calendar date from a date-like value.

        Aware datetimes and datetime strings are read in ``zone``; naive
        datetimes and plain dates contribute their own fields.
        """
        if isinstance(value, CalendarDate):
            return value
        if isinstance(value, datetime):
            if value.tzinfo is None or value.utcoffset() is None:
                return CalendarDate.from_date(value.date())
            return self.civil_time.instant_to_calendar(value, zone)
        if isinstance(value, date):
            return CalendarDate.from_date(value)
        if isinstance(value, str):
            if is_date_only_string(value):
                return parse_date_only(value)
            instant = self.parse_datetime_string(value, zone)
            return self.civil_time.instant_to_calendar(instant, zone)
        raise InvalidInputError(f"Unsupported date value: {value!r}", value=value, field="date")

    def parse_datetime_string(self, value: str, zone: Zone) -> datetime:
        """
        Parse a full datetime string into an instant.

        Strings with an explicit offset are absolute. Strings without one are
        civil readings in ``zone``.
        """
        trimmed = value.strip()
        normalized = trimmed if "T" in trimmed else trimmed.replace(" ", "T", 1)

        if "T" not in normalized:
            raise InvalidFormatError(f"Invalid boundary string: {value!r}", value=value, field="boundary")

        date_part, time_part = normalized.split("T", 1)
        if is_date_only_string(date_part):
            parse_date_only(date_part)

        time_match = _TIME_PREFIX.match(time_part)
        if time_match:
            _check_range(int(time_match.group(1)), 0, 23, "hour", value)
            _check_range(int(time_match.group(2)), 0, 59, "minute", value)
            if time_match.group(3):
                _check_range(int(time_match.group(3)), 0, 59, "second", value)

        try:
            parsed = isoparse(normalized)
        except (ValueError, OverflowError) as exc:
            raise InvalidFormatError(f"Invalid boundary string: {value!r}", value=value, field="boundary") from exc

        if parsed.tzinfo is not None:
            return _truncate_to_millis(parsed.astimezone(UTC))

        civil = self.civil_time.civil_to_instant(
            CalendarDate(year=parsed.year, month=parsed.month, day=parsed.day),
            TimeOfDay(hour=parsed.hour, minute=parsed.minute, second=parsed.second),
            zone,
        )
        return civil + timedelta(milliseconds=parsed.microsecond // 1000)

    @staticmethod
    def _instant_from_datetime(value: datetime) -> datetime:
        if value.tzinfo is None or value.utcoffset() is None:
            raise InvalidInputError(
                f"Naive datetime {value!r} is not an absolute instant; attach a timezone or pass a string",
                value=value,
                field="boundary",
            )
        return _truncate_to_millis(value.astimezone(UTC))


def _truncate_to_millis(instant: datetime) -> datetime:
    return instant.replace(microsecond=(instant.microsecond // 1000) * 1000)
