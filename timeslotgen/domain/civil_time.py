"""
Conversion between civil readings (calendar date + clock time) and instants.

Named zones are resolved with a two-pass offset correction driven purely by
the zone database as exposed through pytz: read the civil fields as if they
were UTC, subtract the zone offset found at that trial instant, then re-check
the offset at the shifted instant and correct once more if a transition was
crossed. Repeated and skipped hours are not special-cased; whichever offset
the second pass lands on wins.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Dict, Optional

import pytz
from dateutil import tz

from .exceptions import InvalidInputError
from .models import CalendarDate, TimeOfDay

MILLIS_PER_SECOND = 1000
MILLIS_PER_MINUTE = 60_000

UTC = pytz.UTC

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def to_epoch_ms(value: datetime) -> int:
    """Return the epoch milliseconds of an aware datetime."""
    if value.tzinfo is None or value.utcoffset() is None:
        raise InvalidInputError(
            f"Naive datetime {value!r} is not an absolute instant",
            value=value,
        )
    seconds = calendar.timegm(value.utctimetuple())
    return seconds * MILLIS_PER_SECOND + value.microsecond // 1000


def from_epoch_ms(millis: int) -> datetime:
    """Return the UTC instant for the given epoch milliseconds."""
    return _EPOCH + timedelta(milliseconds=millis)


def _utc_fields_to_ms(year: int, month: int, day: int, hour: int, minute: int, second: int) -> int:
    return calendar.timegm((year, month, day, hour, minute, second, 0, 0, 0)) * MILLIS_PER_SECOND


@dataclass(frozen=True)
class Zone:
    """
    The zone a civil reading belongs to.

    ``Zone.local()`` is the ambient zone of the host; ``Zone.named(...)`` is
    an IANA zone such as ``"Europe/Berlin"``.
    """
    name: Optional[str] = None

    @classmethod
    def local(cls) -> "Zone":
        return cls(name=None)

    @classmethod
    def named(cls, name: str) -> "Zone":
        if not isinstance(name, str) or not name.strip():
            raise InvalidInputError(f"Invalid timezone name: {name!r}", value=name, field="timezone")
        return cls(name=name.strip())

    @classmethod
    def from_optional(cls, name: Optional[str]) -> "Zone":
        return cls.local() if name is None else cls.named(name)

    @property
    def is_local(self) -> bool:
        return self.name is None

    def __str__(self) -> str:
        return self.name or "local"


class ZoneCache:
    """
    Read-through cache mapping zone names to pytz timezones.

    Entries are written once and never invalidated.
    """

    def __init__(self) -> None:
        self._zones: Dict[str, tzinfo] = {}

    def get(self, name: str) -> tzinfo:
        zone = self._zones.get(name)
        if zone is None:
            try:
                loaded = pytz.timezone(name)
            except pytz.UnknownTimeZoneError as exc:
                raise InvalidInputError(
                    f"Unknown timezone: {name}", value=name, field="timezone"
                ) from exc
            zone = self._zones.setdefault(name, loaded)
        return zone

    def __contains__(self, name: str) -> bool:
        return name in self._zones

    def __len__(self) -> int:
        return len(self._zones)


class CivilTimeResolver:
    """
    Converts civil readings to instants and instants to calendar dates.

    Each resolver owns its zone cache, so independent instances never share
    state.
    """

    def __init__(self, cache: ZoneCache | None = None):
        self.cache = cache if cache is not None else ZoneCache()

    def tzinfo(self, zone: Zone) -> tzinfo:
        """Return the tzinfo backing ``zone``."""
        if zone.is_local:
            return tz.tzlocal()
        return self.cache.get(zone.name)

    def civil_to_instant(self, calendar_date: CalendarDate, time: TimeOfDay, zone: Zone) -> datetime:
        """
        Find the instant whose wall-clock reading in ``zone`` is the given date and time.

        Args:
            calendar_date: Civil date (assumed valid)
            time: Civil time of day (assumed valid)
            zone: Zone the reading belongs to

        Returns:
            UTC instant
        """
        if zone.is_local:
            local = datetime(
                calendar_date.year,
                calendar_date.month,
                calendar_date.day,
                time.hour,
                time.minute,
                time.second,
                tzinfo=tz.tzlocal(),
            )
            return local.astimezone(UTC)

        trial = _utc_fields_to_ms(
            calendar_date.year,
            calendar_date.month,
            calendar_date.day,
            time.hour,
            time.minute,
            time.second,
        )
        offset = self.offset_ms(trial, zone)
        adjusted = trial - offset
        offset_after = self.offset_ms(adjusted, zone)
        if offset != offset_after:
            return from_epoch_ms(trial - offset_after)
        return from_epoch_ms(adjusted)

    def offset_ms(self, millis: int, zone: Zone) -> int:
        """
        UTC offset of ``zone`` at the given instant, in milliseconds.

        Derived from the zone's civil reading of the instant rather than any
        fixed offset table.
        """
        local = from_epoch_ms(millis).astimezone(self.tzinfo(zone))
        as_utc = _utc_fields_to_ms(local.year, local.month, local.day, local.hour, local.minute, local.second)
        return as_utc - (millis - millis % MILLIS_PER_SECOND)

    def instant_to_calendar(self, instant: datetime, zone: Zone) -> CalendarDate:
        """Read the civil date of an instant in ``zone``."""
        if instant.tzinfo is None or instant.utcoffset() is None:
            raise InvalidInputError(f"Naive datetime {instant!r} is not an absolute instant", value=instant)
        local = instant.astimezone(self.tzinfo(zone))
        return CalendarDate(year=local.year, month=local.month, day=local.day)
