"""
Multi-day generation on top of the single-day engine.

The driver resolves an outer period once, runs the single-day generator for
every calendar day the period touches and keeps only the slots that lie
fully inside the period.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import timedelta
from typing import Any, List, Mapping, Union

from ..domain.boundaries import BoundaryContext
from ..domain.exceptions import InvalidRangeError, ValidationError
from ..domain.generator import TimeslotGenerator
from ..domain.models import CalendarDate, GenerationConfig, RangeInput, Slot

logger = logging.getLogger(__name__)

# Prevents runaway loops when the period is unreasonably large
DEFAULT_MAX_DAYS = 10_000


class DailyTimeslotGenerator:
    """
    Orchestrates per-day generation over an outer period.

    The single-day generator is injected so its zone cache can be shared
    across days.
    """

    def __init__(self, generator: TimeslotGenerator | None = None) -> None:
        self._generator = generator or TimeslotGenerator()

    def generate(
        self,
        period: Union[RangeInput, Mapping[str, Any]],
        config: GenerationConfig,
        max_days: int = DEFAULT_MAX_DAYS,
    ) -> List[Slot]:
        """
        Generate slots for every day of ``period``.

        Args:
            period: Outer start/end boundaries, resolved in the config's timezone
            config: Per-day description; ``day`` must be left unset
            max_days: Hard cap on the number of calendar days to iterate

        Returns:
            Slots of all days in chronological order

        Raises:
            ValidationError: If max_days is not positive or config.day is set
            InvalidRangeError: If the period spans more than max_days days
        """
        if isinstance(max_days, bool) or not isinstance(max_days, int) or max_days <= 0:
            raise ValidationError("max_days must be a positive number", value=max_days, field="max_days")
        if config.day is not None:
            raise ValidationError(
                "day is assigned per iteration by the daily generator; leave it unset",
                value=config.day,
                field="day",
            )

        zone = self._generator.resolve_zone(config.timezone)
        boundaries = self._generator.boundaries
        period_range = boundaries.resolve_range(period, BoundaryContext(zone=zone))

        civil_time = self._generator.civil_time
        first_day = civil_time.instant_to_calendar(period_range.start, zone).to_date()
        last_day = civil_time.instant_to_calendar(period_range.end, zone).to_date()
        day_count = (last_day - first_day).days + 1

        if day_count > max_days:
            raise InvalidRangeError(
                f"generate_daily_timeslots exceeded maximum day limit ({max_days}). "
                "Pass a smaller period or increase max_days.",
                value=day_count,
                field="period",
            )

        logger.debug("Generating slots for %d day(s) starting %s", day_count, first_day)

        results: List[Slot] = []
        for offset in range(day_count):
            day = CalendarDate.from_date(first_day + timedelta(days=offset))
            day_slots = self._generator.generate(dataclasses.replace(config, day=day))

            for slot in day_slots:
                if slot.start >= period_range.start and slot.end <= period_range.end:
                    results.append(slot)

        return results


def generate_daily_timeslots(
    period: Union[RangeInput, Mapping[str, Any]],
    config: GenerationConfig,
    max_days: int = DEFAULT_MAX_DAYS,
) -> List[Slot]:
    """Generate slots for every day of ``period``. See ``DailyTimeslotGenerator``."""
    return DailyTimeslotGenerator().generate(period, config, max_days=max_days)
