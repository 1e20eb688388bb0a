"""
Single-day timeslot generation.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

from __future__ import annotations

import logging
import math
from datetime import timedelta
from typing import Any, List, Optional

from .boundaries import BoundaryContext, BoundaryResolver
from .civil_time import MILLIS_PER_MINUTE, CivilTimeResolver, Zone
from .exceptions import InvalidInputError, InvalidRangeError, ValidationError
from .intervals import normalize_exclusions, subtract_exclusions
from .models import Alignment, GenerationConfig, NormalizedConfig, Slot, TimeRange
from .slot_packer import SlotPacker

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _positive_minutes(value: Any, name: str) -> float:
    if not _is_number(value) or not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{name} must be a positive number, got {value!r}", value=value, field=name)
    return value


def _to_ms(minutes: float) -> int:
    return int(round(minutes * MILLIS_PER_MINUTE))


def validate_config(config: GenerationConfig) -> NormalizedConfig:
    """
    Validate a generation config and convert it to milliseconds.

    Runs before any date resolution is attempted.

    Raises:
        ValidationError: If any numeric setting, the alignment or the timezone is invalid
    """
    duration = _positive_minutes(config.slot_duration_minutes, "slot_duration_minutes")

    interval = duration
    if config.slot_interval_minutes is not None:
        interval = _positive_minutes(config.slot_interval_minutes, "slot_interval_minutes")

    for name in ("buffer_before_minutes", "buffer_after_minutes"):
        buffer = getattr(config, name)
        if buffer is None:
            continue
        if not _is_number(buffer) or not math.isfinite(buffer):
            raise ValidationError(f"{name} must be a number, got {buffer!r}", value=buffer, field=name)
        if buffer < 0:
            raise ValidationError(f"{name} cannot be negative", value=buffer, field=name)

    minimum = duration
    if config.minimum_slot_duration_minutes is not None:
        minimum = _positive_minutes(config.minimum_slot_duration_minutes, "minimum_slot_duration_minutes")

    max_slots: Optional[int] = config.max_slots
    if max_slots is not None:
        if isinstance(max_slots, bool) or not isinstance(max_slots, int) or max_slots <= 0:
            raise ValidationError(
                "max_slots must be greater than zero when provided",
                value=max_slots,
                field="max_slots",
            )

    try:
        alignment = Alignment(config.alignment)
    except ValueError as exc:
        raise ValidationError(
            f"alignment must be one of start, end, center; got {config.alignment!r}",
            value=config.alignment,
            field="alignment",
        ) from exc

    if config.label_formatter is not None and not callable(config.label_formatter):
        raise ValidationError("label_formatter must be callable", value=config.label_formatter, field="label_formatter")

    # Slot arithmetic runs on whole milliseconds; anything that rounds to 0 would never advance
    millis = {}
    for name, minutes in (
        ("slot_duration_minutes", duration),
        ("slot_interval_minutes", interval),
        ("minimum_slot_duration_minutes", minimum),
    ):
        millis[name] = _to_ms(minutes)
        if millis[name] < 1:
            raise ValidationError(
                f"{name} must be at least one millisecond, got {minutes!r}",
                value=minutes,
                field=name,
            )

    return NormalizedConfig(
        duration_ms=millis["slot_duration_minutes"],
        interval_ms=millis["slot_interval_minutes"],
        min_duration_ms=millis["minimum_slot_duration_minutes"],
        include_edge=bool(config.include_edge),
        alignment=alignment,
        max_slots=max_slots,
        label_formatter=config.label_formatter,
    )


class TimeslotGenerator:
    """
    Generates the slots of one day from a GenerationConfig.

    Algorithm:
    1. Validate the config
    2. Resolve the working range against the timezone and default day
    3. Apply buffers
    4. Resolve, clamp and merge exclusion windows
    5. Subtract exclusions to get free segments
    6. Pack every segment until the slot cap is reached
    """

    def __init__(self, civil_time: CivilTimeResolver | None = None):
        self.civil_time = civil_time or CivilTimeResolver()
        self.boundaries = BoundaryResolver(self.civil_time)

    def resolve_zone(self, timezone: Optional[str]) -> Zone:
        """Build the Zone for a configured timezone name, failing as a config error."""
        try:
            zone = Zone.from_optional(timezone)
            if not zone.is_local:
                self.civil_time.cache.get(zone.name)
        except InvalidInputError as exc:
            raise ValidationError(str(exc), value=timezone, field="timezone") from exc
        return zone

    def generate(self, config: GenerationConfig) -> List[Slot]:
        """
        Generate the slots described by ``config``.

        Args:
            config: Declarative schedule description

        Returns:
            Slots in emission order, indexed from zero
        """
        normalized = validate_config(config)
        zone = self.resolve_zone(config.timezone)

        default_calendar_date = None
        if config.day is not None:
            default_calendar_date = self.boundaries.calendar_from_date_value(config.day, zone)

        context = BoundaryContext(zone=zone, default_calendar_date=default_calendar_date)
        working_range = self.boundaries.resolve_range(config.range, context)

        window_start = working_range.start
        window_end = working_range.end
        if config.buffer_before_minutes:
            window_start = window_start + timedelta(milliseconds=_to_ms(config.buffer_before_minutes))
        if config.buffer_after_minutes:
            window_end = window_end - timedelta(milliseconds=_to_ms(config.buffer_after_minutes))

        if window_end <= window_start:
            raise InvalidRangeError(
                "Buffers eliminate the available window; adjust buffer values.",
                value=(config.buffer_before_minutes, config.buffer_after_minutes),
                field="buffers",
            )

        window = TimeRange(start=window_start, end=window_end)
        exclusions = normalize_exclusions(config.excluded_windows, context, window, self.boundaries)
        segments = subtract_exclusions(window, exclusions)

        logger.debug(
            "Window %s - %s (%s): %d exclusion(s), %d segment(s)",
            window.start.isoformat(),
            window.end.isoformat(),
            zone,
            len(exclusions),
            len(segments),
        )

        packer = SlotPacker(normalized)
        slots: List[Slot] = []
        for segment in segments:
            if normalized.cap_reached(len(slots)):
                break
            packer.pack_segment(segment, slots)

        logger.debug("Generated %d slot(s)", len(slots))
        return slots


def generate_timeslots(config: GenerationConfig, civil_time: CivilTimeResolver | None = None) -> List[Slot]:
    """Generate the slots of one day. See ``TimeslotGenerator``."""
    return TimeslotGenerator(civil_time=civil_time).generate(config)
