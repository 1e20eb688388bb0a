"""
Domain layer - Pure timeslot generation logic without external dependencies.
"""

from .boundaries import BoundaryContext, BoundaryResolver, ResolvedBoundary
from .civil_time import CivilTimeResolver, Zone, ZoneCache
from .exceptions import (
    FieldRangeError,
    InvalidFormatError,
    InvalidInputError,
    InvalidRangeError,
    MissingContextError,
    TimeslotError,
    ValidationError,
)
from .generator import TimeslotGenerator, generate_timeslots, validate_config
from .intervals import merge_intervals, subtract_exclusions
from .models import (
    Alignment,
    CalendarDate,
    GenerationConfig,
    NormalizedConfig,
    RangeInput,
    Slot,
    SlotMetadata,
    TimeBoundary,
    TimeOfDay,
    TimeRange,
)
from .slot_packer import SlotPacker
from .timeslot import contains, create_timeslot, find_gaps, merge_slots, overlaps

__all__ = [
    "Alignment",
    "BoundaryContext",
    "BoundaryResolver",
    "CalendarDate",
    "CivilTimeResolver",
    "FieldRangeError",
    "GenerationConfig",
    "InvalidFormatError",
    "InvalidInputError",
    "InvalidRangeError",
    "MissingContextError",
    "NormalizedConfig",
    "RangeInput",
    "ResolvedBoundary",
    "Slot",
    "SlotMetadata",
    "SlotPacker",
    "TimeBoundary",
    "TimeOfDay",
    "TimeRange",
    "TimeslotError",
    "TimeslotGenerator",
    "ValidationError",
    "Zone",
    "ZoneCache",
    "contains",
    "create_timeslot",
    "find_gaps",
    "generate_timeslots",
    "merge_intervals",
    "merge_slots",
    "overlaps",
    "subtract_exclusions",
    "validate_config",
]
