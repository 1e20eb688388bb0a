"""
timeslotgen - generate timezone-aware timeslots from a declarative schedule.
"""

__version__ = "0.3.0"

from .adapters.records import SlotRecord, slot_from_record, slot_to_record, slots_from_json, slots_to_json
from .domain import (
    Alignment,
    CalendarDate,
    CivilTimeResolver,
    FieldRangeError,
    GenerationConfig,
    InvalidFormatError,
    InvalidInputError,
    InvalidRangeError,
    MissingContextError,
    RangeInput,
    Slot,
    SlotMetadata,
    TimeBoundary,
    TimeOfDay,
    TimeRange,
    TimeslotError,
    TimeslotGenerator,
    ValidationError,
    Zone,
    contains,
    create_timeslot,
    find_gaps,
    generate_timeslots,
    merge_slots,
    overlaps,
)
from .services.daily import DailyTimeslotGenerator, generate_daily_timeslots

__all__ = [
    "Alignment",
    "CalendarDate",
    "CivilTimeResolver",
    "DailyTimeslotGenerator",
    "FieldRangeError",
    "GenerationConfig",
    "InvalidFormatError",
    "InvalidInputError",
    "InvalidRangeError",
    "MissingContextError",
    "RangeInput",
    "Slot",
    "SlotMetadata",
    "SlotRecord",
    "TimeBoundary",
    "TimeOfDay",
    "TimeRange",
    "TimeslotError",
    "TimeslotGenerator",
    "ValidationError",
    "Zone",
    "__version__",
    "contains",
    "create_timeslot",
    "find_gaps",
    "generate_daily_timeslots",
    "generate_timeslots",
    "merge_slots",
    "overlaps",
    "slot_from_record",
    "slot_to_record",
    "slots_from_json",
    "slots_to_json",
]
