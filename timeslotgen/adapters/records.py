"""
Transport records for slots.

Instants are written as UTC ISO 8601 strings with millisecond precision so
that a record survives JSON and reproduces the slot exactly.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence, Union

from dateutil.parser import isoparse
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from ..domain.civil_time import UTC
from ..domain.exceptions import InvalidFormatError, InvalidInputError, InvalidRangeError
from ..domain.models import Slot, SlotMetadata


class SlotMetadataRecord(BaseModel):
    """Metadata as carried in a record."""
    model_config = ConfigDict(extra="forbid")

    index: int
    duration_minutes: float
    label: Optional[str] = None


class SlotRecord(BaseModel):
    """JSON-safe representation of a slot."""
    model_config = ConfigDict(extra="forbid")

    start: str
    end: str
    metadata: Optional[SlotMetadataRecord] = None

    def to_dict(self) -> dict:
        """Dump the record, leaving out absent metadata and labels."""
        return self.model_dump(exclude_none=True)


def format_instant(instant: datetime) -> str:
    """Format an instant as ``YYYY-MM-DDTHH:mm:ss.SSSZ`` in UTC."""
    utc = instant.astimezone(UTC)
    return f"{utc:%Y-%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}Z"


def _parse_instant(text: str, name: str) -> datetime:
    try:
        parsed = isoparse(text.strip())
    except (ValueError, OverflowError) as exc:
        raise InvalidFormatError(f"Invalid {name} in record: {text!r}", value=text, field=name) from exc

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def slot_to_record(slot: Slot) -> SlotRecord:
    """Convert a slot to its transport record."""
    metadata = None
    if slot.metadata is not None:
        metadata = SlotMetadataRecord(
            index=slot.metadata.index,
            duration_minutes=slot.metadata.duration_minutes,
            label=slot.metadata.label,
        )

    return SlotRecord(start=format_instant(slot.start), end=format_instant(slot.end), metadata=metadata)


def slot_from_record(record: Union[SlotRecord, Mapping[str, Any]]) -> Slot:
    """
    Parse a transport record back into a slot.

    Raises:
        InvalidInputError: If the payload does not have the record shape
        InvalidFormatError: If an instant does not parse
        InvalidRangeError: If end is not after start
    """
    if not isinstance(record, SlotRecord):
        try:
            record = SlotRecord.model_validate(record)
        except PydanticValidationError as exc:
            raise InvalidInputError(f"Invalid slot record: {exc}", value=record, field="record") from exc

    start = _parse_instant(record.start, "start")
    end = _parse_instant(record.end, "end")

    if end <= start:
        raise InvalidRangeError("Timeslot end must be after its start", value=(record.start, record.end))

    metadata = None
    if record.metadata is not None:
        metadata = SlotMetadata(
            index=record.metadata.index,
            duration_minutes=record.metadata.duration_minutes,
            label=record.metadata.label,
        )

    return Slot(start=start, end=end, metadata=metadata)


def slots_to_json(slots: Sequence[Slot], indent: Optional[int] = None) -> str:
    """Serialize slots to a JSON array of records."""
    return json.dumps([slot_to_record(slot).to_dict() for slot in slots], indent=indent)


def slots_from_json(text: str) -> List[Slot]:
    """Parse a JSON array of records into slots."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidFormatError(f"Invalid JSON: {exc}", value=text, field="records") from exc

    if not isinstance(payload, list):
        raise InvalidInputError("Expected a JSON array of slot records", value=payload, field="records")

    return [slot_from_record(item) for item in payload]
