"""
Tests for slot transport records.
"""

import json
from datetime import datetime

import pytest
from dateutil.parser import isoparse

from timeslotgen.adapters.records import (
    SlotRecord,
    format_instant,
    slot_from_record,
    slot_to_record,
    slots_from_json,
    slots_to_json,
)
from timeslotgen.domain.civil_time import UTC
from timeslotgen.domain.exceptions import InvalidFormatError, InvalidInputError, InvalidRangeError
from timeslotgen.domain.generator import generate_timeslots
from timeslotgen.domain.models import GenerationConfig, Slot, SlotMetadata


def _generated():
    return generate_timeslots(
        GenerationConfig(
            range={"start": "09:00", "end": "10:10"},
            slot_duration_minutes=30,
            minimum_slot_duration_minutes=10,
            timezone="Europe/Berlin",
            day="2024-07-01",
            label_formatter=lambda edges, index, minutes: "" if index == 0 else None,
        )
    )


class TestFormatInstant:
    """Tests for the instant text format."""

    def test_utc_with_milliseconds(self):
        assert format_instant(datetime(2024, 1, 1, 9, 0, 0, 5000, tzinfo=UTC)) == "2024-01-01T09:00:00.005Z"

    def test_other_zone_converted(self):
        assert format_instant(isoparse("2024-01-01T10:30:00+01:00")) == "2024-01-01T09:30:00.000Z"


class TestSlotRecords:
    """Tests for slot <-> record conversion."""

    def test_record_shape(self):
        slot = Slot(
            start=isoparse("2024-01-01T09:00:00Z"),
            end=isoparse("2024-01-01T09:30:00Z"),
            metadata=SlotMetadata(index=0, duration_minutes=30),
        )

        assert slot_to_record(slot).to_dict() == {
            "start": "2024-01-01T09:00:00.000Z",
            "end": "2024-01-01T09:30:00.000Z",
            "metadata": {"index": 0, "duration_minutes": 30},
        }

    def test_record_without_metadata(self):
        slot = Slot(start=isoparse("2024-01-01T09:00:00Z"), end=isoparse("2024-01-01T09:30:00Z"))

        assert "metadata" not in slot_to_record(slot).to_dict()

    def test_round_trip_keeps_instants_and_metadata(self):
        for slot in _generated():
            assert slot_from_record(slot_to_record(slot)) == slot

    def test_round_trip_keeps_empty_label(self):
        restored = slot_from_record(slot_to_record(_generated()[0]).to_dict())

        assert restored.metadata.label == ""

    def test_round_trip_millisecond_precision(self):
        slot = Slot(
            start=datetime(2024, 1, 1, 9, 0, 0, 1000, tzinfo=UTC),
            end=datetime(2024, 1, 1, 9, 0, 0, 999000, tzinfo=UTC),
        )

        assert slot_from_record(slot_to_record(slot)) == slot

    def test_end_must_follow_start(self):
        with pytest.raises(InvalidRangeError):
            slot_from_record({"start": "2024-01-01T10:00:00.000Z", "end": "2024-01-01T10:00:00.000Z"})

    @pytest.mark.parametrize("field", ["start", "end"])
    def test_unparseable_instant(self, field):
        payload = {"start": "2024-01-01T09:00:00.000Z", "end": "2024-01-01T10:00:00.000Z"}
        payload[field] = "yesterday"

        with pytest.raises(InvalidFormatError, match=f"Invalid {field} in record") as exc_info:
            slot_from_record(payload)
        assert exc_info.value.field == field

    @pytest.mark.parametrize(
        "payload",
        [
            {"start": "2024-01-01T09:00:00.000Z"},
            {"start": 1, "end": 2},
            {"start": "2024-01-01T09:00:00.000Z", "end": "2024-01-01T10:00:00.000Z", "extra": True},
            {"start": "2024-01-01T09:00:00.000Z", "end": "2024-01-01T10:00:00.000Z", "metadata": {"index": "x"}},
        ],
    )
    def test_malformed_payload(self, payload):
        with pytest.raises(InvalidInputError, match="Invalid slot record"):
            slot_from_record(payload)

    def test_accepts_record_instance(self):
        record = SlotRecord(start="2024-01-01T09:00:00.000Z", end="2024-01-01T09:45:00.000Z")

        assert slot_from_record(record).duration_minutes() == 45


class TestJson:
    """Tests for the JSON helpers."""

    def test_json_round_trip(self):
        slots = _generated()

        text = slots_to_json(slots)

        assert json.loads(text)[0]["start"] == "2024-07-01T07:00:00.000Z"
        assert slots_from_json(text) == slots

    def test_invalid_json(self):
        with pytest.raises(InvalidFormatError, match="Invalid JSON"):
            slots_from_json("[{")

    def test_json_must_be_array(self):
        with pytest.raises(InvalidInputError, match="Expected a JSON array"):
            slots_from_json('{"start": "2024-01-01T09:00:00.000Z"}')
