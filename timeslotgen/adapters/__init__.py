"""
Adapters layer - Transport representations of domain objects.
"""

from .records import SlotRecord, slot_from_record, slot_to_record, slots_from_json, slots_to_json

__all__ = ["SlotRecord", "slot_from_record", "slot_to_record", "slots_from_json", "slots_to_json"]
