"""
Packing of slots into a single segment.

All arithmetic happens on integer epoch milliseconds. The packer only reads
the segment, the normalized config and the number of slots produced so far
(for the global cap and the running index).
"""

from __future__ import annotations

from typing import List

from .civil_time import MILLIS_PER_MINUTE, from_epoch_ms, to_epoch_ms
from .models import Alignment, NormalizedConfig, Slot, SlotMetadata, TimeRange


def _round_half_up(numerator: int, denominator: int) -> int:
    return (2 * numerator + denominator) // (2 * denominator)


class SlotPacker:
    """
    Tiles slots across a segment according to the configured alignment.

    - start: walk forward from the segment start, optional trailing edge slot
    - end: anchor full slots at the segment end, optional leading edge slot
    - center: full slots only, leftover split evenly on both sides

    Edge slots are shorter than the configured duration and are only emitted
    when ``include_edge`` is set and they reach ``min_duration_ms``.
    """

    def __init__(self, config: NormalizedConfig):
        self.config = config

    def pack_segment(self, segment: TimeRange, slots: List[Slot]) -> None:
        """
        Append the slots for ``segment`` to ``slots``.

        Args:
            segment: Contiguous free range to fill
            slots: Output sequence shared across segments
        """
        start_ms = to_epoch_ms(segment.start)
        end_ms = to_epoch_ms(segment.end)

        if end_ms - start_ms <= 0 or self.config.cap_reached(len(slots)):
            return

        if self.config.alignment is Alignment.CENTER:
            self._pack_center(start_ms, end_ms, slots)
        elif self.config.alignment is Alignment.END:
            self._pack_from_end(start_ms, end_ms, slots)
        else:
            self._pack_from_start(start_ms, end_ms, slots)

    def _pack_from_start(self, start_ms: int, end_ms: int, slots: List[Slot]) -> None:
        config = self.config
        slot_start = start_ms

        while slot_start < end_ms and not config.cap_reached(len(slots)):
            slot_end = slot_start + config.duration_ms
            if slot_end <= end_ms:
                self._push(slots, slot_start, slot_end)
            elif config.include_edge and end_ms - slot_start >= config.min_duration_ms:
                self._push(slots, slot_start, end_ms)
            slot_start += config.interval_ms

    def _pack_from_end(self, start_ms: int, end_ms: int, slots: List[Slot]) -> None:
        config = self.config
        span = end_ms - start_ms

        if span < config.duration_ms:
            self._push_whole_segment(start_ms, end_ms, slots)
            return

        count_full = (span - config.duration_ms) // config.interval_ms + 1
        first_start = end_ms - config.duration_ms - (count_full - 1) * config.interval_ms
        leftover = first_start - start_ms

        if config.include_edge and leftover >= config.min_duration_ms:
            self._push(slots, start_ms, first_start)

        for i in range(count_full):
            if config.cap_reached(len(slots)):
                break
            slot_start = first_start + i * config.interval_ms
            self._push(slots, slot_start, slot_start + config.duration_ms)

    def _pack_center(self, start_ms: int, end_ms: int, slots: List[Slot]) -> None:
        config = self.config
        span = end_ms - start_ms

        if span < config.duration_ms:
            self._push_whole_segment(start_ms, end_ms, slots)
            return

        slot_count = (span - config.duration_ms) // config.interval_ms + 1
        used_span = config.duration_ms + (slot_count - 1) * config.interval_ms
        offset = _round_half_up(span - used_span, 2)

        for i in range(slot_count):
            if config.cap_reached(len(slots)):
                break
            slot_start = start_ms + offset + i * config.interval_ms
            self._push(slots, slot_start, slot_start + config.duration_ms)

    def _push_whole_segment(self, start_ms: int, end_ms: int, slots: List[Slot]) -> None:
        if self.config.include_edge and end_ms - start_ms >= self.config.min_duration_ms:
            self._push(slots, start_ms, end_ms)

    def _push(self, slots: List[Slot], start_ms: int, end_ms: int) -> None:
        if self.config.cap_reached(len(slots)):
            return
        if end_ms <= start_ms:
            return

        start = from_epoch_ms(start_ms)
        end = from_epoch_ms(end_ms)
        duration_minutes = (end_ms - start_ms) / MILLIS_PER_MINUTE
        index = len(slots)

        label = None
        if self.config.label_formatter is not None:
            label = self.config.label_formatter(TimeRange(start=start, end=end), index, duration_minutes)

        slots.append(
            Slot(
                start=start,
                end=end,
                metadata=SlotMetadata(index=index, duration_minutes=duration_minutes, label=label),
            )
        )
