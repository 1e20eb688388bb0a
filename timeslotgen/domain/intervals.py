"""
Interval algebra over TimeRange values: merging and subtraction.
"""

from __future__ import annotations

from typing import Iterable, List, Mapping, Sequence, Union

from .boundaries import BoundaryContext, BoundaryResolver
from .models import RangeInput, TimeRange


def merge_intervals(ranges: Iterable[TimeRange]) -> List[TimeRange]:
    """
    Merge overlapping or adjacent time ranges.

    Example: [09:00-10:00, 10:00-11:00] -> [09:00-11:00]
    """
    sorted_ranges = sorted(ranges, key=lambda r: r.start)
    if not sorted_ranges:
        return []

    merged: List[TimeRange] = [sorted_ranges[0]]

    for current in sorted_ranges[1:]:
        last = merged[-1]

        # Touching ranges count as overlapping
        if current.start <= last.end:
            if current.end > last.end:
                merged[-1] = TimeRange(start=last.start, end=current.end)
        else:
            merged.append(current)

    return merged


def subtract_exclusions(source: TimeRange, exclusions: Sequence[TimeRange]) -> List[TimeRange]:
    """
    Carve every exclusion out of ``source``, yielding the remaining segments.

    Example:
    Source: 09:00 - 17:00
    Exclusions: [10:00-11:00, 14:00-15:00]
    Result: [09:00-10:00, 11:00-14:00, 15:00-17:00]
    """
    segments: List[TimeRange] = [source]

    for exclusion in exclusions:
        next_segments: List[TimeRange] = []

        for segment in segments:
            cut_start = max(exclusion.start, segment.start)
            cut_end = min(exclusion.end, segment.end)

            if cut_end <= cut_start:
                next_segments.append(segment)
                continue

            if cut_start > segment.start:
                next_segments.append(TimeRange(start=segment.start, end=cut_start))

            if cut_end < segment.end:
                next_segments.append(TimeRange(start=cut_end, end=segment.end))

        segments = next_segments
        if not segments:
            break

    return sorted(segments, key=lambda r: r.start)


def clamp_to_window(interval: TimeRange, window: TimeRange) -> TimeRange | None:
    """Clip ``interval`` to ``window``; None when nothing of positive length remains."""
    if not interval.overlaps(window):
        return None

    start = max(interval.start, window.start)
    end = min(interval.end, window.end)
    if end <= start:
        return None

    return TimeRange(start=start, end=end)


def normalize_exclusions(
    exclusions: Iterable[Union[RangeInput, Mapping]] | None,
    context: BoundaryContext,
    window: TimeRange,
    resolver: BoundaryResolver,
) -> List[TimeRange]:
    """
    Resolve exclusion windows, clamp them to ``window`` and merge the survivors.
    """
    if not exclusions:
        return []

    clamped: List[TimeRange] = []

    for exclusion in exclusions:
        resolved = resolver.resolve_range(exclusion, context)
        inside = clamp_to_window(resolved, window)
        if inside is not None:
            clamped.append(inside)

    return merge_intervals(clamped)
