"""Shared free time across two or more weekly calendars."""

import logging
from collections.abc import Iterable, Sequence
from typing import NamedTuple

from podmatch.schemas.match import SharedWindow
from podmatch.schemas.profile import AvailabilitySlot, Weekday

logger = logging.getLogger(__name__)

Interval = tuple[Weekday, int, int]


class OverlapResult(NamedTuple):
    minutes: int
    windows: list[SharedWindow]


def merge_slots(slots: Iterable[AvailabilitySlot | Interval]) -> list[Interval]:
    """Drop malformed slots, then merge overlapping or adjacent same-day ones.

    Args:
        slots: One person's availability, in any order, possibly redundant.

    Returns:
        Sorted, non-overlapping (day, start, end) intervals. Merging an
        already-merged list returns it unchanged.
    """
    intervals: list[Interval] = []
    for slot in slots:
        if not isinstance(slot, AvailabilitySlot):
            day, start, end = slot
            slot = AvailabilitySlot(day=day, start=start, end=end)
        if not slot.is_valid:
            logger.warning(
                f"Dropping malformed availability slot on {slot.day.name}: "
                f"start={slot.start}, end={slot.end}"
            )
            continue
        intervals.append((slot.day, slot.start, slot.end))

    intervals.sort()
    merged: list[Interval] = []
    for day, start, end in intervals:
        if merged and merged[-1][0] == day and start <= merged[-1][2]:
            last_day, last_start, last_end = merged[-1]
            merged[-1] = (last_day, last_start, max(last_end, end))
        else:
            merged.append((day, start, end))
    return merged


def intersect(a: Sequence[Interval], b: Sequence[Interval]) -> list[Interval]:
    """Per-day intersection of two merged, sorted interval lists."""
    result: list[Interval] = []
    i = j = 0
    while i < len(a) and j < len(b):
        day_a, start_a, end_a = a[i]
        day_b, start_b, end_b = b[j]
        if day_a != day_b:
            if day_a < day_b:
                i += 1
            else:
                j += 1
            continue

        start, end = max(start_a, start_b), min(end_a, end_b)
        if start < end:
            result.append((day_a, start, end))
        if end_a < end_b:
            i += 1
        else:
            j += 1
    return result


def compute_overlap(
    slot_sets: Sequence[Iterable[AvailabilitySlot | Interval]],
) -> OverlapResult:
    """Intersect every participant's availability.

    Args:
        slot_sets: One slot collection per participant (at least two).

    Returns:
        OverlapResult with total shared minutes and the shared windows sorted
        by weekday then start time. No overlap yields (0, []).

    Raises:
        ValueError: If fewer than two participants are given.
    """
    if len(slot_sets) < 2:
        raise ValueError("Overlap needs at least two participants")

    shared = merge_slots(slot_sets[0])
    for slots in slot_sets[1:]:
        if not shared:
            break
        shared = intersect(shared, merge_slots(slots))

    windows = [SharedWindow(day=day, start=start, end=end) for day, start, end in shared]
    return OverlapResult(minutes=sum(w.end - w.start for w in windows), windows=windows)
