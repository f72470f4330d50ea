"""
Slot generation: subdivides candidate windows into fixed-size slots.
"""

from datetime import date, datetime, timedelta
from typing import Iterable

from medagenda.scheduling.overlap import at, intervals_overlap
from medagenda.scheduling.snapshots import TimeWindow


def iterate_window_slots(
    target_date: date,
    window: TimeWindow,
    duration_minutes: int,
    rest_after_minutes: int = 0,
) -> list[tuple[datetime, datetime]]:
    """
    Slots of one window as (start, end) pairs.

    Each slot lasts exactly duration_minutes; the cursor then skips the rest
    buffer as well. A slot that would end past the window's end is not produced.
    """
    if duration_minutes <= 0:
        raise ValueError('Slot duration must be a positive number of minutes.')

    duration = timedelta(minutes=duration_minutes)
    step = duration + timedelta(minutes=max(rest_after_minutes, 0))
    window_end = at(target_date, window.end_time)

    slots: list[tuple[datetime, datetime]] = []
    cursor = at(target_date, window.start_time)

    while cursor + duration <= window_end:
        slots.append((cursor, cursor + duration))
        cursor += step

    return slots


def generate_slots(
    target_date: date,
    windows: Iterable[TimeWindow],
    duration_minutes: int,
    rest_after_minutes: int = 0,
) -> list[tuple[datetime, datetime]]:
    """
    Slots for all windows of a day, ordered by start.

    Windows should never overlap, but legacy data may. A slot overlapping one
    already produced from an earlier window is skipped so that no wall-clock
    minute is offered twice.
    """
    generated: list[tuple[datetime, datetime]] = []

    for window in windows:
        for slot_start, slot_end in iterate_window_slots(target_date, window, duration_minutes, rest_after_minutes):
            if any(intervals_overlap(slot_start, slot_end, start, end) for start, end in generated):
                continue
            generated.append((slot_start, slot_end))

    generated.sort()
    return generated
