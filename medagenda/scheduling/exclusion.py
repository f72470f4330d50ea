"""
Exclusion: decides which generated slots of one date are unavailable.

Three sources take part, each re-checked here even if the repository already
filtered them:
- appointments that are neither cancelled nor soft-deleted
- events flagged block_appointments whose date range covers the day
- time-off periods covering the day (block everything)
"""

from datetime import date, datetime, timedelta
from typing import Iterable

from medagenda.models.appointment import AppointmentStatus
from medagenda.scheduling.overlap import at, contains_instant, covers_date, day_bounds, intervals_overlap
from medagenda.scheduling.snapshots import BlockingEvent, BookedInterval, TimeOffPeriod


INACTIVE_APPOINTMENT_STATUSES = frozenset({AppointmentStatus.CANCELLED})


def appointment_blocks(appointment: BookedInterval) -> bool:
    return not appointment.is_deleted and appointment.status not in INACTIVE_APPOINTMENT_STATUSES


def event_intervals(event: BlockingEvent, target_date: date) -> list[tuple[datetime, datetime]]:
    """
    Absolute intervals an event blocks on target_date.

    No time of day blocks the whole day. Both times block that range on every
    covered day. A start time alone (a one-off moment) is returned as a
    zero-length interval and matched by containment.
    """
    if not event.block_appointments or not covers_date(event.start_date, event.end_date, target_date):
        return []

    if event.start_time is None:
        return [day_bounds(target_date)]

    start = at(target_date, event.start_time)
    if event.end_time is None:
        return [(start, start)]

    return [(start, at(target_date, event.end_time))]


class ExclusionSet:
    """Blocking intervals of one doctor-day, ready to test slots against."""

    def __init__(
        self,
        target_date: date,
        appointments: Iterable[BookedInterval] = (),
        events: Iterable[BlockingEvent] = (),
        time_off: Iterable[TimeOffPeriod] = (),
        now: datetime | None = None,
        lead_time_minutes: int = 0,
    ):
        self.target_date = target_date
        self.now = now
        self.lead_time = timedelta(minutes=max(lead_time_minutes, 0))
        self.day_blocked = any(
            covers_date(period.start_date, period.end_date, target_date) for period in time_off
        )
        self.booked = [
            (appointment.start_time, appointment.end_time)
            for appointment in appointments
            if appointment_blocks(appointment)
        ]
        self.blocked = []
        self.instants = []
        for event in events:
            for start, end in event_intervals(event, target_date):
                if start == end:
                    self.instants.append(start)
                else:
                    self.blocked.append((start, end))

    def reason(self, slot_start: datetime, slot_end: datetime) -> str | None:
        """Why the slot is unavailable, or None when it can be booked."""
        if self.day_blocked:
            return 'time_off'
        if self.now is not None and (slot_start <= self.now or slot_start < self.now + self.lead_time):
            return 'too_soon'
        if any(intervals_overlap(slot_start, slot_end, start, end) for start, end in self.booked):
            return 'booked'
        if any(intervals_overlap(slot_start, slot_end, start, end) for start, end in self.blocked):
            return 'event'
        if any(contains_instant(slot_start, slot_end, instant) for instant in self.instants):
            return 'event'
        return None

    def is_available(self, slot_start: datetime, slot_end: datetime) -> bool:
        return self.reason(slot_start, slot_end) is None
