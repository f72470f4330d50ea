"""
Read-only snapshots consumed by the availability resolver.

Each model mirrors one read contract of AvailabilityRepository. They are frozen
and built with from_attributes, so the SQL repository can hand ORM rows straight
to model_validate.
"""

from datetime import date, datetime, time

from pydantic import BaseModel, ConfigDict

from medagenda.models.appointment import AppointmentStatus
from medagenda.models.event import EventType
from medagenda.models.timeplan import DayOfWeek


class Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)


class TimeWindow(Snapshot):
    start_time: time
    end_time: time
    is_active: bool = True
    consultation_type_ids: frozenset[int] = frozenset()

    def allows(self, consultation_type_id: int | None) -> bool:
        return consultation_type_id is None or consultation_type_id in self.consultation_type_ids


class TimeplanDay(Snapshot):
    day_of_week: DayOfWeek
    is_active: bool = True
    windows: tuple[TimeWindow, ...] = ()


class ConsultationTypeRules(Snapshot):
    id: int
    doctor_id: int
    duration: int
    rest_after: int = 0
    can_book_before: int = 0
    enabled: bool = True


class BlockingEvent(Snapshot):
    event_type: EventType = EventType.JOUR
    start_date: date
    end_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    block_appointments: bool = True


class TimeOffPeriod(Snapshot):
    start_date: date
    end_date: date


class BookedInterval(Snapshot):
    id: int | None = None
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    is_deleted: bool = False


class Slot(Snapshot):
    start: datetime
    end: datetime
    available: bool


class AvailableSlots(Snapshot):
    date: date
    consultation_type_id: int | None = None
    slots: tuple[Slot, ...] = ()
