"""
Read contracts of the availability resolver.

The resolver receives an AvailabilityRepository at construction time. The SQL
implementation below reads through a SQLAlchemy session; tests pass their own
in-memory doubles.
"""

from datetime import date
from typing import Protocol

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, selectinload

from medagenda.models.appointment import Appointment, AppointmentStatus
from medagenda.models.consultation_type import ConsultationType
from medagenda.models.doctor import Doctor
from medagenda.models.event import Event
from medagenda.models.pto import PTOPeriod
from medagenda.models.timeplan import DayOfWeek, DoctorTimeplan, TimeplanWindow
from medagenda.scheduling.overlap import day_bounds
from medagenda.scheduling.snapshots import (
    BlockingEvent,
    BookedInterval,
    ConsultationTypeRules,
    TimeOffPeriod,
    TimeplanDay,
)


class AvailabilityRepository(Protocol):
    def doctor_exists(self, doctor_id: int) -> bool: ...

    def get_timeplan_for_day(self, doctor_id: int, day_of_week: DayOfWeek) -> TimeplanDay | None: ...

    def get_consultation_type(self, doctor_id: int, consultation_type_id: int) -> ConsultationTypeRules | None: ...

    def get_blocking_events(self, doctor_id: int, target_date: date) -> list[BlockingEvent]: ...

    def get_pto_periods(self, doctor_id: int, target_date: date) -> list[TimeOffPeriod]: ...

    def get_active_appointments(self, doctor_id: int, target_date: date) -> list[BookedInterval]: ...


class SqlAvailabilityRepository:
    """AvailabilityRepository backed by the application database."""

    def __init__(self, db: Session):
        self.db = db

    def doctor_exists(self, doctor_id: int) -> bool:
        return self.db.query(Doctor.id).filter(Doctor.id == doctor_id).first() is not None

    def get_timeplan_for_day(self, doctor_id: int, day_of_week: DayOfWeek) -> TimeplanDay | None:
        timeplan = (
            self.db.query(DoctorTimeplan)
            .options(selectinload(DoctorTimeplan.windows).selectinload(TimeplanWindow.consultation_types))
            .filter(
                DoctorTimeplan.doctor_id == doctor_id,
                DoctorTimeplan.day_of_week == day_of_week,
            )
            .first()
        )
        if timeplan is None:
            return None
        return TimeplanDay.model_validate(timeplan)

    def get_consultation_type(self, doctor_id: int, consultation_type_id: int) -> ConsultationTypeRules | None:
        consultation_type = self.db.query(ConsultationType).filter(
            ConsultationType.id == consultation_type_id,
            ConsultationType.doctor_id == doctor_id,
        ).first()
        if consultation_type is None:
            return None
        return ConsultationTypeRules.model_validate(consultation_type)

    def get_blocking_events(self, doctor_id: int, target_date: date) -> list[BlockingEvent]:
        events = self.db.query(Event).filter(
            Event.doctor_id == doctor_id,
            Event.block_appointments.is_(True),
            or_(
                and_(Event.end_date.is_(None), Event.start_date == target_date),
                and_(Event.start_date <= target_date, Event.end_date >= target_date),
            ),
        ).order_by(Event.start_date.asc(), Event.id.asc()).all()
        return [BlockingEvent.model_validate(event) for event in events]

    def get_pto_periods(self, doctor_id: int, target_date: date) -> list[TimeOffPeriod]:
        periods = self.db.query(PTOPeriod).filter(
            PTOPeriod.doctor_id == doctor_id,
            PTOPeriod.start_date <= target_date,
            PTOPeriod.end_date >= target_date,
        ).order_by(PTOPeriod.start_date.asc()).all()
        return [TimeOffPeriod.model_validate(period) for period in periods]

    def get_active_appointments(self, doctor_id: int, target_date: date) -> list[BookedInterval]:
        start_of_day, end_of_day = day_bounds(target_date)
        appointments = self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.status != AppointmentStatus.CANCELLED,
            Appointment.is_deleted.is_(False),
            Appointment.start_time < end_of_day,
            Appointment.end_time > start_of_day,
        ).order_by(Appointment.start_time.asc()).all()
        return [BookedInterval.model_validate(appointment) for appointment in appointments]
