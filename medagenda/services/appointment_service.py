"""
Appointment service - booking, rescheduling and status changes.

Availability listings are only a hint. Every write that makes a range booked
(booking, moving an appointment, reviving a cancelled one) re-runs the conflict
check (appointments, blocking events, time off, lead time) inside its own
transaction while holding a row lock on the doctor, so two concurrent requests
cannot both take the same range. SQLite ignores FOR UPDATE; its writes are
serialized anyway.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable

from sqlalchemy.orm import Session

from medagenda.core import config
from medagenda.core.errors import InvalidRange, InvalidReference, RecordNotFound, SlotConflict
from medagenda.models.appointment import Appointment, AppointmentStatus
from medagenda.models.consultation_type import ConsultationType
from medagenda.models.doctor import Doctor
from medagenda.scheduling.exclusion import ExclusionSet
from medagenda.scheduling.overlap import day_bounds
from medagenda.scheduling.repository import SqlAvailabilityRepository
from medagenda.schemas.appointment import AppointmentCreate, AppointmentUpdate
from medagenda.schemas.common import updated_fields

logger = logging.getLogger(__name__)

CONFLICT_MESSAGES = {
    'booked': 'Time slot conflicts with existing appointment.',
    'event': 'Time slot is blocked by an event.',
    'time_off': 'Doctor is on leave on this date.',
    'too_soon': 'Appointment starts sooner than the consultation type allows.',
}

UPCOMING_APPOINTMENT_STATUSES = (AppointmentStatus.SCHEDULED, AppointmentStatus.CONFIRMED)


def days_touched(start_time: datetime, end_time: datetime) -> list[date]:
    days = []
    current = start_time.date()
    while datetime.combine(current, datetime.min.time()) < end_time:
        days.append(current)
        current += timedelta(days=1)
    return days


def is_cancelled(appointment: Appointment) -> bool:
    return appointment.is_deleted or appointment.status == AppointmentStatus.CANCELLED


class AppointmentService:
    def __init__(self, db: Session, clock: Callable[[], datetime] = datetime.now):
        self.db = db
        self.clock = clock
        self.repository = SqlAvailabilityRepository(db)

    def get_appointment(self, doctor_id: int, appointment_id: int) -> Appointment:
        appointment = self.db.query(Appointment).filter(
            Appointment.id == appointment_id,
            Appointment.doctor_id == doctor_id,
        ).first()
        if appointment is None:
            raise RecordNotFound('Appointment not found.')
        return appointment

    def list_appointments_for_date(self, doctor_id: int, target_date: date) -> list[Appointment]:
        start_of_day, end_of_day = day_bounds(target_date)
        return self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.is_deleted.is_(False),
            Appointment.start_time >= start_of_day,
            Appointment.start_time < end_of_day,
        ).order_by(Appointment.start_time.asc()).all()

    def get_upcoming_appointments(self, doctor_id: int, limit: int = 5) -> list[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.is_deleted.is_(False),
            Appointment.status.in_(UPCOMING_APPOINTMENT_STATUSES),
            Appointment.start_time >= self.clock(),
        ).order_by(Appointment.start_time.asc()).limit(limit).all()

    def book_appointment(self, doctor_id: int, data: AppointmentCreate) -> Appointment:
        self._lock_doctor(doctor_id)

        consultation_type = None
        if data.consultation_type_id is not None:
            consultation_type = self._get_bookable_consultation_type(doctor_id, data.consultation_type_id)

        start_time = data.start_time
        end_time = data.end_time
        if end_time is None:
            if consultation_type is None:
                raise InvalidRange('An end time is required without a consultation type.')
            end_time = start_time + timedelta(minutes=consultation_type.duration)

        self.validate_appointment_times(start_time, end_time)
        self.check_time_conflicts(
            doctor_id,
            start_time,
            end_time,
            now=self.clock(),
            lead_time_minutes=consultation_type.can_book_before if consultation_type else 0,
        )

        appointment = Appointment(
            doctor_id=doctor_id,
            consultation_type_id=data.consultation_type_id,
            patient_name=data.patient_name,
            title=data.title,
            notes=data.notes,
            start_time=start_time,
            end_time=end_time,
            status=AppointmentStatus.SCHEDULED,
        )
        self.db.add(appointment)
        self.db.commit()
        self.db.refresh(appointment)

        logger.info('Appointment %s booked for doctor %s at %s', appointment.id, doctor_id, start_time.isoformat())
        return appointment

    def update_appointment(self, doctor_id: int, appointment_id: int, data: AppointmentUpdate) -> Appointment:
        """
        Partial update. Moving only the start keeps the current length. A new
        range is checked against everything except the appointment itself.
        """
        self._lock_doctor(doctor_id)
        appointment = self.get_appointment(doctor_id, appointment_id)
        if is_cancelled(appointment):
            raise InvalidRange('Cancelled appointments cannot be changed.')

        changes = updated_fields(data)
        start_time = changes.pop('start_time', None)
        end_time = changes.pop('end_time', None)

        consultation_type = None
        consultation_type_id = changes.get('consultation_type_id', appointment.consultation_type_id)
        if 'consultation_type_id' in changes and consultation_type_id is not None:
            consultation_type = self._get_bookable_consultation_type(doctor_id, consultation_type_id)

        if start_time is not None or end_time is not None:
            new_start = start_time or appointment.start_time
            if end_time is not None:
                new_end = end_time
            else:
                new_end = new_start + (appointment.end_time - appointment.start_time)

            if consultation_type is None and consultation_type_id is not None:
                consultation_type = self.db.query(ConsultationType).filter(
                    ConsultationType.id == consultation_type_id,
                    ConsultationType.doctor_id == doctor_id,
                ).first()

            self.validate_appointment_times(new_start, new_end)
            self.check_time_conflicts(
                doctor_id,
                new_start,
                new_end,
                exclude_appointment_id=appointment.id,
                now=self.clock(),
                lead_time_minutes=consultation_type.can_book_before if consultation_type else 0,
            )
            appointment.start_time = new_start
            appointment.end_time = new_end

        for field, value in changes.items():
            setattr(appointment, field, value)

        self.db.commit()
        self.db.refresh(appointment)
        logger.info('Appointment %s updated for doctor %s', appointment_id, doctor_id)
        return appointment

    def validate_appointment_times(self, start_time: datetime, end_time: datetime) -> None:
        if start_time >= end_time:
            raise InvalidRange('Start time must be before end time.')

        if start_time < self.clock():
            raise InvalidRange('Cannot schedule appointment in the past.')

        if end_time - start_time > timedelta(minutes=config.MAX_APPOINTMENT_DURATION_MINUTES):
            raise InvalidRange(
                f'Appointment duration cannot exceed {config.MAX_APPOINTMENT_DURATION_MINUTES} minutes.'
            )

    def check_time_conflicts(
        self,
        doctor_id: int,
        start_time: datetime,
        end_time: datetime,
        exclude_appointment_id: int | None = None,
        now: datetime | None = None,
        lead_time_minutes: int = 0,
    ) -> None:
        for target_date in days_touched(start_time, end_time):
            appointments = [
                appointment
                for appointment in self.repository.get_active_appointments(doctor_id, target_date)
                if appointment.id != exclude_appointment_id
            ]
            exclusions = ExclusionSet(
                target_date,
                appointments=appointments,
                events=self.repository.get_blocking_events(doctor_id, target_date),
                time_off=self.repository.get_pto_periods(doctor_id, target_date),
                now=now,
                lead_time_minutes=lead_time_minutes,
            )
            reason = exclusions.reason(start_time, end_time)
            if reason is not None:
                raise SlotConflict(CONFLICT_MESSAGES[reason])

    def update_status(self, doctor_id: int, appointment_id: int, status: AppointmentStatus) -> Appointment:
        """Reviving a cancelled appointment books its range again, so it is conflict-checked."""
        appointment = self.get_appointment(doctor_id, appointment_id)

        if status == AppointmentStatus.CANCELLED:
            appointment.is_deleted = True
        elif is_cancelled(appointment):
            self._lock_doctor(doctor_id)
            self.check_time_conflicts(
                doctor_id,
                appointment.start_time,
                appointment.end_time,
                exclude_appointment_id=appointment.id,
            )
            appointment.is_deleted = False

        appointment.status = status
        self.db.commit()
        self.db.refresh(appointment)
        logger.info('Appointment %s moved to %s', appointment_id, status.value)
        return appointment

    def cancel_appointment(self, doctor_id: int, appointment_id: int) -> Appointment:
        """Cancelling keeps the row for history; it stops counting as booked."""
        return self.update_status(doctor_id, appointment_id, AppointmentStatus.CANCELLED)

    def _lock_doctor(self, doctor_id: int) -> Doctor:
        doctor = self.db.query(Doctor).filter(Doctor.id == doctor_id).with_for_update().first()
        if doctor is None:
            raise InvalidReference('Doctor not found.')
        return doctor

    def _get_bookable_consultation_type(self, doctor_id: int, consultation_type_id: int) -> ConsultationType:
        consultation_type = self.db.query(ConsultationType).filter(
            ConsultationType.id == consultation_type_id,
            ConsultationType.doctor_id == doctor_id,
            ConsultationType.enabled.is_(True),
        ).first()
        if consultation_type is None:
            raise InvalidReference('Consultation type not found or not available.')
        return consultation_type
