"""PTO service - time-off periods and their affected-appointments hint."""

import logging
from datetime import date, datetime

from sqlalchemy.orm import Session

from medagenda.core.errors import InvalidRange, RecordNotFound
from medagenda.models.appointment import Appointment, AppointmentStatus
from medagenda.models.pto import PTOPeriod
from medagenda.scheduling.overlap import day_bounds
from medagenda.schemas.common import updated_fields
from medagenda.schemas.pto import PTOCreate, PTOUpdate

logger = logging.getLogger(__name__)

# Appointments in these states are not affected by a new absence.
SETTLED_APPOINTMENT_STATUSES = (AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED)


class PTOService:
    def __init__(self, db: Session):
        self.db = db

    def list_periods(self, doctor_id: int) -> list[PTOPeriod]:
        return self.db.query(PTOPeriod).filter(
            PTOPeriod.doctor_id == doctor_id,
        ).order_by(PTOPeriod.start_date.asc()).all()

    def get_period(self, doctor_id: int, pto_id: int) -> PTOPeriod:
        period = self.db.query(PTOPeriod).filter(
            PTOPeriod.id == pto_id,
            PTOPeriod.doctor_id == doctor_id,
        ).first()
        if period is None:
            raise RecordNotFound('PTO not found.')
        return period

    def create_period(self, doctor_id: int, data: PTOCreate) -> PTOPeriod:
        self._validate_range(data.start_date, data.end_date)

        period = PTOPeriod(
            doctor_id=doctor_id,
            label=data.label,
            start_date=data.start_date,
            end_date=data.end_date,
            announcements=data.announcements,
            appointments_count=self.count_affected_appointments(doctor_id, data.start_date, data.end_date),
        )
        self.db.add(period)
        self.db.commit()
        self.db.refresh(period)

        logger.info(
            'PTO %s created for doctor %s (%s to %s, %d appointments affected)',
            period.id, doctor_id, period.start_date, period.end_date, period.appointments_count,
        )
        return period

    def update_period(self, doctor_id: int, pto_id: int, data: PTOUpdate) -> PTOPeriod:
        period = self.get_period(doctor_id, pto_id)
        changes = {field: value for field, value in updated_fields(data).items() if value is not None}

        start_date = changes.get('start_date', period.start_date)
        end_date = changes.get('end_date', period.end_date)
        self._validate_range(start_date, end_date)

        for field, value in changes.items():
            setattr(period, field, value)
        period.appointments_count = self.count_affected_appointments(doctor_id, start_date, end_date)

        self.db.commit()
        self.db.refresh(period)
        logger.info('PTO %s updated for doctor %s', period.id, doctor_id)
        return period

    def delete_period(self, doctor_id: int, pto_id: int) -> None:
        period = self.get_period(doctor_id, pto_id)
        self.db.delete(period)
        self.db.commit()
        logger.info('PTO %s deleted for doctor %s', pto_id, doctor_id)

    def count_affected_appointments(self, doctor_id: int, start_date: date, end_date: date) -> int:
        """Live appointments starting anywhere inside the inclusive date range."""
        range_start, _ = day_bounds(start_date)
        _, range_end = day_bounds(end_date)

        return self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.is_deleted.is_(False),
            Appointment.status.notin_(SETTLED_APPOINTMENT_STATUSES),
            Appointment.start_time >= range_start,
            Appointment.start_time < range_end,
        ).count()

    def is_date_blocked(self, doctor_id: int, when: date | datetime) -> bool:
        target_date = when.date() if isinstance(when, datetime) else when
        return self.db.query(PTOPeriod).filter(
            PTOPeriod.doctor_id == doctor_id,
            PTOPeriod.start_date <= target_date,
            PTOPeriod.end_date >= target_date,
        ).count() > 0

    @staticmethod
    def _validate_range(start_date: date, end_date: date) -> None:
        if start_date > end_date:
            raise InvalidRange('Start date must be before or equal to end date.')
