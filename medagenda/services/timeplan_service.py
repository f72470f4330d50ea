"""Timeplan service - weekly schedule management for a doctor."""

import logging

from sqlalchemy.orm import Session, selectinload

from medagenda.core.errors import InvalidRange, InvalidReference, RecordNotFound
from medagenda.models.consultation_type import ConsultationType
from medagenda.models.doctor import Doctor
from medagenda.models.timeplan import WEEKDAYS, DayOfWeek, DoctorTimeplan, TimeplanWindow
from medagenda.schemas.timeplan import TimeplanDayCreate, TimeplanDayUpdate, TimeWindowInput

logger = logging.getLogger(__name__)


def validate_windows(windows: list[TimeWindowInput]) -> None:
    """
    Each window must start before it ends, and active windows of the same day
    must not overlap. Touching windows (09:00-12:00, 12:00-14:00) are fine.
    """
    for idx, window in enumerate(windows, 1):
        if window.start_time >= window.end_time:
            raise InvalidRange(
                f'Window {idx}: start time ({window.start_time}) must be before end time ({window.end_time}).'
            )

    active = sorted(
        (window for window in windows if window.is_active),
        key=lambda window: window.start_time,
    )
    for current, following in zip(active, active[1:]):
        if current.end_time > following.start_time:
            raise InvalidRange(
                f'Windows overlap: {current.start_time}-{current.end_time} '
                f'and {following.start_time}-{following.end_time}.'
            )


class TimeplanService:
    def __init__(self, db: Session):
        self.db = db

    def get_timeplan(self, doctor_id: int) -> list[DoctorTimeplan]:
        timeplans = self._query(doctor_id).all()
        return sorted(timeplans, key=lambda timeplan: WEEKDAYS.index(timeplan.day_of_week))

    def get_timeplan_day(self, doctor_id: int, day_of_week: DayOfWeek) -> DoctorTimeplan:
        timeplan = self._find_day(doctor_id, day_of_week)
        if timeplan is None:
            raise RecordNotFound('Timeplan not found for this day.')
        return timeplan

    def upsert_timeplan_day(self, doctor_id: int, data: TimeplanDayCreate) -> DoctorTimeplan:
        """Create the weekday or replace its windows; calling twice yields the same day."""
        if self.db.query(Doctor.id).filter(Doctor.id == doctor_id).first() is None:
            raise InvalidReference('Doctor not found.')

        validate_windows(data.windows)
        consultation_types = self._load_consultation_types(doctor_id, data.windows)

        timeplan = self._find_day(doctor_id, data.day_of_week)
        if timeplan is None:
            timeplan = DoctorTimeplan(doctor_id=doctor_id, day_of_week=data.day_of_week)
            self.db.add(timeplan)

        timeplan.is_active = data.is_active
        timeplan.windows = self._build_windows(data.windows, consultation_types)

        self.db.commit()
        self.db.refresh(timeplan)
        logger.info('Timeplan %s saved for doctor %s with %d windows', data.day_of_week.value, doctor_id, len(data.windows))
        return timeplan

    def update_timeplan_day(self, doctor_id: int, day_of_week: DayOfWeek, data: TimeplanDayUpdate) -> DoctorTimeplan:
        timeplan = self.get_timeplan_day(doctor_id, day_of_week)

        if data.windows is not None:
            validate_windows(data.windows)
            consultation_types = self._load_consultation_types(doctor_id, data.windows)
            timeplan.windows = self._build_windows(data.windows, consultation_types)

        if data.is_active is not None:
            timeplan.is_active = data.is_active

        self.db.commit()
        self.db.refresh(timeplan)
        logger.info('Timeplan %s updated for doctor %s', day_of_week.value, doctor_id)
        return timeplan

    def delete_timeplan_day(self, doctor_id: int, day_of_week: DayOfWeek) -> None:
        timeplan = self.get_timeplan_day(doctor_id, day_of_week)
        self.db.delete(timeplan)
        self.db.commit()
        logger.info('Timeplan %s deleted for doctor %s', day_of_week.value, doctor_id)

    def delete_window(self, doctor_id: int, window_id: int) -> None:
        window = (
            self.db.query(TimeplanWindow)
            .join(DoctorTimeplan, TimeplanWindow.timeplan_id == DoctorTimeplan.id)
            .filter(TimeplanWindow.id == window_id, DoctorTimeplan.doctor_id == doctor_id)
            .first()
        )
        if window is None:
            raise RecordNotFound('Time slot not found.')

        self.db.delete(window)
        self.db.commit()

    def _query(self, doctor_id: int):
        return (
            self.db.query(DoctorTimeplan)
            .options(selectinload(DoctorTimeplan.windows).selectinload(TimeplanWindow.consultation_types))
            .filter(DoctorTimeplan.doctor_id == doctor_id)
        )

    def _find_day(self, doctor_id: int, day_of_week: DayOfWeek) -> DoctorTimeplan | None:
        return self._query(doctor_id).filter(DoctorTimeplan.day_of_week == day_of_week).first()

    def _load_consultation_types(self, doctor_id: int, windows: list[TimeWindowInput]) -> dict[int, ConsultationType]:
        requested_ids = {type_id for window in windows for type_id in window.consultation_type_ids}
        if not requested_ids:
            return {}

        consultation_types = self.db.query(ConsultationType).filter(
            ConsultationType.id.in_(requested_ids),
            ConsultationType.doctor_id == doctor_id,
        ).all()

        if len(consultation_types) != len(requested_ids):
            raise InvalidReference('One or more consultation types are invalid or do not belong to this doctor.')

        return {consultation_type.id: consultation_type for consultation_type in consultation_types}

    @staticmethod
    def _build_windows(
        windows: list[TimeWindowInput],
        consultation_types: dict[int, ConsultationType],
    ) -> list[TimeplanWindow]:
        return [
            TimeplanWindow(
                start_time=window.start_time,
                end_time=window.end_time,
                is_active=window.is_active,
                consultation_types=[consultation_types[type_id] for type_id in window.consultation_type_ids],
            )
            for window in windows
        ]
