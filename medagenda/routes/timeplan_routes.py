from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from medagenda.auth.dependencies import get_current_doctor
from medagenda.core.errors import SchedulingError
from medagenda.database import get_db
from medagenda.models.doctor import Doctor
from medagenda.models.timeplan import DayOfWeek
from medagenda.routes.common import database_unavailable, ensure_database_ready, to_http_error
from medagenda.schemas.timeplan import TimeplanDayCreate, TimeplanDayResponse, TimeplanDayUpdate
from medagenda.services.timeplan_service import TimeplanService

router = APIRouter(tags=['timeplan'])


@router.get('', response_model=list[TimeplanDayResponse])
def get_doctor_timeplan(doctor: Doctor = Depends(get_current_doctor), db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return TimeplanService(db).get_timeplan(doctor.id)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.get('/{day_of_week}', response_model=TimeplanDayResponse)
def get_doctor_timeplan_day(
    day_of_week: DayOfWeek,
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return TimeplanService(db).get_timeplan_day(doctor.id, day_of_week)
    except SchedulingError as exc:
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.post('', response_model=TimeplanDayResponse)
def save_timeplan_day(
    data: TimeplanDayCreate,
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return TimeplanService(db).upsert_timeplan_day(doctor.id, data)
    except SchedulingError as exc:
        db.rollback()
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.put('/{day_of_week}', response_model=TimeplanDayResponse)
def update_timeplan_day(
    day_of_week: DayOfWeek,
    data: TimeplanDayUpdate,
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return TimeplanService(db).update_timeplan_day(doctor.id, day_of_week, data)
    except SchedulingError as exc:
        db.rollback()
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.delete('/windows/{window_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_timeplan_window(
    window_id: int,
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        TimeplanService(db).delete_window(doctor.id, window_id)
    except SchedulingError as exc:
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.delete('/{day_of_week}', status_code=status.HTTP_204_NO_CONTENT)
def delete_timeplan_day(
    day_of_week: DayOfWeek,
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        TimeplanService(db).delete_timeplan_day(doctor.id, day_of_week)
    except SchedulingError as exc:
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc
