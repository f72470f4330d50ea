from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from medagenda.auth.dependencies import get_current_doctor
from medagenda.core.errors import SchedulingError
from medagenda.database import get_db
from medagenda.models.doctor import Doctor
from medagenda.routes.common import database_unavailable, ensure_database_ready, to_http_error
from medagenda.schemas.appointment import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatusUpdate,
    AppointmentUpdate,
)
from medagenda.services.appointment_service import AppointmentService

router = APIRouter(tags=['appointments'])


@router.get('', response_model=list[AppointmentResponse])
def list_appointments(
    date: date = Query(...),
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return AppointmentService(db).list_appointments_for_date(doctor.id, date)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.get('/upcoming', response_model=list[AppointmentResponse])
def list_upcoming_appointments(
    limit: int = Query(default=5, ge=1, le=50),
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return AppointmentService(db).get_upcoming_appointments(doctor.id, limit)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.get('/{appointment_id}', response_model=AppointmentResponse)
def get_appointment(appointment_id: int, doctor: Doctor = Depends(get_current_doctor), db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return AppointmentService(db).get_appointment(doctor.id, appointment_id)
    except SchedulingError as exc:
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.post('', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def book_appointment(
    data: AppointmentCreate,
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return AppointmentService(db).book_appointment(doctor.id, data)
    except SchedulingError as exc:
        db.rollback()
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.patch('/{appointment_id}', response_model=AppointmentResponse)
def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return AppointmentService(db).update_appointment(doctor.id, appointment_id, data)
    except SchedulingError as exc:
        db.rollback()
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.patch('/{appointment_id}/status', response_model=AppointmentResponse)
def update_appointment_status(
    appointment_id: int,
    data: AppointmentStatusUpdate,
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return AppointmentService(db).update_status(doctor.id, appointment_id, data.status)
    except SchedulingError as exc:
        db.rollback()
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.delete('/{appointment_id}', response_model=AppointmentResponse)
def cancel_appointment(appointment_id: int, doctor: Doctor = Depends(get_current_doctor), db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return AppointmentService(db).cancel_appointment(doctor.id, appointment_id)
    except SchedulingError as exc:
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc
