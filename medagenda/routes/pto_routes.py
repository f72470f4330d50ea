from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from medagenda.auth.dependencies import get_current_doctor
from medagenda.core.errors import SchedulingError
from medagenda.database import get_db
from medagenda.models.doctor import Doctor
from medagenda.routes.common import database_unavailable, ensure_database_ready, to_http_error
from medagenda.schemas.pto import PTOCreate, PTOResponse, PTOUpdate
from medagenda.services.pto_service import PTOService

router = APIRouter(tags=['pto'])


@router.get('', response_model=list[PTOResponse])
def list_pto_periods(doctor: Doctor = Depends(get_current_doctor), db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return PTOService(db).list_periods(doctor.id)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.get('/{pto_id}', response_model=PTOResponse)
def get_pto_period(pto_id: int, doctor: Doctor = Depends(get_current_doctor), db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return PTOService(db).get_period(doctor.id, pto_id)
    except SchedulingError as exc:
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.post('', response_model=PTOResponse, status_code=status.HTTP_201_CREATED)
def create_pto_period(data: PTOCreate, doctor: Doctor = Depends(get_current_doctor), db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return PTOService(db).create_period(doctor.id, data)
    except SchedulingError as exc:
        db.rollback()
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.patch('/{pto_id}', response_model=PTOResponse)
def update_pto_period(
    pto_id: int,
    data: PTOUpdate,
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return PTOService(db).update_period(doctor.id, pto_id, data)
    except SchedulingError as exc:
        db.rollback()
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.delete('/{pto_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_pto_period(pto_id: int, doctor: Doctor = Depends(get_current_doctor), db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        PTOService(db).delete_period(doctor.id, pto_id)
    except SchedulingError as exc:
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc
