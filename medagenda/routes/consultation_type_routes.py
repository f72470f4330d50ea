from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from medagenda.auth.dependencies import get_current_doctor
from medagenda.core.errors import SchedulingError
from medagenda.database import get_db
from medagenda.models.consultation_type import ConsultationLocation
from medagenda.models.doctor import Doctor
from medagenda.routes.common import database_unavailable, ensure_database_ready, to_http_error
from medagenda.schemas.consultation_type import (
    ConsultationTypeCreate,
    ConsultationTypeResponse,
    ConsultationTypeUpdate,
)
from medagenda.services.consultation_type_service import ConsultationTypeService

router = APIRouter(tags=['consultation-types'])


@router.get('', response_model=list[ConsultationTypeResponse])
def list_consultation_types(
    enabled_only: bool = Query(default=False),
    location: ConsultationLocation | None = Query(default=None),
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return ConsultationTypeService(db).list_consultation_types(doctor.id, enabled_only, location)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.get('/{consultation_type_id}', response_model=ConsultationTypeResponse)
def get_consultation_type(
    consultation_type_id: int,
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return ConsultationTypeService(db).get_consultation_type(doctor.id, consultation_type_id)
    except SchedulingError as exc:
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.post('', response_model=ConsultationTypeResponse, status_code=status.HTTP_201_CREATED)
def create_consultation_type(
    data: ConsultationTypeCreate,
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return ConsultationTypeService(db).create_consultation_type(doctor.id, data)
    except SchedulingError as exc:
        db.rollback()
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.post('/defaults', response_model=list[ConsultationTypeResponse], status_code=status.HTTP_201_CREATED)
def create_default_consultation_types(doctor: Doctor = Depends(get_current_doctor), db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return ConsultationTypeService(db).create_default_consultation_types(doctor.id)
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.patch('/{consultation_type_id}', response_model=ConsultationTypeResponse)
def update_consultation_type(
    consultation_type_id: int,
    data: ConsultationTypeUpdate,
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return ConsultationTypeService(db).update_consultation_type(doctor.id, consultation_type_id, data)
    except SchedulingError as exc:
        db.rollback()
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.delete('/{consultation_type_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_consultation_type(
    consultation_type_id: int,
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        ConsultationTypeService(db).delete_consultation_type(doctor.id, consultation_type_id)
    except SchedulingError as exc:
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc
