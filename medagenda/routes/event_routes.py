from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from medagenda.auth.dependencies import get_current_doctor
from medagenda.core.errors import SchedulingError
from medagenda.database import get_db
from medagenda.models.doctor import Doctor
from medagenda.routes.common import database_unavailable, ensure_database_ready, to_http_error
from medagenda.schemas.event import EventCreate, EventResponse, EventUpdate
from medagenda.services.event_service import EventService

router = APIRouter(tags=['events'])


@router.get('', response_model=list[EventResponse])
def list_events(
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        service = EventService(db)
        if start_date is None and end_date is None:
            return service.list_events(doctor.id)
        return service.find_by_date_range(doctor.id, start_date or end_date, end_date or start_date)
    except SchedulingError as exc:
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.get('/{event_id}', response_model=EventResponse)
def get_event(event_id: int, doctor: Doctor = Depends(get_current_doctor), db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return EventService(db).get_event(doctor.id, event_id)
    except SchedulingError as exc:
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.post('', response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(data: EventCreate, doctor: Doctor = Depends(get_current_doctor), db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return EventService(db).create_event(doctor.id, data)
    except SchedulingError as exc:
        db.rollback()
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.patch('/{event_id}', response_model=EventResponse)
def update_event(
    event_id: int,
    data: EventUpdate,
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return EventService(db).update_event(doctor.id, event_id, data)
    except SchedulingError as exc:
        db.rollback()
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.delete('/{event_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: int, doctor: Doctor = Depends(get_current_doctor), db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        EventService(db).delete_event(doctor.id, event_id)
    except SchedulingError as exc:
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc
