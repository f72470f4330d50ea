from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from medagenda.auth.dependencies import get_current_doctor
from medagenda.core.errors import SchedulingError
from medagenda.database import get_db
from medagenda.models.doctor import Doctor
from medagenda.routes.common import database_unavailable, ensure_database_ready, to_http_error
from medagenda.scheduling.availability import AvailabilityResolver
from medagenda.scheduling.repository import SqlAvailabilityRepository
from medagenda.schemas.appointment import AvailableSlotsResponse, SlotResponse

router = APIRouter(tags=['availability'])


@router.get('/slots', response_model=AvailableSlotsResponse)
def list_available_slots(
    date: date = Query(...),
    consultation_type_id: int | None = Query(default=None),
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        resolver = AvailabilityResolver(SqlAvailabilityRepository(db))
        result = resolver.compute_available_slots(doctor.id, date, consultation_type_id)
    except SchedulingError as exc:
        raise to_http_error(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc

    return AvailableSlotsResponse(
        date=result.date,
        consultation_type_id=result.consultation_type_id,
        slots=[
            SlotResponse(time=slot.start, end_time=slot.end, available=slot.available)
            for slot in result.slots
        ],
    )
