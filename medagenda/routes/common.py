import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from medagenda.core.errors import (
    DuplicateRecord,
    InvalidRange,
    InvalidReference,
    RecordNotFound,
    SchedulingError,
    SlotConflict,
)
from medagenda.database import ensure_scheduling_indexes

logger = logging.getLogger(__name__)

DATABASE_UNAVAILABLE_DETAIL = 'Database unavailable. Verify DATABASE_URL and database credentials.'

ERROR_STATUS_CODES = {
    InvalidReference: status.HTTP_404_NOT_FOUND,
    RecordNotFound: status.HTTP_404_NOT_FOUND,
    InvalidRange: status.HTTP_400_BAD_REQUEST,
    DuplicateRecord: status.HTTP_409_CONFLICT,
    SlotConflict: status.HTTP_409_CONFLICT,
}


def ensure_database_ready() -> None:
    try:
        ensure_scheduling_indexes()
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


def to_http_error(exc: SchedulingError) -> HTTPException:
    status_code = ERROR_STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=status_code, detail=exc.message)


def database_unavailable(exc: SQLAlchemyError) -> HTTPException:
    logger.exception('Database operation failed: %s', exc.__class__.__name__)
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=DATABASE_UNAVAILABLE_DETAIL,
    )
