"""Event service - one-off agenda entries, optionally blocking bookings."""

import logging
from datetime import date

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from medagenda.core.errors import InvalidRange, RecordNotFound
from medagenda.models.event import Event, EventType
from medagenda.schemas.common import updated_fields
from medagenda.schemas.event import EventCreate, EventUpdate

logger = logging.getLogger(__name__)


def normalize_event_fields(fields: dict) -> dict:
    """
    Drop the fields an event type does not carry, then check the ranges.

    JOUR is a whole single day, PONCTUEL a single moment (start time only),
    PLAGE may span several days and a time range.
    """
    event_type = fields['event_type']

    if event_type == EventType.JOUR:
        fields.update(end_date=None, start_time=None, end_time=None)
    elif event_type == EventType.PONCTUEL:
        fields.update(end_date=None, end_time=None)
        if fields.get('start_time') is None:
            raise InvalidRange('A one-off event needs a start time.')

    end_date = fields.get('end_date')
    if end_date is not None and end_date < fields['start_date']:
        raise InvalidRange('End date must be on or after start date.')

    start_time, end_time = fields.get('start_time'), fields.get('end_time')
    if end_time is not None and start_time is None:
        raise InvalidRange('An end time needs a start time.')
    if start_time is not None and end_time is not None and start_time >= end_time:
        raise InvalidRange('Start time must be before end time.')

    return fields


class EventService:
    def __init__(self, db: Session):
        self.db = db

    def list_events(self, doctor_id: int) -> list[Event]:
        return self.db.query(Event).filter(
            Event.doctor_id == doctor_id,
        ).order_by(Event.start_date.asc(), Event.id.asc()).all()

    def get_event(self, doctor_id: int, event_id: int) -> Event:
        event = self.db.query(Event).filter(Event.id == event_id, Event.doctor_id == doctor_id).first()
        if event is None:
            raise RecordNotFound('Event not found.')
        return event

    def create_event(self, doctor_id: int, data: EventCreate) -> Event:
        fields = normalize_event_fields(data.model_dump(exclude_none=True))

        event = Event(doctor_id=doctor_id, **fields)
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)

        logger.info('Event %s created for doctor %s (blocking=%s)', event.id, doctor_id, event.block_appointments)
        return event

    def update_event(self, doctor_id: int, event_id: int, data: EventUpdate) -> Event:
        event = self.get_event(doctor_id, event_id)

        merged = {
            'event_type': event.event_type,
            'start_date': event.start_date,
            'end_date': event.end_date,
            'start_time': event.start_time,
            'end_time': event.end_time,
        }
        changes = updated_fields(data)
        for required in ('title', 'event_type', 'start_date', 'block_appointments'):
            if required in changes and changes[required] is None:
                del changes[required]
        merged.update(changes)

        for field, value in normalize_event_fields(merged).items():
            setattr(event, field, value)

        self.db.commit()
        self.db.refresh(event)
        logger.info('Event %s updated for doctor %s', event.id, doctor_id)
        return event

    def delete_event(self, doctor_id: int, event_id: int) -> None:
        event = self.get_event(doctor_id, event_id)
        self.db.delete(event)
        self.db.commit()

    def find_by_date_range(self, doctor_id: int, start_date: date, end_date: date) -> list[Event]:
        """Events intersecting [start_date, end_date]; an event without end date lasts its start day."""
        if start_date > end_date:
            raise InvalidRange('Start date must be before or equal to end date.')

        return self.db.query(Event).filter(
            Event.doctor_id == doctor_id,
            Event.start_date <= end_date,
            or_(
                and_(Event.end_date.is_(None), Event.start_date >= start_date),
                Event.end_date >= start_date,
            ),
        ).order_by(Event.start_date.asc(), Event.id.asc()).all()
