from datetime import date, datetime

from pydantic import BaseModel, field_validator

from medagenda.models.event import EventType
from medagenda.schemas.common import normalize_color, normalize_optional_clock_time, normalize_required_text


class EventCreate(BaseModel):
    title: str
    description: str | None = None
    event_type: EventType = EventType.JOUR
    start_date: date
    end_date: date | None = None
    start_time: str | None = None
    end_time: str | None = None
    block_appointments: bool = False
    color: str | None = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: str) -> str:
        return normalize_required_text(value, 'Title')

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_clock_time(cls, value: str | None) -> str | None:
        return normalize_optional_clock_time(value)

    @field_validator('color')
    @classmethod
    def validate_color(cls, value: str | None) -> str | None:
        return normalize_color(value)


class EventUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    event_type: EventType | None = None
    start_date: date | None = None
    end_date: date | None = None
    start_time: str | None = None
    end_time: str | None = None
    block_appointments: bool | None = None
    color: str | None = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalize_required_text(value, 'Title')

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_clock_time(cls, value: str | None) -> str | None:
        return normalize_optional_clock_time(value)

    @field_validator('color')
    @classmethod
    def validate_color(cls, value: str | None) -> str | None:
        return normalize_color(value)


class EventResponse(BaseModel):
    id: int
    title: str
    description: str | None = None
    event_type: EventType
    start_date: date
    end_date: date | None = None
    start_time: str | None = None
    end_time: str | None = None
    block_appointments: bool
    color: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
