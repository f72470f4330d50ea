from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from medagenda.core import config
from medagenda.schemas.common import normalize_required_text


class PTOCreate(BaseModel):
    label: str
    start_date: date
    end_date: date
    announcements: int = Field(default=config.DEFAULT_PTO_ANNOUNCEMENTS, ge=0)

    @field_validator('label')
    @classmethod
    def validate_label(cls, value: str) -> str:
        return normalize_required_text(value, 'Label')


class PTOUpdate(BaseModel):
    label: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    announcements: int | None = Field(default=None, ge=0)

    @field_validator('label')
    @classmethod
    def validate_label(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalize_required_text(value, 'Label')


class PTOResponse(BaseModel):
    id: int
    label: str
    start_date: date
    end_date: date
    announcements: int
    appointments_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
