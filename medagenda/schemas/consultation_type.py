from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from medagenda.models.consultation_type import ConsultationKind, ConsultationLocation
from medagenda.schemas.common import normalize_color, normalize_required_text


class ConsultationTypeCreate(BaseModel):
    name: str
    color: str = '#3B82F6'
    location: ConsultationLocation = ConsultationLocation.ONSITE
    kind: ConsultationKind = ConsultationKind.REGULAR
    duration: int = Field(gt=0)
    rest_after: int = Field(default=0, ge=0)
    can_book_before: int = Field(default=0, ge=0)
    price: float = Field(default=0.0, ge=0)
    enabled: bool = True

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        return normalize_required_text(value, 'Name')

    @field_validator('color')
    @classmethod
    def validate_color(cls, value: str) -> str:
        return normalize_color(value)


class ConsultationTypeUpdate(BaseModel):
    name: str | None = None
    color: str | None = None
    location: ConsultationLocation | None = None
    kind: ConsultationKind | None = None
    duration: int | None = Field(default=None, gt=0)
    rest_after: int | None = Field(default=None, ge=0)
    can_book_before: int | None = Field(default=None, ge=0)
    price: float | None = Field(default=None, ge=0)
    enabled: bool | None = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalize_required_text(value, 'Name')

    @field_validator('color')
    @classmethod
    def validate_color(cls, value: str | None) -> str | None:
        return normalize_color(value)


class ConsultationTypeResponse(BaseModel):
    id: int
    name: str
    color: str | None = None
    location: ConsultationLocation
    kind: ConsultationKind
    duration: int
    rest_after: int
    can_book_before: int
    price: float | None = None
    enabled: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
