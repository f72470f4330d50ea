from pydantic import BaseModel, field_validator

from medagenda.models.timeplan import DayOfWeek
from medagenda.schemas.common import normalize_clock_time


class TimeWindowInput(BaseModel):
    start_time: str
    end_time: str
    consultation_type_ids: list[int] = []
    is_active: bool = True

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_clock_time(cls, value: str) -> str:
        return normalize_clock_time(value)

    @field_validator('consultation_type_ids')
    @classmethod
    def deduplicate_consultation_types(cls, value: list[int]) -> list[int]:
        return sorted(set(value))


class TimeplanDayCreate(BaseModel):
    day_of_week: DayOfWeek
    is_active: bool = True
    windows: list[TimeWindowInput] = []


class TimeplanDayUpdate(BaseModel):
    is_active: bool | None = None
    windows: list[TimeWindowInput] | None = None


class TimeWindowResponse(BaseModel):
    id: int
    start_time: str
    end_time: str
    is_active: bool
    consultation_type_ids: list[int]

    class Config:
        from_attributes = True


class TimeplanDayResponse(BaseModel):
    id: int
    day_of_week: DayOfWeek
    is_active: bool
    windows: list[TimeWindowResponse]

    class Config:
        from_attributes = True
