from datetime import date, datetime

from pydantic import BaseModel, field_validator

from medagenda.models.appointment import AppointmentStatus

MAX_APPOINTMENT_NOTES_LENGTH = 600


def normalize_appointment_time(value: datetime | None) -> datetime | None:
    """Naive local time, minute precision. Offsets are converted to local time first."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value.replace(second=0, microsecond=0)


def normalize_notes(value: str | None) -> str | None:
    if value is None:
        return None

    normalized = value.strip()
    if not normalized:
        return None

    if len(normalized) > MAX_APPOINTMENT_NOTES_LENGTH:
        raise ValueError(f'Notes must be {MAX_APPOINTMENT_NOTES_LENGTH} characters or fewer.')

    return normalized


class AppointmentCreate(BaseModel):
    start_time: datetime
    end_time: datetime | None = None
    consultation_type_id: int | None = None
    patient_name: str | None = None
    title: str | None = None
    notes: str | None = None

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_times(cls, value: datetime | None) -> datetime | None:
        return normalize_appointment_time(value)

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        return normalize_notes(value)


class AppointmentUpdate(BaseModel):
    start_time: datetime | None = None
    end_time: datetime | None = None
    consultation_type_id: int | None = None
    patient_name: str | None = None
    title: str | None = None
    notes: str | None = None

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_times(cls, value: datetime | None) -> datetime | None:
        return normalize_appointment_time(value)

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        return normalize_notes(value)


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus


class AppointmentResponse(BaseModel):
    id: int
    consultation_type_id: int | None = None
    patient_name: str | None = None
    title: str | None = None
    notes: str | None = None
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus
    is_deleted: bool

    class Config:
        from_attributes = True


class SlotResponse(BaseModel):
    time: datetime
    end_time: datetime
    available: bool


class AvailableSlotsResponse(BaseModel):
    date: date
    consultation_type_id: int | None = None
    slots: list[SlotResponse]
