"""Weekly timeplan model definitions."""

from enum import Enum

from sqlalchemy import Boolean, Column, Enum as SAEnum, ForeignKey, Integer, String, Table, UniqueConstraint
from sqlalchemy.orm import relationship

from medagenda.database import Base
from medagenda.models.consultation_type import ConsultationType


class DayOfWeek(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def from_date(cls, value) -> "DayOfWeek":
        return WEEKDAYS[value.weekday()]


WEEKDAYS = list(DayOfWeek)


window_consultation_types = Table(
    "timeplan_window_consultation_types",
    Base.metadata,
    Column("window_id", Integer, ForeignKey("timeplan_windows.id", ondelete="CASCADE"), primary_key=True),
    Column("consultation_type_id", Integer, ForeignKey("consultation_types.id", ondelete="CASCADE"), primary_key=True),
)


class DoctorTimeplan(Base):
    """One weekday of a doctor's recurring week."""
    __tablename__ = "doctor_timeplans"
    __table_args__ = (UniqueConstraint("doctor_id", "day_of_week", name="uq_timeplan_doctor_day"),)

    id = Column(Integer, primary_key=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week = Column(SAEnum(DayOfWeek, native_enum=False), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    windows = relationship(
        "TimeplanWindow",
        back_populates="timeplan",
        cascade="all, delete-orphan",
        order_by="TimeplanWindow.start_time",
    )


class TimeplanWindow(Base):
    """A bookable time-of-day range ("HH:MM" to "HH:MM") inside a timeplan day."""
    __tablename__ = "timeplan_windows"

    id = Column(Integer, primary_key=True)
    timeplan_id = Column(Integer, ForeignKey("doctor_timeplans.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    timeplan = relationship("DoctorTimeplan", back_populates="windows")
    consultation_types = relationship(ConsultationType, secondary=window_consultation_types)

    @property
    def consultation_type_ids(self) -> list[int]:
        return sorted(consultation_type.id for consultation_type in self.consultation_types)
