"""Consultation type model definitions."""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, Enum as SAEnum, Float, ForeignKey, Integer, String, UniqueConstraint
from medagenda.database import Base


class ConsultationLocation(str, Enum):
    ONSITE = "ONSITE"
    ONLINE = "ONLINE"
    ATHOME = "ATHOME"


class ConsultationKind(str, Enum):
    REGULAR = "REGULAR"
    URGENT = "URGENT"


class ConsultationType(Base):
    """A bookable service. Duration and rest_after size the generated slots."""
    __tablename__ = "consultation_types"
    __table_args__ = (UniqueConstraint("doctor_id", "name", name="uq_consultation_type_doctor_name"),)

    id = Column(Integer, primary_key=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    color = Column(String, default="#3B82F6")
    location = Column(SAEnum(ConsultationLocation, native_enum=False), default=ConsultationLocation.ONSITE, nullable=False)
    kind = Column(SAEnum(ConsultationKind, native_enum=False), default=ConsultationKind.REGULAR, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    rest_after = Column(Integer, default=0, nullable=False)  # minutes
    can_book_before = Column(Integer, default=0, nullable=False)  # minutes of lead time
    price = Column(Float, default=0.0)
    enabled = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
