"""Calendar event model definitions."""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, Column, Date, DateTime, Enum as SAEnum, ForeignKey, Integer, String
from medagenda.database import Base


class EventType(str, Enum):
    JOUR = "JOUR"  # whole single day
    PLAGE = "PLAGE"  # date range, optionally with a time range
    PONCTUEL = "PONCTUEL"  # single moment of a day


class Event(Base):
    """One-off agenda entry; blocks booking only when block_appointments is set."""
    __tablename__ = "events"

    id = Column(Integer, primary_key=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String)
    event_type = Column(SAEnum(EventType, native_enum=False), default=EventType.JOUR, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)
    start_time = Column(String(5))
    end_time = Column(String(5))
    block_appointments = Column(Boolean, default=False, nullable=False)
    color = Column(String, default="#8B5CF6")
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
