"""Time-off model definitions."""

from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String
from medagenda.database import Base


class PTOPeriod(Base):
    """Inclusive date range during which the doctor takes no bookings.

    appointments_count is a denormalized hint refreshed on every write; it is
    never consulted when computing availability.
    """
    __tablename__ = "pto_periods"

    id = Column(Integer, primary_key=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    label = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    announcements = Column(Integer, default=2, nullable=False)
    appointments_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
