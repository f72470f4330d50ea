"""Doctor model definitions."""

from sqlalchemy import Boolean, Column, Integer, String
from medagenda.database import Base


class Doctor(Base):
    """A practitioner owning an agenda. Every scheduling record hangs off one."""
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String)
    is_active = Column(Boolean, default=True, nullable=False)
