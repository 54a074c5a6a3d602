# app/models/availability.py
from sqlalchemy import Column, Boolean, Date, DateTime, Uuid
from sqlalchemy.sql import func
from app.models.base import Base
import uuid


class Availability(Base):
    """
    Enabled-day allow-list. A day is bookable only when it has a row with
    is_available=True; is_available=False marks an explicitly blocked day.
    """
    __tablename__ = "availability"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Business local calendar day
    date = Column(Date, nullable=False, unique=True, index=True)
    is_available = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            "id": str(self.id),
            "date": self.date.isoformat(),
            "is_available": self.is_available,
        }
