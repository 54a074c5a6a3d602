# ===== app/models/appointment.py =====
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.models.base import Base
from app.schemas.appointment import AppointmentStatus
import uuid


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Client info
    client_name = Column(String(120), nullable=False)
    client_phone = Column(String(20), nullable=False)
    client_email = Column(String(200), nullable=True)

    # References
    service_id = Column(Uuid(as_uuid=True), ForeignKey("services.id"), nullable=False)

    # Start instant, stored as UTC
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    notes = Column(Text, nullable=True)

    # PENDING, CONFIRMED, COMPLETED, CANCELLED
    status = Column(String(20), nullable=False, default=AppointmentStatus.PENDING.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    service = relationship("Service", back_populates="appointments")

    __table_args__ = (
        Index("ix_appointments_status_date", "status", "date"),
    )

    def __repr__(self):
        return f"<Appointment(id={self.id}, date={self.date}, status={self.status})>"
