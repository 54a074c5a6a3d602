# app/schemas/appointment.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime, date
from enum import Enum


class AppointmentStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class AppointmentCreate(BaseModel):
    """Booking request from the public flow or the dashboard"""
    client_name: str = Field(..., min_length=1, max_length=120, description="Client full name")
    client_phone: str = Field(..., min_length=7, max_length=20, description="Client phone number")
    client_email: Optional[str] = Field(None, max_length=200, description="Client email")
    service_id: str = Field(..., description="Requested service")
    date: datetime = Field(
        ...,
        description="Start time. Naive values are business local wall-clock time (GMT-5)"
    )
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("client_phone")
    @classmethod
    def clean_phone(cls, v: str) -> str:
        digits = "".join(ch for ch in v if ch.isdigit() or ch == "+")
        if len(digits.lstrip("+")) < 7:
            raise ValueError("Phone number must contain at least 7 digits")
        return digits

    @field_validator("client_email")
    @classmethod
    def blank_email_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v.strip()


class AppointmentUpdate(BaseModel):
    """Admin update: status transition, reschedule and/or notes"""
    status: Optional[AppointmentStatus] = None
    date: Optional[datetime] = Field(None, description="New start time (local wall-clock if naive)")
    notes: Optional[str] = Field(None, max_length=1000)


class AppointmentResponse(BaseModel):
    id: str
    client_name: str
    client_phone: str
    client_email: Optional[str]
    service_id: str
    service_name: Optional[str]
    duration_minutes: int
    date: str = Field(..., description="Start instant, UTC ISO-8601")
    local_date: str = Field(..., description="Business local day")
    local_time: str = Field(..., description="Business local HH:MM")
    end: str
    status: AppointmentStatus
    allowed_next_statuses: List[AppointmentStatus]
    notes: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]


class SlotResponse(BaseModel):
    start: str
    end: str
    date: str
    time: str
    available: bool
    conflict_reason: Optional[str] = None


class SlotGridResponse(BaseModel):
    slots: List[SlotResponse]
    total_slots: int
    available_slots: int
    booked_slots: int
    service_duration: int


class AvailabilityDayRequest(BaseModel):
    date: date


class AvailabilityRangeRequest(BaseModel):
    start_date: date
    end_date: date

    @field_validator("end_date")
    @classmethod
    def end_not_before_start(cls, v: date, info) -> date:
        start = info.data.get("start_date")
        if start and v < start:
            raise ValueError("start_date must be on or before end_date")
        return v


class AvailabilityResponse(BaseModel):
    id: str
    date: str
    is_available: bool


class SchedulingErrorDetail(BaseModel):
    """Body of a rejected booking/update (inside `detail`)"""
    code: str
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)
