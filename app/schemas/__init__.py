# app/schemas/__init__.py
from .appointment import (
    AppointmentStatus,
    AppointmentCreate,
    AppointmentUpdate,
    AppointmentResponse,
    SlotResponse,
    SlotGridResponse,
    AvailabilityDayRequest,
    AvailabilityRangeRequest,
    AvailabilityResponse,
    SchedulingErrorDetail,
)
