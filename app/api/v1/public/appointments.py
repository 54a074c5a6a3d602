# ============================================================================
# FILE: app/api/v1/public/appointments.py
# Public booking endpoint - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.api.dependencies import get_scheduling_policy, scheduling_http_error
from app.schemas.appointment import AppointmentCreate, AppointmentResponse
from app.services.appointment.appointment_service import AppointmentService
from app.services.appointment.appointment_query_service import serialize_appointment
from app.services.scheduling import SchedulingPolicy

router = APIRouter(prefix="/appointments", tags=["public-appointments"])


@router.post("", status_code=201, response_model=AppointmentResponse)
def book_appointment(
        data: AppointmentCreate,
        db: Session = Depends(get_db),
        policy: SchedulingPolicy = Depends(get_scheduling_policy)
):
    """
    Book an appointment. It starts as PENDING until the salon confirms it.
    Naive `date` values are read as salon local time (GMT-5).
    """
    appointment, error = AppointmentService.create_appointment(db, data, policy=policy)
    if error:
        raise scheduling_http_error(error)

    return serialize_appointment(appointment, policy)
