# ============================================================================
# FILE: app/api/v1/dashboard/appointments.py
# Admin endpoints - thin HTTP layer
# IMPORTANT: Specific routes MUST come before parameterized routes
# ============================================================================
from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional

from app.config.database import get_db
from app.api.dependencies import get_scheduling_policy, scheduling_http_error
from app.schemas.appointment import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatus,
    AppointmentUpdate,
)
from app.services.appointment.appointment_service import AppointmentService, ResourceNotFoundError
from app.services.appointment.appointment_query_service import (
    AppointmentQueryService,
    serialize_appointment,
)
from app.services.scheduling import SchedulingPolicy

router = APIRouter(prefix="/appointments", tags=["dashboard-appointments"])


@router.get("")
def list_appointments(
        status: Optional[AppointmentStatus] = Query(None, description="Filter by status"),
        start_date: Optional[date] = Query(None, description="Appointments on or after this local day"),
        end_date: Optional[date] = Query(None, description="Appointments on or before this local day"),
        search: Optional[str] = Query(None, description="Client name, phone or email"),
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
        db: Session = Depends(get_db),
        policy: SchedulingPolicy = Depends(get_scheduling_policy)
):
    """
    Paginated list of appointments, earliest first.
    """
    return AppointmentQueryService.list_appointments(
        db=db,
        status=status,
        start_date=start_date,
        end_date=end_date,
        search=search,
        page=page,
        limit=limit,
        policy=policy
    )


@router.get("/stats/summary")
def get_appointment_stats(
        start_date: Optional[date] = Query(None, description="Stats from this date"),
        end_date: Optional[date] = Query(None, description="Stats until this date"),
        db: Session = Depends(get_db),
        policy: SchedulingPolicy = Depends(get_scheduling_policy)
):
    """
    Summary statistics: counts by status and service, completed income.
    """
    return AppointmentQueryService.get_appointment_stats(
        db=db,
        start_date=start_date,
        end_date=end_date,
        policy=policy
    )


@router.get("/agenda/{day}")
def get_day_agenda(
        day: date = Path(..., description="Business-local day (YYYY-MM-DD)"),
        db: Session = Depends(get_db),
        policy: SchedulingPolicy = Depends(get_scheduling_policy)
):
    """
    Every appointment of one day, including cancelled and completed ones.
    """
    return AppointmentQueryService.get_day_agenda(db=db, day=day, policy=policy)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
        appointment_id: str = Path(..., description="The appointment ID"),
        db: Session = Depends(get_db),
        policy: SchedulingPolicy = Depends(get_scheduling_policy)
):
    """
    Detailed information about a specific appointment.
    """
    result = AppointmentQueryService.get_appointment_by_id(db=db, appointment_id=appointment_id, policy=policy)

    if not result:
        raise scheduling_http_error(ResourceNotFoundError("Appointment", appointment_id))

    return result


@router.post("", status_code=201, response_model=AppointmentResponse)
def create_appointment(
        data: AppointmentCreate,
        db: Session = Depends(get_db),
        policy: SchedulingPolicy = Depends(get_scheduling_policy)
):
    """
    Create an appointment on behalf of a client (same rules as public booking).
    """
    appointment, error = AppointmentService.create_appointment(db, data, policy=policy)
    if error:
        raise scheduling_http_error(error)

    return serialize_appointment(appointment, policy)


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
def update_appointment(
        update: AppointmentUpdate,
        appointment_id: str = Path(..., description="The appointment ID"),
        db: Session = Depends(get_db),
        policy: SchedulingPolicy = Depends(get_scheduling_policy)
):
    """
    Change status, reschedule or edit notes.
    Completed and cancelled appointments can't be modified.
    """
    appointment, error = AppointmentService.update_appointment(db, appointment_id, update, policy=policy)
    if error:
        raise scheduling_http_error(error)

    return serialize_appointment(appointment, policy)


@router.delete("/{appointment_id}")
def delete_appointment(
        appointment_id: str = Path(..., description="The appointment ID"),
        db: Session = Depends(get_db)
):
    """
    Permanently delete an appointment.
    """
    if not AppointmentService.delete_appointment(db, appointment_id):
        raise scheduling_http_error(ResourceNotFoundError("Appointment", appointment_id))

    return {"message": "Appointment deleted", "id": appointment_id}
