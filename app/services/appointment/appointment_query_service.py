# ============================================================================
# app/services/appointment/appointment_query_service.py
# Read-only queries - no FastAPI dependencies, fully testable
# ============================================================================
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import or_
from datetime import date, timedelta
from typing import Optional, Dict, Any

from app.models.appointment import Appointment
from app.schemas.appointment import AppointmentStatus
from app.services.scheduling import (
    SchedulingPolicy,
    allowed_next_statuses,
    day_bounds,
    ensure_utc,
    format_local,
)
from app.services.availability.availability_service import parse_uuid


class AppointmentQueryService:
    """Service layer for appointment listings, agenda and statistics."""

    @staticmethod
    def list_appointments(
            db: Session,
            status: Optional[AppointmentStatus] = None,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
            search: Optional[str] = None,
            page: int = 1,
            limit: int = 10,
            policy: Optional[SchedulingPolicy] = None
    ) -> Dict[str, Any]:
        """Get paginated list of appointments with filters (dates are business local days)."""
        policy = policy or SchedulingPolicy.from_settings()
        query = db.query(Appointment).options(joinedload(Appointment.service))

        if status:
            query = query.filter(Appointment.status == AppointmentStatus(status).value)
        if start_date:
            query = query.filter(Appointment.date >= day_bounds(start_date, policy.tz)[0])
        if end_date:
            query = query.filter(Appointment.date < day_bounds(end_date, policy.tz)[1])
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(
                Appointment.client_name.ilike(pattern),
                Appointment.client_phone.like(pattern),
                Appointment.client_email.ilike(pattern)
            ))

        total = query.count()
        appointments = query.order_by(Appointment.date.asc()).offset((page - 1) * limit).limit(limit).all()

        return {
            "data": [serialize_appointment(appt, policy) for appt in appointments],
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "total_pages": (total + limit - 1) // limit if total > 0 else 0
            }
        }

    @staticmethod
    def get_appointment_by_id(
            db: Session,
            appointment_id,
            policy: Optional[SchedulingPolicy] = None
    ) -> Optional[Dict[str, Any]]:
        """Get a single appointment by ID. Returns None if not found."""
        appointment_uuid = parse_uuid(appointment_id)
        if not appointment_uuid:
            return None

        appointment = db.get(Appointment, appointment_uuid)
        if not appointment:
            return None

        return serialize_appointment(appointment, policy or SchedulingPolicy.from_settings())

    @staticmethod
    def get_day_agenda(
            db: Session,
            day: date,
            policy: Optional[SchedulingPolicy] = None
    ) -> Dict[str, Any]:
        """All appointments of one business-local day, including terminal ones."""
        policy = policy or SchedulingPolicy.from_settings()
        start, end = day_bounds(day, policy.tz)

        appointments = db.query(Appointment).options(joinedload(Appointment.service)).filter(
            Appointment.date >= start,
            Appointment.date < end
        ).order_by(Appointment.date.asc()).all()

        return {
            "date": day.isoformat(),
            "total_appointments": len(appointments),
            "appointments": [serialize_appointment(appt, policy) for appt in appointments]
        }

    @staticmethod
    def get_appointment_stats(
            db: Session,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
            policy: Optional[SchedulingPolicy] = None
    ) -> Dict[str, Any]:
        """Counts by status and service, and income from completed appointments."""
        policy = policy or SchedulingPolicy.from_settings()
        query = db.query(Appointment).options(joinedload(Appointment.service))

        if start_date:
            query = query.filter(Appointment.date >= day_bounds(start_date, policy.tz)[0])
        if end_date:
            query = query.filter(Appointment.date < day_bounds(end_date, policy.tz)[1])

        appointments = query.all()

        by_status = {status.value: 0 for status in AppointmentStatus}
        by_service = {}
        completed_income = 0.0

        for appt in appointments:
            by_status[appt.status] = by_status.get(appt.status, 0) + 1

            service_name = appt.service.name if appt.service else "unknown"
            by_service[service_name] = by_service.get(service_name, 0) + 1

            if appt.status == AppointmentStatus.COMPLETED.value and appt.service and appt.service.price:
                completed_income += float(appt.service.price)

        return {
            "period": {
                "start": start_date.isoformat() if start_date else None,
                "end": end_date.isoformat() if end_date else None
            },
            "total_appointments": len(appointments),
            "by_status": by_status,
            "by_service": by_service,
            "completed_income": round(completed_income, 2)
        }


def serialize_appointment(appointment: Appointment, policy: SchedulingPolicy) -> Dict[str, Any]:
    """Convert Appointment model to dictionary, with local date/time for display."""
    start = ensure_utc(appointment.date)
    service = appointment.service
    duration = policy.duration_for(service)
    end = start + timedelta(minutes=duration)

    return {
        "id": str(appointment.id),
        "client_name": appointment.client_name,
        "client_phone": appointment.client_phone,
        "client_email": appointment.client_email,
        "service_id": str(appointment.service_id),
        "service_name": service.name if service else None,
        "duration_minutes": duration,
        "date": start.isoformat(),
        "local_date": format_local(start, "%Y-%m-%d", tz=policy.tz),
        "local_time": format_local(start, "%H:%M", tz=policy.tz),
        "end": end.isoformat(),
        "status": appointment.status,
        "allowed_next_statuses": [s.value for s in allowed_next_statuses(appointment.status)],
        "notes": appointment.notes,
        "created_at": appointment.created_at.isoformat() if appointment.created_at else None,
        "updated_at": appointment.updated_at.isoformat() if appointment.updated_at else None
    }
