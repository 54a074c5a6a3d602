# ============================================================================
# app/services/appointment/appointment_service.py
# ============================================================================
"""
Service for booking and updating appointments.

Every write is validated by AppointmentStateMachine before it reaches the
database. Methods return (appointment, error): error is a SchedulingError
describing an expected rejection, and the HTTP layer renders it.

The conflict check is read-then-write. Two concurrent bookings for the same
window can both pass validation; callers that need a hard guarantee must
serialize writes per day.
"""
import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from app.models.appointment import Appointment
from app.models.service import Service
from app.schemas.appointment import AppointmentCreate, AppointmentStatus, AppointmentUpdate
from app.services.availability.availability_service import AvailabilityService, parse_uuid
from app.services.scheduling import (
    AppointmentStateMachine,
    SchedulingError,
    SchedulingPolicy,
    parse_local_datetime,
)

logger = logging.getLogger(__name__)

Outcome = Tuple[Optional[Appointment], Optional[SchedulingError]]


class ResourceNotFoundError(SchedulingError):
    code = "not_found"
    status_code = 404

    def __init__(self, resource: str, resource_id):
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.resource_id = str(resource_id)

    def context(self):
        return {"resource": self.resource, "id": self.resource_id}


class AppointmentService:
    """Handles appointment operations"""

    @staticmethod
    def get_appointment(db: Session, appointment_id) -> Optional[Appointment]:
        appointment_uuid = parse_uuid(appointment_id)
        if not appointment_uuid:
            return None
        return db.get(Appointment, appointment_uuid)

    @staticmethod
    def create_appointment(
            db: Session,
            data: AppointmentCreate,
            policy: Optional[SchedulingPolicy] = None
    ) -> Outcome:
        """Book a new appointment in PENDING status"""
        policy = policy or SchedulingPolicy.from_settings()

        service_uuid = parse_uuid(data.service_id)
        service = db.get(Service, service_uuid) if service_uuid else None
        if not service:
            return None, ResourceNotFoundError("Service", data.service_id)

        start = parse_local_datetime(data.date, policy.tz)
        day = policy.local_day(start)

        result = AppointmentStateMachine(policy).validate_create(
            start,
            policy.duration_for(service),
            AvailabilityService.get_enabled_days(db, day, day),
            AvailabilityService.get_bookings_for_day(db, day, policy),
        )
        if not result:
            return None, result.error

        appointment = Appointment(
            client_name=data.client_name,
            client_phone=data.client_phone,
            client_email=data.client_email,
            service_id=service.id,
            date=start,
            notes=data.notes,
            status=AppointmentStatus.PENDING.value,
        )

        try:
            db.add(appointment)
            db.commit()
            db.refresh(appointment)
        except Exception as e:
            logger.error(f"Error creating appointment: {e}", exc_info=True)
            db.rollback()
            raise

        logger.info(f"Created appointment {appointment.id} for {start.isoformat()} ({service.name})")
        return appointment, None

    @staticmethod
    def update_appointment(
            db: Session,
            appointment_id,
            update: AppointmentUpdate,
            policy: Optional[SchedulingPolicy] = None
    ) -> Outcome:
        """Apply a status transition, a reschedule and/or a notes edit"""
        policy = policy or SchedulingPolicy.from_settings()
        machine = AppointmentStateMachine(policy)

        appointment = AppointmentService.get_appointment(db, appointment_id)
        if not appointment:
            return None, ResourceNotFoundError("Appointment", appointment_id)

        changes = update.model_fields_set
        if not changes:
            return appointment, None

        current_status = AppointmentStatus(appointment.status)

        if update.status is not None:
            result = machine.validate_transition(current_status, update.status)
        else:
            result = machine.validate_mutation(current_status)
        if not result:
            return None, result.error

        new_start = None
        if update.date is not None:
            new_start = parse_local_datetime(update.date, policy.tz)
            day = policy.local_day(new_start)
            duration = policy.duration_for(appointment.service)

            result = machine.validate_reschedule(
                str(appointment.id),
                new_start,
                duration,
                AvailabilityService.get_enabled_days(db, day, day),
                AvailabilityService.get_bookings_for_day(db, day, policy),
            )
            if not result:
                return None, result.error

        try:
            if update.status is not None:
                appointment.status = update.status.value
            if new_start is not None:
                appointment.date = new_start
            if "notes" in changes:
                appointment.notes = update.notes
            db.commit()
            db.refresh(appointment)
        except Exception as e:
            logger.error(f"Error updating appointment {appointment_id}: {e}", exc_info=True)
            db.rollback()
            raise

        if update.status is not None and update.status != current_status:
            # Client notification (email) is delivered by the notification collaborator
            logger.info(
                f"Appointment {appointment.id}: {current_status.value} -> {update.status.value}"
            )
        if new_start is not None:
            logger.info(f"Appointment {appointment.id} rescheduled to {new_start.isoformat()}")

        return appointment, None

    @staticmethod
    def delete_appointment(db: Session, appointment_id) -> bool:
        appointment = AppointmentService.get_appointment(db, appointment_id)
        if not appointment:
            return False

        db.delete(appointment)
        db.commit()
        logger.info(f"Deleted appointment {appointment_id}")
        return True
