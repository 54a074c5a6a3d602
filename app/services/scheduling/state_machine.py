# app/services/scheduling/state_machine.py
"""
Appointment lifecycle rules.

    PENDING --> CONFIRMED --> COMPLETED
       |            |
       +------------+-----> CANCELLED

COMPLETED and CANCELLED are terminal. ALLOWED_TRANSITIONS is the only place
the table lives; the API exposes it per appointment as allowed_next_statuses.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from app.schemas.appointment import AppointmentStatus
from app.services.scheduling.business_time import ensure_utc
from app.services.scheduling.conflicts import BookedInterval, find_conflict
from app.services.scheduling.errors import (
    ConflictError,
    DayNotEnabledError,
    InvalidTransitionError,
    OutsideWorkingHoursError,
    TerminalStateError,
    ValidationResult,
)
from app.services.scheduling.policy import SchedulingPolicy
from app.services.scheduling.slot_generator import enabled_day_set

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.CONFIRMED: frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)

INITIAL_STATUS = AppointmentStatus.PENDING


def allowed_next_statuses(current) -> List[AppointmentStatus]:
    """Statuses reachable in one step, in lifecycle order"""
    targets = ALLOWED_TRANSITIONS[AppointmentStatus(current)]
    return [status for status in AppointmentStatus if status in targets]


def is_terminal(status) -> bool:
    return AppointmentStatus(status) in TERMINAL_STATUSES


class AppointmentStateMachine:
    """Validates status transitions and create/reschedule requests"""

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        self.policy = policy or SchedulingPolicy()

    def validate_transition(self, current_status, requested_status) -> ValidationResult:
        """
        Check a status change.

        A terminal appointment rejects every request, including one to its
        own status. Otherwise requesting the current status is a no-op that
        succeeds, since other fields (notes) may still change.
        """
        try:
            current = AppointmentStatus(current_status)
            requested = AppointmentStatus(requested_status)
        except ValueError:
            return ValidationResult.failure(
                InvalidTransitionError(current_status, requested_status)
            )

        if current in TERMINAL_STATUSES:
            return ValidationResult.failure(TerminalStateError(current))

        if requested == current:
            return ValidationResult.success()

        if requested not in ALLOWED_TRANSITIONS[current]:
            return ValidationResult.failure(InvalidTransitionError(current, requested))

        return ValidationResult.success()

    def validate_mutation(self, current_status) -> ValidationResult:
        """Any edit (date, notes) of a terminal appointment is rejected"""
        current = AppointmentStatus(current_status)
        if current in TERMINAL_STATUSES:
            return ValidationResult.failure(TerminalStateError(current))
        return ValidationResult.success()

    def validate_create(
            self,
            proposed_date: datetime,
            service_duration: int,
            enabled_days: Iterable[Any],
            existing_appointments: Iterable[BookedInterval],
    ) -> ValidationResult:
        return self._validate_window(
            None, proposed_date, service_duration, enabled_days, existing_appointments
        )

    def validate_reschedule(
            self,
            appointment_id,
            new_date: datetime,
            service_duration: int,
            enabled_days: Iterable[Any],
            existing_appointments: Iterable[BookedInterval],
    ) -> ValidationResult:
        """Like validate_create, but the appointment never conflicts with itself"""
        return self._validate_window(
            appointment_id, new_date, service_duration, enabled_days, existing_appointments
        )

    def _validate_window(
            self,
            appointment_id,
            start: datetime,
            service_duration: int,
            enabled_days: Iterable[Any],
            existing_appointments: Iterable[BookedInterval],
    ) -> ValidationResult:
        if service_duration is None:
            service_duration = self.policy.default_duration_minutes
        start = ensure_utc(start)
        end = start + timedelta(minutes=service_duration)
        day = self.policy.local_day(start)

        if day not in enabled_day_set(enabled_days, self.policy):
            logger.info(f"Rejected {start.isoformat()}: day {day} not enabled")
            return ValidationResult.failure(DayNotEnabledError(day))

        if self.policy.enforce_working_hours and not self.policy.within_working_hours(start, end):
            logger.info(f"Rejected {start.isoformat()}: outside working hours")
            return ValidationResult.failure(
                OutsideWorkingHoursError(start, end, self.policy.working_hours_label)
            )

        conflict = find_conflict(start, end, existing_appointments, exclude_id=appointment_id)
        if conflict:
            logger.info(
                f"Rejected {start.isoformat()}: overlaps appointment {conflict.appointment_id} "
                f"({conflict.status.value})"
            )
            return ValidationResult.failure(
                ConflictError(
                    conflict.status,
                    client_name=conflict.client_name,
                    appointment_id=conflict.appointment_id,
                    start=conflict.start,
                    service_name=conflict.service_name,
                )
            )

        return ValidationResult.success()
