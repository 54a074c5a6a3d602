# app/services/scheduling/errors.py
"""
Typed scheduling outcomes.

These are expected, user-facing rejections. Validators return them inside a
ValidationResult instead of raising, so the booking UI and the dashboard can
render one message per kind.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

STATUS_LABELS = {
    "PENDING": "pending",
    "CONFIRMED": "confirmed",
    "COMPLETED": "completed",
    "CANCELLED": "cancelled",
}


def status_label(status) -> str:
    value = getattr(status, "value", status)
    return STATUS_LABELS.get(value, str(value).lower())


class SchedulingError(Exception):
    code = "scheduling_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def context(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "context": self.context()}


class DayNotEnabledError(SchedulingError):
    code = "day_not_enabled"

    def __init__(self, day: date):
        super().__init__(
            f"{day.isoformat()} is not enabled for appointments. Please choose another day."
        )
        self.day = day

    def context(self):
        return {"date": self.day.isoformat()}


class ConflictError(SchedulingError):
    code = "schedule_conflict"
    status_code = 409

    def __init__(
            self,
            status,
            client_name: Optional[str] = None,
            appointment_id: Optional[str] = None,
            start: Optional[datetime] = None,
            service_name: Optional[str] = None,
    ):
        super().__init__(
            f"Schedule conflict: there is already a {status_label(status)} appointment "
            f"overlapping this time"
        )
        self.status = getattr(status, "value", status)
        self.client_name = client_name
        self.appointment_id = appointment_id
        self.start = start
        self.service_name = service_name

    def context(self):
        return {
            "conflicting_status": self.status,
            "conflicting_client": self.client_name,
            "conflicting_appointment_id": self.appointment_id,
            "conflicting_start": self.start.isoformat() if self.start else None,
            "conflicting_service": self.service_name,
        }


class OutsideWorkingHoursError(SchedulingError):
    code = "outside_working_hours"

    def __init__(self, start: datetime, end: datetime, working_hours: str):
        super().__init__(f"The appointment must fit within working hours ({working_hours})")
        self.start = start
        self.end = end
        self.working_hours = working_hours

    def context(self):
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "working_hours": self.working_hours,
        }


class TerminalStateError(SchedulingError):
    code = "terminal_state"

    def __init__(self, current):
        super().__init__(f"A {status_label(current)} appointment cannot be modified")
        self.current = getattr(current, "value", current)

    def context(self):
        return {"current_status": self.current}


class InvalidTransitionError(SchedulingError):
    code = "invalid_transition"

    def __init__(self, current, requested):
        self.current = getattr(current, "value", current)
        self.requested = getattr(requested, "value", requested)
        super().__init__(f"Cannot change status from {self.current} to {self.requested}")

    def context(self):
        return {"current_status": self.current, "requested_status": self.requested}


@dataclass(frozen=True)
class ValidationResult:
    """Success, or exactly one typed SchedulingError"""
    error: Optional[SchedulingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def failure(cls, error: SchedulingError) -> "ValidationResult":
        return cls(error=error)
