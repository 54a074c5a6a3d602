# app/services/scheduling/__init__.py
from .business_time import (
    BUSINESS_TZ,
    day_bounds,
    ensure_utc,
    format_local,
    local_day,
    parse_local_datetime,
    to_business_time,
)
from .conflicts import (
    BLOCKING_STATUSES,
    BookedInterval,
    TimeInterval,
    find_conflict,
    has_conflict,
    intervals_overlap,
)
from .duration import format_duration, is_valid_duration, parse_duration
from .errors import (
    ConflictError,
    DayNotEnabledError,
    InvalidTransitionError,
    OutsideWorkingHoursError,
    SchedulingError,
    TerminalStateError,
    ValidationResult,
)
from .policy import SchedulingPolicy
from .slot_generator import Slot, SlotGenerator, SlotGrid, enabled_day_set
from .state_machine import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    AppointmentStateMachine,
    allowed_next_statuses,
    is_terminal,
)

__all__ = [
    "BUSINESS_TZ",
    "day_bounds",
    "ensure_utc",
    "format_local",
    "local_day",
    "parse_local_datetime",
    "to_business_time",
    "BLOCKING_STATUSES",
    "BookedInterval",
    "TimeInterval",
    "find_conflict",
    "has_conflict",
    "intervals_overlap",
    "format_duration",
    "is_valid_duration",
    "parse_duration",
    "ConflictError",
    "DayNotEnabledError",
    "InvalidTransitionError",
    "OutsideWorkingHoursError",
    "SchedulingError",
    "TerminalStateError",
    "ValidationResult",
    "SchedulingPolicy",
    "Slot",
    "SlotGenerator",
    "SlotGrid",
    "enabled_day_set",
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
    "AppointmentStateMachine",
    "allowed_next_statuses",
    "is_terminal",
]
