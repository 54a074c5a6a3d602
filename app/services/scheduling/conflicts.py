# app/services/scheduling/conflicts.py
"""
Overlap detection shared by booking creation, rescheduling and slot listing.

Intervals are half-open: [start, end). Two intervals overlap iff
a.start < b.end and b.start < a.end, so back-to-back bookings are allowed.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, Mapping, Optional, Tuple

from app.schemas.appointment import AppointmentStatus
from app.services.scheduling.business_time import ensure_utc

# Only these statuses occupy the chair
BLOCKING_STATUSES = frozenset({AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED})


def intervals_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and b_start < a_end


@dataclass(frozen=True)
class TimeInterval:
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end <= self.start:
            raise ValueError("Interval end must be after its start")

    def overlaps(self, other: "TimeInterval") -> bool:
        return intervals_overlap(self.start, self.end, other.start, other.end)


@dataclass(frozen=True)
class BookedInterval:
    """An existing appointment reduced to what conflict checks need"""
    start: datetime
    duration_minutes: int
    status: AppointmentStatus
    appointment_id: Optional[str] = None
    client_name: Optional[str] = None
    service_name: Optional[str] = None

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration_minutes)

    @property
    def blocks(self) -> bool:
        return self.status in BLOCKING_STATUSES

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return intervals_overlap(start, end, self.start, self.end)

    @classmethod
    def from_appointment(cls, appointment, default_duration: int = 60) -> "BookedInterval":
        """Build from an Appointment row (or anything shaped like one)"""
        service = getattr(appointment, "service", None)
        duration = getattr(service, "duration", None)
        if not duration or duration <= 0:
            duration = default_duration
        appointment_id = getattr(appointment, "id", None)

        return cls(
            start=ensure_utc(appointment.date),
            duration_minutes=duration,
            status=AppointmentStatus(appointment.status),
            appointment_id=str(appointment_id) if appointment_id is not None else None,
            client_name=getattr(appointment, "client_name", None),
            service_name=getattr(service, "name", None),
        )


def _bounds(item: Any) -> Tuple[datetime, datetime]:
    if isinstance(item, Mapping):
        return item["start"], item["end"]
    if isinstance(item, tuple):
        return item[0], item[1]
    return item.start, item.end


def has_conflict(proposed_start: datetime, proposed_end: datetime, existing: Iterable[Any]) -> bool:
    """
    True if [proposed_start, proposed_end) overlaps any existing interval.

    `existing` holds objects with start/end attributes, {"start", "end"}
    mappings or (start, end) tuples. Callers pre-filter it: the appointment
    being rescheduled and terminal-status bookings must not be in it.
    """
    return any(
        intervals_overlap(proposed_start, proposed_end, *_bounds(item))
        for item in existing
    )


def find_conflict(
        proposed_start: datetime,
        proposed_end: datetime,
        bookings: Iterable[BookedInterval],
        exclude_id: Optional[str] = None,
) -> Optional[BookedInterval]:
    """Earliest blocking booking overlapping the proposed window, if any"""
    exclude_id = str(exclude_id) if exclude_id is not None else None
    candidates = sorted(
        (
            b for b in bookings
            if b.blocks and (exclude_id is None or b.appointment_id != exclude_id)
        ),
        key=lambda b: (b.start, b.appointment_id or ""),
    )

    for booking in candidates:
        if booking.overlaps(proposed_start, proposed_end):
            return booking
    return None
