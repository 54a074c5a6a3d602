# app/services/scheduling/slot_generator.py
"""
Slot grid generation.

For every day in a range, candidate starts are laid on a fixed grid from
opening time up to (but excluding) closing time. Each candidate spans the
service duration and is marked available or carries the reason it is not.
Pure computation: the caller supplies bookings and enabled days.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Set, Union

from app.services.scheduling.business_time import format_local, iter_days
from app.services.scheduling.conflicts import BookedInterval, find_conflict
from app.services.scheduling.errors import status_label
from app.services.scheduling.policy import SchedulingPolicy

logger = logging.getLogger(__name__)

REASON_DAY_NOT_ENABLED = "day not enabled"


def outside_hours_reason(policy: SchedulingPolicy) -> str:
    return f"outside working hours ({policy.working_hours_label})"


def conflict_reason(booking: BookedInterval) -> str:
    reason = f"schedule conflict with a {status_label(booking.status)} appointment"
    if booking.service_name:
        reason += f" ({booking.service_name})"
    return reason


def enabled_day_set(records: Iterable[Any], policy: Optional[SchedulingPolicy] = None) -> Set[date]:
    """
    Normalize the enabled-day allow-list.

    Accepts calendar days, instants (mapped to their local day) or
    availability records with `date` / `is_available` attributes; records
    with is_available=False are dropped.
    """
    policy = policy or SchedulingPolicy()
    days = set()
    for record in records:
        if isinstance(record, (date, datetime)):
            days.add(policy.local_day(record))
            continue
        if not getattr(record, "is_available", True):
            continue
        days.add(policy.local_day(record.date))
    return days


@dataclass(frozen=True)
class Slot:
    start: datetime
    end: datetime
    available: bool
    conflict_reason: Optional[str] = None

    def to_dict(self, policy: SchedulingPolicy) -> Dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "date": format_local(self.start, "%Y-%m-%d", tz=policy.tz),
            "time": format_local(self.start, "%H:%M", tz=policy.tz),
            "available": self.available,
            "conflict_reason": self.conflict_reason,
        }


@dataclass
class SlotGrid:
    slots: List[Slot] = field(default_factory=list)
    service_duration: int = 60

    @property
    def total_slots(self) -> int:
        return len(self.slots)

    @property
    def available_slots(self) -> int:
        return sum(1 for slot in self.slots if slot.available)

    @property
    def booked_slots(self) -> int:
        return self.total_slots - self.available_slots

    def to_dict(self, policy: SchedulingPolicy) -> Dict[str, Any]:
        return {
            "slots": [slot.to_dict(policy) for slot in self.slots],
            "total_slots": self.total_slots,
            "available_slots": self.available_slots,
            "booked_slots": self.booked_slots,
            "service_duration": self.service_duration,
        }


class SlotGenerator:
    """Builds the bookable slot grid for a date range"""

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        self.policy = policy or SchedulingPolicy()

    def generate_slots(
            self,
            start_date: Union[date, datetime],
            end_date: Union[date, datetime],
            service_duration: Optional[int] = None,
            existing_appointments: Iterable[BookedInterval] = (),
            enabled_days: Iterable[Any] = (),
            include_disabled_days: bool = False,
    ) -> SlotGrid:
        """
        Generate slots for every day in [start_date, end_date].

        Days outside the enabled set are skipped unless include_disabled_days
        is set, in which case their slots are listed as unavailable with
        "day not enabled".
        """
        duration = self._resolve_duration(service_duration)
        first, last = self.policy.local_day(start_date), self.policy.local_day(end_date)
        enabled = enabled_day_set(enabled_days, self.policy)
        bookings = [b for b in existing_appointments if b.blocks]

        grid = SlotGrid(service_duration=duration)
        for day in iter_days(first, last):
            if day not in enabled and not include_disabled_days:
                continue
            grid.slots.extend(self.generate_day_slots(day, duration, bookings, day in enabled))

        logger.debug(
            f"Generated {grid.total_slots} slots ({grid.available_slots} available) "
            f"for {first} - {last}, duration {duration}m"
        )
        return grid

    def generate_day_slots(
            self,
            day: date,
            duration: int,
            bookings: List[BookedInterval],
            day_enabled: bool = True,
    ) -> List[Slot]:
        """Grid for a single local day: opening <= start < closing"""
        slots = []
        current = self.policy.opening(day)
        closing = self.policy.closing(day)

        while current < closing:
            slots.append(self.evaluate_slot(current, duration, bookings, day_enabled))
            current += self.policy.slot_interval

        return slots

    def evaluate_slot(
            self,
            start: datetime,
            duration: int,
            bookings: Iterable[BookedInterval],
            day_enabled: bool = True,
    ) -> Slot:
        """
        Decide a single candidate window.

        Precedence when several reasons apply: day not enabled, then outside
        working hours, then schedule conflict.
        """
        end = start + timedelta(minutes=duration)

        if not day_enabled:
            return Slot(start, end, False, REASON_DAY_NOT_ENABLED)

        if not self.policy.within_working_hours(start, end):
            return Slot(start, end, False, outside_hours_reason(self.policy))

        conflict = find_conflict(start, end, bookings)
        if conflict:
            return Slot(start, end, False, conflict_reason(conflict))

        return Slot(start, end, True)

    def _resolve_duration(self, service_duration: Optional[int]) -> int:
        if service_duration is None:
            return self.policy.default_duration_minutes
        if service_duration <= 0:
            raise ValueError("Service duration must be a positive number of minutes")
        return int(service_duration)
