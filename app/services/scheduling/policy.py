# app/services/scheduling/policy.py
"""Business scheduling policy (working window, grid granularity, offset)"""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

from app.services.scheduling.business_time import (
    DEFAULT_UTC_OFFSET_HOURS,
    fixed_offset,
    local_datetime,
    local_day,
)


@dataclass(frozen=True)
class SchedulingPolicy:
    """Policy constants of the salon; defaults are the production values"""
    utc_offset_hours: int = DEFAULT_UTC_OFFSET_HOURS
    workday_start_hour: int = 6
    workday_end_hour: int = 23
    slot_interval_minutes: int = 30
    default_duration_minutes: int = 60
    enforce_working_hours: bool = True
    tz: timezone = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not 0 <= self.workday_start_hour < self.workday_end_hour <= 24:
            raise ValueError("Working window must satisfy 0 <= start < end <= 24")
        if self.slot_interval_minutes <= 0:
            raise ValueError("Slot interval must be positive")
        if self.default_duration_minutes <= 0:
            raise ValueError("Default duration must be positive")
        object.__setattr__(self, "tz", fixed_offset(self.utc_offset_hours))

    @classmethod
    def from_settings(cls, settings=None) -> "SchedulingPolicy":
        if settings is None:
            from app.config.settings import get_settings
            settings = get_settings()

        return cls(
            utc_offset_hours=settings.BUSINESS_UTC_OFFSET_HOURS,
            workday_start_hour=settings.WORKDAY_START_HOUR,
            workday_end_hour=settings.WORKDAY_END_HOUR,
            slot_interval_minutes=settings.SLOT_INTERVAL_MINUTES,
            default_duration_minutes=settings.DEFAULT_SERVICE_DURATION_MINUTES,
            enforce_working_hours=settings.ENFORCE_WORKING_HOURS_ON_BOOKING,
        )

    @property
    def slot_interval(self) -> timedelta:
        return timedelta(minutes=self.slot_interval_minutes)

    @property
    def working_hours_label(self) -> str:
        return f"{self.workday_start_hour:02d}:00-{self.workday_end_hour:02d}:00"

    def opening(self, day: date) -> datetime:
        return local_datetime(day, self.workday_start_hour, tz=self.tz)

    def closing(self, day: date) -> datetime:
        return local_datetime(day, self.workday_end_hour, tz=self.tz)

    def duration_for(self, service) -> int:
        """Duration of a service in minutes; missing or non-positive falls back to the default"""
        duration = getattr(service, "duration", None)
        if not duration or duration <= 0:
            return self.default_duration_minutes
        return duration

    def local_day(self, value) -> date:
        return local_day(value, self.tz)

    def within_working_hours(self, start: datetime, end: datetime) -> bool:
        """Start no earlier than opening and end no later than closing of the start's local day"""
        day = self.local_day(start)
        return self.opening(day) <= start and end <= self.closing(day)
