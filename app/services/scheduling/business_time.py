# app/services/scheduling/business_time.py
"""
Business local time helpers.

The salon runs on a fixed UTC offset (Ecuador, GMT-5, no DST). Every
day-boundary and working-window computation goes through this module so the
executing process's local timezone never leaks into scheduling decisions.

Conventions:
- Instants are stored and compared as timezone-aware UTC datetimes.
- A naive datetime coming from storage is UTC (`ensure_utc`).
- A naive datetime coming from a client is local wall-clock time
  (`parse_local_datetime`).
"""
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Iterator, Tuple, Union

DEFAULT_UTC_OFFSET_HOURS = -5


def fixed_offset(hours: int) -> timezone:
    """Build a named fixed-offset tzinfo, e.g. GMT-5"""
    return timezone(timedelta(hours=hours), name=f"GMT{hours:+d}")


BUSINESS_TZ = fixed_offset(DEFAULT_UTC_OFFSET_HOURS)


def ensure_utc(value: datetime) -> datetime:
    """Normalize an instant read from storage to aware UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_business_time(value: datetime, tz: tzinfo = BUSINESS_TZ) -> datetime:
    return ensure_utc(value).astimezone(tz)


def local_day(value: Union[date, datetime], tz: tzinfo = BUSINESS_TZ) -> date:
    """Calendar day an instant falls on in business local time"""
    if isinstance(value, datetime):
        return to_business_time(value, tz).date()
    return value


def local_datetime(day: date, hour: int, minute: int = 0, tz: tzinfo = BUSINESS_TZ) -> datetime:
    """
    UTC instant of a local wall-clock time on `day`.

    `hour` may be 24 (midnight at the end of the day).
    """
    midnight = datetime.combine(day, time(0, 0), tzinfo=tz)
    return (midnight + timedelta(hours=hour, minutes=minute)).astimezone(timezone.utc)


def day_bounds(day: date, tz: tzinfo = BUSINESS_TZ) -> Tuple[datetime, datetime]:
    """[start, end) of a local calendar day as UTC instants"""
    return local_datetime(day, 0, tz=tz), local_datetime(day, 24, tz=tz)


def parse_local_datetime(value: Union[str, datetime], tz: tzinfo = BUSINESS_TZ) -> datetime:
    """
    Convert booking input into a UTC instant.

    Strings are ISO-8601 ("2025-08-14T10:30:00"). Values without an offset
    are local wall-clock time; values with one ("Z", "-05:00") are honored.

    Raises:
        ValueError: if the string is not ISO-8601
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))

    if value.tzinfo is None:
        value = value.replace(tzinfo=tz)
    return value.astimezone(timezone.utc)


def format_local(value: datetime, fmt: str = "%H:%M", tz: tzinfo = BUSINESS_TZ) -> str:
    """Render an instant for display in business local time"""
    return to_business_time(value, tz).strftime(fmt)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day in [start, end]"""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
