# app/services/scheduling/duration.py
"""Service duration parsing and formatting ("H:MM" and decimal hours <-> minutes)"""
import math
from typing import Union


def format_duration(minutes: int) -> str:
    """150 -> "2:30", 60 -> "1:00", 45 -> "0:45" """
    if minutes < 0:
        raise ValueError("Duration cannot be negative")
    hours, mins = divmod(int(minutes), 60)
    return f"{hours}:{mins:02d}"


def parse_duration(duration: Union[str, int]) -> int:
    """
    Convert a duration to minutes.

    Accepts "H:MM" / "HH:MM" ("2:30" -> 150) or decimal hours
    ("1.5" -> 90, "2" -> 120). Integers are taken as minutes already.

    Raises:
        ValueError: if the value is not a valid duration
    """
    if isinstance(duration, bool):
        raise ValueError(f"Invalid duration: {duration!r}")
    if isinstance(duration, int):
        if duration <= 0:
            raise ValueError(f"Invalid duration: {duration!r}")
        return duration

    if not is_valid_duration(duration):
        raise ValueError(f"Invalid duration: {duration!r}")

    value = duration.strip()
    if ":" in value:
        hours, minutes = value.split(":")
        return int(hours) * 60 + int(minutes)

    decimal = float(value)
    hours = int(decimal)
    return hours * 60 + round((decimal - hours) * 60)


def is_valid_duration(duration: str) -> bool:
    """True for "H:MM" with 0 <= MM < 60, or decimal hours of at least one minute"""
    if not isinstance(duration, str):
        return False
    value = duration.strip()

    if ":" in value:
        parts = value.split(":")
        if len(parts) != 2:
            return False
        hours, minutes = parts
        if not (hours.isdigit() and minutes.isdigit()):
            return False
        return 0 <= int(minutes) < 60 and int(hours) * 60 + int(minutes) > 0

    try:
        decimal = float(value)
    except ValueError:
        return False
    # Must come to at least one whole minute
    return math.isfinite(decimal) and round(decimal * 60) >= 1
