"""Half-open interval overlap and conflict lookup."""

from datetime import timedelta

import pytest

from app.schemas.appointment import AppointmentStatus
from app.services.scheduling.conflicts import (
    BookedInterval,
    TimeInterval,
    find_conflict,
    has_conflict,
    intervals_overlap,
)
from conftest import DAY, booked, local


def test_back_to_back_intervals_do_not_overlap():
    ten, eleven, noon = local(DAY, "10:00"), local(DAY, "11:00"), local(DAY, "12:00")
    assert not intervals_overlap(ten, eleven, eleven, noon)
    assert not intervals_overlap(eleven, noon, ten, eleven)


def test_partial_and_nested_overlaps():
    ten, eleven = local(DAY, "10:00"), local(DAY, "11:00")
    assert intervals_overlap(ten, eleven, local(DAY, "10:30"), local(DAY, "11:30"))
    assert intervals_overlap(ten, eleven, local(DAY, "10:15"), local(DAY, "10:45"))
    assert intervals_overlap(local(DAY, "09:00"), local(DAY, "12:00"), ten, eleven)


def test_has_conflict_accepts_objects_mappings_and_tuples():
    ten, eleven = local(DAY, "10:00"), local(DAY, "11:00")
    existing = [
        TimeInterval(ten, eleven),
        {"start": local(DAY, "14:00"), "end": local(DAY, "15:00")},
        (local(DAY, "17:00"), local(DAY, "18:00")),
    ]
    assert has_conflict(local(DAY, "10:30"), local(DAY, "11:30"), existing)
    assert has_conflict(local(DAY, "14:30"), local(DAY, "14:45"), existing)
    assert has_conflict(local(DAY, "16:30"), local(DAY, "17:30"), existing)
    assert not has_conflict(eleven, local(DAY, "14:00"), existing)
    assert not has_conflict(ten, eleven, [])


def test_time_interval_requires_positive_length():
    ten = local(DAY, "10:00")
    with pytest.raises(ValueError):
        TimeInterval(ten, ten)


def test_booked_interval_end_uses_duration():
    booking = booked("10:00", duration=150)
    assert booking.end - booking.start == timedelta(minutes=150)


def test_only_pending_and_confirmed_block():
    assert booked("10:00", status=AppointmentStatus.PENDING).blocks
    assert booked("10:00", status=AppointmentStatus.CONFIRMED).blocks
    assert not booked("10:00", status=AppointmentStatus.CANCELLED).blocks
    assert not booked("10:00", status=AppointmentStatus.COMPLETED).blocks


def test_find_conflict_ignores_non_blocking_bookings():
    bookings = [booked("10:00", status=AppointmentStatus.CANCELLED)]
    assert find_conflict(local(DAY, "10:00"), local(DAY, "11:00"), bookings) is None


def test_find_conflict_returns_earliest_overlap():
    bookings = [
        booked("11:00", appointment_id="b", client_name="Berta"),
        booked("10:00", appointment_id="a", client_name="Ana"),
    ]
    conflict = find_conflict(local(DAY, "10:30"), local(DAY, "11:30"), bookings)
    assert conflict.appointment_id == "a"


def test_find_conflict_excludes_the_given_appointment():
    bookings = [booked("10:00", appointment_id="a")]
    assert find_conflict(local(DAY, "10:30"), local(DAY, "11:30"), bookings, exclude_id="a") is None
    assert find_conflict(local(DAY, "10:30"), local(DAY, "11:30"), bookings, exclude_id="z") is not None


def test_from_appointment_uses_service_duration():
    class _Service:
        duration = 90
        name = "Pedicure spa"

    class _Appointment:
        id = "abc"
        date = local(DAY, "10:00").replace(tzinfo=None)
        status = "PENDING"
        client_name = "Ana"
        service = _Service()

    booking = BookedInterval.from_appointment(_Appointment())
    assert booking.start == local(DAY, "10:00")
    assert booking.duration_minutes == 90
    assert booking.status == AppointmentStatus.PENDING
    assert booking.service_name == "Pedicure spa"


def test_from_appointment_falls_back_to_default_duration():
    class _Appointment:
        id = None
        date = local(DAY, "10:00")
        status = "CONFIRMED"
        service = None

    booking = BookedInterval.from_appointment(_Appointment(), default_duration=45)
    assert booking.duration_minutes == 45
    assert booking.appointment_id is None
