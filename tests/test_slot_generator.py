"""Slot grid over the 06:00-23:00 working window."""

from datetime import date, timedelta

import pytest

from app.schemas.appointment import AppointmentStatus
from app.services.scheduling import SchedulingPolicy, SlotGenerator, intervals_overlap
from app.services.scheduling.slot_generator import REASON_DAY_NOT_ENABLED, enabled_day_set
from conftest import DAY, booked, local


@pytest.fixture
def generator(policy):
    return SlotGenerator(policy)


def test_empty_enabled_day_has_thirty_four_slots(generator):
    grid = generator.generate_slots(DAY, DAY, 60, [], [DAY])

    assert grid.total_slots == 34
    assert grid.slots[0].start == local(DAY, "06:00")
    assert grid.slots[-1].start == local(DAY, "22:30")
    assert all(b.start - a.start == timedelta(minutes=30) for a, b in zip(grid.slots, grid.slots[1:]))


def test_last_slot_overruns_closing_for_one_hour_service(generator):
    grid = generator.generate_slots(DAY, DAY, 60, [], [DAY])

    assert grid.available_slots == 33
    assert grid.booked_slots == 1
    last = grid.slots[-1]
    assert not last.available
    assert last.conflict_reason == "outside working hours (06:00-23:00)"


def test_half_hour_service_fills_every_slot(generator):
    grid = generator.generate_slots(DAY, DAY, 30, [], [DAY])
    assert grid.available_slots == 34


def test_slot_spans_service_duration(generator):
    grid = generator.generate_slots(DAY, DAY, 150, [], [DAY])
    assert all(slot.end - slot.start == timedelta(minutes=150) for slot in grid.slots)


def test_conflict_with_confirmed_appointment(generator):
    bookings = [booked("10:00", status=AppointmentStatus.CONFIRMED)]

    slot = generator.evaluate_slot(local(DAY, "10:15"), 30, bookings)

    assert not slot.available
    assert "confirmed" in slot.conflict_reason


def test_conflict_reason_names_pending_and_service(generator):
    bookings = [booked("10:00", status=AppointmentStatus.PENDING, service_name="Uñas acrílicas")]

    slot = generator.evaluate_slot(local(DAY, "09:30"), 60, bookings)

    assert slot.conflict_reason == "schedule conflict with a pending appointment (Uñas acrílicas)"


def test_slot_ending_at_booking_start_is_available(generator):
    bookings = [booked("10:00")]
    assert generator.evaluate_slot(local(DAY, "09:00"), 60, bookings).available


def test_cancelled_booking_frees_its_slots(generator):
    bookings = [booked("10:00", status=AppointmentStatus.CANCELLED)]
    grid = generator.generate_slots(DAY, DAY, 60, bookings, [DAY])
    assert grid.available_slots == 33


def test_booking_blocks_every_overlapping_start(generator):
    bookings = [booked("10:00", duration=60)]
    grid = generator.generate_slots(DAY, DAY, 60, bookings, [DAY])

    blocked = [slot.start for slot in grid.slots if slot.conflict_reason and "conflict" in slot.conflict_reason]
    assert blocked == [local(DAY, "09:30"), local(DAY, "10:00"), local(DAY, "10:30")]
    assert grid.available_slots == 30


def test_available_slot_never_overlaps_a_blocking_booking(generator):
    bookings = [
        booked("08:00", duration=45),
        booked("12:15", duration=150, status=AppointmentStatus.PENDING),
        booked("19:00", duration=30),
    ]
    grid = generator.generate_slots(DAY, DAY, 90, bookings, [DAY])

    for slot in grid.slots:
        if slot.available:
            assert not any(intervals_overlap(slot.start, slot.end, b.start, b.end) for b in bookings)


def test_outside_hours_takes_precedence_over_conflict(generator):
    bookings = [booked("22:00", duration=60)]
    slot = generator.evaluate_slot(local(DAY, "22:30"), 60, bookings)
    assert slot.conflict_reason.startswith("outside working hours")


def test_disabled_day_is_skipped(generator):
    grid = generator.generate_slots(DAY, DAY, 60, [], [])
    assert grid.total_slots == 0
    assert grid.available_slots == 0


def test_disabled_day_can_be_listed_as_unavailable(generator):
    bookings = [booked("10:00")]
    grid = generator.generate_slots(DAY, DAY, 60, bookings, [], include_disabled_days=True)

    assert grid.total_slots == 34
    assert grid.available_slots == 0
    assert {slot.conflict_reason for slot in grid.slots} == {REASON_DAY_NOT_ENABLED}


def test_range_only_includes_enabled_days(generator):
    friday = DAY + timedelta(days=1)
    grid = generator.generate_slots(DAY, DAY + timedelta(days=3), 60, [], [DAY, friday])

    assert grid.total_slots == 68
    assert {generator.policy.local_day(slot.start) for slot in grid.slots} == {DAY, friday}


def test_start_after_end_yields_empty_grid(generator):
    grid = generator.generate_slots(DAY, DAY - timedelta(days=1), 60, [], [DAY])
    assert grid.slots == []


def test_generation_is_deterministic(generator):
    bookings = [booked("10:00"), booked("15:30", status=AppointmentStatus.PENDING)]
    first = generator.generate_slots(DAY, DAY, 60, bookings, [DAY])
    second = generator.generate_slots(DAY, DAY, 60, bookings, [DAY])
    assert first == second


def test_default_duration_when_none_given(generator):
    grid = generator.generate_slots(DAY, DAY, None, [], [DAY])
    assert grid.service_duration == 60


@pytest.mark.parametrize("duration", [0, -30])
def test_non_positive_duration_is_rejected(generator, duration):
    with pytest.raises(ValueError):
        generator.generate_slots(DAY, DAY, duration, [], [DAY])


def test_custom_policy_window():
    generator = SlotGenerator(SchedulingPolicy(workday_start_hour=9, workday_end_hour=12, slot_interval_minutes=60))
    grid = generator.generate_slots(DAY, DAY, 60, [], [DAY])
    assert [slot.start for slot in grid.slots] == [local(DAY, "09:00"), local(DAY, "10:00"), local(DAY, "11:00")]


def test_slot_to_dict_uses_local_date_and_time(generator, policy):
    grid = generator.generate_slots(DAY, DAY, 60, [], [DAY])
    data = grid.to_dict(policy)

    first = data["slots"][0]
    assert first["date"] == "2025-08-14"
    assert first["time"] == "06:00"
    assert first["available"] is True
    assert first["conflict_reason"] is None
    assert data["total_slots"] == 34
    assert data["available_slots"] == 33


def test_enabled_day_set_drops_unavailable_records():
    class _Record:
        def __init__(self, day, is_available):
            self.date = day
            self.is_available = is_available

    records = [_Record(date(2025, 8, 14), True), _Record(date(2025, 8, 15), False), date(2025, 8, 16)]
    assert enabled_day_set(records) == {date(2025, 8, 14), date(2025, 8, 16)}


@pytest.mark.parametrize("hhmm", ["22:30", "22:45"])
def test_slot_running_past_midnight_is_outside_hours(generator, hhmm):
    """A 90-minute service from 22:30 or later ends on the next day."""
    slot = generator.evaluate_slot(local(DAY, hhmm), 90, [])

    assert not slot.available
    assert slot.conflict_reason == "outside working hours (06:00-23:00)"
