"""Appointment lifecycle transitions and create/reschedule validation."""

import pytest

from app.schemas.appointment import AppointmentStatus
from app.services.scheduling import (
    ALLOWED_TRANSITIONS,
    AppointmentStateMachine,
    ConflictError,
    DayNotEnabledError,
    InvalidTransitionError,
    OutsideWorkingHoursError,
    SchedulingPolicy,
    TerminalStateError,
    allowed_next_statuses,
    is_terminal,
)
from conftest import DAY, booked, local

PENDING = AppointmentStatus.PENDING
CONFIRMED = AppointmentStatus.CONFIRMED
COMPLETED = AppointmentStatus.COMPLETED
CANCELLED = AppointmentStatus.CANCELLED


@pytest.fixture
def machine(policy):
    return AppointmentStateMachine(policy)


@pytest.mark.parametrize("current,requested", [
    (PENDING, CONFIRMED),
    (PENDING, CANCELLED),
    (CONFIRMED, COMPLETED),
    (CONFIRMED, CANCELLED),
])
def test_allowed_transitions(machine, current, requested):
    assert machine.validate_transition(current, requested).ok


@pytest.mark.parametrize("current,requested", [
    (PENDING, COMPLETED),
    (CONFIRMED, PENDING),
])
def test_disallowed_transitions(machine, current, requested):
    result = machine.validate_transition(current, requested)
    assert not result.ok
    assert isinstance(result.error, InvalidTransitionError)
    assert result.error.context() == {"current_status": current.value, "requested_status": requested.value}


@pytest.mark.parametrize("status", [PENDING, CONFIRMED])
def test_same_status_is_a_noop(machine, status):
    assert machine.validate_transition(status, status).ok


@pytest.mark.parametrize("current", [COMPLETED, CANCELLED])
@pytest.mark.parametrize("requested", list(AppointmentStatus))
def test_terminal_states_reject_everything(machine, current, requested):
    result = machine.validate_transition(current, requested)
    assert isinstance(result.error, TerminalStateError)


def test_transition_accepts_raw_strings(machine):
    assert machine.validate_transition("PENDING", "CONFIRMED").ok


def test_unknown_status_is_an_invalid_transition(machine):
    result = machine.validate_transition("PENDING", "ARCHIVED")
    assert isinstance(result.error, InvalidTransitionError)


def test_allowed_next_statuses():
    assert allowed_next_statuses(PENDING) == [CONFIRMED, CANCELLED]
    assert allowed_next_statuses(CONFIRMED) == [COMPLETED, CANCELLED]
    assert allowed_next_statuses(COMPLETED) == []
    assert allowed_next_statuses("CANCELLED") == []


def test_terminal_statuses_have_no_targets():
    assert is_terminal(COMPLETED) and is_terminal(CANCELLED)
    assert not is_terminal(PENDING) and not is_terminal(CONFIRMED)
    assert set(ALLOWED_TRANSITIONS) == set(AppointmentStatus)


def test_mutation_of_terminal_appointment_is_rejected(machine):
    assert machine.validate_mutation(CONFIRMED).ok
    assert isinstance(machine.validate_mutation(COMPLETED).error, TerminalStateError)


def test_create_on_enabled_free_day(machine):
    assert machine.validate_create(local(DAY, "10:00"), 60, [DAY], []).ok


def test_create_on_disabled_day(machine):
    result = machine.validate_create(local(DAY, "10:00"), 60, [], [])
    assert isinstance(result.error, DayNotEnabledError)
    assert result.error.day == DAY


def test_create_uses_local_day_not_utc_day(machine):
    """21:00 local is already the next day in UTC."""
    assert machine.validate_create(local(DAY, "21:00"), 60, [DAY], []).ok


def test_create_overlapping_confirmed_booking(machine):
    bookings = [booked("10:00", client_name="Ana", appointment_id="a1", service_name="Pedicure spa")]

    result = machine.validate_create(local(DAY, "10:30"), 60, [DAY], bookings)

    error = result.error
    assert isinstance(error, ConflictError)
    assert error.status_code == 409
    assert error.status == "CONFIRMED"
    assert error.client_name == "Ana"
    assert "confirmed" in error.message
    assert error.to_dict()["context"]["conflicting_appointment_id"] == "a1"


def test_create_back_to_back_is_allowed(machine):
    bookings = [booked("10:00")]
    assert machine.validate_create(local(DAY, "11:00"), 60, [DAY], bookings).ok
    assert machine.validate_create(local(DAY, "09:00"), 60, [DAY], bookings).ok


def test_create_ignores_cancelled_bookings(machine):
    bookings = [booked("10:00", status=CANCELLED)]
    assert machine.validate_create(local(DAY, "10:00"), 60, [DAY], bookings).ok


@pytest.mark.parametrize("hhmm,duration", [("05:30", 60), ("22:30", 60), ("22:15", 60)])
def test_create_outside_working_hours(machine, hhmm, duration):
    result = machine.validate_create(local(DAY, hhmm), duration, [DAY], [])
    assert isinstance(result.error, OutsideWorkingHoursError)
    assert result.error.working_hours == "06:00-23:00"


def test_create_ending_exactly_at_closing_is_allowed(machine):
    assert machine.validate_create(local(DAY, "22:00"), 60, [DAY], []).ok


def test_working_hours_check_can_be_disabled():
    machine = AppointmentStateMachine(SchedulingPolicy(enforce_working_hours=False))
    assert machine.validate_create(local(DAY, "22:30"), 60, [DAY], []).ok


def test_reschedule_does_not_conflict_with_itself(machine):
    bookings = [booked("10:00", appointment_id="a1")]
    assert machine.validate_reschedule("a1", local(DAY, "10:30"), 60, [DAY], bookings).ok


def test_reschedule_onto_another_booking(machine):
    bookings = [booked("10:00", appointment_id="a1"), booked("12:00", appointment_id="a2", client_name="Berta")]

    result = machine.validate_reschedule("a1", local(DAY, "11:30"), 60, [DAY], bookings)

    assert isinstance(result.error, ConflictError)
    assert result.error.client_name == "Berta"


def test_day_check_precedes_conflict_check(machine):
    bookings = [booked("10:00")]
    result = machine.validate_create(local(DAY, "10:00"), 60, [], bookings)
    assert isinstance(result.error, DayNotEnabledError)


@pytest.mark.parametrize("hhmm", ["22:30", "22:45"])
def test_create_running_past_midnight(machine, hhmm):
    result = machine.validate_create(local(DAY, hhmm), 90, [DAY], [])
    assert isinstance(result.error, OutsideWorkingHoursError)
