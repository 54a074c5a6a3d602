"""Shared fixtures: in-memory database, API client and booking factories."""

import os

# Must be set before any app module creates the engine
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date, datetime, time, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_scheduling_policy
from app.config.database import SessionLocal, engine, get_db
from app.main import create_app
from app.models import Appointment, Availability, Base, Service
from app.schemas.appointment import AppointmentStatus
from app.services.scheduling import BookedInterval, SchedulingPolicy
from app.services.scheduling.business_time import local_datetime

# A Thursday
DAY = date(2025, 8, 14)


def local(day: date, hhmm: str) -> datetime:
    """UTC instant of a salon wall-clock time"""
    hours, minutes = hhmm.split(":")
    return local_datetime(day, int(hours), int(minutes))


def booked(hhmm, duration=60, status=AppointmentStatus.CONFIRMED, appointment_id=None,
           client_name="Ana", day=DAY, service_name=None):
    return BookedInterval(
        start=local(day, hhmm),
        duration_minutes=duration,
        status=status,
        appointment_id=appointment_id,
        client_name=client_name,
        service_name=service_name,
    )


@pytest.fixture
def policy():
    return SchedulingPolicy()


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db, policy):
    app = create_app(with_lifespan=False)
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_scheduling_policy] = lambda: policy
    return TestClient(app)


@pytest.fixture
def make_service(db):
    def _make(name="Manicure semipermanente", duration=60, price="15.00"):
        service = Service(name=name, duration=duration, price=Decimal(price), is_active=True)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service
    return _make


@pytest.fixture
def enable_day(db):
    def _enable(day=DAY, available=True):
        record = Availability(date=day, is_available=available)
        db.add(record)
        db.commit()
        return record
    return _enable


@pytest.fixture
def make_appointment(db):
    def _make(service, hhmm="10:00", day=DAY, status=AppointmentStatus.CONFIRMED,
              client_name="Ana Torres"):
        appointment = Appointment(
            client_name=client_name,
            client_phone="0991234567",
            service_id=service.id,
            date=local(day, hhmm),
            status=status.value,
        )
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment
    return _make


def as_utc(hour, minute=0, day=DAY):
    return datetime.combine(day, time(hour, minute), tzinfo=timezone.utc)
