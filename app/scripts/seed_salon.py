#!/usr/bin/env python3
"""
Seed the service catalog and open the next days for booking
Usage: python -m app.scripts.seed_salon [days]
"""
import sys
import logging
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from app.config.database import SessionLocal, create_tables
from app.models.service import Service
from app.services.availability.availability_service import AvailabilityService
from app.services.scheduling import SchedulingPolicy, parse_duration
from app.utils.my_logging import setup_logging

logger = logging.getLogger(__name__)

# name, category, duration ("H:MM" or decimal hours), price
SERVICE_CATALOG = [
    ("Manicure tradicional", "Manos", "0:45", "10.00"),
    ("Manicure semipermanente", "Manos", "1:00", "15.00"),
    ("Uñas acrílicas", "Manos", "2:30", "35.00"),
    ("Pedicure spa", "Pies", "1.5", "20.00"),
    ("Retiro de acrílico", "Manos", "0:30", "8.00"),
]


def seed_services(db: Session) -> int:
    """Insert catalog entries that don't exist yet (matched by name)"""
    created = 0
    for name, category, duration, price in SERVICE_CATALOG:
        if db.query(Service).filter(Service.name == name).first():
            continue
        db.add(Service(
            name=name,
            category=category,
            duration=parse_duration(duration),
            price=Decimal(price),
            is_active=True
        ))
        created += 1
    db.commit()
    return created


def seed_enabled_days(db: Session, days: int) -> int:
    """Enable the next `days` days except Sundays"""
    today = SchedulingPolicy.from_settings().local_day(datetime.now().astimezone())
    enabled = 0
    for offset in range(days):
        day = today + timedelta(days=offset)
        if day.weekday() == 6:
            continue
        AvailabilityService.enable_date(db, day)
        enabled += 1
    return enabled


def seed_salon(days: int = 30):
    create_tables()
    db: Session = SessionLocal()

    try:
        services = seed_services(db)
        enabled = seed_enabled_days(db, days)
        logger.info(f"Seeded {services} services and enabled {enabled} days")
    except Exception as e:
        db.rollback()
        logger.error(f"Error seeding salon data: {e}", exc_info=True)
        raise
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    seed_salon(int(sys.argv[1]) if len(sys.argv) > 1 else 30)
