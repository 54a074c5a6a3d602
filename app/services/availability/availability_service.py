from typing import List, Optional, Set
from datetime import date, datetime, timedelta
from uuid import UUID
from sqlalchemy.orm import Session, joinedload
from app.models.appointment import Appointment
from app.models.availability import Availability
from app.models.service import Service
from app.services.scheduling import (
    BLOCKING_STATUSES,
    BookedInterval,
    SchedulingPolicy,
    SlotGenerator,
    SlotGrid,
    day_bounds,
)
import logging

logger = logging.getLogger(__name__)


def parse_uuid(value) -> Optional[UUID]:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


class AvailabilityService:
    """Enabled-day management and slot lookups backed by the database"""

    # ========== ENABLED DAYS ==========

    @staticmethod
    def _find_day(db: Session, day: date) -> Optional[Availability]:
        return db.query(Availability).filter(Availability.date == day).first()

    @staticmethod
    def enable_date(db: Session, day: date) -> Availability:
        """Enable a day for booking (creates the record or flips a blocked one)"""
        availability = AvailabilityService._find_day(db, day)

        if availability:
            if not availability.is_available:
                availability.is_available = True
                db.commit()
                db.refresh(availability)
                logger.info(f"Re-enabled day {day}")
            return availability

        availability = Availability(date=day, is_available=True)
        db.add(availability)
        db.commit()
        db.refresh(availability)
        logger.info(f"Enabled day {day}")
        return availability

    @staticmethod
    def disable_date(db: Session, day: date) -> Availability:
        """Block a day (creates a blocking record if none exists)"""
        availability = AvailabilityService._find_day(db, day)

        if availability:
            availability.is_available = False
        else:
            availability = Availability(date=day, is_available=False)
            db.add(availability)

        db.commit()
        db.refresh(availability)
        logger.info(f"Disabled day {day}")
        return availability

    @staticmethod
    def enable_range(db: Session, start_day: date, end_day: date) -> List[Availability]:
        """Enable every day in [start_day, end_day]"""
        if start_day > end_day:
            raise ValueError("start_day must be on or before end_day")

        enabled = []
        current = start_day
        while current <= end_day:
            enabled.append(AvailabilityService.enable_date(db, current))
            current += timedelta(days=1)
        return enabled

    @staticmethod
    def remove_date(db: Session, day: date) -> bool:
        """Delete a day's record entirely. Returns False if there was none."""
        availability = AvailabilityService._find_day(db, day)
        if not availability:
            return False

        db.delete(availability)
        db.commit()
        logger.info(f"Removed day {day}")
        return True

    @staticmethod
    def list_days(db: Session, start_day: Optional[date] = None, end_day: Optional[date] = None) -> List[Availability]:
        """Enabled and blocked records, for the admin calendar"""
        query = db.query(Availability)
        if start_day:
            query = query.filter(Availability.date >= start_day)
        if end_day:
            query = query.filter(Availability.date <= end_day)
        return query.order_by(Availability.date.asc()).all()

    @staticmethod
    def get_enabled_days(db: Session, start_day: date, end_day: date) -> Set[date]:
        rows = db.query(Availability.date).filter(
            Availability.date >= start_day,
            Availability.date <= end_day,
            Availability.is_available.is_(True)
        ).all()
        return {row[0] for row in rows}

    @staticmethod
    def list_available_dates(db: Session, year: Optional[int] = None, month: Optional[int] = None) -> List[str]:
        """Enabled days as ISO dates, optionally restricted to one month"""
        query = db.query(Availability.date).filter(Availability.is_available.is_(True))

        if year and month:
            first = date(year, month, 1)
            last = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
            query = query.filter(Availability.date >= first, Availability.date < last)

        return [row[0].isoformat() for row in query.order_by(Availability.date.asc()).all()]

    # ========== BOOKINGS ==========

    @staticmethod
    def get_bookings_between(
            db: Session,
            start: datetime,
            end: datetime,
            policy: SchedulingPolicy
    ) -> List[BookedInterval]:
        """Blocking (PENDING/CONFIRMED) appointments starting in [start, end)"""
        appointments = db.query(Appointment).options(
            joinedload(Appointment.service)
        ).filter(
            Appointment.date >= start,
            Appointment.date < end,
            Appointment.status.in_([status.value for status in BLOCKING_STATUSES])
        ).order_by(Appointment.date.asc()).all()

        return [
            BookedInterval.from_appointment(appt, policy.default_duration_minutes)
            for appt in appointments
        ]

    @staticmethod
    def get_bookings_for_day(db: Session, day: date, policy: SchedulingPolicy) -> List[BookedInterval]:
        start, end = day_bounds(day, policy.tz)
        return AvailabilityService.get_bookings_between(db, start, end, policy)

    # ========== SLOTS ==========

    @staticmethod
    def resolve_duration(db: Session, service_id, policy: SchedulingPolicy) -> int:
        """Duration of the requested service, or the default when unknown"""
        if not service_id:
            return policy.default_duration_minutes

        service = None
        service_uuid = parse_uuid(service_id)
        if service_uuid:
            service = db.get(Service, service_uuid)

        if not service:
            logger.warning(f"Service {service_id} not found, using default duration")
        return policy.duration_for(service)

    @staticmethod
    def get_slots(
            db: Session,
            start_day: date,
            end_day: date,
            service_id=None,
            include_disabled_days: bool = False,
            policy: Optional[SchedulingPolicy] = None
    ) -> SlotGrid:
        """Load enabled days and bookings for the range and build the slot grid"""
        policy = policy or SchedulingPolicy.from_settings()
        if start_day > end_day:
            raise ValueError("start_date must be on or before end_date")

        duration = AvailabilityService.resolve_duration(db, service_id, policy)
        enabled_days = AvailabilityService.get_enabled_days(db, start_day, end_day)

        range_start, _ = day_bounds(start_day, policy.tz)
        _, range_end = day_bounds(end_day, policy.tz)
        bookings = AvailabilityService.get_bookings_between(db, range_start, range_end, policy)

        grid = SlotGenerator(policy).generate_slots(
            start_day,
            end_day,
            service_duration=duration,
            existing_appointments=bookings,
            enabled_days=enabled_days,
            include_disabled_days=include_disabled_days,
        )

        logger.info(
            f"Slots {start_day} - {end_day}: {grid.available_slots}/{grid.total_slots} available "
            f"({len(enabled_days)} enabled days, {len(bookings)} bookings)"
        )
        return grid
