# ============================================================================
# FILE: app/api/v1/dashboard/availability.py
# Admin management of the enabled-day allow-list
# ============================================================================
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from app.config.database import get_db
from app.schemas.appointment import (
    AvailabilityDayRequest,
    AvailabilityRangeRequest,
    AvailabilityResponse,
)
from app.services.availability.availability_service import AvailabilityService

router = APIRouter(prefix="/availability", tags=["dashboard-availability"])


@router.get("", response_model=List[AvailabilityResponse])
def list_days(
        start_date: Optional[date] = Query(None),
        end_date: Optional[date] = Query(None),
        db: Session = Depends(get_db)
):
    """
    Enabled and blocked days, for the admin calendar.
    """
    return [day.to_dict() for day in AvailabilityService.list_days(db, start_date, end_date)]


@router.post("/enable")
def enable_day(request: AvailabilityDayRequest, db: Session = Depends(get_db)):
    """
    Open a day for bookings.
    """
    availability = AvailabilityService.enable_date(db, request.date)
    return {"message": "Day enabled", "availability": availability.to_dict()}


@router.post("/disable")
def disable_day(request: AvailabilityDayRequest, db: Session = Depends(get_db)):
    """
    Block a day. Existing appointments on it are kept.
    """
    availability = AvailabilityService.disable_date(db, request.date)
    return {"message": "Day disabled", "availability": availability.to_dict()}


@router.post("/enable-range")
def enable_range(request: AvailabilityRangeRequest, db: Session = Depends(get_db)):
    """
    Open every day from start_date to end_date inclusive.
    """
    enabled = AvailabilityService.enable_range(db, request.start_date, request.end_date)
    return {
        "message": f"Enabled {len(enabled)} days",
        "enabled_dates": [day.to_dict() for day in enabled]
    }


@router.post("/remove")
def remove_day(request: AvailabilityDayRequest, db: Session = Depends(get_db)):
    """
    Delete a day's record entirely.
    """
    removed = AvailabilityService.remove_date(db, request.date)
    return {
        "message": "Day removed" if removed else "Day was not registered",
        "removed": removed
    }
