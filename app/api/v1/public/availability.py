# ============================================================================
# FILE: app/api/v1/public/availability.py
# Public booking flow - which days are open and which slots are free
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from app.config.database import get_db
from app.api.dependencies import get_scheduling_policy
from app.schemas.appointment import SlotGridResponse
from app.services.availability.availability_service import AvailabilityService
from app.services.scheduling import SchedulingPolicy

router = APIRouter(prefix="/availability", tags=["public-availability"])

MAX_RANGE_DAYS = 62


@router.get("/slots", response_model=SlotGridResponse)
def get_available_slots(
        start_date: date = Query(..., description="First business-local day (YYYY-MM-DD)"),
        end_date: date = Query(..., description="Last business-local day, inclusive"),
        service_id: Optional[str] = Query(None, description="Service whose duration sizes the slots"),
        db: Session = Depends(get_db),
        policy: SchedulingPolicy = Depends(get_scheduling_policy)
):
    """
    Slot grid for the enabled days in the range.
    Unavailable slots are included with the reason they can't be booked.
    """
    if start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must be on or before end_date")
    if (end_date - start_date).days >= MAX_RANGE_DAYS:
        raise HTTPException(status_code=400, detail=f"Range cannot exceed {MAX_RANGE_DAYS} days")

    grid = AvailabilityService.get_slots(
        db, start_date, end_date, service_id=service_id, policy=policy
    )
    return grid.to_dict(policy)


@router.get("/dates", response_model=List[str])
def get_available_dates(
        year: Optional[int] = Query(None, ge=2000, le=2100),
        month: Optional[int] = Query(None, ge=1, le=12),
        db: Session = Depends(get_db)
):
    """Enabled days (YYYY-MM-DD), optionally for one month."""
    if (year is None) != (month is None):
        raise HTTPException(status_code=400, detail="year and month must be given together")

    return AvailabilityService.list_available_dates(db, year=year, month=month)
