"""Health checks and monitoring endpoints"""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config.database import get_db, ping
from app.api.dependencies import get_scheduling_policy
from app.services.scheduling import SchedulingPolicy

logger = logging.getLogger(__name__)

health_router = APIRouter()


@health_router.get("")
async def health_check():
    """Basic health check"""
    return {"status": "healthy", "service": "salon-booking-api"}


@health_router.get("/detailed")
def detailed_health_check(
        db: Session = Depends(get_db),
        policy: SchedulingPolicy = Depends(get_scheduling_policy)
):
    """Health check with database ping and the active scheduling policy"""
    checks = {
        "api": "healthy",
        "database": "unknown",
        "overall": "unknown"
    }

    try:
        ping(db)
        checks["database"] = "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        checks["database"] = f"unhealthy: {str(e)}"

    checks["overall"] = "healthy" if checks["database"] == "healthy" else "degraded"
    checks["scheduling"] = {
        "timezone": str(policy.tz),
        "working_hours": policy.working_hours_label,
        "slot_interval_minutes": policy.slot_interval_minutes,
    }
    return checks
