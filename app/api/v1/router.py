"""
API v1 router setup
Organized into: public (booking flow) and dashboard (salon admin) routes
"""
from fastapi import APIRouter

from app.api.v1.public import appointments as public_appointments, availability as public_availability
from app.api.v1.dashboard import appointments as dashboard_appointments, availability as dashboard_availability

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (booking flow, no authentication)
# ============================================================================
api_v1_router.include_router(
    public_availability.router,
    prefix="/public",
    tags=["Public"]
)

api_v1_router.include_router(
    public_appointments.router,
    prefix="/public",
    tags=["Public"]
)

# ============================================================================
# DASHBOARD ROUTES (salon admin; authentication is handled upstream)
# ============================================================================
api_v1_router.include_router(
    dashboard_appointments.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)

api_v1_router.include_router(
    dashboard_availability.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """
    API information and available endpoints.
    """
    return {
        "version": "1.0",
        "sections": {
            "public": "/api/v1/public - availability and booking",
            "dashboard": "/api/v1/dashboard - appointments and enabled days"
        }
    }
