# ============================================================================
# FILE: app/api/dependencies.py
# Shared dependencies for the booking and dashboard routers
# ============================================================================
import logging
from fastapi import HTTPException

from app.config.settings import get_settings
from app.services.scheduling import SchedulingError, SchedulingPolicy

logger = logging.getLogger(__name__)


def get_scheduling_policy() -> SchedulingPolicy:
    """Scheduling policy built from settings (override in tests)"""
    return SchedulingPolicy.from_settings(get_settings())


def scheduling_http_error(error: SchedulingError) -> HTTPException:
    """
    Turn a typed scheduling rejection into an HTTP error.

    409 for schedule conflicts, 404 for unknown resources, 400 otherwise.
    The body keeps the error code and context so the UI can render a
    message per kind.
    """
    logger.info(f"Request rejected: {error.code} - {error.message}")
    return HTTPException(status_code=error.status_code, detail=error.to_dict())
