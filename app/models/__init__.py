# app/models/__init__.py
from .base import Base
from .service import Service
from .appointment import Appointment
from .availability import Availability

__all__ = [
    "Base",
    "Service",
    "Appointment",
    "Availability",
]
