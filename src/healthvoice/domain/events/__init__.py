"""
Domain events package.
"""

from .appointment_events import AppointmentCreated, AppointmentEvent, AppointmentUpdated

__all__ = [
    "AppointmentEvent",
    "AppointmentCreated",
    "AppointmentUpdated",
]
