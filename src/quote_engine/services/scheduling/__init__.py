"""Appointment scheduling services."""

from .calendar_client import Appointment, CalendarNotConfiguredError, GoogleCalendarClient
from .slots import DEFAULT_WINDOWS, SlotAvailability, SlotAvailabilityEngine, find_window

__all__ = [
    "Appointment",
    "CalendarNotConfiguredError",
    "GoogleCalendarClient",
    "DEFAULT_WINDOWS",
    "SlotAvailability",
    "SlotAvailabilityEngine",
    "find_window",
]
