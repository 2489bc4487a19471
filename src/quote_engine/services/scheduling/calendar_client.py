"""HTTP client for the booking calendar (Google Calendar v3 events API)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

import httpx

from ...config import settings
from ..http_retry import send_with_retries

logger = logging.getLogger(__name__)


class CalendarNotConfiguredError(RuntimeError):
    """Raised when the calendar id or access token is missing."""


@dataclass(frozen=True, slots=True)
class Appointment:
    title: str
    description: str
    start: datetime
    duration_minutes: int
    attendee: str
    attendee_name: Optional[str] = None
    location: Optional[str] = None

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration_minutes)


def _parse_event_start(event: object) -> datetime | None:
    if not isinstance(event, dict):
        return None
    start = event.get("start")
    value = start.get("dateTime") if isinstance(start, dict) else None
    if not isinstance(value, str) or not value:
        # All-day events carry only a date and never match a slot start
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Ignoring calendar event with unparseable start {value!r}")
        return None


class GoogleCalendarClient:
    def __init__(
        self,
        calendar_id: str | None = None,
        access_token: str | None = None,
        base_url: str | None = None,
        timezone: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.calendar_id = calendar_id or settings.calendar_id
        self.access_token = access_token or settings.calendar_access_token
        if not self.calendar_id or not self.access_token:
            raise CalendarNotConfiguredError("Calendar id or access token is not configured.")
        self.base_url = (base_url or settings.calendar_api_url).rstrip("/")
        self.timezone = timezone or settings.timezone
        self.timeout = timeout if timeout is not None else settings.calendar_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.http_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.http_backoff_seconds
        self._transport = transport

    @property
    def events_url(self) -> str:
        return f"{self.base_url}/calendars/{self.calendar_id}/events"

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers={"Authorization": f"Bearer {self.access_token}"},
            transport=self._transport,
        )

    async def _send(self, method: str, url: str, **kwargs) -> object:
        async with self._get_client() as client:
            response = await send_with_retries(
                client,
                method,
                url,
                max_retries=self.max_retries,
                backoff_seconds=self.backoff_seconds,
                label="Calendar",
                **kwargs,
            )
            return response.json()

    async def list_busy_starts(self, day: date) -> list[datetime]:
        """Return the start timestamps of timed events booked on ``day``."""
        tz = ZoneInfo(self.timezone)
        day_start = datetime.combine(day, time.min, tzinfo=tz)
        params = {
            "timeMin": day_start.isoformat(),
            "timeMax": (day_start + timedelta(days=1)).isoformat(),
            "singleEvents": "true",
            "orderBy": "startTime",
        }
        data = await self._send("GET", self.events_url, params=params)
        items = data.get("items", []) if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise ValueError("Calendar response carries no list of events.")
        starts = []
        for event in items:
            if isinstance(event, dict) and event.get("status") == "cancelled":
                continue
            start = _parse_event_start(event)
            if start is not None:
                starts.append(start)
        return starts

    async def create_appointment(self, appointment: Appointment) -> dict:
        attendee: dict = {"email": appointment.attendee}
        if appointment.attendee_name:
            attendee["displayName"] = appointment.attendee_name
        body = {
            "summary": appointment.title,
            "description": appointment.description,
            "start": {"dateTime": appointment.start.isoformat(), "timeZone": self.timezone},
            "end": {"dateTime": appointment.end.isoformat(), "timeZone": self.timezone},
            "attendees": [attendee],
        }
        if appointment.location:
            body["location"] = appointment.location
        event = await self._send("POST", self.events_url, json=body)
        if not isinstance(event, dict):
            raise ValueError("Calendar did not return the created event.")
        logger.info(f"Created calendar event {event.get('id')} at {appointment.start.isoformat()}")
        return event
