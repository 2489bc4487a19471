"""Appointment slot availability for a candidate date."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, Protocol, Sequence
from zoneinfo import ZoneInfo

from ...config import settings
from ...models.domain import SlotWindow, TimeSlot
from .calendar_client import Appointment, CalendarNotConfiguredError, GoogleCalendarClient

logger = logging.getLogger(__name__)

DEFAULT_WINDOWS: tuple[SlotWindow, ...] = (
    SlotWindow(start=time(8, 0), end=time(11, 0), label="8h00 - 11h00"),
    SlotWindow(start=time(11, 0), end=time(14, 0), label="11h00 - 14h00"),
    SlotWindow(start=time(14, 0), end=time(17, 0), label="14h00 - 17h00"),
)


class CalendarCollaborator(Protocol):
    async def list_busy_starts(self, day: date) -> list[datetime]: ...

    async def create_appointment(self, appointment: Appointment) -> dict: ...


@dataclass(frozen=True, slots=True)
class SlotAvailability:
    day: date
    slots: tuple[TimeSlot, ...]
    reason: str

    @property
    def any_available(self) -> bool:
        return any(slot.available for slot in self.slots)


def find_window(choice: str, windows: Sequence[SlotWindow] = DEFAULT_WINDOWS) -> SlotWindow | None:
    """Match a slot chosen by its label ("8h00 - 11h00") or its start ("08:00")."""
    value = choice.strip()
    for window in windows:
        if value == window.label or value == window.start.strftime("%H:%M"):
            return window
    return None


def default_calendar() -> CalendarCollaborator:
    return GoogleCalendarClient()


class SlotAvailabilityEngine:
    """Compute the availability of the fixed daily windows for one date.

    Rules, in order: the candidate must be at least the minimum lead time
    away, its weekday must be an operating day, and each window must sit
    inside business hours. Remaining windows are unavailable when a calendar
    event starts exactly at the window start. If the calendar cannot be
    queried every structurally valid window is reported available.
    """

    def __init__(
        self,
        calendar: CalendarCollaborator | None = None,
        windows: Sequence[SlotWindow] = DEFAULT_WINDOWS,
        lead_time: timedelta | None = None,
        business_hours: tuple[int, int] | None = None,
        business_days: Sequence[int] | None = None,
        timezone: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._calendar = calendar
        self.windows = tuple(windows)
        self.lead_time = lead_time if lead_time is not None else timedelta(hours=settings.minimum_lead_time_hours)
        self.business_hours = business_hours or (settings.business_hours_start, settings.business_hours_end)
        self.business_days = tuple(business_days) if business_days is not None else settings.business_days
        self.tz = ZoneInfo(timezone or settings.timezone)
        self._clock = clock or (lambda: datetime.now(self.tz))

    def now(self) -> datetime:
        return self._clock()

    def earliest_allowed(self, now: datetime | None = None) -> datetime:
        return (now or self.now()) + self.lead_time

    def localize(self, day: date, at: time) -> datetime:
        return datetime.combine(day, at, tzinfo=self.tz)

    def meets_lead_time(self, candidate: datetime, now: datetime | None = None) -> bool:
        return candidate >= self.earliest_allowed(now)

    def is_operating_day(self, day: date) -> bool:
        return day.weekday() in self.business_days

    def within_business_hours(self, window: SlotWindow) -> bool:
        open_hour, close_hour = self.business_hours
        opens = time(open_hour, 0)
        closes = time(23, 59, 59, 999999) if close_hour >= 24 else time(close_hour, 0)
        return opens <= window.start and window.end <= closes and window.start < window.end

    def _resolve_calendar(self) -> CalendarCollaborator:
        if self._calendar is None:
            self._calendar = default_calendar()
        return self._calendar

    def _closed(self, day: date, reason: str) -> SlotAvailability:
        slots = tuple(
            TimeSlot(
                start=self.localize(day, window.start),
                end=self.localize(day, window.end),
                label=window.label,
                available=False,
            )
            for window in self.windows
        )
        return SlotAvailability(day=day, slots=slots, reason=reason)

    async def _busy_starts(self, day: date) -> list[datetime] | None:
        try:
            return await self._resolve_calendar().list_busy_starts(day)
        except CalendarNotConfiguredError as e:
            logger.warning(f"Calendar not configured, treating all slots on {day} as available: {e}")
            return None
        except Exception as e:
            logger.error(f"Calendar query failed for {day}, treating all slots as available (overbooking risk): {e}")
            return None

    async def availability(self, candidate: date | datetime, now: datetime | None = None) -> SlotAvailability:
        if isinstance(candidate, datetime):
            day = candidate.date()
            candidate_at = candidate if candidate.tzinfo else candidate.replace(tzinfo=self.tz)
        else:
            day = candidate
            candidate_at = self.localize(day, time.min)

        if not self.meets_lead_time(candidate_at, now):
            return self._closed(day, "lead_time")
        if not self.is_operating_day(day):
            return self._closed(day, "closed_day")

        valid = [window for window in self.windows if self.within_business_hours(window)]
        busy: set[datetime] = set()
        reason = "ok"
        if valid:
            starts = await self._busy_starts(day)
            if starts is None:
                reason = "calendar_unavailable"
            else:
                busy = set(starts)

        slots = []
        for window in self.windows:
            start = self.localize(day, window.start)
            end = self.localize(day, window.end)
            if window not in valid:
                available = False
            else:
                available = start not in busy
            slots.append(TimeSlot(start=start, end=end, label=window.label, available=available))
        return SlotAvailability(day=day, slots=tuple(slots), reason=reason)
