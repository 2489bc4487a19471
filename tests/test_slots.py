import asyncio
import logging
from datetime import date, datetime, time, timedelta, timezone

import httpx
import pytest

from quote_engine.config import settings
from quote_engine.services.scheduling.calendar_client import GoogleCalendarClient
from quote_engine.services.scheduling.slots import DEFAULT_WINDOWS, SlotAvailabilityEngine, find_window

# Monday 2026-01-05 09:00 UTC
NOW = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)


class DummyCalendar:
    def __init__(self, busy: list[datetime] | None = None, error: Exception | None = None) -> None:
        self.busy = busy or []
        self.error = error
        self.queried: list[date] = []

    async def list_busy_starts(self, day: date) -> list[datetime]:
        self.queried.append(day)
        if self.error is not None:
            raise self.error
        return list(self.busy)

    async def create_appointment(self, appointment) -> dict:
        return {"id": "evt"}


def _engine(calendar=None, **kwargs) -> SlotAvailabilityEngine:
    kwargs.setdefault("business_hours", (8, 18))
    kwargs.setdefault("business_days", (0, 1, 2, 3, 4, 5, 6))
    return SlotAvailabilityEngine(
        calendar=calendar or DummyCalendar(),
        lead_time=timedelta(hours=72),
        timezone="UTC",
        clock=lambda: NOW,
        **kwargs,
    )


def test_date_inside_lead_time_is_closed_without_calendar_call() -> None:
    calendar = DummyCalendar()
    engine = _engine(calendar)

    availability = asyncio.run(engine.availability((NOW + timedelta(hours=24)).date()))

    assert availability.reason == "lead_time"
    assert len(availability.slots) == 3
    assert not availability.any_available
    assert calendar.queried == []


def test_free_day_has_all_slots_available() -> None:
    calendar = DummyCalendar()
    engine = _engine(calendar)

    availability = asyncio.run(engine.availability(date(2026, 1, 10)))

    assert availability.reason == "ok"
    assert [slot.label for slot in availability.slots] == ["8h00 - 11h00", "11h00 - 14h00", "14h00 - 17h00"]
    assert all(slot.available for slot in availability.slots)
    assert calendar.queried == [date(2026, 1, 10)]


def test_event_at_slot_start_blocks_only_that_slot() -> None:
    busy = [
        datetime(2026, 1, 10, 11, 0, tzinfo=timezone.utc),
        # Overlapping but not starting at a slot start: not a conflict
        datetime(2026, 1, 10, 15, 30, tzinfo=timezone.utc),
    ]
    engine = _engine(DummyCalendar(busy=busy))

    availability = asyncio.run(engine.availability(date(2026, 1, 10)))

    assert [slot.available for slot in availability.slots] == [True, False, True]


def test_closed_weekday_has_no_slots() -> None:
    calendar = DummyCalendar()
    engine = _engine(calendar, business_days=(0, 1, 2, 3, 4))

    # 2026-01-10 is a Saturday
    availability = asyncio.run(engine.availability(date(2026, 1, 10)))

    assert availability.reason == "closed_day"
    assert not availability.any_available
    assert calendar.queried == []


def test_windows_outside_business_hours_are_unavailable() -> None:
    engine = _engine(business_hours=(8, 15))

    availability = asyncio.run(engine.availability(date(2026, 1, 10)))

    assert [slot.available for slot in availability.slots] == [True, True, False]


def test_calendar_failure_reports_every_valid_slot_available(caplog: pytest.LogCaptureFixture) -> None:
    engine = _engine(DummyCalendar(error=httpx.ConnectError("calendar down")))

    with caplog.at_level(logging.ERROR):
        availability = asyncio.run(engine.availability(date(2026, 1, 10)))

    assert availability.reason == "calendar_unavailable"
    assert all(slot.available for slot in availability.slots)
    assert "overbooking" in caplog.text


def test_unconfigured_calendar_is_treated_as_free(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "calendar_id", None)
    monkeypatch.setattr(settings, "calendar_access_token", None)
    engine = SlotAvailabilityEngine(
        lead_time=timedelta(hours=72),
        business_hours=(8, 18),
        business_days=(0, 1, 2, 3, 4, 5, 6),
        timezone="UTC",
        clock=lambda: NOW,
    )

    availability = asyncio.run(engine.availability(date(2026, 1, 10)))

    assert availability.reason == "calendar_unavailable"
    assert availability.any_available


def test_lead_time_boundary_is_inclusive() -> None:
    engine = _engine()

    assert engine.meets_lead_time(NOW + timedelta(hours=72), NOW)
    assert not engine.meets_lead_time(NOW + timedelta(hours=72) - timedelta(seconds=1), NOW)


def test_slots_are_localized_to_engine_timezone() -> None:
    engine = SlotAvailabilityEngine(
        calendar=DummyCalendar(),
        timezone="America/Montreal",
        business_hours=(8, 18),
        business_days=(0, 1, 2, 3, 4, 5, 6),
        clock=lambda: NOW,
    )

    availability = asyncio.run(engine.availability(date(2026, 1, 10)))

    first = availability.slots[0]
    assert first.start.time() == time(8, 0)
    assert first.start.utcoffset() == timedelta(hours=-5)


def test_find_window_accepts_label_or_start() -> None:
    assert find_window("11h00 - 14h00") is DEFAULT_WINDOWS[1]
    assert find_window("14:00") is DEFAULT_WINDOWS[2]
    assert find_window("18:00") is None


def test_calendar_event_with_malformed_start_does_not_block_slots() -> None:
    payload = {"items": [{"start": "2026-01-10T08:00:00Z"}, "not-an-event"]}
    calendar = GoogleCalendarClient(
        calendar_id="shop@example.com",
        access_token="token",
        base_url="https://calendar.test/v3",
        max_retries=0,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=payload)),
    )

    availability = asyncio.run(_engine(calendar).availability(date(2026, 1, 10)))

    assert len(availability.slots) == 3
    assert all(slot.available for slot in availability.slots)


def test_unexpected_calendar_error_reports_every_valid_slot_available(caplog: pytest.LogCaptureFixture) -> None:
    engine = _engine(DummyCalendar(error=RuntimeError("calendar SDK blew up")))

    with caplog.at_level(logging.ERROR):
        availability = asyncio.run(engine.availability(date(2026, 1, 10)))

    assert availability.reason == "calendar_unavailable"
    assert [slot.available for slot in availability.slots] == [True, True, True]
    assert "calendar SDK blew up" in caplog.text
