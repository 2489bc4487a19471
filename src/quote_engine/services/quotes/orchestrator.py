"""Quote submission: validate, persist, then book and notify on a best-effort basis."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Protocol

from ...models.domain import Quote, ServiceCatalog
from ..distance.resolver import DistanceResolver
from ..notifications.email import EmailNotConfiguredError, HttpEmailNotifier
from ..scheduling.calendar_client import CalendarNotConfiguredError, GoogleCalendarClient
from ..scheduling.slots import CalendarCollaborator, SlotAvailabilityEngine
from .builder import build_appointment, build_quote
from .errors import QuotePersistenceError
from .validation import QuoteSubmission, appointment_start, validate_submission

logger = logging.getLogger(__name__)

WARN_CALENDAR = "Estimate created but the calendar could not be updated."
WARN_EMAIL = "Estimate created but the confirmation email could not be sent."


class QuoteStore(Protocol):
    async def create(self, quote: Quote) -> dict: ...


class QuoteNotifier(Protocol):
    async def send_quote_confirmation(self, quote: Quote) -> None: ...


@dataclass(slots=True)
class SubmissionResult:
    quote: Quote
    record: dict
    warnings: list[str] = field(default_factory=list)


class QuoteSubmissionService:
    """Orchestrates one quote submission.

    Only validation and persistence failures reach the caller. Once the quote
    is stored, calendar booking and the confirmation email are attempted
    independently and their failures become warnings; the stored quote is
    never rolled back.
    """

    def __init__(
        self,
        catalog: ServiceCatalog | Callable[[], ServiceCatalog],
        repository: QuoteStore,
        resolver: DistanceResolver | None = None,
        slot_engine: SlotAvailabilityEngine | None = None,
        calendar: CalendarCollaborator | None = None,
        notifier: QuoteNotifier | None = None,
    ) -> None:
        self._catalog = catalog
        self.repository = repository
        self.resolver = resolver or DistanceResolver()
        self.slot_engine = slot_engine or SlotAvailabilityEngine(calendar=calendar)
        self._calendar = calendar
        self._notifier = notifier

    def catalog(self) -> ServiceCatalog:
        if isinstance(self._catalog, ServiceCatalog):
            return self._catalog
        return self._catalog()

    def _get_calendar(self) -> CalendarCollaborator:
        if self._calendar is None:
            self._calendar = GoogleCalendarClient()
        return self._calendar

    def _get_notifier(self) -> QuoteNotifier:
        if self._notifier is None:
            self._notifier = HttpEmailNotifier()
        return self._notifier

    async def _book_appointment(self, quote: Quote) -> str | None:
        try:
            await self._get_calendar().create_appointment(build_appointment(quote))
        except CalendarNotConfiguredError as e:
            logger.warning(f"Calendar not configured, quote {quote.quote_id} was not booked: {e}")
            return WARN_CALENDAR
        except Exception as e:
            logger.exception(f"Calendar booking failed for quote {quote.quote_id}: {e}")
            return WARN_CALENDAR
        return None

    async def _send_confirmation(self, quote: Quote) -> str | None:
        try:
            await self._get_notifier().send_quote_confirmation(quote)
        except EmailNotConfiguredError as e:
            logger.warning(f"Email not configured, no confirmation sent for quote {quote.quote_id}: {e}")
            return WARN_EMAIL
        except Exception as e:
            logger.exception(f"Confirmation email failed for quote {quote.quote_id}: {e}")
            return WARN_EMAIL
        return None

    async def submit(self, submission: QuoteSubmission, now: datetime | None = None) -> SubmissionResult:
        distance_km = submission.distance_km
        if distance_km is None:
            distance_km = await self.resolver.resolve_distance_km(submission.customer.address)

        validate_submission(submission, distance_km, self.slot_engine, now)
        start = appointment_start(submission, self.slot_engine)

        quote = build_quote(submission, self.catalog(), distance_km, start)
        try:
            record = await self.repository.create(quote)
        except Exception as e:
            logger.exception(f"Failed to store quote {quote.quote_id}")
            raise QuotePersistenceError(f"The estimate could not be saved: {e}") from e

        warnings = []
        for step in (self._book_appointment, self._send_confirmation):
            warning = await step(quote)
            if warning:
                warnings.append(warning)
        logger.info(f"Quote {quote.quote_id} submitted ({len(warnings)} warnings)")
        return SubmissionResult(quote=quote, record=record, warnings=warnings)
