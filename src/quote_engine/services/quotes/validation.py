"""Form-validity rules checked before a quote submission is attempted."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ...config import settings
from ...models.domain import CustomerInfo, SelectedService
from ..scheduling.slots import SlotAvailabilityEngine, find_window
from .errors import QuoteValidationError

MSG_NO_SERVICE = "Please select at least one service."
MSG_MISSING_FIELD = "Please fill in the {field} field."
MSG_NO_DATE = "Please choose a date and a time slot."
MSG_UNKNOWN_SLOT = "The selected time slot does not exist."
MSG_OUT_OF_RANGE = "Sorry, we do not serve addresses more than {radius:g} km away."
MSG_LEAD_TIME = "Estimates must be requested at least {hours} hours in advance."
MSG_TERMS = "Please accept the terms and conditions."

REQUIRED_CUSTOMER_FIELDS = (
    ("name", "name"),
    ("email", "email"),
    ("phone", "phone"),
    ("address", "address"),
    ("vehicle_info", "vehicle"),
)


@dataclass(frozen=True, slots=True)
class QuoteSubmission:
    customer: CustomerInfo
    services: tuple[SelectedService, ...]
    preferred_date: Optional[date]
    time_slot: str
    accepted_terms: bool
    distance_km: Optional[float] = None
    notes: Optional[str] = None


def appointment_start(submission: QuoteSubmission, engine: SlotAvailabilityEngine) -> datetime | None:
    if submission.preferred_date is None or not submission.time_slot.strip():
        return None
    window = find_window(submission.time_slot, engine.windows)
    if window is None:
        return None
    return engine.localize(submission.preferred_date, window.start)


def submission_errors(
    submission: QuoteSubmission,
    distance_km: float,
    engine: SlotAvailabilityEngine,
    now: datetime | None = None,
    max_radius_km: float | None = None,
) -> list[str]:
    """Return every user-facing problem with the submission, empty when it is valid."""
    max_radius_km = settings.max_service_radius_km if max_radius_km is None else max_radius_km
    errors: list[str] = []

    if not submission.services:
        errors.append(MSG_NO_SERVICE)

    for attribute, label in REQUIRED_CUSTOMER_FIELDS:
        value = getattr(submission.customer, attribute) or ""
        if not value.strip():
            errors.append(MSG_MISSING_FIELD.format(field=label))

    if submission.preferred_date is None or not submission.time_slot.strip():
        errors.append(MSG_NO_DATE)
    else:
        start = appointment_start(submission, engine)
        if start is None:
            errors.append(MSG_UNKNOWN_SLOT)
        elif not engine.meets_lead_time(start, now):
            errors.append(MSG_LEAD_TIME.format(hours=int(engine.lead_time.total_seconds() // 3600)))

    if distance_km > max_radius_km:
        errors.append(MSG_OUT_OF_RANGE.format(radius=max_radius_km))

    if not submission.accepted_terms:
        errors.append(MSG_TERMS)

    return errors


def is_submission_valid(
    submission: QuoteSubmission,
    distance_km: float,
    engine: SlotAvailabilityEngine,
    now: datetime | None = None,
) -> bool:
    return not submission_errors(submission, distance_km, engine, now)


def validate_submission(
    submission: QuoteSubmission,
    distance_km: float,
    engine: SlotAvailabilityEngine,
    now: datetime | None = None,
) -> None:
    errors = submission_errors(submission, distance_km, engine, now)
    if errors:
        raise QuoteValidationError(errors)
