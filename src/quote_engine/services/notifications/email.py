"""Quote confirmation emails sent through an HTTP email API."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from ...config import settings
from ...models.domain import Quote

logger = logging.getLogger(__name__)


class EmailNotConfiguredError(RuntimeError):
    """Raised when no email API endpoint is configured."""


@dataclass(frozen=True, slots=True)
class EmailMessage:
    to: str
    subject: str
    text: str


def _money(value: float) -> str:
    return f"{value:.2f} $ {settings.currency}"


def render_quote_email(quote: Quote) -> EmailMessage:
    """Build the confirmation message from a persisted quote."""
    lines = [
        f"Hello {quote.customer.name},",
        "",
        f"Thank you for your request. Here is your estimate {quote.quote_id}.",
        "",
        "Services:",
    ]
    for service in quote.services:
        if service.base_selected:
            lines.append(f"  - {service.service_name} (base): {_money(service.base_price)}")
        elif not service.options:
            lines.append(f"  - {service.service_name}")
        for option in service.options:
            lines.append(f"      {option.name} x{option.quantity}: {_money(option.total)}")
    lines.extend(
        [
            "",
            f"Service address: {quote.customer.address}",
            f"Distance: {quote.distance_km:.2f} km",
            f"Service date: {quote.preferred_date.isoformat()} ({quote.time_slot})",
            "",
            f"Subtotal: {_money(quote.subtotal)}",
            f"Travel: {_money(quote.travel_cost)}",
            f"Taxes: {_money(quote.taxes)}",
            f"Estimated total: {_money(quote.total)}",
        ]
    )
    return EmailMessage(
        to=quote.customer.email,
        subject=f"Your estimate - {quote.quote_id}",
        text="\n".join(lines),
    )


class HttpEmailNotifier:
    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        sender: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_url = api_url or settings.email_api_url
        if not self.api_url:
            raise EmailNotConfiguredError("Email API URL is not configured.")
        self.api_key = api_key or settings.email_api_key
        self.sender = sender or settings.email_sender
        self.timeout = timeout if timeout is not None else settings.email_timeout_seconds
        self._transport = transport

    async def send(self, message: EmailMessage) -> None:
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        payload = {
            "from": self.sender,
            "to": [message.to],
            "subject": message.subject,
            "text": message.text,
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.api_url, json=payload, headers=headers)
            response.raise_for_status()
        logger.info(f"Sent '{message.subject}' to {message.to}")

    async def send_quote_confirmation(self, quote: Quote) -> None:
        await self.send(render_quote_email(quote))
