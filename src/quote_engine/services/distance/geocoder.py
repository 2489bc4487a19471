"""Geocoder - Convert free-text addresses to coordinates using Nominatim."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import settings
from ...models.domain import Coordinate
from ..http_retry import send_with_retries

logger = logging.getLogger(__name__)


class NominatimGeocoder:
    """Geocoder backed by the OpenStreetMap Nominatim search API.

    Every request carries a ``User-Agent`` identifying this application, as
    required by the Nominatim usage policy. Returns ``None`` when the address
    cannot be resolved; transport errors propagate to the caller.
    """

    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        country_codes: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.geocoder_url
        self.user_agent = user_agent or settings.geocoder_user_agent
        self.country_codes = country_codes if country_codes is not None else settings.geocoder_country_codes
        self.timeout = timeout if timeout is not None else settings.geocoder_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.http_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.http_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        )

    def _params(self, address: str) -> dict[str, Any]:
        params: dict[str, Any] = {
            "format": "json",
            "q": address,
            "limit": 1,
            "addressdetails": 1,
            "dedupe": 1,
        }
        if self.country_codes:
            params["countrycodes"] = self.country_codes
        return params

    async def _search(self, address: str) -> list[dict]:
        async with self._get_client() as client:
            response = await send_with_retries(
                client,
                "GET",
                self.base_url,
                params=self._params(address),
                max_retries=self.max_retries,
                backoff_seconds=self.backoff_seconds,
                label="Geocoder",
            )
            data = response.json()
        if not isinstance(data, list):
            raise ValueError("Geocoder response is not a list of results.")
        return data

    async def geocode(self, address: str) -> Coordinate | None:
        """Resolve ``address`` to a coordinate, or None if nothing matches."""
        if not address or not address.strip():
            return None

        results = await self._search(address.strip())
        if not results:
            logger.info(f"Geocoder found no match for address '{address}'")
            return None

        first = results[0]
        try:
            return Coordinate(latitude=float(first["lat"]), longitude=float(first["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Geocoder returned a malformed result for '{address}': {e}")
            return None


async def check_health(geocoder: NominatimGeocoder | None = None) -> bool:
    """Check the geocoder by resolving a well-known address."""
    geocoder = geocoder or NominatimGeocoder()
    try:
        return await geocoder.geocode("Montréal, QC") is not None
    except (httpx.HTTPError, ValueError):
        return False
