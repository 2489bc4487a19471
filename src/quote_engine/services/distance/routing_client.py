"""HTTP client for the driving-distance (Distance Matrix) service."""

from __future__ import annotations

import logging

import httpx

from ...config import settings
from ...models.domain import Coordinate
from ..http_retry import send_with_retries

logger = logging.getLogger(__name__)


class RoutingNotConfiguredError(RuntimeError):
    """Raised when no routing API credential is configured."""


class DistanceMatrixClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.routing_api_key
        if not self.api_key:
            raise RoutingNotConfiguredError("Routing API key is not configured.")
        self.base_url = base_url or settings.routing_api_url
        self.timeout = timeout if timeout is not None else settings.routing_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.http_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.http_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            transport=self._transport,
        )

    async def _request(self, params: dict) -> object:
        async with self._get_client() as client:
            response = await send_with_retries(
                client,
                "GET",
                self.base_url,
                params=params,
                max_retries=self.max_retries,
                backoff_seconds=self.backoff_seconds,
                label="Routing API",
            )
            return response.json()

    async def driving_distance_km(self, origin: Coordinate, destination: str) -> float | None:
        """Return the driving distance in km rounded to 2 decimals, or None when unavailable.

        A response is accepted only when both the top-level status and the
        single matrix element status are ``OK``.
        """
        params = {
            "origins": f"{origin.latitude},{origin.longitude}",
            "destinations": destination,
            "units": "metric",
            "mode": "driving",
            "key": self.api_key,
        }
        data = await self._request(params)

        if not isinstance(data, dict):
            logger.warning(f"Routing API returned a {type(data).__name__} instead of an object")
            return None
        if data.get("status") != "OK":
            logger.info(f"Routing API returned status {data.get('status')!r}")
            return None
        try:
            element = data["rows"][0]["elements"][0]
            if not isinstance(element, dict):
                logger.warning(f"Malformed routing API element for '{destination}': {element!r}")
                return None
            if element.get("status") != "OK":
                logger.info(f"Routing API element status {element.get('status')!r} for '{destination}'")
                return None
            meters = float(element["distance"]["value"])
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning(f"Malformed routing API response: {e}")
            return None
        if meters < 0:
            return None
        return round(meters / 1000, 2)
