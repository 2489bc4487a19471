"""Retry loop shared by the outbound HTTP clients."""

from __future__ import annotations

import asyncio
import logging

import httpx

logger = logging.getLogger(__name__)


def _is_retryable(response: httpx.Response) -> bool:
    return response.status_code >= 500 or response.status_code == 429


async def send_with_retries(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    max_retries: int,
    backoff_seconds: float,
    label: str,
    **kwargs,
) -> httpx.Response:
    """Send a request, retrying server errors, 429s and network failures.

    Server errors back off linearly and network errors back off
    exponentially. Other 4xx responses raise ``httpx.HTTPStatusError`` on the
    first attempt, since they will not improve on retry.
    """
    attempt = 0
    while True:
        try:
            response = await client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            if not _is_retryable(e.response):
                raise
            attempt += 1
            if attempt > max_retries:
                raise
            wait_time = backoff_seconds * attempt
            logger.debug(f"{label} returned {e.response.status_code}, retrying in {wait_time:.1f}s (attempt {attempt}/{max_retries})")
            await asyncio.sleep(wait_time)
        except httpx.TransportError as e:
            attempt += 1
            if attempt > max_retries:
                raise
            wait_time = backoff_seconds * (2 ** (attempt - 1))
            logger.debug(f"{label} network error, retrying in {wait_time:.1f}s (attempt {attempt}/{max_retries}): {e}")
            await asyncio.sleep(wait_time)
