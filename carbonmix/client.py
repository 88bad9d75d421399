"""
carbonmix/client.py

A minimal async client for the EirGrid generation output report, used by the
source adapter to fetch live generation rows for a UTC time window.

Responsibilities
----------------
- Build the source-specific request URL for a [start, end] window.
- Perform one HTTP GET with a custom User-Agent, cancelled after the
  configured timeout.
- Translate every failure into a ``TransientFetchError`` subclass so the
  adapter can apply its fallback policy, keeping timeouts distinguishable.

Notes
-----
- No retries: a failed fetch is recovered by the adapter's synthetic
  fallback, and a request must never outlive its timeout.
- ``transport`` lets tests substitute ``httpx.MockTransport``.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any

import httpx

from .config import SourceSettings
from .errors import (
    ConfigurationError,
    FetchTimeoutError,
    MalformedPayloadError,
    TransientFetchError,
)
from .timeaxis import iso

LOGGER = logging.getLogger(__name__)

USER_AGENT = "Ireland-Carbon-Viz/1.0"


def build_url(settings: SourceSettings, start: datetime, end: datetime) -> str:
    """Return the report URL covering ``[start, end]``.

    Example:
        >>> build_url(settings, start, end)
        'https://.../All-Island%20Generation%20Output%20Report%20-%202024-01-01T00:00:00+00:00/...'
    """
    return f"{settings.base_url}{settings.path}{iso(start)}/{iso(end)}"


async def _get_json(
    url: str,
    headers: dict[str, str],
    timeout: float,
    transport: httpx.AsyncBaseTransport | None,
) -> Any:
    async with httpx.AsyncClient(transport=transport, timeout=timeout) as cx:
        r = await cx.get(url, headers=headers)
        if not r.is_success:
            raise TransientFetchError(
                f"EirGrid API error: {r.status_code} {r.reason_phrase}",
                status_code=r.status_code,
            )
        try:
            return r.json()
        except ValueError as exc:
            raise MalformedPayloadError("EirGrid API returned a non-JSON body") from exc


async def fetch_generation(
    settings: SourceSettings,
    start: datetime,
    end: datetime,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """Fetch the decoded JSON generation report for ``[start, end]``.

    Args:
        settings: EirGrid source settings (URL, timeout).
        start: Inclusive lower bound of the window.
        end: Inclusive upper bound of the window.
        transport: Optional httpx transport, for tests.

    Returns:
        The decoded JSON body. Its shape is checked by the caller.

    Raises:
        FetchTimeoutError: If the request did not complete within
            ``settings.timeout_ms``.
        TransientFetchError: On a non-success status, a non-JSON body, or a
            network-level failure.
        ConfigurationError: If the configured URL cannot be requested.
    """
    url = build_url(settings, start, end)
    headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
    LOGGER.debug("GET %s (timeout %d ms)", url, settings.timeout_ms)

    try:
        return await asyncio.wait_for(
            _get_json(url, headers, settings.timeout_s, transport), settings.timeout_s
        )
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        raise FetchTimeoutError(
            f"EirGrid API request timed out after {settings.timeout_ms} ms"
        ) from exc
    except httpx.InvalidURL as exc:
        raise ConfigurationError(f"Invalid EirGrid request URL {url!r}: {exc}") from exc
    except httpx.HTTPError as exc:
        raise TransientFetchError(f"EirGrid API request failed: {exc}") from exc
