"""
carbonmix/sources.py

Source adapter boundary: turns a (range, source) request into a
``SeriesBundle``.

Responsibilities
----------------
- Define the closed set of data sources (mock, EirGrid, ENTSO-E) and
  dispatch on it in one place.
- Apply the error policy:
  * configuration problems (disabled source, missing credential) and
    sources without a working data path are fatal and propagate;
  * transient live-fetch failures (bad status, malformed payload, network
    failure, timeout) are logged and replaced by synthetic data.
- Sequence requests so a result for a superseded request is discarded.

Notes
-----
- The adapter holds only its configuration and an optional httpx transport;
  every request derives its own window and series, so concurrent requests
  do not interfere.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum

import httpx

from .client import fetch_generation
from .config import Config, SourceSettings
from .errors import ConfigurationError, SourceNotImplementedError, TransientFetchError
from .series import SeriesBundle, derive_series, generate_synthetic
from .timeaxis import RangeSelector, as_utc, window
from .validate import validate_payload

LOGGER = logging.getLogger(__name__)


class Source(str, Enum):
    """Data source selectable by the caller."""

    MOCK = "mock"
    EIRGRID = "eirgrid"
    ENTSOE = "entsoe"

    @property
    def label(self) -> str:
        return SOURCE_LABELS[self]

    @classmethod
    def parse(cls, value: Source | str) -> Source:
        """Return the source for an identifier or display label.

        Raises:
            ConfigurationError: If ``value`` names no known source.
        """
        if isinstance(value, cls):
            return value
        for source in cls:
            if value in (source.value, source.label):
                return source
        raise ConfigurationError(f"Unknown data source {value!r}")


SOURCE_LABELS = {
    Source.MOCK: "Mock (offline)",
    Source.EIRGRID: "EirGrid (real-time)",
    Source.ENTSOE: "ENTSO-E (real-time)",
}


class SourceAdapter:
    """Produce intensity and generation-mix series for a requested range.

    Args:
        config: Live source settings. Defaults to ``Config()``.
        transport: Optional httpx transport used for live requests.
    """

    def __init__(
        self,
        config: Config | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or Config()
        self.transport = transport

    async def generate(
        self,
        rng: RangeSelector | str,
        source: Source | str = Source.MOCK,
        now: datetime | None = None,
    ) -> SeriesBundle:
        """Return both series for ``rng`` from ``source``.

        Args:
            rng: Range selector or its string value.
            source: Source, identifier or display label.
            now: Reference end of the window. Defaults to the current UTC time.

        Raises:
            ConfigurationError: If the source is unknown, disabled, or lacks a
                required credential.
            SourceNotImplementedError: If the source has no data path yet.
        """
        rng = RangeSelector.parse(rng)
        source = Source.parse(source)
        now = as_utc(now) if now is not None else datetime.now(timezone.utc)

        if source is Source.MOCK:
            return self._synthetic(rng, source, now)
        if source is Source.EIRGRID:
            return await self._eirgrid(rng, now)
        return self._entsoe()

    def _synthetic(
        self,
        rng: RangeSelector,
        source: Source,
        now: datetime,
        fallback_error: Exception | None = None,
    ) -> SeriesBundle:
        intensity, generation = generate_synthetic(rng, now)
        return SeriesBundle(
            intensity=intensity,
            generation=generation,
            source=source,
            simulated=True,
            fallback_error=fallback_error,
        )

    def _check_enabled(self, source: Source, settings: SourceSettings):
        if not settings.enabled:
            LOGGER.error("%s requested but disabled", source.label)
            raise ConfigurationError(f"{source.label} integration is disabled")
        if settings.missing_credential():
            LOGGER.error("%s requested without an API key", source.label)
            raise ConfigurationError(f"{source.label} API key required")

    async def _eirgrid(self, rng: RangeSelector, now: datetime) -> SeriesBundle:
        settings = self.config.eirgrid
        self._check_enabled(Source.EIRGRID, settings)

        start, end = window(rng, now)
        try:
            data = await fetch_generation(settings, start, end, transport=self.transport)
            samples = validate_payload(data, fetched_at=now)
        except TransientFetchError as exc:
            LOGGER.warning(
                "Failed to fetch EirGrid data (%s: %s); falling back to simulation",
                type(exc).__name__,
                exc,
            )
            return self._synthetic(rng, Source.EIRGRID, now, fallback_error=exc)

        LOGGER.info("Fetched %d EirGrid rows for %s", len(samples), rng.value)
        intensity, generation = derive_series(samples)
        return SeriesBundle(
            intensity=intensity,
            generation=generation,
            source=Source.EIRGRID,
            simulated=False,
        )

    def _entsoe(self) -> SeriesBundle:
        self._check_enabled(Source.ENTSOE, self.config.entsoe)
        LOGGER.error("ENTSO-E data processing requested but not implemented")
        raise SourceNotImplementedError("ENTSO-E data processing not yet implemented")


class RequestSequencer:
    """Discard results of requests superseded by a newer one.

    Each ``submit`` takes a ticket before awaiting the adapter. When the
    result arrives, it is returned only if no later ``submit`` has been made
    in the meantime; otherwise ``None`` is returned and the caller keeps the
    state of the newer request.
    """

    def __init__(self):
        self._latest = 0

    def next_ticket(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, ticket: int) -> bool:
        return ticket == self._latest

    async def submit(
        self,
        adapter: SourceAdapter,
        rng: RangeSelector | str,
        source: Source | str = Source.MOCK,
        now: datetime | None = None,
    ) -> SeriesBundle | None:
        ticket = self.next_ticket()
        bundle = await adapter.generate(rng, source, now=now)
        if not self.is_current(ticket):
            LOGGER.info("Discarding stale result for %s (request %d)", rng, ticket)
            return None
        return bundle
