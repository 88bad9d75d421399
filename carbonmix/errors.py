"""
carbonmix/errors.py

Error kinds raised at the source adapter boundary.

Conventions
-----------
- ``ConfigurationError`` and ``SourceNotImplementedError`` are fatal: they are
  surfaced to the caller and never trigger a fallback.
- ``TransientFetchError`` (and its subclasses) describe runtime failures of a
  live fetch; the adapter recovers from them by returning synthetic data.
- ``FetchTimeoutError`` is kept distinct from other transient failures so
  logs and tests can tell a cancelled request from a failed one.
"""

from __future__ import annotations


class CarbonMixError(Exception):
    """Base class for all carbonmix errors."""


class ConfigurationError(CarbonMixError):
    """A source was requested that is disabled, unknown, or missing a credential."""


class SourceNotImplementedError(CarbonMixError, NotImplementedError):
    """A source variant exists but has no working data path yet."""


class TransientFetchError(CarbonMixError):
    """A live fetch failed in a way that warrants falling back to synthetic data.

    Attributes:
        status_code: HTTP status of the failed response, when there was one.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedPayloadError(TransientFetchError):
    """The live endpoint answered, but not with a usable JSON array."""


class FetchTimeoutError(TransientFetchError, TimeoutError):
    """The live request exceeded its configured duration and was cancelled."""
