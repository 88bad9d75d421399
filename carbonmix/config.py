"""
carbonmix/config.py

Configuration for the live data sources.

Responsibilities
----------------
- Define ``SourceSettings`` (per live source) and ``Config`` (all sources)
  as pydantic models, so invalid values such as a non-positive timeout are
  rejected when the configuration is built.
- Provide ``load_config`` to build a ``Config`` from environment variables.

Environment Variables
---------------------
EIRGRID_BASE_URL, ENTSOE_BASE_URL
    Base URL of each live source.
EIRGRID_TIMEOUT_MS, ENTSOE_TIMEOUT_MS
    Request timeout in milliseconds.
ENABLE_EIRGRID, ENABLE_ENTSOE
    "true"/"false" feature flags. EirGrid is enabled by default, ENTSO-E is not.
EIRGRID_API_KEY, ENTSOE_API_KEY
    Credentials. ENTSO-E requires one whenever it is enabled.

Notes
-----
- Library code never reads the environment itself: callers build a
  ``Config`` (directly or via ``load_config``) and pass it to the
  ``SourceAdapter``. Tests construct configs inline.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

import httpx
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError

EIRGRID_BASE_URL = "https://www.eirgridgroup.com/site-files/library/EirGrid"
EIRGRID_GENERATION_PATH = "/All-Island%20Generation%20Output%20Report%20-%20"
ENTSOE_BASE_URL = "https://transparency.entsoe.eu/api"

TRUTHY = {"1", "true", "yes", "on"}


class SourceSettings(BaseModel):
    """Settings for one live source.

    Attributes:
        base_url: Root URL of the source's API.
        path: Endpoint path appended to ``base_url``.
        timeout_ms: Cancel the request after this many milliseconds.
        enabled: Feature flag. Requesting a disabled source is an error.
        api_key: Credential, if the source uses one.
        requires_api_key: Whether an enabled source without ``api_key`` is
            misconfigured.
    """

    base_url: str
    path: str = ""
    timeout_ms: int = Field(gt=0)
    enabled: bool = True
    api_key: str | None = None
    requires_api_key: bool = False

    @field_validator("base_url")
    @classmethod
    def check_base_url(cls, v: str) -> str:
        """Reject base URLs httpx cannot request, e.g. a non-numeric port."""
        try:
            url = httpx.URL(v)
        except httpx.InvalidURL as exc:
            raise ValueError(f"Invalid base URL {v!r}: {exc}") from None
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"Base URL must be an absolute http(s) URL, got {v!r}")
        return v

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000

    def missing_credential(self) -> bool:
        return self.requires_api_key and not self.api_key


class Config(BaseModel):
    eirgrid: SourceSettings = SourceSettings(
        base_url=EIRGRID_BASE_URL,
        path=EIRGRID_GENERATION_PATH,
        timeout_ms=10_000,
    )
    entsoe: SourceSettings = SourceSettings(
        base_url=ENTSOE_BASE_URL,
        timeout_ms=15_000,
        enabled=False,
        requires_api_key=True,
    )


def _flag(value: str | None, default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in TRUTHY


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Build a ``Config`` from environment variables.

    Args:
        environ: Mapping to read from. When omitted, ``.env`` is loaded into
            the process environment and ``os.environ`` is used.

    Returns:
        Config: Defaults overridden by any variables that are set.

    Raises:
        ConfigurationError: If a value is invalid, e.g. a non-numeric or
            non-positive timeout, or a base URL httpx cannot request.
    """
    if environ is None:
        # Load `.env` for local development so shells need not export variables.
        load_dotenv()
        environ = os.environ

    defaults = Config()
    sources = {}
    for name, prefix in (("eirgrid", "EIRGRID"), ("entsoe", "ENTSOE")):
        base: SourceSettings = getattr(defaults, name)
        try:
            sources[name] = SourceSettings(
                base_url=environ.get(f"{prefix}_BASE_URL") or base.base_url,
                path=base.path,
                timeout_ms=environ.get(f"{prefix}_TIMEOUT_MS") or base.timeout_ms,
                enabled=_flag(environ.get(f"ENABLE_{prefix}"), base.enabled),
                api_key=environ.get(f"{prefix}_API_KEY") or None,
                requires_api_key=base.requires_api_key,
            )
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid {prefix} settings: {exc}") from exc
    return Config(**sources)
