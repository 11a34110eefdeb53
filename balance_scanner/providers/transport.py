"""
HTTP transport for provider lookups.

One GET per call, bounded by the caller's timeout, no retries. Every failure
mode (timeout, connection error, HTTP error status, rate limit, non-JSON body)
is raised as ProviderError so the dispatcher has a single thing to catch.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from .._version import __version__
from ..core.errors import ProviderError, ProviderResponseError

logger = logging.getLogger(__name__)

USER_AGENT = f"balance-scanner/{__version__}"


class RequestsTransport:
    """Fetch JSON over a shared requests.Session (connection pooling across lookups)."""

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", USER_AGENT)
        self._session.headers.setdefault("Accept", "application/json")

    def get_json(self, provider_name: str, url: str, timeout: float) -> Any:
        logger.debug("GET %s (%s, timeout=%.1fs)", url, provider_name, timeout)
        try:
            resp = self._session.get(url, timeout=timeout)
        except requests.Timeout as exc:
            raise ProviderError(provider_name, f"timeout after {timeout}s") from exc
        except requests.RequestException as exc:
            raise ProviderError(provider_name, f"{type(exc).__name__}: {exc}") from exc

        if resp.status_code == 429:
            raise ProviderError(provider_name, "rate limit (HTTP 429)")
        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            raise ProviderError(provider_name, f"HTTP {resp.status_code}") from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise ProviderResponseError(provider_name, "response is not valid JSON") from exc

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> RequestsTransport:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
