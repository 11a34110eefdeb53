"""
Push notification sink.

Fire-and-forget POST of a short hit summary to a bearer-token-authenticated
endpoint. Without a token the sink only warns. Delivery failures are logged
and never raised or retried.
"""
from __future__ import annotations

import logging
from typing import Optional

import requests

from .base import HitRecord

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_S = 10.0
NOTIFY_TITLE = "Balance found on watched address"


class PushNotifier:
    """POST {title, content} with Authorization: Bearer <token>."""

    def __init__(
        self,
        token: Optional[str],
        endpoint: str,
        *,
        session: Optional[requests.Session] = None,
        timeout_s: float = HTTP_TIMEOUT_S,
    ) -> None:
        self._token = token
        self._endpoint = endpoint
        self._session = session or requests.Session()
        self._timeout_s = timeout_s

    @property
    def enabled(self) -> bool:
        return bool(self._token)

    def record(self, hit: HitRecord) -> None:
        self.send(NOTIFY_TITLE, hit.summary())

    def send(self, title: str, content: str) -> bool:
        """Deliver one message. Returns True on HTTP success, False otherwise."""
        if not self._token:
            logger.warning("Push token not set (BALANCE_SCANNER_PUSH_TOKEN); skipping notification")
            return False
        try:
            resp = self._session.post(
                self._endpoint,
                json={"title": title, "content": content, "template": "txt"},
                headers={"Authorization": f"Bearer {self._token}"},
                timeout=self._timeout_s,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Push notification failed: %s", exc)
            return False
        logger.info("Push notification sent")
        return True

    def close(self) -> None:
        self._session.close()
