# src/mindful_remind/sync/gateway.py

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..core.errors import Forbidden, RemoteUnavailable
from ..core.ports import Record

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def _make_timeout(timeout_s: float | None) -> httpx.Timeout:
    """
    None means "no timeout": a hung record store delays the caller instead of
    failing it. A positive value bounds connect/read/write/pool alike.
    """
    return httpx.Timeout(timeout_s)


def _error_text(response: httpx.Response) -> str:
    """Best available error text: JSON {"error": ...}, raw body, then the status line."""
    try:
        data = response.json()
        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
    except ValueError:
        pass
    text = (response.text or "").strip()
    return text or f"HTTP Error {response.status_code}"


class HttpRemoteGateway:
    """
    REST/JSON client of the record store.

    Fail-fast:
    - exactly one attempt per call (no retries)
    - any transport error or non-2xx answer raises RemoteUnavailable
      (403 raises its subclass Forbidden)

    The underlying httpx.Client is injectable; tests pass FastAPI's TestClient.
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        timeout_s: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=base_url,
            timeout=_make_timeout(timeout_s),
            headers={"Content-Type": "application/json"},
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def request(self, method: str, path: str, body: Any | None = None) -> Any:
        method = method.upper()
        try:
            response = self._client.request(method, path, json=body)
        except httpx.HTTPError as e:
            logger.debug("Remote %s %s transport error: %s", method, path, e)
            raise RemoteUnavailable(str(e) or e.__class__.__name__) from e

        if response.status_code == 403:
            raise Forbidden(_error_text(response))

        if not response.is_success:
            raise RemoteUnavailable(_error_text(response), status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise RemoteUnavailable(f"Invalid JSON from {method} {path}") from e

    # ---- typed helpers (one per route) ----

    def fetch_users(self) -> list[Record]:
        return self._expect_list(self.request("GET", f"{API_PREFIX}/users"))

    def push_user(self, record: Record) -> None:
        self.request("POST", f"{API_PREFIX}/users", record)

    def remove_user(self, user_id: str) -> None:
        self.request("DELETE", f"{API_PREFIX}/users/{quote(user_id, safe='')}")

    def fetch_reminders(self, user_id: str | None = None) -> list[Record]:
        if user_id:
            path = f"{API_PREFIX}/reminders?userId={quote(user_id, safe='')}"
        else:
            path = f"{API_PREFIX}/reminders/all"
        return self._expect_list(self.request("GET", path))

    def push_reminder(self, record: Record) -> None:
        self.request("POST", f"{API_PREFIX}/reminders", record)

    def put_reminder(self, record: Record) -> bool:
        """False when the store answered but had no reminder with that id."""
        data = self.request("PUT", f"{API_PREFIX}/reminders/{quote(str(record['id']), safe='')}", record)
        return not (isinstance(data, dict) and data.get("changes") == 0)

    def remove_reminder(self, reminder_id: str) -> None:
        self.request("DELETE", f"{API_PREFIX}/reminders/{quote(reminder_id, safe='')}")

    @staticmethod
    def _expect_list(data: Any) -> list[Record]:
        if not isinstance(data, list):
            raise RemoteUnavailable("Expected a JSON array from the record store")
        return [r for r in data if isinstance(r, dict) and "id" in r]
