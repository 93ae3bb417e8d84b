# src/mindful_remind/sync/mirror.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any

from ..core.ports import Record

logger = logging.getLogger(__name__)

AUTH_KEY = "mindful_remind_auth"
LOCAL_REMINDERS_KEY = "mindful_remind_tasks_local"
LOCAL_USERS_KEY = "mindful_remind_users_local"


class LocalMirror:
    """
    SQLite-backed key/value mirror of the client's best-known records.

    Each key holds one JSON document:
    - collections (users, reminders) are JSON arrays, replaced wholesale on write
    - single values (the session) are JSON objects

    Reads never fail: a missing key, undecodable JSON or a non-list collection
    all read as an empty collection.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "mirror.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("LocalMirror ready db=%s", self._db_path)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def _load_raw(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return row["value"] if row else None
        finally:
            conn.close()

    def _store_raw(self, key: str, raw: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, raw, time.time()),
            )
            conn.commit()
        finally:
            conn.close()

    # ---- collections ----

    def read(self, collection: str) -> list[Record]:
        try:
            raw = self._load_raw(collection)
        except sqlite3.Error:
            logger.warning("LocalMirror read failed key=%s; treating as empty", collection, exc_info=True)
            return []
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("LocalMirror: corrupt snapshot key=%s; treating as empty", collection)
            return []
        if not isinstance(data, list):
            return []
        return [r for r in data if isinstance(r, dict) and "id" in r]

    def write(self, collection: str, records: list[Record]) -> None:
        self._store_raw(collection, json.dumps(list(records), ensure_ascii=False))
        logger.debug("LocalMirror wrote key=%s n=%d", collection, len(records))

    # ---- single values ----

    def get_value(self, key: str) -> Any | None:
        try:
            raw = self._load_raw(key)
            return json.loads(raw) if raw else None
        except (sqlite3.Error, ValueError):
            logger.warning("LocalMirror: unreadable value key=%s", key)
            return None

    def set_value(self, key: str, value: Any) -> None:
        self._store_raw(key, json.dumps(value, ensure_ascii=False))

    def delete_value(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()
