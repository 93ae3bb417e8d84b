# src/mindful_remind/backend/store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any

from ..core.errors import Forbidden
from ..core.models import ROOT_ADMIN_ID, ROOT_ADMIN_USERNAME, Role

logger = logging.getLogger(__name__)

_REMINDER_COLUMNS = (
    "id",
    "userId",
    "title",
    "description",
    "dueDate",
    "priority",
    "category",
    "completed",
    "createdAt",
)


class RecordStore:
    """
    Authoritative SQLite store for users and reminders.

    - reminders.userId references users.id with ON DELETE CASCADE
      (foreign_keys is enabled on every connection)
    - the root admin is bootstrapped on start and can never be deleted
    - `completed` is stored as 0/1 and returned as a bool

    Thread-safety:
    - each method opens its own SQLite connection; SQLite serializes writers
    """

    def __init__(self, db_path: str | Path = "database.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        self._bootstrap_admin()
        logger.info("RecordStore ready db=%s users=%s", self._db_path, len(self.list_users()))

    def close(self) -> None:
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    username TEXT UNIQUE,
                    role TEXT,
                    createdAt INTEGER
                );
                CREATE TABLE IF NOT EXISTS reminders (
                    id TEXT PRIMARY KEY,
                    userId TEXT,
                    title TEXT,
                    description TEXT,
                    dueDate TEXT,
                    priority TEXT,
                    category TEXT,
                    completed INTEGER,
                    createdAt INTEGER,
                    FOREIGN KEY(userId) REFERENCES users(id) ON DELETE CASCADE
                );
                CREATE INDEX IF NOT EXISTS idx_reminders_user ON reminders(userId);
                """
            )
            conn.commit()
        finally:
            conn.close()

    def _bootstrap_admin(self) -> None:
        conn = self._get_conn()
        try:
            exists = conn.execute("SELECT id FROM users WHERE id = ?", (ROOT_ADMIN_ID,)).fetchone()
            if exists:
                return
            conn.execute(
                "INSERT INTO users (id, username, role, createdAt) VALUES (?, ?, ?, ?)",
                (ROOT_ADMIN_ID, ROOT_ADMIN_USERNAME, Role.ADMIN.value, int(time.time() * 1000)),
            )
            conn.commit()
            logger.info("Admin account bootstrapped.")
        finally:
            conn.close()

    @staticmethod
    def _row_to_reminder(row: sqlite3.Row) -> dict[str, Any]:
        rec = {k: row[k] for k in _REMINDER_COLUMNS}
        rec["completed"] = bool(rec["completed"])
        return rec

    # ---- users ----

    def list_users(self) -> list[dict[str, Any]]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT id, username, role, createdAt FROM users").fetchall()
            return [dict(r) for r in rows]
        finally:
            conn.close()

    def insert_user(self, *, id: str, username: str, role: str, createdAt: int | None) -> None:
        """Insert-or-ignore keyed by id (a username clash is ignored the same way)."""
        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT OR IGNORE INTO users (id, username, role, createdAt) VALUES (?, ?, ?, ?)",
                (id, username, role, createdAt),
            )
            conn.commit()
        finally:
            conn.close()

    def delete_user(self, user_id: str) -> None:
        if user_id == ROOT_ADMIN_ID:
            raise Forbidden("Root admin locked")
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            conn.commit()
            logger.info("User deleted id=%s (reminders cascaded)", user_id)
        finally:
            conn.close()

    # ---- reminders ----

    def list_reminders(self, user_id: str) -> list[dict[str, Any]]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM reminders WHERE userId = ?", (user_id,)).fetchall()
            return [self._row_to_reminder(r) for r in rows]
        finally:
            conn.close()

    def list_all_reminders(self) -> list[dict[str, Any]]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM reminders").fetchall()
            return [self._row_to_reminder(r) for r in rows]
        finally:
            conn.close()

    def insert_reminder(self, rec: dict[str, Any]) -> None:
        """Plain insert: a duplicate id or an unknown userId raises sqlite3.IntegrityError."""
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO reminders (
                    id, userId, title, description, dueDate,
                    priority, category, completed, createdAt
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    rec["id"],
                    rec["userId"],
                    rec.get("title"),
                    rec.get("description"),
                    rec.get("dueDate"),
                    rec.get("priority"),
                    rec.get("category"),
                    1 if rec.get("completed") else 0,
                    rec.get("createdAt"),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def update_reminder(self, reminder_id: str, rec: dict[str, Any]) -> int:
        """Returns the number of rows changed (0 for an unknown id)."""
        conn = self._get_conn()
        try:
            cur = conn.execute(
                """
                UPDATE reminders
                SET title = ?, description = ?, dueDate = ?,
                    priority = ?, category = ?, completed = ?
                WHERE id = ?
                """,
                (
                    rec.get("title"),
                    rec.get("description"),
                    rec.get("dueDate"),
                    rec.get("priority"),
                    rec.get("category"),
                    1 if rec.get("completed") else 0,
                    reminder_id,
                ),
            )
            conn.commit()
            return cur.rowcount
        finally:
            conn.close()

    def delete_reminder(self, reminder_id: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM reminders WHERE id = ?", (reminder_id,))
            conn.commit()
        finally:
            conn.close()
