# src/mindful_remind/core/models.py

from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

ROOT_ADMIN_ID = "admin-root-id"
ROOT_ADMIN_USERNAME = "admin"


class Role(StrEnum):
    USER = "user"
    ADMIN = "admin"

    @classmethod
    def from_db(cls, raw: str | None) -> Role:
        if not raw:
            return cls.USER
        try:
            return cls(raw)
        except Exception:
            return cls.USER


class Priority(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"

    @classmethod
    def from_db(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw).upper())
        except Exception:
            return cls.MEDIUM


class Category(StrEnum):
    WORK = "Work"
    PERSONAL = "Personal"
    HEALTH = "Health"
    FINANCE = "Finance"
    OTHERS = "Others"

    @classmethod
    def from_db(cls, raw: str | None) -> Category:
        if not raw:
            return cls.PERSONAL
        wanted = str(raw).strip().lower()
        for c in cls:
            if c.value.lower() == wanted:
                return c
        return cls.PERSONAL


def now_ms() -> int:
    return int(time.time() * 1000)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_id(prefix: str = "", length: int = 7) -> str:
    """Short random base-36 id, e.g. 'u-k3j9x0a'."""
    alphabet = string.ascii_lowercase + string.digits
    return prefix + "".join(random.choices(alphabet, k=length))


def _as_bool(raw: Any) -> bool:
    # The record store transmits `completed` as 0/1.
    if isinstance(raw, str):
        return raw.strip().lower() in {"1", "true", "yes"}
    return bool(raw)


def _as_int(raw: Any, default: int = 0) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


@dataclass(slots=True)
class User:
    id: str
    username: str
    role: Role
    created_at: int

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def matches_username(self, username: str) -> bool:
        return self.username.strip().lower() == (username or "").strip().lower()

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role.value,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, rec: dict[str, Any]) -> User:
        return cls(
            id=str(rec["id"]),
            username=str(rec.get("username") or ""),
            role=Role.from_db(rec.get("role")),
            created_at=_as_int(rec.get("createdAt")),
        )


def root_admin(created_at: int | None = None) -> User:
    return User(
        id=ROOT_ADMIN_ID,
        username=ROOT_ADMIN_USERNAME,
        role=Role.ADMIN,
        created_at=now_ms() if created_at is None else created_at,
    )


@dataclass(slots=True)
class Reminder:
    id: str
    user_id: str
    title: str
    description: str
    due_date: str
    priority: Priority
    category: Category
    completed: bool
    created_at: int

    def toggled(self) -> Reminder:
        return replace(self, completed=not self.completed)

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "description": self.description,
            "dueDate": self.due_date,
            "priority": self.priority.value,
            "category": self.category.value,
            "completed": self.completed,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, rec: dict[str, Any]) -> Reminder:
        return cls(
            id=str(rec["id"]),
            user_id=str(rec.get("userId") or ""),
            title=str(rec.get("title") or ""),
            description=str(rec.get("description") or ""),
            due_date=str(rec.get("dueDate") or ""),
            priority=Priority.from_db(rec.get("priority")),
            category=Category.from_db(rec.get("category")),
            completed=_as_bool(rec.get("completed")),
            created_at=_as_int(rec.get("createdAt")),
        )


def build_reminder(
    *,
    user_id: str,
    title: str,
    description: str = "",
    due_date: str | None = None,
    priority: Priority | str | None = None,
    category: Category | str | None = None,
    reminder_id: str | None = None,
) -> Reminder:
    """
    Build a new Reminder with creation defaults:
    - due_date -> now
    - priority -> MEDIUM, category -> Personal
    - completed -> False, created_at -> now (ms)

    Title is trimmed but not validated here; the sync engine rejects empty titles.
    """
    return Reminder(
        id=reminder_id or new_id(),
        user_id=user_id,
        title=(title or "").strip(),
        description=(description or "").strip(),
        due_date=due_date or now_iso(),
        priority=Priority.from_db(priority),
        category=Category.from_db(category),
        completed=False,
        created_at=now_ms(),
    )
