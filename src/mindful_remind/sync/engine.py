# src/mindful_remind/sync/engine.py

from __future__ import annotations

"""
Sync engine.

Every domain operation goes through one of two shapes:

Write-behind (save_user, add/update/delete_reminder, delete_user):
- apply the mutation to the local mirror, unconditionally
- attempt the same mutation against the record store exactly once
- on RemoteUnavailable: log, keep the local state as the only copy, still succeed

Read-and-reconcile (get_users, get_reminders):
- read the local snapshot
- fetch the remote snapshot
- on success: merge (remote wins by id, local-only records appended), persist, return
- on RemoteUnavailable: return the local snapshot untouched

The engine is the only component that writes the mirror's user/reminder collections.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from ..core.errors import Forbidden, RemoteUnavailable, ValidationError
from ..core.models import Reminder, Role, User, new_id, now_ms
from ..core.ports import Record, RecordMirror, RemoteGateway
from .merge import merge_remote_wins, only_user
from .mirror import LOCAL_REMINDERS_KEY, LOCAL_USERS_KEY
from .session import Session, SessionStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class SyncResult:
    """
    Outcome of a write-behind operation.

    `success` is always True once the local write happened; `synced` tells whether
    the record store applied the same mutation. An update the store answered but
    matched no row (the reminder was created offline and never pushed) is
    reported as not synced.
    """

    success: bool = True
    synced: bool = True
    detail: str = ""


@dataclass
class ReadResult(Generic[T]):
    records: list[T] = field(default_factory=list)
    synced: bool = True


class SyncEngine:
    def __init__(
        self,
        mirror: RecordMirror,
        gateway: RemoteGateway,
        sessions: SessionStore | None = None,
    ) -> None:
        self._mirror = mirror
        self._gateway = gateway
        self.sessions = sessions or SessionStore(mirror)

    # ---- session ----

    def get_current_auth(self) -> User | None:
        return self.sessions.get_current_auth()

    def set_auth(self, user: User | None) -> None:
        self.sessions.set_auth(user)

    # ---- helpers ----

    def _attempt(self, what: str, call: Callable[[], object]) -> SyncResult:
        try:
            call()
        except Forbidden as e:
            logger.warning("%s refused by record store: %s (local change kept)", what, e.message)
            return SyncResult(synced=False, detail=e.message)
        except RemoteUnavailable as e:
            logger.warning("%s saved locally only. Backend error: %s", what, e.message)
            return SyncResult(synced=False, detail=e.message)
        return SyncResult()

    def _reconcile(
        self,
        key: str,
        fetch: Callable[[], list[Record]],
        what: str,
    ) -> tuple[list[Record], bool]:
        local = self._mirror.read(key)
        try:
            remote = fetch()
        except RemoteUnavailable as e:
            logger.warning("Using local %s (sync failed: %s)", what, e.message)
            return local, False

        merged = merge_remote_wins(remote, local)
        self._mirror.write(key, merged)
        logger.debug(
            "Reconciled %s remote=%d local=%d merged=%d",
            what,
            len(remote),
            len(local),
            len(merged),
        )
        return merged, True

    @staticmethod
    def _validate_reminder(reminder: Reminder) -> None:
        if not (reminder.title or "").strip():
            raise ValidationError("Title is required")
        if not reminder.user_id:
            raise ValidationError("Reminder must belong to a user")

    # ---- users ----

    def read_users(self) -> ReadResult[User]:
        records, synced = self._reconcile(LOCAL_USERS_KEY, self._gateway.fetch_users, "users")
        return ReadResult([User.from_record(r) for r in records], synced)

    def get_users(self) -> list[User]:
        return self.read_users().records

    def save_user(self, user: User) -> SyncResult:
        local = self._mirror.read(LOCAL_USERS_KEY)
        if not any(r.get("id") == user.id for r in local):
            local.append(user.to_record())
            self._mirror.write(LOCAL_USERS_KEY, local)

        return self._attempt(f"User {user.id}", lambda: self._gateway.push_user(user.to_record()))

    def create_user(self, username: str, *, role: Role = Role.USER) -> User:
        """
        Sign-up: validate, build and save a new user.

        Uniqueness is checked (case-insensitive) against whatever user list is
        reachable right now, so two offline clients can still collide.
        """
        clean = (username or "").strip()
        if not clean:
            raise ValidationError("Username is required")

        if any(u.matches_username(clean) for u in self.get_users()):
            raise ValidationError("Username already taken.")

        user = User(id=new_id("u-"), username=clean, role=role, created_at=now_ms())
        self.save_user(user)
        logger.info("User created id=%s username=%s", user.id, user.username)
        return user

    def delete_user(self, user_id: str) -> SyncResult:
        """
        Remove the user and its reminders locally, then ask the store to delete
        (the store cascades). The root admin is refused by the store only, so it
        reappears locally on the next successful read.
        """
        users = [r for r in self._mirror.read(LOCAL_USERS_KEY) if r.get("id") != user_id]
        self._mirror.write(LOCAL_USERS_KEY, users)
        reminders = [r for r in self._mirror.read(LOCAL_REMINDERS_KEY) if r.get("userId") != user_id]
        self._mirror.write(LOCAL_REMINDERS_KEY, reminders)

        return self._attempt(f"Delete user {user_id}", lambda: self._gateway.remove_user(user_id))

    # ---- reminders ----

    def read_reminders(self, user_id: str | None = None) -> ReadResult[Reminder]:
        records, synced = self._reconcile(
            LOCAL_REMINDERS_KEY,
            lambda: self._gateway.fetch_reminders(user_id),
            "reminders",
        )
        return ReadResult([Reminder.from_record(r) for r in only_user(records, user_id)], synced)

    def get_reminders(self, user_id: str | None = None) -> list[Reminder]:
        return self.read_reminders(user_id).records

    def reminders_for(self, session: Session) -> list[Reminder]:
        """Reminders scoped to the session's user (empty when anonymous)."""
        if session.user_id is None:
            return []
        return self.get_reminders(session.user_id)

    def add_reminder(self, reminder: Reminder) -> SyncResult:
        self._validate_reminder(reminder)
        record = reminder.to_record()

        local = self._mirror.read(LOCAL_REMINDERS_KEY)
        self._mirror.write(LOCAL_REMINDERS_KEY, _upsert(local, record))

        return self._attempt(f"Task {reminder.id}", lambda: self._gateway.push_reminder(record))

    def update_reminder(self, reminder: Reminder) -> SyncResult:
        self._validate_reminder(reminder)
        record = reminder.to_record()

        local = self._mirror.read(LOCAL_REMINDERS_KEY)
        self._mirror.write(LOCAL_REMINDERS_KEY, _upsert(local, record))

        def put() -> None:
            if not self._gateway.put_reminder(record):
                raise RemoteUnavailable(f"Record store has no reminder {reminder.id}", status_code=200)

        return self._attempt(f"Update {reminder.id}", put)

    def delete_reminder(self, reminder_id: str) -> SyncResult:
        local = [r for r in self._mirror.read(LOCAL_REMINDERS_KEY) if r.get("id") != reminder_id]
        self._mirror.write(LOCAL_REMINDERS_KEY, local)

        return self._attempt(f"Delete {reminder_id}", lambda: self._gateway.remove_reminder(reminder_id))


def _upsert(records: list[Record], record: Record) -> list[Record]:
    for i, r in enumerate(records):
        if r.get("id") == record["id"]:
            records[i] = record
            return records
    records.append(record)
    return records
