# src/mindful_remind/services/board.py

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.errors import ValidationError
from ..core.models import Category, Priority, Reminder, build_reminder
from ..sync.engine import SyncEngine, SyncResult
from ..sync.session import Session

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class BoardStats:
    total: int
    done: int
    pending: int
    urgent: int


def newest_first(reminders: list[Reminder]) -> list[Reminder]:
    return sorted(reminders, key=lambda r: r.created_at, reverse=True)


def board_stats(reminders: list[Reminder]) -> BoardStats:
    done = sum(1 for r in reminders if r.completed)
    urgent = sum(1 for r in reminders if not r.completed and r.priority == Priority.URGENT)
    return BoardStats(total=len(reminders), done=done, pending=len(reminders) - done, urgent=urgent)


def search(reminders: list[Reminder], term: str) -> list[Reminder]:
    t = (term or "").strip().lower()
    if not t:
        return list(reminders)
    return [r for r in reminders if t in r.title.lower() or t in r.description.lower()]


class ReminderBoard:
    """Per-user reminder list: the dashboard's logic without any rendering."""

    def __init__(self, engine: SyncEngine) -> None:
        self._engine = engine

    @staticmethod
    def _require_user(session: Session) -> str:
        if session.user_id is None:
            raise ValidationError("Sign in first.")
        return session.user_id

    def load(self, session: Session) -> list[Reminder]:
        return newest_first(self._engine.reminders_for(session))

    def create(
        self,
        session: Session,
        title: str,
        *,
        description: str = "",
        due_date: str | None = None,
        priority: Priority | str | None = None,
        category: Category | str | None = None,
    ) -> tuple[Reminder, SyncResult, list[Reminder]]:
        """Save a new reminder, then return it with the sync outcome and the refreshed board."""
        user_id = self._require_user(session)
        reminder = build_reminder(
            user_id=user_id,
            title=title,
            description=description,
            due_date=due_date,
            priority=priority,
            category=category,
        )
        result = self._engine.add_reminder(reminder)
        # Store's view when reachable, the mirror's otherwise.
        return reminder, result, self.load(session)

    def find(self, session: Session, reminder_id: str) -> Reminder | None:
        return next((r for r in self.load(session) if r.id == reminder_id), None)

    def toggle(self, session: Session, reminder_id: str) -> tuple[Reminder, SyncResult]:
        self._require_user(session)
        current = self.find(session, reminder_id)
        if current is None:
            raise ValidationError(f"No reminder with id {reminder_id}.")
        updated = current.toggled()
        return updated, self._engine.update_reminder(updated)

    def delete(self, session: Session, reminder_id: str) -> SyncResult:
        self._require_user(session)
        return self._engine.delete_reminder(reminder_id)
