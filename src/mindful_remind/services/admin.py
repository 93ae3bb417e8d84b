# src/mindful_remind/services/admin.py

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from ..core.errors import ValidationError
from ..core.models import Reminder, User
from ..sync.engine import SyncEngine, SyncResult
from ..sync.session import Session


@dataclass(slots=True, frozen=True)
class AdminOverview:
    users: list[User]
    reminders: list[Reminder]
    tasks_per_user: dict[str, int]

    @property
    def density(self) -> float:
        """Reminders per user, one decimal."""
        if not self.users:
            return 0.0
        return round(len(self.reminders) / len(self.users), 1)


class AdminConsole:
    def __init__(self, engine: SyncEngine) -> None:
        self._engine = engine

    @staticmethod
    def require_admin(session: Session) -> None:
        if session.user is None or not session.user.is_admin:
            raise ValidationError("Admin access required.")

    def overview(self) -> AdminOverview:
        users = self._engine.get_users()
        reminders = self._engine.get_reminders()
        counts = Counter(r.user_id for r in reminders)
        return AdminOverview(
            users=users,
            reminders=reminders,
            tasks_per_user={u.id: counts.get(u.id, 0) for u in users},
        )

    def search_users(self, term: str) -> list[User]:
        t = (term or "").strip().lower()
        return [u for u in self._engine.get_users() if t in u.username.lower()]

    def delete_user(self, user_id: str) -> SyncResult:
        return self._engine.delete_user(user_id)
