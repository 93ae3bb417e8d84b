# src/mindful_remind/sync/session.py

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.models import User
from ..core.ports import RecordMirror
from .mirror import AUTH_KEY

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Session:
    """
    The identity a client is acting as.

    `transient` marks the offline fallback identity granted when the record store
    could not be reached at login; it is never pushed to the store.
    """

    user: User | None = None
    transient: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def user_id(self) -> str | None:
        return self.user.id if self.user is not None else None


ANONYMOUS = Session()


class SessionStore:
    """Durable current-identity slot. Last write wins."""

    def __init__(self, mirror: RecordMirror, key: str = AUTH_KEY) -> None:
        self._mirror = mirror
        self._key = key

    def load(self) -> Session:
        data = self._mirror.get_value(self._key)
        if not isinstance(data, dict):
            return ANONYMOUS
        user_rec = data.get("user", data)
        try:
            user = User.from_record(user_rec)
        except (KeyError, TypeError):
            logger.warning("Stored session is unreadable; starting anonymous.")
            return ANONYMOUS
        return Session(user=user, transient=bool(data.get("transient", False)))

    def save(self, session: Session) -> None:
        if session.user is None:
            self._mirror.delete_value(self._key)
            return
        self._mirror.set_value(
            self._key,
            {"user": session.user.to_record(), "transient": session.transient},
        )

    def get_current_auth(self) -> User | None:
        return self.load().user

    def set_auth(self, user: User | None) -> None:
        self.save(Session(user=user))
