# src/mindful_remind/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..services.admin import AdminConsole
from ..services.auth import AuthFlow
from ..services.board import ReminderBoard
from ..sync.engine import SyncEngine
from ..sync.session import ANONYMOUS, Session


@dataclass
class AppState:
    """
    Runtime state shared by the console front-end and commands.

    `lock` serializes commands so two mutations never race on the mirror's
    whole-collection writes.
    """

    settings: Any
    engine: SyncEngine
    auth: AuthFlow
    board: ReminderBoard
    admin: AdminConsole

    session: Session = ANONYMOUS
    lock: threading.Lock = field(default_factory=threading.Lock)
    closers: list[Any] = field(default_factory=list)
