# src/mindful_remind/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the local mirror, the HTTP gateway and the sync engine into AppState,
- restores the persisted session.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import RemoteGateway
from ..core.state import AppState
from ..services.admin import AdminConsole
from ..services.auth import AuthFlow
from ..services.board import ReminderBoard
from ..sync.engine import SyncEngine
from ..sync.gateway import HttpRemoteGateway
from ..sync.mirror import LocalMirror
from ..sync.session import SessionStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.mirror_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, gateway: RemoteGateway | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the gateway) injectable makes the app easier to test and
    avoids hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    mirror = LocalMirror(settings.mirror_db_path)
    closers: list = [mirror]
    if gateway is None:
        http = HttpRemoteGateway(
            settings.api_base_url,
            timeout_s=getattr(settings, "remote_timeout_seconds", None),
        )
        closers.append(http)
        gateway = http

    engine = SyncEngine(mirror, gateway, SessionStore(mirror))

    state = AppState(
        settings=settings,
        engine=engine,
        auth=AuthFlow(engine),
        board=ReminderBoard(engine),
        admin=AdminConsole(engine),
        closers=closers,
    )
    state.session = state.auth.current()
    if state.session.user is not None:
        logger.info("Restored session for %s", state.session.user.username)
    return state


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    for c in state.closers:
        try:
            c.close()
        except Exception:
            logger.debug("close() failed for %r", c, exc_info=True)
