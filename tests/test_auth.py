# tests/test_auth.py

from __future__ import annotations

import pytest

from mindful_remind.backend.store import RecordStore
from mindful_remind.core.errors import InvalidCredentials
from mindful_remind.core.models import ROOT_ADMIN_ID, Role
from mindful_remind.services.auth import TRANSIENT_USER_ID, AuthFlow
from mindful_remind.sync.engine import SyncEngine
from mindful_remind.sync.session import ANONYMOUS

from .fakes import SwitchableGateway


@pytest.fixture()
def auth(engine: SyncEngine) -> AuthFlow:
    return AuthFlow(engine)


@pytest.mark.parametrize("password", ["password@2026", "admin", "password"])
def test_admin_bypass_logs_in_as_root(auth: AuthFlow, engine: SyncEngine, password: str) -> None:
    session = auth.login("  Admin ", password)

    assert session.user is not None
    assert session.user.id == ROOT_ADMIN_ID
    assert session.user.role == Role.ADMIN
    assert engine.get_current_auth() == session.user


def test_admin_bypass_works_offline(auth: AuthFlow, gateway: SwitchableGateway) -> None:
    gateway.online = False
    session = auth.login("admin", "password@2026")
    assert session.user is not None
    assert session.user.is_admin
    assert session.transient is False


def test_user_password_is_username_or_shared_value(auth: AuthFlow, record_store: RecordStore) -> None:
    record_store.insert_user(id="u1", username="Alice", role="user", createdAt=1)

    assert auth.login("alice", "Alice").user_id == "u1"
    auth.logout()
    assert auth.login("ALICE", "admin").user_id == "u1"


def test_wrong_password_is_rejected(auth: AuthFlow, engine: SyncEngine, record_store: RecordStore) -> None:
    record_store.insert_user(id="u1", username="alice", role="user", createdAt=1)

    with pytest.raises(InvalidCredentials, match="password@2026"):
        auth.login("alice", "hunter2")
    assert engine.get_current_auth() is None


def test_unreachable_store_grants_transient_identity(auth: AuthFlow, gateway: SwitchableGateway) -> None:
    gateway.online = False

    session = auth.login("Zed", "whatever")

    assert session.transient is True
    assert session.user is not None
    assert session.user.id == TRANSIENT_USER_ID
    assert session.user.username == "zed"
    assert gateway.attempted("push_user") == 0
    assert auth.current().transient is True


def test_offline_login_prefers_known_local_user(
    auth: AuthFlow, engine: SyncEngine, gateway: SwitchableGateway, record_store: RecordStore
) -> None:
    record_store.insert_user(id="u1", username="alice", role="user", createdAt=1)
    engine.get_users()  # mirror now knows alice

    gateway.online = False
    session = auth.login("alice", "alice")

    assert session.user_id == "u1"
    assert session.transient is False


def test_signup_does_not_log_in_and_logout_clears(auth: AuthFlow, engine: SyncEngine) -> None:
    user = auth.signup("  newbie ")
    assert user.username == "newbie"
    assert engine.get_current_auth() is None

    auth.login("newbie", "newbie")
    assert engine.get_current_auth() is not None
    auth.logout()
    assert engine.get_current_auth() is None


def test_anonymous_session_is_never_persisted_as_login(auth: AuthFlow, engine: SyncEngine) -> None:
    with pytest.raises(ValueError):
        auth._start(ANONYMOUS)
    assert engine.get_current_auth() is None
