# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from mindful_remind.backend.app import create_app
from mindful_remind.backend.store import RecordStore
from mindful_remind.cli.bootstrap import create_initial_state
from mindful_remind.core.state import AppState
from mindful_remind.sync.engine import SyncEngine
from mindful_remind.sync.gateway import HttpRemoteGateway
from mindful_remind.sync.mirror import LocalMirror

from .fakes import SwitchableGateway


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """Minimal settings object compatible with bootstrap and commands (no env reads)."""
    return SimpleNamespace(
        app_name="mindful-remind-test",
        data_dir=tmp_path,
        mirror_db_path=tmp_path / "mirror.sqlite3",
        backend_db_path=tmp_path / "database.sqlite3",
        api_base_url="http://testserver",
        remote_timeout_seconds=None,
        console_enabled=False,
    )


@pytest.fixture()
def record_store(settings: SimpleNamespace) -> RecordStore:
    return RecordStore(settings.backend_db_path)


@pytest.fixture()
def api_client(record_store: RecordStore) -> TestClient:
    return TestClient(create_app(record_store))


@pytest.fixture()
def gateway(api_client: TestClient) -> SwitchableGateway:
    """Real HTTP gateway talking to the in-process record store, switchable offline."""
    return SwitchableGateway(HttpRemoteGateway(client=api_client))


@pytest.fixture()
def mirror(settings: SimpleNamespace) -> LocalMirror:
    return LocalMirror(settings.mirror_db_path)


@pytest.fixture()
def engine(mirror: LocalMirror, gateway: SwitchableGateway) -> SyncEngine:
    return SyncEngine(mirror, gateway)


@pytest.fixture()
def state(settings: SimpleNamespace, gateway: SwitchableGateway) -> AppState:
    return create_initial_state(settings=settings, gateway=gateway)
