# tests/test_sync_engine.py

from __future__ import annotations

from dataclasses import replace

import pytest

from mindful_remind.backend.store import RecordStore
from mindful_remind.core.errors import ValidationError
from mindful_remind.core.models import ROOT_ADMIN_ID, Reminder, Role, User, build_reminder
from mindful_remind.sync.engine import SyncEngine
from mindful_remind.sync.mirror import LOCAL_REMINDERS_KEY, LOCAL_USERS_KEY, LocalMirror

from .fakes import SwitchableGateway


def _seed_user(store: RecordStore, user_id: str = "u1", username: str = "alice") -> None:
    store.insert_user(id=user_id, username=username, role="user", createdAt=1)


def _ids(reminders: list[Reminder]) -> list[str]:
    return [r.id for r in reminders]


def test_offline_create_is_kept_locally_and_never_reaches_store(
    engine: SyncEngine, gateway: SwitchableGateway, record_store: RecordStore
) -> None:
    _seed_user(record_store)
    gateway.online = False

    result = engine.add_reminder(build_reminder(user_id="u1", title="Buy milk", reminder_id="t1"))

    assert result.success is True
    assert result.synced is False
    assert "t1" in _ids(engine.get_reminders("u1"))
    assert record_store.list_reminders("u1") == []


def test_online_create_reaches_store(
    engine: SyncEngine, gateway: SwitchableGateway, record_store: RecordStore
) -> None:
    _seed_user(record_store)

    result = engine.add_reminder(build_reminder(user_id="u1", title="Call mom", reminder_id="t2"))

    assert result.synced is True
    assert [r["id"] for r in record_store.list_reminders("u1")] == ["t2"]


def test_reconnect_unions_remote_with_unsynced_local(
    engine: SyncEngine, gateway: SwitchableGateway, record_store: RecordStore, mirror: LocalMirror
) -> None:
    _seed_user(record_store)

    # Synced earlier, then edited on the store by someone else.
    synced = build_reminder(user_id="u1", title="Dentist", reminder_id="r1")
    engine.add_reminder(synced)
    record_store.update_reminder(
        "r1", {**synced.to_record(), "title": "Dentist at 5pm", "completed": True}
    )

    gateway.online = False
    engine.add_reminder(build_reminder(user_id="u1", title="Buy milk", reminder_id="t1"))
    assert "t1" in _ids(engine.get_reminders("u1"))

    gateway.online = True
    merged = engine.get_reminders("u1")

    assert _ids(merged) == ["r1", "t1"]
    r1 = merged[0]
    assert r1.title == "Dentist at 5pm"
    assert r1.completed is True
    # merged view is persisted
    assert [r["id"] for r in mirror.read(LOCAL_REMINDERS_KEY)] == ["r1", "t1"]


def test_remote_record_wins_wholesale(
    engine: SyncEngine, gateway: SwitchableGateway, record_store: RecordStore
) -> None:
    _seed_user(record_store)
    remote = build_reminder(user_id="u1", title="Remote title", reminder_id="x")
    record_store.insert_reminder(remote.to_record())

    gateway.online = False
    local = replace(remote, title="Local title", description="offline notes", completed=True)
    engine.update_reminder(local)

    gateway.online = True
    [merged] = engine.get_reminders("u1")
    assert merged == remote


def test_read_failure_returns_local_without_writing(
    engine: SyncEngine, gateway: SwitchableGateway, mirror: LocalMirror
) -> None:
    mirror.write(
        LOCAL_REMINDERS_KEY,
        [
            build_reminder(user_id="u1", title="a", reminder_id="a").to_record(),
            build_reminder(user_id="u2", title="b", reminder_id="b").to_record(),
        ],
    )
    gateway.online = False

    result = engine.read_reminders("u1")

    assert result.synced is False
    assert _ids(result.records) == ["a"]
    assert _ids(engine.get_reminders()) == ["a", "b"]


def test_scoped_read_keeps_other_users_records_in_mirror(
    engine: SyncEngine, record_store: RecordStore, mirror: LocalMirror
) -> None:
    _seed_user(record_store, "u1", "alice")
    _seed_user(record_store, "u2", "bob")
    engine.add_reminder(build_reminder(user_id="u1", title="mine", reminder_id="a"))
    engine.add_reminder(build_reminder(user_id="u2", title="theirs", reminder_id="b"))

    assert _ids(engine.get_reminders("u1")) == ["a"]
    assert sorted(r["id"] for r in mirror.read(LOCAL_REMINDERS_KEY)) == ["a", "b"]


def test_repeated_reads_are_idempotent(engine: SyncEngine, record_store: RecordStore, mirror: LocalMirror) -> None:
    _seed_user(record_store)
    engine.add_reminder(build_reminder(user_id="u1", title="a", reminder_id="a"))

    engine.get_reminders()
    first = mirror.read(LOCAL_REMINDERS_KEY)
    engine.get_reminders()
    assert mirror.read(LOCAL_REMINDERS_KEY) == first


def test_empty_title_is_rejected_before_any_write(
    engine: SyncEngine, gateway: SwitchableGateway, mirror: LocalMirror
) -> None:
    with pytest.raises(ValidationError):
        engine.add_reminder(build_reminder(user_id="u1", title="   "))

    assert mirror.read(LOCAL_REMINDERS_KEY) == []
    assert gateway.calls == []


def test_update_of_unknown_local_record_is_not_lost(
    engine: SyncEngine, gateway: SwitchableGateway, mirror: LocalMirror
) -> None:
    gateway.online = False
    engine.update_reminder(build_reminder(user_id="u1", title="from elsewhere", reminder_id="z"))
    assert [r["id"] for r in mirror.read(LOCAL_REMINDERS_KEY)] == ["z"]


def test_update_of_reminder_the_store_never_saw_is_not_synced(
    engine: SyncEngine, gateway: SwitchableGateway, record_store: RecordStore
) -> None:
    _seed_user(record_store)
    gateway.online = False
    offline = build_reminder(user_id="u1", title="Buy milk", reminder_id="t1")
    engine.add_reminder(offline)

    gateway.online = True
    result = engine.update_reminder(offline.toggled())

    assert result.success is True
    assert result.synced is False
    assert "t1" in result.detail
    assert record_store.list_reminders("u1") == []
    assert engine.update_reminder(offline).synced is False


def test_update_of_stored_reminder_is_synced(engine: SyncEngine, record_store: RecordStore) -> None:
    _seed_user(record_store)
    reminder = build_reminder(user_id="u1", title="Gym", reminder_id="g1")
    engine.add_reminder(reminder)

    assert engine.update_reminder(reminder.toggled()).synced is True
    assert record_store.list_reminders("u1")[0]["completed"] is True


def test_delete_reminder_offline_then_remote_wins_on_next_read(
    engine: SyncEngine, gateway: SwitchableGateway, record_store: RecordStore
) -> None:
    _seed_user(record_store)
    engine.add_reminder(build_reminder(user_id="u1", title="a", reminder_id="a"))

    gateway.online = False
    assert engine.delete_reminder("a").synced is False
    assert engine.get_reminders("u1") == []

    gateway.online = True
    assert _ids(engine.get_reminders("u1")) == ["a"]


def test_each_operation_attempts_remote_exactly_once(engine: SyncEngine, gateway: SwitchableGateway) -> None:
    gateway.online = False
    engine.add_reminder(build_reminder(user_id="u1", title="a", reminder_id="a"))
    engine.get_reminders("u1")

    assert gateway.attempted("push_reminder") == 1
    assert gateway.attempted("fetch_reminders") == 1


def test_delete_user_cascades_locally_and_remotely(
    engine: SyncEngine, record_store: RecordStore, mirror: LocalMirror
) -> None:
    engine.save_user(User(id="u2", username="bob", role=Role.USER, created_at=1))
    engine.add_reminder(build_reminder(user_id="u2", title="x", reminder_id="x"))
    engine.add_reminder(build_reminder(user_id=ROOT_ADMIN_ID, title="keep", reminder_id="k"))

    result = engine.delete_user("u2")

    assert result.synced is True
    assert all(r["userId"] != "u2" for r in mirror.read(LOCAL_REMINDERS_KEY))
    assert all(r["userId"] != "u2" for r in record_store.list_all_reminders())
    assert all(r.user_id != "u2" for r in engine.get_reminders())
    assert "u2" not in {u.id for u in engine.get_users()}


def test_root_admin_survives_delete(engine: SyncEngine, record_store: RecordStore, mirror: LocalMirror) -> None:
    engine.get_users()

    result = engine.delete_user(ROOT_ADMIN_ID)

    assert result.success is True
    assert result.synced is False
    assert result.detail == "Root admin locked"
    # optimistic local delete...
    assert ROOT_ADMIN_ID not in {r["id"] for r in mirror.read(LOCAL_USERS_KEY)}
    # ...but the store keeps it and the next read brings it back
    assert ROOT_ADMIN_ID in {u["id"] for u in record_store.list_users()}
    assert ROOT_ADMIN_ID in {u.id for u in engine.get_users()}


def test_username_uniqueness_is_case_insensitive(engine: SyncEngine) -> None:
    engine.create_user("Alice")
    with pytest.raises(ValidationError, match="already taken"):
        engine.create_user("aLICE")


def test_username_uniqueness_offline_uses_local_list(engine: SyncEngine, gateway: SwitchableGateway) -> None:
    gateway.online = False
    user = engine.create_user("carol")
    assert user.id.startswith("u-")
    assert user.role == Role.USER

    with pytest.raises(ValidationError):
        engine.create_user(" CAROL ")


def test_blank_username_is_rejected(engine: SyncEngine) -> None:
    with pytest.raises(ValidationError):
        engine.create_user("   ")


def test_save_user_keeps_existing_local_copy(engine: SyncEngine, gateway: SwitchableGateway, mirror: LocalMirror) -> None:
    gateway.online = False
    engine.save_user(User(id="u9", username="dora", role=Role.USER, created_at=1))
    engine.save_user(User(id="u9", username="dora-2", role=Role.USER, created_at=2))

    users = mirror.read(LOCAL_USERS_KEY)
    assert [u["username"] for u in users] == ["dora"]


def test_session_contract(engine: SyncEngine) -> None:
    user = User(id="u1", username="alice", role=Role.USER, created_at=1)
    assert engine.get_current_auth() is None
    engine.set_auth(user)
    assert engine.get_current_auth() == user
    engine.set_auth(None)
    assert engine.get_current_auth() is None
