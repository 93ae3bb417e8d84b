# tests/test_merge.py

from __future__ import annotations

from mindful_remind.sync.merge import merge_remote_wins, only_user


def _r(id_: str, user: str = "u1", title: str = "t") -> dict:
    return {"id": id_, "userId": user, "title": title}


def test_remote_record_replaces_local_with_same_id() -> None:
    local = [_r("x", title="local edit")]
    remote = [_r("x", title="remote copy")]

    merged = merge_remote_wins(remote, local)

    assert merged == [_r("x", title="remote copy")]


def test_local_only_records_are_appended_in_order() -> None:
    local = [_r("offline-1"), _r("shared", title="stale"), _r("offline-2")]
    remote = [_r("r1"), _r("shared", title="fresh")]

    merged = merge_remote_wins(remote, local)

    assert [m["id"] for m in merged] == ["r1", "shared", "offline-1", "offline-2"]
    assert merged[1]["title"] == "fresh"


def test_merging_same_remote_snapshot_twice_is_stable() -> None:
    local = [_r("a", title="old"), _r("b")]
    remote = [_r("a", title="new"), _r("c")]

    once = merge_remote_wins(remote, local)
    twice = merge_remote_wins(remote, once)

    assert twice == once


def test_empty_remote_keeps_local() -> None:
    local = [_r("a"), _r("b")]
    assert merge_remote_wins([], local) == local


def test_only_user_filters_and_passes_through_when_unscoped() -> None:
    records = [_r("a", "u1"), _r("b", "u2")]
    assert [r["id"] for r in only_user(records, "u2")] == ["b"]
    assert only_user(records, None) == records
