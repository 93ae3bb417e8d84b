# src/mindful_remind/sync/merge.py

from __future__ import annotations

from collections.abc import Iterable

from ..core.ports import Record


def merge_remote_wins(remote: Iterable[Record], local: Iterable[Record]) -> list[Record]:
    """
    Reconcile a remote snapshot with the local one.

    - every remote record is kept, in remote order, and replaces any local record
      with the same id wholesale (no field-level merge, no timestamps)
    - local records whose id is absent remotely are appended, in local order
      (records created offline that have not reached the store yet)

    Merging the same remote snapshot again yields the same list.
    """
    merged = [dict(r) for r in remote]
    remote_ids = {r["id"] for r in merged}
    merged.extend(dict(r) for r in local if r.get("id") not in remote_ids)
    return merged


def only_user(records: Iterable[Record], user_id: str | None) -> list[Record]:
    if not user_id:
        return list(records)
    return [r for r in records if r.get("userId") == user_id]
