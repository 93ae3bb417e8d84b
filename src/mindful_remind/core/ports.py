# src/mindful_remind/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the sync engine and the client services.

The engine depends on Protocols instead of concrete implementations.
This keeps the local medium and the transport swappable and makes testing easier
(tests take the gateway offline without touching the network).
"""

from typing import Any, Protocol

Record = dict[str, Any]
# Records travel in the camelCase wire shape: {"id": ..., "userId": ..., ...}.


class RecordMirror(Protocol):
    """Durable, synchronous key/value medium on the client."""

    def read(self, collection: str) -> list[Record]: ...
    def write(self, collection: str, records: list[Record]) -> None: ...

    def get_value(self, key: str) -> Any | None: ...
    def set_value(self, key: str, value: Any) -> None: ...
    def delete_value(self, key: str) -> None: ...


class RemoteGateway(Protocol):
    """
    Client of the authoritative record store.

    Every method raises RemoteUnavailable (or its subclass Forbidden) on failure.
    """

    def request(self, method: str, path: str, body: Any | None = None) -> Any: ...

    def fetch_users(self) -> list[Record]: ...
    def push_user(self, record: Record) -> None: ...
    def remove_user(self, user_id: str) -> None: ...

    def fetch_reminders(self, user_id: str | None = None) -> list[Record]: ...
    def push_reminder(self, record: Record) -> None: ...
    def put_reminder(self, record: Record) -> bool: ...
    def remove_reminder(self, reminder_id: str) -> None: ...
