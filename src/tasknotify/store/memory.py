"""In-process notification store with per-record expiry."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from tasknotify.common.schemas import NotificationRecord
from tasknotify.store.base import NotificationStore, check_ttl


@dataclass(frozen=True)
class StoredEntry:
    """A record plus its absolute expiry time."""

    record: NotificationRecord
    stored_at: float
    ttl_seconds: int

    @property
    def expires_at(self) -> float:
        return self.stored_at + self.ttl_seconds

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class InMemoryNotificationStore(NotificationStore):
    """Dict-backed store guarded by a single lock.

    Expired entries are dropped lazily on read. ``clock`` returns seconds
    and can be replaced in tests to move time forward.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: dict[str, StoredEntry] = {}
        self._lock = threading.Lock()
        self._writes = 0

    def put(self, record: NotificationRecord, ttl_seconds: int) -> None:
        check_ttl(ttl_seconds)
        entry = StoredEntry(record=record, stored_at=self._clock(), ttl_seconds=ttl_seconds)
        with self._lock:
            self._entries[record.id] = entry
            self._writes += 1

    def get(self, notification_id: str) -> NotificationRecord | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(notification_id)
            if entry is None:
                return None
            if entry.is_expired(now):
                del self._entries[notification_id]
                return None
            return entry.record

    def list_all(self) -> list[NotificationRecord]:
        self.evict_expired()
        with self._lock:
            return [entry.record for entry in self._entries.values()]

    def evict_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [k for k, v in self._entries.items() if v.is_expired(now)]
            for k in expired:
                del self._entries[k]
        return len(expired)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return {"size": len(self._entries), "writes": self._writes}


__all__ = ["StoredEntry", "InMemoryNotificationStore"]
