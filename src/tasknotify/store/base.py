"""Keyed, expiring persistence for notification records."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from tasknotify.common.constants import (
    LONG_TTL_SECONDS,
    SHORT_TTL_SECONDS,
    NotificationKind,
)
from tasknotify.common.schemas import NotificationRecord


@dataclass(frozen=True)
class RetentionPolicy:
    """Maps a notification kind to its time-to-live."""

    short_ttl_seconds: int = SHORT_TTL_SECONDS
    long_ttl_seconds: int = LONG_TTL_SECONDS

    def ttl_for(self, kind: NotificationKind) -> int:
        if kind.is_task_derived:
            return self.long_ttl_seconds
        return self.short_ttl_seconds


class NotificationStore(ABC):
    """Storage contract used by the dispatcher and the history query.

    Implementations must tolerate concurrent calls from several request
    threads. Records are keyed by ``record.id``; writing an existing id
    overwrites it.
    """

    @abstractmethod
    def put(self, record: NotificationRecord, ttl_seconds: int) -> None:
        """Store ``record`` for ``ttl_seconds``."""

    @abstractmethod
    def get(self, notification_id: str) -> NotificationRecord | None:
        """Return the record, or None if it never existed or has expired."""

    @abstractmethod
    def list_all(self) -> list[NotificationRecord]:
        """Return every record that has not yet expired, in no particular order."""


def check_ttl(ttl_seconds: int) -> None:
    if ttl_seconds < 1:
        raise ValueError(f"ttl_seconds must be >= 1, got {ttl_seconds}")


__all__ = ["RetentionPolicy", "NotificationStore", "check_ttl"]
