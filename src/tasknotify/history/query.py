"""Notification history: owner filter, newest-first ordering, pagination."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from tasknotify.common.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from tasknotify.common.errors import ValidationFault
from tasknotify.common.schemas import NotificationRecord
from tasknotify.store.base import NotificationStore


@dataclass(frozen=True)
class HistoryPage:
    """One page of history plus pagination metadata."""

    notifications: list[NotificationRecord]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)

    def to_dict(self) -> dict[str, Any]:
        return {
            "notifications": [r.model_dump(mode="json", by_alias=True) for r in self.notifications],
            "pagination": {
                "total": self.total,
                "page": self.page,
                "limit": self.page_size,
                "totalPages": self.total_pages,
            },
        }


def sort_newest_first(records: list[NotificationRecord]) -> list[NotificationRecord]:
    """Order by ``created_at`` descending, ties by ``id`` ascending."""
    by_id = sorted(records, key=lambda r: r.id)
    return sorted(by_id, key=lambda r: r.created_at, reverse=True)


class HistoryQuery:
    """Reads the whole store and filters, sorts and slices in memory."""

    def __init__(self, store: NotificationStore, max_page_size: int = MAX_PAGE_SIZE) -> None:
        self._store = store
        self._max_page_size = max_page_size

    def list(
        self,
        owner_id: str | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> HistoryPage:
        if page < 1:
            raise ValidationFault("page must be >= 1")
        if page_size < 1:
            raise ValidationFault("limit must be >= 1")
        page_size = min(page_size, self._max_page_size)

        records = self._store.list_all()
        if owner_id is not None:
            records = [r for r in records if r.owner_id == owner_id]

        ordered = sort_newest_first(records)
        start = (page - 1) * page_size
        return HistoryPage(
            notifications=ordered[start:start + page_size],
            total=len(ordered),
            page=page,
            page_size=page_size,
        )

    def get_status(self, notification_id: str) -> NotificationRecord | None:
        """Return the record, or None once it is gone (never stored or expired)."""
        return self._store.get(notification_id)


__all__ = ["HistoryPage", "HistoryQuery", "sort_newest_first"]
