"""Expiring storage for notification records."""

from __future__ import annotations

from tasknotify.store.base import NotificationStore, RetentionPolicy
from tasknotify.store.factory import build_store
from tasknotify.store.memory import InMemoryNotificationStore, StoredEntry
from tasknotify.store.redis_store import RedisNotificationStore

__all__ = [
    "NotificationStore",
    "RetentionPolicy",
    "InMemoryNotificationStore",
    "StoredEntry",
    "RedisNotificationStore",
    "build_store",
]
