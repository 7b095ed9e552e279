"""Builds the notification store named by settings."""

from __future__ import annotations

import logging

from tasknotify.common.config import NotifySettings
from tasknotify.store.base import NotificationStore
from tasknotify.store.memory import InMemoryNotificationStore
from tasknotify.store.redis_store import RedisNotificationStore

logger = logging.getLogger(__name__)


def build_store(settings: NotifySettings) -> NotificationStore:
    if settings.store_backend == "redis":
        logger.info("Using Redis notification store")
        return RedisNotificationStore.from_url(settings.redis_url)
    logger.info("Using in-memory notification store")
    return InMemoryNotificationStore()


__all__ = ["build_store"]
