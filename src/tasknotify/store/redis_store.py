"""Redis-backed notification store.

Each record lives under ``notification:<id>`` as JSON and is written with
``SETEX`` so Redis handles expiry.
"""

from __future__ import annotations

import logging
from typing import Any

import redis
from pydantic import ValidationError

from tasknotify.common.constants import RECORD_KEY_PREFIX
from tasknotify.common.errors import StoreFault
from tasknotify.common.schemas import NotificationRecord
from tasknotify.store.base import NotificationStore, check_ttl

logger = logging.getLogger(__name__)

_SCAN_BATCH = 200


class RedisNotificationStore(NotificationStore):
    """Store backed by a redis-py client (thread-safe connection pool)."""

    def __init__(self, client: Any, key_prefix: str = RECORD_KEY_PREFIX) -> None:
        self._client = client
        self._prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, key_prefix: str = RECORD_KEY_PREFIX) -> "RedisNotificationStore":
        return cls(redis.Redis.from_url(url), key_prefix=key_prefix)

    def _key(self, notification_id: str) -> str:
        return f"{self._prefix}{notification_id}"

    def put(self, record: NotificationRecord, ttl_seconds: int) -> None:
        check_ttl(ttl_seconds)
        try:
            self._client.setex(self._key(record.id), ttl_seconds, record.to_json())
        except redis.RedisError as exc:
            raise StoreFault(f"Failed to write notification {record.id}: {exc}") from exc

    def get(self, notification_id: str) -> NotificationRecord | None:
        try:
            raw = self._client.get(self._key(notification_id))
        except redis.RedisError as exc:
            raise StoreFault(f"Failed to read notification {notification_id}: {exc}") from exc
        if raw is None:
            return None
        try:
            return NotificationRecord.from_json(raw)
        except ValidationError as exc:
            raise StoreFault(f"Stored notification {notification_id} is corrupt") from exc

    def list_all(self) -> list[NotificationRecord]:
        try:
            keys = list(self._client.scan_iter(match=f"{self._prefix}*", count=_SCAN_BATCH))
            records: list[NotificationRecord] = []
            for start in range(0, len(keys), _SCAN_BATCH):
                batch = keys[start:start + _SCAN_BATCH]
                for key, raw in zip(batch, self._client.mget(batch)):
                    # expired between SCAN and MGET
                    if raw is None:
                        continue
                    try:
                        records.append(NotificationRecord.from_json(raw))
                    except ValidationError:
                        logger.warning("Skipping corrupt notification record at %s", key)
        except redis.RedisError as exc:
            raise StoreFault(f"Failed to list notifications: {exc}") from exc
        return records


__all__ = ["RedisNotificationStore"]
