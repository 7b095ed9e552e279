"""Record id generation.

Ids look like ``email_1718900000123_k3j9x0a1b`` (kind prefix, epoch
milliseconds, nine random base36 characters). The timestamp handed out with
each id strictly increases within the process, even when the wall clock
stalls or steps backwards.
"""

from __future__ import annotations

import secrets
import string
import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from tasknotify.common.constants import NotificationKind

_ALPHABET = string.ascii_lowercase + string.digits
_SUFFIX_LENGTH = 9
_TICK = timedelta(microseconds=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordIdGenerator:
    """Mints ``(id, created_at)`` pairs with monotonic timestamps."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._last: datetime | None = None

    def next(self, kind: NotificationKind) -> tuple[str, datetime]:
        with self._lock:
            now = self._clock()
            if self._last is not None and now <= self._last:
                now = self._last + _TICK
            self._last = now

        millis = int(now.timestamp() * 1000)
        suffix = "".join(secrets.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))
        prefix = kind.value.replace("-", "_")
        return f"{prefix}_{millis}_{suffix}", now


__all__ = ["RecordIdGenerator"]
