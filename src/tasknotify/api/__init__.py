"""HTTP surface of the notification service."""

from __future__ import annotations

from tasknotify.api.app import create_app
from tasknotify.api.services import NotificationServices

__all__ = ["create_app", "NotificationServices"]
