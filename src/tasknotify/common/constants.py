"""Constants and enums for tasknotify."""

from enum import StrEnum
from typing import Final


class NotificationKind(StrEnum):
    """Kinds of dispatched notification."""

    EMAIL = "email"
    TASK_REMINDER = "task-reminder"
    TASK_CREATED = "task-created"
    TASK_UPDATED = "task-updated"
    TASK_COMPLETED = "task-completed"

    @property
    def is_task_derived(self) -> bool:
        return self is not NotificationKind.EMAIL


class NotificationStatus(StrEnum):
    """Terminal status of a dispatch attempt."""

    SENT = "sent"
    FAILED = "failed"


class TaskEventKind(StrEnum):
    """Task lifecycle events that trigger a notification."""

    CREATED = "created"
    UPDATED = "updated"
    COMPLETED = "completed"

    @property
    def notification_kind(self) -> NotificationKind:
        return NotificationKind(f"task-{self.value}")


class PriorityTier(StrEnum):
    """Presentation tier for a task's priority."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_raw(cls, raw: str | None) -> "PriorityTier":
        """Map a free-form priority to a tier, defaulting to MEDIUM."""
        if raw:
            try:
                return cls(raw.strip().lower())
            except ValueError:
                pass
        return cls.MEDIUM


class ProviderName(StrEnum):
    """Transport backends selectable by configuration."""

    SMTP = "smtp"
    SES = "ses"


SHORT_TTL_SECONDS: Final[int] = 86_400  # 24 h, direct and test emails
LONG_TTL_SECONDS: Final[int] = 604_800  # 7 days, task-derived kinds

DEFAULT_SENDER: Final[str] = "noreply@taskmanager.com"
DEFAULT_PAGE_SIZE: Final[int] = 10
MAX_PAGE_SIZE: Final[int] = 100

RECORD_KEY_PREFIX: Final[str] = "notification:"

PRIORITY_COLORS: Final[dict[PriorityTier, str]] = {
    PriorityTier.HIGH: "#ef4444",
    PriorityTier.MEDIUM: "#f59e0b",
    PriorityTier.LOW: "#10b981",
}

__all__ = [
    "NotificationKind",
    "NotificationStatus",
    "TaskEventKind",
    "PriorityTier",
    "ProviderName",
    "SHORT_TTL_SECONDS",
    "LONG_TTL_SECONDS",
    "DEFAULT_SENDER",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "RECORD_KEY_PREFIX",
    "PRIORITY_COLORS",
]
