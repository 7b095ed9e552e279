"""Common configuration, constants, faults and schemas for tasknotify."""

from tasknotify.common.constants import (
    LONG_TTL_SECONDS,
    SHORT_TTL_SECONDS,
    NotificationKind,
    NotificationStatus,
    PriorityTier,
    ProviderName,
    TaskEventKind,
)
from tasknotify.common.errors import (
    NotificationFault,
    ResolutionFault,
    StoreFault,
    TransportErrorKind,
    TransportFault,
    ValidationFault,
)
from tasknotify.common.schemas import NotificationRecord

__all__ = [
    "NotificationKind",
    "NotificationStatus",
    "PriorityTier",
    "ProviderName",
    "TaskEventKind",
    "SHORT_TTL_SECONDS",
    "LONG_TTL_SECONDS",
    "NotificationFault",
    "ResolutionFault",
    "StoreFault",
    "TransportErrorKind",
    "TransportFault",
    "ValidationFault",
    "NotificationRecord",
]
