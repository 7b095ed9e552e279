"""Notification dispatch flows."""

from __future__ import annotations

from tasknotify.dispatch.ids import RecordIdGenerator
from tasknotify.dispatch.orchestrator import (
    DispatchOrchestrator,
    DispatchOutcome,
    DispatchStatus,
)
from tasknotify.dispatch.templates import RenderedMessage, format_due_date

__all__ = [
    "DispatchOrchestrator",
    "DispatchOutcome",
    "DispatchStatus",
    "RecordIdGenerator",
    "RenderedMessage",
    "format_due_date",
]
