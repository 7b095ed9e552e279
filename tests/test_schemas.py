"""Tests for record and request schemas."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from tasknotify.common.constants import NotificationKind, NotificationStatus
from tasknotify.common.schemas import (
    EmailCheckRequest,
    EmailRequest,
    NotificationRecord,
    TaskEventRequest,
    TaskReminderRequest,
)

# --- Helpers ---


def _make_record(**overrides) -> NotificationRecord:
    fields = {
        "id": "task_reminder_1736942400000_abc123xyz",
        "kind": NotificationKind.TASK_REMINDER,
        "recipient": "owner@example.com",
        "subject": "Task Reminder: Write report",
        "status": NotificationStatus.SENT,
        "provider_message_id": "<msg-1@fake>",
        "provider": "smtp",
        "related_task_id": "42",
        "owner_id": "user-1",
        "created_at": datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return NotificationRecord(**fields)


# --- NotificationRecord ---


def test_record_is_frozen():
    record = _make_record()
    with pytest.raises(ValidationError):
        record.subject = "changed"


def test_sent_record_requires_message_id():
    with pytest.raises(ValidationError, match="provider_message_id"):
        _make_record(provider_message_id=None)


def test_failed_record_rejects_message_id():
    with pytest.raises(ValidationError):
        _make_record(status=NotificationStatus.FAILED)
    record = _make_record(status=NotificationStatus.FAILED, provider_message_id=None)
    assert record.status == NotificationStatus.FAILED


def test_record_rejects_unknown_kind():
    with pytest.raises(ValidationError):
        _make_record(kind="sms")


def test_record_json_uses_camel_case():
    payload = json.loads(_make_record().to_json())
    assert payload["providerMessageId"] == "<msg-1@fake>"
    assert payload["relatedTaskId"] == "42"
    assert payload["ownerId"] == "user-1"
    assert payload["kind"] == "task-reminder"
    assert "created_at" not in payload


def test_record_json_round_trip():
    record = _make_record()
    assert NotificationRecord.from_json(record.to_json()) == record
    assert NotificationRecord.from_json(record.to_json().encode()) == record


def test_record_accepts_snake_case_and_numeric_ids():
    record = _make_record(related_task_id=42, owner_id=7)
    assert record.related_task_id == "42"
    assert record.owner_id == "7"


# --- Request bodies ---


def test_email_request_camel_case_input():
    req = EmailRequest.model_validate(
        {"to": "a@x.com", "subject": "Hi", "text": "Hello", "userId": 9},
    )
    assert req.user_id == "9"


def test_email_request_needs_a_body():
    with pytest.raises(ValidationError, match="text or html"):
        EmailRequest.model_validate({"to": "a@x.com", "subject": "Hi"})
    assert EmailRequest.model_validate({"to": "a@x.com", "subject": "Hi", "html": "<b>x</b>"})


def test_email_request_rejects_empty_fields():
    with pytest.raises(ValidationError):
        EmailRequest.model_validate({"to": "", "subject": "Hi", "text": "x"})


def test_email_check_request():
    assert EmailCheckRequest.model_validate({"to": "a@x.com"}).to == "a@x.com"
    with pytest.raises(ValidationError):
        EmailCheckRequest.model_validate({})


def test_task_reminder_request():
    req = TaskReminderRequest.model_validate(
        {"userId": 1, "taskId": 42, "taskTitle": "Write report", "dueDate": "2025-01-20"},
    )
    assert (req.user_id, req.task_id, req.due_date) == ("1", "42", "2025-01-20")
    with pytest.raises(ValidationError):
        TaskReminderRequest.model_validate({"userId": "1", "taskTitle": "Write report"})


def test_task_event_request_optional_fields():
    req = TaskEventRequest.model_validate({"taskTitle": "T", "notificationType": "updated"})
    assert req.recipient is None
    assert req.user_email is None
    assert req.task_priority is None
    with pytest.raises(ValidationError):
        TaskEventRequest.model_validate({"taskTitle": "T"})
