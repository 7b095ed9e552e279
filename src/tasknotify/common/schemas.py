"""Pydantic v2 schemas for notification records and HTTP request bodies."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from tasknotify.common.constants import NotificationKind, NotificationStatus


class _CamelModel(BaseModel):
    """Base model exposing camelCase JSON while keeping snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True,
    )


class NotificationRecord(_CamelModel):
    """Outcome of a single dispatch attempt. Written once, never updated."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True,
        coerce_numbers_to_str=True,
    )

    id: str = Field(min_length=1)
    kind: NotificationKind
    recipient: str
    subject: str
    status: NotificationStatus
    provider_message_id: str | None = None
    provider: str | None = None
    related_task_id: str | None = None
    owner_id: str | None = None
    created_at: datetime

    @model_validator(mode="after")
    def check_status_fields(self) -> "NotificationRecord":
        """A sent record must carry the provider's message id."""
        if self.status == NotificationStatus.SENT and not self.provider_message_id:
            raise ValueError("sent records require a provider_message_id")
        if self.status == NotificationStatus.FAILED and self.provider_message_id:
            raise ValueError("failed records must not carry a provider_message_id")
        return self

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, raw: str | bytes) -> "NotificationRecord":
        return cls.model_validate_json(raw)


# --- Request bodies ---


class EmailRequest(_CamelModel):
    """Body of POST /email."""

    to: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    text: str | None = None
    html: str | None = None
    user_id: str | None = None

    @model_validator(mode="after")
    def require_body(self) -> "EmailRequest":
        if not self.text and not self.html:
            raise ValueError("text or html is required")
        return self


class EmailCheckRequest(_CamelModel):
    """Body of POST /test-email."""

    to: str = Field(min_length=1)


class TaskReminderRequest(_CamelModel):
    """Body of POST /task-reminder."""

    user_id: str = Field(min_length=1)
    task_id: str = Field(min_length=1)
    task_title: str = Field(min_length=1)
    due_date: str | None = None


class TaskEventRequest(_CamelModel):
    """Body of POST /task-event."""

    task_title: str = Field(min_length=1)
    notification_type: str = Field(min_length=1)
    task_id: str | None = None
    task_description: str | None = None
    task_priority: str | None = None
    task_due_date: str | None = None
    recipient: str | None = None
    user_email: str | None = None
    user_id: str | None = None


__all__ = [
    "NotificationRecord",
    "EmailRequest",
    "EmailCheckRequest",
    "TaskReminderRequest",
    "TaskEventRequest",
]
