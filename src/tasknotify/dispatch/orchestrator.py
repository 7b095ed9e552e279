"""Notification dispatch service.

Builds a record, hands the message to the configured transport and persists
the outcome. Three flows share one send-and-record path:

- direct email: optional identity lookup with soft fallback to the raw value
- task reminder: identity lookup is mandatory; failure aborts before sending
- task lifecycle event: recipient supplied by the caller, no lookup

Faults are raised in this order: validation (before any external call),
resolution, transport. A store failure after a successful send does not
raise; it yields a ``DELIVERED_UNRECORDED`` outcome because the message has
already left the process.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from tasknotify.common.constants import (
    DEFAULT_SENDER,
    NotificationKind,
    NotificationStatus,
    PriorityTier,
    TaskEventKind,
)
from tasknotify.common.errors import (
    ResolutionFault,
    StoreFault,
    TransportFault,
    ValidationFault,
)
from tasknotify.common.schemas import NotificationRecord
from tasknotify.dispatch.ids import RecordIdGenerator
from tasknotify.dispatch.templates import (
    TEST_EMAIL,
    RenderedMessage,
    parse_due_date,
    render_task_event,
    render_task_reminder,
)
from tasknotify.identity.resolver import IdentityResolver, looks_like_address
from tasknotify.store.base import NotificationStore, RetentionPolicy
from tasknotify.transport.base import EmailTransport, OutboundMessage

logger = logging.getLogger(__name__)


# --- Enums ---


class DispatchStatus(StrEnum):
    """Whether a delivered message also made it into the store."""

    RECORDED = "recorded"
    DELIVERED_UNRECORDED = "delivered_unrecorded"


# --- Data Models ---


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of a dispatch whose transport send succeeded."""

    notification_id: str
    provider_message_id: str
    provider: str
    status: DispatchStatus
    record: NotificationRecord

    @property
    def recorded(self) -> bool:
        return self.status == DispatchStatus.RECORDED


# --- Dispatch Orchestrator ---


class DispatchOrchestrator:
    """Composes identity lookup, transport and store for each dispatch flow."""

    def __init__(
        self,
        transport: EmailTransport,
        store: NotificationStore,
        resolver: IdentityResolver,
        sender: str = DEFAULT_SENDER,
        retention: RetentionPolicy | None = None,
        id_generator: RecordIdGenerator | None = None,
    ) -> None:
        self._transport = transport
        self._store = store
        self._resolver = resolver
        self._sender = sender
        self._retention = retention or RetentionPolicy()
        self._ids = id_generator or RecordIdGenerator()

    @property
    def provider_name(self) -> str:
        return self._transport.name

    # -- public flows ----------------------------------------------------

    def send_direct(
        self,
        to: str,
        subject: str,
        text: str | None = None,
        html: str | None = None,
        owner_id: str | None = None,
        correlation_id: str = "",
    ) -> DispatchOutcome:
        """Send an arbitrary email.

        A ``to`` value without ``@`` is treated as a user id and looked up;
        if the lookup fails the raw value is used as-is.
        """
        if not to or not to.strip():
            raise ValidationFault("Missing required field: to")
        if "," in to or ";" in to:
            raise ValidationFault("Exactly one recipient address is supported")
        if not subject:
            raise ValidationFault("Missing required field: subject")
        if not text and not html:
            raise ValidationFault("Missing required field: text or html")

        recipient = to.strip()
        if not looks_like_address(recipient):
            try:
                recipient = self._resolver.resolve_email(recipient)
            except ResolutionFault as exc:
                logger.warning(
                    "[%s] Could not resolve %s to an address, sending to it as given: %s",
                    correlation_id, recipient, exc,
                )

        message = OutboundMessage(
            sender=self._sender, to=recipient, subject=subject, text=text, html=html,
        )
        return self._send_and_record(
            NotificationKind.EMAIL, message, owner_id=owner_id, correlation_id=correlation_id,
        )

    def send_test_email(self, to: str, correlation_id: str = "") -> DispatchOutcome:
        """Send the fixed configuration-check email."""
        return self.send_direct(
            to,
            TEST_EMAIL.subject,
            text=TEST_EMAIL.text,
            html=TEST_EMAIL.html,
            correlation_id=correlation_id,
        )

    def send_task_reminder(
        self,
        owner_id: str,
        task_id: str,
        task_title: str,
        due_date: str | date | None = None,
        correlation_id: str = "",
    ) -> DispatchOutcome:
        """Remind a task's owner. Raises ``ResolutionFault`` if the owner has no address."""
        missing = [
            name for name, value in
            (("userId", owner_id), ("taskId", task_id), ("taskTitle", task_title))
            if not value
        ]
        if missing:
            raise ValidationFault(f"Missing required fields: {', '.join(missing)}")
        parse_due_date(due_date)

        try:
            recipient = self._resolver.resolve_email(owner_id)
        except ResolutionFault as exc:
            logger.error(
                "[%s] Task reminder for task %s aborted, owner %s unresolved: %s",
                correlation_id, task_id, owner_id, exc,
            )
            raise

        rendered = render_task_reminder(task_title, due_date)
        return self._send_and_record(
            NotificationKind.TASK_REMINDER,
            self._message(recipient, rendered),
            owner_id=owner_id,
            related_task_id=task_id,
            correlation_id=correlation_id,
        )

    def send_task_event(
        self,
        task_title: str,
        event_kind: TaskEventKind | str,
        recipient: str,
        task_id: str | None = None,
        task_description: str | None = None,
        task_priority: str | None = None,
        task_due_date: str | date | None = None,
        owner_id: str | None = None,
        correlation_id: str = "",
    ) -> DispatchOutcome:
        """Notify a fixed recipient that a task was created, updated or completed."""
        if not task_title:
            raise ValidationFault("Missing required field: taskTitle")
        try:
            event = TaskEventKind(str(event_kind).strip().lower())
        except ValueError as exc:
            allowed = ", ".join(k.value for k in TaskEventKind)
            raise ValidationFault(
                f"Invalid notificationType {event_kind!r}; expected one of {allowed}",
            ) from exc
        if not recipient or not looks_like_address(recipient):
            raise ValidationFault("Missing or invalid recipient address")

        rendered = render_task_event(
            event,
            task_title,
            task_description,
            PriorityTier.from_raw(task_priority),
            task_due_date,
        )
        return self._send_and_record(
            event.notification_kind,
            self._message(recipient.strip(), rendered),
            owner_id=owner_id,
            related_task_id=task_id,
            correlation_id=correlation_id,
        )

    # -- shared path -----------------------------------------------------

    def _message(self, recipient: str, rendered: RenderedMessage) -> OutboundMessage:
        return OutboundMessage(
            sender=self._sender,
            to=recipient,
            subject=rendered.subject,
            text=rendered.text,
            html=rendered.html,
        )

    def _send_and_record(
        self,
        kind: NotificationKind,
        message: OutboundMessage,
        owner_id: str | None = None,
        related_task_id: str | None = None,
        correlation_id: str = "",
    ) -> DispatchOutcome:
        message.validate()
        notification_id, created_at = self._ids.next(kind)

        try:
            result = self._transport.send(message)
        except TransportFault as exc:
            logger.error(
                "[%s] %s notification %s to %s failed (%s): %s",
                correlation_id, kind, notification_id, message.to, exc.kind, exc,
            )
            raise

        record = NotificationRecord(
            id=notification_id,
            kind=kind,
            recipient=message.to,
            subject=message.subject,
            status=NotificationStatus.SENT,
            provider_message_id=result.provider_message_id,
            provider=result.provider_name,
            related_task_id=related_task_id,
            owner_id=owner_id,
            created_at=created_at,
        )

        status = DispatchStatus.RECORDED
        try:
            self._store.put(record, self._retention.ttl_for(kind))
        except StoreFault as exc:
            status = DispatchStatus.DELIVERED_UNRECORDED
            logger.error(
                "[%s] %s notification %s delivered to %s as %s but not recorded: %s",
                correlation_id, kind, notification_id, message.to,
                result.provider_message_id, exc,
            )
        else:
            logger.info(
                "[%s] %s notification %s sent to %s via %s",
                correlation_id, kind, notification_id, message.to, result.provider_name,
            )

        return DispatchOutcome(
            notification_id=notification_id,
            provider_message_id=result.provider_message_id,
            provider=result.provider_name,
            status=status,
            record=record,
        )


__all__ = ["DispatchStatus", "DispatchOutcome", "DispatchOrchestrator"]
