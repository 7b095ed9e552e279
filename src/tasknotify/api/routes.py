"""HTTP routes for dispatch, history and provider status."""

from __future__ import annotations

from typing import Any, TypeVar

from flask import Blueprint, current_app, g, jsonify, request
from pydantic import BaseModel, ValidationError

from tasknotify.api.services import NotificationServices
from tasknotify.common.errors import ValidationFault
from tasknotify.common.schemas import (
    EmailCheckRequest,
    EmailRequest,
    TaskEventRequest,
    TaskReminderRequest,
)
from tasknotify.dispatch.orchestrator import DispatchOutcome

notifications_bp = Blueprint("notifications_bp", __name__, url_prefix="/api/notifications")

_M = TypeVar("_M", bound=BaseModel)


def _services() -> NotificationServices:
    return current_app.extensions["tasknotify"]


def _correlation_id() -> str:
    return getattr(g, "correlation_id", "")


def _parse(model: type[_M]) -> _M:
    """Validate the JSON body, turning pydantic errors into a ValidationFault."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        problems = []
        for err in exc.errors():
            field = ".".join(str(p) for p in err["loc"])
            msg = err["msg"].removeprefix("Value error, ")
            problems.append(f"{field}: {msg}" if field else msg)
        raise ValidationFault("Invalid request: " + "; ".join(problems)) from exc


def _int_arg(name: str, default: int) -> int:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationFault(f"{name} must be an integer") from exc


def _dispatch_response(
    outcome: DispatchOutcome, message: str, include_delivery: bool = True,
) -> tuple[Any, int]:
    body: dict[str, Any] = {"message": message, "notificationId": outcome.notification_id}
    if include_delivery or not outcome.recorded:
        body["messageId"] = outcome.provider_message_id
        body["provider"] = outcome.provider
    if outcome.recorded:
        return jsonify(body), 200

    # delivered, but nothing in the store for history/status to find
    body["message"] = f"{message}, but the delivery could not be recorded"
    body["warning"] = outcome.status.value
    return jsonify(body), 202


# --- Dispatch ---


@notifications_bp.post("/email")
def send_email():
    req = _parse(EmailRequest)
    outcome = _services().orchestrator.send_direct(
        req.to,
        req.subject,
        text=req.text,
        html=req.html,
        owner_id=req.user_id,
        correlation_id=_correlation_id(),
    )
    return _dispatch_response(outcome, "Email sent successfully")


@notifications_bp.post("/task-reminder")
def send_task_reminder():
    req = _parse(TaskReminderRequest)
    outcome = _services().orchestrator.send_task_reminder(
        req.user_id,
        req.task_id,
        req.task_title,
        due_date=req.due_date,
        correlation_id=_correlation_id(),
    )
    return _dispatch_response(outcome, "Task reminder sent successfully", include_delivery=False)


@notifications_bp.post("/task-event")
def send_task_event():
    req = _parse(TaskEventRequest)
    services = _services()
    # A configured owner address wins over whatever the caller sent.
    recipient = services.settings.task_owner_email or req.recipient or req.user_email or ""
    outcome = services.orchestrator.send_task_event(
        req.task_title,
        req.notification_type,
        recipient,
        task_id=req.task_id,
        task_description=req.task_description,
        task_priority=req.task_priority,
        task_due_date=req.task_due_date,
        owner_id=req.user_id,
        correlation_id=_correlation_id(),
    )
    kind = outcome.record.kind.value.removeprefix("task-")
    return _dispatch_response(outcome, f"Task {kind} notification sent successfully")


@notifications_bp.post("/test-email")
def send_test_email():
    req = _parse(EmailCheckRequest)
    outcome = _services().orchestrator.send_test_email(req.to, correlation_id=_correlation_id())
    if not outcome.recorded:
        return _dispatch_response(outcome, "Test email sent successfully")
    return jsonify({
        "message": "Test email sent successfully",
        "messageId": outcome.provider_message_id,
        "provider": outcome.provider,
    }), 200


# --- History ---


def _history(owner_id: str | None):
    services = _services()
    page = services.history.list(
        owner_id=owner_id,
        page=_int_arg("page", 1),
        page_size=_int_arg("limit", services.settings.default_page_size),
    )
    return jsonify(page.to_dict()), 200


@notifications_bp.get("/history")
def list_history():
    return _history(None)


@notifications_bp.get("/history/<owner_id>")
def list_owner_history(owner_id: str):
    return _history(owner_id)


@notifications_bp.get("/status/<notification_id>")
def notification_status(notification_id: str):
    record = _services().history.get_status(notification_id)
    if record is None:
        return jsonify({"error": "Notification not found"}), 404
    return jsonify({"notification": record.model_dump(mode="json", by_alias=True)}), 200


# --- Provider ---


@notifications_bp.get("/provider")
def provider_info():
    transport = _services().transport
    return jsonify({"provider": transport.name, "configured": transport.is_configured()}), 200


__all__ = ["notifications_bp"]
