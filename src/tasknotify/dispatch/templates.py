"""Subject and body templates for reminder, lifecycle and test emails."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from html import escape

from tasknotify.common.constants import PRIORITY_COLORS, PriorityTier, TaskEventKind
from tasknotify.common.errors import ValidationFault

NO_DUE_DATE_REMINDER = "No due date set"
NO_DUE_DATE_EVENT = "No due date"
NO_DESCRIPTION = "No description"
_FALLBACK_COLOR = "#6b7280"


@dataclass(frozen=True)
class RenderedMessage:
    subject: str
    text: str
    html: str


def parse_due_date(raw: str | date | datetime | None) -> date | None:
    """Accept an ISO-8601 date/datetime string (or a date) from callers."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    try:
        return datetime.fromisoformat(raw.strip()).date()
    except ValueError as exc:
        raise ValidationFault(f"Invalid due date: {raw!r}") from exc


def format_due_date(raw: str | date | datetime | None, placeholder: str) -> str:
    """US-locale short date (``M/D/YYYY``), or ``placeholder`` when absent."""
    due = parse_due_date(raw)
    if due is None:
        return placeholder
    return f"{due.month}/{due.day}/{due.year}"


# --- Task reminder ---


def render_task_reminder(task_title: str, due_date: str | date | None) -> RenderedMessage:
    due_text = format_due_date(due_date, NO_DUE_DATE_REMINDER)
    title = escape(task_title)

    text = (
        "Hi there!\n\n"
        f'This is a reminder about your task: "{task_title}"\n'
        f"Due date: {due_text}\n\n"
        "Please log in to your task manager to view and update this task.\n\n"
        "Best regards,\n"
        "Task Management Team\n"
    )
    html = (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        '<h2 style="color: #333;">Task Reminder</h2>'
        "<p>Hi there!</p>"
        "<p>This is a reminder about your task:</p>"
        '<div style="background-color: #f5f5f5; padding: 15px; border-radius: 5px; margin: 15px 0;">'
        f'<h3 style="margin: 0; color: #2c3e50;">{title}</h3>'
        f'<p style="margin: 5px 0; color: #666;">Due date: {due_text}</p>'
        "</div>"
        "<p>Please log in to your task manager to view and update this task.</p>"
        "<p>Best regards,<br>Task Management Team</p>"
        "</div>"
    )
    return RenderedMessage(subject=f"Task Reminder: {task_title}", text=text, html=html)


# --- Task lifecycle events ---

# (subject prefix, heading, intro sentence)
_EVENT_COPY: dict[TaskEventKind, tuple[str, str, str]] = {
    TaskEventKind.CREATED: (
        "✅ New Task Created",
        "New Task Created",
        "A new task has been created in your Task Management System.",
    ),
    TaskEventKind.UPDATED: (
        "✏️ Task Updated",
        "Task Updated",
        "A task has been updated in your Task Management System.",
    ),
    TaskEventKind.COMPLETED: (
        "\U0001f389 Task Completed",
        "Task Completed",
        "A task has been marked as completed in your Task Management System.",
    ),
}


def render_task_event(
    event: TaskEventKind,
    task_title: str,
    task_description: str | None,
    priority: PriorityTier,
    due_date: str | date | None,
) -> RenderedMessage:
    subject_prefix, heading, intro = _EVENT_COPY[event]
    due_text = format_due_date(due_date, NO_DUE_DATE_EVENT)
    description = task_description or NO_DESCRIPTION
    color = PRIORITY_COLORS.get(priority, _FALLBACK_COLOR)

    text = (
        "Hello!\n\n"
        f"{intro}\n\n"
        "Task Details:\n"
        f"- Title: {task_title}\n"
        f"- Description: {description}\n"
        f"- Priority: {priority.value}\n"
        f"- Due Date: {due_text}\n\n"
        "Log in to your task manager to view and manage this task.\n\n"
        "Best regards,\n"
        "Task Management System\n"
    )
    html = (
        "<div style=\"font-family: 'Segoe UI', Arial, sans-serif; max-width: 600px; "
        'margin: 0 auto; background-color: #f8fafc; padding: 20px;">'
        '<div style="background: linear-gradient(135deg, #2563eb 0%, #3b82f6 100%); '
        'padding: 30px; border-radius: 12px 12px 0 0; text-align: center;">'
        f'<h1 style="color: white; margin: 0; font-size: 24px;">{escape(heading)}</h1>'
        "</div>"
        '<div style="background-color: white; padding: 30px; border-radius: 0 0 12px 12px;">'
        f'<p style="color: #374151; font-size: 16px;">Hello! {escape(intro)}</p>'
        '<div style="background-color: #f1f5f9; padding: 20px; border-radius: 8px; '
        f'border-left: 4px solid {color};">'
        f'<h2 style="color: #1e293b; margin: 0 0 15px 0; font-size: 20px;">{escape(task_title)}</h2>'
        f'<p style="color: #64748b; margin: 0 0 15px 0;">{escape(description)}</p>'
        '<span style="color: #94a3b8; font-size: 12px; text-transform: uppercase;">Priority</span>'
        f'<p style="margin: 5px 0 0 0; color: {color}; font-weight: 600; '
        f'text-transform: capitalize;">{priority.value}</p>'
        '<span style="color: #94a3b8; font-size: 12px; text-transform: uppercase;">Due Date</span>'
        f'<p style="margin: 5px 0 0 0; color: #374151; font-weight: 600;">{due_text}</p>'
        "</div>"
        '<p style="color: #64748b; font-size: 14px; margin-top: 25px; text-align: center;">'
        "Log in to your task manager to view and manage this task.</p>"
        "</div>"
        "</div>"
    )
    return RenderedMessage(subject=f"{subject_prefix}: {task_title}", text=text, html=html)


# --- Test email ---

TEST_EMAIL = RenderedMessage(
    subject="Test Email - Task Management System",
    text=(
        "This is a test email from your Task Management System. "
        "If you received this, email notifications are working correctly!"
    ),
    html=(
        "<p>This is a test email from your <strong>Task Management System</strong>.</p>"
        "<p>If you received this, email notifications are working correctly!</p>"
    ),
)


__all__ = [
    "RenderedMessage",
    "parse_due_date",
    "format_due_date",
    "render_task_reminder",
    "render_task_event",
    "TEST_EMAIL",
    "NO_DUE_DATE_REMINDER",
    "NO_DUE_DATE_EVENT",
]
