"""Tests for the dispatch orchestrator and its templates."""

from __future__ import annotations

import threading
from datetime import date, timedelta

import pytest

from fakes import (
    FailingStore,
    FakeResolver,
    FakeTransport,
    ManualClock,
    ManualDatetimeClock,
)
from tasknotify.common.constants import (
    LONG_TTL_SECONDS,
    SHORT_TTL_SECONDS,
    NotificationKind,
    NotificationStatus,
    PriorityTier,
    TaskEventKind,
)
from tasknotify.common.errors import (
    ResolutionFault,
    TransportErrorKind,
    TransportFault,
    ValidationFault,
)
from tasknotify.dispatch.ids import RecordIdGenerator
from tasknotify.dispatch.orchestrator import (
    DispatchOrchestrator,
    DispatchOutcome,
    DispatchStatus,
)
from tasknotify.dispatch.templates import (
    NO_DUE_DATE_REMINDER,
    TEST_EMAIL,
    format_due_date,
    render_task_event,
    render_task_reminder,
)
from tasknotify.store.memory import InMemoryNotificationStore


# --- Helpers ---


def _orchestrator(
    transport: FakeTransport | None = None,
    store=None,
    users: dict[str, str] | None = None,
    clock: ManualClock | None = None,
) -> tuple[DispatchOrchestrator, FakeTransport, object, FakeResolver]:
    transport = transport or FakeTransport()
    store = store if store is not None else InMemoryNotificationStore(clock=clock or ManualClock())
    resolver = FakeResolver(users if users is not None else {"user-1": "owner@example.com"})
    orch = DispatchOrchestrator(
        transport=transport,
        store=store,
        resolver=resolver,
        sender="noreply@taskmanager.com",
        id_generator=RecordIdGenerator(clock=ManualDatetimeClock()),
    )
    return orch, transport, store, resolver


# --- Record ids ---


def test_ids_have_kind_prefix_and_are_unique():
    gen = RecordIdGenerator()
    ids = {gen.next(NotificationKind.TASK_CREATED)[0] for _ in range(200)}
    assert len(ids) == 200
    assert all(i.startswith("task_created_") for i in ids)


def test_ids_encode_millisecond_timestamp():
    clock = ManualDatetimeClock()
    notification_id, created_at = RecordIdGenerator(clock=clock).next(NotificationKind.EMAIL)
    prefix, millis, suffix = notification_id.split("_")
    assert prefix == "email"
    assert int(millis) == int(clock.now.timestamp() * 1000)
    assert len(suffix) == 9


def test_created_at_strictly_increases_with_frozen_clock():
    gen = RecordIdGenerator(clock=ManualDatetimeClock())
    stamps = [gen.next(NotificationKind.EMAIL)[1] for _ in range(5)]
    assert all(a < b for a, b in zip(stamps, stamps[1:]))


def test_created_at_never_goes_backwards():
    clock = ManualDatetimeClock()
    gen = RecordIdGenerator(clock=clock)
    _, first = gen.next(NotificationKind.EMAIL)
    clock.advance(-30)
    _, second = gen.next(NotificationKind.EMAIL)
    assert second > first


def test_created_at_monotonic_across_threads():
    gen = RecordIdGenerator()
    stamps: list = []
    lock = threading.Lock()

    def worker() -> None:
        for _ in range(100):
            _, ts = gen.next(NotificationKind.EMAIL)
            with lock:
                stamps.append(ts)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(set(stamps)) == 400


# --- send_direct ---


def test_send_direct_stores_one_sent_record():
    orch, transport, store, _ = _orchestrator()
    outcome = orch.send_direct("a@x.com", "Hi", text="Hello")

    assert isinstance(outcome, DispatchOutcome)
    assert outcome.recorded
    assert outcome.provider == "smtp"
    records = store.list_all()
    assert len(records) == 1
    record = records[0]
    assert record.id == outcome.notification_id
    assert record.status == NotificationStatus.SENT
    assert record.provider_message_id == outcome.provider_message_id != ""
    assert record.kind == NotificationKind.EMAIL
    assert record.recipient == "a@x.com"
    assert len(transport.sent) == 1


def test_send_direct_provider_matches_transport():
    orch, _, _, _ = _orchestrator(transport=FakeTransport(name="ses"))
    outcome = orch.send_direct("a@x.com", "Hi", text="Hello")
    assert outcome.provider == "ses"
    assert outcome.record.provider == "ses"


def test_send_direct_uses_short_ttl():
    clock = ManualClock()
    orch, _, store, _ = _orchestrator(clock=clock)
    outcome = orch.send_direct("a@x.com", "Hi", text="Hello")
    clock.advance(SHORT_TTL_SECONDS - 1)
    assert store.get(outcome.notification_id) is not None
    clock.advance(1)
    assert store.get(outcome.notification_id) is None


@pytest.mark.parametrize("kwargs", [
    {"to": "a@x.com", "subject": "", "text": "Hello"},
    {"to": "", "subject": "Hi", "text": "Hello"},
    {"to": "a@x.com", "subject": "Hi"},
    {"to": "bob,alice", "subject": "Hi", "text": "Hello"},
    {"to": "a@x.com; b@x.com", "subject": "Hi", "text": "Hello"},
])
def test_send_direct_validation_fails_fast(kwargs):
    orch, transport, store, resolver = _orchestrator()
    with pytest.raises(ValidationFault):
        orch.send_direct(**kwargs)
    assert transport.sent == []
    assert store.list_all() == []
    assert resolver.calls == []


def test_send_direct_resolves_bare_identifier():
    orch, transport, _, resolver = _orchestrator()
    outcome = orch.send_direct("user-1", "Hi", text="Hello", owner_id="user-1")
    assert resolver.calls == ["user-1"]
    assert transport.sent[0].to == "owner@example.com"
    assert outcome.record.recipient == "owner@example.com"
    assert outcome.record.owner_id == "user-1"


def test_send_direct_does_not_resolve_addresses():
    orch, _, _, resolver = _orchestrator()
    orch.send_direct("a@x.com", "Hi", text="Hello")
    assert resolver.calls == []


def test_send_direct_falls_back_when_resolution_fails(caplog):
    orch, transport, store, _ = _orchestrator(users={})
    with caplog.at_level("WARNING"):
        outcome = orch.send_direct("user-9", "Hi", text="Hello")
    assert transport.sent[0].to == "user-9"
    assert outcome.recorded
    assert store.get(outcome.notification_id).recipient == "user-9"
    assert any("Could not resolve" in r.message for r in caplog.records)


def test_send_direct_transport_failure_writes_nothing():
    transport = FakeTransport(fail_with=TransportErrorKind.TRANSIENT)
    orch, _, store, _ = _orchestrator(transport=transport)
    with pytest.raises(TransportFault) as info:
        orch.send_direct("a@x.com", "Hi", text="Hello")
    assert info.value.kind == TransportErrorKind.TRANSIENT
    assert store.list_all() == []


def test_send_direct_store_failure_is_delivered_unrecorded():
    store = FailingStore()
    orch, transport, _, _ = _orchestrator(store=store)
    outcome = orch.send_direct("a@x.com", "Hi", text="Hello")
    assert outcome.status == DispatchStatus.DELIVERED_UNRECORDED
    assert not outcome.recorded
    assert outcome.provider_message_id
    assert len(transport.sent) == 1
    assert store.attempts == 1


def test_retry_mints_a_new_record():
    orch, _, store, _ = _orchestrator()
    first = orch.send_direct("a@x.com", "Hi", text="Hello")
    second = orch.send_direct("a@x.com", "Hi", text="Hello")
    assert first.notification_id != second.notification_id
    assert second.record.created_at > first.record.created_at
    assert len(store.list_all()) == 2


def test_send_test_email_uses_fixed_content():
    orch, transport, store, _ = _orchestrator()
    outcome = orch.send_test_email("a@x.com")
    sent = transport.sent[0]
    assert sent.subject == TEST_EMAIL.subject
    assert sent.text == TEST_EMAIL.text
    assert sent.html == TEST_EMAIL.html
    assert store.get(outcome.notification_id).owner_id is None


# --- send_task_reminder ---


def test_task_reminder_happy_path():
    clock = ManualClock()
    orch, transport, store, _ = _orchestrator(clock=clock)
    outcome = orch.send_task_reminder("user-1", "42", "Write report", due_date="2025-01-20")

    sent = transport.sent[0]
    assert sent.to == "owner@example.com"
    assert sent.subject == "Task Reminder: Write report"
    assert "Due date: 1/20/2025" in sent.text

    record = store.get(outcome.notification_id)
    assert record.kind == NotificationKind.TASK_REMINDER
    assert record.related_task_id == "42"
    assert record.owner_id == "user-1"

    clock.advance(SHORT_TTL_SECONDS + 1)
    assert store.get(outcome.notification_id) is not None
    clock.advance(LONG_TTL_SECONDS)
    assert store.get(outcome.notification_id) is None


def test_task_reminder_without_due_date():
    orch, transport, _, _ = _orchestrator()
    orch.send_task_reminder("user-1", "42", "Write report")
    assert NO_DUE_DATE_REMINDER in transport.sent[0].text


def test_task_reminder_unresolvable_owner_aborts():
    orch, transport, store, _ = _orchestrator(users={})
    with pytest.raises(ResolutionFault):
        orch.send_task_reminder("ghost", "42", "Write report")
    assert transport.sent == []
    assert store.list_all() == []


@pytest.mark.parametrize("args", [
    ("", "42", "Write report"),
    ("user-1", "", "Write report"),
    ("user-1", "42", ""),
])
def test_task_reminder_missing_fields(args):
    orch, transport, _, resolver = _orchestrator()
    with pytest.raises(ValidationFault):
        orch.send_task_reminder(*args)
    assert resolver.calls == []
    assert transport.sent == []


def test_task_reminder_bad_due_date_fails_before_lookup():
    orch, _, _, resolver = _orchestrator()
    with pytest.raises(ValidationFault):
        orch.send_task_reminder("user-1", "42", "Write report", due_date="next tuesday")
    assert resolver.calls == []


def test_task_reminder_transport_failure_is_distinct():
    transport = FakeTransport(fail_with=TransportErrorKind.CONFIGURATION)
    orch, _, store, _ = _orchestrator(transport=transport)
    with pytest.raises(TransportFault):
        orch.send_task_reminder("user-1", "42", "Write report")
    assert store.list_all() == []


# --- send_task_event ---


def test_task_event_created():
    orch, transport, store, resolver = _orchestrator()
    outcome = orch.send_task_event(
        "Write report", "created", "owner@example.com",
        task_id="42", task_priority="high",
    )
    sent = transport.sent[0]
    assert "Write report" in sent.subject
    assert sent.to == "owner@example.com"
    record = store.get(outcome.notification_id)
    assert record.kind == NotificationKind.TASK_CREATED
    assert record.related_task_id == "42"
    assert resolver.calls == []


@pytest.mark.parametrize("event,kind", [
    (TaskEventKind.UPDATED, NotificationKind.TASK_UPDATED),
    ("completed", NotificationKind.TASK_COMPLETED),
    ("CREATED", NotificationKind.TASK_CREATED),
])
def test_task_event_kinds(event, kind):
    orch, _, store, _ = _orchestrator()
    outcome = orch.send_task_event("Write report", event, "owner@example.com")
    assert store.get(outcome.notification_id).kind == kind


def test_task_event_unknown_type_rejected():
    orch, transport, _, _ = _orchestrator()
    with pytest.raises(ValidationFault):
        orch.send_task_event("Write report", "deleted", "owner@example.com")
    assert transport.sent == []


def test_task_event_requires_title_and_recipient():
    orch, transport, _, _ = _orchestrator()
    with pytest.raises(ValidationFault):
        orch.send_task_event("", "created", "owner@example.com")
    with pytest.raises(ValidationFault):
        orch.send_task_event("Write report", "created", "")
    with pytest.raises(ValidationFault):
        orch.send_task_event("Write report", "created", "user-1")
    assert transport.sent == []


def test_task_event_uses_long_ttl():
    clock = ManualClock()
    orch, _, store, _ = _orchestrator(clock=clock)
    outcome = orch.send_task_event("Write report", "completed", "owner@example.com")
    clock.advance(LONG_TTL_SECONDS - 1)
    assert store.get(outcome.notification_id) is not None
    clock.advance(1)
    assert store.get(outcome.notification_id) is None


def test_task_event_unrecognized_priority_renders_medium():
    orch, transport, _, _ = _orchestrator()
    orch.send_task_event("Write report", "created", "owner@example.com", task_priority="urgent")
    assert "- Priority: medium" in transport.sent[0].text


# --- Templates ---


def test_priority_tier_mapping():
    assert PriorityTier.from_raw("high") is PriorityTier.HIGH
    assert PriorityTier.from_raw(" LOW ") is PriorityTier.LOW
    assert PriorityTier.from_raw(None) is PriorityTier.MEDIUM
    assert PriorityTier.from_raw("urgent") is PriorityTier.MEDIUM


def test_format_due_date():
    assert format_due_date("2025-01-05", "none") == "1/5/2025"
    assert format_due_date("2025-12-31T23:00:00Z", "none") == "12/31/2025"
    assert format_due_date(date(2024, 2, 29), "none") == "2/29/2024"
    assert format_due_date(None, "none") == "none"
    assert format_due_date("", "none") == "none"


def test_reminder_template():
    rendered = render_task_reminder("Write <report>", None)
    assert rendered.subject == "Task Reminder: Write <report>"
    assert "No due date set" in rendered.text
    assert "Write &lt;report&gt;" in rendered.html


def test_event_template_priority_color():
    rendered = render_task_event(
        TaskEventKind.CREATED, "Write report", None, PriorityTier.HIGH, None,
    )
    assert rendered.subject.endswith("New Task Created: Write report")
    assert "#ef4444" in rendered.html
    assert "No description" in rendered.text
    assert "No due date" in rendered.text


def test_event_templates_differ_by_kind():
    subjects = {
        render_task_event(kind, "T", None, PriorityTier.MEDIUM, None).subject
        for kind in TaskEventKind
    }
    assert len(subjects) == 3


def test_due_date_offsets():
    due = date(2025, 3, 1) + timedelta(days=30)
    assert format_due_date(due, "none") == "3/31/2025"
