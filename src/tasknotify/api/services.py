"""Wires settings into the transport, store, resolver and query objects."""

from __future__ import annotations

from dataclasses import dataclass

from tasknotify.common.config import NotifySettings
from tasknotify.dispatch.ids import RecordIdGenerator
from tasknotify.dispatch.orchestrator import DispatchOrchestrator
from tasknotify.history.query import HistoryQuery
from tasknotify.identity.resolver import HttpIdentityResolver, IdentityResolver
from tasknotify.store.base import NotificationStore, RetentionPolicy
from tasknotify.store.factory import build_store
from tasknotify.transport.base import EmailTransport
from tasknotify.transport.factory import build_transport


@dataclass(frozen=True)
class NotificationServices:
    """Everything a request handler needs, built once per process."""

    settings: NotifySettings
    transport: EmailTransport
    store: NotificationStore
    orchestrator: DispatchOrchestrator
    history: HistoryQuery

    @classmethod
    def from_settings(
        cls,
        settings: NotifySettings,
        transport: EmailTransport | None = None,
        store: NotificationStore | None = None,
        resolver: IdentityResolver | None = None,
        id_generator: RecordIdGenerator | None = None,
    ) -> "NotificationServices":
        """Build from settings; any collaborator passed in is used as-is."""
        transport = transport or build_transport(settings)
        store = store or build_store(settings)
        resolver = resolver or HttpIdentityResolver(
            settings.identity_service_url,
            timeout=settings.identity_timeout_seconds,
        )
        orchestrator = DispatchOrchestrator(
            transport=transport,
            store=store,
            resolver=resolver,
            sender=settings.sender_address,
            retention=RetentionPolicy(
                short_ttl_seconds=settings.short_ttl_seconds,
                long_ttl_seconds=settings.long_ttl_seconds,
            ),
            id_generator=id_generator,
        )
        return cls(
            settings=settings,
            transport=transport,
            store=store,
            orchestrator=orchestrator,
            history=HistoryQuery(store, max_page_size=settings.max_page_size),
        )


__all__ = ["NotificationServices"]
