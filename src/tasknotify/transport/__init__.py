"""Interchangeable email transports."""

from __future__ import annotations

from tasknotify.transport.base import (
    EmailTransport,
    OutboundMessage,
    TransportCheck,
    TransportResult,
)
from tasknotify.transport.factory import build_transport
from tasknotify.transport.ses import SesTransport
from tasknotify.transport.smtp import SmtpTransport

__all__ = [
    "EmailTransport",
    "OutboundMessage",
    "TransportCheck",
    "TransportResult",
    "SesTransport",
    "SmtpTransport",
    "build_transport",
]
