"""Uniform send capability shared by every transport backend.

Subclasses implement ``_deliver`` (and optionally ``_classify`` and
``_verify``). ``send`` validates the message before any backend code runs
and converts backend exceptions into ``TransportFault``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from tasknotify.common.errors import (
    TransportErrorKind,
    TransportFault,
    ValidationFault,
)

logger = logging.getLogger(__name__)


# --- Data Models ---


@dataclass(frozen=True)
class OutboundMessage:
    """A single-recipient message handed to a transport."""

    sender: str
    to: str
    subject: str
    text: str | None = None
    html: str | None = None

    def validate(self) -> None:
        if not self.to or not self.to.strip():
            raise ValidationFault("Missing recipient address")
        if "," in self.to or ";" in self.to:
            raise ValidationFault("Exactly one recipient address is supported")
        if not self.subject:
            raise ValidationFault("Missing subject")
        if not self.text and not self.html:
            raise ValidationFault("Message needs a text or html body")

    @property
    def is_multipart(self) -> bool:
        return bool(self.text and self.html)


@dataclass(frozen=True)
class TransportResult:
    """Provider acknowledgement of an accepted message."""

    provider_message_id: str
    provider_name: str


@dataclass(frozen=True)
class TransportCheck:
    """Outcome of a live configuration check."""

    ok: bool
    provider: str
    error: str | None = None


# --- Transport Base ---


class EmailTransport(ABC):
    """Base class for transport backends."""

    name: ClassVar[str] = ""

    def send(self, message: OutboundMessage) -> TransportResult:
        """Deliver ``message`` and return the provider's message id.

        Raises:
            ValidationFault: the message is incomplete; no backend is called.
            TransportFault: the backend rejected the message or was
                unreachable.
        """
        message.validate()
        try:
            message_id = self._deliver(message)
        except TransportFault:
            raise
        except Exception as exc:
            kind = self._classify(exc)
            logger.error(
                "Transport %s failed to deliver to %s (%s): %s",
                self.name, message.to, kind, exc,
            )
            raise TransportFault(str(exc) or type(exc).__name__, kind, self.name) from exc

        if not message_id:
            raise TransportFault(
                f"{self.name} accepted the message but returned no message id",
                TransportErrorKind.TRANSIENT,
                self.name,
            )
        logger.info("Transport %s delivered message %s to %s", self.name, message_id, message.to)
        return TransportResult(provider_message_id=message_id, provider_name=self.name)

    def verify(self) -> TransportCheck:
        """Run a live configuration check without raising."""
        if not self.is_configured():
            return TransportCheck(ok=False, provider=self.name, error="transport is not configured")
        try:
            self._verify()
        except Exception as exc:
            logger.warning("Transport %s verification failed: %s", self.name, exc)
            return TransportCheck(ok=False, provider=self.name, error=str(exc))
        return TransportCheck(ok=True, provider=self.name)

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether the configuration looks complete enough to send."""

    @abstractmethod
    def _deliver(self, message: OutboundMessage) -> str:
        """Hand the message to the backend and return its message id."""

    def _classify(self, exc: Exception) -> TransportErrorKind:
        return TransportErrorKind.TRANSIENT

    def _verify(self) -> None:
        return None


__all__ = [
    "OutboundMessage",
    "TransportResult",
    "TransportCheck",
    "EmailTransport",
]
