"""Fault taxonomy shared by the dispatch, store and HTTP layers."""

from __future__ import annotations

from enum import StrEnum


class TransportErrorKind(StrEnum):
    """Coarse classification of a transport failure."""

    CONFIGURATION = "configuration-error"
    TRANSIENT = "transient-error"


class NotificationFault(Exception):
    """Base class for every fault raised by tasknotify."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFault(NotificationFault):
    """Missing or malformed required input. Never retried."""

    status_code = 400


class ResolutionFault(NotificationFault):
    """Identity lookup failed or returned no usable address."""

    status_code = 400

    def __init__(self, message: str, user_id: str = "") -> None:
        super().__init__(message)
        self.user_id = user_id


class TransportFault(NotificationFault):
    """The delivery mechanism rejected the message or was unreachable."""

    status_code = 500

    def __init__(
        self,
        message: str,
        kind: TransportErrorKind = TransportErrorKind.TRANSIENT,
        provider: str = "",
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.provider = provider


class StoreFault(NotificationFault):
    """Persistence read or write failed."""

    status_code = 500


__all__ = [
    "TransportErrorKind",
    "NotificationFault",
    "ValidationFault",
    "ResolutionFault",
    "TransportFault",
    "StoreFault",
]
