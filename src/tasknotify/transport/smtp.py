"""Direct mail submission over SMTP."""

from __future__ import annotations

import smtplib
import socket
from collections.abc import Callable
from email.message import EmailMessage
from email.utils import make_msgid

from tasknotify.common.constants import ProviderName
from tasknotify.common.errors import TransportErrorKind
from tasknotify.transport.base import EmailTransport, OutboundMessage

_CONFIGURATION_ERRORS: tuple[type[Exception], ...] = (
    smtplib.SMTPAuthenticationError,
    smtplib.SMTPSenderRefused,
    smtplib.SMTPNotSupportedError,
    socket.gaierror,
)


class SmtpTransport(EmailTransport):
    """Submits each message on a fresh SMTP connection.

    ``connection_factory`` defaults to ``smtplib.SMTP`` and is replaceable
    so tests never open a socket.
    """

    name = ProviderName.SMTP.value

    def __init__(
        self,
        host: str,
        port: int = 587,
        user: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 30.0,
        connection_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
    ) -> None:
        self._host = host
        self._port = port
        self._user = user
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout
        self._connection_factory = connection_factory

    def is_configured(self) -> bool:
        return bool(self._host and self._user and self._password)

    def _build(self, message: OutboundMessage) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = message.sender
        msg["To"] = message.to
        msg["Subject"] = message.subject
        domain = message.sender.rpartition("@")[2] or None
        msg["Message-ID"] = make_msgid(domain=domain)

        if message.is_multipart:
            msg.set_content(message.text)
            msg.add_alternative(message.html, subtype="html")
        elif message.text:
            msg.set_content(message.text)
        else:
            msg.set_content(message.html or "", subtype="html")
        return msg

    def _open(self) -> smtplib.SMTP:
        conn = self._connection_factory(self._host, self._port, timeout=self._timeout)
        try:
            if self._use_tls:
                conn.starttls()
            if self._user:
                conn.login(self._user, self._password)
        except Exception:
            conn.close()
            raise
        return conn

    def _deliver(self, message: OutboundMessage) -> str:
        msg = self._build(message)
        with self._open() as conn:
            conn.send_message(msg)
        return str(msg["Message-ID"])

    def _classify(self, exc: Exception) -> TransportErrorKind:
        if isinstance(exc, _CONFIGURATION_ERRORS):
            return TransportErrorKind.CONFIGURATION
        return TransportErrorKind.TRANSIENT

    def _verify(self) -> None:
        with self._open() as conn:
            conn.noop()


__all__ = ["SmtpTransport"]
