"""Builds the single process-wide transport from settings."""

from __future__ import annotations

import logging

from tasknotify.common.config import NotifySettings
from tasknotify.common.constants import ProviderName
from tasknotify.transport.base import EmailTransport
from tasknotify.transport.ses import SesTransport
from tasknotify.transport.smtp import SmtpTransport

logger = logging.getLogger(__name__)


def build_transport(settings: NotifySettings) -> EmailTransport:
    """Instantiate the transport named by ``settings.email_provider``."""
    provider = ProviderName(settings.email_provider)
    if provider is ProviderName.SES:
        transport: EmailTransport = SesTransport(
            region=settings.ses_region,
            from_email=settings.ses_from_email,
        )
    else:
        transport = SmtpTransport(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.smtp_timeout_seconds,
        )

    if not transport.is_configured():
        logger.warning("Email transport %s is not fully configured", transport.name)
    else:
        logger.info("Email transport %s selected", transport.name)
    return transport


__all__ = ["build_transport"]
