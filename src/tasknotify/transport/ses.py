"""Bulk relay delivery through the AWS SES API."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.exceptions import (
    ClientError,
    NoCredentialsError,
    NoRegionError,
    PartialCredentialsError,
)

from tasknotify.common.constants import ProviderName
from tasknotify.common.errors import TransportErrorKind
from tasknotify.transport.base import EmailTransport, OutboundMessage

# SES error codes that no amount of retrying will fix
_CONFIGURATION_CODES = frozenset({
    "MessageRejected",
    "MailFromDomainNotVerifiedException",
    "ConfigurationSetDoesNotExistException",
    "AccessDenied",
    "AccessDeniedException",
    "InvalidClientTokenId",
    "SignatureDoesNotMatch",
    "UnrecognizedClientException",
})

_CHARSET = "UTF-8"


class SesTransport(EmailTransport):
    """Sends through ``ses:SendEmail``.

    Credentials come from the usual boto3 chain (environment, IAM role,
    credentials file). Pass ``client`` to substitute the SES client.
    """

    name = ProviderName.SES.value

    def __init__(self, region: str, from_email: str = "", client: Any | None = None) -> None:
        self._region = region
        self._from_email = from_email
        self._client = client if client is not None else boto3.client("ses", region_name=region)

    def is_configured(self) -> bool:
        return bool(self._region and self._from_email)

    def _build_params(self, message: OutboundMessage) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if message.text:
            body["Text"] = {"Data": message.text, "Charset": _CHARSET}
        if message.html:
            body["Html"] = {"Data": message.html, "Charset": _CHARSET}
        return {
            "Source": message.sender,
            "Destination": {"ToAddresses": [message.to]},
            "Message": {
                "Subject": {"Data": message.subject, "Charset": _CHARSET},
                "Body": body,
            },
        }

    def _deliver(self, message: OutboundMessage) -> str:
        response = self._client.send_email(**self._build_params(message))
        return str(response.get("MessageId") or "")

    def _classify(self, exc: Exception) -> TransportErrorKind:
        if isinstance(exc, (NoCredentialsError, NoRegionError, PartialCredentialsError)):
            return TransportErrorKind.CONFIGURATION
        if isinstance(exc, ClientError):
            code = exc.response.get("Error", {}).get("Code", "")
            if code in _CONFIGURATION_CODES:
                return TransportErrorKind.CONFIGURATION
        return TransportErrorKind.TRANSIENT

    def _verify(self) -> None:
        self._client.get_send_quota()


__all__ = ["SesTransport"]
