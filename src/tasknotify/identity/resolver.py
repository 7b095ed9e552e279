"""Client for the external identity service.

Only one capability is consumed: resolve a user id to an email address.
Every failure mode (timeout, connection error, non-2xx, missing address)
surfaces as ``ResolutionFault`` so callers decide whether it is fatal.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from urllib.parse import quote

import requests

from tasknotify.common.errors import ResolutionFault

logger = logging.getLogger(__name__)


def looks_like_address(value: str) -> bool:
    """True when ``value`` is already an email address rather than a user id."""
    local, sep, domain = value.strip().partition("@")
    return bool(sep and local and domain)


class IdentityResolver(ABC):
    """Resolves opaque user identifiers to contact addresses."""

    @abstractmethod
    def resolve_email(self, user_id: str) -> str:
        """Return the user's email address or raise ``ResolutionFault``."""


class HttpIdentityResolver(IdentityResolver):
    """Looks users up via ``GET <base_url>/api/users/<id>``.

    The service answers ``{"user": {"email": ...}}``. Without an injected
    ``session`` each thread gets its own ``requests.Session``.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session
        self._local = threading.local()

    def _get_session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = requests.Session()
        return session

    def _user_url(self, user_id: str) -> str:
        return f"{self._base_url}/api/users/{quote(user_id, safe='')}"

    def resolve_email(self, user_id: str) -> str:
        if not user_id:
            raise ResolutionFault("Missing user id", user_id)

        try:
            resp = self._get_session().get(self._user_url(user_id), timeout=self._timeout)
        except requests.Timeout as exc:
            raise ResolutionFault(
                f"Identity lookup for {user_id} timed out after {self._timeout}s", user_id,
            ) from exc
        except requests.RequestException as exc:
            raise ResolutionFault(f"Identity service unreachable: {exc}", user_id) from exc

        if resp.status_code == 404:
            raise ResolutionFault(f"User {user_id} not found", user_id)
        if not 200 <= resp.status_code < 300:
            raise ResolutionFault(
                f"Identity service returned HTTP {resp.status_code} for {user_id}", user_id,
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise ResolutionFault("Identity service returned invalid JSON", user_id) from exc

        user = payload.get("user") if isinstance(payload, dict) else None
        email = user.get("email") if isinstance(user, dict) else None
        if not isinstance(email, str) or not looks_like_address(email):
            raise ResolutionFault(f"User {user_id} has no usable email address", user_id)

        logger.debug("Resolved user %s to %s", user_id, email)
        return email.strip()


__all__ = ["looks_like_address", "IdentityResolver", "HttpIdentityResolver"]
