"""Identity service client."""

from __future__ import annotations

from tasknotify.identity.resolver import (
    HttpIdentityResolver,
    IdentityResolver,
    looks_like_address,
)

__all__ = ["HttpIdentityResolver", "IdentityResolver", "looks_like_address"]
