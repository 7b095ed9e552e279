"""Service configuration using Pydantic Settings."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

from tasknotify.common.constants import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SENDER,
    LONG_TTL_SECONDS,
    MAX_PAGE_SIZE,
    SHORT_TTL_SECONDS,
)


class NotifySettings(BaseSettings):
    """Notification service configuration loaded from environment variables.

    Read once at startup; the resulting object is passed to the app factory
    and never mutated afterwards.
    """

    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Transport selection and credentials
    email_provider: Literal["smtp", "ses"] = "smtp"
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    smtp_timeout_seconds: float = 30.0
    ses_region: str = "ap-south-1"
    ses_from_email: str = ""
    default_sender: str = DEFAULT_SENDER
    task_owner_email: str = ""

    # Record store
    store_backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    short_ttl_seconds: int = Field(default=SHORT_TTL_SECONDS, ge=1)
    long_ttl_seconds: int = Field(default=LONG_TTL_SECONDS, ge=1)

    # Identity service
    identity_service_url: str = "http://localhost:3001"
    identity_timeout_seconds: float = Field(default=5.0, gt=0)

    # History paging
    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    max_page_size: int = Field(default=MAX_PAGE_SIZE, ge=1)

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 3003
    cors_origins: str = "*"

    model_config = {"env_prefix": "TASKNOTIFY_", "case_sensitive": False}

    @property
    def sender_address(self) -> str:
        """From address used for every outbound message."""
        return self.ses_from_email or self.smtp_user or self.default_sender

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()] or ["*"]


__all__ = ["NotifySettings"]
