"""Flask application factory for the notification service."""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone

from flask import Flask, g, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from tasknotify.api.routes import notifications_bp
from tasknotify.api.services import NotificationServices
from tasknotify.common.config import NotifySettings
from tasknotify.common.errors import (
    NotificationFault,
    ResolutionFault,
    StoreFault,
    TransportFault,
    ValidationFault,
)

logger = logging.getLogger(__name__)

_REQUEST_ID_HEADER = "X-Request-ID"

_PUBLIC_MESSAGES: dict[type[NotificationFault], str] = {
    ResolutionFault: "Could not fetch user details",
    TransportFault: "Failed to send notification",
    StoreFault: "Notification store unavailable",
}


def create_app(
    settings: NotifySettings | None = None,
    services: NotificationServices | None = None,
) -> Flask:
    """Build the Flask app.

    ``services`` lets tests inject fakes; otherwise they are built from
    ``settings`` (or from the environment when both are omitted).
    """
    if services is None:
        settings = settings or NotifySettings()
        services = NotificationServices.from_settings(settings)
    settings = services.settings

    app = Flask(__name__)
    app.extensions["tasknotify"] = services
    started_at = time.monotonic()

    CORS(app, resources={r"/api/*": {"origins": settings.cors_origin_list}})

    @app.before_request
    def _assign_correlation_id():
        g.correlation_id = request.headers.get(_REQUEST_ID_HEADER) or uuid.uuid4().hex

    @app.after_request
    def _echo_correlation_id(response):
        cid = getattr(g, "correlation_id", None)
        if cid:
            response.headers[_REQUEST_ID_HEADER] = cid
        return response

    app.register_blueprint(notifications_bp)

    @app.get("/health")
    def health():
        return jsonify({
            "status": "healthy",
            "service": "notification-service",
            "provider": services.transport.name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - started_at, 3),
        })

    _register_error_handlers(app, settings)
    logger.info(
        "Notification service ready (provider=%s, store=%s, env=%s)",
        services.transport.name, settings.store_backend, settings.environment,
    )
    return app


def _register_error_handlers(app: Flask, settings: NotifySettings) -> None:

    @app.errorhandler(NotificationFault)
    def _fault(exc: NotificationFault):
        cid = getattr(g, "correlation_id", "")
        if isinstance(exc, ValidationFault):
            logger.info("[%s] Rejected %s %s: %s", cid, request.method, request.path, exc)
            return jsonify({"error": exc.message}), exc.status_code

        logger.error(
            "[%s] %s on %s %s: %s",
            cid, type(exc).__name__, request.method, request.path, exc,
        )
        body: dict[str, object] = {"error": _public_message(exc)}
        if isinstance(exc, TransportFault):
            body["kind"] = exc.kind.value
        if settings.is_development:
            body["details"] = exc.message
        return jsonify(body), exc.status_code

    @app.errorhandler(404)
    def _not_found(exc: HTTPException):
        return jsonify({"error": "Route not found"}), 404

    @app.errorhandler(Exception)
    def _unhandled(exc: Exception):
        if isinstance(exc, HTTPException):
            return jsonify({"error": exc.description or exc.name}), exc.code or 500
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        body = {"error": "Something went wrong!", "message": "Internal server error"}
        if settings.is_development:
            body["message"] = str(exc)
        return jsonify(body), 500


def _public_message(exc: NotificationFault) -> str:
    for cls, message in _PUBLIC_MESSAGES.items():
        if isinstance(exc, cls):
            return message
    return exc.message


__all__ = ["create_app"]
