"""Command-line entry point: run the service or check the transport."""

from __future__ import annotations

import argparse
import logging
import sys

from tasknotify.common.config import NotifySettings
from tasknotify.common.logging_setup import configure_logging
from tasknotify.transport.factory import build_transport

logger = logging.getLogger(__name__)


def _serve(settings: NotifySettings, args: argparse.Namespace) -> int:
    from tasknotify.api.app import create_app

    app = create_app(settings)
    app.run(host=args.host or settings.host, port=args.port or settings.port, threaded=True)
    return 0


def _check_transport(settings: NotifySettings, args: argparse.Namespace) -> int:
    check = build_transport(settings).verify()
    if check.ok:
        logger.info("Transport %s is configured and reachable", check.provider)
        return 0
    logger.error("Transport %s check failed: %s", check.provider, check.error)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tasknotify", description="Task notification service")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.set_defaults(handler=_serve)

    check = sub.add_parser("check-transport", help="Verify the configured email transport")
    check.set_defaults(handler=_check_transport)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = NotifySettings()
    configure_logging(settings.log_level)
    return args.handler(settings, args)


if __name__ == "__main__":
    sys.exit(main())
