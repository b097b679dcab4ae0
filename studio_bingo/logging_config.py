"""Logging configuration."""

from __future__ import annotations

import logging

from flask import Flask, has_request_context, request

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(method)s %(path)s] %(message)s"


class RequestContextFilter(logging.Filter):
    """Stamp records with the current request's method and path ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            record.method = request.method
            record.path = request.path
        else:
            record.method = "-"
            record.path = "-"
        return True


def configure_logging(app: Flask) -> None:
    """Configure plain key=value friendly logs on the root logger."""

    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT)

    root = logging.getLogger()
    for handler in root.handlers:
        if not any(isinstance(f, RequestContextFilter) for f in handler.filters):
            handler.addFilter(RequestContextFilter())

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    app.logger.setLevel(level)
