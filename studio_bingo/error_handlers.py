"""Centralized error handlers."""

from __future__ import annotations

import logging

from flask import Flask
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from studio_bingo.db import discard_session
from studio_bingo.errors import AppError, RateLimitedError, StorageError, ValidationError
from studio_bingo.utils.responses import fail

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app.

    Every handler rolls back the request session, so a failed request never
    leaves partial writes behind.
    """

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        discard_session()
        headers = None
        if isinstance(exc, RateLimitedError) and exc.retry_after is not None:
            headers = {"Retry-After": str(exc.retry_after)}
        return fail(exc.code, exc.message, exc.status_code, exc.details, headers=headers)

    @app.errorhandler(MarshmallowValidationError)
    def _handle_schema_error(exc: MarshmallowValidationError):
        discard_session()
        # exc.messages is a dict of field -> list[str]
        wrapped = ValidationError(details=exc.messages)
        return fail(wrapped.code, wrapped.message, wrapped.status_code, wrapped.details)

    @app.errorhandler(SQLAlchemyError)
    def _handle_storage_error(exc: SQLAlchemyError):
        logger.exception("Storage error")
        discard_session()
        wrapped = StorageError()
        return fail(wrapped.code, wrapped.message, wrapped.status_code)

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        discard_session()
        status = int(getattr(exc, "code", 500) or 500)
        if status == 404:
            return fail("not_found", "Not found", 404)
        if status == 413:
            return fail("image_too_large", "Payload too large", 413)

        return fail(
            "http_error",
            getattr(exc, "description", "HTTP error"),
            status,
            details={"name": getattr(exc, "name", "HTTPException")},
        )

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled exception")
        discard_session()
        return fail("internal_error", "Internal server error", 500)
