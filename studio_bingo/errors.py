"""Custom exceptions for centralized error handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None


class ValidationError(AppError):
    """Malformed or missing input. Always fixable by the client."""

    def __init__(
        self,
        message: str = "Validation error",
        details: Any | None = None,
        code: str = "validation_error",
    ) -> None:
        super().__init__(code=code, message=message, status_code=400, details=details)


class ForbiddenError(AppError):
    """Caller is not allowed to perform the operation."""

    def __init__(self, message: str = "Forbidden", details: Any | None = None, code: str = "forbidden") -> None:
        super().__init__(code=code, message=message, status_code=403, details=details)


class NotFoundError(AppError):
    """Resource not found."""

    def __init__(self, message: str = "Not found", details: Any | None = None, code: str = "not_found") -> None:
        super().__init__(code=code, message=message, status_code=404, details=details)


class PayloadTooLargeError(AppError):
    """Uploaded body exceeds the configured limit."""

    def __init__(self, message: str = "Payload too large", details: Any | None = None) -> None:
        super().__init__(code="image_too_large", message=message, status_code=413, details=details)


class RateLimitedError(AppError):
    """A rate-limit rule rejected the request. Retry after the window."""

    def __init__(self, key: str, retry_after: int | None = None) -> None:
        super().__init__(
            code="rate_limited",
            message="Too many requests",
            status_code=429,
            details={"retry_after": retry_after} if retry_after is not None else None,
        )
        self.key = key
        self.retry_after = retry_after


class UpstreamError(AppError):
    """The external vision service failed or answered with something unusable."""

    def __init__(
        self,
        message: str = "Upstream service error",
        details: Any | None = None,
        code: str = "upstream_error",
        retryable: bool = False,
    ) -> None:
        if details is None or isinstance(details, dict):
            details = {**(details or {}), "retryable": retryable}
        super().__init__(code=code, message=message, status_code=502, details=details)
        self.retryable = retryable


class ServiceUnavailableError(AppError):
    """Feature switched off or not configured."""

    def __init__(self, message: str = "Service unavailable", details: Any | None = None, code: str = "unavailable") -> None:
        super().__init__(code=code, message=message, status_code=503, details=details)


class StorageError(AppError):
    """Persistent store failure. Fatal for the current request."""

    def __init__(self, message: str = "Storage error", details: Any | None = None, code: str = "storage_error") -> None:
        super().__init__(code=code, message=message, status_code=500, details=details)
