"""Helpers for the JSON response envelope ``{success, data, error}``."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Response, jsonify


def ok(data: Any, status_code: int = 200) -> tuple[Response, int]:
    return jsonify({"success": True, "data": data, "error": None}), status_code


def fail(
    code: str,
    message: str,
    status_code: int,
    details: Any | None = None,
    headers: Mapping[str, str] | None = None,
) -> tuple[Response, int]:
    """Error envelope. ``code`` is the stable machine-readable error code."""

    response = jsonify({"success": False, "data": None, "error": {"code": code, "message": message, "details": details}})
    for name, value in (headers or {}).items():
        response.headers[name] = value
    return response, status_code
