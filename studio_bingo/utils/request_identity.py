"""Caller identity taken from request headers."""

from __future__ import annotations

from flask import request

DEVICE_ID_MAX_LEN = 128


def device_id() -> str:
    """Client-generated device id. Self-asserted, not proof of anything."""

    return (request.headers.get("X-Device-Id") or "").strip()[:DEVICE_ID_MAX_LEN]


def client_ip() -> str:
    return request.headers.get("CF-Connecting-IP") or request.remote_addr or "unknown"


def studio_code() -> str:
    return request.headers.get("X-Studio-Code") or ""
