"""Health check routes."""

from __future__ import annotations

from flask import Blueprint, request

from studio_bingo.utils.request_identity import client_ip
from studio_bingo.utils.responses import ok

health_bp = Blueprint("health", __name__)

_GEO_HEADERS = ("CF-IPCountry", "CF-Region", "CF-Region-Code", "CF-IPCity")


@health_bp.get("/health")
def health_check():
    """Health check endpoint."""

    return ok({"status": "ok"})


@health_bp.get("/api/geo")
def geo():
    """Echo what the edge reports about the caller. Handy when the geo gate misbehaves."""

    return ok({"ip": client_ip(), "geo": {h: request.headers.get(h) for h in _GEO_HEADERS}})
