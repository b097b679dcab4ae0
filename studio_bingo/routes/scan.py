"""Card photo scan route."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from studio_bingo.db import get_session
from studio_bingo.errors import ServiceUnavailableError, ValidationError
from studio_bingo.schemas.scan import ScanResponseSchema
from studio_bingo.services import board
from studio_bingo.services.access_policy import GeoPolicy
from studio_bingo.services.rate_limiter import RateLimiter, scan_rules
from studio_bingo.services.scan_service import ScanService
from studio_bingo.services.scoring_service import ScoringRules
from studio_bingo.services.vision_client import get_vision_client
from studio_bingo.utils.request_identity import client_ip, device_id
from studio_bingo.utils.responses import ok
from studio_bingo.utils.text import safe_text
from studio_bingo.utils.uploads import read_image

scan_bp = Blueprint("scan", __name__)

_schema = ScanResponseSchema()
_service = ScanService()
_limiter = RateLimiter()


@scan_bp.post("/scan")
def scan_card():
    """Detect marked cells on a card photo and merge them into the caller's marks.

    Form fields:
    - image: the photo (required)
    - marked_mask: marks the caller already has (optional)
    """

    config = current_app.config
    GeoPolicy.from_config(config).check(request.headers)

    if not config.get("SCANNING_ENABLED", True):
        raise ServiceUnavailableError("Scanning is disabled", code="scanning_disabled")
    vision = get_vision_client()
    if not vision.configured:
        raise ServiceUnavailableError("Vision service is not configured", code="vision_not_configured")

    dev = device_id()
    if not dev:
        raise ValidationError("X-Device-Id header is required", code="missing_device_id")

    # Throttle before the expensive upstream call.
    _limiter.enforce(get_session(), scan_rules(config), {"ip": client_ip(), "device": dev})

    image = read_image("image", int(config.get("MAX_IMAGE_BYTES", 6_000_000)))

    existing_text = safe_text(request.form.get("marked_mask"), None)
    existing = board.parse(existing_text) if existing_text else board.EMPTY_MASK

    outcome = _service.scan(
        vision,
        image.data,
        image.mime_type,
        existing=existing,
        rules=ScoringRules.from_config(config),
    )
    return ok(
        _schema.dump(
            {
                "week": outcome.scan.week,
                "marked_cells": outcome.scan.marked_cells,
                "confidence": outcome.scan.confidence,
                "notes": outcome.scan.notes,
                "dropped": outcome.scan.dropped,
                "marked_mask": board.to_canonical_string(outcome.marked_mask),
                "added": outcome.added,
                "computed": outcome.computed,
            }
        )
    )
