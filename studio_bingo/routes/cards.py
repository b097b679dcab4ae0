"""Card definition routes."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from studio_bingo.db import get_session
from studio_bingo.errors import ServiceUnavailableError, ValidationError
from studio_bingo.schemas.card import CardDefinitionSchema, CardSchema
from studio_bingo.services.access_policy import check_studio_code
from studio_bingo.services.card_service import CardService
from studio_bingo.services.rate_limiter import RateLimiter, define_card_rules
from studio_bingo.services.submission_service import WEEK_ID_MAX_LEN
from studio_bingo.services.vision_client import get_vision_client
from studio_bingo.utils.request_identity import client_ip, studio_code
from studio_bingo.utils.responses import ok
from studio_bingo.utils.text import safe_text
from studio_bingo.utils.uploads import read_image

cards_bp = Blueprint("cards", __name__)

_definition_schema = CardDefinitionSchema()
_card_schema = CardSchema()
_service = CardService()
_limiter = RateLimiter()


@cards_bp.get("/card")
def get_card():
    week = (request.args.get("week") or "").strip()
    cells = _service.get_card(get_session(), week)
    return ok(_card_schema.dump({"week_id": week, "cells": cells}))


@cards_bp.put("/admin/card")
def put_card():
    """Define a week's labels directly."""

    check_studio_code(str(current_app.config.get("STUDIO_CODE") or ""), studio_code())

    payload = request.get_json(silent=True)
    data = _definition_schema.load(payload if isinstance(payload, dict) else {})
    created_at = _service.define(get_session(), data["week_id"], data["cells"])
    return ok(_card_schema.dump({"week_id": data["week_id"], "cells": data["cells"], "created_at": created_at}))


@cards_bp.post("/admin/define-card")
def define_card():
    """Define a week's labels from a photo of the printed card."""

    check_studio_code(str(current_app.config.get("STUDIO_CODE") or ""), studio_code())

    vision = get_vision_client()
    if not vision.configured:
        raise ServiceUnavailableError("Vision service is not configured", code="vision_not_configured")

    session = get_session()
    _limiter.enforce(session, define_card_rules(current_app.config), {"ip": client_ip()})

    week = safe_text(request.form.get("week"), WEEK_ID_MAX_LEN)
    if not week:
        raise ValidationError("week is required", code="missing_week")

    image = read_image("image", int(current_app.config.get("MAX_IMAGE_BYTES", 6_000_000)))

    cells, created_at = _service.define_from_image(session, vision, week, image.data, image.mime_type)
    return ok(_card_schema.dump({"week_id": week, "cells": cells, "created_at": created_at}))
