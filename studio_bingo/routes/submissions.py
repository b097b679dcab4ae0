"""Submission and leaderboard routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from studio_bingo.db import get_session
from studio_bingo.errors import ValidationError
from studio_bingo.schemas.submission import (
    DeleteRequestSchema,
    LeaderboardRowSchema,
    SubmitRequestSchema,
    SubmitResponseSchema,
)
from studio_bingo.services.access_policy import GeoPolicy
from studio_bingo.services.rate_limiter import RateLimiter, submit_rules
from studio_bingo.services.scoring_service import ScoringRules
from studio_bingo.services.submission_service import SubmissionService
from studio_bingo.utils.request_identity import client_ip, device_id
from studio_bingo.utils.responses import ok

submissions_bp = Blueprint("submissions", __name__)

_submit_schema = SubmitRequestSchema()
_submit_response_schema = SubmitResponseSchema()
_delete_schema = DeleteRequestSchema()
_rows_schema = LeaderboardRowSchema(many=True)
_service = SubmissionService()
_limiter = RateLimiter()


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _parse_limit(raw: str | None) -> int:
    default = int(current_app.config.get("LEADERBOARD_DEFAULT_LIMIT", 50))
    maximum = int(current_app.config.get("LEADERBOARD_MAX_LIMIT", 100))

    raw = (raw or "").strip()
    if not raw:
        return min(default, maximum)
    try:
        limit = int(raw)
    except ValueError as e:
        raise ValidationError("limit must be an integer", code="bad_limit") from e
    if limit <= 0:
        raise ValidationError("limit must be positive", code="bad_limit")
    return min(limit, maximum)


@submissions_bp.get("/leaderboard")
def leaderboard():
    """Top submissions of a week.

    Query params:
    - week: week id (required)
    - limit: optional row cap (default 50)
    """

    week = (request.args.get("week") or "").strip()
    if not week:
        raise ValidationError("week is required", code="missing_week")
    limit = _parse_limit(request.args.get("limit"))

    rows = _service.query(get_session(), week, limit)
    return ok({"week_id": week, "rows": _rows_schema.dump(rows)})


@submissions_bp.post("/submit")
def submit():
    """Score and store the caller's card for a week."""

    GeoPolicy.from_config(current_app.config).check(request.headers)

    dev = device_id()
    if not dev:
        raise ValidationError("X-Device-Id header is required", code="missing_device_id")

    session = get_session()
    _limiter.enforce(session, submit_rules(current_app.config), {"ip": client_ip(), "device": dev})

    data = _submit_schema.load(_json_body())
    outcome = _service.submit(
        session,
        week_id=data["week_id"],
        device_id=dev,
        display_name=data["display_name"],
        marked_mask=data["marked_mask"],
        team=data["team"],
        rules=ScoringRules.from_config(current_app.config),
    )
    # Commit occurs in teardown if no exception.
    return ok(_submit_response_schema.dump(outcome))


@submissions_bp.post("/delete")
def delete_submission():
    """Remove the caller's entry from a week's leaderboard."""

    dev = device_id()
    if not dev:
        raise ValidationError("X-Device-Id header is required", code="missing_device_id")

    data = _delete_schema.load(_json_body())
    week = _service.delete(get_session(), week_id=data["week_id"], device_id=dev)
    return ok({"ok": True, "week_id": week})
