"""Week statistics routes."""

from __future__ import annotations

from flask import Blueprint, request

from studio_bingo.db import get_session
from studio_bingo.schemas.stats import WeekStatsSchema
from studio_bingo.services.stats_service import StatsService
from studio_bingo.utils.responses import ok

stats_bp = Blueprint("stats", __name__)

_schema = WeekStatsSchema()
_service = StatsService()


@stats_bp.get("/stats")
def get_stats():
    """Per-cell mark counts/percentages and team totals for ``week``."""

    week = (request.args.get("week") or "").strip()
    result = _service.compute_stats(get_session(), week)
    return ok(_schema.dump(result))
