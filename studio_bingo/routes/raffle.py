"""Raffle wheel routes (admin)."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from studio_bingo.db import get_session
from studio_bingo.schemas.raffle import ParticipantSchema, RaffleRequestSchema
from studio_bingo.services.access_policy import check_studio_code
from studio_bingo.services.raffle_service import RaffleRound, RaffleService
from studio_bingo.utils.request_identity import studio_code
from studio_bingo.utils.responses import ok

raffle_bp = Blueprint("raffle", __name__)

_request_schema = RaffleRequestSchema()
_participant_schema = ParticipantSchema()
_service = RaffleService()


@raffle_bp.post("/admin/raffle")
def draw_winner():
    """Spin the wheel once. ``exclude`` lists names already drawn this session."""

    check_studio_code(str(current_app.config.get("STUDIO_CODE") or ""), studio_code())

    payload = request.get_json(silent=True)
    data = _request_schema.load(payload if isinstance(payload, dict) else {})

    raffle = RaffleRound(week_id=data["week_id"], excluded=set(data["exclude"]))
    result = _service.draw(get_session(), raffle, int(current_app.config.get("RAFFLE_POOL_LIMIT", 50)))

    def _dump(p):
        return _participant_schema.dump(
            {"display_name": p.display_name, "team": p.team, "tickets_total": p.tickets_total, "pct": result.share(p)}
        )

    return ok(
        {
            "week_id": result.week_id,
            "winner": _dump(result.winner),
            "participants": [_dump(p) for p in result.participants],
            "total_tickets": result.total_tickets,
        }
    )
