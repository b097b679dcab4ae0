"""Business logic for weekly card submissions and the leaderboard."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from studio_bingo.errors import ValidationError
from studio_bingo.models.submission import Submission
from studio_bingo.repositories.submission_repository import SubmissionRepository, SubmissionRow
from studio_bingo.services import board
from studio_bingo.services.board import BoardMask
from studio_bingo.services.scoring_service import DEFAULT_RULES, ScoreResult, ScoringRules, compute_score
from studio_bingo.utils.clock import utc_now
from studio_bingo.utils.text import safe_text

logger = logging.getLogger(__name__)

DEFAULT_LEADERBOARD_LIMIT = 50

WEEK_ID_MAX_LEN = 32
DISPLAY_NAME_MAX_LEN = 40
TEAM_MAX_LEN = 40


@dataclass(frozen=True)
class SubmitOutcome:
    week_id: str
    device_id: str
    computed: ScoreResult
    marked_mask: str
    updated_at: datetime


class SubmissionService:
    """Submit, rank and remove weekly cards."""

    def __init__(
        self,
        repository: SubmissionRepository | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repo = repository or SubmissionRepository()
        self._clock = clock

    def submit(
        self,
        session: Session,
        *,
        week_id: object,
        device_id: str,
        display_name: object,
        marked_mask: object,
        team: object = None,
        rules: ScoringRules = DEFAULT_RULES,
    ) -> SubmitOutcome:
        """Validate raw input, then upsert.

        Missing fields are reported before a malformed mask.
        """

        if not device_id:
            raise ValidationError("X-Device-Id header is required", code="missing_device_id")

        week = safe_text(week_id, WEEK_ID_MAX_LEN)
        name = safe_text(display_name, DISPLAY_NAME_MAX_LEN)
        # Not capped: an over-long mask is rejected by board.parse, never cut.
        mask_text = safe_text(marked_mask, None)
        missing = [
            field
            for field, value in (("week_id", week), ("display_name", name), ("marked_mask", mask_text))
            if not value
        ]
        if missing:
            raise ValidationError("Required fields are missing", details={"fields": missing}, code="missing_fields")

        mask = board.parse(mask_text)
        team_name = safe_text(team, TEAM_MAX_LEN) or None

        computed, updated_at = self.upsert(session, week, device_id, name, mask, team=team_name, rules=rules)
        return SubmitOutcome(
            week_id=week,
            device_id=device_id,
            computed=computed,
            marked_mask=board.to_canonical_string(mask),
            updated_at=updated_at,
        )

    def upsert(
        self,
        session: Session,
        week_id: str,
        device_id: str,
        display_name: str,
        mask: BoardMask,
        *,
        team: str | None = None,
        rules: ScoringRules = DEFAULT_RULES,
    ) -> tuple[ScoreResult, datetime]:
        """Score ``mask`` and replace the (week, device) row with it."""

        computed = compute_score(mask, rules)
        updated_at = self._clock()
        self._repo.upsert(
            session,
            SubmissionRow(
                week_id=week_id,
                device_id=device_id,
                display_name=display_name,
                team=team,
                marked_mask=board.to_canonical_string(mask),
                marked_count=computed.marked_count,
                bingo_count=computed.bingo_count,
                full_card=computed.full_card,
                tickets_total=computed.tickets_total,
                updated_at=updated_at,
            ),
        )
        logger.info(
            "Submission upserted week=%s device=%s tickets=%s bingos=%s",
            week_id,
            device_id,
            computed.tickets_total,
            computed.bingo_count,
        )
        return computed, updated_at

    def query(self, session: Session, week_id: str, limit: int = DEFAULT_LEADERBOARD_LIMIT) -> Sequence[Submission]:
        """Top ``limit`` rows: most tickets first, ties broken by latest update."""

        if limit < 1:
            raise ValidationError("limit must be positive", code="bad_limit")
        return self._repo.top(session, week_id, limit)

    def delete(self, session: Session, *, week_id: object, device_id: str) -> str:
        """Remove the caller's row. Deleting a missing row is fine."""

        if not device_id:
            raise ValidationError("X-Device-Id header is required", code="missing_device_id")
        week = safe_text(week_id, WEEK_ID_MAX_LEN)
        if not week:
            raise ValidationError("week_id is required", code="missing_week_id")

        removed = self._repo.delete(session, week, device_id)
        logger.info("Submission deleted week=%s device=%s removed=%s", week, device_id, removed)
        return week
