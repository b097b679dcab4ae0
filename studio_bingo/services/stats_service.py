"""Per-cell mark frequency and team totals for a week (display screens)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import floor

from sqlalchemy.orm import Session

from studio_bingo.errors import StorageError, ValidationError
from studio_bingo.repositories.card_repository import CardRepository
from studio_bingo.repositories.submission_repository import SubmissionRepository
from studio_bingo.services import board

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CellStat:
    idx: int
    label: str | None
    count: int
    pct: int


@dataclass(frozen=True)
class TeamTotal:
    team: str
    tickets_total: int
    devices: int


@dataclass(frozen=True)
class WeekStats:
    week_id: str
    total_submissions: int
    cells: list[CellStat]
    teams: list[TeamTotal]


def percent(count: int, total: int) -> int:
    """Whole percent, halves rounded up. 0 when there is nothing to divide by."""

    if total <= 0:
        return 0
    return int(floor(count / total * 100 + 0.5))


class StatsService:
    """Full scan of a week's submissions. Volumes are small (tens to hundreds)."""

    def __init__(
        self,
        submissions: SubmissionRepository | None = None,
        cards: CardRepository | None = None,
    ) -> None:
        self._submissions = submissions or SubmissionRepository()
        self._cards = cards or CardRepository()

    def compute_stats(self, session: Session, week_id: str) -> WeekStats:
        if not week_id:
            raise ValidationError("week is required", code="missing_week")

        rows = self._submissions.list_week(session, week_id)
        total = len(rows)

        counts = [0] * board.CELL_COUNT
        team_tickets: dict[str, int] = {}
        team_devices: dict[str, set[str]] = {}

        for row in rows:
            try:
                mask = board.parse(row.marked_mask, strict=False)
            except ValidationError:
                logger.warning("Skipping unreadable mask week=%s device=%s", week_id, row.device_id)
                mask = None

            if mask is not None:
                for idx in board.marked_indices(mask):
                    counts[idx] += 1

            if row.team:
                team_tickets[row.team] = team_tickets.get(row.team, 0) + int(row.tickets_total)
                team_devices.setdefault(row.team, set()).add(row.device_id)

        try:
            labels = self._cards.get_cells(session, week_id)
        except StorageError:
            logger.warning("Ignoring unreadable card labels week=%s", week_id)
            labels = None

        cells = [
            CellStat(
                idx=idx,
                label=labels[idx] if labels is not None and idx < len(labels) else None,
                count=count,
                pct=percent(count, total),
            )
            for idx, count in enumerate(counts)
        ]

        teams = sorted(
            (
                TeamTotal(team=name, tickets_total=tickets, devices=len(team_devices[name]))
                for name, tickets in team_tickets.items()
            ),
            key=lambda t: (-t.tickets_total, t.team),
        )

        return WeekStats(week_id=week_id, total_submissions=total, cells=cells, teams=teams)
