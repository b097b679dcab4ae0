"""Weighted raffle over a week's leaderboard: one ticket, one chance."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from studio_bingo.errors import NotFoundError, ValidationError
from studio_bingo.repositories.submission_repository import SubmissionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Participant:
    display_name: str
    tickets_total: int
    team: str | None = None


@dataclass(frozen=True)
class RaffleDraw:
    week_id: str
    winner: Participant
    participants: list[Participant]
    total_tickets: int

    def share(self, participant: Participant) -> float:
        """Percent of all tickets held by ``participant``, one decimal."""

        if self.total_tickets <= 0:
            return 0.0
        return round(participant.tickets_total / self.total_tickets * 100, 1)


@dataclass
class RaffleRound:
    """State of one raffle session: names already drawn are out of later spins."""

    week_id: str
    excluded: set[str] = field(default_factory=set)

    def exclude(self, display_name: str) -> None:
        self.excluded.add(display_name)


def pick_weighted(participants: list[Participant], rng: random.Random) -> Participant:
    """Pick proportionally to ``tickets_total``. Participants must hold tickets."""

    total = sum(p.tickets_total for p in participants)
    if not participants or total <= 0:
        raise ValueError("no tickets to draw from")

    r = rng.random() * total
    cumulative = 0
    for p in participants:
        cumulative += p.tickets_total
        if r < cumulative:
            return p
    return participants[-1]


class RaffleService:
    """Draw raffle winners from the leaderboard."""

    def __init__(
        self,
        repository: SubmissionRepository | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._repo = repository or SubmissionRepository()
        self._rng = rng or random.SystemRandom()

    def participants(self, session: Session, raffle: RaffleRound, pool_limit: int = 50) -> list[Participant]:
        rows = self._repo.top(session, raffle.week_id, pool_limit)
        return [
            Participant(display_name=row.display_name, tickets_total=int(row.tickets_total), team=row.team)
            for row in rows
            if row.tickets_total > 0 and row.display_name not in raffle.excluded
        ]

    def draw(self, session: Session, raffle: RaffleRound, pool_limit: int = 50) -> RaffleDraw:
        if not raffle.week_id:
            raise ValidationError("week_id is required", code="missing_week_id")

        pool = self.participants(session, raffle, pool_limit)
        if not pool:
            raise NotFoundError(message=f"No participants with tickets for {raffle.week_id}", code="no_participants")

        winner = pick_weighted(pool, self._rng)
        total = sum(p.tickets_total for p in pool)
        logger.info(
            "Raffle draw week=%s winner=%s tickets=%s of %s",
            raffle.week_id,
            winner.display_name,
            winner.tickets_total,
            total,
        )
        return RaffleDraw(week_id=raffle.week_id, winner=winner, participants=pool, total_tickets=total)
