"""Repository layer for weekly submissions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from studio_bingo.db import dialect_insert
from studio_bingo.models.submission import Submission


@dataclass(frozen=True)
class SubmissionRow:
    week_id: str
    device_id: str
    display_name: str
    team: str | None
    marked_mask: str
    marked_count: int
    bingo_count: int
    full_card: bool
    tickets_total: int
    updated_at: datetime


class SubmissionRepository:
    """Upsert/query/delete of submissions keyed by (week_id, device_id)."""

    def upsert(self, session: Session, row: SubmissionRow) -> None:
        """Insert the row or overwrite every column of the existing one."""

        table = Submission.__table__
        stmt = dialect_insert(session, table).values(
            week_id=row.week_id,
            device_id=row.device_id,
            display_name=row.display_name,
            team=row.team,
            marked_mask=row.marked_mask,
            marked_count=row.marked_count,
            bingo_count=row.bingo_count,
            full_card=row.full_card,
            tickets_total=row.tickets_total,
            updated_at=row.updated_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.week_id, table.c.device_id],
            set_={
                "display_name": stmt.excluded.display_name,
                "team": stmt.excluded.team,
                "marked_mask": stmt.excluded.marked_mask,
                "marked_count": stmt.excluded.marked_count,
                "bingo_count": stmt.excluded.bingo_count,
                "full_card": stmt.excluded.full_card,
                "tickets_total": stmt.excluded.tickets_total,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        session.execute(stmt)

    def get(self, session: Session, week_id: str, device_id: str) -> Submission | None:
        return session.get(Submission, (week_id, device_id), populate_existing=True)

    def top(self, session: Session, week_id: str, limit: int) -> Sequence[Submission]:
        stmt = (
            select(Submission)
            .where(Submission.week_id == week_id)
            .order_by(
                Submission.tickets_total.desc(),
                Submission.updated_at.desc(),
                Submission.device_id.asc(),
            )
            .limit(int(limit))
            .execution_options(populate_existing=True)
        )
        return list(session.scalars(stmt).all())

    def list_week(self, session: Session, week_id: str) -> Sequence[Submission]:
        stmt = (
            select(Submission)
            .where(Submission.week_id == week_id)
            .execution_options(populate_existing=True)
        )
        return list(session.scalars(stmt).all())

    def delete(self, session: Session, week_id: str, device_id: str) -> int:
        result = session.execute(
            delete(Submission).where(
                Submission.week_id == week_id,
                Submission.device_id == device_id,
            )
        )
        return int(result.rowcount or 0)
