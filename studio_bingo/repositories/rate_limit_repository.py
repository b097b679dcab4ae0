"""Repository layer for rate limit counters."""

from __future__ import annotations

from sqlalchemy import case, delete, or_, select
from sqlalchemy.orm import Session

from studio_bingo.db import dialect_insert
from studio_bingo.models.rate_limit_counter import RateLimitCounter


class RateLimitRepository:
    """Atomic fixed-window counter updates."""

    def consume(self, session: Session, key: str, *, now: int, window_seconds: int, limit: int) -> int | None:
        """Count one hit against ``key`` in a single conditional upsert.

        Returns the new count, or None when the window is still open and
        already holds ``limit`` hits. A rejected hit leaves the row untouched.
        """

        table = RateLimitCounter.__table__
        expired = table.c.reset_at <= now

        stmt = dialect_insert(session, table).values(k=key, count=1, reset_at=now + window_seconds)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.k],
            set_={
                "count": case((expired, 1), else_=table.c.count + 1),
                "reset_at": case((expired, now + window_seconds), else_=table.c.reset_at),
            },
            where=or_(expired, table.c.count < limit),
        ).returning(table.c.count)

        return session.execute(stmt).scalar_one_or_none()

    def get(self, session: Session, key: str) -> RateLimitCounter | None:
        return session.get(RateLimitCounter, key, populate_existing=True)

    def reset_at(self, session: Session, key: str) -> int | None:
        return session.scalar(select(RateLimitCounter.reset_at).where(RateLimitCounter.k == key))

    def purge_expired(self, session: Session, *, now: int) -> int:
        result = session.execute(delete(RateLimitCounter).where(RateLimitCounter.reset_at <= now))
        return int(result.rowcount or 0)
