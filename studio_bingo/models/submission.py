"""Weekly bingo submission, one row per (week, device)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from studio_bingo.models.base import Base


class Submission(Base):
    """Latest card state a device submitted for a week.

    Score columns are denormalized from ``marked_mask`` for leaderboard sorting
    and are rewritten together with it on every submit.
    """

    __tablename__ = "submissions"
    __table_args__ = (Index("ix_submissions_week_rank", "week_id", "tickets_total", "updated_at"),)

    week_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    device_id: Mapped[str] = mapped_column(String(128), primary_key=True)

    display_name: Mapped[str] = mapped_column(String(40), nullable=False)
    team: Mapped[str | None] = mapped_column(String(40), nullable=True)
    marked_mask: Mapped[str] = mapped_column(String(64), nullable=False)  # decimal string

    marked_count: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    bingo_count: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    full_card: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tickets_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
