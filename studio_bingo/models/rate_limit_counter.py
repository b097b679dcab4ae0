"""Fixed-window rate limit counter."""

from __future__ import annotations

from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from studio_bingo.models.base import Base


class RateLimitCounter(Base):
    """One row per limiter key. Expired once ``reset_at`` (epoch seconds) has passed."""

    __tablename__ = "ratelimits"

    k: Mapped[str] = mapped_column(String(200), primary_key=True)
    count: Mapped[int] = mapped_column(Integer, nullable=False)
    reset_at: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
