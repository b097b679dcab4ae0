"""Per-week card labels."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from studio_bingo.models.base import Base


class CardDefinition(Base):
    """The 25 cell labels of a week's card, stored as a JSON array."""

    __tablename__ = "card_definitions"

    week_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    cells_json: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
