"""Repository layer for per-week card definitions."""

from __future__ import annotations

import json
from datetime import datetime

from sqlalchemy.orm import Session

from studio_bingo.db import dialect_insert
from studio_bingo.errors import StorageError
from studio_bingo.models.card_definition import CardDefinition


class CardRepository:
    """Read/write card labels."""

    def get_cells(self, session: Session, week_id: str) -> list[str] | None:
        row = session.get(CardDefinition, week_id, populate_existing=True)
        if row is None:
            return None

        try:
            cells = json.loads(row.cells_json)
        except ValueError as exc:
            raise StorageError(message=f"Card for {week_id} is unreadable", code="corrupt_data") from exc
        if not isinstance(cells, list):
            raise StorageError(message=f"Card for {week_id} is unreadable", code="corrupt_data")
        return [str(c) for c in cells]

    def upsert(self, session: Session, week_id: str, cells: list[str], created_at: datetime) -> None:
        table = CardDefinition.__table__
        stmt = dialect_insert(session, table).values(
            week_id=week_id,
            cells_json=json.dumps(cells),
            created_at=created_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.week_id],
            set_={
                "cells_json": stmt.excluded.cells_json,
                "created_at": stmt.excluded.created_at,
            },
        )
        session.execute(stmt)
