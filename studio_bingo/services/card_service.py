"""Weekly card labels: lookup, direct definition, and definition from a photo."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.orm import Session

from studio_bingo.errors import NotFoundError, UpstreamError, ValidationError
from studio_bingo.repositories.card_repository import CardRepository
from studio_bingo.services.board import CELL_COUNT
from studio_bingo.services.vision_client import VisionClient
from studio_bingo.utils.clock import utc_now

logger = logging.getLogger(__name__)


class CardService:
    """Card definition use-cases."""

    def __init__(self, repository: CardRepository | None = None, clock: Callable[[], datetime] = utc_now) -> None:
        self._repo = repository or CardRepository()
        self._clock = clock

    def get_card(self, session: Session, week_id: str) -> list[str]:
        if not week_id:
            raise ValidationError("week is required", code="missing_week")
        cells = self._repo.get_cells(session, week_id)
        if cells is None:
            raise NotFoundError(message=f"No card defined for {week_id}")
        return cells

    def define(self, session: Session, week_id: str, cells: list[str]) -> datetime:
        if not week_id:
            raise ValidationError("week is required", code="missing_week")
        if len(cells) != CELL_COUNT:
            raise ValidationError(
                message=f"A card has exactly {CELL_COUNT} cells",
                details={"cells": [f"got {len(cells)}"]},
            )

        created_at = self._clock()
        self._repo.upsert(session, week_id, list(cells), created_at)
        logger.info("Card defined week=%s", week_id)
        return created_at

    def define_from_image(
        self,
        session: Session,
        vision: VisionClient,
        week_id: str,
        image: bytes,
        mime_type: str,
    ) -> tuple[list[str], datetime]:
        """Read the 25 labels off a photo of the card and store them."""

        raw = vision.read_cell_labels(image, mime_type)
        if not isinstance(raw, list) or len(raw) != CELL_COUNT:
            raise UpstreamError(
                message=f"Vision service did not return {CELL_COUNT} cells",
                details={"got": raw},
                code="invalid_cells_array",
            )

        cells = [c if isinstance(c, str) else str(c or "") for c in raw]
        created_at = self.define(session, week_id, cells)
        return cells, created_at
