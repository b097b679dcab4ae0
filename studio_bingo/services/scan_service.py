"""Turn a vision answer into board marks.

The model's answer is untrusted: bad cells are dropped one by one, the rest
of the scan is kept.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from studio_bingo.services import board
from studio_bingo.services.board import BoardMask
from studio_bingo.services.scoring_service import DEFAULT_RULES, ScoreResult, ScoringRules, compute_score
from studio_bingo.services.vision_client import VisionClient

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.5
MAX_NOTES_LEN = 200

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ScanResult:
    week: str | None
    marked_cells: list[dict[str, int]]
    confidence: float
    notes: str = ""
    dropped: int = 0


@dataclass(frozen=True)
class ScanOutcome:
    scan: ScanResult
    marked_mask: BoardMask
    computed: ScoreResult
    added: list[int] = field(default_factory=list)


def _as_index(value: Any) -> int | None:
    """Whole numbers, including ``2.0`` and ``"2"``. Booleans are not coordinates."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        return int(value.strip())
    return None


def normalize_scan(raw: Mapping[str, Any]) -> ScanResult:
    """Validate a vision answer ``{week, marked_cells, confidence, notes}``."""

    cells = raw.get("marked_cells")
    if not isinstance(cells, list):
        cells = []

    normalized: list[dict[str, int]] = []
    seen: set[tuple[int, int]] = set()
    dropped = 0
    for cell in cells:
        r = _as_index(cell.get("r")) if isinstance(cell, Mapping) else None
        c = _as_index(cell.get("c")) if isinstance(cell, Mapping) else None
        if r is None or c is None or not (0 <= r < board.GRID_SIZE and 0 <= c < board.GRID_SIZE):
            dropped += 1
            continue
        if (r, c) in seen:
            continue
        seen.add((r, c))
        normalized.append({"r": r, "c": c})

    confidence = raw.get("confidence")
    if isinstance(confidence, (int, float)) and not isinstance(confidence, bool):
        confidence = min(1.0, max(0.0, float(confidence)))
    else:
        confidence = DEFAULT_CONFIDENCE

    notes = raw.get("notes")
    notes = notes[:MAX_NOTES_LEN] if isinstance(notes, str) else ""

    week = raw.get("week")
    week = _WHITESPACE.sub("", week.lower()) if isinstance(week, str) else None

    if dropped:
        logger.info("Dropped %s invalid cells from scan", dropped)

    return ScanResult(week=week or None, marked_cells=normalized, confidence=confidence, notes=notes, dropped=dropped)


def apply_scan(existing: BoardMask, scan: ScanResult) -> BoardMask:
    """Mark the scanned cells on top of ``existing``. Never clears a cell."""

    scanned = board.EMPTY_MASK
    for cell in scan.marked_cells:
        scanned = board.set_cell(scanned, board.index_of(cell["r"], cell["c"]))
    return board.merge(existing, scanned)


class ScanService:
    """Scan use-case: ask the vision model, then merge into the caller's marks."""

    def scan(
        self,
        vision: VisionClient,
        image: bytes,
        mime_type: str,
        existing: BoardMask = board.EMPTY_MASK,
        rules: ScoringRules = DEFAULT_RULES,
    ) -> ScanOutcome:
        raw = vision.detect_marks(image, mime_type)
        return self.ingest(raw, existing, rules)

    def ingest(
        self,
        raw: Mapping[str, Any],
        existing: BoardMask = board.EMPTY_MASK,
        rules: ScoringRules = DEFAULT_RULES,
    ) -> ScanOutcome:
        scan = normalize_scan(raw)
        merged = apply_scan(existing, scan)
        added = board.marked_indices(merged & ~existing)
        return ScanOutcome(scan=scan, marked_mask=merged, computed=compute_score(merged, rules), added=added)
