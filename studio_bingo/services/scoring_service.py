"""Bingo line detection and ticket scoring.

The server always recomputes the score from the mask; client-side previews
must use the same formula.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

from studio_bingo.services.board import CELL_COUNT, FULL_MASK, GRID_SIZE, BoardMask


@dataclass(frozen=True)
class ScoringRules:
    points_per_line: int = 3
    full_card_bonus: int = 5
    count_diagonals: bool = True

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ScoringRules":
        return cls(
            points_per_line=int(config.get("SCORING_POINTS_PER_LINE", 3)),
            full_card_bonus=int(config.get("SCORING_FULL_CARD_BONUS", 5)),
            count_diagonals=bool(config.get("SCORING_COUNT_DIAGONALS", True)),
        )


DEFAULT_RULES = ScoringRules()


@dataclass(frozen=True)
class ScoreResult:
    marked_count: int
    bingo_count: int
    full_card: bool
    tickets_total: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _line_masks(count_diagonals: bool) -> tuple[int, ...]:
    lines: list[int] = []
    for r in range(GRID_SIZE):
        lines.append(sum(1 << (r * GRID_SIZE + c) for c in range(GRID_SIZE)))
    for c in range(GRID_SIZE):
        lines.append(sum(1 << (r * GRID_SIZE + c) for r in range(GRID_SIZE)))
    if count_diagonals:
        lines.append(sum(1 << (i * GRID_SIZE + i) for i in range(GRID_SIZE)))
        lines.append(sum(1 << (i * GRID_SIZE + (GRID_SIZE - 1 - i)) for i in range(GRID_SIZE)))
    return tuple(lines)


_LINES_WITH_DIAGONALS = _line_masks(True)
_LINES_WITHOUT_DIAGONALS = _line_masks(False)


def compute_score(mask: BoardMask, rules: ScoringRules = DEFAULT_RULES) -> ScoreResult:
    """Score a card: one ticket per square, bonus per complete line and for a full card."""

    cells = mask & FULL_MASK
    marked_count = bin(cells).count("1")

    lines = _LINES_WITH_DIAGONALS if rules.count_diagonals else _LINES_WITHOUT_DIAGONALS
    bingo_count = sum(1 for line in lines if cells & line == line)

    full_card = marked_count == CELL_COUNT
    tickets_total = (
        marked_count
        + rules.points_per_line * bingo_count
        + (rules.full_card_bonus if full_card else 0)
    )
    return ScoreResult(
        marked_count=marked_count,
        bingo_count=bingo_count,
        full_card=full_card,
        tickets_total=tickets_total,
    )
