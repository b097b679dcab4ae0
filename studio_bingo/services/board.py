"""Board mask: the marked cells of a 5x5 card packed into an int.

Bit ``i`` (``i = r * 5 + c``, row-major) is set when cell ``i`` is marked.
The decimal string form is what clients send and what is persisted.
"""

from __future__ import annotations

from collections.abc import Iterable

from studio_bingo.errors import ValidationError

GRID_SIZE = 5
CELL_COUNT = GRID_SIZE * GRID_SIZE
FULL_MASK = (1 << CELL_COUNT) - 1
EMPTY_MASK = 0

BoardMask = int

# Longest accepted wire form, leading zeros included.
MAX_TEXT_LEN = 64


def _check_index(index: int) -> None:
    if not 0 <= index < CELL_COUNT:
        raise IndexError(f"cell index {index} out of range 0..{CELL_COUNT - 1}")


def parse(text: str, *, strict: bool = True) -> BoardMask:
    """Parse the decimal wire form.

    Only ASCII digits are accepted, at most ``MAX_TEXT_LEN`` of them. With
    ``strict`` a mask using bits above the 25 cells is rejected; otherwise
    those bits are dropped (used when reading rows back from storage).
    """

    if not isinstance(text, str) or not text or not (text.isascii() and text.isdigit()):
        raise ValidationError("marked_mask must be a non-empty decimal string", code="bad_mask")
    if len(text) > MAX_TEXT_LEN:
        raise ValidationError(f"marked_mask is longer than {MAX_TEXT_LEN} digits", code="bad_mask")

    mask = int(text)
    if mask & ~FULL_MASK:
        if strict:
            raise ValidationError("marked_mask has bits outside the 5x5 card", code="bad_mask")
        mask &= FULL_MASK
    return mask


def to_canonical_string(mask: BoardMask) -> str:
    return str(int(mask))


def merge(a: BoardMask, b: BoardMask) -> BoardMask:
    """Union of two masks. A marked cell stays marked."""

    return a | b


def index_of(r: int, c: int) -> int:
    if not (0 <= r < GRID_SIZE and 0 <= c < GRID_SIZE):
        raise IndexError(f"cell ({r}, {c}) outside the {GRID_SIZE}x{GRID_SIZE} grid")
    return r * GRID_SIZE + c


def is_set(mask: BoardMask, index: int) -> bool:
    _check_index(index)
    return bool(mask >> index & 1)


def set_cell(mask: BoardMask, index: int, value: bool = True) -> BoardMask:
    _check_index(index)
    if value:
        return mask | (1 << index)
    return mask & ~(1 << index)


def from_indices(indices: Iterable[int]) -> BoardMask:
    mask = EMPTY_MASK
    for index in indices:
        mask = set_cell(mask, index)
    return mask


def marked_indices(mask: BoardMask) -> list[int]:
    return [i for i in range(CELL_COUNT) if mask >> i & 1]
