import pytest

from studio_bingo.errors import ValidationError
from studio_bingo.services import board


def test_parse_accepts_decimal_strings():
    assert board.parse("0") == 0
    assert board.parse("31") == 0b11111
    assert board.parse(str(board.FULL_MASK)) == board.FULL_MASK
    assert board.parse("007") == 7


@pytest.mark.parametrize("text", ["", "-1", "1.5", " 3", "3 ", "0x1f", "abc", "٣"])
def test_parse_rejects_non_digit_text(text):
    with pytest.raises(ValidationError) as exc:
        board.parse(text)
    assert exc.value.code == "bad_mask"


def test_parse_rejects_non_strings():
    with pytest.raises(ValidationError):
        board.parse(None)
    with pytest.raises(ValidationError):
        board.parse(31)


def test_bits_outside_the_card():
    text = str(board.FULL_MASK | (1 << 25))
    with pytest.raises(ValidationError) as exc:
        board.parse(text)
    assert exc.value.code == "bad_mask"

    assert board.parse(text, strict=False) == board.FULL_MASK


def test_canonical_string_drops_leading_zeros():
    assert board.to_canonical_string(board.parse("0005")) == "5"


def test_cells_are_row_major():
    assert board.index_of(0, 0) == 0
    assert board.index_of(0, 4) == 4
    assert board.index_of(1, 0) == 5
    assert board.index_of(4, 4) == 24


@pytest.mark.parametrize("r, c", [(5, 0), (0, 5), (-1, 0)])
def test_index_of_out_of_range(r, c):
    with pytest.raises(IndexError):
        board.index_of(r, c)


def test_set_and_clear_cells():
    mask = board.set_cell(board.EMPTY_MASK, 12)
    assert board.is_set(mask, 12)
    assert not board.is_set(mask, 11)

    mask = board.set_cell(mask, 12, False)
    assert mask == board.EMPTY_MASK

    with pytest.raises(IndexError):
        board.set_cell(mask, 25)
    with pytest.raises(IndexError):
        board.is_set(mask, -1)


def test_indices_helpers():
    mask = board.from_indices([0, 6, 24, 6])
    assert board.marked_indices(mask) == [0, 6, 24]


def test_merge_never_clears():
    a = board.from_indices([0, 1])
    b = board.from_indices([1, 2])
    assert board.marked_indices(board.merge(a, b)) == [0, 1, 2]
    assert board.merge(a, board.EMPTY_MASK) == a


@pytest.mark.parametrize("text", ["0", "1", "00012", "16777216", str(board.FULL_MASK)])
def test_canonical_form_parses_back(text):
    mask = board.parse(text)
    assert board.parse(board.to_canonical_string(mask)) == mask


def test_merge_is_commutative_and_idempotent():
    a = board.from_indices([3, 9])
    b = board.from_indices([9, 20])
    assert board.merge(a, b) == board.merge(b, a)
    assert board.merge(a, a) == a


def test_parse_rejects_over_long_text():
    assert board.parse("0" * (board.MAX_TEXT_LEN - 1) + "1") == 1
    with pytest.raises(ValidationError) as exc:
        board.parse("0" * board.MAX_TEXT_LEN + "1")
    assert exc.value.code == "bad_mask"
