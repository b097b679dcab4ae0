from studio_bingo.services import board
from studio_bingo.services.scan_service import (
    DEFAULT_CONFIDENCE,
    MAX_NOTES_LEN,
    ScanService,
    apply_scan,
    normalize_scan,
)


def test_out_of_range_and_malformed_cells_are_dropped():
    scan = normalize_scan(
        {
            "marked_cells": [
                {"r": 0, "c": 0},
                {"r": 5, "c": 0},
                {"r": 0, "c": -1},
                {"r": "x", "c": 1},
                {"r": True, "c": 1},
                {"r": 1.5, "c": 1},
                "2,2",
                {"c": 3},
            ]
        }
    )
    assert scan.marked_cells == [{"r": 0, "c": 0}]
    assert scan.dropped == 7


def test_cell_coordinates_are_coerced_and_deduplicated():
    scan = normalize_scan({"marked_cells": [{"r": "2", "c": 3.0}, {"r": 2, "c": 3}, {"r": 4, "c": 4}]})
    assert scan.marked_cells == [{"r": 2, "c": 3}, {"r": 4, "c": 4}]
    assert scan.dropped == 0


def test_marked_cells_not_a_list():
    assert normalize_scan({"marked_cells": {"r": 0, "c": 0}}).marked_cells == []
    assert normalize_scan({}).marked_cells == []


def test_confidence_is_clamped():
    assert normalize_scan({"confidence": 1.7}).confidence == 1.0
    assert normalize_scan({"confidence": -3}).confidence == 0.0
    assert normalize_scan({"confidence": 0.42}).confidence == 0.42
    assert normalize_scan({"confidence": "high"}).confidence == DEFAULT_CONFIDENCE
    assert normalize_scan({}).confidence == DEFAULT_CONFIDENCE


def test_week_and_notes():
    scan = normalize_scan({"week": " Week 2 ", "notes": "n" * 500})
    assert scan.week == "week2"
    assert len(scan.notes) == MAX_NOTES_LEN

    scan = normalize_scan({"week": None, "notes": 12})
    assert scan.week is None
    assert scan.notes == ""


def test_apply_scan_never_clears_existing_marks():
    existing = board.from_indices([0, 24])
    scan = normalize_scan({"marked_cells": [{"r": 0, "c": 1}]})
    assert board.marked_indices(apply_scan(existing, scan)) == [0, 1, 24]


def test_ingest_reports_added_cells_and_score():
    existing = board.from_indices([0, 1, 2])
    raw = {"marked_cells": [{"r": 0, "c": 2}, {"r": 0, "c": 3}, {"r": 0, "c": 4}], "confidence": 0.8}

    outcome = ScanService().ingest(raw, existing)

    assert outcome.added == [3, 4]
    assert outcome.marked_mask == board.from_indices(range(5))
    assert outcome.computed.bingo_count == 1
    assert outcome.computed.tickets_total == 8


def test_out_of_range_cell_next_to_a_valid_one():
    outcome = ScanService().ingest({"marked_cells": [{"r": 5, "c": 0}, {"r": 0, "c": 0}]})
    assert outcome.marked_mask == 1
    assert outcome.scan.dropped == 1
