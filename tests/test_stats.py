from datetime import datetime, timezone

import pytest

from studio_bingo.errors import ValidationError
from studio_bingo.models import CardDefinition, Submission
from studio_bingo.repositories.card_repository import CardRepository
from studio_bingo.services import board
from studio_bingo.services.stats_service import StatsService, percent
from studio_bingo.services.submission_service import SubmissionService


@pytest.mark.parametrize(
    "count, total, expected",
    [(0, 0, 0), (5, 0, 0), (1, 2, 50), (1, 3, 33), (2, 3, 67), (1, 8, 13), (3, 3, 100)],
)
def test_percent_rounds_halves_up(count, total, expected):
    assert percent(count, total) == expected


def test_cell_counts_and_percentages(session):
    submissions = SubmissionService()
    submissions.submit(session, week_id="week1", device_id="d1", display_name="A", marked_mask="1")
    submissions.submit(session, week_id="week1", device_id="d2", display_name="B", marked_mask="3")

    stats = StatsService().compute_stats(session, "week1")

    assert stats.total_submissions == 2
    assert len(stats.cells) == 25
    assert (stats.cells[0].count, stats.cells[0].pct) == (2, 100)
    assert (stats.cells[1].count, stats.cells[1].pct) == (1, 50)
    assert (stats.cells[2].count, stats.cells[2].pct) == (0, 0)
    assert stats.cells[0].label is None


def test_empty_week(session):
    stats = StatsService().compute_stats(session, "nobody-here")
    assert stats.total_submissions == 0
    assert all(cell.count == 0 and cell.pct == 0 for cell in stats.cells)
    assert stats.teams == []


def test_week_is_required(session):
    with pytest.raises(ValidationError) as exc:
        StatsService().compute_stats(session, "")
    assert exc.value.code == "missing_week"


def test_labels_come_from_the_card(session):
    CardRepository().upsert(session, "week1", [f"label {i}" for i in range(25)], datetime.now(timezone.utc))
    stats = StatsService().compute_stats(session, "week1")
    assert stats.cells[7].label == "label 7"


def test_unreadable_card_labels_are_ignored(session):
    session.add(CardDefinition(week_id="week1", cells_json="{not json", created_at=datetime.now(timezone.utc)))
    SubmissionService().submit(session, week_id="week1", device_id="d1", display_name="A", marked_mask="1")
    session.flush()

    stats = StatsService().compute_stats(session, "week1")

    assert stats.total_submissions == 1
    assert all(cell.label is None for cell in stats.cells)
    assert stats.cells[0].count == 1


def test_team_totals(session):
    submissions = SubmissionService()
    full = str(board.FULL_MASK)
    submissions.submit(session, week_id="week1", device_id="d1", display_name="A", marked_mask="1", team="Art")
    submissions.submit(session, week_id="week1", device_id="d2", display_name="B", marked_mask="1", team="Art")
    submissions.submit(session, week_id="week1", device_id="d3", display_name="C", marked_mask=full, team="Code")
    submissions.submit(session, week_id="week1", device_id="d4", display_name="D", marked_mask=full)

    teams = StatsService().compute_stats(session, "week1").teams

    assert [(t.team, t.tickets_total, t.devices) for t in teams] == [("Code", 66, 1), ("Art", 2, 2)]


def test_unreadable_masks_are_skipped_but_counted(session):
    session.add(
        Submission(
            week_id="week1",
            device_id="broken",
            display_name="X",
            marked_mask="not-a-number",
            marked_count=0,
            bingo_count=0,
            full_card=False,
            tickets_total=0,
            updated_at=datetime.now(timezone.utc),
        )
    )
    SubmissionService().submit(session, week_id="week1", device_id="d1", display_name="A", marked_mask="1")
    session.flush()

    stats = StatsService().compute_stats(session, "week1")
    assert stats.total_submissions == 2
    assert stats.cells[0].count == 1
    assert stats.cells[0].pct == 50


def test_half_of_the_cards_mark_a_cell(session):
    submissions = SubmissionService()
    submissions.submit(session, week_id="week1", device_id="d1", display_name="A", marked_mask="1")
    submissions.submit(session, week_id="week1", device_id="d2", display_name="B", marked_mask="2")

    cell = StatsService().compute_stats(session, "week1").cells[0]
    assert (cell.count, cell.pct) == (1, 50)
