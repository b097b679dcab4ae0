import pytest

from studio_bingo.errors import NotFoundError, ValidationError
from studio_bingo.services import board
from studio_bingo.services.raffle_service import Participant, RaffleRound, RaffleService, pick_weighted
from studio_bingo.services.submission_service import SubmissionService


class FixedRandom:
    def __init__(self, *values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


ALICE = Participant("Alice", 10)
BOB = Participant("Bob", 30)


@pytest.mark.parametrize(
    "roll, winner",
    [(0.0, ALICE), (0.2, ALICE), (0.25, BOB), (0.999, BOB)],
)
def test_pick_is_proportional_to_tickets(roll, winner):
    assert pick_weighted([ALICE, BOB], FixedRandom(roll)) == winner


def test_pick_needs_tickets():
    with pytest.raises(ValueError):
        pick_weighted([], FixedRandom(0.5))
    with pytest.raises(ValueError):
        pick_weighted([Participant("Zero", 0)], FixedRandom(0.5))


@pytest.fixture()
def week_with_players(session):
    submissions = SubmissionService()
    submissions.submit(session, week_id="week1", device_id="d1", display_name="Alice", marked_mask="1")
    submissions.submit(
        session, week_id="week1", device_id="d2", display_name="Bob", marked_mask=str(board.FULL_MASK), team="Art"
    )
    submissions.submit(session, week_id="week1", device_id="d3", display_name="Nobody", marked_mask="0")
    session.commit()
    return session


def test_draw_skips_players_without_tickets(week_with_players):
    result = RaffleService(rng=FixedRandom(0.0)).draw(week_with_players, RaffleRound("week1"))

    assert [p.display_name for p in result.participants] == ["Bob", "Alice"]
    assert result.total_tickets == 67
    assert result.winner.display_name == "Bob"
    assert result.winner.team == "Art"
    assert result.share(result.winner) == 98.5


def test_drawn_names_are_excluded_from_later_spins(week_with_players):
    raffle = RaffleRound("week1")
    service = RaffleService(rng=FixedRandom(0.0, 0.0))

    first = service.draw(week_with_players, raffle)
    raffle.exclude(first.winner.display_name)
    second = service.draw(week_with_players, raffle)

    assert second.winner.display_name == "Alice"
    assert second.total_tickets == 1

    raffle.exclude("Alice")
    with pytest.raises(NotFoundError) as exc:
        service.draw(week_with_players, raffle)
    assert exc.value.code == "no_participants"


def test_draw_validation(session):
    with pytest.raises(ValidationError) as exc:
        RaffleService().draw(session, RaffleRound(""))
    assert exc.value.code == "missing_week_id"

    with pytest.raises(NotFoundError):
        RaffleService().draw(session, RaffleRound("empty-week"))
