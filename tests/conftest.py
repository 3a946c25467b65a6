import pytest

from app_types import PlayerStat
from tests.utils import create_match


@pytest.fixture
def four_players():
    """Returns the smallest roster that can form a match."""
    return ["p1", "p2", "p3", "p4"]


@pytest.fixture
def six_players():
    """Returns a roster with two players more than one court needs."""
    return ["p1", "p2", "p3", "p4", "p5", "p6"]


@pytest.fixture
def display_names():
    """Returns a mapping of player ids to display names."""
    return {
        "p1": "Alice",
        "p2": "Bob",
        "p3": "Charlie",
        "p4": "Dave",
        "p5": "Eve",
        "p6": "Frank",
    }


@pytest.fixture
def won_by_team_1():
    """Returns a history of one finished match that p1 & p2 won 11-8."""
    return [
        create_match(
            id="m1",
            team_1=("p1", "p2"),
            team_2=("p3", "p4"),
            score_1=11,
            score_2=8,
            is_finished=True,
            winner_team=1,
            timestamp=1000,
        )
    ]


@pytest.fixture
def playoff_stats():
    """Returns session stats with a clear 1-4 ranking."""
    return [
        PlayerStat(id="p1", name="Alice", matches_played=3, matches_won=3, points_scored=33),
        PlayerStat(id="p2", name="Bob", matches_played=3, matches_won=2, points_scored=28),
        PlayerStat(id="p3", name="Charlie", matches_played=3, matches_won=1, points_scored=20),
        PlayerStat(id="p4", name="Dave", matches_played=3, matches_won=0, points_scored=15),
    ]
