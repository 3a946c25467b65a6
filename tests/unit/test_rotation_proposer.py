# tests/unit/test_rotation_proposer.py
"""
Unit tests for propose_rotation_match: selection, split, rationale and
analytics end to end.
"""

import copy
import random
from itertools import combinations

import pytest

from app_types import MatchmakingMode, RepeatedPartnership
from exceptions import ValidationError
from matchmaker import find_fatigued_players, propose_rotation_match
from tests.utils import create_history, create_match


class TestNoProposal:
    """Fewer than four available players never yields a match."""

    @pytest.mark.parametrize("available", [[], ["p1"], ["p1", "p2", "p3"]])
    def test_returns_none(self, available):
        assert propose_rotation_match(available, []) is None

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError):
            propose_rotation_match(["p1", "p1", "p2", "p3"], [])


class TestScenarios:
    """End-to-end proposals for small, hand-checked sessions."""

    def test_empty_history(self, four_players):
        proposal = propose_rotation_match(four_players, [])

        assert proposal.team_1 == ("p1", "p2")
        assert proposal.team_2 == ("p3", "p4")
        assert proposal.main_reason == "Fresh team pairings, all players well-rested."
        assert proposal.scoring_breakdown == [
            "[p1,p2] vs [p3,p4]: +600",
            "[p1,p3] vs [p2,p4]: +600",
            "[p1,p4] vs [p2,p3]: +600",
        ]
        assert proposal.analytics.fatigued_players == []
        assert proposal.analytics.winners_were_split is None
        assert proposal.analytics.repeated_partnerships == []
        assert proposal.analytics.kept_winners is False

    def test_splits_last_winners(self, four_players, won_by_team_1):
        proposal = propose_rotation_match(four_players, won_by_team_1)

        assert proposal.team_1 == ("p1", "p3")
        assert proposal.team_2 == ("p2", "p4")
        assert proposal.scoring_breakdown == [
            "[p1,p3] vs [p2,p4]: +800",
            "[p1,p4] vs [p2,p3]: +800",
            "[p1,p2] vs [p3,p4]: -500",
        ]
        assert proposal.analytics.kept_winners is True
        assert proposal.analytics.winners_were_split is True

    def test_newcomers_play_next(self):
        history = create_history((("p1", "p2"), ("p3", "p4")))
        available = ["p1", "p2", "p3", "p4", "p5", "p6", "p7", "p8"]

        proposal = propose_rotation_match(available, history)

        assert proposal.team_1 == ("p5", "p6")
        assert proposal.team_2 == ("p7", "p8")
        assert proposal.main_reason == "Fresh team pairings, all players well-rested."

    def test_splits_winners_in_larger_pool(self, six_players):
        history = [
            create_match(
                team_1=("p1", "p2"),
                team_2=("p3", "p4"),
                score_1=8,
                score_2=11,
                is_finished=True,
                winner_team=2,
            )
        ]

        proposal = propose_rotation_match(six_players, history)

        for team in (proposal.team_1, proposal.team_2):
            assert set(team) != {"p3", "p4"}

    def test_all_four_fatigued_still_plays(self, four_players):
        history = create_history(
            (("p1", "p2"), ("p3", "p4")),
            (("p1", "p3"), ("p2", "p4")),
        )

        proposal = propose_rotation_match(four_players, history)

        assert proposal.team_1 == ("p1", "p4")
        assert proposal.team_2 == ("p2", "p3")
        assert proposal.main_reason == "Fresh team pairings."
        assert proposal.analytics.fatigued_players == four_players

    def test_one_new_pairing(self, four_players):
        """p1 has partnered everyone, so every split repeats one team."""
        history = create_history(
            (("p1", "p2"), ("p5", "p6")),
            (("p1", "p3"), ("p7", "p8")),
            (("p1", "p4"), ("p9", "p10")),
        )

        proposal = propose_rotation_match(four_players, history)

        assert proposal.team_1 == ("p1", "p2")
        assert proposal.main_reason == "One new team pairing, 3 rested players."
        assert proposal.analytics.fatigued_players == ["p1"]
        assert proposal.analytics.repeated_partnerships == [RepeatedPartnership("p1", "p2")]

    def test_nothing_fresh_falls_back_to_generic_reason(self, four_players):
        history = create_history(
            (("p1", "p2"), ("p3", "p4")),
            (("p1", "p3"), ("p2", "p4")),
            (("p1", "p4"), ("p2", "p3")),
        )

        proposal = propose_rotation_match(four_players, history)

        assert proposal.main_reason == "Best available match based on rotation rules."
        assert proposal.analytics.repeated_partnerships == [
            RepeatedPartnership("p1", "p2"),
            RepeatedPartnership("p3", "p4"),
        ]

    def test_winner_rule_only_looks_at_latest_match(self, four_players):
        """p1 & p2 won an older match; the latest match involved none of the four."""
        history = [
            create_match(team_1=("p1", "p2"), team_2=("p3", "p4"), winner_team=1,
                         is_finished=True, timestamp=1000),
            create_match(team_1=("p5", "p6"), team_2=("p7", "p8"), timestamp=2000),
        ]

        proposal = propose_rotation_match(four_players, history)

        assert proposal.analytics.winners_were_split is None
        assert proposal.analytics.kept_winners is False
        assert proposal.scoring_breakdown[0] == "[p1,p3] vs [p2,p4]: +600"

    def test_display_names_in_breakdown(self, four_players, display_names):
        proposal = propose_rotation_match(four_players, [], display_names)

        assert proposal.scoring_breakdown[0] == "[Alice,Bob] vs [Charlie,Dave]: +600"
        # Teams are always ids
        assert proposal.team_1 == ("p1", "p2")

    def test_combined_reason(self, four_players):
        proposal = propose_rotation_match(four_players, [])

        assert proposal.reason.startswith("Fresh team pairings, all players well-rested. Scores: ")
        assert proposal.reason.count(" | ") == 2


class TestStrictPartnersMode:
    """Strict-partners mode keeps winners on court when partnerships stay fresh."""

    def test_keeps_winners_with_rested_challengers(self, six_players, won_by_team_1):
        proposal = propose_rotation_match(
            six_players, won_by_team_1, mode=MatchmakingMode.STRICT_PARTNERS
        )

        assert proposal.team_1 == ("p1", "p5")
        assert proposal.team_2 == ("p2", "p6")
        assert proposal.main_reason == "Fresh partnerships, all players well-rested."
        assert proposal.analytics.kept_winners is True
        assert proposal.analytics.winners_were_split is True

    def test_no_history(self, four_players):
        proposal = propose_rotation_match(four_players, [], mode=MatchmakingMode.STRICT_PARTNERS)

        assert proposal.team_1 == ("p1", "p2")
        assert proposal.scoring_breakdown[0] == "[p1,p2] vs [p3,p4]: 0"

    def test_fatigued_winners_are_not_kept(self, six_players):
        history = [
            create_match(team_1=("p1", "p2"), team_2=("p5", "p6"), timestamp=1000),
            create_match(team_1=("p1", "p2"), team_2=("p3", "p4"), winner_team=1,
                         is_finished=True, timestamp=2000),
        ]

        proposal = propose_rotation_match(
            six_players, history, mode=MatchmakingMode.STRICT_PARTNERS
        )

        assert set(proposal.players) == {"p3", "p4", "p5", "p6"}


class TestProperties:
    """Invariants that hold for any input."""

    def test_idempotent(self, six_players, won_by_team_1, display_names):
        first = propose_rotation_match(six_players, won_by_team_1, display_names)
        second = propose_rotation_match(six_players, won_by_team_1, display_names)

        assert first.to_dict() == second.to_dict()

    def test_inputs_not_mutated(self, six_players, won_by_team_1):
        available = list(six_players)
        history = copy.deepcopy(won_by_team_1)

        propose_rotation_match(available, history)

        assert available == six_players
        assert history == won_by_team_1

    @pytest.mark.parametrize("seed", range(25))
    def test_random_sessions(self, seed):
        rng = random.Random(seed)
        roster = [f"p{i}" for i in range(1, 10)]
        history = []
        for i in range(rng.randint(0, 8)):
            four = rng.sample(roster, 4)
            history.append(
                create_match(
                    team_1=tuple(four[:2]),
                    team_2=tuple(four[2:]),
                    timestamp=1000 * (i + 1),
                    winner_team=rng.choice([None, 1, 2]),
                )
            )
        available = rng.sample(roster, rng.randint(4, len(roster)))

        proposal = propose_rotation_match(available, history)

        assert len(proposal.team_1) == 2
        assert len(proposal.team_2) == 2
        assert len(set(proposal.players)) == 4
        assert set(proposal.players) <= set(available)

        fatigued = find_fatigued_players(history)
        rested_subset_exists = any(
            not (set(c) & fatigued) for c in combinations(available, 4)
        )
        if rested_subset_exists:
            assert not set(proposal.players) & fatigued
