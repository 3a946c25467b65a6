# app_types.py
"""
Type aliases and data classes for the matchmaker.

This module defines the value types exchanged between the API layer and the
matchmaking engine. Everything here is a transient snapshot: the matchmaker
builds these fresh on every call and never mutates them.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from exceptions import ValidationError

# =============================================================================
# Basic Type Aliases
# =============================================================================

# Opaque, stable player identifier
PlayerId = str

# Order-independent key for a two-player team ("a-b" with a <= b)
TeamPairKey = str

# A two-player team as proposed
Team = tuple[PlayerId, PlayerId]

# A way of splitting four players into two teams: (team_1, team_2)
TeamSplit = tuple[Team, Team]

# Mapping of player ids to display names
DisplayNames = dict[PlayerId, str]


class MatchmakingMode(str, Enum):
    """Strategy used by the rotation proposer."""

    ROTATION = "rotation"
    STRICT_PARTNERS = "strict-partners"


# =============================================================================
# Input Data Classes
# =============================================================================


@dataclass(frozen=True)
class MatchRecord:
    """A match from the session history.

    Attributes:
        id: Match identifier
        session_id: Session the match belongs to
        team_1: Player ids of team 1 (normally two)
        team_2: Player ids of team 2 (normally two)
        timestamp: Creation time in epoch milliseconds
        is_finished: Whether a score has been entered
        winner_team: 1 or 2 once decided, otherwise None
        score_1: Points scored by team 1
        score_2: Points scored by team 2
        court_number: Court the match was played on
    """

    id: str
    session_id: str
    team_1: tuple[PlayerId, ...]
    team_2: tuple[PlayerId, ...]
    timestamp: int
    is_finished: bool = False
    winner_team: int | None = None
    score_1: int | None = None
    score_2: int | None = None
    court_number: int | None = None

    def __post_init__(self) -> None:
        if self.winner_team not in (None, 1, 2):
            raise ValidationError(
                f"Match {self.id}: winner_team must be 1, 2 or None, got {self.winner_team!r}"
            )
        # Accept lists from callers but store immutable tuples
        object.__setattr__(self, "team_1", tuple(self.team_1))
        object.__setattr__(self, "team_2", tuple(self.team_2))

    @property
    def players(self) -> tuple[PlayerId, ...]:
        return self.team_1 + self.team_2

    @property
    def winners(self) -> tuple[PlayerId, ...] | None:
        """The winning team, or None if the match has no decided winner."""
        if self.winner_team == 1:
            return self.team_1
        if self.winner_team == 2:
            return self.team_2
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MatchRecord":
        """Builds a record from the API wire shape (camelCase keys)."""
        try:
            return cls(
                id=str(data["id"]),
                session_id=str(data.get("sessionId", "")),
                team_1=tuple(data.get("team1") or ()),
                team_2=tuple(data.get("team2") or ()),
                timestamp=int(data["timestamp"]),
                is_finished=bool(data.get("isFinished", False)),
                winner_team=data.get("winnerTeam"),
                score_1=data.get("score1"),
                score_2=data.get("score2"),
                court_number=data.get("courtNumber"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed match record: {data!r}") from e


@dataclass(frozen=True)
class PlayerStat:
    """Cumulative per-session performance of a player."""

    id: PlayerId
    name: str = ""
    matches_played: int = 0
    matches_won: int = 0
    points_scored: int = 0
    points_allowed: int = 0

    @property
    def win_percentage(self) -> float:
        if self.matches_played == 0:
            return 0.0
        return self.matches_won / self.matches_played

    @property
    def points_per_game(self) -> float:
        if self.matches_played == 0:
            return 0.0
        return self.points_scored / self.matches_played

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlayerStat":
        try:
            return cls(
                id=str(data["id"]),
                name=data.get("name", ""),
                matches_played=int(data.get("matchesPlayed", 0)),
                matches_won=int(data.get("matchesWon", 0)),
                points_scored=int(data.get("pointsScored") or 0),
                points_allowed=int(data.get("pointsAllowed") or 0),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed player stat: {data!r}") from e


@dataclass
class PlayerFairnessStat:
    """Rotation signals for one available player.

    Attributes:
        player_id: The player
        games_played: Number of history matches containing the player
        last_played_rank: Index of the player's most recent match in the
            history sorted newest first (0 = most recent match), or
            math.inf if the player never appears
    """

    player_id: PlayerId
    games_played: int = 0
    last_played_rank: float = math.inf


# =============================================================================
# Result Data Classes
# =============================================================================


@dataclass(frozen=True)
class RepeatedPartnership:
    """A proposed team whose two players have partnered before (a <= b)."""

    a: PlayerId
    b: PlayerId


@dataclass
class MatchAnalytics:
    """Diagnostics attached to a rotation proposal.

    Attributes:
        fatigued_players: Selected players who played both of the last two matches
        winners_were_split: Whether the previous winners were split, or None
            if both previous winners were not among the selected players
        repeated_partnerships: Teams in the chosen split that already partnered
        kept_winners: Whether both previous winners were selected
    """

    fatigued_players: list[PlayerId] = field(default_factory=list)
    winners_were_split: bool | None = None
    repeated_partnerships: list[RepeatedPartnership] = field(default_factory=list)
    kept_winners: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "fatiguedPlayers": list(self.fatigued_players),
            "winnersWereSplit": self.winners_were_split,
            "repeatedPartnerships": [
                {"a": rp.a, "b": rp.b} for rp in self.repeated_partnerships
            ],
            "keptWinners": self.kept_winners,
        }


@dataclass
class MatchProposal:
    """A proposed next match.

    Attributes:
        team_1: First team (two player ids)
        team_2: Second team (two player ids)
        main_reason: Short human-readable rationale
        scoring_breakdown: Supporting lines (candidate splits or seeding)
        analytics: Rotation diagnostics, None for playoff proposals
        reason: main_reason and breakdown combined into one line
    """

    team_1: Team
    team_2: Team
    main_reason: str
    scoring_breakdown: list[str]
    analytics: MatchAnalytics | None = None
    reason: str = ""

    @property
    def players(self) -> tuple[PlayerId, ...]:
        return self.team_1 + self.team_2

    def to_dict(self) -> dict[str, Any]:
        return {
            "team1": list(self.team_1),
            "team2": list(self.team_2),
            "reason": self.reason,
            "mainReason": self.main_reason,
            "scoringBreakdown": list(self.scoring_breakdown),
            "analytics": self.analytics.to_dict() if self.analytics else None,
        }


@dataclass
class ScoredSplit:
    """A candidate team split with its score."""

    split: TeamSplit
    score: int | float
