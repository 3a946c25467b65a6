# playoff.py
"""
Playoff seeding.

Ranks available players by session performance and seeds a single
competitive match: #1 & #4 against #2 & #3. Fatigue and partnership
history play no part here.
"""

import logging

from app_types import DisplayNames, MatchProposal, MatchRecord, PlayerId, PlayerStat
from constants import (
    MIN_PLAYOFF_CANDIDATES,
    PLAYOFF_MAIN_REASON,
    PLAYOFF_SEEDING_LINE,
)
from matchmaker import check_distinct_ids

logger = logging.getLogger("app.playoff")


def ranking_key(stat: PlayerStat) -> tuple[float, int, int, float]:
    """Win %, then wins, then points scored, then points per game."""
    return (
        stat.win_percentage,
        stat.matches_won,
        stat.points_scored,
        stat.points_per_game,
    )


def rank_players(stats: list[PlayerStat]) -> list[PlayerStat]:
    """Sorts stats best first. Fully tied players keep their input order."""
    return sorted(stats, key=ranking_key, reverse=True)


def propose_playoff_match(
    available_player_ids: list[PlayerId],
    history: list[MatchRecord],
    session_stats: list[PlayerStat],
    display_names: DisplayNames | None = None,
) -> MatchProposal | None:
    """
    Seeds a playoff match from the top four available players.

    Args:
        available_player_ids: Players not currently on court
        history: Accepted for call compatibility with the rotation proposer; unused
        session_stats: Cumulative stats for the session
        display_names: Optional id -> name mapping for the rationale

    Returns:
        A MatchProposal with team_1 = (#1, #4) and team_2 = (#2, #3), or None
        if fewer than four available players have stats.

    Raises:
        ValidationError: If available_player_ids or session_stats repeat a player id.
    """
    check_distinct_ids(available_player_ids, "available players")
    check_distinct_ids([s.id for s in session_stats], "session stats")
    if len(available_player_ids) < MIN_PLAYOFF_CANDIDATES:
        return None

    available = set(available_player_ids)
    ranked = rank_players([s for s in session_stats if s.id in available])
    if len(ranked) < MIN_PLAYOFF_CANDIDATES:
        logger.info(
            "Playoff needs %d ranked players, only %d available",
            MIN_PLAYOFF_CANDIDATES,
            len(ranked),
        )
        return None

    seed_1, seed_2, seed_3, seed_4 = (s.id for s in ranked[:MIN_PLAYOFF_CANDIDATES])
    team_1 = (seed_1, seed_4)
    team_2 = (seed_2, seed_3)

    ranks = {s.id: i + 1 for i, s in enumerate(ranked)}

    def describe(pid: PlayerId) -> str:
        name = (display_names or {}).get(pid) or pid
        return f"{name} #{ranks[pid]}"

    breakdown = [
        "Team 1: " + " & ".join(describe(pid) for pid in team_1),
        "Team 2: " + " & ".join(describe(pid) for pid in team_2),
        PLAYOFF_SEEDING_LINE,
    ]

    return MatchProposal(
        team_1=team_1,
        team_2=team_2,
        main_reason=PLAYOFF_MAIN_REASON,
        scoring_breakdown=breakdown,
        analytics=None,
        reason=f"{PLAYOFF_MAIN_REASON}. {' | '.join(breakdown)}",
    )
