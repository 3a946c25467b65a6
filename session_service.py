"""
Service layer between the session/match API and the matchmaker.

The API layer owns persistence; it hands this module plain snapshots of the
session roster, the session's matches and the known players. This module
derives what the matchmaker needs from them (who is off court, display
names, session stats) and picks the proposer.
"""

import logging

from app_types import (
    DisplayNames,
    MatchmakingMode,
    MatchProposal,
    MatchRecord,
    PlayerId,
    PlayerStat,
)
from matchmaker import propose_rotation_match
from playoff import propose_playoff_match

logger = logging.getLogger("app.session_service")


def get_available_player_ids(
    roster_ids: list[PlayerId], matches: list[MatchRecord]
) -> list[PlayerId]:
    """
    Roster players who are not in an unfinished match.

    Args:
        roster_ids: Checked-in players, in roster order
        matches: The session's matches

    Returns:
        Available player ids, preserving roster order.
    """
    busy: set[PlayerId] = set()
    for match in matches:
        if not match.is_finished:
            busy.update(match.players)
    return [pid for pid in roster_ids if pid not in busy]


def compute_session_stats(
    players: list[PlayerStat], matches: list[MatchRecord]
) -> list[PlayerStat]:
    """
    Rebuilds per-player stats from the finished matches of a session.

    Every known player gets a zeroed entry; unknown ids in matches are ignored.

    Args:
        players: Known players (only id and name are used)
        matches: Matches to accumulate

    Returns:
        PlayerStat list in the order of players.
    """
    totals = {
        p.id: {"played": 0, "won": 0, "scored": 0, "allowed": 0} for p in players
    }

    for match in matches:
        if not match.is_finished:
            continue
        score_1 = match.score_1 or 0
        score_2 = match.score_2 or 0
        sides = (
            (match.team_1, match.winner_team == 1, score_1, score_2),
            (match.team_2, match.winner_team == 2, score_2, score_1),
        )
        for team, won, scored, allowed in sides:
            for pid in team:
                entry = totals.get(pid)
                if entry is None:
                    continue
                entry["played"] += 1
                entry["won"] += int(won)
                entry["scored"] += scored
                entry["allowed"] += allowed

    return [
        PlayerStat(
            id=p.id,
            name=p.name,
            matches_played=totals[p.id]["played"],
            matches_won=totals[p.id]["won"],
            points_scored=totals[p.id]["scored"],
            points_allowed=totals[p.id]["allowed"],
        )
        for p in players
    ]


def build_display_names(players: list[PlayerStat]) -> DisplayNames:
    return {p.id: p.name for p in players if p.name}


def propose_next_match(
    roster_ids: list[PlayerId],
    matches: list[MatchRecord],
    players: list[PlayerStat],
    playoff: bool = False,
    mode: MatchmakingMode = MatchmakingMode.ROTATION,
) -> MatchProposal | None:
    """
    Proposes the next match for a session.

    1. Removes players who are on court from the roster
    2. Runs the rotation proposer, or the playoff proposer on session stats
    3. Logs the outcome

    Returns:
        The proposal, or None if no match can be generated right now.

    Raises:
        ValidationError: If the roster contains duplicate ids.
    """
    available = get_available_player_ids(roster_ids, matches)
    display_names = build_display_names(players)

    if playoff:
        session_stats = compute_session_stats(players, matches)
        proposal = propose_playoff_match(available, matches, session_stats, display_names)
    else:
        proposal = propose_rotation_match(available, matches, display_names, mode)

    if proposal is None:
        logger.info(
            "No match proposed: %d of %d roster players available",
            len(available),
            len(roster_ids),
        )
    else:
        logger.info("Proposed %s vs %s", list(proposal.team_1), list(proposal.team_2))

    return proposal
