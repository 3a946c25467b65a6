# matchmaker.py
"""
Rotation matchmaking for doubles play.

Given the players currently off court and the session's match history, this
module decides which four players go on next and how they split into two
teams. Selection favours rested players, long bench time and few games
played; the split favours fresh partnerships and breaking up the previous
winners.

All functions are pure: they read caller-supplied snapshots and build their
lookup tables fresh on every call.
"""

import logging
import math
from itertools import combinations

from app_types import (
    DisplayNames,
    MatchAnalytics,
    MatchmakingMode,
    MatchProposal,
    MatchRecord,
    PlayerFairnessStat,
    PlayerId,
    RepeatedPartnership,
    ScoredSplit,
    TeamPairKey,
    TeamSplit,
)
from constants import (
    ALL_FRESH_BONUS,
    FALLBACK_REASON,
    FATIGUE_FREE_WEIGHT,
    FRESH_TEAM_BONUS,
    GAMES_PLAYED_WEIGHT,
    LAST_PLAYED_RANK_WEIGHT,
    PLAYERS_PER_MATCH,
    PLAYERS_PER_TEAM,
    REPEAT_TEAM_PENALTY,
    STRICT_REPEAT_TEAM_PENALTY,
    STRICT_WINNERS_SPLIT_BONUS,
    STRICT_WINNERS_TOGETHER_PENALTY,
    TEAM_KEY_SEPARATOR,
    WINNERS_SPLIT_BONUS,
    WINNERS_TOGETHER_PENALTY,
)
from exceptions import ValidationError
from logger import log_proposal_debug

logger = logging.getLogger("app.matchmaker")


# =============================================================================
# History Helpers
# =============================================================================


def check_distinct_ids(player_ids: list[PlayerId], label: str) -> None:
    """Raises ValidationError if any id appears more than once."""
    if len(set(player_ids)) != len(player_ids):
        raise ValidationError(f"Duplicate player ids in {label}: {player_ids}")


def normalize_team(player_1: PlayerId, player_2: PlayerId) -> TeamPairKey:
    """Order-independent key for a two-player team."""
    return TEAM_KEY_SEPARATOR.join(sorted((player_1, player_2)))


def sort_history(history: list[MatchRecord]) -> list[MatchRecord]:
    """Returns history newest first. Equal timestamps keep their input order."""
    return sorted(history, key=lambda m: m.timestamp, reverse=True)


def build_partnership_ledger(history: list[MatchRecord]) -> set[TeamPairKey]:
    """Collects every pair of players that has shared a team.

    Finished or not, every match counts. Teams that are not exactly two
    players long are skipped.
    """
    ledger: set[TeamPairKey] = set()
    for match in history:
        for team in (match.team_1, match.team_2):
            if len(team) == PLAYERS_PER_TEAM:
                ledger.add(normalize_team(team[0], team[1]))
    return ledger


def find_fatigued_players(history: list[MatchRecord]) -> set[PlayerId]:
    """Players who appear in both of the two most recent matches.

    Returns an empty set when there are fewer than two matches.
    """
    recent = sort_history(history)[:2]
    if len(recent) < 2:
        return set()
    last_match, second_last_match = recent
    return set(last_match.players) & set(second_last_match.players)


def calculate_fairness_stats(
    available_player_ids: list[PlayerId], history: list[MatchRecord]
) -> dict[PlayerId, PlayerFairnessStat]:
    """Games played and recency rank for each available player.

    A rank of 0 means the player was in the most recent match; players who
    never appear keep a rank of math.inf.
    """
    stats = {pid: PlayerFairnessStat(player_id=pid) for pid in available_player_ids}

    for index, match in enumerate(sort_history(history)):
        for pid in set(match.players):
            stat = stats.get(pid)
            if stat is None:
                continue
            stat.games_played += 1
            if index < stat.last_played_rank:
                stat.last_played_rank = index

    return stats


# =============================================================================
# Combination Selector
# =============================================================================


def enumerate_team_splits(players: list[PlayerId]) -> list[TeamSplit]:
    """The three ways to split four players into two teams, in fixed order."""
    p1, p2, p3, p4 = players
    return [
        ((p1, p2), (p3, p4)),
        ((p1, p3), (p2, p4)),
        ((p1, p4), (p2, p3)),
    ]


def _split_is_all_fresh(split: TeamSplit, ledger: set[TeamPairKey]) -> bool:
    return all(normalize_team(*team) not in ledger for team in split)


def has_fresh_partnership_potential(
    players: list[PlayerId], ledger: set[TeamPairKey]
) -> bool:
    """Whether some split of these four players yields at least one new team."""
    return any(
        normalize_team(*team) not in ledger
        for split in enumerate_team_splits(players)
        for team in split
    )


def _rest_rank(stat: PlayerFairnessStat, never_played_rank: int) -> int:
    if math.isinf(stat.last_played_rank):
        return never_played_rank
    return int(stat.last_played_rank)


def score_combination(
    players: list[PlayerId],
    fatigued: set[PlayerId],
    fairness: dict[PlayerId, PlayerFairnessStat],
    never_played_rank: int = 0,
) -> int:
    """Ranks a four-player subset: fewest fatigued, then most rest, then fewest games.

    Players who never played count as never_played_rank, which callers set
    to the history length so they rank one step older than the oldest match.
    """
    fatigued_count = sum(1 for pid in players if pid in fatigued)
    total_rank = sum(_rest_rank(fairness[pid], never_played_rank) for pid in players)
    total_games = sum(fairness[pid].games_played for pid in players)
    return (
        (PLAYERS_PER_MATCH - fatigued_count) * FATIGUE_FREE_WEIGHT
        + total_rank * LAST_PLAYED_RANK_WEIGHT
        - total_games * GAMES_PLAYED_WEIGHT
    )


def select_players(
    available_player_ids: list[PlayerId],
    fatigued: set[PlayerId],
    fairness: dict[PlayerId, PlayerFairnessStat],
    ledger: set[TeamPairKey],
    history_length: int = 0,
) -> tuple[list[PlayerId], int]:
    """
    Chooses which four of the available players go on court.

    Subsets are filtered to those without fatigued players, then to those
    that can form at least one new team; each filter is dropped if it would
    leave nothing. The highest scoring survivor wins, with ties going to the
    earliest subset in enumeration order over available_player_ids.

    Args:
        available_player_ids: Players off court, in caller order (at least four)
        fatigued: Output of find_fatigued_players
        fairness: Output of calculate_fairness_stats
        ledger: Output of build_partnership_ledger
        history_length: Number of history matches; the rest rank given to
            players who never played

    Returns:
        Tuple of (selected players, number of subsets that were scored).
    """
    if len(available_player_ids) == PLAYERS_PER_MATCH:
        return list(available_player_ids), 1

    candidates = [list(c) for c in combinations(available_player_ids, PLAYERS_PER_MATCH)]

    rested = [c for c in candidates if not any(pid in fatigued for pid in c)]
    if rested:
        candidates = rested
    else:
        logger.debug("Every subset contains a fatigued player; ignoring fatigue filter")

    fresh = [c for c in candidates if has_fresh_partnership_potential(c, ledger)]
    if fresh:
        candidates = fresh
    else:
        logger.debug("No subset can form a new team; ignoring freshness filter")

    best = candidates[0]
    best_score = score_combination(best, fatigued, fairness, history_length)
    for candidate in candidates[1:]:
        score = score_combination(candidate, fatigued, fairness, history_length)
        if score > best_score:
            best, best_score = candidate, score

    return best, len(candidates)


def _rotation_order(
    player_ids: list[PlayerId],
    fatigued: set[PlayerId],
    fairness: dict[PlayerId, PlayerFairnessStat],
) -> list[PlayerId]:
    """Not fatigued first, then longest bench time, then fewest games."""
    return sorted(
        player_ids,
        key=lambda pid: (
            pid in fatigued,
            -fairness[pid].last_played_rank,
            fairness[pid].games_played,
        ),
    )


def _select_keeping_winners(
    available_player_ids: list[PlayerId],
    last_match: MatchRecord | None,
    fatigued: set[PlayerId],
    fairness: dict[PlayerId, PlayerFairnessStat],
    ledger: set[TeamPairKey],
) -> list[PlayerId] | None:
    """Strict-partners selection: keep last winners on court if a fully fresh split exists."""
    if last_match is None or last_match.winners is None:
        return None

    winners = [
        pid
        for pid in last_match.winners
        if pid in available_player_ids and pid not in fatigued
    ]
    if len(winners) != PLAYERS_PER_TEAM:
        return None

    others = [pid for pid in available_player_ids if pid not in winners]
    candidate = winners + _rotation_order(others, fatigued, fairness)[:PLAYERS_PER_TEAM]
    if len(candidate) < PLAYERS_PER_MATCH:
        return None

    if any(_split_is_all_fresh(split, ledger) for split in enumerate_team_splits(candidate)):
        logger.debug("Keeping winners %s on court", winners)
        return candidate
    return None


# =============================================================================
# Team Configuration Scorer
# =============================================================================


def _winners_key(
    selected: list[PlayerId], last_match: MatchRecord | None
) -> TeamPairKey | None:
    """Team key of the last match's winners if both were selected, else None."""
    if last_match is None or last_match.winners is None:
        return None
    present = [pid for pid in last_match.winners if pid in selected]
    if len(present) != PLAYERS_PER_TEAM:
        return None
    return normalize_team(present[0], present[1])


def score_team_splits(
    selected: list[PlayerId],
    ledger: set[TeamPairKey],
    last_match: MatchRecord | None,
    mode: MatchmakingMode = MatchmakingMode.ROTATION,
) -> list[ScoredSplit]:
    """
    Scores the three possible splits of the selected players.

    Rotation mode: -100 per repeated team, +150 per new team, +300 more when
    both teams are new, and when both of the last match's winners were
    selected +200 for splitting them or -300 for keeping them together.
    Strict-partners mode: -1000 per repeated team and +50 / -75 for the
    winner rule.

    Returns:
        ScoredSplit list sorted best first; equal scores keep enumeration order.
    """
    winners_key = _winners_key(selected, last_match)
    strict = mode == MatchmakingMode.STRICT_PARTNERS

    scored = []
    for split in enumerate_team_splits(selected):
        keys = [normalize_team(*team) for team in split]
        score = 0

        for key in keys:
            if key in ledger:
                score += STRICT_REPEAT_TEAM_PENALTY if strict else REPEAT_TEAM_PENALTY
            elif not strict:
                score += FRESH_TEAM_BONUS
        if not strict and all(key not in ledger for key in keys):
            score += ALL_FRESH_BONUS

        if winners_key is not None:
            if winners_key in keys:
                score += STRICT_WINNERS_TOGETHER_PENALTY if strict else WINNERS_TOGETHER_PENALTY
            else:
                score += STRICT_WINNERS_SPLIT_BONUS if strict else WINNERS_SPLIT_BONUS

        scored.append(ScoredSplit(split=split, score=score))

    # sorted() is stable, so ties resolve to the earlier split
    return sorted(scored, key=lambda s: s.score, reverse=True)


# =============================================================================
# Rationale & Analytics
# =============================================================================


def _display_name(pid: PlayerId, display_names: DisplayNames | None) -> str:
    if display_names:
        return display_names.get(pid) or pid
    return pid


def format_split_line(scored: ScoredSplit, display_names: DisplayNames | None = None) -> str:
    """'[A,B] vs [C,D]: +600'"""
    team_1, team_2 = scored.split
    team_1_display = ",".join(_display_name(pid, display_names) for pid in team_1)
    team_2_display = ",".join(_display_name(pid, display_names) for pid in team_2)
    sign = "+" if scored.score > 0 else ""
    return f"[{team_1_display}] vs [{team_2_display}]: {sign}{scored.score}"


def build_main_reason(
    split: TeamSplit,
    ledger: set[TeamPairKey],
    fatigued: set[PlayerId],
    mode: MatchmakingMode = MatchmakingMode.ROTATION,
) -> str:
    strict = mode == MatchmakingMode.STRICT_PARTNERS
    fresh = [normalize_team(*team) not in ledger for team in split]

    reasons = []
    if all(fresh):
        reasons.append("Fresh partnerships" if strict else "Fresh team pairings")
    elif any(fresh):
        reasons.append("One new partnership" if strict else "One new team pairing")
    elif strict:
        reasons.append("Best partnership variety available")

    fatigue_count = sum(1 for team in split for pid in team if pid in fatigued)
    if fatigue_count == 0:
        reasons.append("all players well-rested")
    elif fatigue_count < PLAYERS_PER_MATCH:
        reasons.append(f"{PLAYERS_PER_MATCH - fatigue_count} rested players")

    if not reasons:
        return FALLBACK_REASON
    sentence = ", ".join(reasons) + "."
    return sentence[0].upper() + sentence[1:]


def build_analytics(
    split: TeamSplit,
    selected: list[PlayerId],
    ledger: set[TeamPairKey],
    fatigued: set[PlayerId],
    last_match: MatchRecord | None,
) -> MatchAnalytics:
    analytics = MatchAnalytics(
        fatigued_players=[pid for pid in selected if pid in fatigued],
    )

    winners_key = _winners_key(selected, last_match)
    if winners_key is not None:
        analytics.kept_winners = True
        analytics.winners_were_split = all(
            normalize_team(*team) != winners_key for team in split
        )

    for team in split:
        if normalize_team(*team) in ledger:
            a, b = sorted(team)
            analytics.repeated_partnerships.append(RepeatedPartnership(a=a, b=b))

    return analytics


# =============================================================================
# Rotation Proposer
# =============================================================================


def propose_rotation_match(
    available_player_ids: list[PlayerId],
    history: list[MatchRecord],
    display_names: DisplayNames | None = None,
    mode: MatchmakingMode = MatchmakingMode.ROTATION,
) -> MatchProposal | None:
    """
    Proposes the next rotation match.

    The result depends on the order of available_player_ids: ties between
    equally good subsets go to the one that comes first in that order.

    Args:
        available_player_ids: Players not currently on court
        history: Matches to learn from, any order
        display_names: Optional id -> name mapping for the breakdown text
        mode: ROTATION (default) or STRICT_PARTNERS

    Returns:
        A MatchProposal, or None if fewer than four players are available.

    Raises:
        ValidationError: If available_player_ids contains duplicates.
    """
    check_distinct_ids(available_player_ids, "available players")
    if len(available_player_ids) < PLAYERS_PER_MATCH:
        logger.debug("Only %d players available", len(available_player_ids))
        return None

    sorted_history = sort_history(history)
    last_match = sorted_history[0] if sorted_history else None

    fatigued = find_fatigued_players(history)
    ledger = build_partnership_ledger(history)
    fairness = calculate_fairness_stats(available_player_ids, history)

    selected = None
    candidate_count = 1
    if mode == MatchmakingMode.STRICT_PARTNERS:
        selected = _select_keeping_winners(
            available_player_ids, last_match, fatigued, fairness, ledger
        )
    if selected is None:
        selected, candidate_count = select_players(
            available_player_ids, fatigued, fairness, ledger, len(history)
        )

    scored_splits = score_team_splits(selected, ledger, last_match, mode)
    best = scored_splits[0].split

    log_proposal_debug(logger, fatigued, candidate_count, selected, scored_splits)

    main_reason = build_main_reason(best, ledger, fatigued, mode)
    breakdown = [format_split_line(s, display_names) for s in scored_splits]

    return MatchProposal(
        team_1=best[0],
        team_2=best[1],
        main_reason=main_reason,
        scoring_breakdown=breakdown,
        analytics=build_analytics(best, selected, ledger, fatigued, last_match),
        reason=f"{main_reason} Scores: {' | '.join(breakdown)}",
    )
