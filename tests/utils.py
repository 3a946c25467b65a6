import itertools

from app_types import MatchRecord, PlayerStat

_match_ids = itertools.count(1)


def create_match(**overrides) -> MatchRecord:
    """
    Builds a MatchRecord with sensible defaults.

    Defaults to an unfinished match between p1 & p2 and p3 & p4. Any field of
    MatchRecord can be overridden by keyword.
    """
    fields = {
        "id": f"match-{next(_match_ids)}",
        "session_id": "session-1",
        "team_1": ("p1", "p2"),
        "team_2": ("p3", "p4"),
        "timestamp": 1000,
        "is_finished": False,
    }
    fields.update(overrides)
    return MatchRecord(**fields)


def create_history(*teams, start=1000, step=1000) -> list[MatchRecord]:
    """
    Builds a history of unfinished matches from (team_1, team_2) tuples.

    The first tuple is the oldest match; timestamps increase by step.
    """
    return [
        create_match(team_1=team_1, team_2=team_2, timestamp=start + i * step)
        for i, (team_1, team_2) in enumerate(teams)
    ]


def create_player_stat(player_id, played=0, won=0, points=0, name="") -> PlayerStat:
    return PlayerStat(
        id=player_id,
        name=name,
        matches_played=played,
        matches_won=won,
        points_scored=points,
    )
