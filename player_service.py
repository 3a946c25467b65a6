"""
Service layer for player standings.

This module converts ranked session stats into pandas DataFrames for
display layers (leaderboards, exports).
"""

import logging

import pandas as pd

from app_types import PlayerStat
from playoff import rank_players

logger = logging.getLogger("app.player_service")

STANDINGS_COLUMNS = ["#", "Player Name", "Played", "Won", "Win %", "Points", "PPG"]


def create_standings_dataframe(stats: list[PlayerStat]) -> pd.DataFrame:
    """
    Creates a standings table ranked the same way playoff seeding ranks players.

    Args:
        stats: Session stats, any order

    Returns:
        DataFrame with one row per player, best first. Win % is 0-100 and
        both Win % and PPG are rounded to one decimal.
    """
    ranked = rank_players(stats)
    logger.debug("Building standings for %d player(s)", len(ranked))

    df_data = {
        "#": range(1, len(ranked) + 1),
        "Player Name": [s.name or s.id for s in ranked],
        "Played": [s.matches_played for s in ranked],
        "Won": [s.matches_won for s in ranked],
        "Win %": [round(s.win_percentage * 100, 1) for s in ranked],
        "Points": [s.points_scored for s in ranked],
        "PPG": [round(s.points_per_game, 1) for s in ranked],
    }
    return pd.DataFrame(df_data, columns=STANDINGS_COLUMNS)
