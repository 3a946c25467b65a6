# Match Constants
PLAYERS_PER_MATCH = 4
PLAYERS_PER_TEAM = 2
MIN_PLAYOFF_CANDIDATES = 4

# Team key separator, "a-b" with ids sorted
TEAM_KEY_SEPARATOR = "-"

# Combination Selector Weights (rested players >> rest time >> games played)
FATIGUE_FREE_WEIGHT = 1000
LAST_PLAYED_RANK_WEIGHT = 100
GAMES_PLAYED_WEIGHT = 10

# Team Configuration Weights (rotation mode)
REPEAT_TEAM_PENALTY = -100
FRESH_TEAM_BONUS = 150
ALL_FRESH_BONUS = 300
WINNERS_SPLIT_BONUS = 200
WINNERS_TOGETHER_PENALTY = -300

# Team Configuration Weights (strict-partners mode)
STRICT_REPEAT_TEAM_PENALTY = -1000
STRICT_WINNERS_SPLIT_BONUS = 50
STRICT_WINNERS_TOGETHER_PENALTY = -75

# Rationale Text
FALLBACK_REASON = "Best available match based on rotation rules."
PLAYOFF_MAIN_REASON = "Playoff Match: Top seeds face off"
PLAYOFF_SEEDING_LINE = "Seeding: #1 & #4 vs #2 & #3"

# Logging
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVEL_ENV_VAR = "LOG_LEVEL"
