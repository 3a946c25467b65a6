# logger.py
"""
Logging configuration for the matchmaker.

This module provides centralized logging setup. The setup_logging() function
should be called once by whatever entry point hosts the matchmaker (API
server, script, notebook).

All modules should use the "app" namespace:
    import logging
    logger = logging.getLogger("app.module_name")

This keeps third-party library logs quiet while allowing granular control
over the app's own logging level via the LOG_LEVEL environment variable.
"""

import logging
import os
import sys

from constants import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV_VAR

# App namespace prefix - all app loggers should use this
APP_LOGGER_NAME = "app"


def setup_logging(app_level: int | None = None) -> None:
    """
    Configure logging for the application.

    - Root logger is set to WARNING (keeps third-party libraries quiet)
    - App namespace logger ("app.*") is set to the specified level

    This should be called ONCE at application startup (entry point).

    Args:
        app_level: The logging level for app modules. Defaults to the
            LOG_LEVEL environment variable, or INFO if unset.
    """
    if app_level is None:
        level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
        app_level = logging.getLevelName(level_name)
        if not isinstance(app_level, int):
            app_level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING)

    # Avoid adding duplicate handlers if setup is called multiple times
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(logging.DEBUG)  # Handler accepts all; loggers filter

        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)

        root_logger.addHandler(handler)

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(app_level)


def log_proposal_debug(
    logger: logging.Logger,
    fatigued: set[str],
    candidate_count: int,
    selected: list[str],
    scored_splits: list,
) -> None:
    """
    Log rotation proposal debug information in a consistent format.

    Args:
        logger: Logger instance to use
        fatigued: Players who played both of the last two matches
        candidate_count: Number of four-player subsets that survived filtering
        selected: The four selected players
        scored_splits: ScoredSplit list, best first
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return

    logger.debug("Fatigued Players: %s", sorted(fatigued))
    logger.debug("Candidate Subsets: %s", candidate_count)
    logger.debug("Selected Players: %s", selected)
    for scored in scored_splits:
        team_1, team_2 = scored.split
        logger.debug("Split %s vs %s: %s", list(team_1), list(team_2), scored.score)
