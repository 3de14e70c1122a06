"""
Utilities package for the Futsal Scoresheet.

This package contains utility functions used throughout the application.
"""
from .time_utils import fmt_mmss, now_ts, now_iso, today_iso
from .log_utils import configure_logging
from .constants import (
    APP_TITLE, APP_VERSION, DEFAULT_TEAM_NAME, DEFAULT_TEAM_COLOR, TEAM_COLORS,
    DEFAULT_OPPONENT_NAME, FOUL_WARNING_THRESHOLD, TICK_INTERVAL_SECONDS,
    MIN_SHIRT_NUMBER, MAX_SHIRT_NUMBER, MAX_PLAYER_NAME_LENGTH,
    LEADERBOARD_SIZE, TOP_SCORERS_SIZE, RECENT_OPPONENTS_LIMIT,
    RECENT_MATCHES_LIMIT,
)

__all__ = [
    "fmt_mmss", "now_ts", "now_iso", "today_iso", "configure_logging",
    "APP_TITLE", "APP_VERSION", "DEFAULT_TEAM_NAME", "DEFAULT_TEAM_COLOR",
    "TEAM_COLORS", "DEFAULT_OPPONENT_NAME", "FOUL_WARNING_THRESHOLD",
    "TICK_INTERVAL_SECONDS", "MIN_SHIRT_NUMBER", "MAX_SHIRT_NUMBER",
    "MAX_PLAYER_NAME_LENGTH", "LEADERBOARD_SIZE", "TOP_SCORERS_SIZE",
    "RECENT_OPPONENTS_LIMIT", "RECENT_MATCHES_LIMIT",
]
