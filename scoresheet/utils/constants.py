"""
Constants for the Futsal Scoresheet application.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Futsal Scoresheet"
APP_VERSION = "1.0.0"

# Team profile defaults
DEFAULT_TEAM_NAME = "My Team"
DEFAULT_TEAM_COLOR = "#3b82f6"
TEAM_COLORS = [
    "#3b82f6",
    "#ef4444",
    "#22c55e",
    "#eab308",
    "#8b5cf6",
    "#ec4899",
    "#06b6d4",
    "#f97316",
]

# Match defaults
DEFAULT_OPPONENT_NAME = "United FC"

# Accumulated fouls per side shown as a warning (no enforced effect)
FOUL_WARNING_THRESHOLD = 5

# Clock tick period in seconds
TICK_INTERVAL_SECONDS = 1.0

# Roster limits
MIN_SHIRT_NUMBER = 0
MAX_SHIRT_NUMBER = 99
MAX_PLAYER_NAME_LENGTH = 40

# Listing limits
LEADERBOARD_SIZE = 10
TOP_SCORERS_SIZE = 3
RECENT_OPPONENTS_LIMIT = 8
RECENT_MATCHES_LIMIT = 5
