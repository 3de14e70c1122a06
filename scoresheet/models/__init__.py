"""
Models package for the Futsal Scoresheet.

This package contains the core data models used throughout the application.
"""
from .match_event import EventKind, Side, MatchEvent
from .ledger import MatchLedger, MatchPlayer
from .roster import RosterPlayer, Team, MatchRecord, ScorerLine
from .result_card import ResultCard, scorer_summary

__all__ = [
    "EventKind", "Side", "MatchEvent", "MatchLedger", "MatchPlayer",
    "RosterPlayer", "Team", "MatchRecord", "ScorerLine",
    "ResultCard", "scorer_summary",
]
