"""
Futsal Scoresheet

Scoring for amateur futsal matches: live score, foul and clock tracking,
post-match goal attribution, roster management and a shareable result card.

This package provides the match ledger model, the services around it and a
Flask JSON API for the mobile front end.
"""
from .models import MatchLedger, MatchEvent, EventKind, Side
from .services import MatchSession, MatchPhase, ServiceFactory, InMemoryBackend
from .ui import create_app, run_web_app
from .utils import fmt_mmss, APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "MatchLedger", "MatchEvent", "EventKind", "Side", "MatchSession",
    "MatchPhase", "ServiceFactory", "InMemoryBackend", "create_app",
    "run_web_app", "fmt_mmss", "APP_TITLE",
]
