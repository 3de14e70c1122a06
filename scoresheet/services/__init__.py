"""
Services package for the Futsal Scoresheet.

This package contains service classes that handle business logic.
Includes factory for dependency injection.
"""
from .backend import BackendClient, InMemoryBackend
from .persistence_service import PersistenceService, JsonFileBackend
from .rest_backend import RestBackend
from .timer_service import MatchClock, ClockTicker
from .roster_service import RosterService, RosterValidator
from .team_service import TeamService
from .history_service import MatchHistoryService
from .result_card_service import ResultCardService, ResultCardExporter
from .match_service import MatchSession, MatchPhase, FinalizeProgress
from .service_factory import ServiceFactory

__all__ = [
    "BackendClient", "InMemoryBackend", "PersistenceService", "JsonFileBackend",
    "RestBackend", "MatchClock", "ClockTicker", "RosterService",
    "RosterValidator", "TeamService", "MatchHistoryService",
    "ResultCardService", "ResultCardExporter", "MatchSession", "MatchPhase",
    "FinalizeProgress", "ServiceFactory",
]
