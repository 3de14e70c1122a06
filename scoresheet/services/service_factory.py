"""
Service Factory for dependency injection.

This module provides a factory for creating properly configured service
instances around a single backend client.
"""
import logging
from typing import Optional

from .backend import BackendClient, InMemoryBackend
from .history_service import MatchHistoryService
from .match_service import MatchSession
from .persistence_service import JsonFileBackend
from .rest_backend import RestBackend
from .result_card_service import ResultCardService
from .roster_service import RosterService
from .team_service import TeamService
from ..config import AppConfig

logger = logging.getLogger(__name__)


class ServiceFactory:
    """
    Factory for creating service instances with proper dependency injection.

    Every service created by one factory shares the same backend client.
    """

    def __init__(self, config: Optional[AppConfig] = None, backend: Optional[BackendClient] = None):
        """
        Initialize factory.

        Args:
            config: Application settings; defaults to an in-memory setup
            backend: Backend to use instead of the one named in ``config``
        """
        self.config = config or AppConfig()
        self._backend = backend
        self._roster_service: Optional[RosterService] = None
        self._team_service: Optional[TeamService] = None
        self._history_service: Optional[MatchHistoryService] = None

    @property
    def backend(self) -> BackendClient:
        """Get singleton backend client."""
        if self._backend is None:
            self._backend = self._create_backend()
        return self._backend

    def create_roster_service(self) -> RosterService:
        if self._roster_service is None:
            self._roster_service = RosterService(self.backend)
        return self._roster_service

    def create_team_service(self) -> TeamService:
        if self._team_service is None:
            self._team_service = TeamService(self.backend)
        return self._team_service

    def create_history_service(self) -> MatchHistoryService:
        if self._history_service is None:
            self._history_service = MatchHistoryService(self.backend)
        return self._history_service

    def create_result_card_service(self) -> ResultCardService:
        return ResultCardService()

    def create_match_session(self, tick_interval: Optional[float] = None) -> MatchSession:
        """
        Create a MatchSession wired to the shared services.

        Args:
            tick_interval: Optional clock tick period override
        """
        kwargs = {}
        if tick_interval is not None:
            kwargs["tick_interval"] = tick_interval
        return MatchSession(
            self.backend,
            roster_service=self.create_roster_service(),
            team_service=self.create_team_service(),
            history_service=self.create_history_service(),
            **kwargs,
        )

    def _create_backend(self) -> BackendClient:
        kind = self.config.backend
        logger.info("Using %s backend", kind)
        if kind == "json":
            return JsonFileBackend(self.config.data_file)
        if kind == "rest":
            return RestBackend(
                self.config.supabase_url,
                self.config.supabase_key,
                timeout=self.config.request_timeout,
            )
        return InMemoryBackend()
