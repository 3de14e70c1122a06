"""
Roster service for the Futsal Scoresheet application.

This module provides business logic for managing the team roster: player
validation, create/update/delete, the active flag, and the career
goal leaderboard. Roster changes only take effect for the next match set up;
a match already in progress keeps its own snapshot.
"""
import logging
from typing import List, Optional

from .backend import BackendClient
from ..exceptions import RosterValidationError, UnknownPlayerError
from ..models import MatchPlayer, RosterPlayer
from ..utils import (
    LEADERBOARD_SIZE, MAX_PLAYER_NAME_LENGTH, MAX_SHIRT_NUMBER,
    MIN_SHIRT_NUMBER, TOP_SCORERS_SIZE,
)

logger = logging.getLogger(__name__)


class RosterValidator:
    """Validates roster entry fields."""

    def validate(self, name: Optional[str], number: Optional[object]) -> List[str]:
        """
        Validate player data and return list of validation errors.

        Args:
            name: Player name, or None when not being changed
            number: Shirt number, or None when not being changed

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if name is not None and not isinstance(name, str):
            errors.append("Player name must be text")
        elif name is not None:
            cleaned = name.strip()
            if not cleaned:
                errors.append("Player name is required")
            elif len(cleaned) > MAX_PLAYER_NAME_LENGTH:
                errors.append(
                    f"Player name must be at most {MAX_PLAYER_NAME_LENGTH} characters"
                )

        if number is not None:
            try:
                value = int(str(number).strip())
            except ValueError:
                errors.append("Player number must be numeric")
            else:
                if not MIN_SHIRT_NUMBER <= value <= MAX_SHIRT_NUMBER:
                    errors.append(
                        f"Player number must be between {MIN_SHIRT_NUMBER} and {MAX_SHIRT_NUMBER}"
                    )

        return errors


class RosterService:
    """
    Service class for managing roster data.

    All reads and writes go through the injected backend client.
    """

    def __init__(self, backend: BackendClient, validator: Optional[RosterValidator] = None):
        self.backend = backend
        self.validator = validator or RosterValidator()

    def list_players(self) -> List[RosterPlayer]:
        """All roster entries ordered by shirt number."""
        rows = self.backend.list_players()
        players = [RosterPlayer.from_dict(row) for row in rows]
        players.sort(key=lambda p: p.number)
        return players

    def active_players(self) -> List[RosterPlayer]:
        return [p for p in self.list_players() if p.is_active]

    def get_player(self, player_id: str) -> RosterPlayer:
        row = self.backend.get_player(player_id)
        if row is None:
            raise UnknownPlayerError(f"Player {player_id} not found")
        return RosterPlayer.from_dict(row)

    def create_player(self, name: str, number: object) -> RosterPlayer:
        """
        Create a new active player with no career goals.

        Raises:
            RosterValidationError: If name or number is invalid
        """
        if number is None:
            raise RosterValidationError("Player validation failed: Player number is required")
        self._check("" if name is None else name, number)
        row = self.backend.create_player(name.strip(), int(str(number).strip()))
        logger.info("Added player %s (#%s)", row["name"], row["number"])
        return RosterPlayer.from_dict(row)

    def update_player(
        self,
        player_id: str,
        name: Optional[str] = None,
        number: Optional[object] = None,
        is_active: Optional[bool] = None,
    ) -> RosterPlayer:
        """
        Update the given fields of a player; None leaves a field unchanged.

        Raises:
            RosterValidationError: If a new name or number is invalid
            UnknownPlayerError: If the player does not exist
        """
        self._check(name, number)
        if is_active is not None and not isinstance(is_active, bool):
            raise RosterValidationError("Player validation failed: Active flag must be true or false")
        fields = {}
        if name is not None:
            fields["name"] = name.strip()
        if number is not None:
            fields["number"] = int(str(number).strip())
        if is_active is not None:
            fields["is_active"] = is_active
        row = self.backend.update_player(player_id, **fields)
        return RosterPlayer.from_dict(row)

    def toggle_active(self, player_id: str) -> RosterPlayer:
        player = self.get_player(player_id)
        return self.update_player(player_id, is_active=not player.is_active)

    def delete_player(self, player_id: str) -> None:
        self.backend.delete_player(player_id)
        logger.info("Deleted player %s", player_id)

    def snapshot_for_match(self) -> List[MatchPlayer]:
        """Copy the active roster into per-match entries with zero goals."""
        return [
            MatchPlayer(
                id=p.id,
                name=p.name,
                number=p.number,
                career_goals=p.total_goals,
            )
            for p in self.active_players()
        ]

    def leaderboard(self, limit: int = LEADERBOARD_SIZE) -> List[RosterPlayer]:
        """Players with career goals, most goals first."""
        scorers = [p for p in self.list_players() if p.total_goals > 0]
        scorers.sort(key=lambda p: p.total_goals, reverse=True)
        return scorers[:limit]

    def top_scorers(self) -> List[RosterPlayer]:
        return self.leaderboard(TOP_SCORERS_SIZE)

    def _check(self, name: Optional[str], number: Optional[object]) -> None:
        errors = self.validator.validate(name, number)
        if errors:
            raise RosterValidationError(f"Player validation failed: {'; '.join(errors)}")
