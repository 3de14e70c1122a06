"""Team profile service for the Futsal Scoresheet application."""

import logging
import re
from typing import Optional

from .backend import BackendClient
from ..exceptions import TeamValidationError
from ..models import Team
from ..utils import DEFAULT_TEAM_NAME

logger = logging.getLogger(__name__)

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


class TeamService:
    """Reads and updates the single team profile."""

    def __init__(self, backend: BackendClient):
        self.backend = backend

    def get_team(self) -> Team:
        """Return the stored profile, or the default one if none exists."""
        return Team.from_dict(self.backend.get_team())

    def update_team(self, name: Optional[str] = None, color: Optional[str] = None) -> Team:
        """
        Create or update the team profile.

        Args:
            name: New team name; blank falls back to the default name
            color: New team color as ``#rrggbb``

        Raises:
            TeamValidationError: If the color is not a hex color
        """
        current = self.get_team()
        new_name = current.name if name is None else (name.strip() or DEFAULT_TEAM_NAME)
        new_color = current.color if color is None else color.strip()
        if not HEX_COLOR.match(new_color):
            raise TeamValidationError(f"Invalid team color: {color!r}")

        row = self.backend.save_team(new_name, new_color.lower())
        logger.info("Team profile saved: %s (%s)", new_name, new_color)
        return Team.from_dict(row)
