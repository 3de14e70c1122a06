"""Match history helpers for the Futsal Scoresheet."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, List, Optional

from .backend import BackendClient
from ..models import MatchRecord, ScorerLine
from ..utils import RECENT_MATCHES_LIMIT, RECENT_OPPONENTS_LIMIT

logger = logging.getLogger(__name__)


class MatchHistoryService:
    """Queries over stored matches: listing, season record, opponents."""

    def __init__(self, backend: BackendClient) -> None:
        self.backend = backend

    def list_matches(self) -> List[MatchRecord]:
        """All stored matches, newest first."""
        return [MatchRecord.from_dict(row) for row in self.backend.list_matches()]

    def recent_matches(self, limit: int = RECENT_MATCHES_LIMIT) -> List[MatchRecord]:
        return self.list_matches()[:limit]

    def record(self, matches: Optional[List[MatchRecord]] = None) -> Dict[str, int]:
        """Win/draw/loss counts across ``matches`` (all stored matches by default)."""
        if matches is None:
            matches = self.list_matches()
        counts = Counter(m.outcome for m in matches)
        return {
            "wins": counts.get("W", 0),
            "draws": counts.get("D", 0),
            "losses": counts.get("L", 0),
        }

    def recent_opponents(
        self,
        exclude: Optional[str] = None,
        limit: int = RECENT_OPPONENTS_LIMIT,
    ) -> List[str]:
        """Distinct opponent names, most recently played first.

        Args:
            exclude: Name to leave out, usually the one already pre-filled
            limit: Maximum number of names returned
        """
        skip = (exclude or "").strip()
        seen = set()
        names: List[str] = []
        for match in self.list_matches():
            name = (match.opponent_name or "").strip()
            if not name or name == skip or name in seen:
                continue
            seen.add(name)
            names.append(name)
        return names[:limit]

    def last_opponent(self) -> Optional[str]:
        names = self.recent_opponents(limit=1)
        return names[0] if names else None

    def match_scorers(self, match_id: str) -> List[ScorerLine]:
        lines = []
        for row in self.backend.list_match_scorers(match_id):
            player = row.get("player") or {}
            lines.append(ScorerLine(
                match_id=str(row["match_id"]),
                player_id=str(row["player_id"]),
                goals=int(row["goals"]),
                player_name=player.get("name"),
            ))
        return lines

    def delete_match(self, match_id: str) -> None:
        """Delete a match and take its goals back off the scorers' career totals."""
        for line in self.match_scorers(match_id):
            self.backend.decrement_player_goals(line.player_id, line.goals)
        self.backend.delete_match(match_id)
        logger.info("Deleted match %s", match_id)
