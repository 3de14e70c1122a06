"""
Backend collaborator contract for the Futsal Scoresheet.

The application keeps players, matches and the team profile in a hosted
relational store. Services depend on the :class:`BackendClient` protocol
only, so any of the concrete clients (in-memory, JSON file, REST) can be
injected.
"""
from __future__ import annotations

import copy
import itertools
import logging
from typing import Any, Dict, List, Optional, Protocol

from ..exceptions import BackendError, UnknownPlayerError
from ..utils import now_iso

logger = logging.getLogger(__name__)


class BackendClient(Protocol):
    """Query/mutation interface of the persistence backend - supports DIP."""

    def list_players(self) -> List[Dict[str, Any]]:
        """Return all player rows ordered by shirt number."""
        ...

    def get_player(self, player_id: str) -> Optional[Dict[str, Any]]:
        ...

    def create_player(self, name: str, number: int) -> Dict[str, Any]:
        ...

    def update_player(self, player_id: str, **fields: Any) -> Dict[str, Any]:
        ...

    def delete_player(self, player_id: str) -> None:
        ...

    def list_matches(self) -> List[Dict[str, Any]]:
        """Return all match rows, newest match date first."""
        ...

    def create_match(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a match and its scorer rows; reject unknown player ids."""
        ...

    def delete_match(self, match_id: str) -> None:
        ...

    def list_match_scorers(self, match_id: str) -> List[Dict[str, Any]]:
        ...

    def increment_player_goals(self, player_id: str, delta: int) -> None:
        """Add ``delta`` to a player's stored career total."""
        ...

    def decrement_player_goals(self, player_id: str, delta: int) -> None:
        """Subtract ``delta`` from a player's career total, floored at zero."""
        ...

    def get_team(self) -> Optional[Dict[str, Any]]:
        ...

    def save_team(self, name: str, color: str) -> Dict[str, Any]:
        ...


class InMemoryBackend:
    """
    Backend held entirely in process memory.

    Used for tests and local development. Rows are stored as plain
    dictionaries shaped like the hosted tables and copies are handed out, so
    callers never share mutable state with the store.
    """

    def __init__(self) -> None:
        self.players: Dict[str, Dict[str, Any]] = {}
        self.matches: Dict[str, Dict[str, Any]] = {}
        self.match_scorers: List[Dict[str, Any]] = []
        self.team: Optional[Dict[str, Any]] = None
        self._ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------
    def list_players(self) -> List[Dict[str, Any]]:
        rows = sorted(self.players.values(), key=lambda row: row["number"])
        return copy.deepcopy(rows)

    def get_player(self, player_id: str) -> Optional[Dict[str, Any]]:
        row = self.players.get(str(player_id))
        return copy.deepcopy(row) if row else None

    def create_player(self, name: str, number: int) -> Dict[str, Any]:
        row = {
            "id": self._new_id(),
            "name": name,
            "number": int(number),
            "is_active": True,
            "total_goals": 0,
            "created_at": now_iso(),
        }
        self.players[row["id"]] = row
        self._changed()
        return copy.deepcopy(row)

    def update_player(self, player_id: str, **fields: Any) -> Dict[str, Any]:
        row = self._require_player(player_id)
        for key in ("name", "number", "is_active"):
            if key in fields and fields[key] is not None:
                row[key] = fields[key]
        self._changed()
        return copy.deepcopy(row)

    def delete_player(self, player_id: str) -> None:
        self._require_player(player_id)
        del self.players[str(player_id)]
        self.match_scorers = [
            s for s in self.match_scorers if s["player_id"] != str(player_id)
        ]
        self._changed()

    def increment_player_goals(self, player_id: str, delta: int) -> None:
        row = self._require_player(player_id)
        row["total_goals"] = row["total_goals"] + int(delta)
        self._changed()

    def decrement_player_goals(self, player_id: str, delta: int) -> None:
        row = self._require_player(player_id)
        row["total_goals"] = max(0, row["total_goals"] - int(delta))
        self._changed()

    # ------------------------------------------------------------------
    # Matches
    # ------------------------------------------------------------------
    def list_matches(self) -> List[Dict[str, Any]]:
        rows = sorted(
            self.matches.values(),
            key=lambda row: (row["match_date"], row["created_at"]),
            reverse=True,
        )
        return copy.deepcopy(rows)

    def create_match(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        scorers = [s for s in payload.get("scorers", []) if int(s["goals"]) > 0]
        unknown = [s["player_id"] for s in scorers if str(s["player_id"]) not in self.players]
        if unknown:
            raise UnknownPlayerError(f"Unknown player ids: {', '.join(map(str, unknown))}")

        row = {
            "id": self._new_id(),
            "self_score": int(payload["home_score"]),
            "opponent_score": int(payload["away_score"]),
            "opponent_name": payload["opponent_name"],
            "match_date": payload.get("match_date") or now_iso(),
            "duration_seconds": int(payload.get("duration_seconds") or 0),
            "photo_url": payload.get("photo_url"),
            "created_at": now_iso(),
        }
        self.matches[row["id"]] = row
        for scorer in scorers:
            self.match_scorers.append({
                "match_id": row["id"],
                "player_id": str(scorer["player_id"]),
                "goals": int(scorer["goals"]),
            })
        self._changed()
        return copy.deepcopy(row)

    def delete_match(self, match_id: str) -> None:
        if str(match_id) not in self.matches:
            raise BackendError(f"Match {match_id} not found")
        del self.matches[str(match_id)]
        self.match_scorers = [
            s for s in self.match_scorers if s["match_id"] != str(match_id)
        ]
        self._changed()

    def list_match_scorers(self, match_id: str) -> List[Dict[str, Any]]:
        rows = []
        for scorer in self.match_scorers:
            if scorer["match_id"] != str(match_id):
                continue
            row = dict(scorer)
            player = self.players.get(scorer["player_id"])
            row["player"] = copy.deepcopy(player) if player else None
            rows.append(row)
        return rows

    # ------------------------------------------------------------------
    # Team
    # ------------------------------------------------------------------
    def get_team(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self.team)

    def save_team(self, name: str, color: str) -> Dict[str, Any]:
        if self.team is None:
            self.team = {"id": self._new_id(), "created_at": now_iso()}
        self.team.update({"name": name, "color": color, "updated_at": now_iso()})
        self._changed()
        return copy.deepcopy(self.team)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _new_id(self) -> str:
        return str(next(self._ids))

    def _require_player(self, player_id: str) -> Dict[str, Any]:
        row = self.players.get(str(player_id))
        if row is None:
            raise UnknownPlayerError(f"Player {player_id} not found")
        return row

    def _changed(self) -> None:
        """Hook called after every mutation; file-backed stores save here."""
