"""
REST backend for the Futsal Scoresheet application.

Talks to a hosted Supabase project through its PostgREST interface. Tables
``players``, ``matches``, ``match_scorers`` and ``teams`` are expected, along
with the ``increment_player_goals`` and ``decrement_player_goals`` RPCs that
apply career-goal deltas on the server side.
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from ..exceptions import BackendError, UnknownPlayerError
from ..utils import now_iso

logger = logging.getLogger(__name__)

# PostgreSQL foreign key violation
FOREIGN_KEY_VIOLATION = "23503"


class RestBackend:
    """Backend client for a Supabase REST endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Project URL, e.g. ``https://xyz.supabase.co``
            api_key: Anon or service key sent with every request
            timeout: Per-request timeout in seconds
            session: Optional preconfigured requests session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        })

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------
    def list_players(self) -> List[Dict[str, Any]]:
        return self._request("GET", "players", params={"select": "*", "order": "number.asc"})

    def get_player(self, player_id: str) -> Optional[Dict[str, Any]]:
        rows = self._request("GET", "players", params={"select": "*", "id": f"eq.{player_id}"})
        return rows[0] if rows else None

    def create_player(self, name: str, number: int) -> Dict[str, Any]:
        rows = self._request("POST", "players", json={
            "name": name,
            "number": int(number),
            "is_active": True,
            "total_goals": 0,
        })
        return self._single(rows, "players")

    def update_player(self, player_id: str, **fields: Any) -> Dict[str, Any]:
        updates = {
            k: v for k, v in fields.items()
            if k in ("name", "number", "is_active") and v is not None
        }
        rows = self._request("PATCH", "players", params={"id": f"eq.{player_id}"}, json=updates)
        if not rows:
            raise UnknownPlayerError(f"Player {player_id} not found")
        return rows[0]

    def delete_player(self, player_id: str) -> None:
        self._request("DELETE", "players", params={"id": f"eq.{player_id}"})

    def increment_player_goals(self, player_id: str, delta: int) -> None:
        self._request("POST", "rpc/increment_player_goals", json={
            "player_id_param": str(player_id),
            "goals_to_add": int(delta),
        })

    def decrement_player_goals(self, player_id: str, delta: int) -> None:
        self._request("POST", "rpc/decrement_player_goals", json={
            "player_id_param": str(player_id),
            "goals_to_subtract": int(delta),
        })

    # ------------------------------------------------------------------
    # Matches
    # ------------------------------------------------------------------
    def list_matches(self) -> List[Dict[str, Any]]:
        return self._request("GET", "matches", params={"select": "*", "order": "match_date.desc"})

    def create_match(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Insert the match row, then its scorer rows.

        When the scorer insert fails the match row is deleted again so the
        call either stores both or neither.
        """
        rows = self._request("POST", "matches", json={
            "self_score": int(payload["home_score"]),
            "opponent_score": int(payload["away_score"]),
            "opponent_name": payload["opponent_name"],
            "match_date": payload.get("match_date") or now_iso(),
            "duration_seconds": int(payload.get("duration_seconds") or 0),
            "photo_url": payload.get("photo_url"),
        })
        match = self._single(rows, "matches")

        scorers = [
            {"match_id": match["id"], "player_id": str(s["player_id"]), "goals": int(s["goals"])}
            for s in payload.get("scorers", [])
            if int(s["goals"]) > 0
        ]
        if scorers:
            try:
                self._request("POST", "match_scorers", json=scorers)
            except BackendError:
                logger.warning("Scorer insert failed, removing match %s", match["id"])
                self._request("DELETE", "matches", params={"id": f"eq.{match['id']}"})
                raise
        return match

    def delete_match(self, match_id: str) -> None:
        # scorer rows go with the match (cascade)
        self._request("DELETE", "matches", params={"id": f"eq.{match_id}"})

    def list_match_scorers(self, match_id: str) -> List[Dict[str, Any]]:
        return self._request("GET", "match_scorers", params={
            "select": "*,player:players(*)",
            "match_id": f"eq.{match_id}",
        })

    # ------------------------------------------------------------------
    # Team
    # ------------------------------------------------------------------
    def get_team(self) -> Optional[Dict[str, Any]]:
        rows = self._request("GET", "teams", params={"select": "*", "limit": "1"})
        return rows[0] if rows else None

    def save_team(self, name: str, color: str) -> Dict[str, Any]:
        existing = self.get_team()
        if existing:
            rows = self._request(
                "PATCH", "teams",
                params={"id": f"eq.{existing['id']}"},
                json={"name": name, "color": color, "updated_at": now_iso()},
            )
        else:
            rows = self._request("POST", "teams", json={"name": name, "color": color})
        return self._single(rows, "teams")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}/rest/v1/{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise BackendError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            detail = self._error_detail(response)
            logger.error("%s %s returned %d: %s", method, path, response.status_code, detail)
            if detail.get("code") == FOREIGN_KEY_VIOLATION:
                raise UnknownPlayerError(detail.get("message") or "Unknown player reference")
            raise BackendError(
                f"{method} {path} returned {response.status_code}: "
                f"{detail.get('message') or response.text}"
            )

        if response.status_code == 204 or not response.content:
            return []
        return response.json()

    @staticmethod
    def _error_detail(response: requests.Response) -> Dict[str, Any]:
        try:
            detail = response.json()
        except ValueError:
            return {}
        return detail if isinstance(detail, dict) else {}

    @staticmethod
    def _single(rows: Any, table: str) -> Dict[str, Any]:
        if not rows:
            raise BackendError(f"Insert into {table} returned no row")
        return rows[0]
