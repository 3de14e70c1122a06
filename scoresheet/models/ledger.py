"""
MatchLedger model for the Futsal Scoresheet application.

This module contains the MatchLedger dataclass which holds the complete
in-memory state of one match: scores, fouls, the event log, and the
per-player goal tally used to attribute goals after the final whistle.

Scores and fouls are moved by two kinds of mutator. ``record_event`` and
``undo_last_event`` keep them in step with the event log during live play.
``adjust_score`` corrects the score directly after the match and does not
touch the log, so the two can disagree once a correction has been made.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .match_event import EventKind, MatchEvent, Side
from ..exceptions import UnknownPlayerError
from ..utils import (
    DEFAULT_OPPONENT_NAME, DEFAULT_TEAM_NAME, FOUL_WARNING_THRESHOLD,
    fmt_mmss, today_iso,
)

logger = logging.getLogger(__name__)


@dataclass
class MatchPlayer:
    """
    A roster entry copied into a match.

    Attributes:
        id: Roster identifier
        name: Display name
        number: Shirt number
        career_goals: Career total at the time the match was set up
        goals: Goals attributed to this player in this match
    """
    id: str
    name: str
    number: int = 0
    career_goals: int = 0
    goals: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "number": self.number,
            "career_goals": self.career_goals,
            "goals": self.goals,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchPlayer":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            number=int(data.get("number") or 0),
            career_goals=int(data.get("career_goals") or 0),
            goals=max(0, int(data.get("goals") or 0)),
        )


@dataclass
class MatchLedger:
    """
    Represents the complete state of one match in progress.

    Attributes:
        home_team: Our team name
        away_team: Opponent name
        home_score: Home goals
        away_score: Away goals
        home_fouls: Accumulated home fouls
        away_fouls: Accumulated away fouls
        events: Recorded events, most recent first
        players: Roster snapshot with per-match goal counters
        elapsed_seconds: Match clock, used to stamp events
        match_date: ISO date the match was played
        photo: Optional team photo reference for the result card
    """
    home_team: str = DEFAULT_TEAM_NAME
    away_team: str = DEFAULT_OPPONENT_NAME
    home_score: int = 0
    away_score: int = 0
    home_fouls: int = 0
    away_fouls: int = 0
    events: List[MatchEvent] = field(default_factory=list)
    players: List[MatchPlayer] = field(default_factory=list)
    elapsed_seconds: int = 0
    match_date: str = field(default_factory=today_iso)
    photo: Optional[str] = None
    _next_event_id: int = field(default=1, repr=False)

    # ------------------------------------------------------------------
    # Live play
    # ------------------------------------------------------------------
    def record_event(
        self,
        kind: EventKind,
        side: Side,
        player_id: Optional[str] = None,
    ) -> MatchEvent:
        """Append an event stamped with the current clock and apply its counter."""

        event = MatchEvent(
            id=self._next_event_id,
            kind=kind,
            side=side,
            timestamp=fmt_mmss(self.elapsed_seconds),
            player_id=player_id,
        )
        self._next_event_id += 1
        self.events.insert(0, event)
        self._apply(event, +1)
        logger.debug("Recorded %s for %s at %s", kind.value, side.value, event.timestamp)
        return event

    def undo_last_event(self) -> Optional[MatchEvent]:
        """Remove the most recent event and reverse its counter.

        Returns:
            The removed event, or None when there was nothing to undo
        """
        if not self.events:
            return None

        event = self.events.pop(0)
        self._apply(event, -1)
        logger.debug("Undid %s for %s (event %d)", event.kind.value, event.side.value, event.id)
        return event

    def set_opponent_name(self, name: str) -> str:
        """Rename the opponent; blank input keeps the current name."""
        cleaned = (name or "").strip()
        if cleaned:
            self.away_team = cleaned
        return self.away_team

    # ------------------------------------------------------------------
    # Post-match correction
    # ------------------------------------------------------------------
    def adjust_score(self, side: Side, delta: int) -> int:
        """Correct a score directly. No event is appended."""

        if side is Side.HOME:
            self.home_score = max(0, self.home_score + int(delta))
            return self.home_score
        self.away_score = max(0, self.away_score + int(delta))
        return self.away_score

    def adjust_player_goals(self, player_id: str, delta: int) -> int:
        """Change the goals credited to one player in this match.

        Raises:
            UnknownPlayerError: If the player is not in this match
        """
        player = self.get_player(player_id)
        player.goals = max(0, player.goals + int(delta))
        return player.goals

    def get_player(self, player_id: str) -> MatchPlayer:
        for player in self.players:
            if player.id == str(player_id):
                return player
        raise UnknownPlayerError(f"Player {player_id} is not part of this match")

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------
    @property
    def assigned_goals(self) -> int:
        return sum(p.goals for p in self.players)

    @property
    def goals_to_assign(self) -> int:
        """Home goals not yet credited to a player (negative when over-assigned)."""
        return self.home_score - self.assigned_goals

    @property
    def is_reconciled(self) -> bool:
        return self.goals_to_assign == 0

    def foul_warning(self, side: Side) -> bool:
        fouls = self.home_fouls if side is Side.HOME else self.away_fouls
        return fouls >= FOUL_WARNING_THRESHOLD

    def scorers(self) -> List[MatchPlayer]:
        """Players with at least one goal, in roster order."""
        return [p for p in self.players if p.goals > 0]

    def build_match_payload(self) -> Dict[str, Any]:
        """Summary of the match in the shape the backend stores."""
        return {
            "opponent_name": self.away_team,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "match_date": self.match_date,
            "duration_seconds": self.elapsed_seconds,
            "photo_url": self.photo,
            "scorers": [
                {"player_id": p.id, "goals": p.goals} for p in self.scorers()
            ],
        }

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def to_json(self) -> dict:
        """
        Convert MatchLedger to JSON-serializable dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        return {
            "home_team": self.home_team,
            "away_team": self.away_team,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "home_fouls": self.home_fouls,
            "away_fouls": self.away_fouls,
            "events": [e.to_dict() for e in self.events],
            "players": [p.to_dict() for p in self.players],
            "elapsed_seconds": self.elapsed_seconds,
            "match_date": self.match_date,
            "photo": self.photo,
            "next_event_id": self._next_event_id,
        }

    @staticmethod
    def from_json(data: dict) -> "MatchLedger":
        """
        Create MatchLedger from JSON dictionary.

        Args:
            data: Dictionary with ledger data

        Returns:
            New MatchLedger instance
        """
        ledger = MatchLedger(
            home_team=data.get("home_team") or DEFAULT_TEAM_NAME,
            away_team=data.get("away_team") or DEFAULT_OPPONENT_NAME,
            home_score=max(0, int(data.get("home_score", 0))),
            away_score=max(0, int(data.get("away_score", 0))),
            home_fouls=max(0, int(data.get("home_fouls", 0))),
            away_fouls=max(0, int(data.get("away_fouls", 0))),
            events=[MatchEvent.from_dict(e) for e in data.get("events", [])],
            players=[MatchPlayer.from_dict(p) for p in data.get("players", [])],
            elapsed_seconds=max(0, int(data.get("elapsed_seconds", 0))),
            match_date=data.get("match_date") or today_iso(),
            photo=data.get("photo"),
        )
        highest = max((e.id for e in ledger.events), default=0)
        ledger._next_event_id = max(int(data.get("next_event_id", 1)), highest + 1)
        return ledger

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _apply(self, event: MatchEvent, step: int) -> None:
        if event.kind is EventKind.GOAL:
            if event.side is Side.HOME:
                self.home_score = max(0, self.home_score + step)
            else:
                self.away_score = max(0, self.away_score + step)
        elif event.kind is EventKind.FOUL:
            if event.side is Side.HOME:
                self.home_fouls = max(0, self.home_fouls + step)
            else:
                self.away_fouls = max(0, self.away_fouls + step)
