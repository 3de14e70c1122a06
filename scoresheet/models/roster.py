"""
Roster, team and match record models for the Futsal Scoresheet.

These mirror the rows held by the persistence backend. The match ledger only
ever works on point-in-time copies of them.
"""
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional

from ..utils import DEFAULT_TEAM_NAME, DEFAULT_TEAM_COLOR


@dataclass
class RosterPlayer:
    """A roster entry with its cumulative career goal count."""
    id: str
    name: str
    number: int
    is_active: bool = True
    total_goals: int = 0
    created_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RosterPlayer":
        """Create from a backend row."""
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            number=int(data.get("number") or 0),
            is_active=bool(data.get("is_active", True)),
            total_goals=int(data.get("total_goals") or 0),
            created_at=data.get("created_at") or "",
        )


@dataclass
class Team:
    """The team profile shown on the home screen and result card."""
    id: str = ""
    name: str = DEFAULT_TEAM_NAME
    color: str = DEFAULT_TEAM_COLOR
    updated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Team":
        if not data:
            return cls()
        return cls(
            id=str(data.get("id") or ""),
            name=data.get("name") or DEFAULT_TEAM_NAME,
            color=data.get("color") or DEFAULT_TEAM_COLOR,
            updated_at=data.get("updated_at") or "",
        )


@dataclass
class MatchRecord:
    """A finalized match as stored by the backend."""
    id: str
    self_score: int
    opponent_score: int
    opponent_name: str
    match_date: str
    duration_seconds: int = 0
    photo_url: Optional[str] = None
    created_at: str = ""

    @property
    def outcome(self) -> str:
        """Single-letter result from the home team's point of view."""
        if self.self_score > self.opponent_score:
            return "W"
        if self.self_score == self.opponent_score:
            return "D"
        return "L"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["outcome"] = self.outcome
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchRecord":
        return cls(
            id=str(data["id"]),
            self_score=int(data.get("self_score") or 0),
            opponent_score=int(data.get("opponent_score") or 0),
            opponent_name=data.get("opponent_name") or "",
            match_date=data.get("match_date") or "",
            duration_seconds=int(data.get("duration_seconds") or 0),
            photo_url=data.get("photo_url"),
            created_at=data.get("created_at") or "",
        )


@dataclass
class ScorerLine:
    """Goals credited to one player in one stored match."""
    match_id: str
    player_id: str
    goals: int
    player_name: Optional[str] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
