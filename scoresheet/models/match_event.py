"""
Match event model for the Futsal Scoresheet application.

Events are the discrete, timestamped occurrences recorded during live play.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class EventKind(Enum):
    """Kinds of event that can be recorded on a match ledger."""
    GOAL = "goal"
    FOUL = "foul"
    SUBSTITUTION = "substitution"


class Side(Enum):
    """Which team an event or score belongs to."""
    HOME = "home"
    AWAY = "away"


@dataclass(frozen=True)
class MatchEvent:
    """
    A single recorded event.

    Attributes:
        id: Identifier, strictly increasing within one ledger
        kind: Goal, foul or substitution
        side: Home or away
        timestamp: Elapsed match clock when recorded, as ``mm:ss``
        player_id: Optional roster reference when attribution is known
    """
    id: int
    kind: EventKind
    side: Side
    timestamp: str
    player_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "side": self.side.value,
            "timestamp": self.timestamp,
            "player_id": self.player_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchEvent":
        """Create from dictionary for JSON deserialization."""
        return cls(
            id=int(data["id"]),
            kind=EventKind(data["kind"]),
            side=Side(data["side"]),
            timestamp=data.get("timestamp", "00:00"),
            player_id=data.get("player_id"),
        )
