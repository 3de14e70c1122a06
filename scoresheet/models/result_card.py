"""Dataclasses describing the shareable match result card."""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple


def scorer_summary(scorers: Iterable[Tuple[str, int]]) -> str:
    """Format scorers as ``"Name xN, Name2"``; single goals drop the count.

    Entries with no goals are skipped and the given order is kept.
    """
    parts = []
    for name, goals in scorers:
        if goals <= 0:
            continue
        parts.append(f"{name} x{goals}" if goals > 1 else name)
    return ", ".join(parts)


@dataclass
class ResultCard:
    """Snapshot of a match for the result card."""

    home_team: str
    away_team: str
    home_score: int
    away_score: int
    match_date: str
    team_color: str
    photo: Optional[str] = None
    scorers: List[Tuple[str, int]] = field(default_factory=list)

    @property
    def scorer_summary(self) -> str:
        return scorer_summary(self.scorers)

    @property
    def headline(self) -> str:
        return f"{self.home_team} {self.home_score} - {self.away_score} {self.away_team}"
