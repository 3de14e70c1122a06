"""Result card building and export for the Futsal Scoresheet."""

from __future__ import annotations

import json
import logging
import os
from typing import Optional, Protocol

from ..exceptions import ResultCardExportError
from ..models import MatchLedger, ResultCard, Team
from ..utils import now_ts

logger = logging.getLogger(__name__)


class CardExportInterface(Protocol):
    """Interface for result card export - supports ISP."""

    def export_to_json(self, card: ResultCard) -> str:
        ...

    def export_to_text(self, card: ResultCard) -> str:
        ...


class ResultCardExporter:
    """Serializes result cards into shareable documents."""

    def export_to_json(self, card: ResultCard) -> str:
        return json.dumps(
            {
                "home_team": card.home_team,
                "away_team": card.away_team,
                "home_score": card.home_score,
                "away_score": card.away_score,
                "match_date": card.match_date,
                "team_color": card.team_color,
                "photo": card.photo,
                "scorers": [{"name": name, "goals": goals} for name, goals in card.scorers],
                "scorer_summary": card.scorer_summary,
            },
            ensure_ascii=False,
            indent=2,
        )

    def export_to_text(self, card: ResultCard) -> str:
        lines = [card.match_date, card.headline]
        if card.scorer_summary:
            lines.append(f"Goals: {card.scorer_summary}")
        return "\n".join(lines) + "\n"


class ResultCardService:
    """
    Build result cards from a ledger and write them out for sharing.

    Export failures are raised as :class:`ResultCardExportError`; they never
    change the ledger or anything stored by the backend.
    """

    FORMATS = ("json", "txt")

    def __init__(self, exporter: Optional[CardExportInterface] = None) -> None:
        self.exporter = exporter or ResultCardExporter()

    def build(self, ledger: MatchLedger, team: Team) -> ResultCard:
        """Snapshot a finalized or in-progress ledger into a card."""
        return ResultCard(
            home_team=ledger.home_team,
            away_team=ledger.away_team,
            home_score=ledger.home_score,
            away_score=ledger.away_score,
            match_date=ledger.match_date,
            team_color=team.color,
            photo=ledger.photo,
            scorers=[(p.name, p.goals) for p in ledger.scorers()],
        )

    def render(self, card: ResultCard, fmt: str = "json") -> str:
        if fmt not in self.FORMATS:
            raise ResultCardExportError(f"Unsupported card format: {fmt}")
        try:
            if fmt == "json":
                return self.exporter.export_to_json(card)
            return self.exporter.export_to_text(card)
        except (TypeError, ValueError) as e:
            raise ResultCardExportError(f"Could not render result card: {e}") from e

    def write_card(self, card: ResultCard, directory: str, fmt: str = "json") -> str:
        """
        Write the card to ``directory`` as ``match-result-<ms>.<ext>``.

        Returns:
            Path of the written file

        Raises:
            ResultCardExportError: If rendering or writing fails
        """
        content = self.render(card, fmt)
        file_path = os.path.join(directory, f"match-result-{int(now_ts() * 1000)}.{fmt}")
        try:
            os.makedirs(directory, exist_ok=True)
            with open(file_path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            logger.error("Result card export to %s failed: %s", file_path, e)
            raise ResultCardExportError(f"Could not write result card: {e}") from e
        logger.info("Result card written to %s", file_path)
        return file_path
