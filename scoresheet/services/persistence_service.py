"""
Persistence service for the Futsal Scoresheet application.

This module handles saving and loading an in-progress match ledger to/from
JSON files, and provides a backend that keeps roster and match data in a
single JSON file for offline use.
"""
import copy
import datetime
import itertools
import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from .backend import InMemoryBackend
from ..exceptions import BackendError, LedgerFileError
from ..models import MatchLedger

logger = logging.getLogger(__name__)

AUTOSAVE_PREFIX = "match_autosave_"


class PersistenceService:
    """
    Service for persisting an in-progress match ledger to JSON files.

    Saving lets a match survive a server restart; the clock value is stored
    with the ledger and resumes paused after loading.
    """

    @staticmethod
    def save_ledger_to_file(ledger: MatchLedger, file_path: str) -> None:
        """
        Save a match ledger to a JSON file.

        Args:
            ledger: The ledger to save
            file_path: Path where to save the file

        Raises:
            OSError: If the file cannot be written
        """
        directory = os.path.dirname(file_path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(ledger.to_json(), f, indent=2, ensure_ascii=False)

    @staticmethod
    def load_ledger_from_file(file_path: str) -> MatchLedger:
        """
        Load a match ledger from a JSON file.

        Args:
            file_path: Path to the JSON file to load

        Returns:
            MatchLedger instance loaded from file

        Raises:
            FileNotFoundError: If file doesn't exist
            LedgerFileError: If the file is not a saved match ledger
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Match file not found: {file_path}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise TypeError(f"expected an object, got {type(data).__name__}")
            return MatchLedger.from_json(data)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError,
                KeyError, ValueError, TypeError, AttributeError) as e:
            raise LedgerFileError(f"Not a saved match: {os.path.basename(file_path)} ({e})") from e

    @staticmethod
    def auto_save(ledger: MatchLedger, auto_save_dir: str = "autosave") -> Optional[str]:
        """
        Automatically save a ledger with a timestamped file name.

        Args:
            ledger: Ledger to save
            auto_save_dir: Directory for auto-save files

        Returns:
            Path to saved file, or None if save failed
        """
        timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        file_path = os.path.join(auto_save_dir, f"{AUTOSAVE_PREFIX}{timestamp}.json")
        try:
            PersistenceService.save_ledger_to_file(ledger, file_path)
        except OSError:
            # Auto-save should not crash the application
            logger.warning("Auto-save to %s failed", file_path, exc_info=True)
            return None
        return file_path

    @staticmethod
    def list_saves(save_dir: str, limit: int = 10) -> List[Tuple[str, float]]:
        """
        Saved matches in ``save_dir``, newest first.

        Returns:
            ``(file name, modification time)`` pairs
        """
        try:
            entries = [
                (entry.name, entry.stat().st_mtime)
                for entry in os.scandir(save_dir)
                if entry.is_file() and entry.name.endswith(".json")
            ]
        except OSError:
            return []
        entries.sort(key=lambda item: item[1], reverse=True)
        return entries[:limit]

    @staticmethod
    def save_path(save_dir: str, file_name: str) -> str:
        """
        Resolve a saved match by bare file name inside ``save_dir``.

        Raises:
            LedgerFileError: If the name is empty or points outside ``save_dir``
        """
        name = file_name.strip() if isinstance(file_name, str) else ""
        if (not name or name in (".", "..") or os.path.basename(name) != name
                or "/" in name or "\\" in name):
            raise LedgerFileError(f"Invalid save file name: {file_name!r}")
        return os.path.join(save_dir, name)


class JsonFileBackend(InMemoryBackend):
    """
    Backend that mirrors the in-memory tables to one JSON file.

    The file is read once on construction and rewritten after every
    mutation. A mutation whose write fails is rolled back in memory, so the
    tables always match the last file written.
    """

    def __init__(self, file_path: str) -> None:
        super().__init__()
        self.file_path = file_path
        if os.path.exists(file_path):
            self._load()
        self._committed = self._tables()

    def _load(self) -> None:
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise BackendError(f"Cannot read data file {self.file_path}: {e}") from e

        self.players = {str(row["id"]): row for row in data.get("players", [])}
        self.matches = {str(row["id"]): row for row in data.get("matches", [])}
        self.match_scorers = list(data.get("match_scorers", []))
        self.team = data.get("team")

        ids = [int(k) for k in itertools.chain(self.players, self.matches) if k.isdigit()]
        if self.team and str(self.team.get("id", "")).isdigit():
            ids.append(int(self.team["id"]))
        self._ids = itertools.count(max(ids, default=0) + 1)
        logger.info(
            "Loaded %d players and %d matches from %s",
            len(self.players), len(self.matches), self.file_path,
        )

    def _tables(self) -> Dict[str, Any]:
        return copy.deepcopy({
            "players": self.players,
            "matches": self.matches,
            "match_scorers": self.match_scorers,
            "team": self.team,
        })

    def _changed(self) -> None:
        tables = self._tables()
        directory = os.path.dirname(self.file_path)
        try:
            if directory and not os.path.exists(directory):
                os.makedirs(directory)
            with open(self.file_path, "w", encoding="utf-8") as f:
                json.dump({
                    "players": list(tables["players"].values()),
                    "matches": list(tables["matches"].values()),
                    "match_scorers": tables["match_scorers"],
                    "team": tables["team"],
                }, f, indent=2, ensure_ascii=False)
        except OSError as e:
            self._rollback()
            raise BackendError(f"Cannot write data file {self.file_path}: {e}") from e
        self._committed = tables

    def _rollback(self) -> None:
        logger.warning("Write to %s failed, discarding the unsaved change", self.file_path)
        tables = copy.deepcopy(self._committed)
        self.players = tables["players"]
        self.matches = tables["matches"]
        self.match_scorers = tables["match_scorers"]
        self.team = tables["team"]
