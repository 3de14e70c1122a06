"""
Match session service for the Futsal Scoresheet application.

A session walks one match through its phases::

    idle -> setup -> live <-> review -> idle

It owns the ledger of the match being played and the clock ticker, and it
performs the final save against the backend. Every public method takes the
session lock, which the clock ticker shares, so ticks never interleave with
request handlers.
"""
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .backend import BackendClient
from .history_service import MatchHistoryService
from .persistence_service import PersistenceService
from .roster_service import RosterService
from .team_service import TeamService
from .timer_service import ClockTicker, MatchClock
from ..exceptions import BackendError, FinalizeError, PhaseError, UnknownPlayerError
from ..models import EventKind, MatchEvent, MatchLedger, MatchRecord, Side
from ..utils import DEFAULT_OPPONENT_NAME, TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class MatchPhase(Enum):
    """Phases a match session moves through."""
    IDLE = "idle"
    SETUP = "setup"
    LIVE = "live"
    REVIEW = "review"


@dataclass
class FinalizeProgress:
    """
    How far a final save got.

    Attributes:
        match: Stored match record once the match insert succeeded
        scorers: Scorer lines captured when the match was inserted
        applied: Player ids whose career totals have been incremented
    """
    match: Optional[MatchRecord] = None
    scorers: List[Dict[str, Any]] = field(default_factory=list)
    applied: List[str] = field(default_factory=list)

    @property
    def match_id(self) -> Optional[str]:
        return self.match.id if self.match else None

    @property
    def pending(self) -> List[Dict[str, Any]]:
        return [s for s in self.scorers if str(s["player_id"]) not in self.applied]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "match_id": self.match_id,
            "applied": list(self.applied),
            "pending": [str(s["player_id"]) for s in self.pending],
        }


class MatchSession:
    """
    Holds the one match being scored and enforces the phase rules.

    Uses dependency injection: the backend and the services built on it are
    passed in, so tests can run against an in-memory backend.
    """

    def __init__(
        self,
        backend: BackendClient,
        roster_service: Optional[RosterService] = None,
        team_service: Optional[TeamService] = None,
        history_service: Optional[MatchHistoryService] = None,
        tick_interval: float = TICK_INTERVAL_SECONDS,
    ) -> None:
        self.backend = backend
        self.roster_service = roster_service or RosterService(backend)
        self.team_service = team_service or TeamService(backend)
        self.history_service = history_service or MatchHistoryService(backend)
        self.tick_interval = tick_interval

        self._lock = threading.RLock()
        self.phase = MatchPhase.IDLE
        self.ledger: Optional[MatchLedger] = None
        self.clock = MatchClock()
        self._ticker: Optional[ClockTicker] = None
        self._progress: Optional[FinalizeProgress] = None
        self._default_opponent: Optional[str] = None

    # ------------------------------------------------------------------
    # Phase transitions
    # ------------------------------------------------------------------
    def begin_setup(self) -> Dict[str, Any]:
        """Enter setup and return what the setup screen needs."""
        with self._lock:
            self._require(MatchPhase.IDLE, MatchPhase.SETUP)
            self.phase = MatchPhase.SETUP
            default = self.default_opponent()
            logger.info("Match setup started")
            return {
                "home_team": self.team_service.get_team().name,
                "default_opponent": default,
                "recent_opponents": self.history_service.recent_opponents(exclude=default),
            }

    def default_opponent(self) -> str:
        """Opponent pre-filled at setup: the last one used, else the default name."""
        if self._default_opponent is None:
            self._default_opponent = self.history_service.last_opponent() or DEFAULT_OPPONENT_NAME
        return self._default_opponent

    def start_match(self, opponent_name: str = "") -> MatchLedger:
        """
        Leave setup and start live play.

        The active roster is copied at this moment; later roster edits do not
        reach this match. A blank opponent name falls back to the default.
        """
        with self._lock:
            self._require(MatchPhase.SETUP)
            name = (opponent_name or "").strip() or self.default_opponent()
            team = self.team_service.get_team()
            players = self.roster_service.snapshot_for_match()

            self.ledger = MatchLedger(home_team=team.name, away_team=name, players=players)
            self.clock = MatchClock()
            self._progress = None
            self._default_opponent = name
            self.phase = MatchPhase.LIVE
            self._start_ticker()
            logger.info(
                "Match started: %s vs %s with %d players", team.name, name, len(players)
            )
            return self.ledger

    def show_review(self) -> None:
        """Switch to post-match review; the clock is paused."""
        with self._lock:
            self._require(MatchPhase.LIVE, MatchPhase.REVIEW)
            self._stop_ticker()
            self.clock.pause()
            self.phase = MatchPhase.REVIEW

    def show_live(self) -> None:
        """Switch back to live entry. The clock stays paused until started."""
        with self._lock:
            self._require(MatchPhase.LIVE, MatchPhase.REVIEW)
            self.phase = MatchPhase.LIVE
            self._start_ticker()

    def abandon(self) -> None:
        """Drop the match without saving. Not allowed during live play."""
        with self._lock:
            self._require(MatchPhase.SETUP, MatchPhase.REVIEW)
            if self._progress is not None and self._progress.match is not None:
                logger.warning(
                    "Abandoning match %s with %d career increments not applied",
                    self._progress.match_id, len(self._progress.pending),
                )
            self._discard()
            logger.info("Match abandoned")

    def finalize(self) -> MatchRecord:
        """
        Save the match and credit scorers' career totals, then end the session.

        The match row is inserted first; career increments follow one by
        one. A failure leaves the session in review with the ledger intact
        and raises :class:`FinalizeError`. Calling again resumes: the match
        is not inserted twice and increments already applied are skipped.

        Raises:
            PhaseError: If not in review (including after a successful save)
            FinalizeError: If the backend rejected or failed a request
        """
        with self._lock:
            self._require(MatchPhase.REVIEW)
            progress = self._progress or FinalizeProgress()
            self._progress = progress

            try:
                if progress.match is None:
                    payload = self.ledger.build_match_payload()
                    row = self.backend.create_match(payload)
                    progress.match = MatchRecord.from_dict(row)
                    progress.scorers = list(payload["scorers"])
                    logger.info("Stored match %s", progress.match_id)

                for scorer in progress.pending:
                    self.backend.increment_player_goals(scorer["player_id"], scorer["goals"])
                    progress.applied.append(str(scorer["player_id"]))
            except (BackendError, UnknownPlayerError) as e:
                logger.error("Saving match failed (%s): %s", progress.to_dict(), e)
                raise FinalizeError(f"Match was not fully saved: {e}", progress) from e

            record = progress.match
            self._discard()
            logger.info("Match %s finalized", record.id)
            return record

    # ------------------------------------------------------------------
    # Ledger operations
    # ------------------------------------------------------------------
    def record_event(self, kind: EventKind, side: Side, player_id: Optional[str] = None) -> MatchEvent:
        with self._lock:
            self._require(MatchPhase.LIVE)
            return self.ledger.record_event(kind, side, player_id)

    def undo_last_event(self) -> Optional[MatchEvent]:
        with self._lock:
            self._require(MatchPhase.LIVE)
            return self.ledger.undo_last_event()

    def rename_opponent(self, name: str) -> str:
        with self._lock:
            self._require(MatchPhase.LIVE, MatchPhase.REVIEW)
            self._require_unsaved()
            return self.ledger.set_opponent_name(name)

    def adjust_score(self, side: Side, delta: int) -> int:
        with self._lock:
            self._require(MatchPhase.REVIEW)
            self._require_unsaved()
            return self.ledger.adjust_score(side, delta)

    def adjust_player_goals(self, player_id: str, delta: int) -> int:
        with self._lock:
            self._require(MatchPhase.REVIEW)
            self._require_unsaved()
            return self.ledger.adjust_player_goals(player_id, delta)

    def set_photo(self, photo: Optional[str]) -> None:
        with self._lock:
            self._require(MatchPhase.REVIEW)
            self._require_unsaved()
            self.ledger.photo = photo or None

    # ------------------------------------------------------------------
    # Clock controls
    # ------------------------------------------------------------------
    def start_clock(self) -> None:
        with self._lock:
            self._require(MatchPhase.LIVE)
            self.clock.start()

    def pause_clock(self) -> None:
        with self._lock:
            self._require(MatchPhase.LIVE)
            self.clock.pause()

    def reset_clock(self) -> None:
        with self._lock:
            self._require(MatchPhase.LIVE)
            self.clock.reset()
            self.ledger.elapsed_seconds = 0

    def tick(self) -> None:
        """Advance the clock one step; called by the ticker thread."""
        with self._lock:
            if self.ledger is None or self.phase is not MatchPhase.LIVE:
                return
            self.ledger.elapsed_seconds = self.clock.tick()

    @property
    def ticker_active(self) -> bool:
        return self._ticker is not None and self._ticker.active

    # ------------------------------------------------------------------
    # Saving and resuming an unfinished match
    # ------------------------------------------------------------------
    def save_to_file(self, file_path: str) -> None:
        with self._lock:
            self._require(MatchPhase.LIVE, MatchPhase.REVIEW)
            PersistenceService.save_ledger_to_file(self.ledger, file_path)

    def autosave(self, directory: str) -> Optional[str]:
        """Save to a timestamped file in ``directory``; None if writing failed."""
        with self._lock:
            self._require(MatchPhase.LIVE, MatchPhase.REVIEW)
            return PersistenceService.auto_save(self.ledger, directory)

    def resume_from_file(self, file_path: str) -> MatchLedger:
        """Load a saved ledger and continue it in review with the clock paused."""
        with self._lock:
            self._require(MatchPhase.IDLE, MatchPhase.SETUP)
            self.ledger = PersistenceService.load_ledger_from_file(file_path)
            self.clock = MatchClock(self.ledger.elapsed_seconds)
            self._progress = None
            self._default_opponent = self.ledger.away_team
            self.phase = MatchPhase.REVIEW
            logger.info("Resumed match against %s from %s", self.ledger.away_team, file_path)
            return self.ledger

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------
    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the session for the UI."""
        with self._lock:
            data: Dict[str, Any] = {
                "phase": self.phase.value,
                "clock": {
                    "seconds": self.clock.seconds,
                    "display": self.clock.display,
                    "running": self.clock.running,
                },
                "match": None,
                "finalize": self._progress.to_dict() if self._progress else None,
            }
            ledger = self.ledger
            if ledger is not None:
                data["match"] = {
                    "home_team": ledger.home_team,
                    "away_team": ledger.away_team,
                    "home_score": ledger.home_score,
                    "away_score": ledger.away_score,
                    "home_fouls": ledger.home_fouls,
                    "away_fouls": ledger.away_fouls,
                    "home_foul_warning": ledger.foul_warning(Side.HOME),
                    "away_foul_warning": ledger.foul_warning(Side.AWAY),
                    "match_date": ledger.match_date,
                    "photo": ledger.photo,
                    "events": [e.to_dict() for e in ledger.events],
                    "players": [p.to_dict() for p in ledger.players],
                    "goals_to_assign": ledger.goals_to_assign,
                }
            return data

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require(self, *phases: MatchPhase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise PhaseError(f"Not allowed while {self.phase.value} (needs {allowed})")

    def _require_unsaved(self) -> None:
        if self._progress is not None and self._progress.match is not None:
            raise PhaseError(
                f"Match {self._progress.match_id} is already stored; retry the save instead"
            )

    def _start_ticker(self) -> None:
        if self._ticker is None:
            self._ticker = ClockTicker(self.tick, self.tick_interval, lock=self._lock)
        self._ticker.start()

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.stop()
            self._ticker = None

    def _discard(self) -> None:
        self._stop_ticker()
        self.ledger = None
        self.clock = MatchClock()
        self._progress = None
        self.phase = MatchPhase.IDLE
