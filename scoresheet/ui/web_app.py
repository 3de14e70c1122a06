"""
Web application module for the Futsal Scoresheet.

This module contains the Flask web server exposing the match session, roster,
team profile, match history and result card as JSON API endpoints for the
mobile front end.
"""
import logging
import os
from typing import Any, Dict, Optional, Type

from flask import Flask, jsonify, request

from ..config import AppConfig
from ..exceptions import (
    BackendError, FinalizeError, LedgerFileError, PhaseError, ResultCardExportError,
    RosterValidationError, ScoresheetError, TeamValidationError,
    UnknownPlayerError,
)
from ..models import EventKind, Side
from ..services import BackendClient, PersistenceService, ServiceFactory
from ..utils import APP_TITLE, APP_VERSION, configure_logging

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    PhaseError: 409,
    UnknownPlayerError: 404,
    RosterValidationError: 400,
    TeamValidationError: 400,
    FinalizeError: 502,
    BackendError: 502,
    ResultCardExportError: 500,
    LedgerFileError: 400,
}


class RequestDataError(ScoresheetError):
    """Raised when a request body is missing a field or has a bad value."""


ERROR_STATUS[RequestDataError] = 400


class WebAppState:
    """
    State holder for the web application.

    Services are created by the factory so they all share one backend.
    """

    def __init__(self, config: AppConfig, backend: Optional[BackendClient] = None,
                 tick_interval: Optional[float] = None):
        self.config = config
        self.service_factory = ServiceFactory(config, backend=backend)
        self.roster_service = self.service_factory.create_roster_service()
        self.team_service = self.service_factory.create_team_service()
        self.history_service = self.service_factory.create_history_service()
        self.result_card_service = self.service_factory.create_result_card_service()
        self.session = self.service_factory.create_match_session(tick_interval)


def _body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _enum(enum_cls: Type, value: Any, field_name: str):
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise RequestDataError(f"'{field_name}' must be one of: {allowed}") from None


def _int(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise RequestDataError(f"'{field_name}' must be an integer") from None


def _str(value: Any, field_name: str) -> Optional[str]:
    """None passes through; anything else must already be text."""
    if value is None or isinstance(value, str):
        return value
    raise RequestDataError(f"'{field_name}' must be a string")


def _bool(value: Any, field_name: str) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    raise RequestDataError(f"'{field_name}' must be true or false")


def create_app(config: Optional[AppConfig] = None, backend: Optional[BackendClient] = None,
               tick_interval: Optional[float] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        config: Application settings; read from the environment when omitted
        backend: Backend to use instead of the one named in ``config``
        tick_interval: Clock tick period override, used by tests

    Returns:
        Configured Flask application instance
    """
    config = config or AppConfig.from_env()
    app = Flask(__name__)
    app_state = WebAppState(config, backend=backend, tick_interval=tick_interval)
    app.extensions["scoresheet"] = app_state
    session = app_state.session

    @app.errorhandler(ScoresheetError)
    def handle_scoresheet_error(error: ScoresheetError):
        status = next(
            (code for cls, code in ERROR_STATUS.items() if isinstance(error, cls)), 400
        )
        payload: Dict[str, Any] = {"success": False, "error": str(error)}
        if isinstance(error, FinalizeError) and error.progress is not None:
            payload["finalize"] = error.progress.to_dict()
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, error)
        return jsonify(payload), status

    @app.route("/")
    def index():
        return jsonify({"success": True, "app": APP_TITLE, "version": APP_VERSION})

    # ==================== Match session ==================== #

    @app.route("/api/state", methods=["GET"])
    def get_state():
        """Current phase, clock and ledger."""
        return jsonify({
            "success": True,
            "team": app_state.team_service.get_team().to_dict(),
            **session.snapshot(),
        })

    @app.route("/api/match/setup", methods=["POST"])
    def begin_setup():
        return jsonify({"success": True, **session.begin_setup()})

    @app.route("/api/match/start", methods=["POST"])
    def start_match():
        session.start_match(_str(_body().get("opponent_name"), "opponent_name") or "")
        return jsonify({"success": True, **session.snapshot()})

    @app.route("/api/match/review", methods=["POST"])
    def show_review():
        session.show_review()
        return jsonify({"success": True, **session.snapshot()})

    @app.route("/api/match/live", methods=["POST"])
    def show_live():
        session.show_live()
        return jsonify({"success": True, **session.snapshot()})

    @app.route("/api/match/abandon", methods=["POST"])
    def abandon_match():
        session.abandon()
        return jsonify({"success": True, "message": "Match discarded"})

    @app.route("/api/match/finalize", methods=["POST"])
    def finalize_match():
        record = session.finalize()
        return jsonify({"success": True, "match": record.to_dict()})

    @app.route("/api/match/opponent", methods=["POST"])
    def rename_opponent():
        name = session.rename_opponent(_str(_body().get("name"), "name") or "")
        return jsonify({"success": True, "away_team": name})

    @app.route("/api/match/events", methods=["POST"])
    def record_event():
        data = _body()
        event = session.record_event(
            _enum(EventKind, data.get("kind"), "kind"),
            _enum(Side, data.get("side"), "side"),
            data.get("player_id"),
        )
        return jsonify({"success": True, "event": event.to_dict(), **session.snapshot()})

    @app.route("/api/match/undo", methods=["POST"])
    def undo_event():
        event = session.undo_last_event()
        if event is None:
            return jsonify({"success": True, "message": "Nothing to undo", **session.snapshot()})
        return jsonify({"success": True, "undone": event.to_dict(), **session.snapshot()})

    @app.route("/api/match/score", methods=["POST"])
    def adjust_score():
        data = _body()
        score = session.adjust_score(
            _enum(Side, data.get("side"), "side"),
            _int(data.get("delta"), "delta"),
        )
        return jsonify({"success": True, "score": score, **session.snapshot()})

    @app.route("/api/match/players/<player_id>/goals", methods=["POST"])
    def adjust_player_goals(player_id: str):
        goals = session.adjust_player_goals(player_id, _int(_body().get("delta"), "delta"))
        return jsonify({"success": True, "goals": goals, **session.snapshot()})

    @app.route("/api/match/photo", methods=["POST"])
    def set_photo():
        session.set_photo(_str(_body().get("photo"), "photo"))
        return jsonify({"success": True})

    @app.route("/api/match/save", methods=["POST"])
    def save_match():
        """Save the unfinished match so it can be resumed later."""
        file_path = session.autosave(config.autosave_dir)
        if file_path is None:
            return jsonify({"success": False, "error": "Could not save match"}), 500
        return jsonify({"success": True, "file": os.path.basename(file_path)})

    @app.route("/api/match/saves", methods=["GET"])
    def list_saves():
        """Saved matches the front end can offer to resume, newest first."""
        saves = PersistenceService.list_saves(config.autosave_dir)
        return jsonify({
            "success": True,
            "saves": [{"file": name, "saved_at": mtime} for name, mtime in saves],
        })

    @app.route("/api/match/resume", methods=["POST"])
    def resume_match():
        """Resume a match saved in the autosave directory, by file name."""
        file_name = _str(_body().get("file"), "file")
        if not file_name:
            raise RequestDataError("'file' is required")
        file_path = PersistenceService.save_path(config.autosave_dir, file_name)
        try:
            session.resume_from_file(file_path)
        except FileNotFoundError:
            return jsonify({"success": False, "error": f"No saved match named {file_name}"}), 404
        return jsonify({"success": True, **session.snapshot()})

    # ==================== Clock ==================== #

    @app.route("/api/clock/start", methods=["POST"])
    def start_clock():
        session.start_clock()
        return jsonify({"success": True, **session.snapshot()})

    @app.route("/api/clock/pause", methods=["POST"])
    def pause_clock():
        session.pause_clock()
        return jsonify({"success": True, **session.snapshot()})

    @app.route("/api/clock/reset", methods=["POST"])
    def reset_clock():
        session.reset_clock()
        return jsonify({"success": True, **session.snapshot()})

    # ==================== Result card ==================== #

    def _current_card():
        ledger = session.ledger
        if ledger is None:
            raise PhaseError("No match in progress")
        return app_state.result_card_service.build(ledger, app_state.team_service.get_team())

    @app.route("/api/match/result-card", methods=["GET"])
    def get_result_card():
        fmt = request.args.get("format", "json")
        card = _current_card()
        return jsonify({
            "success": True,
            "headline": card.headline,
            "scorer_summary": card.scorer_summary,
            "content": app_state.result_card_service.render(card, fmt),
        })

    @app.route("/api/match/result-card/export", methods=["POST"])
    def export_result_card():
        fmt = _body().get("format", "json")
        path = app_state.result_card_service.write_card(_current_card(), config.export_dir, fmt)
        return jsonify({"success": True, "file": path})

    # ==================== Roster ==================== #

    @app.route("/api/players", methods=["GET"])
    def list_players():
        players = app_state.roster_service.list_players()
        return jsonify({
            "success": True,
            "players": [p.to_dict() for p in players],
            "count": len(players),
        })

    @app.route("/api/players", methods=["POST"])
    def create_player():
        data = _body()
        player = app_state.roster_service.create_player(
            _str(data.get("name"), "name") or "", data.get("number"))
        return jsonify({"success": True, "player": player.to_dict()}), 201

    @app.route("/api/players/<player_id>", methods=["PUT"])
    def update_player(player_id: str):
        data = _body()
        player = app_state.roster_service.update_player(
            player_id,
            name=_str(data.get("name"), "name"),
            number=data.get("number"),
            is_active=_bool(data.get("is_active"), "is_active"),
        )
        return jsonify({"success": True, "player": player.to_dict()})

    @app.route("/api/players/<player_id>", methods=["DELETE"])
    def delete_player(player_id: str):
        app_state.roster_service.delete_player(player_id)
        return jsonify({"success": True, "message": f"Player {player_id} deleted"})

    @app.route("/api/players/<player_id>/toggle-active", methods=["POST"])
    def toggle_active(player_id: str):
        player = app_state.roster_service.toggle_active(player_id)
        return jsonify({"success": True, "player": player.to_dict()})

    @app.route("/api/leaderboard", methods=["GET"])
    def leaderboard():
        players = app_state.roster_service.leaderboard()
        return jsonify({"success": True, "players": [p.to_dict() for p in players]})

    # ==================== History ==================== #

    @app.route("/api/home", methods=["GET"])
    def home():
        """Data for the home screen."""
        return jsonify({
            "success": True,
            "team": app_state.team_service.get_team().to_dict(),
            "top_scorers": [p.to_dict() for p in app_state.roster_service.top_scorers()],
            "recent_matches": [m.to_dict() for m in app_state.history_service.recent_matches()],
        })

    @app.route("/api/matches", methods=["GET"])
    def list_matches():
        matches = app_state.history_service.list_matches()
        return jsonify({
            "success": True,
            "matches": [m.to_dict() for m in matches],
            "record": app_state.history_service.record(matches),
        })

    @app.route("/api/matches/<match_id>/scorers", methods=["GET"])
    def match_scorers(match_id: str):
        lines = app_state.history_service.match_scorers(match_id)
        return jsonify({"success": True, "scorers": [line.to_dict() for line in lines]})

    @app.route("/api/matches/<match_id>", methods=["DELETE"])
    def delete_match(match_id: str):
        app_state.history_service.delete_match(match_id)
        return jsonify({"success": True, "message": f"Match {match_id} deleted"})

    # ==================== Team ==================== #

    @app.route("/api/team", methods=["GET"])
    def get_team():
        return jsonify({"success": True, "team": app_state.team_service.get_team().to_dict()})

    @app.route("/api/team", methods=["PUT"])
    def update_team():
        data = _body()
        team = app_state.team_service.update_team(
            name=_str(data.get("name"), "name"),
            color=_str(data.get("color"), "color"),
        )
        return jsonify({"success": True, "team": team.to_dict()})

    return app


def run_web_app(config: Optional[AppConfig] = None) -> None:
    """
    Run the web application.

    Args:
        config: Application settings; read from the environment when omitted
    """
    config = config or AppConfig.from_env()
    configure_logging(config.log_level)
    app = create_app(config)
    logger.info("Starting %s on %s:%d", APP_TITLE, config.host, config.port)
    app.run(host=config.host, port=config.port, debug=False)


if __name__ == "__main__":
    run_web_app()
