"""
Unit tests for ledger files and the JSON file backend.
"""
import json
import os
import tempfile
import unittest

from scoresheet.exceptions import BackendError, FinalizeError, LedgerFileError, UnknownPlayerError
from scoresheet.models import EventKind, MatchLedger, MatchPlayer, Side
from scoresheet.services import (
    JsonFileBackend, MatchPhase, MatchSession, PersistenceService, RosterService,
)


class TestLedgerFiles(unittest.TestCase):
    """Saving and loading an unfinished match."""

    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.ledger = MatchLedger(
            away_team="Rivals",
            players=[MatchPlayer(id="1", name="Taro", number=7)],
        )
        self.ledger.record_event(EventKind.GOAL, Side.HOME)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_save_and_load(self) -> None:
        path = os.path.join(self.temp_dir.name, "nested", "match.json")
        PersistenceService.save_ledger_to_file(self.ledger, path)
        loaded = PersistenceService.load_ledger_from_file(path)
        self.assertEqual(loaded.to_json(), self.ledger.to_json())

    def test_load_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            PersistenceService.load_ledger_from_file(os.path.join(self.temp_dir.name, "nope.json"))

    def test_auto_save_and_list_saves(self) -> None:
        path = PersistenceService.auto_save(self.ledger, self.temp_dir.name)
        self.assertIsNotNone(path)
        self.assertTrue(os.path.exists(path))

        saves = PersistenceService.list_saves(self.temp_dir.name)
        self.assertEqual([name for name, _ in saves], [os.path.basename(path)])

    def test_auto_save_failure_returns_none(self) -> None:
        blocker = os.path.join(self.temp_dir.name, "file")
        with open(blocker, "w") as f:
            f.write("x")
        self.assertIsNone(PersistenceService.auto_save(self.ledger, blocker))

    def test_list_saves_missing_dir(self) -> None:
        self.assertEqual(PersistenceService.list_saves("/nonexistent/dir"), [])

    def test_load_rejects_files_that_are_not_ledgers(self) -> None:
        contents = [
            "{not json",
            "[1, 2]",
            json.dumps({"events": [{"id": 1, "kind": "penalty", "side": "home"}]}),
            json.dumps({"home_score": "many"}),
        ]
        for index, text in enumerate(contents):
            path = os.path.join(self.temp_dir.name, f"bad{index}.json")
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
            with self.subTest(text=text):
                with self.assertRaises(LedgerFileError):
                    PersistenceService.load_ledger_from_file(path)

    def test_save_path_stays_inside_directory(self) -> None:
        self.assertEqual(
            PersistenceService.save_path(self.temp_dir.name, "match.json"),
            os.path.join(self.temp_dir.name, "match.json"),
        )
        for name in ("../secrets.json", "/etc/hostname", "..", "", "a\\b.json", None):
            with self.subTest(name=name):
                with self.assertRaises(LedgerFileError):
                    PersistenceService.save_path(self.temp_dir.name, name)


class TestJsonFileBackend(unittest.TestCase):
    """The file-backed store survives a restart."""

    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.temp_dir.name, "data.json")

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_data_persists_across_instances(self) -> None:
        backend = JsonFileBackend(self.path)
        taro = backend.create_player("Taro", 7)
        match = backend.create_match({
            "opponent_name": "Rivals", "home_score": 2, "away_score": 1,
            "match_date": "2026-10-18",
            "scorers": [{"player_id": taro["id"], "goals": 2}],
        })
        backend.increment_player_goals(taro["id"], 2)
        backend.save_team("Shibuya FC", "#ef4444")

        reopened = JsonFileBackend(self.path)
        self.assertEqual(reopened.get_player(taro["id"])["total_goals"], 2)
        self.assertEqual(reopened.list_matches()[0]["id"], match["id"])
        self.assertEqual(len(reopened.list_match_scorers(match["id"])), 1)
        self.assertEqual(reopened.get_team()["name"], "Shibuya FC")

        # ids continue after the highest stored one
        new_player = reopened.create_player("Jin", 9)
        self.assertNotIn(new_player["id"], {taro["id"], match["id"]})

    def test_create_match_rejects_unknown_players(self) -> None:
        backend = JsonFileBackend(self.path)
        with self.assertRaises(UnknownPlayerError):
            backend.create_match({
                "opponent_name": "Rivals", "home_score": 1, "away_score": 0,
                "scorers": [{"player_id": "404", "goals": 1}],
            })
        self.assertEqual(backend.list_matches(), [])

    def test_corrupt_file(self) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("{not json")
        with self.assertRaises(BackendError):
            JsonFileBackend(self.path)

    def test_file_written_after_mutation(self) -> None:
        backend = JsonFileBackend(self.path)
        backend.create_player("Taro", 7)
        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)
        self.assertEqual([p["name"] for p in data["players"]], ["Taro"])

    def _unwritable_path(self) -> str:
        blocker = os.path.join(self.temp_dir.name, "blocker")
        with open(blocker, "w") as f:
            f.write("x")
        return os.path.join(blocker, "data.json")

    def test_failed_write_rolls_back_mutation(self) -> None:
        backend = JsonFileBackend(self.path)
        taro = backend.create_player("Taro", 7)

        backend.file_path = self._unwritable_path()
        with self.assertRaises(BackendError):
            backend.create_match({
                "opponent_name": "Rivals", "home_score": 1, "away_score": 0,
                "scorers": [{"player_id": taro["id"], "goals": 1}],
            })
        with self.assertRaises(BackendError):
            backend.increment_player_goals(taro["id"], 1)

        self.assertEqual(backend.list_matches(), [])
        self.assertEqual(backend.match_scorers, [])
        self.assertEqual(backend.get_player(taro["id"])["total_goals"], 0)

    def test_finalize_retry_after_failed_write_stores_match_once(self) -> None:
        backend = JsonFileBackend(self.path)
        roster = RosterService(backend)
        roster.create_player("Taro", 7)
        session = MatchSession(backend, tick_interval=3600)
        session.begin_setup()
        session.start_match("Rivals")
        session.record_event(EventKind.GOAL, Side.HOME)
        session.show_review()

        backend.file_path = self._unwritable_path()
        with self.assertRaises(FinalizeError) as ctx:
            session.finalize()
        self.assertIsNone(ctx.exception.progress.match_id)
        self.assertEqual(session.phase, MatchPhase.REVIEW)

        backend.file_path = self.path
        record = session.finalize()

        stored = JsonFileBackend(self.path).list_matches()
        self.assertEqual([m["id"] for m in stored], [record.id])
        self.assertEqual(stored[0]["opponent_name"], "Rivals")


if __name__ == "__main__":
    unittest.main()
