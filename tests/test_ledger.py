"""
Unit tests for the MatchLedger model.

Covers event recording and undo, post-match corrections, goal attribution
and JSON round-tripping of an unfinished match.
"""
import random
import unittest

from scoresheet.exceptions import UnknownPlayerError
from scoresheet.models import EventKind, MatchLedger, MatchPlayer, Side


def make_ledger() -> MatchLedger:
    return MatchLedger(
        home_team="Shibuya FC",
        away_team="United FC",
        players=[
            MatchPlayer(id="1", name="A", number=7),
            MatchPlayer(id="2", name="B", number=9),
        ],
    )


class TestLiveEvents(unittest.TestCase):
    """Recording and undoing events during live play."""

    def setUp(self) -> None:
        self.ledger = make_ledger()

    def test_goal_and_undo_scenario(self) -> None:
        first = self.ledger.record_event(EventKind.GOAL, Side.HOME)
        second = self.ledger.record_event(EventKind.GOAL, Side.HOME)
        self.assertEqual(self.ledger.home_score, 2)
        self.assertEqual(len(self.ledger.events), 2)

        removed = self.ledger.undo_last_event()
        self.assertEqual(removed, second)
        self.assertEqual(self.ledger.home_score, 1)
        self.assertEqual(self.ledger.events, [first])

    def test_events_are_most_recent_first_with_increasing_ids(self) -> None:
        a = self.ledger.record_event(EventKind.FOUL, Side.AWAY)
        b = self.ledger.record_event(EventKind.SUBSTITUTION, Side.HOME)
        c = self.ledger.record_event(EventKind.GOAL, Side.AWAY)
        self.assertEqual(self.ledger.events, [c, b, a])
        self.assertLess(a.id, b.id)
        self.assertLess(b.id, c.id)

    def test_ids_are_not_reused_after_undo(self) -> None:
        first = self.ledger.record_event(EventKind.GOAL, Side.HOME)
        self.ledger.undo_last_event()
        again = self.ledger.record_event(EventKind.GOAL, Side.HOME)
        self.assertGreater(again.id, first.id)

    def test_fouls_have_no_cap(self) -> None:
        for _ in range(5):
            self.ledger.record_event(EventKind.FOUL, Side.AWAY)
        self.assertEqual(self.ledger.away_fouls, 5)
        self.assertTrue(self.ledger.foul_warning(Side.AWAY))
        self.assertFalse(self.ledger.foul_warning(Side.HOME))

        self.ledger.record_event(EventKind.FOUL, Side.AWAY)
        self.assertEqual(self.ledger.away_fouls, 6)
        self.assertEqual(self.ledger.away_score, 0)

    def test_substitution_changes_no_counter(self) -> None:
        self.ledger.record_event(EventKind.SUBSTITUTION, Side.HOME)
        self.assertEqual(
            (self.ledger.home_score, self.ledger.away_score,
             self.ledger.home_fouls, self.ledger.away_fouls),
            (0, 0, 0, 0),
        )
        self.ledger.undo_last_event()
        self.assertEqual(self.ledger.events, [])
        self.assertEqual(self.ledger.home_fouls, 0)

    def test_undo_on_empty_ledger_is_noop(self) -> None:
        self.assertIsNone(self.ledger.undo_last_event())
        self.assertEqual(self.ledger.home_score, 0)
        self.assertEqual(self.ledger.events, [])

    def test_timestamp_uses_elapsed_clock(self) -> None:
        event = self.ledger.record_event(EventKind.GOAL, Side.HOME)
        self.assertEqual(event.timestamp, "00:00")

        self.ledger.elapsed_seconds = 754
        event = self.ledger.record_event(EventKind.FOUL, Side.HOME)
        self.assertEqual(event.timestamp, "12:34")

    def test_quick_actions_leave_player_unset(self) -> None:
        event = self.ledger.record_event(EventKind.GOAL, Side.HOME)
        self.assertIsNone(event.player_id)
        event = self.ledger.record_event(EventKind.GOAL, Side.HOME, player_id="1")
        self.assertEqual(event.player_id, "1")

    def test_counters_match_remaining_events_for_random_sequences(self) -> None:
        rng = random.Random(7)
        records = undos = 0
        for _ in range(300):
            if rng.random() < 0.6:
                self.ledger.record_event(rng.choice(list(EventKind)), rng.choice(list(Side)))
                records += 1
            elif self.ledger.undo_last_event() is not None:
                undos += 1

            events = self.ledger.events
            self.assertEqual(len(events), records - undos)

            def count(kind, side):
                return sum(1 for e in events if e.kind is kind and e.side is side)

            self.assertEqual(self.ledger.home_score, count(EventKind.GOAL, Side.HOME))
            self.assertEqual(self.ledger.away_score, count(EventKind.GOAL, Side.AWAY))
            self.assertEqual(self.ledger.home_fouls, count(EventKind.FOUL, Side.HOME))
            self.assertEqual(self.ledger.away_fouls, count(EventKind.FOUL, Side.AWAY))

    def test_undo_after_correction_stays_non_negative(self) -> None:
        self.ledger.record_event(EventKind.GOAL, Side.HOME)
        self.ledger.adjust_score(Side.HOME, -1)
        self.ledger.undo_last_event()
        self.assertEqual(self.ledger.home_score, 0)

    def test_set_opponent_name_ignores_blank(self) -> None:
        self.assertEqual(self.ledger.set_opponent_name("  Rivals  "), "Rivals")
        self.assertEqual(self.ledger.set_opponent_name("   "), "Rivals")


class TestPostMatchCorrection(unittest.TestCase):
    """Direct score corrections and goal attribution."""

    def setUp(self) -> None:
        self.ledger = make_ledger()

    def test_adjust_score_does_not_append_event(self) -> None:
        self.ledger.record_event(EventKind.GOAL, Side.HOME)
        self.ledger.record_event(EventKind.GOAL, Side.HOME)

        self.assertEqual(self.ledger.adjust_score(Side.HOME, 1), 3)
        self.assertEqual(self.ledger.home_score, 3)
        self.assertEqual(len(self.ledger.events), 2)

    def test_adjust_score_clamps_at_zero(self) -> None:
        self.assertEqual(self.ledger.adjust_score(Side.AWAY, -10), 0)
        self.ledger.adjust_score(Side.AWAY, 2)
        self.assertEqual(self.ledger.adjust_score(Side.AWAY, -5), 0)

    def test_adjust_player_goals_clamps_at_zero(self) -> None:
        self.assertEqual(self.ledger.adjust_player_goals("1", -3), 0)
        self.assertEqual(self.ledger.adjust_player_goals("1", 2), 2)
        self.assertEqual(self.ledger.adjust_player_goals("1", -100), 0)

    def test_adjust_player_goals_unknown_player(self) -> None:
        with self.assertRaises(UnknownPlayerError):
            self.ledger.adjust_player_goals("99", 1)

    def test_goal_attribution_reconciles(self) -> None:
        for _ in range(3):
            self.ledger.record_event(EventKind.GOAL, Side.HOME)
        self.assertEqual(self.ledger.goals_to_assign, 3)

        self.ledger.adjust_player_goals("1", 2)
        self.ledger.adjust_player_goals("2", 1)
        self.assertEqual(self.ledger.goals_to_assign, 0)
        self.assertTrue(self.ledger.is_reconciled)

    def test_goals_to_assign_goes_negative_when_over_assigned(self) -> None:
        self.ledger.adjust_score(Side.HOME, 1)
        self.ledger.adjust_player_goals("1", 3)
        self.assertEqual(self.ledger.goals_to_assign, -2)
        self.assertFalse(self.ledger.is_reconciled)

    def test_player_goals_are_independent_of_team_score(self) -> None:
        self.ledger.adjust_player_goals("2", 4)
        self.assertEqual(self.ledger.home_score, 0)

    def test_match_payload_lists_only_scorers(self) -> None:
        self.ledger.record_event(EventKind.GOAL, Side.HOME)
        self.ledger.record_event(EventKind.GOAL, Side.AWAY)
        self.ledger.adjust_player_goals("2", 1)
        self.ledger.elapsed_seconds = 1200

        payload = self.ledger.build_match_payload()
        self.assertEqual(payload["opponent_name"], "United FC")
        self.assertEqual(payload["home_score"], 1)
        self.assertEqual(payload["away_score"], 1)
        self.assertEqual(payload["duration_seconds"], 1200)
        self.assertEqual(payload["scorers"], [{"player_id": "2", "goals": 1}])


class TestLedgerSerialization(unittest.TestCase):
    """JSON persistence of an unfinished match."""

    def test_round_trip_keeps_state_and_id_sequence(self) -> None:
        ledger = make_ledger()
        ledger.elapsed_seconds = 65
        ledger.record_event(EventKind.GOAL, Side.HOME)
        ledger.record_event(EventKind.FOUL, Side.AWAY)
        ledger.adjust_player_goals("1", 1)
        ledger.photo = "data:image/png;base64,AAAA"

        restored = MatchLedger.from_json(ledger.to_json())

        self.assertEqual(restored.to_json(), ledger.to_json())
        self.assertEqual(restored.events[0].timestamp, "01:05")
        new_event = restored.record_event(EventKind.GOAL, Side.HOME)
        self.assertGreater(new_event.id, ledger.events[0].id)

    def test_from_json_clamps_negative_counters(self) -> None:
        restored = MatchLedger.from_json({"home_score": -2, "away_fouls": -1})
        self.assertEqual(restored.home_score, 0)
        self.assertEqual(restored.away_fouls, 0)
        self.assertEqual(restored.away_team, "United FC")


if __name__ == "__main__":
    unittest.main()
