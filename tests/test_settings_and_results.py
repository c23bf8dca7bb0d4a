import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from spider.Core import GameConfig, GameResult, Outcome
from spider_view import settings_store
from spider_view.result_compare import compare_results, format_delta, format_time_delta, summary_lines


def result(score=450, seconds=130.0, moves=40, undos=2, suits=3, outcome=Outcome.ABORTED):
    return GameResult(GameConfig(suits=2, seed=77), outcome, score, moves, undos, seconds, suits)


class SettingsStoreTestCase(unittest.TestCase):
    def test_missing_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            with patch.object(settings_store, "SETTINGS_PATH", Path(td) / "settings.ini"):
                data = settings_store.load_settings()
        self.assertEqual(settings_store.DEFAULT_SETTINGS, data)

    def test_load_sanitizes_values(self):
        with tempfile.TemporaryDirectory() as td:
            ini_path = Path(td) / "settings.ini"
            ini_path.write_text(
                "[game]\n"
                "suit_count = 9\n"
                "mode = weekly\n"
                "log_level = debug\n",
                encoding="utf-8",
            )
            with patch.object(settings_store, "SETTINGS_PATH", ini_path):
                data = settings_store.load_settings()
        self.assertEqual("6", data["suit_count"])
        self.assertEqual("solo", data["mode"])
        self.assertEqual("DEBUG", data["log_level"])

    def test_save_then_load(self):
        with tempfile.TemporaryDirectory() as td:
            ini_path = Path(td) / "nested" / "settings.ini"
            with patch.object(settings_store, "SETTINGS_PATH", ini_path):
                settings_store.save_settings({"suit_count": "0", "mode": "daily", "extra": "x"})
                text = ini_path.read_text(encoding="utf-8")
                data = settings_store.load_settings()
        self.assertIn("suit_count = 1", text)
        self.assertNotIn("extra", text)
        self.assertEqual({"suit_count": "1", "mode": "daily", "log_level": "WARNING"}, data)


class ResultCompareTestCase(unittest.TestCase):
    def test_first_attempt_has_no_deltas(self):
        cmp = compare_results(result())
        for row in cmp.rows():
            self.assertIsNone(row.diff)
            self.assertIsNone(row.improved)

    def test_retry_deltas(self):
        prior = result(score=450, seconds=130.0, moves=40, undos=2, suits=3)
        retry = result(score=470, seconds=95.0, moves=44, undos=2, suits=5, outcome=Outcome.WON)
        cmp = compare_results(retry, prior)
        self.assertEqual(20, cmp.score.diff)
        self.assertTrue(cmp.score.improved)
        self.assertTrue(cmp.time.improved)
        self.assertFalse(cmp.moves.improved)
        self.assertIsNone(cmp.undos.improved)
        self.assertEqual(2, cmp.suits.diff)
        self.assertTrue(cmp.suits.improved)

    def test_formatting(self):
        self.assertEqual("", format_delta(0))
        self.assertEqual(" (+3)", format_delta(3))
        self.assertEqual(" (-1)", format_delta(-1))
        self.assertEqual("", format_time_delta(0.4))
        self.assertEqual(" (+12s)", format_time_delta(12.7))
        self.assertEqual(" (-1:05)", format_time_delta(-65.0))

    def test_summary_lines(self):
        lines = summary_lines(result(score=470, seconds=95.0), result(score=450, seconds=130.0))
        self.assertEqual("Score: 470 (+20)", lines[0])
        self.assertEqual("Time: 1:35 (-35s)", lines[1])
        self.assertEqual("Suits: 3/8", lines[4])


if __name__ == "__main__":
    unittest.main()
