import unittest
from unittest.mock import patch

from spider import CommandLine
from spider.CommandLine import CommandLineInterface, build_config, longestRunStart, parse_args, runCommand
from spider.Core import Card, Core, GameConfig, GameMode, GameState, Outcome, Suit

S, H, D = Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS


def up(suit, rank):
    return Card(suit, rank, True)


class CommandLineTestCase(unittest.TestCase):
    def make_core(self, stacks, stock=()):
        lines = []
        ui = CommandLineInterface(out=lines.append)
        core = Core()
        core.registerInterface(ui)
        core.loadState(GameConfig(suits=4, seed=5), GameState.capture(stacks, stock))
        return core, ui, lines

    def test_longest_run_start(self):
        core, _, _ = self.make_core([[Card(D, 2), up(S, 7), up(S, 6), up(S, 5)], [up(H, 7)], [up(H, 8)]])
        self.assertEqual(1, longestRunStart(core, 0))
        self.assertEqual(2, longestRunStart(core, 0, 1))
        self.assertEqual(1, longestRunStart(core, 0, 2))
        self.assertIsNone(longestRunStart(core, 2, 1))

    def test_mv_and_undo(self):
        core, _, lines = self.make_core([[Card(D, 2), up(S, 7), up(S, 6)], [up(H, 8)], [up(H, 9)]])
        self.assertTrue(runCommand(core, core.interface, "mv 0 1"))
        self.assertEqual([8, 7, 6], [c.rank for c in core.stacks[1]])
        self.assertTrue(any(line.startswith("Score: 499") for line in lines))
        self.assertTrue(runCommand(core, core.interface, "undo"))
        self.assertEqual(1, core.totalUndos)
        self.assertTrue(runCommand(core, core.interface, "undo"))
        self.assertIn("Cannot undo!", lines)

    def test_rejections_are_reported(self):
        core, _, lines = self.make_core([[up(S, 5)], [up(H, 9)]])
        runCommand(core, core.interface, "mv 0 1")
        runCommand(core, core.interface, "mv 0 x")
        runCommand(core, core.interface, "deal")
        runCommand(core, core.interface, "auto 0")
        runCommand(core, core.interface, "jump")
        self.assertIn("Cannot move!", lines)
        self.assertIn("Invalid index!", lines)
        self.assertIn("Cannot deal: stock is empty or a column is empty!", lines)
        self.assertIn("No target for that run!", lines)
        self.assertIn("Invalid command!", lines)
        self.assertIn("No moves left. Undo, abort or retry.", lines)

    def test_abort_then_retry(self):
        core, _, lines = self.make_core([[up(S, 5)], [up(H, 6)]])
        runCommand(core, core.interface, "auto 0")
        runCommand(core, core.interface, "abort")
        self.assertEqual(Outcome.ABORTED, core.result.outcome)
        self.assertIn("Game aborted.", lines)
        self.assertIn("  Moves: 1", lines)
        runCommand(core, core.interface, "retry")
        self.assertFalse(core.gameEnded)
        self.assertEqual(GameConfig(suits=4, seed=5), core.config)
        self.assertEqual(54, sum(len(s) for s in core.stacks))
        self.assertEqual(Outcome.ABORTED, core.priorResult.outcome)
        self.assertEqual(1, core.priorResult.moves)

    def test_code_and_quit(self):
        core, _, lines = self.make_core([[up(S, 5)], []], stock=[Card(H, 3)])
        runCommand(core, core.interface, "code")
        self.assertIn("S5u", lines)
        self.assertIn("H3d", lines)
        self.assertFalse(runCommand(core, core.interface, "quit"))

    def test_parse_args_uses_settings(self):
        settings = {"suit_count": "2", "mode": "daily", "log_level": "INFO"}
        with patch.object(CommandLine, "load_settings", return_value=settings):
            args = parse_args([])
        self.assertEqual(2, args.suits)
        self.assertTrue(args.daily)
        self.assertEqual("INFO", args.log_level)
        cfg = build_config(args)
        self.assertEqual(GameMode.DAILY_GRIND, cfg.mode)
        self.assertEqual(2, cfg.suits)

    def test_build_config_with_seed(self):
        settings = {"suit_count": "4", "mode": "solo", "log_level": "WARNING"}
        with patch.object(CommandLine, "load_settings", return_value=settings):
            args = parse_args(["--suits", "3", "--seed", "99"])
        cfg = build_config(args)
        self.assertEqual(GameConfig(GameMode.SOLO_PRACTICE, 3, 99), cfg)

    def test_main_plays_until_quit(self):
        settings = {"suit_count": "1", "mode": "solo", "log_level": "WARNING"}
        commands = iter(["deal", "undo", "quit"])
        printed = []
        with patch.object(CommandLine, "load_settings", return_value=settings), patch(
            "builtins.print", side_effect=lambda *a, **k: printed.append(" ".join(map(str, a)))
        ):
            CommandLine.main(["--seed", "4"], readLine=lambda: next(commands))
        self.assertIn("Game started!", printed)
        self.assertTrue(any(line.startswith("Score: 488") for line in printed))


if __name__ == "__main__":
    unittest.main()
