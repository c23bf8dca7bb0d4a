import argparse
import logging

from spider.Core import Core, GameConfig, GameResult, encodeState
from spider.Interface import Interface
from spider_view.adapter import CoreAdapter
from spider_view.result_compare import summary_lines
from spider_view.settings_store import LOG_LEVEL_ORDER, load_settings, save_settings
from spider_view.view_config import card_label

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  mv <col> <dest>          move the longest run from <col> that fits on <dest>
  mv <col> <idx> <dest>    move the run starting at row <idx>
  auto <col> [<idx>]       send a run to its best column
  deal                     deal one card to every column
  undo                     restore the state before the last action
  abort                    give up this game
  retry                    replay the same deal
  new                      start a new deal with the same settings
  code                     print the deal code of the current position
  quit                     leave"""


class CommandLineInterface(Interface):

    def __init__(self, out=None):
        super().__init__()
        self.out = out if out is not None else print
        self.dirty = False

    def printAll(self):
        vm = CoreAdapter.snapshot(self.core)
        self.out(
            f"Score: {vm.score}  Moves: {vm.total_moves}  Undos: {vm.total_undos}  "
            f"Suits: {vm.completed_suits}/{vm.required_suits}  Stock: {vm.stock_count}"
        )
        self.out("".join(f"--{i}--" for i in range(len(vm.stacks))))
        i = 0
        while True:
            has = False
            line = f"{i:>2}: "
            for stack in vm.stacks:
                if len(stack.cards) <= i:
                    line += "     "
                    continue
                has = True
                line += card_label(stack.cards[i]).ljust(5)
            if not has:
                break
            self.out(line.rstrip())
            i += 1
        self.out("")
        self.dirty = False

    def onStart(self):
        self.out("Game started!")
        self.dirty = True

    def notifyRedraw(self):
        self.dirty = True

    def printResult(self, title, result: GameResult):
        self.out(title)
        for line in summary_lines(result, self.core.priorResult):
            self.out("  " + line)

    def onWin(self, result):
        self.printResult("You win!", result)

    def onAbort(self, result):
        self.printResult("Game aborted.", result)


def longestRunStart(core: Core, col: int, dest: int = None):
    """Lowest row of column `col` that starts a movable run (and fits on `dest`, if given)."""
    stack = core.stacks[col]
    for idx in range(len(stack)):
        if dest is None:
            if core.getValidRun((col, idx)) is not None:
                return idx
        elif core.canMove((col, idx), dest):
            return idx
    return None


def runCommand(core: Core, ui: CommandLineInterface, command: str) -> bool:
    """
    Executes one line of player input.
    :return: False when the player wants to leave
    """
    parts = command.split()
    if not parts:
        return True
    name, args = parts[0], parts[1:]
    try:
        numbers = [int(a) for a in args]
    except ValueError:
        ui.out("Invalid index!")
        return True

    if name == "quit":
        return False
    if name == "help":
        ui.out(HELP_TEXT)
    elif name == "mv":
        if len(numbers) == 2:
            idx = longestRunStart(core, numbers[0], numbers[1]) if 0 <= numbers[0] < len(core.stacks) else None
            src = None if idx is None else (numbers[0], idx)
            dest = numbers[1]
        elif len(numbers) == 3:
            src = (numbers[0], numbers[1])
            dest = numbers[2]
        else:
            ui.out("Usage: mv <col> [<idx>] <dest>")
            return True
        if src is None or not core.askMove(src, dest):
            ui.out("Cannot move!")
    elif name == "auto":
        if len(numbers) == 1 and 0 <= numbers[0] < len(core.stacks):
            idx = longestRunStart(core, numbers[0])
            src = None if idx is None else (numbers[0], idx)
        elif len(numbers) == 2:
            src = (numbers[0], numbers[1])
        else:
            src = None
        if src is None or not core.askAutoMove(src):
            ui.out("No target for that run!")
    elif name == "deal":
        if not core.askDeal():
            ui.out("Cannot deal: stock is empty or a column is empty!")
    elif name == "undo":
        if not core.askUndo():
            ui.out("Cannot undo!")
    elif name == "abort":
        if core.gameEnded:
            ui.out("Game is already over.")
        else:
            core.askAbort()
    elif name == "retry":
        core.retryGame()
    elif name == "new":
        if not core.gameEnded:
            core.askAbort()
        config = core.config
        if config.isDaily():
            config = GameConfig.dailyGrind(config.suits)
        else:
            config = GameConfig.soloPractice(config.suits)
        core.startGame(config)
    elif name == "code":
        for line in encodeState(core.currentState()):
            ui.out(line)
    else:
        ui.out("Invalid command!")

    if not core.gameEnded and not core.existValidMove():
        ui.out("No moves left. Undo, abort or retry.")
    if ui.dirty:
        ui.printAll()
    return True


def parse_args(argv=None) -> argparse.Namespace:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Play Spider Solitaire in the terminal.")
    parser.add_argument("--suits", type=int, default=int(settings["suit_count"]), help="Suit count, 1-6.")
    parser.add_argument("--seed", type=int, default=None, help="Deal seed (random when omitted).")
    parser.add_argument(
        "--daily", action="store_true", default=settings["mode"] == "daily", help="Play today's daily deal."
    )
    parser.add_argument("--log-level", default=settings["log_level"], choices=LOG_LEVEL_ORDER, help="Logging level.")
    parser.add_argument("--save-defaults", action="store_true", help="Remember --suits, --daily and --log-level.")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> GameConfig:
    if args.daily:
        return GameConfig.dailyGrind(args.suits)
    return GameConfig.soloPractice(args.suits, args.seed)


def main(argv=None, readLine=input):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if args.save_defaults:
        save_settings(
            {"suit_count": str(args.suits), "mode": "daily" if args.daily else "solo", "log_level": args.log_level}
        )

    interface = CommandLineInterface()
    core = Core()
    core.registerInterface(interface)
    config = build_config(args)
    core.startGame(config)
    logger.debug("seed %d", config.seed)
    interface.printAll()
    while True:
        try:
            command = readLine()
        except EOFError:
            break
        if not runCommand(core, interface, command):
            break


if __name__ == '__main__':
    main()
