import logging
import random
import time
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum, IntEnum

logger = logging.getLogger(__name__)

STACK_COUNT = 10
NUM_PER_SUIT = 13
MAX_SUITS = 6
# cards dealt into each column at the start, column-major
INITIAL_DEAL = (6, 6, 6, 6, 5, 5, 5, 5, 5, 5)

STARTING_SCORE = 500
POINTS_PER_MOVE = -1
POINTS_PER_UNDO = -10
POINTS_PER_COMPLETED_SUIT = 100

SUIT_LETTERS = "SHDCOB"


def ceilDiv(x, y):
    return (x + y - 1) // y


def lastOf(lst):
    return lst[len(lst) - 1]


class InvariantError(Exception):
    """Raised when the engine state breaks one of its own invariants."""


class Suit(IntEnum):
    SPADES = 0
    HEARTS = 1
    DIAMONDS = 2
    CLUBS = 3
    HORSES = 4
    BALLS = 5


@dataclass(frozen=True, slots=True)
class Card:
    suit: Suit
    rank: int  # 1 = Ace, 11 = Jack, 12 = Queen, 13 = King
    faceUp: bool = False

    def revealed(self) -> "Card":
        if self.faceUp:
            return self
        return replace(self, faceUp=True)

    def suitableAsBaseFor(self, upper: "Card") -> bool:
        return self.rank == upper.rank + 1

    def suitableAsSequenceFor(self, upper: "Card") -> bool:
        return self.suit == upper.suit and self.rank == upper.rank + 1

    def __str__(self):
        return encodeCard(self)


def clampSuits(suits) -> int:
    return max(1, min(MAX_SUITS, int(suits)))


def requiredSuits(suits) -> int:
    """Completed suits needed to win: 8 for up to 4 suits, 10 for 5, 12 for 6."""
    suits = clampSuits(suits)
    if suits <= 4:
        return 8
    if suits == 5:
        return 10
    return 12


def totalCards(suits) -> int:
    return requiredSuits(suits) * NUM_PER_SUIT


def shuffleCards(cards, seed: int) -> list:
    """
    Seeded Fisher-Yates over a private generator; the module-level random state is never touched.
    :return: a new shuffled list
    """
    shuffled = list(cards)
    random.Random(seed).shuffle(shuffled)
    return shuffled


def buildDeck(suits: int, seed: int) -> list:
    """
    Builds whole A..K decks for the first `suits` suits and shuffles them with `seed`.
    The decks are spread as evenly as possible, earlier suits taking the remainder.
    """
    suits = clampSuits(suits)
    pileCount = requiredSuits(suits)
    lst = []
    for i in range(suits):
        remainCount = suits - i
        count = ceilDiv(pileCount, remainCount)
        pileCount -= count
        for _ in range(count):
            for rank in range(1, NUM_PER_SUIT + 1):
                lst.append(Card(Suit(i), rank))
    return shuffleCards(lst, seed)


def dealLayout(deck):
    """
    Deals the start of the deck column by column, revealing only the last card of each column.
    :return: (stacks, stock) where the stock keeps deck order and is drawn from its end
    """
    stacks = [[] for _ in range(STACK_COUNT)]
    cardIdx = 0
    for col, count in enumerate(INITIAL_DEAL):
        for row in range(count):
            card = deck[cardIdx]
            cardIdx += 1
            if row == count - 1:
                card = card.revealed()
            stacks[col].append(card)
    return stacks, list(deck[cardIdx:])


def dailySeed(day: date = None) -> int:
    if day is None:
        day = date.today()
    return int(day.strftime("%Y%m%d"))


class GameMode(Enum):
    SOLO_PRACTICE = "solo"
    DAILY_GRIND = "daily"


class Outcome(Enum):
    WON = "won"
    ABORTED = "aborted"


class GameConfig:
    def __init__(self, mode=GameMode.SOLO_PRACTICE, suits=4, seed=0):
        self.mode = GameMode(mode)
        self.suits = clampSuits(suits)
        self.seed = int(seed)

    def isDaily(self):
        return self.mode == GameMode.DAILY_GRIND

    def requiredSuits(self):
        return requiredSuits(self.suits)

    def totalCards(self):
        return totalCards(self.suits)

    def initBase(self):
        return buildDeck(self.suits, self.seed)

    @staticmethod
    def soloPractice(suits, seed=None):
        if seed is None:
            seed = time.time_ns()
        return GameConfig(GameMode.SOLO_PRACTICE, suits, seed)

    @staticmethod
    def dailyGrind(suits, day: date = None):
        return GameConfig(GameMode.DAILY_GRIND, suits, dailySeed(day))

    def __eq__(self, other):
        if not isinstance(other, GameConfig):
            return NotImplemented
        return (self.mode, self.suits, self.seed) == (other.mode, other.suits, other.seed)

    def __hash__(self):
        return hash((self.mode, self.suits, self.seed))

    def __repr__(self):
        return f"GameConfig(mode={self.mode.value}, suits={self.suits}, seed={self.seed})"


@dataclass(frozen=True, slots=True)
class GameResult:
    config: GameConfig
    outcome: Outcome
    score: int
    moves: int
    undos: int
    elapsedSeconds: float
    completedSuits: int

    def isWon(self) -> bool:
        return self.outcome == Outcome.WON

    def requiredSuits(self) -> int:
        return self.config.requiredSuits()

    def formattedTime(self) -> str:
        totalSeconds = int(self.elapsedSeconds)
        return f"{totalSeconds // 60}:{totalSeconds % 60:02d}"


@dataclass(frozen=True, slots=True)
class GameState:
    """Immutable snapshot of everything undo restores. Cards are values, so nothing is shared with live state."""

    tableaus: tuple[tuple[Card, ...], ...]
    stock: tuple[Card, ...]
    completedSuits: int = 0
    score: int = STARTING_SCORE
    totalMoves: int = 0

    @staticmethod
    def capture(stacks, stock, completedSuits=0, score=STARTING_SCORE, totalMoves=0) -> "GameState":
        return GameState(
            tableaus=tuple(tuple(stack) for stack in stacks),
            stock=tuple(stock),
            completedSuits=completedSuits,
            score=score,
            totalMoves=totalMoves,
        )

    def cardCount(self) -> int:
        return sum(len(t) for t in self.tableaus) + len(self.stock) + NUM_PER_SUIT * self.completedSuits


def encodeCard(card: Card) -> str:
    return f"{SUIT_LETTERS[card.suit]}{card.rank}{'u' if card.faceUp else 'd'}"


def decodeCard(s: str) -> Card:
    s = s.strip()
    if len(s) < 3 or s[0] not in SUIT_LETTERS or s[-1] not in "ud":
        raise ValueError(f"bad card code: {s!r}")
    rank = int(s[1:-1])
    if rank < 1 or rank > NUM_PER_SUIT:
        raise ValueError(f"bad card rank: {s!r}")
    return Card(Suit(SUIT_LETTERS.index(s[0])), rank, s[-1] == "u")


def encodeStack(base) -> str:
    if len(base) == 0:
        return "empty"
    return ",".join(map(encodeCard, base))


def decodeStack(code: str) -> list:
    code = code.strip()
    if code.startswith("empty"):
        return []
    return list(map(decodeCard, code.split(",")))


def encodeState(state: GameState) -> list:
    """Deal code: counters, then the stock, then one line per tableau."""
    lines = [str(state.completedSuits), str(state.score), str(state.totalMoves), encodeStack(state.stock)]
    lines.extend(encodeStack(t) for t in state.tableaus)
    return lines


def decodeState(lines) -> GameState:
    def lineFilter(s: str):
        return len(s.strip()) > 0 and not s.startswith("#")

    lines = list(filter(lineFilter, lines))
    if len(lines) < 5:
        raise ValueError("deal code needs counters, stock and at least one tableau")
    return GameState(
        tableaus=tuple(tuple(decodeStack(line)) for line in lines[4:]),
        stock=tuple(decodeStack(lines[3])),
        completedSuits=int(lines[0]),
        score=int(lines[1]),
        totalMoves=int(lines[2]),
    )


class GameEvent:
    """Notification sent to the interface after the engine changed its state."""


class CardMove(GameEvent):
    def __init__(self, src: tuple[int, int], dest: tuple[int, int]):
        self.src = src
        self.dest = dest


class CallDeal(GameEvent):
    def __init__(self, drawCount: int):
        self.drawCount = drawCount


class FreeStack(GameEvent):
    def __init__(self, idx, suit):
        self.idx = idx
        self.suit = suit


class RevealTop(GameEvent):
    def __init__(self, idx):
        self.idx = idx


class RestoreSnapshot(GameEvent):
    def __init__(self, remaining: int):
        self.remaining = remaining


def _sameSuitBase(base, top):
    return top is not None and top.suitableAsSequenceFor(base)


def _otherSuitBase(base, top):
    return top is not None and top.suitableAsBaseFor(base) and top.suit != base.suit


def _emptyColumn(base, top):
    return top is None


# Ranked auto-move targets, best first.
AUTO_MOVE_RULES = (
    (1, _sameSuitBase),
    (2, _otherSuitBase),
    (3, _emptyColumn),
)


def autoMovePriority(base: Card, top: Card | None):
    """
    :param base: the bottom card of the run being moved
    :param top: the top card of the candidate column, None if the column is empty
    :return: the rank of the first matching rule, or None when the column does not qualify
    """
    for priority, rule in AUTO_MOVE_RULES:
        if rule(base, top):
            return priority
    return None


class HistoryRecorder:
    """Stack of pre-action snapshots. The bottom entry is the post-deal state and is never popped."""

    def __init__(self, initial: GameState):
        self.lst = [initial]

    def log(self, state: GameState):
        self.lst.append(state)

    def canUndo(self) -> bool:
        return len(self.lst) > 1

    def undo(self) -> GameState | None:
        if not self.canUndo():
            return None
        return self.lst.pop()

    def __len__(self):
        return len(self.lst)


class Core:
    """
    ask*** : should be called by the player, validates first and reports success.
    do*** : actual operation, no validation and no history.
    """

    def __init__(self, clock=time.perf_counter):
        self.interface = None
        self.clock = clock

        self.config: GameConfig = None
        self.stacks = None  # the ten tableau columns, bottom to top
        self.stock = None  # drawn from its end
        self.completedSuits = 0
        self.score = STARTING_SCORE
        self.totalMoves = 0
        self.totalUndos = 0
        self.cardTotal = 0

        self.gameEnded = False
        self.result: GameResult = None
        self.priorResult: GameResult = None
        self.startTime = 0.0

        self.history: HistoryRecorder = None

    def registerInterface(self, interface):
        self.interface = interface
        interface.core = self

    def _notify(self, name, *args):
        if self.interface is not None:
            getattr(self.interface, name)(*args)

    def startGame(self, gameConfig: GameConfig = None, priorResult: GameResult = None) -> GameState:
        if gameConfig is None:
            gameConfig = GameConfig()
        stacks, stock = dealLayout(gameConfig.initBase())
        self._begin(gameConfig, stacks, stock, 0, STARTING_SCORE, 0, gameConfig.totalCards(), priorResult)
        logger.info("started %r", gameConfig)
        self._notify("onStart")
        return self.currentState()

    def loadState(self, gameConfig: GameConfig, state: GameState, priorResult: GameResult = None) -> GameState:
        """Starts play from an arbitrary position; card conservation is checked against that position."""
        self._begin(
            gameConfig,
            [list(t) for t in state.tableaus],
            list(state.stock),
            state.completedSuits,
            state.score,
            state.totalMoves,
            state.cardCount(),
            priorResult,
        )
        logger.info("loaded position for %r", gameConfig)
        self._notify("onStart")
        return self.currentState()

    def retryGame(self) -> GameState:
        """Deals the same seed again, keeping this game's result for comparison."""
        self._requireStarted()
        prior = self.result if self.result is not None else self.askAbort()
        return self.startGame(self.config, prior)

    def _begin(self, config, stacks, stock, completedSuits, score, totalMoves, cardTotal, priorResult):
        self.config = config
        self.stacks = stacks
        self.stock = stock
        self.completedSuits = completedSuits
        self.score = score
        self.totalMoves = totalMoves
        self.totalUndos = 0
        self.cardTotal = cardTotal
        self.gameEnded = False
        self.result = None
        self.priorResult = priorResult
        self.startTime = self.clock()
        self.history = HistoryRecorder(self._capture())
        self._checkInvariants()

    def _requireStarted(self):
        if self.stacks is None:
            raise Exception("game not started")

    def _playing(self):
        self._requireStarted()
        return not self.gameEnded

    def _capture(self) -> GameState:
        return GameState.capture(self.stacks, self.stock, self.completedSuits, self.score, self.totalMoves)

    def currentState(self) -> GameState:
        self._requireStarted()
        return self._capture()

    def _countCards(self):
        return sum(len(s) for s in self.stacks) + len(self.stock) + NUM_PER_SUIT * self.completedSuits

    def _checkInvariants(self):
        count = self._countCards()
        if count != self.cardTotal:
            raise InvariantError(f"card count {count} does not match {self.cardTotal}")
        for idx, stack in enumerate(self.stacks):
            seenFaceUp = False
            for card in stack:
                if card.faceUp:
                    seenFaceUp = True
                elif seenFaceUp:
                    raise InvariantError(f"face-down card above a face-up card in stack {idx}")
        if self.history is None or len(self.history) < 1:
            raise InvariantError("undo history lost its initial state")

    def isValidPosition(self, s, idx):
        if s < 0 or s >= len(self.stacks):
            return False
        stack = self.stacks[s]
        if idx < 0 or idx >= len(stack):
            return False
        return True

    def getValidRun(self, src: tuple[int, int]):
        """
        :param src: a pair of (index of stack, index of the start of the sequence)
        :return: the cards from src to the top of the stack, or None if they are not a movable run
        """
        (s, idx) = src
        if not self.isValidPosition(s, idx):
            return None
        stack = self.stacks[s]
        base = stack[idx]
        if not base.faceUp:
            return None
        for i in range(idx + 1, len(stack)):
            upper = stack[i]
            if not upper.faceUp or not base.suitableAsSequenceFor(upper):
                return None
            base = upper
        return stack[idx:]

    def canDrop(self, dest: int, card: Card) -> bool:
        stack = self.stacks[dest]
        if len(stack) == 0:
            return True
        return lastOf(stack).suitableAsBaseFor(card)

    def canMove(self, src: tuple[int, int], dest: int) -> bool:
        if dest < 0 or dest >= len(self.stacks) or dest == src[0]:
            return False
        run = self.getValidRun(src)
        if run is None:
            return False
        return self.canDrop(dest, run[0])

    def canDeal(self) -> bool:
        if len(self.stock) == 0:
            return False
        for stack in self.stacks:
            if len(stack) == 0:
                return False
        return True

    def canUndo(self) -> bool:
        return self.stacks is not None and not self.gameEnded and self.history.canUndo()

    def existValidMove(self) -> bool:
        if self.canDeal():
            return True
        for s, stack in enumerate(self.stacks):
            if len(stack) == 0:
                continue
            if not lastOf(stack).faceUp:
                return True
            idx = len(stack) - 1
            while idx >= 0 and self.getValidRun((s, idx)) is not None:
                for dest in range(len(self.stacks)):
                    if self.canMove((s, idx), dest):
                        return True
                idx -= 1
        return False

    def findAutoMoveTarget(self, src: tuple[int, int]):
        run = self.getValidRun(src)
        if run is None:
            return None
        base = run[0]
        candidates = []
        for dest, stack in enumerate(self.stacks):
            if dest == src[0]:
                continue
            top = lastOf(stack) if len(stack) > 0 else None
            priority = autoMovePriority(base, top)
            if priority is not None:
                candidates.append((priority, dest))
        if not candidates:
            return None
        return min(candidates)[1]

    def askMove(self, src: tuple[int, int], dest: int) -> bool:
        if not self._playing() or not self.canMove(src, dest):
            logger.debug("move %s -> %d rejected", src, dest)
            return False
        self.history.log(self._capture())
        self.doMove(src, dest)
        self._settle((dest,))
        return True

    def askAutoMove(self, src: tuple[int, int]) -> bool:
        if not self._playing():
            return False
        dest = self.findAutoMoveTarget(src)
        if dest is None:
            logger.debug("no auto-move target for %s", src)
            return False
        return self.askMove(src, dest)

    def askDeal(self) -> bool:
        if not self._playing() or not self.canDeal():
            logger.debug("deal rejected, stock=%d", len(self.stock))
            return False
        self.history.log(self._capture())
        self.doDeal()
        self._settle(range(len(self.stacks)))
        return True

    def askUndo(self) -> bool:
        if not self._playing():
            return False
        state = self.history.undo()
        if state is None:
            logger.debug("nothing to undo")
            return False
        lostSuits = self.completedSuits - state.completedSuits
        self.stacks = [list(t) for t in state.tableaus]
        self.stock = list(state.stock)
        self.completedSuits = state.completedSuits
        self.score += POINTS_PER_MOVE + POINTS_PER_UNDO - lostSuits * POINTS_PER_COMPLETED_SUIT
        self.totalMoves += 1
        self.totalUndos += 1
        self._checkInvariants()
        logger.info("undo, %d snapshot(s) left, score %d", len(self.history), self.score)
        self._notify("onUndoEvent", RestoreSnapshot(len(self.history)))
        return True

    def askAbort(self) -> GameResult:
        self._requireStarted()
        if self.result is not None:
            return self.result
        return self._finish(Outcome.ABORTED)

    def _settle(self, columns):
        for idx in columns:
            self.doFree(idx)
        self._checkInvariants()
        self.checkWin()

    def checkWin(self):
        if self.completedSuits < self.config.requiredSuits():
            return False
        self._finish(Outcome.WON)
        return True

    def _finish(self, outcome: Outcome) -> GameResult:
        self.gameEnded = True
        self.result = GameResult(
            config=self.config,
            outcome=outcome,
            score=self.score,
            moves=self.totalMoves,
            undos=self.totalUndos,
            elapsedSeconds=max(0.0, self.clock() - self.startTime),
            completedSuits=self.completedSuits,
        )
        logger.info("game %s: score %d, %d moves, %d undos", outcome.value, self.score, self.totalMoves, self.totalUndos)
        if outcome == Outcome.WON:
            self._notify("onWin", self.result)
        else:
            self._notify("onAbort", self.result)
        return self.result

    def doMove(self, src: tuple[int, int], dest: int):
        stacks = self.stacks
        srcStack = stacks[src[0]]
        temp = srcStack[src[1]:]
        destStack = stacks[dest]
        destPair = (dest, len(destStack))
        del srcStack[src[1]:]
        destStack.extend(temp)
        self.totalMoves += 1
        self.score += POINTS_PER_MOVE
        self._notify("onEvent", CardMove(src, destPair))
        self.doReveal(src[0])

    def doReveal(self, idx: int):
        stack = self.stacks[idx]
        if len(stack) == 0 or lastOf(stack).faceUp:
            return False
        stack[-1] = lastOf(stack).revealed()
        self._notify("onEvent", RevealTop(idx))
        return True

    def doFree(self, idx: int):
        """
        Removes a King-to-Ace same-suit run from the top of the stack, if there is one.
        :return: the suit that was completed, or None
        """
        stack = self.stacks[idx]
        length = len(stack)
        if length < NUM_PER_SUIT:
            return None
        suit = stack[length - NUM_PER_SUIT].suit
        for i in range(NUM_PER_SUIT):
            card = stack[length - NUM_PER_SUIT + i]
            if not card.faceUp or card.suit != suit or card.rank != NUM_PER_SUIT - i:
                return None
        del stack[length - NUM_PER_SUIT:]
        self.completedSuits += 1
        self.score += POINTS_PER_COMPLETED_SUIT
        logger.info("completed %s in stack %d (%d/%d)", suit.name, idx, self.completedSuits, self.config.requiredSuits())
        self._notify("onEvent", FreeStack(idx, suit))
        self.doReveal(idx)
        return suit

    def doDeal(self):
        drawCount = min(len(self.stacks), len(self.stock))
        for dest in range(drawCount):
            self.stacks[dest].append(self.stock.pop().revealed())
        self.totalMoves += 1
        self.score += POINTS_PER_MOVE
        logger.info("dealt %d card(s), %d left in stock", drawCount, len(self.stock))
        self._notify("onEvent", CallDeal(drawCount))
