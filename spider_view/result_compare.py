from dataclasses import dataclass

from spider.Core import GameResult


@dataclass(frozen=True)
class StatDelta:
    name: str
    value: float
    prior: float | None
    higher_is_better: bool

    @property
    def diff(self):
        if self.prior is None:
            return None
        return self.value - self.prior

    @property
    def improved(self):
        diff = self.diff
        if not diff:
            return None
        return diff > 0 if self.higher_is_better else diff < 0


@dataclass(frozen=True)
class ResultComparison:
    score: StatDelta
    time: StatDelta
    moves: StatDelta
    undos: StatDelta
    suits: StatDelta

    def rows(self) -> tuple[StatDelta, ...]:
        return self.score, self.time, self.moves, self.undos, self.suits


def compare_results(result: GameResult, prior: GameResult | None = None) -> ResultComparison:
    """Stat-by-stat deltas of a retry against the previous attempt at the same deal."""

    def stat(name, value, prior_value, higher_is_better):
        return StatDelta(name, value, None if prior is None else prior_value, higher_is_better)

    return ResultComparison(
        score=stat("Score", result.score, prior and prior.score, True),
        time=stat("Time", result.elapsedSeconds, prior and prior.elapsedSeconds, False),
        moves=stat("Moves", result.moves, prior and prior.moves, False),
        undos=stat("Undos", result.undos, prior and prior.undos, False),
        suits=stat("Suits", result.completedSuits, prior and prior.completedSuits, True),
    )


def format_delta(diff) -> str:
    if not diff:
        return ""
    return f" ({'+' if diff > 0 else ''}{int(diff)})"


def format_time_delta(diff) -> str:
    # Sub-second differences are noise.
    if diff is None or abs(diff) < 1:
        return ""
    sign = "-" if diff < 0 else "+"
    seconds = int(abs(diff))
    minutes = seconds // 60
    if minutes > 0:
        return f" ({sign}{minutes}:{seconds % 60:02d})"
    return f" ({sign}{seconds}s)"


def summary_lines(result: GameResult, prior: GameResult | None = None) -> list[str]:
    cmp = compare_results(result, prior)
    return [
        f"Score: {result.score}{format_delta(cmp.score.diff)}",
        f"Time: {result.formattedTime()}{format_time_delta(cmp.time.diff)}",
        f"Moves: {result.moves}{format_delta(cmp.moves.diff)}",
        f"Undos: {result.undos}{format_delta(cmp.undos.diff)}",
        f"Suits: {result.completedSuits}/{result.requiredSuits()}{format_delta(cmp.suits.diff)}",
    ]
