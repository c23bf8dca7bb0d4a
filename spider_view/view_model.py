from dataclasses import dataclass


@dataclass(frozen=True)
class CardView:
    suit: int
    rank: int
    face_up: bool


@dataclass(frozen=True)
class StackView:
    cards: tuple[CardView, ...]


@dataclass(frozen=True)
class GameViewModel:
    stock_count: int
    completed_suits: int
    required_suits: int
    score: int
    total_moves: int
    total_undos: int
    can_undo: bool
    game_ended: bool
    stacks: tuple[StackView, ...]


@dataclass(frozen=True)
class ViewEvent:
    type: str
    payload: dict
