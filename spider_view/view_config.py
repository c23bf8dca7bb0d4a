from spider.Core import Suit
from spider_view.view_model import CardView

NUMS = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")
HIDDEN_LABEL = "---"

SUIT_SYMBOLS = {
    Suit.SPADES: "♠",
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.HORSES: "Ω",
    Suit.BALLS: "●",
}

SUIT_COLORS = {
    Suit.SPADES: "#1a1a1a",
    Suit.HEARTS: "#e61a1a",
    Suit.DIAMONDS: "#1a66e6",
    Suit.CLUBS: "#1a991a",
    Suit.HORSES: "#b36600",
    Suit.BALLS: "#991a99",
}


def card_label(card: CardView) -> str:
    if not card.face_up:
        return HIDDEN_LABEL
    return f"{SUIT_SYMBOLS[Suit(card.suit)]}{NUMS[card.rank - 1]:<2}"