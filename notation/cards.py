from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

RANKS = "23456789TJQKA"
SUITS = "shcd"

SUIT_SYMBOLS = {"s": "♠", "h": "♥", "c": "♣", "d": "♦"}
RED_SUITS = {"h", "d"}


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    def __post_init__(self) -> None:
        if self.rank not in RANKS:
            raise ValueError(f"Invalid rank: {self.rank}")
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def label(self) -> str:
        return f"{self.rank}{self.suit}"

    @property
    def symbol(self) -> str:
        return SUIT_SYMBOLS[self.suit]

    @property
    def color(self) -> str:
        return "red" if self.suit in RED_SUITS else "black"

    @property
    def display(self) -> str:
        rank = "10" if self.rank == "T" else self.rank
        return f"{rank}{self.symbol}"


# Picker grid order: one row per suit, ranks ascending.
ALL_CARDS: List[Card] = [Card(rank, suit) for suit in SUITS for rank in RANKS]


def normalize_card(raw: Optional[str]) -> str:
    """Canonicalise user input such as " as", "10H" or "kD" to "As", "Th", "Kd"."""
    text = "".join((raw or "").split())
    if not text:
        return ""
    if text.startswith("10") and len(text) >= 3:
        return f"T{text[2].lower()}"
    rank = text[0].upper()
    suit = text[1].lower() if len(text) > 1 else ""
    return f"{rank}{suit}"


def split_board(text: Optional[str]) -> List[str]:
    stripped = (text or "").strip()
    return [stripped[idx : idx + 2] for idx in range(0, len(stripped) - 1, 2)]


def card_meta(code: Optional[str]) -> Optional[Card]:
    label = (code or "").strip()
    if len(label) < 2:
        return None
    try:
        return Card(label[0].upper(), label[1].lower())
    except ValueError:
        return None


def parse_label(label: str) -> Card:
    if len(label) != 2:
        raise ValueError(f"Invalid card label: {label}")
    return Card(label[0], label[1])
