"""Hand notation primitives shared by the host server and the manual client."""

from .betting import evaluate, parse_size
from .cards import ALL_CARDS, RANKS, SUITS, Card, card_meta, normalize_card, split_board
from .models import (
    POSITIONS,
    ActionEvent,
    ActionKind,
    BettingState,
    BoardEvent,
    Event,
    Position,
    Street,
    TableConfig,
    format_amount,
)
from .session import HandSession, SavedHand
from .transcript import HandSetup, build_items, describe_action, render_text

__all__ = [
    "evaluate",
    "parse_size",
    "ALL_CARDS",
    "RANKS",
    "SUITS",
    "Card",
    "card_meta",
    "normalize_card",
    "split_board",
    "POSITIONS",
    "ActionEvent",
    "ActionKind",
    "BettingState",
    "BoardEvent",
    "Event",
    "Position",
    "Street",
    "TableConfig",
    "format_amount",
    "HandSession",
    "SavedHand",
    "HandSetup",
    "build_items",
    "describe_action",
    "render_text",
]
