"""Plain-text transcripts of a recorded hand.

The formatter projects the raw event log only; it never looks at the
betting engine's output. Action lines are the display text captured when
each action was recorded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

from .cards import Card, card_meta, split_board
from .models import (
    ActionEvent,
    ActionKind,
    BoardEvent,
    Event,
    Position,
    Street,
    format_amount,
)


@dataclass
class HandSetup:
    hero_position: Optional[str] = None
    effective_stack: Optional[str] = None
    hero_cards: List[str] = field(default_factory=list)

    def summary(self) -> str:
        cards = "".join(card for card in self.hero_cards if card)
        return f"Setup · Hero {self.hero_position or '-'} · {cards or '--'} · {self.effective_stack or '-'}bb"


@dataclass
class SetupItem:
    hero_position: str
    effective_stack: str
    hero_cards: List[str]


@dataclass
class StreetItem:
    street: Street


@dataclass
class BoardItem:
    street: Street
    cards: List[Card]


@dataclass
class ActionItem:
    text: str


TranscriptItem = Union[SetupItem, StreetItem, BoardItem, ActionItem]


def describe_action(
    position: Union[Position, str],
    action: Union[ActionKind, str],
    size: Optional[object],
    street: Street,
    to_call: object,
) -> str:
    pos = Position(position).value
    kind = ActionKind(action)
    if kind == ActionKind.FOLD:
        return f"{pos} folds"
    if kind == ActionKind.CHECK:
        return f"{pos} checks"
    if kind == ActionKind.CALL:
        return f"{pos} calls {format_amount(to_call)}bb"
    if kind == ActionKind.RAISE:
        if street == Street.PREFLOP:
            return f"{pos} raises to {format_amount(size)}bb"
        return f"{pos} bets {format_amount(size)}bb"
    if size is None or size == "":
        return f"{pos} all-in (call {format_amount(to_call)}bb)"
    if street == Street.PREFLOP:
        return f"{pos} all-in to {format_amount(size)}bb"
    return f"{pos} all-in {format_amount(size)}bb"


def build_items(events: Iterable[Optional[Event]], setup: HandSetup) -> List[TranscriptItem]:
    items: List[TranscriptItem] = [
        SetupItem(
            hero_position=setup.hero_position or "-",
            effective_stack=setup.effective_stack or "-",
            hero_cards=[card for card in setup.hero_cards if card],
        )
    ]
    current = Street.PREFLOP
    items.append(StreetItem(current))

    for event in events:
        if isinstance(event, BoardEvent):
            if event.street != current:
                current = Street(event.street)
                items.append(StreetItem(current))
            cards = [card for card in map(card_meta, split_board(event.card_text)) if card]
            items.append(BoardItem(current, cards))
        elif isinstance(event, ActionEvent):
            items.append(ActionItem(event.text))
    return items


def render_text(title: str, items: Iterable[TranscriptItem]) -> str:
    lines = [title]
    for item in items:
        if isinstance(item, SetupItem):
            cards = "".join(item.hero_cards)
            lines.append(f"Setup · Hero {item.hero_position} · {cards or '--'} · {item.effective_stack}bb")
        elif isinstance(item, StreetItem):
            lines.append(f"--- {item.street.value} ---")
        elif isinstance(item, BoardItem):
            lines.append(f"{item.street.value} : {''.join(card.label for card in item.cards)}")
        elif isinstance(item, ActionItem):
            lines.append(item.text)
    return "\n".join(lines)


def items_payload(items: Iterable[TranscriptItem]) -> List[dict]:
    payload: List[dict] = []
    for item in items:
        if isinstance(item, SetupItem):
            payload.append(
                {
                    "kind": "setup",
                    "hero_position": item.hero_position,
                    "effective_stack": item.effective_stack,
                    "hero_cards": list(item.hero_cards),
                }
            )
        elif isinstance(item, StreetItem):
            payload.append({"kind": "street", "street": item.street.value})
        elif isinstance(item, BoardItem):
            payload.append(
                {
                    "kind": "board",
                    "street": item.street.value,
                    "cards": [card.label for card in item.cards],
                }
            )
        elif isinstance(item, ActionItem):
            payload.append({"kind": "action", "text": item.text})
    return payload
