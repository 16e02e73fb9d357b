from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .betting import evaluate
from .cards import normalize_card, parse_label
from .models import (
    ActionEvent,
    ActionKind,
    BettingState,
    BoardEvent,
    Event,
    Position,
    Street,
    TableConfig,
)
from .transcript import HandSetup, TranscriptItem, build_items, describe_action, render_text

LOGGER = logging.getLogger(__name__)

# HandSession holds what the notation screen edits: the event log, the
# setup fields, the card slots and the saved hands. Betting numbers are
# always re-derived from the log.

HERO_SLOTS = ("H1", "H2")
FLOP_SLOTS = ("F1", "F2", "F3")
SLOT_ORDER = ("H1", "H2", "F1", "F2", "F3", "T", "R")
BOARD_SLOTS = {
    Street.FLOP: FLOP_SLOTS,
    Street.TURN: ("T",),
    Street.RIVER: ("R",),
}


@dataclass
class SavedHand:
    title: str
    items: List[TranscriptItem]

    @property
    def text(self) -> str:
        return render_text(self.title, self.items)


@dataclass
class HandSession:
    config: TableConfig = field(default_factory=TableConfig)
    events: List[Event] = field(default_factory=list)
    hero_position: Optional[Position] = None
    effective_stack: Optional[str] = None
    slots: Dict[str, str] = field(default_factory=lambda: {slot: "" for slot in SLOT_ORDER})
    selected_slot: Optional[str] = None
    saved_hands: List[SavedHand] = field(default_factory=list)
    hands_recorded: int = 0

    # Derived view -----------------------------------------------------

    @property
    def state(self) -> BettingState:
        return evaluate(self.events, self.config)

    @property
    def visible_positions(self) -> List[Position]:
        return _visible_positions(self.state)

    @property
    def can_deal_next_street(self) -> bool:
        return _can_deal_next_street(self.state)

    @property
    def setup(self) -> HandSetup:
        return HandSetup(
            hero_position=self.hero_position.value if self.hero_position else None,
            effective_stack=self.effective_stack,
            hero_cards=[self.slots[slot] for slot in HERO_SLOTS if self.slots[slot]],
        )

    def used_cards(self) -> set[str]:
        return {card for card in self.slots.values() if card}

    # Setup and card slots ---------------------------------------------

    def update_setup(self, hero_position: Optional[str] = None, effective_stack: Optional[str] = None) -> None:
        if hero_position is not None:
            self.hero_position = Position(hero_position) if hero_position else None
        if effective_stack is not None:
            self.effective_stack = effective_stack.strip() or None

    def select_slot(self, slot: str) -> None:
        if slot not in SLOT_ORDER:
            raise ValueError(f"Unknown slot {slot}")
        self.selected_slot = slot

    def pick_card(self, code: str) -> None:
        if not self.selected_slot:
            raise ValueError("Select a slot first")
        card = parse_label(normalize_card(code)).label
        if self.slots[self.selected_slot] == card:
            return
        if card in self.used_cards():
            raise ValueError(f"Card {card} already in use")
        self.slots[self.selected_slot] = card
        self.selected_slot = _next_slot(self.selected_slot)

    def clear_hero_cards(self) -> None:
        for slot in HERO_SLOTS:
            self.slots[slot] = ""

    # Event log --------------------------------------------------------

    def record_action(self, position: Optional[str], action: Optional[str], size: Optional[str] = None) -> ActionEvent:
        if not position or not action:
            raise ValueError("Position and action required")
        seat = Position(position)
        kind = ActionKind(action)
        state = self.state
        if state.folded[seat]:
            raise ValueError(f"{seat.value} has folded")

        size_text = str(size).strip() if size is not None else ""
        if kind == ActionKind.RAISE and not size_text:
            raise ValueError("Raise requires size")
        stored_size = size_text if kind in (ActionKind.RAISE, ActionKind.ALLIN) and size_text else None

        event = ActionEvent(
            position=seat,
            action=kind,
            size=stored_size,
            text=describe_action(seat, kind, stored_size, state.street, state.to_call),
        )
        self.events.append(event)
        return event

    def record_board(self, street: str) -> BoardEvent:
        target = Street(street)
        if target not in BOARD_SLOTS:
            raise ValueError(f"No board cards for {target.value}")
        cards = [normalize_card(self.slots[slot]) for slot in BOARD_SLOTS[target]]
        if not all(cards):
            raise ValueError(f"{target.value} cards not selected")
        event = BoardEvent(street=target, card_text="".join(cards))
        # The cards fill in a bare "next street" marker rather than dealing the street twice.
        if self.events and self.events[-1] == BoardEvent(street=target, card_text=""):
            self.events[-1] = event
        else:
            self.events.append(event)
        return event

    def next_street(self) -> BoardEvent:
        if not self.can_deal_next_street:
            raise ValueError("Next street marker only allowed preflop")
        event = BoardEvent(street=Street.FLOP, card_text="")
        self.events.append(event)
        return event

    def undo(self) -> Optional[Event]:
        if not self.events:
            return None
        return self.events.pop()

    def clear(self) -> None:
        self.events.clear()

    def end_hand(self) -> SavedHand:
        if not self.events:
            raise ValueError("Nothing recorded")
        self.hands_recorded += 1
        saved = SavedHand(title=f"Hand #{self.hands_recorded}", items=build_items(self.events, self.setup))
        self.saved_hands.insert(0, saved)
        LOGGER.info("Saved %s (%s events)", saved.title, len(self.events))

        self.events.clear()
        for slot in SLOT_ORDER:
            self.slots[slot] = ""
        self.selected_slot = None
        return saved

    def export(self, index: int = 0) -> SavedHand:
        if index < 0 or index >= len(self.saved_hands):
            raise IndexError("No saved hand at that index")
        return self.saved_hands[index]

    # Payloads ---------------------------------------------------------

    def state_payload(self) -> Dict[str, object]:
        state = self.state
        return {
            "betting": state.to_payload(),
            "visible_positions": [position.value for position in _visible_positions(state)],
            "can_deal_next_street": _can_deal_next_street(state),
            "setup": self.setup.summary(),
            "slots": dict(self.slots),
            "selected_slot": self.selected_slot,
            "log": [_event_label(event) for event in self.events],
            "saved_hands": [saved.title for saved in self.saved_hands],
        }


def _visible_positions(state: BettingState) -> List[Position]:
    return state.active_positions()


def _can_deal_next_street(state: BettingState) -> bool:
    return state.street == Street.PREFLOP


def _next_slot(slot: str) -> str:
    idx = SLOT_ORDER.index(slot)
    return SLOT_ORDER[idx + 1] if idx < len(SLOT_ORDER) - 1 else slot


def _event_label(event: Event) -> str:
    if isinstance(event, BoardEvent):
        return f"{Street(event.street).value} : {event.card_text}"
    return event.text
