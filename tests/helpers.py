from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional, Tuple

from notation.betting import evaluate
from notation.models import ActionEvent, ActionKind, BettingState, BoardEvent, Event, Position, Street


def act(position: str, action: str, size: Optional[object] = None) -> ActionEvent:
    return ActionEvent(position=position, action=action, size=size)


def board(street: str, cards: str = "") -> BoardEvent:
    return BoardEvent(street=Street(street), card_text=cards)


def build_log(steps: Iterable[Tuple]) -> list[Event]:
    """Turn ("BTN", "RAISE", 3) / ("FLOP", "AsKd7c") tuples into events."""
    events: list[Event] = []
    for step in steps:
        if step[0] in Street.__members__:
            events.append(board(*step))
        else:
            events.append(act(*step))
    return events


def assert_consistent(state: BettingState) -> None:
    assert state.pot == sum(state.committed.values(), Decimal("0"))


def amounts(state: BettingState) -> dict[str, Decimal]:
    return {position.value: state.committed[position] for position in Position}


def replay_prefixes(events: list[Event]) -> list[BettingState]:
    return [evaluate(events[:idx]) for idx in range(len(events) + 1)]


D = Decimal
ALLIN = ActionKind.ALLIN.value
