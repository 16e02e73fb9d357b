from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation, getcontext
from typing import Iterable, Optional

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
)

LOGGER = logging.getLogger(__name__)

# evaluate() replays the whole log from the blinds on every call. Nothing is
# cached between calls; malformed events are skipped, never raised.

ZERO = Decimal("0")


def parse_size(raw: object) -> Optional[Decimal]:
    """Return a finite positive Decimal for ``raw`` or None."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        size = raw if isinstance(raw, Decimal) else Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        return None
    if not size.is_finite() or size <= 0:
        return None
    # Exponents this large overflow once added to the pot.
    if size.adjusted() > getcontext().Emax // 2:
        return None
    return size


def evaluate(events: Iterable[Optional[Event]], config: Optional[TableConfig] = None) -> BettingState:
    state = BettingState.initial(config or TableConfig())

    for event in events:
        if isinstance(event, BoardEvent):
            _apply_board(state, event)
        elif isinstance(event, ActionEvent):
            _apply_action(state, event)
        else:
            LOGGER.debug("Skipping unsupported event %r", event)

    if state.street == Street.PREFLOP:
        _sync_preflop(state)
    return state


def _apply_board(state: BettingState, event: BoardEvent) -> None:
    try:
        street = Street(event.street)
    except ValueError:
        LOGGER.debug("Skipping board event with unknown street %r", event.street)
        return
    if street.order < state.street.order:
        LOGGER.debug("Ignoring board event for %s while on %s", street.value, state.street.value)
        return

    # Anyone still live who never acted on the closing street is treated as folded.
    for position in POSITIONS:
        if not state.folded[position] and not state.acted_this_street[position]:
            state.folded[position] = True

    state.street = street
    for position in POSITIONS:
        state.acted_this_street[position] = False
        state.street_contribution[position] = ZERO
    state.to_call = ZERO


def _apply_action(state: BettingState, event: ActionEvent) -> None:
    try:
        position = Position(event.position)
    except ValueError:
        LOGGER.debug("Skipping action for unknown position %r", event.position)
        return
    if state.folded[position]:
        LOGGER.debug("Skipping action for folded seat %s", position.value)
        return

    state.acted_this_street[position] = True

    try:
        action: Optional[ActionKind] = ActionKind(event.action)
    except ValueError:
        LOGGER.debug("Unknown action %r for %s treated as no-op", event.action, position.value)
        action = None

    if action == ActionKind.FOLD:
        state.folded[position] = True
    elif state.street == Street.PREFLOP:
        _apply_preflop(state, position, action, parse_size(event.size))
    else:
        _apply_postflop(state, position, action, parse_size(event.size))

    if state.street == Street.PREFLOP:
        _sync_preflop(state)


def _apply_preflop(
    state: BettingState,
    position: Position,
    action: Optional[ActionKind],
    size: Optional[Decimal],
) -> None:
    if action == ActionKind.CALL:
        _commit_to(state, position, state.last_raise_to)
    elif action == ActionKind.RAISE:
        if size is None:
            return
        _commit_to(state, position, size)
        state.last_raise_to = size
    elif action == ActionKind.ALLIN:
        if size is None:
            _commit_to(state, position, state.last_raise_to)
        else:
            _commit_to(state, position, size)
            state.last_raise_to = size


def _apply_postflop(
    state: BettingState,
    position: Position,
    action: Optional[ActionKind],
    size: Optional[Decimal],
) -> None:
    if action == ActionKind.CALL:
        _contribute_to(state, position, state.to_call)
    elif action == ActionKind.RAISE:
        # No CALL fallback here, unlike ALL-IN below.
        if size is None:
            return
        _contribute_to(state, position, size)
        state.to_call = max(state.to_call, state.street_contribution[position])
    elif action == ActionKind.ALLIN:
        if size is None:
            _contribute_to(state, position, state.to_call)
        else:
            _contribute_to(state, position, size)
            state.to_call = max(state.to_call, state.street_contribution[position])


def _commit_to(state: BettingState, position: Position, target: Decimal) -> None:
    # Preflop amounts are absolute totals for the hand.
    previous = state.committed[position]
    updated = max(previous, target)
    state.committed[position] = updated
    state.pot += updated - previous


def _contribute_to(state: BettingState, position: Position, target: Decimal) -> None:
    # Postflop amounts are totals for the current street only.
    previous = state.street_contribution[position]
    delta = max(previous, target) - previous
    if delta <= 0:
        return
    state.street_contribution[position] = previous + delta
    state.committed[position] += delta
    state.pot += delta


def _sync_preflop(state: BettingState) -> None:
    state.street_contribution = dict(state.committed)
    state.to_call = state.last_raise_to
