from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Dict, Optional, Union


class Position(str, Enum):
    UTG = "UTG"
    HJ = "HJ"
    CO = "CO"
    BTN = "BTN"
    SB = "SB"
    BB = "BB"


POSITIONS = list(Position)


class Street(str, Enum):
    PREFLOP = "PREFLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"

    @property
    def order(self) -> int:
        return STREET_ORDER.index(self)


STREET_ORDER = [Street.PREFLOP, Street.FLOP, Street.TURN, Street.RIVER]


class ActionKind(str, Enum):
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    RAISE = "RAISE"
    ALLIN = "ALL-IN"


@dataclass
class TableConfig:
    sb: Decimal = Decimal("0.5")
    bb: Decimal = Decimal("1")


@dataclass(frozen=True)
class BoardEvent:
    # Marks the start of a new street; card_text is display-only.
    street: Street
    card_text: str = ""


@dataclass(frozen=True)
class ActionEvent:
    position: Union[Position, str]
    action: Union[ActionKind, str]
    size: Optional[object] = None
    text: str = ""


Event = Union[BoardEvent, ActionEvent]


def format_amount(value: object) -> str:
    """Render a bb amount without trailing zeros ("3", "2.5"); junk renders as "0"."""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return "0"
    if not amount.is_finite():
        return "0"
    if amount == amount.to_integral_value():
        return str(int(amount))
    return format(amount.normalize(), "f")


def _per_seat(value: object) -> Dict[Position, object]:
    return {position: value for position in POSITIONS}


@dataclass
class BettingState:
    """Derived betting view of a single hand.

    ``committed`` is cumulative over the whole hand, ``street_contribution``
    covers the current street only. ``last_raise_to`` is preflop bookkeeping:
    the absolute target of the most recent preflop raise.
    """

    pot: Decimal
    committed: Dict[Position, Decimal]
    street_contribution: Dict[Position, Decimal]
    to_call: Decimal
    last_raise_to: Decimal
    street: Street = Street.PREFLOP
    folded: Dict[Position, bool] = field(default_factory=lambda: _per_seat(False))
    acted_this_street: Dict[Position, bool] = field(default_factory=lambda: _per_seat(False))

    @classmethod
    def initial(cls, config: TableConfig) -> "BettingState":
        committed: Dict[Position, Decimal] = _per_seat(Decimal("0"))
        committed[Position.SB] = Decimal(config.sb)
        committed[Position.BB] = Decimal(config.bb)
        return cls(
            pot=sum(committed.values(), Decimal("0")),
            committed=committed,
            street_contribution=dict(committed),
            to_call=Decimal(config.bb),
            last_raise_to=Decimal(config.bb),
        )

    def active_positions(self) -> list[Position]:
        return [position for position in POSITIONS if not self.folded[position]]

    def to_payload(self) -> Dict[str, object]:
        return {
            "street": self.street.value,
            "pot": format_amount(self.pot),
            "to_call": format_amount(self.to_call),
            "last_raise_to": format_amount(self.last_raise_to),
            "seats": [
                {
                    "position": position.value,
                    "committed": format_amount(self.committed[position]),
                    "street_contribution": format_amount(self.street_contribution[position]),
                    "has_folded": self.folded[position],
                    "acted": self.acted_this_street[position],
                }
                for position in POSITIONS
            ],
        }
