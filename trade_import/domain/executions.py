# trade_import/domain/executions.py
from dataclasses import dataclass, field, KW_ONLY
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Tuple

from .enums import Side, TradeDirection


@dataclass(frozen=True)
class Execution:
    """One buy or sell fill extracted from a broker export row."""
    symbol: str # Upper-cased
    side: Side
    price: Decimal # Per unit, positive
    quantity: int # Always positive; direction comes from side
    timestamp: datetime

    _: KW_ONLY
    fees: Decimal = Decimal("0")
    account: Optional[str] = None
    order_type: Optional[str] = None
    row_number: Optional[int] = None # Source line number in the CSV (header is line 1)
    raw_row: Dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        if not isinstance(self.side, Side):
            raise TypeError(f"Execution.side must be a Side enum member, got {type(self.side)}")
        if not self.symbol:
            raise ValueError("Execution.symbol cannot be empty.")
        if not isinstance(self.price, Decimal) or not self.price.is_finite():
            raise ValueError(f"Execution.price must be a finite Decimal: {self.price}")
        if not isinstance(self.quantity, int) or self.quantity <= 0:
            raise ValueError(f"Execution.quantity must be a positive int: {self.quantity}")
        if self.fees < Decimal("0"):
            raise ValueError(f"Execution.fees must be non-negative: {self.fees}")

    @property
    def notional(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class GroupedPosition:
    """
    One round trip for one symbol.
    Direction is fixed by the side of the first execution. A closed group
    has equal bought and sold quantity; the trailing group of a stream may
    still be open.
    """
    symbol: str
    buys: Tuple[Execution, ...]
    sells: Tuple[Execution, ...]
    first_execution: Execution
    direction: TradeDirection

    @property
    def total_bought(self) -> int:
        return sum(e.quantity for e in self.buys)

    @property
    def total_sold(self) -> int:
        return sum(e.quantity for e in self.sells)

    @property
    def is_closed(self) -> bool:
        return self.total_bought == self.total_sold

    @property
    def entries(self) -> Tuple[Execution, ...]:
        return self.buys if self.direction is TradeDirection.LONG else self.sells

    @property
    def exits(self) -> Tuple[Execution, ...]:
        return self.sells if self.direction is TradeDirection.LONG else self.buys
