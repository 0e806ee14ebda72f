# trade_import/domain/trades.py
from dataclasses import dataclass, field, KW_ONLY
from datetime import datetime
from decimal import Decimal
import uuid
from typing import Any, Dict, Optional, Tuple

from .enums import TradeDirection


def _iso(ts: Optional[datetime]) -> Optional[str]:
    return ts.isoformat() if ts is not None else None


def _num(value: Optional[Decimal]) -> Optional[float]:
    # The persistence API speaks JSON numbers
    return float(value) if value is not None else None


@dataclass(frozen=True)
class TradeEntry:
    id: uuid.UUID
    price: Decimal
    quantity: int
    timestamp: datetime
    fees: Decimal = Decimal("0")
    _: KW_ONLY
    row_number: Optional[int] = None

    def to_api_payload(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "price": _num(self.price),
            "quantity": self.quantity,
            "timestamp": _iso(self.timestamp),
            "fees": _num(self.fees),
        }


@dataclass(frozen=True)
class TradeExit(TradeEntry):
    _: KW_ONLY
    pnl: Decimal = Decimal("0") # Realized on this exit's quantity against the average entry price

    def to_api_payload(self) -> Dict[str, Any]:
        payload = super().to_api_payload()
        payload["pnl"] = _num(self.pnl)
        return payload


@dataclass(frozen=True)
class Trade:
    """
    Canonical (partial) trade record handed to the persistence collaborator.
    Built once per reconstructed position or direct execution; never mutated.
    """
    id: uuid.UUID
    symbol: str
    direction: TradeDirection
    quantity: int # Aggregate entry quantity
    entry_price: Decimal # Quantity-weighted average
    exit_price: Optional[Decimal] # None while nothing has been exited
    fees: Decimal
    pnl: Optional[Decimal] # None while unrealized
    entries: Tuple[TradeEntry, ...]
    exits: Tuple[TradeExit, ...]
    opened_at: datetime
    closed_at: Optional[datetime]

    _: KW_ONLY
    current_position_size: int = 0
    cost_basis_method: str = "AVERAGE"
    account: Optional[str] = None
    source_row: Optional[int] = None # Row of the opening execution
    unrealized_pnl: Optional[Decimal] = field(default=None)

    def __post_init__(self):
        if not isinstance(self.direction, TradeDirection):
            raise TypeError(f"Trade.direction must be a TradeDirection enum member, got {type(self.direction)}")
        if not self.entries:
            raise ValueError(f"Trade for {self.symbol} requires at least one entry.")

    # Aliases kept for API consumers that read the lifecycle field names
    @property
    def average_entry_price(self) -> Decimal:
        return self.entry_price

    @property
    def total_fees(self) -> Decimal:
        return self.fees

    @property
    def realized_pnl(self) -> Decimal:
        return self.pnl if self.pnl is not None else Decimal("0")

    @property
    def exit_quantity(self) -> int:
        return sum(x.quantity for x in self.exits)

    @property
    def is_closed(self) -> bool:
        return self.closed_at is not None

    def to_api_payload(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "symbol": self.symbol,
            "trade_type": self.direction.value,
            "quantity": self.quantity,
            "entry_price": _num(self.entry_price),
            "exit_price": _num(self.exit_price),
            "fees": _num(self.fees),
            "pnl": _num(self.pnl),
            "entries": [e.to_api_payload() for e in self.entries],
            "exits": [x.to_api_payload() for x in self.exits],
            "current_position_size": self.current_position_size,
            "average_entry_price": _num(self.average_entry_price),
            "total_fees": _num(self.total_fees),
            "realized_pnl": _num(self.realized_pnl),
            "unrealized_pnl": _num(self.unrealized_pnl),
            "cost_basis_method": self.cost_basis_method,
            "opened_at": _iso(self.opened_at),
            "closed_at": _iso(self.closed_at),
        }
