# trade_import/engine/trade_builder.py
import logging
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from trade_import.domain.enums import TradeDirection
from trade_import.domain.executions import Execution, GroupedPosition
from trade_import.domain.trades import Trade, TradeEntry, TradeExit
from trade_import.utils.id_generators import IdGenerator, RandomIdGenerator
import trade_import.config as config

logger = logging.getLogger(__name__)


def weighted_average_price(executions: Sequence[Execution]) -> Optional[Decimal]:
    """Quantity-weighted mean price, None for an empty side."""
    total_quantity = sum(e.quantity for e in executions)
    if total_quantity == 0:
        return None
    return sum((e.notional for e in executions), Decimal(0)) / total_quantity


def _signed_price_move(direction: TradeDirection, entry_price: Decimal, exit_price: Decimal) -> Decimal:
    if direction is TradeDirection.LONG:
        return exit_price - entry_price
    return entry_price - exit_price


class TradeBuilder:
    """Turns reconstructed positions (or single executions) into Trade records."""

    def __init__(self, id_generator: Optional[IdGenerator] = None,
                 cost_basis_method: str = config.COST_BASIS_METHOD):
        self.id_generator = id_generator or RandomIdGenerator()
        self.cost_basis_method = cost_basis_method

    def _entry(self, execution: Execution) -> TradeEntry:
        return TradeEntry(
            id=self.id_generator.new_id(),
            price=execution.price,
            quantity=execution.quantity,
            timestamp=execution.timestamp,
            fees=execution.fees,
            row_number=execution.row_number,
        )

    def _exits(self, executions: Sequence[Execution], direction: TradeDirection,
               avg_entry_price: Decimal) -> Tuple[TradeExit, ...]:
        exits: List[TradeExit] = []
        for e in executions:
            exit_pnl = _signed_price_move(direction, avg_entry_price, e.price) * e.quantity - e.fees
            exits.append(TradeExit(
                id=self.id_generator.new_id(),
                price=e.price,
                quantity=e.quantity,
                timestamp=e.timestamp,
                fees=e.fees,
                row_number=e.row_number,
                pnl=exit_pnl,
            ))
        return tuple(exits)

    def build_from_position(self, position: GroupedPosition) -> Trade:
        direction = position.direction
        entry_execs = position.entries
        exit_execs = position.exits

        total_entry_qty = sum(e.quantity for e in entry_execs)
        total_exit_qty = sum(e.quantity for e in exit_execs)
        avg_entry_price = weighted_average_price(entry_execs)
        avg_exit_price = weighted_average_price(exit_execs)

        total_fees = sum((e.fees for e in (*entry_execs, *exit_execs)), Decimal(0))

        pnl: Optional[Decimal] = None
        if avg_exit_price is not None and total_exit_qty > 0:
            pnl = _signed_price_move(direction, avg_entry_price, avg_exit_price) * total_exit_qty - total_fees

        closed_at = exit_execs[-1].timestamp if exit_execs and total_exit_qty == total_entry_qty else None

        trade = Trade(
            id=self.id_generator.new_id(),
            symbol=position.symbol,
            direction=direction,
            quantity=total_entry_qty,
            entry_price=avg_entry_price,
            exit_price=avg_exit_price,
            fees=total_fees,
            pnl=pnl,
            entries=tuple(self._entry(e) for e in entry_execs),
            exits=self._exits(exit_execs, direction, avg_entry_price),
            opened_at=entry_execs[0].timestamp,
            closed_at=closed_at,
            current_position_size=total_entry_qty - total_exit_qty,
            cost_basis_method=self.cost_basis_method,
            account=position.first_execution.account,
            source_row=position.first_execution.row_number,
        )
        logger.debug(f"Built {direction.name} trade {trade.symbol} qty={trade.quantity} entry={avg_entry_price} "
                     f"exit={avg_exit_price} pnl={pnl} closed={closed_at is not None}")
        return trade

    def build_from_execution(self, execution: Execution) -> Trade:
        """Direct path for platforms whose rows are already positions: always open, no exits."""
        direction = TradeDirection.from_opening_side(execution.side)
        return Trade(
            id=self.id_generator.new_id(),
            symbol=execution.symbol,
            direction=direction,
            quantity=execution.quantity,
            entry_price=execution.price,
            exit_price=None,
            fees=execution.fees,
            pnl=None,
            entries=(self._entry(execution),),
            exits=(),
            opened_at=execution.timestamp,
            closed_at=None,
            current_position_size=execution.quantity,
            cost_basis_method=self.cost_basis_method,
            account=execution.account,
            source_row=execution.row_number,
        )

    def build_all(self, positions: Sequence[GroupedPosition]) -> List[Trade]:
        return [self.build_from_position(p) for p in positions]
