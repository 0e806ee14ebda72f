# trade_import/engine/position_reconstructor.py
import logging
from typing import Dict, List, Optional, Sequence

from trade_import.domain.enums import Side, TradeDirection
from trade_import.domain.executions import Execution, GroupedPosition
from trade_import.utils.sorting_utils import sort_executions_chronologically

logger = logging.getLogger(__name__)


class PositionAccumulator:
    """
    Running state of the position currently being built for one symbol.
    Buys and sells are collected separately regardless of direction, so
    adding to a position and scaling out both land here.
    """

    def __init__(self, symbol: str):
        self.symbol = symbol
        self.buys: List[Execution] = []
        self.sells: List[Execution] = []
        self.direction: Optional[TradeDirection] = None
        self.bought_quantity = 0
        self.sold_quantity = 0

    @property
    def is_open(self) -> bool:
        return self.direction is not None

    @property
    def is_flat(self) -> bool:
        return self.bought_quantity == self.sold_quantity

    def add(self, execution: Execution) -> None:
        if not self.is_open:
            self.direction = TradeDirection.from_opening_side(execution.side)
            logger.debug(f"{self.symbol}: opening {self.direction.name} position with row {execution.row_number}")

        if execution.side is Side.BUY:
            self.buys.append(execution)
            self.bought_quantity += execution.quantity
        else:
            self.sells.append(execution)
            self.sold_quantity += execution.quantity

    def snapshot(self) -> GroupedPosition:
        if self.direction is None:
            raise ValueError(f"No open position for {self.symbol} to snapshot.")
        opening_side_executions = self.buys if self.direction is TradeDirection.LONG else self.sells
        return GroupedPosition(
            symbol=self.symbol,
            buys=tuple(self.buys),
            sells=tuple(self.sells),
            first_execution=opening_side_executions[0],
            direction=self.direction,
        )

    def reset(self) -> None:
        self.buys = []
        self.sells = []
        self.direction = None
        self.bought_quantity = 0
        self.sold_quantity = 0


def reconstruct_positions(executions: Sequence[Execution]) -> List[GroupedPosition]:
    """
    Partitions one symbol's executions (already in chronological order) into
    round trips using a running balance.

    The first execution after flat opens a position and fixes its direction.
    Every later execution is added to its side; as soon as bought and sold
    quantity are exactly equal the position is emitted and the state resets.
    Whatever is still pending at the end is emitted as one open position.
    Over-fills never close a position, there is no tolerance.
    """
    positions: List[GroupedPosition] = []
    if not executions:
        return positions

    accumulator = PositionAccumulator(executions[0].symbol)

    for execution in executions:
        if execution.symbol != accumulator.symbol:
            raise ValueError(f"reconstruct_positions expects a single symbol, got {execution.symbol} "
                             f"in a stream of {accumulator.symbol}")
        opening = not accumulator.is_open
        accumulator.add(execution)

        # The opening fill alone can never balance the position
        if not opening and accumulator.is_flat:
            positions.append(accumulator.snapshot())
            logger.debug(f"{accumulator.symbol}: closed {accumulator.direction.name} position "
                         f"({accumulator.bought_quantity} bought / {accumulator.sold_quantity} sold)")
            accumulator.reset()

    if accumulator.is_open and (accumulator.buys or accumulator.sells):
        logger.debug(f"{accumulator.symbol}: position still open at end of stream "
                     f"({accumulator.bought_quantity} bought / {accumulator.sold_quantity} sold)")
        positions.append(accumulator.snapshot())

    return positions


def group_executions_by_symbol(executions: Sequence[Execution]) -> Dict[str, List[Execution]]:
    """
    Stable-sorts executions by timestamp and splits them per symbol.
    Symbols appear in order of their first execution in time.
    """
    by_symbol: Dict[str, List[Execution]] = {}
    for execution in sort_executions_chronologically(executions):
        by_symbol.setdefault(execution.symbol, []).append(execution)
    return by_symbol


def reconstruct_all_positions(executions: Sequence[Execution]) -> List[GroupedPosition]:
    positions: List[GroupedPosition] = []
    for symbol, symbol_executions in group_executions_by_symbol(executions).items():
        symbol_positions = reconstruct_positions(symbol_executions)
        logger.info(f"{symbol}: {len(symbol_executions)} executions -> {len(symbol_positions)} position(s)")
        positions.extend(symbol_positions)
    return positions
