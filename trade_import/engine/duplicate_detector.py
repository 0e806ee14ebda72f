# trade_import/engine/duplicate_detector.py
import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Sequence, Set, Tuple

from trade_import.domain.enums import WarningType
from trade_import.domain.results import ImportRowWarning
from trade_import.domain.trades import Trade

logger = logging.getLogger(__name__)


def get_duplicate_key(trade: Trade) -> Tuple[str, datetime, Decimal]:
    return (trade.symbol, trade.opened_at, trade.entry_price)


def _warning_row(trade: Trade, index: int) -> int:
    # Trades without a source row fall back to their position in the list (+2 for header and 1-basing)
    return trade.source_row if trade.source_row is not None else index + 2


def detect_duplicates(trades: Sequence[Trade]) -> List[ImportRowWarning]:
    """
    Flags every trade whose (symbol, opened_at, entry_price) was already seen.
    The first occurrence of a key is never flagged and nothing is removed.
    """
    warnings: List[ImportRowWarning] = []
    seen: Set[Tuple[str, datetime, Decimal]] = set()

    for index, trade in enumerate(trades):
        key = get_duplicate_key(trade)
        if key in seen:
            warnings.append(ImportRowWarning(
                row=_warning_row(trade, index),
                type=WarningType.DUPLICATE,
                message=f"Possible duplicate trade: {trade.symbol} at {trade.entry_price}",
            ))
        seen.add(key)

    if warnings:
        logger.warning(f"Detected {len(warnings)} possible duplicate trade(s).")
    return warnings


def detect_overfilled_positions(trades: Sequence[Trade]) -> List[ImportRowWarning]:
    """
    Flags positions left open because the closing side overshot the entry
    quantity (e.g. bought 100, sold 150). They are kept as open trades.
    """
    warnings: List[ImportRowWarning] = []
    for index, trade in enumerate(trades):
        if trade.exit_quantity > trade.quantity:
            warnings.append(ImportRowWarning(
                row=_warning_row(trade, index),
                type=WarningType.UNUSUAL_VALUE,
                message=(f"{trade.symbol} {trade.direction.name} position exited {trade.exit_quantity} "
                         f"against {trade.quantity} entered; left open"),
            ))
    if warnings:
        logger.warning(f"Detected {len(warnings)} over-filled position(s).")
    return warnings
