# trade_import/platforms/transforms.py
"""
Value transforms and row filters, registered by id.

Platform schemas only name a transform set and a row filter; the pure
functions live here so schemas stay plain data (and can come from YAML).
Every transform takes the raw cell string and either returns a typed value
or raises ValidationError. The row normalizer attaches row context.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Dict, Optional

from trade_import.domain.enums import LogicalField, Side
from trade_import.domain.errors import ValidationError
from trade_import.utils.type_utils import (
    safe_decimal, parse_positive_int, parse_time_of_day, parse_flexible_datetime
)

logger = logging.getLogger(__name__)

RowFilter = Callable[[Dict[str, str]], bool]


@dataclass(frozen=True)
class TransformSet:
    id: str
    side: Callable[[str], Side]
    timestamp: Callable[[str, Optional[date]], datetime]
    price: Callable[[str], Decimal]
    quantity: Callable[[str], int]
    fees: Optional[Callable[[str], Decimal]] = None

    def for_field(self, logical_field: LogicalField) -> Optional[Callable]:
        return getattr(self, logical_field.value, None)


# --- Shared numeric transforms ---

def parse_price(value: str) -> Decimal:
    price = safe_decimal(value)
    if price is None or not price.is_finite():
        raise ValidationError(f"Invalid price: {value}")
    if price <= Decimal(0):
        raise ValidationError(f"Invalid price: {value} (must be positive)")
    return price

def parse_quantity(value: str) -> int:
    quantity = parse_positive_int(value)
    if quantity is None:
        raise ValidationError(f"Invalid quantity: {value} (must be a positive whole number)")
    return quantity

def parse_fees(value: str) -> Decimal:
    """Lenient: unparsable fees count as zero, sign is dropped (rebates and charges alike)."""
    fees = safe_decimal(value)
    if fees is None or not fees.is_finite():
        logger.debug(f"Unparsable fee value '{value}', using 0")
        return Decimal(0)
    return fees.copy_abs()


# --- DAS Trader Pro ---

def das_trader_side(value: str) -> Side:
    normalized = value.strip().upper()
    if normalized in ('B', 'BUY') or normalized.startswith('BOT'):
        return Side.BUY
    if normalized in ('S', 'SELL') or normalized.startswith('SOLD'):
        return Side.SELL
    raise ValidationError(f"Invalid side value: {value}")

def das_trader_timestamp(value: str, trading_date: Optional[date] = None) -> datetime:
    if trading_date is None:
        raise ValidationError("Date is required for DAS Trader imports")
    fill_time = parse_time_of_day(value)
    if fill_time is None:
        raise ValidationError(f"Invalid time format: {value}")
    return datetime.combine(trading_date, fill_time)

def das_trader_fills_only(row: Dict[str, str]) -> bool:
    """Trade logs with an Event column also list order events; only executions are fills."""
    for key, value in row.items():
        if key.strip().lower() == 'event':
            return value.strip().lower() == 'execute'
    return True


# --- PropReports ---

def prop_reports_side(value: str) -> Side:
    normalized = value.strip().upper()
    if normalized in ('LONG', 'BUY', 'B'):
        return Side.BUY
    if normalized in ('SHORT', 'SELL', 'S'):
        return Side.SELL
    raise ValidationError(f"Invalid side value: {value}")

def prop_reports_timestamp(value: str, trading_date: Optional[date] = None) -> datetime:
    timestamp = parse_flexible_datetime(value)
    if timestamp is None:
        raise ValidationError(f"Invalid timestamp: {value}")
    return timestamp

def prop_reports_no_trailer(row: Dict[str, str]) -> bool:
    """Drops the 'Page X/Y' lines PropReports appends to paged exports."""
    first_value = next(iter(row.values()), '')
    return not first_value.startswith('Page ')


# --- Registries ---

_TRANSFORM_SETS: Dict[str, TransformSet] = {}
_ROW_FILTERS: Dict[str, RowFilter] = {}

def register_transform_set(transform_set: TransformSet) -> None:
    if transform_set.id in _TRANSFORM_SETS:
        logger.warning(f"Replacing registered transform set '{transform_set.id}'")
    _TRANSFORM_SETS[transform_set.id] = transform_set

def register_row_filter(filter_id: str, row_filter: RowFilter) -> None:
    if filter_id in _ROW_FILTERS:
        logger.warning(f"Replacing registered row filter '{filter_id}'")
    _ROW_FILTERS[filter_id] = row_filter

def get_transform_set(transform_set_id: str) -> Optional[TransformSet]:
    return _TRANSFORM_SETS.get(transform_set_id)

def get_row_filter(filter_id: Optional[str]) -> Optional[RowFilter]:
    if filter_id is None:
        return None
    return _ROW_FILTERS.get(filter_id)


register_transform_set(TransformSet(
    id='das-trader',
    side=das_trader_side,
    timestamp=das_trader_timestamp,
    price=parse_price,
    quantity=parse_quantity,
    fees=parse_fees,
))
register_transform_set(TransformSet(
    id='prop-reports',
    side=prop_reports_side,
    timestamp=prop_reports_timestamp,
    price=parse_price,
    quantity=parse_quantity,
    fees=parse_fees,
))
register_row_filter('das-trader-fills', das_trader_fills_only)
register_row_filter('prop-reports-trailer', prop_reports_no_trailer)
