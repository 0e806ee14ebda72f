# trade_import/parsers/row_normalizer.py
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from trade_import.domain.enums import LogicalField, REQUIRED_FIELDS
from trade_import.domain.errors import ValidationError, SchemaDefinitionError
from trade_import.domain.executions import Execution
from trade_import.platforms.schema_models import PlatformSchema
from trade_import.platforms.transforms import TransformSet, get_transform_set

logger = logging.getLogger(__name__)


def find_column(row: Dict[str, str], possible_names: Optional[List[str]]) -> Optional[str]:
    """
    Returns the row's actual key for the first alias that matches it
    case-insensitively, or None. No partial or fuzzy matching.
    """
    if not possible_names:
        return None
    for name in possible_names:
        target = name.lower()
        for key in row:
            if key.lower() == target:
                return key
    return None


def _resolve_transform_set(schema: PlatformSchema) -> TransformSet:
    transform_set = get_transform_set(schema.transform_set)
    if transform_set is None:
        raise SchemaDefinitionError(f"Platform '{schema.id}' references unknown transform set '{schema.transform_set}'")
    return transform_set


def normalize_row(row: Dict[str, str], schema: PlatformSchema,
                  trading_date: Optional[date], row_number: int) -> Execution:
    """
    Turns one parsed row into an Execution using the platform's column
    mapping and transforms. Raises ValidationError (with row context) when a
    required column is missing or a value does not parse.
    """
    transforms = _resolve_transform_set(schema)

    resolved: Dict[LogicalField, str] = {}
    for logical_field in REQUIRED_FIELDS:
        column = find_column(row, schema.columns.aliases_for(logical_field))
        if column is None:
            raise ValidationError(
                f"Missing required columns. Found: {', '.join(row.keys())}",
                row_number=row_number, row=row, column=logical_field.value,
            )
        resolved[logical_field] = column

    def _apply(logical_field: LogicalField, *args):
        column = resolved[logical_field]
        try:
            return transforms.for_field(logical_field)(row[column], *args)
        except ValidationError as e:
            raise e.with_context(row_number, row, column) from e
        except Exception as e:
            raise ValidationError(f"Invalid {logical_field.value}: {row[column]} ({e})",
                                  row_number=row_number, row=row, column=column) from e

    symbol = row[resolved[LogicalField.SYMBOL]].strip().upper()
    if not symbol:
        raise ValidationError("Symbol is empty", row_number=row_number, row=row,
                              column=resolved[LogicalField.SYMBOL])

    side = _apply(LogicalField.SIDE)
    price = _apply(LogicalField.PRICE)
    quantity = _apply(LogicalField.QUANTITY)
    timestamp = _apply(LogicalField.TIMESTAMP, trading_date)

    fees = None
    if transforms.fees is not None:
        fees_column = find_column(row, schema.columns.fees)
        if fees_column and row[fees_column]:
            resolved[LogicalField.FEES] = fees_column
            fees = _apply(LogicalField.FEES)

    account = _optional_value(row, schema.columns.account)
    order_type = _optional_value(row, schema.columns.order_type)

    execution = Execution(
        symbol=symbol,
        side=side,
        price=price,
        quantity=quantity,
        timestamp=timestamp,
        fees=fees if fees is not None else Decimal(0),
        account=account,
        order_type=order_type,
        row_number=row_number,
        raw_row=dict(row),
    )
    logger.debug(f"Row {row_number}: {execution.side.name} {execution.quantity} {execution.symbol} @ {execution.price} ({execution.timestamp.isoformat()})")
    return execution


def _optional_value(row: Dict[str, str], possible_names: Optional[List[str]]) -> Optional[str]:
    column = find_column(row, possible_names)
    if column and row[column]:
        return row[column]
    return None
