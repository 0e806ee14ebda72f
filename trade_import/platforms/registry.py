# trade_import/platforms/registry.py
import logging
from typing import Dict, List, Optional

from trade_import.domain.errors import SchemaDefinitionError
from .schema_models import PlatformSchema
from .transforms import get_transform_set, get_row_filter

logger = logging.getLogger(__name__)

DAS_TRADER_SCHEMA = PlatformSchema(
    id='das-trader',
    name='DAS Trader Pro',
    description='Import from DAS Trader Pro CSV export (Trade Log)',
    requires_date=True, # DAS only exports the time of each fill
    group_executions=True,
    columns={
        'symbol': ['Symb', 'Symbol'],
        'side': ['Side'],
        'quantity': ['Qty', 'Quantity'],
        'price': ['Price', 'Exec Price'],
        'timestamp': ['Time'],
        'fees': ['Commission', 'Comm'],
        'account': ['Account'],
        'order_type': ['Type'],
    },
    row_filter='das-trader-fills',
)

PROP_REPORTS_SCHEMA = PlatformSchema(
    id='prop-reports',
    name='PropReports',
    description='Import from PropReports detailed trade export',
    requires_date=False,
    group_executions=False, # Rows are already positions
    columns={
        'symbol': ['Symbol', 'Ticker', 'Instrument'],
        'side': ['Side', 'Direction', 'Type'],
        'quantity': ['Quantity', 'Qty', 'Shares', 'Size'],
        'price': ['Price', 'Entry Price', 'Avg Price', 'Average Price'],
        'timestamp': ['Date', 'Time', 'DateTime', 'Timestamp', 'Entry Time', 'Date/Time'],
        'fees': ['Commission', 'Comm', 'Fees', 'Total Fees'],
        'account': ['Account', 'Account Number'],
    },
    row_filter='prop-reports-trailer',
)

_PLATFORMS: Dict[str, PlatformSchema] = {}


def register_platform(schema: PlatformSchema, replace: bool = False) -> PlatformSchema:
    """Adds a schema after checking that the functions it names are registered."""
    if get_transform_set(schema.transform_set) is None:
        raise SchemaDefinitionError(f"Platform '{schema.id}' references unknown transform set '{schema.transform_set}'")
    if schema.row_filter is not None and get_row_filter(schema.row_filter) is None:
        raise SchemaDefinitionError(f"Platform '{schema.id}' references unknown row filter '{schema.row_filter}'")
    if schema.id in _PLATFORMS and not replace:
        raise SchemaDefinitionError(f"Platform '{schema.id}' is already registered")

    _PLATFORMS[schema.id] = schema
    logger.debug(f"Registered platform schema '{schema.id}' ({schema.name})")
    return schema


def unregister_platform(platform_id: str) -> None:
    _PLATFORMS.pop(platform_id, None)


def resolve_platform(platform_id: str) -> Optional[PlatformSchema]:
    return _PLATFORMS.get(platform_id)


def get_platform_by_name(name: str) -> Optional[PlatformSchema]:
    target = name.strip().lower()
    for schema in _PLATFORMS.values():
        if schema.name.lower() == target:
            return schema
    return None


def list_platforms() -> List[PlatformSchema]:
    return list(_PLATFORMS.values())


register_platform(DAS_TRADER_SCHEMA)
register_platform(PROP_REPORTS_SCHEMA)
