# trade_import/utils/decimal_context.py
import decimal
import logging
from typing import Optional

import trade_import.config as config

logger = logging.getLogger(__name__)

FALLBACK_ROUNDING_MODE = decimal.ROUND_HALF_UP


def resolve_rounding_mode(name: str) -> str:
    """Maps a configured name like 'ROUND_HALF_EVEN' to the decimal constant, falling back to ROUND_HALF_UP."""
    mode = getattr(decimal, name, None) if name.startswith("ROUND_") else None
    if not isinstance(mode, str):
        logger.warning(f"Invalid DECIMAL_ROUNDING_MODE '{name}'. Using {FALLBACK_ROUNDING_MODE} instead.")
        return FALLBACK_ROUNDING_MODE
    return mode


def apply_decimal_context(precision: Optional[int] = None, rounding_mode: Optional[str] = None) -> decimal.Context:
    """Configures the current thread's Decimal context from config (or the given overrides) and returns it."""
    context = decimal.getcontext()
    context.prec = precision if precision is not None else config.INTERNAL_CALCULATION_PRECISION
    context.rounding = resolve_rounding_mode(rounding_mode or config.DECIMAL_ROUNDING_MODE)
    logger.debug(f"Decimal context: precision {context.prec}, rounding {context.rounding}")
    return context
