# trade_import/reporting/reporting_utils.py
import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

import trade_import.config as config
from trade_import.utils.type_utils import safe_decimal


logger = logging.getLogger(__name__)

def quantize_for_display(val: Optional[Decimal | int | float | str], exponent: Decimal) -> Decimal:
    """Quantize a value to `exponent` for output; None and unparseable values become zero."""
    dec = safe_decimal(val)
    if dec is None or not dec.is_finite():
        if val is not None:
            logger.error(f"Could not convert value '{val}' of type {type(val)} to Decimal. Using zero.")
        dec = Decimal(0)
    return dec.quantize(exponent, rounding=ROUND_HALF_UP)

def _q(val: Optional[Decimal | int | float | str]) -> Decimal:
    """Totals (fees, P&L)."""
    return quantize_for_display(val, config.OUTPUT_PRECISION_AMOUNTS)

def _q_price(val: Optional[Decimal | int | float | str]) -> Decimal:
    """Per-share prices."""
    return quantize_for_display(val, config.OUTPUT_PRECISION_PRICE)

def format_timestamp(ts: Optional[datetime]) -> str:
    if ts is None:
        return "-"
    return ts.strftime("%Y-%m-%d %H:%M:%S")

def format_optional_amount(val: Optional[Decimal]) -> str:
    """'-' for values that do not exist yet (e.g. P&L of an open trade)."""
    if val is None:
        return "-"
    return str(_q(val))
