# trade_import/utils/type_utils.py
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
from datetime import datetime, date, time, timezone

from dateutil import parser as dateutil_parser

# Currency symbols and thousands separators broker exports put around numbers
_NUMBER_NOISE_RE = re.compile(r"[$€£,]")

def safe_decimal(value: Any, default: Optional[Decimal] = None, raise_error: bool = False) -> Optional[Decimal]:
    """
    Safely converts a value to a Decimal.
    Handles None, empty strings, currency symbols and comma thousands separators
    ("$1,234.56" -> 1234.56). Accounting negatives "(12.50)" become -12.50.
    If default is provided, returns default on conversion error.
    If raise_error is True, re-raises InvalidOperation instead of returning default.
    """
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)): # float conversion is direct, can lead to precision issues if not careful
        return Decimal(str(value))

    s_value = _NUMBER_NOISE_RE.sub("", str(value)).strip()
    if not s_value:
        return default

    if s_value.startswith("(") and s_value.endswith(")"):
        s_value = "-" + s_value[1:-1].strip()

    try:
        return Decimal(s_value)
    except InvalidOperation as e:
        if raise_error:
            raise e
        return default

def parse_positive_int(value: Any) -> Optional[int]:
    """
    Parses a share/contract count such as "1,000".
    Returns None unless the value is a whole number greater than zero.
    """
    dec = safe_decimal(value)
    if dec is None or not dec.is_finite() or dec <= 0:
        return None
    if dec != dec.to_integral_value():
        return None
    return int(dec)

def parse_time_of_day(time_str: Optional[str]) -> Optional[time]:
    """
    Parses HH:MM, HH:MM:SS or HH:MM:SS.fff (fractional seconds up to microseconds).
    Returns None if the value is not a valid time of day.
    """
    if not time_str or not str(time_str).strip():
        return None

    parts = str(time_str).strip().split(":")
    if len(parts) < 2 or len(parts) > 3:
        return None
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = Decimal(parts[2]) if len(parts) == 3 else Decimal(0)
    except (ValueError, InvalidOperation):
        return None
    if not seconds.is_finite() or seconds < 0:
        return None

    whole_seconds = int(seconds)
    microseconds = int((seconds - whole_seconds) * 1_000_000)
    try:
        return time(hours, minutes, whole_seconds, microseconds)
    except ValueError:
        return None

# dateutil fills missing components from its default; two defaults that differ in
# year, month and day expose a value that never named a full date
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

def _parse_dated(value: str) -> Optional[datetime]:
    """dateutil parse that returns None unless the value carries year, month and day."""
    try:
        first, second = (dateutil_parser.parse(value, default=d) for d in _FILL_DEFAULTS)
    except (ValueError, TypeError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first

def parse_trade_date(date_str: Optional[str], default: Optional[date] = None) -> Optional[date]:
    """
    Parses the trading dates users type or exports carry (YYYY-MM-DD, YYYYMMDD, MM/DD/YYYY, etc.)
    Returns a datetime.date object or None.
    """
    if not date_str or not str(date_str).strip():
        return default

    s_date_str = str(date_str).strip()

    formats_to_try = [
        "%Y-%m-%d",         # 2024-01-02
        "%Y%m%d",           # 20240102
        "%m/%d/%Y",         # 01/02/2024
        "%d.%m.%Y",         # 02.01.2024
    ]

    for fmt in formats_to_try:
        try:
            return datetime.strptime(s_date_str.split(' ')[0], fmt).date() # Take only date part if time exists
        except ValueError:
            continue

    parsed = _parse_dated(s_date_str)
    return parsed.date() if parsed is not None else default

def parse_flexible_datetime(datetime_str: Optional[str], default: Optional[datetime] = None) -> Optional[datetime]:
    """
    Parses the free-form date/time strings platforms export.
    Returns a naive datetime.datetime object or `default`.
    """
    if not datetime_str or not str(datetime_str).strip():
        return default

    s_datetime_str = str(datetime_str).strip()

    formats_to_try = [
        "%m/%d/%Y %H:%M:%S", # PropReports fills
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%dT%H:%M:%S",
        "%m/%d/%Y %H:%M",
        "%Y-%m-%d",
    ]

    # Try specific formats first
    for fmt in formats_to_try:
        try:
            return datetime.strptime(s_datetime_str, fmt)
        except ValueError:
            continue

    # Fallback to dateutil.parser (slower but more flexible)
    parsed = _parse_dated(s_datetime_str)
    if parsed is None:
        return default
    if parsed.tzinfo is not None:
        # Same instant in UTC, then naive like every other timestamp
        parsed = parsed.astimezone(timezone.utc)
    return parsed.replace(tzinfo=None)
