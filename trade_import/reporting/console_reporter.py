# trade_import/reporting/console_reporter.py
import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List

from trade_import.domain.results import ImportResult
from trade_import.domain.trades import Trade
from trade_import.platforms.schema_models import PlatformSchema
from trade_import.reporting.reporting_utils import _q, _q_price, format_timestamp, format_optional_amount


logger = logging.getLogger(__name__)


def print_platform_list(platforms: List[PlatformSchema]):
    print("\n--- Supported Platforms ---")
    print(f"  {'ID':<20} | {'Name':<20} | {'Date?':<5} | {'Grouped':<7} | Description")
    print("  " + "-" * 90)
    for schema in platforms:
        print(f"  {schema.id:<20} | {schema.name:<20} | {'yes' if schema.requires_date else 'no':<5} | "
              f"{'yes' if schema.group_executions else 'no':<7} | {schema.description}")
    print("  " + "-" * 90)


def print_import_summary(result: ImportResult, source_name: str = ""):
    logger.info(f"Generating console import summary for {source_name or 'input'}...")
    stats = result.statistics

    header = f"\n--- Import Summary{f' for {source_name}' if source_name else ''}"
    if result.platform_id:
        header += f" (platform: {result.platform_id})"
    print(header + " ---")
    print(f"  Rows parsed:            {stats.total_rows}")
    print(f"  Malformed rows skipped: {stats.skipped_rows}")
    print(f"  Rows filtered out:      {stats.filtered_rows}")
    print(f"  Trades built:           {stats.valid_trades}")
    print(f"  Possible duplicates:    {stats.duplicates}")
    print(f"  Row errors:             {stats.errors}")
    print(f"  Warnings:               {stats.warnings}")
    print(f"  Status:                 {'OK' if result.success else 'COMPLETED WITH ERRORS'}")

    if result.trades:
        print_trades_table(list(result.trades))
        print_symbol_totals(list(result.trades))
    else:
        print("\n  No trades were built from this file.")

    if result.errors:
        print("\n  Row Errors")
        print("  " + "-" * 80)
        for err in result.errors:
            column_info = f" [{err.column}]" if err.column else ""
            print(f"  Row {err.row:>5}{column_info}: {err.message}")

    if result.warnings:
        print("\n  Warnings")
        print("  " + "-" * 80)
        for warning in result.warnings:
            print(f"  Row {warning.row:>5} ({warning.type.value}): {warning.message}")
    print("")


def print_trades_table(trades: List[Trade]):
    print("\n  Trades")
    print("  " + "-" * 118)
    print(f"  {'Symbol':<8} | {'Dir':<5} | {'Qty':>7} | {'Open':>7} | {'Entry':>11} | {'Exit':>11} | "
          f"{'Fees':>9} | {'P&L':>11} | {'Opened':<19} | {'Closed':<19}")
    print("  " + "-" * 118)
    for t in trades:
        exit_price = str(_q_price(t.exit_price)) if t.exit_price is not None else "-"
        print(f"  {t.symbol:<8} | {t.direction.value:<5} | {t.quantity:>7} | {t.current_position_size:>7} | "
              f"{_q_price(t.entry_price):>11} | {exit_price:>11} | {_q(t.fees):>9} | "
              f"{format_optional_amount(t.pnl):>11} | {format_timestamp(t.opened_at):<19} | "
              f"{format_timestamp(t.closed_at):<19}")
    print("  " + "-" * 118)


def print_symbol_totals(trades: List[Trade]):
    """Realized P&L and fees per symbol; open trades contribute their fees only."""
    totals: Dict[str, Dict[str, Decimal]] = defaultdict(lambda: {'pnl': Decimal(0), 'fees': Decimal(0)})
    closed_counts: Dict[str, int] = defaultdict(int)
    for t in trades:
        totals[t.symbol]['pnl'] += t.realized_pnl
        totals[t.symbol]['fees'] += t.total_fees
        if t.is_closed:
            closed_counts[t.symbol] += 1

    print("\n  Realized P&L per Symbol")
    print("  " + "-" * 60)
    print(f"  {'Symbol':<10} | {'Closed':>6} | {'Fees':>14} | {'Realized P&L':>18}")
    print("  " + "-" * 60)
    grand_total = Decimal(0)
    for symbol in sorted(totals):
        grand_total += totals[symbol]['pnl']
        print(f"  {symbol:<10} | {closed_counts[symbol]:>6} | {_q(totals[symbol]['fees']):>14} | {_q(totals[symbol]['pnl']):>18}")
    print("  " + "-" * 60)
    print(f"  {'Total':<10} | {'':>6} | {'':>14} | {_q(grand_total):>18}")
