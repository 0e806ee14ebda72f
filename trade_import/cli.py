# trade_import/cli.py
import argparse
from datetime import date

import trade_import.config as config # For default platform and schema file
from trade_import.utils.type_utils import parse_trade_date


def _trading_date(value: str) -> date:
    trading_date = parse_trade_date(value)
    if trading_date is None:
        raise argparse.ArgumentTypeError(f"invalid trading date '{value}', expected e.g. YYYY-MM-DD")
    return trading_date


def parse_arguments(argv=None):
    """Parses command line arguments for the application."""
    parser = argparse.ArgumentParser(description="Trading Platform Export Importer")

    # Input
    parser.add_argument("--file", help="Path to the platform's CSV export.")
    parser.add_argument("--platform", default=config.DEFAULT_PLATFORM_ID, help="Platform id of the export (see --list-platforms).")
    parser.add_argument("--date", type=_trading_date, default=None, metavar="YYYY-MM-DD",
                        help="Trading date for platforms whose exports only carry fill times (e.g. DAS Trader).")
    parser.add_argument("--schemas", default=config.CUSTOM_PLATFORM_SCHEMAS_FILE_PATH,
                        help="YAML file with additional platform schemas to register before importing.")

    # Output
    parser.add_argument("--output", default=None, help="Write the import result as JSON to this path.")
    parser.add_argument("--list-platforms", action="store_true", help="List registered platforms and exit.")
    parser.add_argument("--verbose", action="store_true", help="Enable per-row debug logging.")

    args = parser.parse_args(argv)

    if not args.list_platforms and not args.file:
        parser.error("--file is required unless --list-platforms is given")

    return args
