# trade_import/main.py
import json
import logging
import sys

# Configuration and CLI
import trade_import.config as config
from trade_import.cli import parse_arguments

# Core pipeline runner
from trade_import.pipeline_runner import import_csv_file

from trade_import.domain.enums import ImportOutcome
from trade_import.domain.errors import TradeImportError
from trade_import.domain.results import ImportResult
from trade_import.platforms.registry import list_platforms
from trade_import.platforms.schema_loader import register_custom_platforms
from trade_import.utils.decimal_context import apply_decimal_context

# Reporting
from trade_import.reporting.console_reporter import print_import_summary, print_platform_list

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL, logging.INFO)
    logging.basicConfig(level=level, format=config.LOG_FORMAT)


def setup_decimal_context():
    context = apply_decimal_context()
    logger.info(f"Decimal precision set to {context.prec}, rounding mode {context.rounding}.")


def write_result_json(result: ImportResult, output_path: str):
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(result.to_dict(), f, indent=2)
    logger.info(f"Wrote import result to {output_path}")


def main_application(argv=None) -> int:
    """
    Main application entry point.
    Parses arguments, runs the import, prints the summary. Returns the exit code.
    """
    args = parse_arguments(argv)
    setup_logging(args.verbose)
    setup_decimal_context()

    try:
        if args.schemas:
            register_custom_platforms(args.schemas, replace=True)

        if args.list_platforms:
            print_platform_list(list_platforms())
            return ImportOutcome.SUCCESS.value

        logger.info(f"Importing {args.file} as '{args.platform}'...")
        result = import_csv_file(args.file, args.platform, trading_date=args.date)
    except TradeImportError as e:
        logger.critical(f"Import failed: {e}")
        return ImportOutcome.FATAL.value

    print_import_summary(result, source_name=args.file)

    if args.output:
        try:
            write_result_json(result, args.output)
        except OSError as e:
            logger.critical(f"Could not write {args.output}: {e}")
            return ImportOutcome.FATAL.value

    if not result.success:
        logger.warning(f"{result.statistics.errors} row(s) could not be imported. Review the errors above.")
        return ImportOutcome.ROW_ERRORS.value
    logger.info("Import finished.")
    return ImportOutcome.SUCCESS.value


if __name__ == "__main__":
    sys.exit(main_application())
