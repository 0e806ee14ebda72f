# trade_import/pipeline_runner.py
import logging
from datetime import date
from typing import List, Optional

import trade_import.config as config

from trade_import.domain.errors import FormatError, UnknownPlatformError, ValidationError
from trade_import.domain.executions import Execution
from trade_import.domain.results import ImportResult, ImportRowError, ImportRowWarning
from trade_import.domain.trades import Trade

from trade_import.parsers.tabular_parser import parse_csv_table, read_csv_file
from trade_import.parsers.row_normalizer import normalize_row
from trade_import.platforms.registry import resolve_platform
from trade_import.platforms.schema_models import PlatformSchema
from trade_import.platforms.transforms import get_row_filter
from trade_import.engine.position_reconstructor import reconstruct_all_positions
from trade_import.engine.trade_builder import TradeBuilder
from trade_import.engine.duplicate_detector import detect_duplicates, detect_overfilled_positions
from trade_import.utils.id_generators import IdGenerator

logger = logging.getLogger(__name__)


def _require_platform(platform_id: str) -> PlatformSchema:
    schema = resolve_platform(platform_id)
    if schema is None:
        raise UnknownPlatformError(platform_id)
    return schema


def run_import(
    text: str,
    platform_id: str,
    trading_date: Optional[date] = None,
    id_generator: Optional[IdGenerator] = None,
) -> ImportResult:
    """
    Runs parse -> filter -> normalize -> reconstruct/build -> duplicate scan
    over an export already held in memory.
    Raises FormatError / UnknownPlatformError; row problems end up in the result.
    """
    schema = _require_platform(platform_id)
    if schema.requires_date and trading_date is None:
        logger.warning(f"Platform '{schema.id}' requires a trading date but none was supplied; "
                       f"every row will fail timestamp resolution.")

    logger.info(f"Starting import for platform '{schema.id}' ({schema.name})...")
    parsed = parse_csv_table(text) # FormatError propagates, nothing partial is returned
    logger.info(f"Parsed {len(parsed.rows)} rows ({len(parsed.skipped_line_numbers)} malformed line(s) skipped).")

    row_filter = get_row_filter(schema.row_filter)
    errors: List[ImportRowError] = []
    executions: List[Execution] = []
    filtered_rows = 0

    for row, row_number in zip(parsed.rows, parsed.line_numbers):
        if row_filter is not None and not row_filter(row):
            filtered_rows += 1
            continue
        try:
            executions.append(normalize_row(row, schema, trading_date, row_number))
        except ValidationError as e:
            logger.debug(f"Row {row_number} rejected: {e.message}")
            errors.append(ImportRowError(
                row=e.row_number if e.row_number is not None else row_number,
                message=e.message,
                column=e.column,
                data=e.row if e.row is not None else row,
            ))

    if filtered_rows:
        logger.info(f"Row filter '{schema.row_filter}' discarded {filtered_rows} row(s).")
    if errors:
        logger.warning(f"{len(errors)} row(s) failed validation.")

    builder = TradeBuilder(id_generator=id_generator)
    trades: List[Trade]
    if schema.group_executions:
        trades = builder.build_all(reconstruct_all_positions(executions))
    else:
        trades = [builder.build_from_execution(e) for e in executions]

    duplicate_warnings = detect_duplicates(trades)
    warnings: List[ImportRowWarning] = duplicate_warnings + detect_overfilled_positions(trades)

    result = ImportResult.build(
        trades=trades,
        errors=errors,
        warnings=warnings,
        total_rows=len(parsed.rows),
        duplicates=len(duplicate_warnings),
        skipped_rows=len(parsed.skipped_line_numbers),
        filtered_rows=filtered_rows,
        platform_id=schema.id,
    )
    logger.info(f"Import completed: {len(trades)} trade(s), {len(errors)} error(s), {len(warnings)} warning(s).")
    return result


def import_csv_file(
    file_path: str,
    platform_id: str,
    trading_date: Optional[date] = None,
    id_generator: Optional[IdGenerator] = None,
    encoding: str = config.INPUT_ENCODING,
) -> ImportResult:
    # Validate the platform before touching the file
    _require_platform(platform_id)
    try:
        text = read_csv_file(file_path, encoding=encoding)
    except FormatError as e:
        logger.critical(f"Could not read {file_path}: {e}")
        raise
    return run_import(text, platform_id, trading_date=trading_date, id_generator=id_generator)
