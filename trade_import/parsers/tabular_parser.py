# trade_import/parsers/tabular_parser.py
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List

from trade_import.domain.errors import FormatError
import trade_import.config as config

logger = logging.getLogger(__name__)

CsvRow = Dict[str, str]

_LINE_SPLIT_RE = re.compile(r"\r?\n")


@dataclass
class ParsedCsv:
    headers: List[str]
    rows: List[CsvRow] = field(default_factory=list)
    line_numbers: List[int] = field(default_factory=list) # 1-based source line of each row, header is line 1
    skipped_line_numbers: List[int] = field(default_factory=list) # Lines whose field count did not match the header


def split_csv_line(line: str) -> List[str]:
    """
    Splits one line on commas, honouring double quotes.
    A quote only toggles the in-quotes state; it is not kept in the value and
    there is no escaping, so `""` inside a quoted field simply toggles twice.
    """
    values: List[str] = []
    current: List[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == ',' and not in_quotes:
            values.append(''.join(current))
            current = []
        else:
            current.append(char)
    values.append(''.join(current))
    return values


def parse_csv_table(text: str) -> ParsedCsv:
    lines = _LINE_SPLIT_RE.split(text.strip())
    if len(lines) < 2:
        raise FormatError("CSV file must contain headers and at least one data row")

    headers = [h.strip() for h in lines[0].split(',')]
    parsed = ParsedCsv(headers=headers)

    for index, line in enumerate(lines[1:], start=2):
        values = split_csv_line(line)
        if len(values) != len(headers):
            parsed.skipped_line_numbers.append(index)
            continue
        parsed.rows.append({header: value.strip() for header, value in zip(headers, values)})
        parsed.line_numbers.append(index)

    if parsed.skipped_line_numbers:
        logger.warning(f"Skipped {len(parsed.skipped_line_numbers)} malformed line(s) whose field count "
                       f"does not match the {len(headers)} header columns: {parsed.skipped_line_numbers}")
    logger.debug(f"Parsed {len(parsed.rows)} rows with headers {headers}")
    return parsed


def parse_csv_text(text: str) -> List[CsvRow]:
    return parse_csv_table(text).rows


def read_csv_file(file_path: str, encoding: str = config.INPUT_ENCODING) -> str:
    """Reads the whole export in one go; parsing never sees a partial file."""
    try:
        with open(file_path, mode='r', encoding=encoding, newline='') as csvfile:
            return csvfile.read()
    except FileNotFoundError as e:
        raise FormatError(f"CSV file not found: {file_path}") from e
    except UnicodeDecodeError as e:
        raise FormatError(f"CSV file {file_path} is not valid {encoding} text: {e}") from e
