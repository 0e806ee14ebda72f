from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import logging

from .enums import WarningType
from .trades import Trade

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportRowError:
    row: int
    message: str
    column: Optional[str] = None
    data: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"row": self.row, "column": self.column, "message": self.message, "data": self.data}


@dataclass(frozen=True)
class ImportRowWarning:
    row: int
    type: WarningType
    message: str
    data: Optional[Dict[str, str]] = None

    def __post_init__(self):
        if not isinstance(self.type, WarningType):
            raise TypeError(f"ImportRowWarning.type must be a WarningType, got {type(self.type)}")

    def to_dict(self) -> Dict[str, Any]:
        return {"row": self.row, "type": self.type.value, "message": self.message, "data": self.data}


@dataclass(frozen=True)
class ImportStatistics:
    total_rows: int
    valid_trades: int
    duplicates: int
    errors: int
    warnings: int
    skipped_rows: int = 0 # Lines dropped by the parser (field count != header)
    filtered_rows: int = 0 # Rows discarded by the platform's row filter

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalRows": self.total_rows,
            "validTrades": self.valid_trades,
            "duplicates": self.duplicates,
            "errors": self.errors,
            "warnings": self.warnings,
            "skippedRows": self.skipped_rows,
            "filteredRows": self.filtered_rows,
        }


@dataclass(frozen=True)
class ImportResult:
    """
    Outcome of one import call.
    `success` only says that no row failed; a file whose rows were all
    filtered out is a success with no trades, so callers check both.
    """
    trades: Tuple[Trade, ...]
    errors: Tuple[ImportRowError, ...]
    warnings: Tuple[ImportRowWarning, ...]
    statistics: ImportStatistics
    platform_id: Optional[str] = None

    @property
    def success(self) -> bool:
        return len(self.errors) == 0

    @classmethod
    def build(cls, trades: List[Trade], errors: List[ImportRowError], warnings: List[ImportRowWarning],
              total_rows: int, duplicates: int, skipped_rows: int = 0, filtered_rows: int = 0,
              platform_id: Optional[str] = None) -> "ImportResult":
        statistics = ImportStatistics(
            total_rows=total_rows,
            valid_trades=len(trades),
            duplicates=duplicates,
            errors=len(errors),
            warnings=len(warnings),
            skipped_rows=skipped_rows,
            filtered_rows=filtered_rows,
        )
        logger.debug(f"Import statistics: {statistics}")
        return cls(tuple(trades), tuple(errors), tuple(warnings), statistics, platform_id=platform_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "trades": [t.to_api_payload() for t in self.trades],
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "statistics": self.statistics.to_dict(),
        }
