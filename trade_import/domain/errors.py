# trade_import/domain/errors.py
from typing import Dict, Optional


class TradeImportError(Exception):
    """Base class for all errors raised by the import pipeline."""


class FormatError(TradeImportError):
    """The input as a whole is structurally unusable (e.g. no header + data)."""


class ValidationError(TradeImportError):
    """
    A single row could not be turned into an Execution.
    Carries the row number and a snapshot of the offending row so the
    orchestrator can record it without aborting the import.
    """
    def __init__(self, message: str, row_number: Optional[int] = None,
                 row: Optional[Dict[str, str]] = None, column: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.row_number = row_number
        self.row = row
        self.column = column

    def with_context(self, row_number: int, row: Dict[str, str], column: Optional[str] = None) -> "ValidationError":
        """Returns a copy bound to a row; values already set are kept."""
        return ValidationError(
            self.message,
            row_number=self.row_number if self.row_number is not None else row_number,
            row=self.row if self.row is not None else row,
            column=self.column or column,
        )


class UnknownPlatformError(TradeImportError, ValueError):
    def __init__(self, platform_id: str):
        super().__init__(f"Unknown platform '{platform_id}'")
        self.platform_id = platform_id


class SchemaDefinitionError(TradeImportError):
    """A platform schema definition (e.g. from YAML) is invalid."""
