from enum import Enum

class Side(Enum):
    BUY = "B"
    SELL = "S"

class TradeDirection(Enum):
    LONG = "LONG"
    SHORT = "SHORT"

    @classmethod
    def from_opening_side(cls, side: Side) -> "TradeDirection":
        """A position opened by a buy is long, one opened by a sell is short."""
        return cls.LONG if side is Side.BUY else cls.SHORT

class LogicalField(Enum):
    """Canonical fields a platform's columns are mapped onto."""
    SYMBOL = "symbol"
    SIDE = "side"
    PRICE = "price"
    QUANTITY = "quantity"
    TIMESTAMP = "timestamp"
    FEES = "fees" # Optional
    ACCOUNT = "account" # Optional
    ORDER_TYPE = "order_type" # Optional

# Fields every row must resolve before it can become an Execution
REQUIRED_FIELDS = (
    LogicalField.SYMBOL,
    LogicalField.SIDE,
    LogicalField.PRICE,
    LogicalField.QUANTITY,
    LogicalField.TIMESTAMP,
)

class WarningType(Enum):
    DUPLICATE = "duplicate"
    MISSING_DATA = "missing_data"
    UNUSUAL_VALUE = "unusual_value"

class ImportOutcome(Enum):
    """Process exit codes for the command line front end."""
    SUCCESS = 0
    ROW_ERRORS = 1
    FATAL = 2
