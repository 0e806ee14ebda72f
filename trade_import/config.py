# trade_import/config.py

from decimal import Decimal

# Platform used when --platform is not given on the command line
DEFAULT_PLATFORM_ID = "das-trader"

# Broker exports frequently carry a BOM
INPUT_ENCODING = "utf-8-sig"

# Optional YAML file with additional platform schemas (None disables loading)
CUSTOM_PLATFORM_SCHEMAS_FILE_PATH = None # e.g. "config/platforms.yaml"

# Numerical Precision
INTERNAL_CALCULATION_PRECISION = 28
DECIMAL_ROUNDING_MODE = "ROUND_HALF_UP" # Python's decimal module uses strings like 'ROUND_HALF_UP', 'ROUND_HALF_EVEN'

# Output/Reporting Precisions (display only, not used for intermediate calculations)
OUTPUT_PRECISION_AMOUNTS: Decimal = Decimal("0.01")
OUTPUT_PRECISION_PRICE: Decimal = Decimal("0.0001")

# Averaging method reported on every built trade
COST_BASIS_METHOD = "AVERAGE"

# Logging
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
