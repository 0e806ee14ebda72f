"""
Test Fixtures Module

YAML-based reconstruction scenarios (reconstruction_scenarios.yaml):
each case lists the executions of one import in file order and the trades
the engine is expected to build from them. Human-readable, git-diff
friendly, and easy to extend with new corner cases.

Use load_yaml_spec() to read a file and parse_reconstruction_tests() to
turn it into ReconstructionTestSpec objects for pytest.mark.parametrize.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
import yaml


FIXTURES_DIR = Path(__file__).parent


@dataclass
class ExecutionSpec:
    """Parsed execution from YAML spec."""
    symbol: str
    side: str # "B" or "S"
    qty: int
    price: Decimal
    time: str # ISO timestamp
    fees: Decimal = Decimal("0")


@dataclass
class ExpectedTradeSpec:
    """Parsed expected trade from YAML spec."""
    symbol: str
    direction: str
    quantity: int
    entry_price: Decimal
    exit_price: Optional[Decimal]
    pnl: Optional[Decimal]
    closed: bool
    current_position_size: int = 0
    exit_count: Optional[int] = None


@dataclass
class ReconstructionTestSpec:
    """A single reconstruction test case parsed from YAML."""
    id: str
    description: str
    executions: List[ExecutionSpec]
    expected_trades: List[ExpectedTradeSpec]
    expected_warnings: int = 0
    notes: Optional[str] = None


def _optional_decimal(value: Any) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


def _parse_execution(exec_dict: Dict) -> ExecutionSpec:
    """Parse an execution dictionary into ExecutionSpec."""
    return ExecutionSpec(
        symbol=exec_dict["symbol"],
        side=exec_dict["side"],
        qty=int(exec_dict["qty"]),
        price=Decimal(str(exec_dict["price"])),
        time=str(exec_dict["time"]),
        fees=Decimal(str(exec_dict.get("fees", "0"))),
    )


def _parse_expected_trade(trade_dict: Dict) -> ExpectedTradeSpec:
    """Parse an expected trade dictionary into ExpectedTradeSpec."""
    return ExpectedTradeSpec(
        symbol=trade_dict["symbol"],
        direction=trade_dict["direction"],
        quantity=int(trade_dict["quantity"]),
        entry_price=Decimal(str(trade_dict["entry_price"])),
        exit_price=_optional_decimal(trade_dict.get("exit_price")),
        pnl=_optional_decimal(trade_dict.get("pnl")),
        closed=bool(trade_dict.get("closed", False)),
        current_position_size=int(trade_dict.get("current_position_size", 0)),
        exit_count=trade_dict.get("exit_count"),
    )


def load_yaml_spec(filename: str) -> Dict[str, Any]:
    """
    Load a YAML test specification file.

    Args:
        filename: Name of the YAML file in the fixtures directory

    Returns:
        Parsed YAML content as a dictionary
    """
    filepath = FIXTURES_DIR / filename
    with open(filepath, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def parse_reconstruction_tests(spec_data: Dict[str, Any]) -> List[ReconstructionTestSpec]:
    """
    Parse reconstruction test specifications from loaded YAML.

    Args:
        spec_data: Loaded YAML dictionary

    Returns:
        List of ReconstructionTestSpec objects
    """
    tests = []
    for test_dict in spec_data.get("tests", []):
        inputs = test_dict.get("inputs", {})
        expected = test_dict.get("expected", {})
        tests.append(ReconstructionTestSpec(
            id=test_dict["id"],
            description=test_dict["description"],
            executions=[_parse_execution(e) for e in inputs.get("executions", [])],
            expected_trades=[_parse_expected_trade(t) for t in expected.get("trades", [])],
            expected_warnings=expected.get("warnings", 0),
            notes=test_dict.get("notes"),
        ))
    return tests


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value)


def get_reconstruction_tests() -> List[ReconstructionTestSpec]:
    """Load and parse the position reconstruction scenarios."""
    spec_data = load_yaml_spec("reconstruction_scenarios.yaml")
    return parse_reconstruction_tests(spec_data)
