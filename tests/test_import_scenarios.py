# tests/test_import_scenarios.py
import pytest
from datetime import date, datetime
from decimal import Decimal

from tests.helpers.csv_creators import (
    create_das_trader_csv_string, create_das_trader_minimal_csv_string, create_prop_reports_csv_string,
    create_csv_string, das_row,
)
from trade_import.domain.enums import TradeDirection, WarningType
from trade_import.domain.errors import FormatError, UnknownPlatformError
from trade_import.pipeline_runner import run_import, import_csv_file
from trade_import.utils.id_generators import SequentialIdGenerator

TRADING_DATE = date(2024, 1, 2)


def _run_das(text, trading_date=TRADING_DATE):
    return run_import(text, "das-trader", trading_date=trading_date, id_generator=SequentialIdGenerator())


class TestDocumentedScenarios:

    def test_scenario_a_simple_long_round_trip(self):
        text = create_das_trader_minimal_csv_string([
            ["AAPL", "B", 100, "150.00", "09:31:05"],
            ["AAPL", "S", 100, "151.50", "09:45:00"],
        ])
        result = _run_das(text)

        assert result.success
        assert len(result.trades) == 1
        trade = result.trades[0]
        assert trade.direction is TradeDirection.LONG
        assert trade.entry_price == Decimal("150.00")
        assert trade.exit_price == Decimal("151.50")
        assert trade.quantity == 100
        assert trade.pnl == Decimal("150.00")
        assert trade.opened_at == datetime(2024, 1, 2, 9, 31, 5)
        assert trade.closed_at == datetime(2024, 1, 2, 9, 45, 0)
        assert result.statistics.total_rows == 2
        assert result.statistics.valid_trades == 1

    def test_scenario_b_short_round_trip(self):
        text = create_das_trader_minimal_csv_string([
            ["TSLA", "S", 50, "200.00", "10:00:00"],
            ["TSLA", "B", 50, "198.00", "10:10:00"],
        ])
        result = _run_das(text)

        assert len(result.trades) == 1
        trade = result.trades[0]
        assert trade.direction is TradeDirection.SHORT
        assert trade.is_closed
        assert trade.pnl == Decimal("100.00")

    def test_scenario_c_negative_quantity_is_a_row_error(self):
        text = create_das_trader_minimal_csv_string([
            ["AAPL", "B", 100, "150.00", "09:31:05"],
            ["AAPL", "S", "-5", "151.00", "09:40:00"],
            ["AAPL", "S", 100, "151.50", "09:45:00"],
        ])
        result = _run_das(text)

        assert not result.success
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.row == 3
        assert error.column == "Qty"
        assert "quantity" in error.message
        assert error.data["Qty"] == "-5"
        assert len(result.trades) == 1
        assert result.trades[0].quantity == 100
        assert result.statistics.errors == 1

    def test_scenario_d_duplicates_are_flagged_but_kept(self):
        text = create_prop_reports_csv_string([
            ["01/02/2024 09:31:05", "PR1", "AAPL", "LONG", 100, "150.00", "1.00"],
            ["01/02/2024 09:31:05", "PR1", "AAPL", "LONG", 100, "150.00", "1.00"],
        ])
        result = run_import(text, "prop-reports")

        assert result.success
        assert len(result.trades) == 2
        assert len(result.warnings) == 1
        assert result.warnings[0].type is WarningType.DUPLICATE
        assert result.warnings[0].row == 3
        assert result.statistics.duplicates == 1

    def test_scenario_e_header_only_is_a_format_error(self):
        with pytest.raises(FormatError):
            _run_das("Symb,Side,Qty,Price,Time\n")


class TestImportPipeline:

    def test_unknown_platform(self):
        with pytest.raises(UnknownPlatformError) as exc_info:
            run_import("A\n1", "nope")
        assert isinstance(exc_info.value, ValueError)
        assert "nope" in str(exc_info.value)

    def test_determinism_with_sequential_ids(self):
        text = create_das_trader_csv_string([
            das_row("09:30:00", "AAPL", "B", "10.00", 100, commission="1.00"),
            das_row("09:31:00", "MSFT", "S", "300.00", 10),
            das_row("09:35:00", "AAPL", "S", "10.50", 100, commission="1.00"),
        ])
        assert _run_das(text).to_dict() == _run_das(text).to_dict()

    def test_trailing_open_group_is_emitted_open(self):
        text = create_das_trader_csv_string([
            das_row("09:30:00", "AAPL", "B", "10.00", 100),
            das_row("09:35:00", "AAPL", "S", "10.50", 100),
            das_row("09:40:00", "AAPL", "B", "10.20", 30),
        ])
        trades = _run_das(text).trades
        assert [t.is_closed for t in trades] == [True, False]
        assert trades[1].current_position_size == 30

    def test_missing_trading_date_fails_every_row(self):
        text = create_das_trader_minimal_csv_string([
            ["AAPL", "B", 100, "150.00", "09:31:05"],
            ["AAPL", "S", 100, "151.50", "09:45:00"],
        ])
        result = _run_das(text, trading_date=None)
        assert not result.success
        assert [e.row for e in result.errors] == [2, 3]
        assert all("Date is required" in e.message for e in result.errors)
        assert result.trades == ()

    def test_malformed_rows_are_counted_not_errors(self):
        text = "Symb,Side,Qty,Price,Time\nAAPL,B,100,150.00,09:31:05\nAAPL,S,100\nAAPL,S,100,151.50,09:45:00\n"
        result = _run_das(text)
        assert result.success
        assert result.statistics.skipped_rows == 1
        assert result.statistics.total_rows == 2
        assert len(result.trades) == 1

    def test_quoted_thousands_quantity(self):
        text = create_das_trader_minimal_csv_string([
            ["AAPL", "B", "1,000", "150.00", "09:31:05"],
            ["AAPL", "S", "1,000", "151.00", "09:45:00"],
        ])
        result = _run_das(text)
        assert result.trades[0].quantity == 1000
        assert result.trades[0].pnl == Decimal("1000.00")

    def test_das_order_events_are_filtered(self):
        headers = ["Event", "Time", "Symb", "Side", "Price", "Qty"]
        text = create_csv_string(headers, [
            ["Accept", "09:30:58", "AAPL", "B", "150.00", 100],
            ["Execute", "09:31:05", "AAPL", "B", "150.00", 100],
            ["Cancel", "09:40:00", "AAPL", "S", "151.00", 100],
            ["Execute", "09:45:00", "AAPL", "S", "151.50", 100],
        ])
        result = _run_das(text)
        assert result.statistics.total_rows == 4
        assert result.statistics.filtered_rows == 2
        assert len(result.trades) == 1
        assert result.trades[0].pnl == Decimal("150.00")

    def test_prop_reports_rows_are_direct_open_trades(self):
        text = create_prop_reports_csv_string([
            ["01/02/2024 09:31:05", "PR1", "AAPL", "LONG", 100, "150.00", "1.00"],
            ["01/02/2024 09:45:00", "PR1", "AAPL", "SHORT", 100, "151.50", "1.00"],
            ["Page 1/1", "", "", "", "", "", ""],
        ])
        result = run_import(text, "prop-reports")
        assert result.success
        assert result.statistics.filtered_rows == 1
        assert [t.direction for t in result.trades] == [TradeDirection.LONG, TradeDirection.SHORT]
        assert all(not t.is_closed for t in result.trades)

    def test_result_dict_layout(self):
        text = create_das_trader_minimal_csv_string([
            ["AAPL", "B", 100, "150.00", "09:31:05"],
            ["AAPL", "S", "abc", "151.50", "09:45:00"],
        ])
        payload = _run_das(text).to_dict()
        assert payload["success"] is False
        assert payload["statistics"] == {
            "totalRows": 2, "validTrades": 1, "duplicates": 0, "errors": 1,
            "warnings": 0, "skippedRows": 0, "filteredRows": 0,
        }
        assert payload["errors"][0]["row"] == 3
        assert payload["trades"][0]["trade_type"] == "LONG"
        assert payload["trades"][0]["closed_at"] is None

    def test_import_csv_file(self, write_data_file):
        path = write_data_file("das.csv", create_das_trader_minimal_csv_string([
            ["AAPL", "B", 100, "150.00", "09:31:05"],
            ["AAPL", "S", 100, "151.50", "09:45:00"],
        ]))
        result = import_csv_file(path, "das-trader", trading_date=TRADING_DATE)
        assert result.platform_id == "das-trader"
        assert len(result.trades) == 1

    def test_import_csv_file_checks_platform_first(self, temp_data_dir):
        with pytest.raises(UnknownPlatformError):
            import_csv_file(f"{temp_data_dir}/missing.csv", "nope")

    def test_import_missing_file(self, temp_data_dir):
        with pytest.raises(FormatError):
            import_csv_file(f"{temp_data_dir}/missing.csv", "das-trader", trading_date=TRADING_DATE)
