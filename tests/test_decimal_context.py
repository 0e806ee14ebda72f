# tests/test_decimal_context.py
import logging
import pytest
from decimal import Decimal, getcontext, ROUND_HALF_EVEN, ROUND_HALF_UP

from trade_import import config as app_config
from trade_import.reporting.reporting_utils import _q, _q_price, format_optional_amount
from trade_import.utils.decimal_context import apply_decimal_context, resolve_rounding_mode


class TestDecimalContext:

    def setup_method(self):
        self.saved = (getcontext().prec, getcontext().rounding)

    def teardown_method(self):
        getcontext().prec, getcontext().rounding = self.saved

    def test_defaults_come_from_config(self):
        context = apply_decimal_context()
        assert context.prec == app_config.INTERNAL_CALCULATION_PRECISION
        assert context.rounding == app_config.DECIMAL_ROUNDING_MODE

    def test_overrides_are_applied(self):
        apply_decimal_context(precision=10, rounding_mode="ROUND_HALF_EVEN")
        assert getcontext().prec == 10
        assert getcontext().rounding == ROUND_HALF_EVEN

    @pytest.mark.parametrize("name", ["ROUND_SIDEWAYS", "HALF_UP", "round_half_up", "ROUND_"])
    def test_unknown_rounding_mode_falls_back_with_warning(self, name, caplog):
        with caplog.at_level(logging.WARNING):
            assert resolve_rounding_mode(name) == ROUND_HALF_UP
        assert f"Invalid DECIMAL_ROUNDING_MODE '{name}'" in caplog.text

    def test_invalid_configured_mode_still_sets_context(self, monkeypatch):
        monkeypatch.setattr(app_config, "DECIMAL_ROUNDING_MODE", "ROUND_NOWHERE")
        assert apply_decimal_context().rounding == ROUND_HALF_UP


class TestDisplayQuantization:

    @pytest.mark.parametrize("raw, expected", [
        (Decimal("1.005"), Decimal("1.01")),
        ("-2.345", Decimal("-2.35")),
        (3, Decimal("3.00")),
        (None, Decimal("0.00")),
        ("garbage", Decimal("0.00")),
    ])
    def test_amounts(self, raw, expected):
        assert _q(raw) == expected
        assert str(_q(raw)) == str(expected)

    def test_prices_keep_four_places(self):
        assert str(_q_price("150.123456")) == "150.1235"
        assert str(_q_price(None)) == "0.0000"

    def test_unparseable_value_is_logged(self, caplog):
        with caplog.at_level(logging.ERROR):
            _q_price("n/a")
        assert "Could not convert value 'n/a'" in caplog.text

    def test_optional_amount(self):
        assert format_optional_amount(None) == "-"
        assert format_optional_amount(Decimal("150")) == "150.00"
