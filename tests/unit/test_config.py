"""Tests for exchange configuration and clocks."""

import pytest

from swapper.clock import ManualClock, system_clock
from swapper.config import DEFAULT_CONFIG, ExchangeConfig


class TestExchangeConfig:
    """Tests for defaults and validation."""

    def test_defaults(self):
        assert DEFAULT_CONFIG.fee_denominator == 1000
        assert DEFAULT_CONFIG.initial_fee_numerator == 3
        assert DEFAULT_CONFIG.max_fee_numerator == 50
        assert DEFAULT_CONFIG.min_liquidity == 1000
        assert DEFAULT_CONFIG.max_swap_impact_percent == 30
        assert DEFAULT_CONFIG.max_price_history == 5
        assert DEFAULT_CONFIG.min_twap_observations == 5
        assert DEFAULT_CONFIG.twap_window == 86400

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.min_liquidity = 0  # type: ignore

    def test_initial_fee_above_max(self):
        with pytest.raises(ValueError):
            ExchangeConfig(initial_fee_numerator=51)

    def test_max_fee_must_be_below_denominator(self):
        with pytest.raises(ValueError):
            ExchangeConfig(max_fee_numerator=1000)

    def test_impact_percent_bounds(self):
        with pytest.raises(ValueError):
            ExchangeConfig(max_swap_impact_percent=0)
        with pytest.raises(ValueError):
            ExchangeConfig(max_swap_impact_percent=101)

    def test_positive_window_and_history(self):
        with pytest.raises(ValueError):
            ExchangeConfig(twap_window=0)
        with pytest.raises(ValueError):
            ExchangeConfig(max_price_history=0)


class TestFromEnv:
    """Tests for environment overrides."""

    def test_defaults_without_env(self, monkeypatch):
        for name in (
            "SWAPPER_FEE_NUMERATOR",
            "SWAPPER_MAX_FEE_NUMERATOR",
            "SWAPPER_MIN_LIQUIDITY",
            "SWAPPER_MAX_SWAP_IMPACT_PERCENT",
            "SWAPPER_TWAP_WINDOW",
        ):
            monkeypatch.delenv(name, raising=False)
        assert ExchangeConfig.from_env() == DEFAULT_CONFIG

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("SWAPPER_FEE_NUMERATOR", "10")
        monkeypatch.setenv("SWAPPER_MIN_LIQUIDITY", "0")
        monkeypatch.setenv("SWAPPER_TWAP_WINDOW", "3600")
        config = ExchangeConfig.from_env()
        assert config.initial_fee_numerator == 10
        assert config.min_liquidity == 0
        assert config.twap_window == 3600

    def test_invalid_value(self, monkeypatch):
        monkeypatch.setenv("SWAPPER_FEE_NUMERATOR", "ten")
        with pytest.raises(ValueError):
            ExchangeConfig.from_env()


class TestClocks:
    """Tests for time sources."""

    def test_system_clock_is_int(self):
        assert isinstance(system_clock(), int)

    def test_manual_clock(self):
        clock = ManualClock(start=100)
        assert clock() == 100
        assert clock.advance(5) == 105
        clock.set(200)
        assert clock.now == 200

    def test_manual_clock_never_goes_back(self):
        clock = ManualClock(start=100)
        with pytest.raises(ValueError):
            clock.advance(-1)
        with pytest.raises(ValueError):
            clock.set(99)
