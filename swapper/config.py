"""Exchange configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from swapper.constants import (
    DEFAULT_FEE_NUMERATOR,
    FEE_DENOMINATOR,
    MAX_FEE_NUMERATOR,
    MAX_PRICE_HISTORY,
    MAX_SWAP_IMPACT_PERCENT,
    MIN_LIQUIDITY,
    MIN_TWAP_OBSERVATIONS,
    PRICE_SCALE,
    PRICE_SCALE_ADJUST,
    TWAP_WINDOW,
)


@dataclass(frozen=True)
class ExchangeConfig:
    """Centralized configuration for the exchange engine.

    Holds the fee bounds, swap guards, and oracle parameters so tests can
    run the engine with different settings while production code uses
    the protocol defaults.

    Attributes:
        fee_denominator: Denominator of the fee fraction (default: 1000)
        initial_fee_numerator: Fee numerator at construction (default: 3)
        max_fee_numerator: Highest fee the owner may set (default: 50)
        min_liquidity: Floor of output-token units left after a swap
        max_swap_impact_percent: Largest share of the output reserve one swap may take
        price_scale: Fixed-point base for oracle prices (1e18)
        price_scale_adjust: Multiplier of the inverse-balance price proxy
        max_price_history: Observations kept per token
        min_twap_observations: Observations required before a TWAP is valid
        twap_window: Trailing TWAP window in seconds
    """

    fee_denominator: int = FEE_DENOMINATOR
    initial_fee_numerator: int = DEFAULT_FEE_NUMERATOR
    max_fee_numerator: int = MAX_FEE_NUMERATOR

    min_liquidity: int = MIN_LIQUIDITY
    max_swap_impact_percent: int = MAX_SWAP_IMPACT_PERCENT

    price_scale: int = PRICE_SCALE
    price_scale_adjust: int = PRICE_SCALE_ADJUST
    max_price_history: int = MAX_PRICE_HISTORY
    min_twap_observations: int = MIN_TWAP_OBSERVATIONS
    twap_window: int = TWAP_WINDOW

    def __post_init__(self) -> None:
        if self.fee_denominator <= 0:
            raise ValueError(f"fee_denominator must be positive: {self.fee_denominator}")
        if not 0 <= self.max_fee_numerator < self.fee_denominator:
            raise ValueError(
                f"max_fee_numerator must be in [0, {self.fee_denominator}): "
                f"{self.max_fee_numerator}"
            )
        if not 0 <= self.initial_fee_numerator <= self.max_fee_numerator:
            raise ValueError(
                f"initial_fee_numerator must be in [0, {self.max_fee_numerator}]: "
                f"{self.initial_fee_numerator}"
            )
        if not 0 < self.max_swap_impact_percent <= 100:
            raise ValueError(
                f"max_swap_impact_percent must be in (0, 100]: {self.max_swap_impact_percent}"
            )
        if self.max_price_history <= 0:
            raise ValueError(f"max_price_history must be positive: {self.max_price_history}")
        if self.twap_window <= 0:
            raise ValueError(f"twap_window must be positive: {self.twap_window}")
        if self.min_liquidity < 0:
            raise ValueError(f"min_liquidity cannot be negative: {self.min_liquidity}")
        if self.price_scale <= 0 or self.price_scale_adjust <= 0:
            raise ValueError("price_scale and price_scale_adjust must be positive")

    @classmethod
    def from_env(cls) -> ExchangeConfig:
        """Build a configuration from SWAPPER_* environment variables.

        Recognized variables (all optional, defaults from swapper.constants):
        - SWAPPER_FEE_NUMERATOR: initial fee numerator
        - SWAPPER_MAX_FEE_NUMERATOR: highest fee the owner may set
        - SWAPPER_MIN_LIQUIDITY: post-swap liquidity floor
        - SWAPPER_MAX_SWAP_IMPACT_PERCENT: per-swap reserve share cap
        - SWAPPER_TWAP_WINDOW: TWAP window in seconds

        Raises:
            ValueError: If a variable is not an integer or the result is out of bounds
        """
        return cls(
            initial_fee_numerator=int(
                os.environ.get("SWAPPER_FEE_NUMERATOR", str(DEFAULT_FEE_NUMERATOR))
            ),
            max_fee_numerator=int(
                os.environ.get("SWAPPER_MAX_FEE_NUMERATOR", str(MAX_FEE_NUMERATOR))
            ),
            min_liquidity=int(os.environ.get("SWAPPER_MIN_LIQUIDITY", str(MIN_LIQUIDITY))),
            max_swap_impact_percent=int(
                os.environ.get("SWAPPER_MAX_SWAP_IMPACT_PERCENT", str(MAX_SWAP_IMPACT_PERCENT))
            ),
            twap_window=int(os.environ.get("SWAPPER_TWAP_WINDOW", str(TWAP_WINDOW))),
        )


# Default configuration instance
DEFAULT_CONFIG = ExchangeConfig()
