"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Accounts, token addresses and common amounts
- factories: Exchange construction and pool seeding
"""

from tests.helpers.constants import (
    EXCHANGE,
    INITIAL_LIQUIDITY,
    NULL,
    ONE_DAY,
    ONE_HOUR,
    OTHER_USER,
    OWNER,
    OWNER_FUNDS,
    START_TIME,
    TKA,
    TKB,
    TKC,
    TKD,
    UNIT,
    USER,
    USER_FUNDS,
)
from tests.helpers.factories import expected_amount_out, make_swapper, seed_pool

__all__ = [
    # Constants
    "OWNER",
    "USER",
    "OTHER_USER",
    "EXCHANGE",
    "NULL",
    "TKA",
    "TKB",
    "TKC",
    "TKD",
    "UNIT",
    "INITIAL_LIQUIDITY",
    "USER_FUNDS",
    "OWNER_FUNDS",
    "START_TIME",
    "ONE_HOUR",
    "ONE_DAY",
    # Factories
    "make_swapper",
    "seed_pool",
    "expected_amount_out",
]
