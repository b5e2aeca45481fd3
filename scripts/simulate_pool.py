#!/usr/bin/env python3
"""Simulate a two-token Swapper pool from the command line.

Seeds a pool in an in-memory TokenBank, runs a series of equal swaps one
hour apart, and prints balances, quotes and the TWAP of both tokens.

Usage:
    # 1000/1000 pool, five swaps of 10 tokens each
    python scripts/simulate_pool.py

    # Custom pool and fee, alternate swap direction, verbose logs
    python scripts/simulate_pool.py --reserve-a 5000 --reserve-b 2000 \\
        --swap-amount 25 --swaps 8 --fee 10 --alternate -v

    # Exchange parameters from the environment
    SWAPPER_FEE_NUMERATOR=5 SWAPPER_MAX_SWAP_IMPACT_PERCENT=50 \
        python scripts/simulate_pool.py

Environment:
    SWAPPER_FEE_NUMERATOR, SWAPPER_MAX_FEE_NUMERATOR, SWAPPER_MIN_LIQUIDITY,
    SWAPPER_MAX_SWAP_IMPACT_PERCENT and SWAPPER_TWAP_WINDOW override the
    exchange defaults. --fee, when given, is applied after the pool is created.
"""

import argparse
import logging
import sys
from pathlib import Path

import structlog

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from swapper import Swapper, TokenBank  # noqa: E402
from swapper.clock import ManualClock  # noqa: E402
from swapper.config import ExchangeConfig  # noqa: E402
from swapper.errors import SwapperError  # noqa: E402

logger = structlog.get_logger()

OWNER = "0x00000000000000000000000000000000000000a1"
TRADER = "0x00000000000000000000000000000000000000b2"
TOKEN_A = "0x000000000000000000000000000000000000aaaa"
TOKEN_B = "0x000000000000000000000000000000000000bbbb"
DECIMALS = 18
ONE_HOUR = 3600


def fmt(amount: int) -> str:
    """Format a base-unit amount as whole tokens."""
    return f"{amount / 10**DECIMALS:,.6f}"


def main() -> int:
    parser = argparse.ArgumentParser(description="Simulate swaps against a Swapper pool")
    parser.add_argument(
        "--reserve-a", type=int, default=1000, help="Initial TKA liquidity (whole tokens)"
    )
    parser.add_argument(
        "--reserve-b", type=int, default=1000, help="Initial TKB liquidity (whole tokens)"
    )
    parser.add_argument(
        "--swap-amount", type=int, default=10, help="Tokens in per swap (whole tokens)"
    )
    parser.add_argument("--swaps", type=int, default=5, help="Number of swaps to run")
    parser.add_argument(
        "--fee", type=int, default=None, help="Fee numerator (default: from config)"
    )
    parser.add_argument("--alternate", action="store_true", help="Alternate swap direction")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    try:
        config = ExchangeConfig.from_env()
    except ValueError as err:
        print(f"Error: invalid SWAPPER_* environment: {err}")
        return 1

    unit = 10**DECIMALS
    bank = TokenBank()
    clock = ManualClock(start=1_700_000_000)
    swapper = Swapper(owner=OWNER, custody=bank, clock=clock, config=config)

    bank.mint(TOKEN_A, OWNER, args.reserve_a * unit)
    bank.mint(TOKEN_B, OWNER, args.reserve_b * unit)
    bank.mint(TOKEN_A, TRADER, args.swap_amount * args.swaps * unit)
    bank.mint(TOKEN_B, TRADER, args.swap_amount * args.swaps * unit)

    try:
        swapper.add_supported_token(OWNER, TOKEN_A)
        swapper.add_supported_token(OWNER, TOKEN_B)
        if args.fee is not None:
            swapper.set_fee(OWNER, args.fee)
        swapper.add_liquidity(OWNER, TOKEN_A, args.reserve_a * unit)
        swapper.add_liquidity(OWNER, TOKEN_B, args.reserve_b * unit)
    except SwapperError as err:
        print(f"Error: could not seed pool: {err}")
        return 1

    print("=" * 60)
    print("Swapper pool simulation")
    print("=" * 60)
    print(f"Fee:        {swapper.get_fee()}/{config.fee_denominator}")
    print(f"Impact cap: {config.max_swap_impact_percent}%")
    print(f"Reserve A:  {fmt(swapper.get_token_balance(TOKEN_A))}")
    print(f"Reserve B:  {fmt(swapper.get_token_balance(TOKEN_B))}")
    print(f"Rate A->B:  {fmt(swapper.get_swap_rate(TOKEN_A, TOKEN_B))}")
    print()

    for i in range(args.swaps):
        clock.advance(ONE_HOUR)
        from_token, to_token = TOKEN_A, TOKEN_B
        if args.alternate and i % 2 == 1:
            from_token, to_token = TOKEN_B, TOKEN_A
        label = "A->B" if from_token == TOKEN_A else "B->A"
        try:
            amount_out = swapper.swap(TRADER, from_token, to_token, args.swap_amount * unit)
        except SwapperError as err:
            print(f"swap {i + 1:>2} {label}: rejected ({type(err).__name__})")
            continue
        print(
            f"swap {i + 1:>2} {label}: in {fmt(args.swap_amount * unit)} "
            f"out {fmt(amount_out)}  reserves A={fmt(swapper.get_token_balance(TOKEN_A))} "
            f"B={fmt(swapper.get_token_balance(TOKEN_B))}"
        )

    clock.advance(ONE_HOUR)
    print()
    for name, token in (("A", TOKEN_A), ("B", TOKEN_B)):
        twap = swapper.get_twap(token)
        status = "valid" if twap.is_valid else "insufficient data"
        print(f"TWAP {name}: {fmt(twap.price)} ({status})")

    return 0


if __name__ == "__main__":
    sys.exit(main())
