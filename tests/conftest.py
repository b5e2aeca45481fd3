"""Pytest configuration and fixtures."""

import pytest

from swapper import EventLog, Swapper, TokenBank
from swapper.clock import ManualClock
from swapper.ledger import LiquidityLedger
from swapper.oracle import PriceOracle
from tests.helpers import START_TIME, make_swapper, seed_pool


@pytest.fixture
def bank() -> TokenBank:
    """An empty in-memory token bank."""
    return TokenBank()


@pytest.fixture
def clock() -> ManualClock:
    """A manual clock starting at START_TIME."""
    return ManualClock(start=START_TIME)


@pytest.fixture
def event_log() -> EventLog:
    return EventLog()


@pytest.fixture
def empty_swapper(bank: TokenBank, clock: ManualClock, event_log: EventLog) -> Swapper:
    """An exchange with no listed tokens."""
    return make_swapper(bank, clock=clock, events=event_log)


@pytest.fixture
def swapper(empty_swapper: Swapper, bank: TokenBank) -> Swapper:
    """An exchange with TKA/TKB listed and 1000/1000 liquidity.

    USER holds 1000 of each token; OWNER holds the rest of its mint.
    """
    seed_pool(empty_swapper, bank)
    return empty_swapper


# =============================================================================
# Oracle fixtures
# =============================================================================


@pytest.fixture
def ledger() -> LiquidityLedger:
    return LiquidityLedger()


@pytest.fixture
def oracle(ledger: LiquidityLedger, event_log: EventLog, clock: ManualClock) -> PriceOracle:
    """A PriceOracle over a standalone ledger with default config."""
    return PriceOracle(ledger, event_log, clock=clock)
