"""Per-token price history and time-weighted average price.

After every balance-changing market operation the exchange records an
observation for each token involved. The observed price is an
inverse-of-balance proxy,

    price = (PRICE_SCALE ** 2 // balance) * PRICE_SCALE_ADJUST

not a ratio between two reserves, so the TWAP tracks "inverse liquidity
over time" for a single token rather than an exchange rate.

The TWAP weights each observed price by how long it stayed the latest
observation, and extends the final price forward to the present.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass

import structlog

from swapper.clock import Clock, system_clock
from swapper.config import DEFAULT_CONFIG, ExchangeConfig
from swapper.events import EventSink
from swapper.ledger import LiquidityLedger
from swapper.models.events import ZeroLiquidityPrice
from swapper.models.types import short
from swapper.safe_int import U

logger = structlog.get_logger()


@dataclass(frozen=True)
class PriceObservation:
    """A price sample; price is scaled by PRICE_SCALE."""

    timestamp: int
    price: int


@dataclass(frozen=True)
class TwapResult:
    """Outcome of a TWAP query.

    "Not enough data" is a normal result rather than an error, so the
    price comes with a validity flag. The result unpacks as a pair:

        price, is_valid = oracle.get_twap(token)
    """

    price: int
    is_valid: bool

    @classmethod
    def invalid(cls) -> TwapResult:
        return cls(price=0, is_valid=False)

    def __iter__(self) -> Iterator[int | bool]:
        yield self.price
        yield self.is_valid


class PriceOracle:
    """Bounded FIFO price histories and the TWAP query over them."""

    def __init__(
        self,
        ledger: LiquidityLedger,
        events: EventSink,
        clock: Clock = system_clock,
        config: ExchangeConfig = DEFAULT_CONFIG,
    ) -> None:
        self.ledger = ledger
        self.events = events
        self.clock = clock
        self.config = config
        self._history: dict[str, deque[PriceObservation]] = {}

    def current_price(self, token: str) -> int | None:
        """Proxy price from the token's ledger balance, None if the balance is 0."""
        balance = self.ledger.balance_of(token)
        if balance == 0:
            return None
        scale = U(self.config.price_scale)
        return ((scale * scale) // U(balance) * U(self.config.price_scale_adjust)).value

    def record_observation(self, token: str) -> PriceObservation | None:
        """Append an observation for token, evicting the oldest at capacity.

        Returns:
            The recorded observation, or None if the balance is zero (a
            ZeroLiquidityPrice event is emitted instead)
        """
        price = self.current_price(token)
        if price is None:
            logger.debug("zero_liquidity_price", token=short(token))
            self.events.emit(ZeroLiquidityPrice(token=token))
            return None

        observation = PriceObservation(timestamp=self.clock(), price=price)
        history = self._history.get(token)
        if history is None:
            history = deque(maxlen=self.config.max_price_history)
            self._history[token] = history
        # deque(maxlen=...) drops the oldest entry on append when full
        history.append(observation)
        logger.debug(
            "price_observed",
            token=short(token),
            price=price,
            timestamp=observation.timestamp,
            history_len=len(history),
        )
        return observation

    def history(self, token: str) -> tuple[PriceObservation, ...]:
        """Observations for token, oldest first."""
        return tuple(self._history.get(token, ()))

    def get_twap(self, token: str) -> TwapResult:
        """Time-weighted average price over the trailing window.

        Membership is checked by the caller; this only looks at history.

        Returns:
            TwapResult(price, True), or TwapResult(0, False) when there are
            fewer than min_twap_observations samples or no retained
            interval has positive length
        """
        history = self._history.get(token, ())
        if len(history) < self.config.min_twap_observations:
            return TwapResult.invalid()

        now = self.clock()
        period_start = now - self.config.twap_window

        weighted_sum = U(0)
        time_sum = U(0)
        previous: PriceObservation | None = None

        for observation in history:
            if observation.timestamp < period_start:
                continue
            if observation.timestamp >= now:
                break
            if previous is not None:
                elapsed = U(observation.timestamp) - U(previous.timestamp)
                weighted_sum = weighted_sum + U(previous.price) * elapsed
                time_sum = time_sum + elapsed
            previous = observation

        if previous is not None and previous.timestamp < now:
            elapsed = U(now) - U(previous.timestamp)
            weighted_sum = weighted_sum + U(previous.price) * elapsed
            time_sum = time_sum + elapsed

        if not time_sum:
            return TwapResult.invalid()

        return TwapResult(price=(weighted_sum // time_sum).value, is_valid=True)

    def tokens(self) -> list[str]:
        """Tokens with at least one recorded observation."""
        return [token for token, history in self._history.items() if history]

    # --- Transactional ---

    def checkpoint(self) -> dict[str, tuple[PriceObservation, ...]]:
        return {token: tuple(history) for token, history in self._history.items()}

    def restore(self, state: dict[str, tuple[PriceObservation, ...]]) -> None:
        self._history = {
            token: deque(observations, maxlen=self.config.max_price_history)
            for token, observations in state.items()
        }
