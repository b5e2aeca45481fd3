"""Validation chain gating every swap.

Checks run in a fixed order and the first failure wins, so callers get a
deterministic error for any combination of bad inputs:

1. both tokens supported              -> UnsupportedToken
2. distinct tokens                    -> SameTokenSwap
3. sender is a real, non-null account -> InvalidAddress
4. sender holds amount_in             -> InsufficientUserBalance
5. output reserve is non-empty        -> InsufficientSwapperLiquidity
6. price the swap
7. output reserve stays >= floor      -> InsufficientRemainingLiquidity
8. output <= impact cap of reserve    -> ExcessiveSwapImpact
9. output >= caller's minimum         -> SlippageExceeded

No asset moves and no state changes here; the exchange executes the swap
only after check() returns.
"""

from __future__ import annotations

import structlog

from swapper.config import DEFAULT_CONFIG, ExchangeConfig
from swapper.custody import TokenCustody
from swapper.errors import (
    ExcessiveSwapImpact,
    InsufficientRemainingLiquidity,
    InsufficientSwapperLiquidity,
    InsufficientUserBalance,
    SameTokenSwap,
    SlippageExceeded,
    SwapperError,
)
from swapper.ledger import LiquidityLedger
from swapper.models.types import short
from swapper.pricing import ConstantProduct, SwapQuote
from swapper.registry import TokenRegistry, checked_address
from swapper.safe_int import U

logger = structlog.get_logger()


class SwapGuard:
    """Ordered pre-trade checks for Swapper.swap."""

    def __init__(
        self,
        registry: TokenRegistry,
        ledger: LiquidityLedger,
        custody: TokenCustody,
        pricing: ConstantProduct,
        config: ExchangeConfig = DEFAULT_CONFIG,
    ) -> None:
        self.registry = registry
        self.ledger = ledger
        self.custody = custody
        self.pricing = pricing
        self.config = config

    def max_amount_out(self, reserve_out: int) -> int:
        """Largest output the impact cap allows against reserve_out."""
        return (U(reserve_out) * U(self.config.max_swap_impact_percent) // U(100)).value

    def check(
        self,
        sender: str,
        from_token: str,
        to_token: str,
        amount_in: int,
        min_amount_out: int,
        fee_numerator: int,
    ) -> SwapQuote:
        """Run every check and return the priced swap.

        Args:
            sender: Account paying amount_in
            from_token: Token the sender gives
            to_token: Token the sender receives
            amount_in: Amount of from_token
            min_amount_out: Smallest acceptable amount of to_token
            fee_numerator: Current fee numerator

        Returns:
            SwapQuote against the current ledger reserves

        Raises:
            SwapperError: The first failing check's error (see module docstring)
        """
        try:
            return self._check(
                sender, from_token, to_token, amount_in, min_amount_out, fee_numerator
            )
        except SwapperError as err:
            logger.warning(
                "swap_rejected",
                reason=type(err).__name__,
                sender=short(sender),
                from_token=short(from_token),
                to_token=short(to_token),
                amount_in=amount_in,
                min_amount_out=min_amount_out,
            )
            raise

    def _check(
        self,
        sender: str,
        from_token: str,
        to_token: str,
        amount_in: int,
        min_amount_out: int,
        fee_numerator: int,
    ) -> SwapQuote:
        from_token, to_token = self.registry.require_supported(from_token, to_token)

        if from_token == to_token:
            raise SameTokenSwap(f"Cannot swap {from_token} for itself")

        sender = checked_address(sender)
        user_balance = self.custody.balance_of(from_token, sender)
        if user_balance < amount_in:
            raise InsufficientUserBalance(
                f"Sender balance {user_balance} is below amount in {amount_in}"
            )

        reserve_out = self.ledger.balance_of(to_token)
        if reserve_out == 0:
            raise InsufficientSwapperLiquidity(f"No liquidity for {to_token}")

        quote = self.pricing.quote(
            token_in=from_token,
            token_out=to_token,
            amount_in=amount_in,
            reserve_in=self.ledger.balance_of(from_token),
            reserve_out=reserve_out,
            fee_numerator=fee_numerator,
        )

        if quote.remaining_out < self.config.min_liquidity:
            raise InsufficientRemainingLiquidity(
                f"Swap would leave {quote.remaining_out} of {to_token}, "
                f"minimum is {self.config.min_liquidity}"
            )

        cap = self.max_amount_out(reserve_out)
        if quote.amount_out > cap:
            raise ExcessiveSwapImpact(
                f"Output {quote.amount_out} exceeds {self.config.max_swap_impact_percent}% "
                f"of reserve {reserve_out} (cap {cap})"
            )

        if quote.amount_out < min_amount_out:
            raise SlippageExceeded(f"Output {quote.amount_out} is below minimum {min_amount_out}")

        return quote
