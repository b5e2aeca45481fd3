"""Swapper error classes.

Every error aborts the operation that raised it; the exchange rolls back
any state the operation touched before the exception reaches the caller.
The hierarchy groups conditions by who is at fault:

- ValidationError: the caller passed a malformed or disallowed argument
- LiquidityError: the requested movement exceeds what the pool can support
- MarketProtectionError: the trade is valid but breaches an execution bound
- BalanceError: the caller lacks funds for the input leg
- AccessError: ownership or pause-mode gate failures
"""


class SwapperError(Exception):
    """Base error for Swapper operations."""

    pass


# --- Validation ---


class ValidationError(SwapperError):
    """Caller passed a malformed or policy-violating argument."""

    pass


class InvalidAddress(ValidationError):
    """Address is the null identity or not a well-formed address."""

    pass


class AlreadySupported(ValidationError):
    """Token is already on the supported list."""

    pass


class NotSupported(ValidationError):
    """Token cannot be delisted because it is not on the supported list."""

    pass


class UnsupportedToken(ValidationError):
    """Operation references a token that is not on the supported list."""

    pass


class SameTokenSwap(ValidationError):
    """Swap input and output token are the same."""

    pass


class FeeTooHigh(ValidationError):
    """Fee numerator exceeds the configured maximum."""

    pass


# --- Liquidity ---


class LiquidityError(SwapperError):
    """Requested movement exceeds what the ledger or custody can support."""

    pass


class InsufficientLiquidity(LiquidityError):
    """Requested amount exceeds the available balance."""

    pass


class InsufficientSwapperLiquidity(LiquidityError):
    """Output token has no liquidity at all."""

    pass


class InsufficientRemainingLiquidity(LiquidityError):
    """Swap would leave the output reserve below the minimum liquidity floor."""

    pass


class NothingToRemove(LiquidityError):
    """Ledger balance is already zero."""

    pass


# --- Market protection ---


class MarketProtectionError(SwapperError):
    """Trade is individually valid but violates an execution bound."""

    pass


class ExcessiveSwapImpact(MarketProtectionError):
    """Output amount exceeds the maximum share of the output reserve."""

    pass


class SlippageExceeded(MarketProtectionError):
    """Output amount is below the caller's minimum."""

    pass


# --- Balance ---


class BalanceError(SwapperError):
    """Caller lacks funds to satisfy the input leg."""

    pass


class InsufficientUserBalance(BalanceError):
    """Caller's token balance is below the swap input."""

    pass


# --- Access ---


class AccessError(SwapperError):
    """Ownership or operational-mode gate failure."""

    pass


class Unauthorized(AccessError):
    """Caller is not the owner."""

    def __init__(self, account: str) -> None:
        super().__init__(f"Unauthorized account: {account}")
        self.account = account


class EnforcedPause(AccessError):
    """Operation requires the exchange to be active, but it is paused."""

    pass


class ExpectedPause(AccessError):
    """Operation requires the exchange to be paused, but it is active."""

    pass


# --- Concurrency ---


class ReentrantCall(SwapperError):
    """An operation was entered while another one is still in progress."""

    pass
