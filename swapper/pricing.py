"""Constant-product pricing.

Swap output follows x * y = k with the fee taken on the input side:

    amount_in_after_fee = amount_in * (FEE_DENOMINATOR - fee) // FEE_DENOMINATOR
    amount_out = reserve_out * amount_in_after_fee // (reserve_in + amount_in_after_fee)

All arithmetic is checked unsigned integer math with truncating division,
so a quote is reproducible bit-for-bit from the same integer inputs.
"""

from __future__ import annotations

from dataclasses import dataclass

from swapper.constants import FEE_DENOMINATOR
from swapper.safe_int import U


@dataclass(frozen=True)
class SwapQuote:
    """Result of pricing a swap against the current reserves."""

    token_in: str
    token_out: str
    amount_in: int
    amount_in_after_fee: int
    amount_out: int
    reserve_in: int
    reserve_out: int
    fee_numerator: int

    @property
    def fee_amount(self) -> int:
        """Input units retained by the pool as fee."""
        return self.amount_in - self.amount_in_after_fee

    @property
    def remaining_out(self) -> int:
        """Output reserve left after the swap."""
        return self.reserve_out - self.amount_out


class ConstantProduct:
    """Constant product AMM math.

    Formula: amount_out = (reserve_out * in_after_fee) / (reserve_in + in_after_fee)
    """

    def __init__(self, fee_denominator: int = FEE_DENOMINATOR) -> None:
        self.fee_denominator = fee_denominator

    def amount_after_fee(self, amount_in: int, fee_numerator: int) -> int:
        """Input amount left once the fee is taken (truncated).

        Raises:
            Underflow: If fee_numerator exceeds the fee denominator
        """
        in_with_fee = U(amount_in) * (U(self.fee_denominator) - U(fee_numerator))
        return (in_with_fee // U(self.fee_denominator)).value

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_numerator: int,
    ) -> int:
        """Calculate output amount using the constant product formula.

        Args:
            amount_in: Input token amount
            reserve_in: Ledger balance of the input token
            reserve_out: Ledger balance of the output token
            fee_numerator: Fee numerator over the fee denominator

        Returns:
            Output token amount. Zero when nothing goes in after the fee.

        Raises:
            Overflow: If an intermediate product exceeds uint256
        """
        in_after_fee = U(self.amount_after_fee(amount_in, fee_numerator))
        denominator = U(reserve_in) + in_after_fee
        if not denominator:
            return 0
        return (U(reserve_out) * in_after_fee // denominator).value

    def quote(
        self,
        token_in: str,
        token_out: str,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_numerator: int,
    ) -> SwapQuote:
        """Price a swap and return the full breakdown."""
        return SwapQuote(
            token_in=token_in,
            token_out=token_out,
            amount_in=amount_in,
            amount_in_after_fee=self.amount_after_fee(amount_in, fee_numerator),
            amount_out=self.get_amount_out(amount_in, reserve_in, reserve_out, fee_numerator),
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            fee_numerator=fee_numerator,
        )


# Singleton instance for the protocol fee denominator
constant_product = ConstantProduct()


__all__ = ["ConstantProduct", "SwapQuote", "constant_product"]
