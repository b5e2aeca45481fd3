"""Internal accounting balances per token.

The ledger is the exchange's bookkeeping value for each token. It is kept
in step with custody by the liquidity and swap operations, but tokens sent
to the exchange outside those operations make the two drift apart until
someone calls sync. Callers must not assume ledger == custody.
"""

from __future__ import annotations

from swapper.errors import InsufficientLiquidity
from swapper.safe_int import U


class LiquidityLedger:
    """Token address -> non-negative ledger balance."""

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}

    def balance_of(self, token: str) -> int:
        return self._balances.get(token, 0)

    def credit(self, token: str, amount: int) -> int:
        """Increase a balance; returns the new balance.

        Raises:
            Overflow: If the balance would exceed uint256
        """
        new_balance = (U(self.balance_of(token)) + U(amount)).value
        self._balances[token] = new_balance
        return new_balance

    def debit(self, token: str, amount: int) -> int:
        """Decrease a balance; returns the new balance.

        Raises:
            InsufficientLiquidity: If amount exceeds the balance
        """
        remaining = U(self.balance_of(token)).checked_sub(U(amount))
        if remaining is None:
            raise InsufficientLiquidity(
                f"Ledger balance of {token} is {self.balance_of(token)}, requested {amount}"
            )
        self._balances[token] = remaining.value
        return remaining.value

    def set(self, token: str, amount: int) -> None:
        """Overwrite a balance (reconciliation with custody)."""
        self._balances[token] = U(amount).value

    def items(self) -> list[tuple[str, int]]:
        """All tracked (token, balance) pairs, including zero balances."""
        return list(self._balances.items())

    # --- Transactional ---

    def checkpoint(self) -> dict[str, int]:
        return dict(self._balances)

    def restore(self, state: dict[str, int]) -> None:
        self._balances = dict(state)
