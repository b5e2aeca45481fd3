"""External token custody.

The exchange does not own token balances; it asks a custody backend to
move tokens and to report what each account (including the exchange
itself) actually holds. TokenBank is an in-memory multi-token ledger that
plays the role of the token contracts for simulations and tests.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

import structlog

from swapper.errors import SwapperError
from swapper.models.types import normalize_address, short

logger = structlog.get_logger()

# Called after a transfer settles: (token, sender, recipient, amount)
TransferHook = Callable[[str, str, str, int], None]


class TransferFailed(SwapperError):
    """A token transfer could not be completed."""

    pass


@runtime_checkable
class TokenCustody(Protocol):
    """Interface the exchange uses to read and move real token balances.

    A backend must be able to capture and roll back its balances: when an
    operation fails after a transfer has settled, the exchange restores the
    checkpoint it took on entry. Swapper refuses a backend without them.
    """

    def balance_of(self, token: str, account: str) -> int:
        """Actual amount of token held by account."""
        ...

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        """Move amount of token from sender to recipient.

        Raises:
            TransferFailed: If the transfer cannot complete
        """
        ...

    def checkpoint(self) -> Any:
        """Capture all balances in an opaque token."""
        ...

    def restore(self, state: Any) -> None:
        """Roll balances back to a state returned by checkpoint()."""
        ...


class TokenBank:
    """In-memory balances for any number of fungible tokens.

    Tokens are identified by address; any address can hold any token.
    Transfer hooks let a token call back into arbitrary code after a
    transfer, the way callback-capable tokens do.
    """

    def __init__(self) -> None:
        self._balances: dict[tuple[str, str], int] = {}
        self._hooks: dict[str, list[TransferHook]] = {}

    def balance_of(self, token: str, account: str) -> int:
        return self._balances.get(_key(token, account), 0)

    def mint(self, token: str, account: str, amount: int) -> None:
        """Create amount of token out of thin air for account."""
        if amount < 0:
            raise ValueError(f"Cannot mint a negative amount: {amount}")
        key = _key(token, account)
        self._balances[key] = self._balances.get(key, 0) + amount

    def set_balance(self, token: str, account: str, amount: int) -> None:
        """Overwrite an account balance (used to simulate untracked transfers)."""
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        self._balances[_key(token, account)] = amount

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise TransferFailed(f"Cannot transfer a negative amount: {amount}")
        src = _key(token, sender)
        available = self._balances.get(src, 0)
        if available < amount:
            logger.warning(
                "transfer_failed",
                token=short(token),
                sender=short(sender),
                amount=amount,
                available=available,
            )
            raise TransferFailed(
                f"Insufficient balance of {token} for {sender}: {available} < {amount}"
            )
        self._balances[src] = available - amount
        dst = _key(token, recipient)
        self._balances[dst] = self._balances.get(dst, 0) + amount

        token_norm, sender_norm, recipient_norm = src[0], src[1], dst[1]
        for hook in self._hooks.get(token_norm, []):
            hook(token_norm, sender_norm, recipient_norm, amount)

    def add_transfer_hook(self, token: str, hook: TransferHook) -> None:
        """Invoke hook after every transfer of token."""
        self._hooks.setdefault(normalize_address(token), []).append(hook)

    def clear_transfer_hooks(self, token: str) -> None:
        self._hooks.pop(normalize_address(token), None)

    # --- Transactional ---

    def checkpoint(self) -> dict[tuple[str, str], int]:
        return dict(self._balances)

    def restore(self, state: dict[tuple[str, str], int]) -> None:
        self._balances = dict(state)


def _key(token: str, account: str) -> tuple[str, str]:
    return normalize_address(token), normalize_address(account)
