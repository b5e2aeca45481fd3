"""Swapper: the exchange engine.

Composes the token registry, liquidity ledger, swap guard, pricing, price
oracle and access control behind the public operations. Each mutating
operation runs as one atomic unit (see swapper.atomic): it either commits
completely or leaves engine state and custody balances exactly as they
were. Notifications reach the event sink only after the operation commits.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from swapper.access import AccessControl, OperationalMode
from swapper.atomic import ReentrancyGuard, atomic
from swapper.clock import Clock, system_clock
from swapper.config import DEFAULT_CONFIG, ExchangeConfig
from swapper.constants import EXCHANGE_ADDRESS
from swapper.custody import TokenCustody
from swapper.errors import FeeTooHigh, InsufficientLiquidity, NothingToRemove, SameTokenSwap
from swapper.events import EventLog, EventSink, PendingEvents
from swapper.guard import SwapGuard
from swapper.ledger import LiquidityLedger
from swapper.models.events import (
    FeeUpdated,
    LiquidityAdded,
    LiquidityRemoved,
    OwnershipTransferred,
    Paused,
    SupportedTokenAdded,
    SupportedTokenRemoved,
    TokenSwapped,
    Unpaused,
)
from swapper.models.snapshot import ExchangeSnapshot, PriceObservationModel
from swapper.models.types import normalize_address, short
from swapper.oracle import PriceObservation, PriceOracle, TwapResult
from swapper.pricing import ConstantProduct
from swapper.registry import TokenRegistry, checked_address
from swapper.safe_int import U

logger = structlog.get_logger()


class Swapper:
    """Single-pool token exchange.

    Usage:
        bank = TokenBank()
        swapper = Swapper(owner=OWNER, custody=bank)
        swapper.add_supported_token(OWNER, TKA)
        swapper.add_supported_token(OWNER, TKB)
        swapper.add_liquidity(OWNER, TKA, 1000 * 10**18)
        swapper.add_liquidity(OWNER, TKB, 1000 * 10**18)
        amount_out = swapper.swap(USER, TKA, TKB, 10 * 10**18, min_amount_out=0)

    Args:
        owner: Account allowed to run administrative operations
        custody: Backend holding the real token balances; must support
            checkpoint/restore
        address: Account under which the exchange holds tokens in custody
        events: Notification sink (default: a new EventLog)
        clock: Source of "now" for price observations (default: wall clock)
        config: Fee, guard and oracle parameters

    Raises:
        TypeError: If custody cannot checkpoint and restore its balances
        InvalidAddress: If address is malformed or null
    """

    def __init__(
        self,
        owner: str,
        custody: TokenCustody,
        *,
        address: str = EXCHANGE_ADDRESS,
        events: EventSink | None = None,
        clock: Clock = system_clock,
        config: ExchangeConfig = DEFAULT_CONFIG,
    ) -> None:
        if not isinstance(custody, TokenCustody):
            raise TypeError(
                f"{type(custody).__name__} is not a usable custody backend: "
                "balance_of, transfer, checkpoint and restore are required"
            )
        self.address = checked_address(address)
        self.custody = custody
        self.events: EventSink = events if events is not None else EventLog()
        self._outbox = PendingEvents(self.events)
        self.config = config

        self.access = AccessControl(owner)
        self.registry = TokenRegistry()
        self.ledger = LiquidityLedger()
        self.pricing = ConstantProduct(fee_denominator=config.fee_denominator)
        self.oracle = PriceOracle(self.ledger, self._outbox, clock=clock, config=config)
        self.guard = SwapGuard(self.registry, self.ledger, custody, self.pricing, config)

        self._fee_numerator = config.initial_fee_numerator
        self._reentrancy = ReentrancyGuard()

        logger.info(
            "swapper_created",
            owner=short(self.access.owner),
            address=short(self.address),
            fee_numerator=self._fee_numerator,
        )

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        with atomic(self._reentrancy, name, (self, self.custody, self._outbox)):
            yield
        self._outbox.flush()

    # =========================================================================
    # Token registry (owner)
    # =========================================================================

    def add_supported_token(self, sender: str, token: str) -> None:
        """List a token for liquidity and swaps.

        Raises:
            Unauthorized: If sender is not the owner
            InvalidAddress: If token is the null address
            AlreadySupported: If token is already listed
        """
        with self._operation("add_supported_token"):
            self.access.require_owner(sender)
            token = self.registry.add(token)
            self._outbox.emit(SupportedTokenAdded(token=token))
        logger.info("supported_token_added", token=short(token))

    def remove_supported_token(self, sender: str, token: str) -> None:
        """Delist a token. Its balance and price history are kept.

        Raises:
            Unauthorized: If sender is not the owner
            InvalidAddress: If token is the null address
            NotSupported: If token is not listed
        """
        with self._operation("remove_supported_token"):
            self.access.require_owner(sender)
            token = self.registry.remove(token)
            self._outbox.emit(SupportedTokenRemoved(token=token))
        logger.info("supported_token_removed", token=short(token))

    # =========================================================================
    # Liquidity
    # =========================================================================

    def add_liquidity(self, sender: str, token: str, amount: int) -> None:
        """Deposit amount of token from sender into the pool.

        Raises:
            EnforcedPause: If the exchange is paused
            UnsupportedToken: If token is not listed
            TransferFailed: If sender cannot pay amount
        """
        with self._operation("add_liquidity"):
            self.access.require_active()
            (token,) = self.registry.require_supported(token)
            amount = U(amount).value

            self.custody.transfer(token, sender, self.address, amount)
            new_balance = self.ledger.credit(token, amount)
            self.oracle.record_observation(token)
            self._outbox.emit(LiquidityAdded(token=token, amount=amount))

        logger.info(
            "liquidity_added",
            token=short(token),
            sender=short(sender),
            amount=amount,
            balance=new_balance,
        )

    def remove_liquidity(self, sender: str, token: str, amount: int) -> int:
        """Send amount of token to the owner and resync the ledger to custody.

        The ledger ends at (actual custody - amount), so any drift between
        ledger and custody is absorbed here.

        Returns:
            The amount removed

        Raises:
            EnforcedPause: If the exchange is paused
            Unauthorized: If sender is not the owner
            UnsupportedToken: If token is not listed
            InsufficientLiquidity: If custody holds less than amount
        """
        with self._operation("remove_liquidity"):
            self.access.require_active()
            self.access.require_owner(sender)
            (token,) = self.registry.require_supported(token)

            held = U(self.custody.balance_of(token, self.address))
            remaining = held.checked_sub(U(amount))
            if remaining is None:
                logger.warning(
                    "remove_liquidity_rejected",
                    token=short(token),
                    amount=amount,
                    held=held.value,
                )
                raise InsufficientLiquidity(
                    f"Custody holds {held.value} of {token}, requested {amount}"
                )

            self.ledger.set(token, remaining.value)
            self.oracle.record_observation(token)
            self.custody.transfer(token, self.address, sender, amount)
            self._outbox.emit(LiquidityRemoved(token=token, amount=amount))

        logger.info(
            "liquidity_removed", token=short(token), amount=amount, balance=remaining.value
        )
        return amount

    def remove_all_liquidity(self, sender: str, token: str) -> int:
        """Send the whole ledger balance of token to sender.

        Not owner-restricted, unlike remove_liquidity.

        Returns:
            The amount removed

        Raises:
            EnforcedPause: If the exchange is paused
            UnsupportedToken: If token is not listed
            NothingToRemove: If the ledger balance is zero
        """
        with self._operation("remove_all_liquidity"):
            self.access.require_active()
            (token,) = self.registry.require_supported(token)

            amount = self.ledger.balance_of(token)
            if amount == 0:
                raise NothingToRemove(f"No liquidity to remove for {token}")

            self.ledger.set(token, 0)
            self.oracle.record_observation(token)
            self.custody.transfer(token, self.address, sender, amount)
            self._outbox.emit(LiquidityRemoved(token=token, amount=amount))

        logger.info(
            "all_liquidity_removed", token=short(token), sender=short(sender), amount=amount
        )
        return amount

    def sync_balance(self, token: str) -> None:
        """Overwrite the ledger balance of token with actual custody.

        Raises:
            UnsupportedToken: If token is not listed
        """
        with self._operation("sync_balance"):
            (token,) = self.registry.require_supported(token)
            previous = self.ledger.balance_of(token)
            actual = self.custody.balance_of(token, self.address)
            self.ledger.set(token, actual)

        if actual != previous:
            logger.info("balance_synced", token=short(token), previous=previous, actual=actual)

    def withdraw_token(self, sender: str, token: str, amount: int) -> None:
        """Administrative sweep of amount of token to the owner.

        Does not record a price observation.

        Raises:
            Unauthorized: If sender is not the owner
            InsufficientLiquidity: If the ledger balance is below amount
        """
        with self._operation("withdraw_token"):
            self.access.require_owner(sender)
            token = checked_address(token)
            new_balance = self.ledger.debit(token, amount)
            self.custody.transfer(token, self.address, self.access.owner, amount)

        logger.info("token_withdrawn", token=short(token), amount=amount, balance=new_balance)

    # =========================================================================
    # Swaps
    # =========================================================================

    def swap(
        self,
        sender: str,
        from_token: str,
        to_token: str,
        amount_in: int,
        min_amount_out: int = 0,
    ) -> int:
        """Swap amount_in of from_token for at least min_amount_out of to_token.

        Returns:
            Amount of to_token sent to sender

        Raises:
            EnforcedPause: If the exchange is paused
            SwapperError: First failing SwapGuard check (see swapper.guard)
        """
        with self._operation("swap"):
            self.access.require_active()
            quote = self.guard.check(
                sender,
                from_token,
                to_token,
                U(amount_in).value,
                U(min_amount_out).value,
                self._fee_numerator,
            )
            sender = normalize_address(sender)

            self.custody.transfer(quote.token_in, sender, self.address, quote.amount_in)
            self.custody.transfer(quote.token_out, self.address, sender, quote.amount_out)
            self.ledger.credit(quote.token_in, quote.amount_in)
            self.ledger.debit(quote.token_out, quote.amount_out)
            self.oracle.record_observation(quote.token_in)
            self.oracle.record_observation(quote.token_out)
            self._outbox.emit(
                TokenSwapped(
                    sender=sender,
                    from_token=quote.token_in,
                    to_token=quote.token_out,
                    amount_in=quote.amount_in,
                    amount_out=quote.amount_out,
                )
            )

        logger.info(
            "token_swapped",
            sender=short(sender),
            from_token=short(quote.token_in),
            to_token=short(quote.token_out),
            amount_in=quote.amount_in,
            amount_out=quote.amount_out,
            fee=quote.fee_amount,
        )
        return quote.amount_out

    # =========================================================================
    # Fees and operational mode (owner)
    # =========================================================================

    def set_fee(self, sender: str, fee_numerator: int) -> None:
        """Set the fee numerator (over config.fee_denominator).

        Raises:
            Unauthorized: If sender is not the owner
            FeeTooHigh: If fee_numerator exceeds config.max_fee_numerator
        """
        with self._operation("set_fee"):
            self.access.require_owner(sender)
            fee_numerator = U(fee_numerator).value
            if fee_numerator > self.config.max_fee_numerator:
                raise FeeTooHigh(
                    f"Fee too high: {fee_numerator} > {self.config.max_fee_numerator}"
                )
            self._fee_numerator = fee_numerator
            self._outbox.emit(FeeUpdated(new_fee=fee_numerator))

        logger.info("fee_updated", fee_numerator=fee_numerator)

    def pause(self, sender: str) -> None:
        """Block liquidity and swap operations.

        Raises:
            Unauthorized: If sender is not the owner
            EnforcedPause: If already paused
        """
        with self._operation("pause"):
            self.access.pause(sender)
            self._outbox.emit(Paused(account=self.access.owner))

    def unpause(self, sender: str) -> None:
        """Re-enable liquidity and swap operations.

        Raises:
            Unauthorized: If sender is not the owner
            ExpectedPause: If not paused
        """
        with self._operation("unpause"):
            self.access.unpause(sender)
            self._outbox.emit(Unpaused(account=self.access.owner))

    def transfer_ownership(self, sender: str, new_owner: str) -> None:
        """Hand administrative control to new_owner.

        Raises:
            Unauthorized: If sender is not the owner
            InvalidAddress: If new_owner is malformed or the null address
        """
        with self._operation("transfer_ownership"):
            previous, new_owner = self.access.transfer_ownership(sender, new_owner)
            self._outbox.emit(OwnershipTransferred(previous_owner=previous, new_owner=new_owner))

    # =========================================================================
    # Read-only views
    # =========================================================================

    @property
    def owner(self) -> str:
        return self.access.owner

    @property
    def paused(self) -> bool:
        return self.access.paused

    @property
    def mode(self) -> OperationalMode:
        return self.access.mode

    def get_fee(self) -> int:
        return self._fee_numerator

    def is_supported(self, token: str) -> bool:
        return self.registry.is_supported(token)

    @property
    def supported_tokens(self) -> list[str]:
        return self.registry.tokens

    def get_token_balance(self, token: str) -> int:
        """Ledger balance of token, or 0 if token is not listed."""
        if not self.registry.is_supported(token):
            return 0
        return self.ledger.balance_of(normalize_address(token))

    def get_twap(self, token: str) -> TwapResult:
        """Time-weighted average of the token's observed prices.

        Raises:
            UnsupportedToken: If token is not listed
        """
        (token,) = self.registry.require_supported(token)
        return self.oracle.get_twap(token)

    def get_price_history(self, token: str) -> tuple[PriceObservation, ...]:
        """Recorded observations for token, oldest first (kept after delisting)."""
        return self.oracle.history(normalize_address(token))

    def get_amount_out(self, from_token: str, to_token: str, amount_in: int) -> int:
        """Quote a swap at the current reserves and fee without executing it.

        Only the pricing formula is applied; SwapGuard limits are not checked.

        Raises:
            UnsupportedToken: If either token is not listed
            SameTokenSwap: If the tokens are the same
        """
        from_token, to_token = self.registry.require_supported(from_token, to_token)
        if from_token == to_token:
            raise SameTokenSwap(f"Cannot quote {from_token} against itself")
        return self.pricing.get_amount_out(
            U(amount_in).value,
            self.ledger.balance_of(from_token),
            self.ledger.balance_of(to_token),
            self._fee_numerator,
        )

    def get_swap_rate(self, from_token: str, to_token: str) -> int:
        """Output for one whole unit (PRICE_SCALE) of from_token, fee included."""
        return self.get_amount_out(from_token, to_token, self.config.price_scale)

    def snapshot(self) -> ExchangeSnapshot:
        """Externally readable state as a serializable model."""
        history_tokens = self.oracle.tokens()
        return ExchangeSnapshot(
            owner=self.access.owner,
            paused=self.access.paused,
            fee_numerator=self._fee_numerator,
            supported_tokens=self.registry.tokens,
            balances={token: balance for token, balance in self.ledger.items()},
            price_history={
                token: [
                    PriceObservationModel(timestamp=o.timestamp, price=o.price)
                    for o in self.oracle.history(token)
                ]
                for token in history_tokens
            },
        )

    # =========================================================================
    # Transactional (engine-wide checkpoint for atomic operations)
    # =========================================================================

    def checkpoint(self) -> dict[str, Any]:
        return {
            "access": self.access.checkpoint(),
            "registry": self.registry.checkpoint(),
            "ledger": self.ledger.checkpoint(),
            "oracle": self.oracle.checkpoint(),
            "fee_numerator": self._fee_numerator,
        }

    def restore(self, state: dict[str, Any]) -> None:
        self.access.restore(state["access"])
        self.registry.restore(state["registry"])
        self.ledger.restore(state["ledger"])
        self.oracle.restore(state["oracle"])
        self._fee_numerator = state["fee_numerator"]
