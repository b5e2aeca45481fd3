"""Tests for reentrancy protection and all-or-nothing operations."""

import pytest

from swapper import TokenBank, TransferFailed
from swapper.atomic import ReentrancyGuard, Transactional, atomic
from swapper.errors import ReentrantCall, Unauthorized
from swapper.events import EventLog, PendingEvents
from swapper.exchange import Swapper
from swapper.ledger import LiquidityLedger
from swapper.models.events import LiquidityRemoved, ZeroLiquidityPrice
from tests.helpers import EXCHANGE, OWNER, TKA, TKB, UNIT, USER, make_swapper, seed_pool


class PlainCustody:
    """Custody that can move and report balances but cannot roll back."""

    def __init__(self, bank: TokenBank) -> None:
        self.bank = bank

    def balance_of(self, token: str, account: str) -> int:
        return self.bank.balance_of(token, account)

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        self.bank.transfer(token, sender, recipient, amount)


class ListSink:
    """Sink with emit only, the smallest thing that satisfies EventSink."""

    def __init__(self) -> None:
        self.received = []

    def emit(self, event) -> None:
        self.received.append(event)


class TestReentrancyGuard:
    """Tests for the operation mutex."""

    def test_nested_entry_rejected(self):
        guard = ReentrancyGuard()
        with guard.enter("outer"):
            assert guard.locked
            with pytest.raises(ReentrantCall):
                with guard.enter("inner"):
                    pass
        assert not guard.locked

    def test_released_after_error(self):
        guard = ReentrancyGuard()
        with pytest.raises(RuntimeError):
            with guard.enter("op"):
                raise RuntimeError("boom")
        assert not guard.locked


class TestAtomic:
    """Tests for checkpoint and rollback of participants."""

    def test_rolls_back_on_error(self):
        ledger = LiquidityLedger()
        log = EventLog()
        outbox = PendingEvents(log)
        ledger.set(TKA, 100)
        with pytest.raises(RuntimeError):
            with atomic(ReentrancyGuard(), "op", (ledger, outbox)):
                ledger.set(TKA, 5)
                outbox.emit(LiquidityRemoved(token=TKA, amount=95))
                raise RuntimeError("boom")
        assert ledger.balance_of(TKA) == 100
        assert outbox.pending == ()
        assert len(log) == 0

    def test_commits_on_success(self):
        ledger = LiquidityLedger()
        with atomic(ReentrancyGuard(), "op", (ledger,)):
            ledger.set(TKA, 5)
        assert ledger.balance_of(TKA) == 5

    def test_non_transactional_participant_rejected(self):
        """A participant that cannot roll back is refused before the block runs."""
        guard = ReentrancyGuard()
        ran = []
        assert not isinstance(object(), Transactional)
        with pytest.raises(TypeError):
            with atomic(guard, "op", (LiquidityLedger(), object())):
                ran.append(True)
        assert ran == []
        assert not guard.locked


class TestSwapperAtomicity:
    """Tests for rollback and reentrancy through the exchange."""

    def test_failed_output_transfer_rolls_back_input(self, swapper, bank, event_log):
        """If the exchange cannot pay out, the user's input is returned."""
        bank.set_balance(TKB, EXCHANGE, 0)
        events_before = event_log.events
        history_before = swapper.get_price_history(TKA)

        with pytest.raises(TransferFailed):
            swapper.swap(USER, TKA, TKB, 10 * UNIT)

        assert bank.balance_of(TKA, USER) == 1000 * UNIT
        assert bank.balance_of(TKA, EXCHANGE) == 1000 * UNIT
        assert swapper.get_token_balance(TKA) == 1000 * UNIT
        assert swapper.get_token_balance(TKB) == 1000 * UNIT
        assert swapper.get_price_history(TKA) == history_before
        assert event_log.events == events_before

    def test_reentrant_swap_from_token_callback(self, swapper, bank, event_log):
        """A token calling back into swap mid-transfer aborts the outer swap."""
        calls = []

        def reenter(token, sender, recipient, amount):
            calls.append((sender, recipient))
            swapper.swap(USER, TKB, TKA, UNIT)

        bank.add_transfer_hook(TKA, reenter)
        events_before = event_log.events

        with pytest.raises(ReentrantCall):
            swapper.swap(USER, TKA, TKB, 10 * UNIT)

        assert calls == [(USER, EXCHANGE)]
        assert bank.balance_of(TKA, USER) == 1000 * UNIT
        assert bank.balance_of(TKB, USER) == 1000 * UNIT
        assert swapper.get_token_balance(TKA) == 1000 * UNIT
        assert event_log.events == events_before

        bank.clear_transfer_hooks(TKA)
        assert swapper.swap(USER, TKA, TKB, 10 * UNIT) > 0

    def test_reentrant_liquidity_call(self, swapper, bank):
        """Any operation is blocked while another is in flight."""
        bank.add_transfer_hook(TKA, lambda *args: swapper.sync_balance(TKA))
        with pytest.raises(ReentrantCall):
            swapper.add_liquidity(USER, TKA, UNIT)
        assert swapper.get_token_balance(TKA) == 1000 * UNIT

    def test_failed_fee_change_keeps_fee(self, swapper, event_log):
        count = len(event_log)
        with pytest.raises(Unauthorized):
            swapper.set_fee(USER, 10)
        assert swapper.get_fee() == 3
        assert len(event_log) == count


class TestCustodyRollback:
    """Tests that the exchange only runs on custody it can roll back."""

    def test_plain_custody_rejected(self):
        """Without checkpoint/restore a failed payout could strand the user's input."""
        bank = TokenBank()
        with pytest.raises(TypeError):
            Swapper(owner=OWNER, custody=PlainCustody(bank))

    def test_token_bank_accepted(self, bank):
        assert Swapper(owner=OWNER, custody=bank).custody is bank

    def test_failed_payout_leaves_custody_untouched(self, swapper, bank):
        """The same payout failure on a rollback-capable bank returns USER's TKA."""
        bank.set_balance(TKB, EXCHANGE, 0)
        with pytest.raises(TransferFailed):
            swapper.swap(USER, TKA, TKB, 10 * UNIT)
        assert bank.balance_of(TKA, USER) == 1000 * UNIT
        assert bank.balance_of(TKA, EXCHANGE) == 1000 * UNIT
        assert bank.balance_of(TKB, USER) == 1000 * UNIT


class TestEventDelivery:
    """Tests that sinks only hear about committed operations."""

    def test_plain_sink_sees_nothing_from_failed_operation(self):
        bank = TokenBank()
        sink = ListSink()
        swapper = make_swapper(bank, events=sink)
        seed_pool(swapper, bank)
        before = list(sink.received)
        bank.set_balance(TKA, EXCHANGE, 0)

        with pytest.raises(TransferFailed):
            swapper.remove_all_liquidity(OWNER, TKA)

        assert sink.received == before
        assert not any(isinstance(e, ZeroLiquidityPrice) for e in sink.received)
        assert swapper.get_token_balance(TKA) == 1000 * UNIT

    def test_committed_events_delivered_in_order(self):
        bank = TokenBank()
        sink = ListSink()
        swapper = make_swapper(bank, events=sink)
        seed_pool(swapper, bank)

        swapper.remove_all_liquidity(OWNER, TKA)

        assert sink.received[-2:] == [
            ZeroLiquidityPrice(token=TKA),
            LiquidityRemoved(token=TKA, amount=1000 * UNIT),
        ]

    def test_sink_may_call_back_into_exchange(self):
        """Delivery happens after the operation releases the reentrancy guard."""
        bank = TokenBank()
        seen = []

        class SyncingSink(ListSink):
            def emit(self, event) -> None:
                super().emit(event)
                swapper.sync_balance(TKA)
                seen.append(swapper.get_token_balance(TKA))

        sink = SyncingSink()
        swapper = make_swapper(bank, events=sink)
        seed_pool(swapper, bank)
        bank.mint(TKA, EXCHANGE, 5)

        swapper.swap(USER, TKA, TKB, 10 * UNIT)

        assert seen[-1] == 1010 * UNIT + 5


class TestPendingEvents:
    """Tests for the per-operation outbox."""

    def test_holds_until_flush(self):
        log = EventLog()
        outbox = PendingEvents(log)
        outbox.emit(LiquidityRemoved(token=TKA, amount=1))
        assert len(log) == 0
        outbox.flush()
        assert log.events == (LiquidityRemoved(token=TKA, amount=1),)
        assert outbox.pending == ()

    def test_restore_drops_queued_events(self):
        outbox = PendingEvents(EventLog())
        outbox.emit(LiquidityRemoved(token=TKA, amount=1))
        state = outbox.checkpoint()
        outbox.emit(LiquidityRemoved(token=TKA, amount=2))
        outbox.restore(state)
        assert outbox.pending == (LiquidityRemoved(token=TKA, amount=1),)
