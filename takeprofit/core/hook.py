"""
Take-profit order hook.

Imperative shell around the order ledger, the fill executor and the sweep
controller:

- users call `place`, `cancel`, `redeem`, `transfer_receipts`,
- the pool manager calls `after_initialize` and `after_swap`,
- read-only queries expose pending amounts, claimable output and order ids.

Every mutating entry point holds the single-entry guard and runs inside the
shared journal: it either commits completely or raises with every table
(assets, receipts, ledger, pools, events) restored.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from ..config import HookConfig
from ..errors import LedgerInvariantError, PoolError
from ..state.balances import Account, Amount, BalanceTable
from ..state.orders import OrderId, OrderLedger, OrderRecord, compute_order_id
from ..state.pools import Direction, PoolKey
from ..state.receipts import ReceiptTable
from ..state.state_root import compute_ledger_root
from .guards import (
    ReentrancyGuard,
    require_cancellable,
    require_positive_amount,
    require_redeemable,
)
from .invariants import check_all
from .pool_manager import PoolManager
from .redemption import apply_redemption
from .sweep import run_sweep
from .ticks import lower_bound
from .types import BalanceDelta, EventKind, EventLog, HookEvent, SweepResult, SwapParams

logger = logging.getLogger(__name__)

DEFAULT_HOOK_ACCOUNT = "take_profit_hook"


class TakeProfitHook:
    def __init__(
        self,
        manager: PoolManager,
        *,
        config: HookConfig = HookConfig(),
        account: Account = DEFAULT_HOOK_ACCOUNT,
    ) -> None:
        self.manager = manager
        self.balances: BalanceTable = manager.balances
        self.config = config
        self.account = account

        self.ledger = OrderLedger()
        self.receipts = ReceiptTable()
        self.event_log = EventLog()
        self._guard = ReentrancyGuard()
        self._journal = manager.journal

        self._journal.register(self.ledger)
        self._journal.register(self.receipts)
        self._journal.register(self.event_log)
        manager.register_hook(self)

    # -- plumbing -------------------------------------------------------------

    @contextmanager
    def _entry(self, name: str) -> Iterator[None]:
        with self._guard.hold(name):
            with self._journal.atomic():
                yield
                if self.config.check_invariants:
                    violations = check_all(self.ledger, self.receipts)
                    if violations:
                        raise LedgerInvariantError(violations)

    def _emit(self, event: HookEvent) -> None:
        if self.config.emit_events:
            self.event_log.append(event)

    def _require_own_pool(self, pool_key: PoolKey) -> str:
        if pool_key.hook != self.account:
            raise PoolError(f"pool {pool_key.pool_id} is not attached to hook {self.account}")
        pool_id = pool_key.pool_id
        self.ledger.last_bucket_of(pool_id)
        return pool_id

    @property
    def events(self) -> List[HookEvent]:
        return list(self.event_log.events)

    # -- pool lifecycle callbacks ---------------------------------------------

    def after_initialize(self, pool_key: PoolKey, tick: int) -> None:
        """Record the bucket containing the pool's initial price."""
        with self._entry("after_initialize"):
            bucket = lower_bound(tick, pool_key.tick_spacing)
            self.ledger.set_last_bucket(pool_key.pool_id, bucket)
            logger.debug("pool %s observed at bucket %d", pool_key.pool_id[:10], bucket)

    def after_swap(
        self,
        sender: Account,
        pool_key: PoolKey,
        params: SwapParams,
        delta: BalanceDelta,
    ) -> SweepResult:
        """Sweep the buckets crossed by a completed swap."""
        with self._entry("after_swap"):
            result = run_sweep(
                self.manager,
                self.ledger,
                pool_key,
                self.manager.current_tick(pool_key),
                params.direction,
                hook_account=self.account,
                max_buckets=self.config.max_buckets_per_sweep,
            )
            for fill in result.fills:
                self._emit(
                    HookEvent(
                        kind=EventKind.ORDER_FILLED,
                        order_id=fill.order_id,
                        amount=fill.amount_in,
                        amount_out=fill.amount_out,
                    )
                )
            return result

    # -- user entry points ----------------------------------------------------

    def place(
        self,
        caller: Account,
        pool_key: PoolKey,
        tick: int,
        amount: Amount,
        direction: Direction,
    ) -> int:
        """
        Pledge `amount` of the input asset to be sold once the price crosses
        the bucket containing `tick`. Returns the bucket lower bound.

        The caller must have approved the hook for `amount` of the input asset.
        """
        with self._entry("place"):
            require_positive_amount(amount)
            pool_id = self._require_own_pool(pool_key)
            bucket = lower_bound(tick, pool_key.tick_spacing)

            order_id, record = self.ledger.ensure_record(pool_key, bucket, direction)
            self.ledger.add_pending(pool_id, bucket, direction, amount)
            self.receipts.mint(caller, order_id, amount)
            record.total_supply += amount
            self.balances.transfer_from(self.account, caller, self.account, record.input_asset, amount)

            self._emit(HookEvent(kind=EventKind.ORDER_PLACED, order_id=order_id, amount=amount, account=caller))
            logger.info(
                "%s placed %d at bucket %d (%s) on %s", caller, amount, bucket, direction.value, pool_id[:10]
            )
            return bucket

    def cancel(self, caller: Account, pool_key: PoolKey, tick: int, direction: Direction) -> Amount:
        """Cancel the caller's whole position at the bucket and return the pledged input."""
        with self._entry("cancel"):
            pool_id = self._require_own_pool(pool_key)
            bucket = lower_bound(tick, pool_key.tick_spacing)
            order_id = compute_order_id(pool_id, bucket, direction)
            record = self.ledger.get_record(order_id)
            amount = self.receipts.balance_of(caller, order_id)
            require_cancellable(record, amount, self.ledger.pending_amount(pool_id, bucket, direction))

            self.ledger.add_pending(pool_id, bucket, direction, -amount)
            record.total_supply -= amount
            self.receipts.burn(caller, order_id, amount)
            self.balances.transfer(self.account, caller, record.input_asset, amount)

            self._emit(HookEvent(kind=EventKind.ORDER_CANCELLED, order_id=order_id, amount=amount, account=caller))
            logger.info("%s cancelled %d at bucket %d (%s)", caller, amount, bucket, direction.value)
            return amount

    def redeem(
        self,
        caller: Account,
        order_id: OrderId,
        burn_amount: Amount,
        destination: Optional[Account] = None,
    ) -> Amount:
        """Burn receipts for a pro-rata share of the order's filled output."""
        with self._entry("redeem"):
            require_positive_amount(burn_amount, name="burn_amount")
            record = self.ledger.require_record(order_id)
            balance = self.receipts.balance_of(caller, order_id)
            require_redeemable(record, balance, burn_amount)

            payout, record.claimable_amount, record.total_supply = apply_redemption(
                burn_amount, record.claimable_amount, record.total_supply
            )
            recipient = caller if destination is None else destination
            self.receipts.burn(caller, order_id, burn_amount)
            self.balances.transfer(self.account, recipient, record.output_asset, payout)

            self._emit(
                HookEvent(
                    kind=EventKind.REDEEMED,
                    order_id=order_id,
                    amount=burn_amount,
                    account=caller,
                    counterparty=recipient,
                    amount_out=payout,
                )
            )
            logger.info("%s redeemed %d receipts of %s for %d", caller, burn_amount, order_id[:10], payout)
            return payout

    def transfer_receipts(self, sender: Account, recipient: Account, order_id: OrderId, amount: Amount) -> None:
        with self._entry("transfer_receipts"):
            require_positive_amount(amount)
            self.ledger.require_record(order_id)
            self.receipts.transfer(sender, recipient, order_id, amount)
            self._emit(
                HookEvent(
                    kind=EventKind.RECEIPT_TRANSFERRED,
                    order_id=order_id,
                    amount=amount,
                    account=sender,
                    counterparty=recipient,
                )
            )

    # -- queries --------------------------------------------------------------

    def order_id(self, pool_key: PoolKey, bucket: int, direction: Direction) -> OrderId:
        return compute_order_id(pool_key.pool_id, bucket, direction)

    def pending_amount(self, pool_key: PoolKey, bucket: int, direction: Direction) -> int:
        return self.ledger.pending_amount(pool_key.pool_id, bucket, direction)

    def claimable(self, order_id: OrderId) -> Amount:
        record = self.ledger.get_record(order_id)
        return 0 if record is None else record.claimable_amount

    def total_supply(self, order_id: OrderId) -> Amount:
        record = self.ledger.get_record(order_id)
        return 0 if record is None else record.total_supply

    def receipt_balance(self, holder: Account, order_id: OrderId) -> Amount:
        return self.receipts.balance_of(holder, order_id)

    def get_order(self, order_id: OrderId) -> Optional[OrderRecord]:
        return self.ledger.get_record(order_id)

    def last_bucket(self, pool_key: PoolKey) -> int:
        return self.ledger.last_bucket_of(pool_key.pool_id)

    def ledger_root(self) -> str:
        return compute_ledger_root(ledger=self.ledger, receipts=self.receipts)

    def __repr__(self) -> str:
        return f"TakeProfitHook(account={self.account!r}, {self.ledger!r})"
