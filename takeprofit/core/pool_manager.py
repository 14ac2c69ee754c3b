"""
Reference pool controller.

A compact singleton-style manager for constant-product pools that exposes the
surface the order hook depends on:

- `unlock(callback)`: an atomic settlement context. Swaps inside it accrue
  per-asset deltas for the caller; the caller pushes what it owes with
  `settle` and pulls what it is owed with `take`. The context must net to zero
  when the callback returns, otherwise `CurrencyNotSettled` aborts it.
- Hook notifications: `after_initialize` on pool creation and `after_swap`
  after every swap whose sender is not the hook itself.
- Queries: `current_tick`, `get_pool`.

Every public mutating call runs inside the shared `Journal`, so a failure in a
nested hook callback rolls back the triggering swap as well.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, TypeVar

from ..errors import (
    CurrencyNotSettled,
    ManagerLocked,
    PoolAlreadyInitialized,
    PoolError,
    PriceLimitExceeded,
    UnknownPool,
)
from ..state.balances import Account, Amount, AssetId, BalanceTable
from ..state.journal import Journal
from ..state.pools import Direction, PoolKey, PoolState
from .cpmm import swap_exact_in, swap_exact_out
from .ticks import (
    MAX_SQRT_RATIO,
    MIN_SQRT_RATIO,
    get_tick_at_sqrt_ratio,
    sqrt_price_x96_from_reserves,
)
from .types import BalanceDelta, SwapParams

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PoolHook(Protocol):
    account: str

    def after_initialize(self, pool_key: PoolKey, tick: int) -> None: ...

    def after_swap(self, sender: Account, pool_key: PoolKey, params: SwapParams, delta: BalanceDelta) -> Any: ...


def default_price_limit(direction: Direction) -> int:
    """The loosest valid sqrt price limit for a swap in `direction`."""
    return MIN_SQRT_RATIO + 1 if direction.zero_for_one else MAX_SQRT_RATIO - 1


class PoolManager:
    def __init__(
        self,
        balances: BalanceTable,
        *,
        journal: Optional[Journal] = None,
        account: Account = "pool_manager",
    ) -> None:
        self.balances = balances
        self.journal = journal if journal is not None else Journal()
        self.account = account
        self._pools: Dict[str, PoolState] = {}
        self._hooks: Dict[Account, PoolHook] = {}
        # One delta frame per open unlock context, innermost last.
        self._frames: List[Dict[AssetId, int]] = []

        self.journal.register(balances)
        self.journal.register(self)

    # -- hooks ----------------------------------------------------------------

    def register_hook(self, hook: PoolHook) -> None:
        if hook.account in self._hooks and self._hooks[hook.account] is not hook:
            raise PoolError(f"hook account already registered: {hook.account}")
        self._hooks[hook.account] = hook

    def _hook_for(self, key: PoolKey) -> Optional[PoolHook]:
        if key.hook is None:
            return None
        hook = self._hooks.get(key.hook)
        if hook is None:
            raise PoolError(f"hook {key.hook} is not registered")
        return hook

    # -- queries --------------------------------------------------------------

    def get_pool(self, key: PoolKey) -> PoolState:
        pool = self._pools.get(key.pool_id)
        if pool is None:
            raise UnknownPool(f"pool not initialized: {key.pool_id}")
        return pool

    def current_tick(self, key: PoolKey) -> int:
        return self.get_pool(key).tick

    @property
    def unlocked(self) -> bool:
        return bool(self._frames)

    # -- lifecycle ------------------------------------------------------------

    def initialize(
        self,
        sender: Account,
        key: PoolKey,
        reserve0: Amount,
        reserve1: Amount,
        *,
        provider: Optional[Account] = None,
    ) -> int:
        """
        Create a pool seeded with (reserve0, reserve1) pulled from `provider`
        (defaults to `sender`). Returns the initial tick.
        """
        with self.journal.atomic():
            pool_id = key.pool_id
            if pool_id in self._pools:
                raise PoolAlreadyInitialized(f"pool already initialized: {pool_id}")
            hook = self._hook_for(key)

            sqrt_price_x96 = sqrt_price_x96_from_reserves(reserve0, reserve1)
            tick = get_tick_at_sqrt_ratio(sqrt_price_x96)

            source = provider if provider is not None else sender
            self.balances.transfer(source, self.account, key.asset0, reserve0)
            self.balances.transfer(source, self.account, key.asset1, reserve1)
            self._pools[pool_id] = PoolState(
                key=key,
                reserve0=reserve0,
                reserve1=reserve1,
                sqrt_price_x96=sqrt_price_x96,
                tick=tick,
            )
            logger.info("pool %s initialized at tick %d", pool_id[:10], tick)

            if hook is not None:
                hook.after_initialize(key, tick)
            return tick

    # -- settlement context ---------------------------------------------------

    def unlock(self, callback: Callable[[], T]) -> T:
        """Run `callback` in a fresh delta frame that must net to zero."""
        with self.journal.atomic():
            self._frames.append({})
            try:
                result = callback()
                unsettled = {asset: d for asset, d in self._frames[-1].items() if d != 0}
                if unsettled:
                    raise CurrencyNotSettled(f"unsettled deltas: {unsettled}")
            finally:
                self._frames.pop()
            return result

    def _account_delta(self, asset: AssetId, delta: int) -> None:
        if not self._frames:
            raise ManagerLocked("manager is locked; call inside unlock()")
        frame = self._frames[-1]
        frame[asset] = frame.get(asset, 0) + delta

    def settle(self, payer: Account, asset: AssetId, amount: Amount) -> None:
        """Push `amount` of `asset` from `payer` to the manager, paying down a negative delta."""
        if amount < 0:
            raise ValueError(f"settle amount must be non-negative: {amount}")
        if not self._frames:
            raise ManagerLocked("manager is locked; call inside unlock()")
        self.balances.transfer(payer, self.account, asset, amount)
        self._account_delta(asset, amount)

    def take(self, asset: AssetId, recipient: Account, amount: Amount) -> None:
        """Pull `amount` of `asset` out of the manager, consuming a positive delta."""
        if amount < 0:
            raise ValueError(f"take amount must be non-negative: {amount}")
        if not self._frames:
            raise ManagerLocked("manager is locked; call inside unlock()")
        self.balances.transfer(self.account, recipient, asset, amount)
        self._account_delta(asset, -amount)

    # -- swaps ----------------------------------------------------------------

    def swap(self, sender: Account, key: PoolKey, params: SwapParams) -> BalanceDelta:
        """
        Swap against the pool's reserves and accrue the deltas to the open frame.

        Raises:
            ManagerLocked: Outside an unlock context
            PriceLimitExceeded: If the post-swap price would cross the limit
            PoolError: If the pricing kernel rejects the swap
        """
        if not self._frames:
            raise ManagerLocked("manager is locked; call inside unlock()")
        pool = self.get_pool(key)
        zero_for_one = params.direction.zero_for_one
        limit = params.sqrt_price_limit_x96

        if zero_for_one:
            if not (MIN_SQRT_RATIO < limit < pool.sqrt_price_x96):
                raise PriceLimitExceeded(f"invalid price limit {limit} for zero_for_one swap")
            reserve_in, reserve_out = pool.reserve0, pool.reserve1
        else:
            if not (pool.sqrt_price_x96 < limit < MAX_SQRT_RATIO):
                raise PriceLimitExceeded(f"invalid price limit {limit} for one_for_zero swap")
            reserve_in, reserve_out = pool.reserve1, pool.reserve0

        try:
            if params.exact_input:
                quote = swap_exact_in(reserve_in, reserve_out, -params.amount_specified, key.fee_bps)
            else:
                quote = swap_exact_out(reserve_in, reserve_out, params.amount_specified, key.fee_bps)
        except ValueError as exc:
            raise PoolError(f"swap rejected: {exc}") from exc

        if zero_for_one:
            new_reserve0, new_reserve1 = quote.new_reserve_in, quote.new_reserve_out
            delta = BalanceDelta(amount0=-quote.amount_in, amount1=quote.amount_out)
        else:
            new_reserve0, new_reserve1 = quote.new_reserve_out, quote.new_reserve_in
            delta = BalanceDelta(amount0=quote.amount_out, amount1=-quote.amount_in)

        new_sqrt_price_x96 = sqrt_price_x96_from_reserves(new_reserve0, new_reserve1)
        if zero_for_one and new_sqrt_price_x96 < limit:
            raise PriceLimitExceeded(f"price {new_sqrt_price_x96} below limit {limit}")
        if not zero_for_one and new_sqrt_price_x96 > limit:
            raise PriceLimitExceeded(f"price {new_sqrt_price_x96} above limit {limit}")

        old_tick = pool.tick
        pool.reserve0 = new_reserve0
        pool.reserve1 = new_reserve1
        pool.sqrt_price_x96 = new_sqrt_price_x96
        pool.tick = get_tick_at_sqrt_ratio(new_sqrt_price_x96)

        self._account_delta(key.asset0, delta.amount0)
        self._account_delta(key.asset1, delta.amount1)
        logger.debug(
            "swap %s by %s on %s: in=%d out=%d tick %d -> %d",
            params.direction.value, sender, key.pool_id[:10],
            quote.amount_in, quote.amount_out, old_tick, pool.tick,
        )

        hook = self._hook_for(key)
        if hook is not None and sender != key.hook:
            hook.after_swap(sender, key, params, delta)
        return delta

    def swap_exact_input(
        self,
        sender: Account,
        key: PoolKey,
        direction: Direction,
        amount_in: Amount,
        *,
        sqrt_price_limit_x96: Optional[int] = None,
    ) -> BalanceDelta:
        """Router-style swap: unlock, swap, settle the input and take the output for `sender`."""
        if not isinstance(amount_in, int) or isinstance(amount_in, bool) or amount_in <= 0:
            raise ValueError(f"amount_in must be a positive int: {amount_in!r}")
        limit = default_price_limit(direction) if sqrt_price_limit_x96 is None else sqrt_price_limit_x96
        params = SwapParams(direction=direction, amount_specified=-amount_in, sqrt_price_limit_x96=limit)
        zero_for_one = direction.zero_for_one

        def _route() -> BalanceDelta:
            delta = self.swap(sender, key, params)
            self.settle(sender, key.asset_in(direction), -delta.for_asset(zero_for_one))
            received = delta.for_asset(not zero_for_one)
            if received:
                self.take(key.asset_out(direction), sender, received)
            return delta

        return self.unlock(_route)

    # -- persistence ----------------------------------------------------------

    def snapshot(self) -> Dict[str, PoolState]:
        return copy.deepcopy(self._pools)

    def restore(self, snap: Dict[str, PoolState]) -> None:
        self._pools = copy.deepcopy(snap)

    def __repr__(self) -> str:
        return f"PoolManager({len(self._pools)} pools, {len(self._hooks)} hooks)"
