"""
Shared fixtures: a funded two-asset market with one hooked pool.

The pool starts with equal reserves (tick 0, bucket 0) and a spacing of 60
ticks. Trader-sized swaps of 10**16 move the price by roughly 200 ticks, which
crosses three buckets in either direction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Type

import pytest

from takeprofit.config import HookConfig
from takeprofit.core.hook import TakeProfitHook
from takeprofit.core.pool_manager import PoolManager
from takeprofit.state.balances import BalanceTable
from takeprofit.state.pools import Direction, PoolKey


ASSET0 = "tokenA"
ASSET1 = "tokenB"
SPACING = 60
FEE_BPS = 30
RESERVE = 10**18
WALLET = 10**20
ACCOUNTS = ("alice", "bob", "carol", "trader")


@dataclass
class Market:
    balances: BalanceTable
    manager: PoolManager
    hook: TakeProfitHook
    key: PoolKey

    def fund(self, account: str, amount: int = WALLET) -> None:
        self.balances.add(account, ASSET0, amount)
        self.balances.add(account, ASSET1, amount)

    def place(self, account: str, tick: int, amount: int, direction: Direction) -> int:
        """Approve exactly `amount` of the input asset and place the order."""
        asset = self.key.asset_in(direction)
        self.balances.approve(account, self.hook.account, asset, amount)
        return self.hook.place(account, self.key, tick, amount, direction)

    def trade(self, direction: Direction, amount_in: int, account: str = "trader"):
        return self.manager.swap_exact_input(account, self.key, direction, amount_in)

    def order_id(self, tick_bucket: int, direction: Direction) -> str:
        return self.hook.order_id(self.key, tick_bucket, direction)

    def asset_totals(self) -> tuple[int, int]:
        return self.balances.total_of(ASSET0), self.balances.total_of(ASSET1)


def build_market(
    *,
    config: HookConfig = HookConfig(),
    manager_cls: Type[PoolManager] = PoolManager,
) -> Market:
    balances = BalanceTable()
    manager = manager_cls(balances)
    hook = TakeProfitHook(manager, config=config)
    key = PoolKey(asset0=ASSET0, asset1=ASSET1, fee_bps=FEE_BPS, tick_spacing=SPACING, hook=hook.account)

    market = Market(balances=balances, manager=manager, hook=hook, key=key)
    for account in ACCOUNTS:
        market.fund(account)
    market.fund("lp", RESERVE)
    manager.initialize("lp", key, RESERVE, RESERVE)
    return market


@pytest.fixture
def market() -> Market:
    return build_market()
