"""
Take-profit limit orders layered on a swap-only AMM pool.

Orders rest in price buckets and are filled as a side effect of other traders'
swaps moving the pool price through them.
"""

from .config import HookConfig, load_config
from .core.hook import TakeProfitHook
from .core.pool_manager import PoolManager
from .core.ticks import lower_bound
from .state.balances import BalanceTable
from .state.journal import Journal
from .state.orders import compute_order_id
from .state.pools import Direction, PoolKey

__all__ = [
    "HookConfig",
    "load_config",
    "TakeProfitHook",
    "PoolManager",
    "lower_bound",
    "BalanceTable",
    "Journal",
    "compute_order_id",
    "Direction",
    "PoolKey",
]
