"""
Core engine: tick normalization, fills, sweeps, redemption and the hook facade
"""

from .cpmm import swap_exact_in, swap_exact_out
from .fills import execute_fill
from .hook import TakeProfitHook
from .invariants import check_all
from .pool_manager import PoolManager
from .redemption import apply_redemption, compute_payout
from .sweep import crossed_buckets, run_sweep, sweep_count
from .ticks import get_sqrt_ratio_at_tick, get_tick_at_sqrt_ratio, lower_bound
from .types import BalanceDelta, EventKind, FillResult, HookEvent, SwapParams, SweepResult

__all__ = [
    "swap_exact_in",
    "swap_exact_out",
    "execute_fill",
    "TakeProfitHook",
    "check_all",
    "PoolManager",
    "apply_redemption",
    "compute_payout",
    "crossed_buckets",
    "run_sweep",
    "sweep_count",
    "get_sqrt_ratio_at_tick",
    "get_tick_at_sqrt_ratio",
    "lower_bound",
    "BalanceDelta",
    "EventKind",
    "FillResult",
    "HookEvent",
    "SwapParams",
    "SweepResult",
]
