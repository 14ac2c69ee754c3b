"""
Sweep controller: fill every bucket a swap's price move crossed.

Runs once after each completed swap with the pool's post-swap tick:

1. current = lower_bound(tick, spacing)
2. last = last observed bucket of the pool; fills target the side opposite to
   the swap (a price rise sweeps up through sell-asset0 orders and vice versa)
3. last < current: buckets last, last+s, ..., current-s (ascending)
   current < last: buckets last, last-s, ..., current+s (descending)
   equal: nothing
4. last observed bucket := current

The crossed range is bounded by `max_buckets`; exceeding it raises
`UnboundedSweepCost` before any fill instead of truncating, since a truncated
sweep would leave the last observed bucket out of step with the price.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..errors import UnboundedSweepCost
from ..state.balances import Account
from ..state.orders import OrderLedger
from ..state.pools import Direction, PoolKey
from .fills import execute_fill
from .pool_manager import PoolManager
from .ticks import lower_bound
from .types import FillResult, SweepResult

logger = logging.getLogger(__name__)


def sweep_count(last: int, current: int, spacing: int) -> int:
    """Number of buckets crossed moving from `last` to `current`."""
    return abs(current - last) // spacing


def crossed_buckets(last: int, current: int, spacing: int) -> List[int]:
    """Bucket bounds to visit, in sweep order, exclusive of `current`."""
    if spacing <= 0:
        raise ValueError(f"spacing must be positive: {spacing}")
    if last < current:
        return list(range(last, current, spacing))
    if current < last:
        return list(range(last, current, -spacing))
    return []


def run_sweep(
    manager: PoolManager,
    ledger: OrderLedger,
    pool_key: PoolKey,
    current_tick: int,
    swap_direction: Direction,
    *,
    hook_account: Account,
    max_buckets: Optional[int] = None,
) -> SweepResult:
    pool_id = pool_key.pool_id
    spacing = pool_key.tick_spacing
    current = lower_bound(current_tick, spacing)
    last = ledger.last_bucket_of(pool_id)
    fill_direction = swap_direction.opposite()

    crossed = sweep_count(last, current, spacing)
    if max_buckets is not None and crossed > max_buckets:
        logger.warning(
            "sweep on %s rejected: %d buckets crossed (limit %d)", pool_id[:10], crossed, max_buckets
        )
        raise UnboundedSweepCost(crossed, max_buckets)

    logger.debug(
        "sweep on %s: bucket %d -> %d, filling %s", pool_id[:10], last, current, fill_direction.value
    )
    fills: List[FillResult] = []
    for bucket in crossed_buckets(last, current, spacing):
        pending = ledger.pending_amount(pool_id, bucket, fill_direction)
        if pending > 0:
            result = execute_fill(
                manager,
                ledger,
                pool_key,
                bucket,
                fill_direction,
                pending,
                hook_account=hook_account,
            )
            if result is not None:
                fills.append(result)

    ledger.set_last_bucket(pool_id, current)
    return SweepResult(pool_id=pool_id, from_bucket=last, to_bucket=current, fills=tuple(fills))
