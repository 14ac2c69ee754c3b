"""
Fill executor: turns one bucket's pending amount into claimable output.

The fill is an embedded exact-input swap for the whole pending amount, run in
its own settlement context so both asset legs settle atomically:

1. swap `amount` of the input asset in the order's direction, price limit at
   the extreme of the valid range (the fill takes whatever price results),
2. push the owed input leg from the hook's custody (`settle`),
3. pull the output leg into the hook's custody (`take`),
4. move the bucket's pending amount into the order's claimable output.

Any failure in steps 1-3 surfaces as `SettlementFailure` and aborts the
enclosing transaction, including the swap that triggered the sweep.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import PoolError, SettlementFailure
from ..state.balances import Account
from ..state.orders import OrderLedger
from ..state.pools import Direction, PoolKey
from .pool_manager import PoolManager, default_price_limit
from .types import BalanceDelta, FillResult, SwapParams

logger = logging.getLogger(__name__)


def build_fill_params(direction: Direction, amount: int) -> SwapParams:
    return SwapParams(
        direction=direction,
        amount_specified=-amount,
        sqrt_price_limit_x96=default_price_limit(direction),
    )


def execute_fill(
    manager: PoolManager,
    ledger: OrderLedger,
    pool_key: PoolKey,
    bucket: int,
    direction: Direction,
    amount: int,
    *,
    hook_account: Account,
) -> Optional[FillResult]:
    """
    Fill `amount` pledged at (pool_key, bucket, direction).

    Returns None without touching any state when `amount` is not positive.
    """
    if amount <= 0:
        return None

    pool_id = pool_key.pool_id
    order_id, record = ledger.ensure_record(pool_key, bucket, direction)
    zero_for_one = direction.zero_for_one
    asset_in = pool_key.asset_in(direction)
    asset_out = pool_key.asset_out(direction)
    params = build_fill_params(direction, amount)

    def _swap_and_settle() -> BalanceDelta:
        delta = manager.swap(hook_account, pool_key, params)
        owed_in = -delta.for_asset(zero_for_one)
        received = delta.for_asset(not zero_for_one)
        if owed_in > 0:
            manager.settle(hook_account, asset_in, owed_in)
        if received > 0:
            manager.take(asset_out, hook_account, received)
        return delta

    try:
        delta = manager.unlock(_swap_and_settle)
    except (PoolError, ValueError) as exc:
        raise SettlementFailure(
            f"fill of {amount} at bucket {bucket} ({direction.value}) on {pool_id[:10]} failed: {exc}"
        ) from exc

    amount_out = delta.for_asset(not zero_for_one)
    ledger.add_pending(pool_id, bucket, direction, -amount)
    record.claimable_amount += amount_out

    logger.info(
        "filled order %s: bucket=%d %s in=%d out=%d",
        order_id[:10], bucket, direction.value, amount, amount_out,
    )
    return FillResult(
        order_id=order_id,
        bucket=bucket,
        direction=direction,
        amount_in=amount,
        amount_out=amount_out,
    )
