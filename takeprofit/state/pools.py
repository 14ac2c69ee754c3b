"""
Pool identity and pool state for the reference pool controller.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Optional

from .balances import AssetId, Amount
from .canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex


@unique
class Direction(Enum):
    """Which pool asset is being sold."""

    ZERO_FOR_ONE = "zero_for_one"  # sell asset0, buy asset1 (price falls)
    ONE_FOR_ZERO = "one_for_zero"  # sell asset1, buy asset0 (price rises)

    @property
    def zero_for_one(self) -> bool:
        return self is Direction.ZERO_FOR_ONE

    def opposite(self) -> "Direction":
        return Direction.ONE_FOR_ZERO if self is Direction.ZERO_FOR_ONE else Direction.ZERO_FOR_ONE


def compute_pool_id(
    asset0: AssetId,
    asset1: AssetId,
    fee_bps: int,
    tick_spacing: int,
    hook: Optional[str] = None,
) -> str:
    """
    Deterministically compute a pool_id for the given pool parameters.

        pool_id = H(sep("pool_id") || canonical_json(asset0, asset1, fee_bps, tick_spacing, hook))
    """
    if asset0 >= asset1:
        raise ValueError(f"Assets must be in canonical order: {asset0} < {asset1}")
    if not (0 <= fee_bps <= 10000):
        raise ValueError(f"fee_bps must be in [0, 10000]: {fee_bps}")
    if not isinstance(tick_spacing, int) or isinstance(tick_spacing, bool) or tick_spacing <= 0:
        raise ValueError(f"tick_spacing must be a positive int: {tick_spacing!r}")

    pool_id_data = domain_sep_bytes("pool_id") + canonical_json_bytes(
        {
            "asset0": asset0,
            "asset1": asset1,
            "fee_bps": int(fee_bps),
            "hook": hook,
            "tick_spacing": int(tick_spacing),
        }
    )
    return sha256_hex(pool_id_data)


@dataclass(frozen=True)
class PoolKey:
    """
    Immutable identity of a trading pool.

    Attributes:
        asset0: First asset identifier (must be < asset1 lexicographically)
        asset1: Second asset identifier
        fee_bps: Swap fee in basis points (0-10000)
        tick_spacing: Bucket width in ticks
        hook: Account of the hook notified on pool lifecycle events, if any
    """

    asset0: AssetId
    asset1: AssetId
    fee_bps: int
    tick_spacing: int
    hook: Optional[str] = None

    def __post_init__(self) -> None:
        if self.asset0 >= self.asset1:
            raise ValueError(
                f"Assets must be in canonical order: {self.asset0} < {self.asset1}"
            )
        if not (0 <= self.fee_bps <= 10000):
            raise ValueError(f"fee_bps must be in [0, 10000]: {self.fee_bps}")
        if not isinstance(self.tick_spacing, int) or isinstance(self.tick_spacing, bool) or self.tick_spacing <= 0:
            raise ValueError(f"tick_spacing must be a positive int: {self.tick_spacing!r}")

    @property
    def pool_id(self) -> str:
        return compute_pool_id(self.asset0, self.asset1, self.fee_bps, self.tick_spacing, self.hook)

    def asset_in(self, direction: Direction) -> AssetId:
        return self.asset0 if direction.zero_for_one else self.asset1

    def asset_out(self, direction: Direction) -> AssetId:
        return self.asset1 if direction.zero_for_one else self.asset0


@dataclass
class PoolState:
    """
    State of a constant-product pool.

    Attributes:
        key: Pool identity
        reserve0: Reserve amount for asset0
        reserve1: Reserve amount for asset1
        sqrt_price_x96: sqrt(reserve1 / reserve0) in Q64.96
        tick: Greatest tick whose sqrt ratio is <= sqrt_price_x96
    """

    key: PoolKey
    reserve0: Amount
    reserve1: Amount
    sqrt_price_x96: int
    tick: int

    def __post_init__(self):
        if self.reserve0 <= 0 or self.reserve1 <= 0:
            raise ValueError(
                f"Reserves must be positive: ({self.reserve0}, {self.reserve1})"
            )

    @property
    def pool_id(self) -> str:
        return self.key.pool_id

    def __repr__(self) -> str:
        return (
            f"PoolState(pool_id={self.pool_id[:16]}..., "
            f"assets=({self.key.asset0}, {self.key.asset1}), "
            f"reserves=({self.reserve0}, {self.reserve1}), tick={self.tick})"
        )
