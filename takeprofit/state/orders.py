"""
Order ledger: pending amounts per price bucket, order records and the last
observed bucket of every pool.

All state is owned by one ``OrderLedger`` instance; there is no module-level
state. Keys are (pool_id, bucket, direction) tuples.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..errors import PoolNotInitialized, UnknownOrder
from .balances import Amount
from .canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex
from .pools import Direction, PoolKey

OrderId = str
BucketKey = Tuple[str, int, Direction]


def compute_order_id(pool_id: str, bucket: int, direction: Direction) -> OrderId:
    """
    Derive the shared order identity for (pool, bucket, direction).

        order_id = H(sep("order_id") || canonical_json(pool_id, bucket, zero_for_one))

    Every placer at the same key receives receipts of this id.
    """
    if not isinstance(bucket, int) or isinstance(bucket, bool):
        raise TypeError("bucket must be an int")
    if not isinstance(direction, Direction):
        raise TypeError("direction must be a Direction")
    payload = domain_sep_bytes("order_id") + canonical_json_bytes(
        {"bucket": bucket, "pool_id": pool_id, "zero_for_one": direction.zero_for_one}
    )
    return sha256_hex(payload)


@dataclass
class OrderRecord:
    """
    Metadata and accounting for one shared order.

    Attributes:
        pool_key: Originating pool
        bucket: Lower bound of the price bucket
        direction: Side being sold
        total_supply: Outstanding receipt tokens
        claimable_amount: Output asset received from fills, owed to holders
    """

    pool_key: PoolKey
    bucket: int
    direction: Direction
    total_supply: Amount = 0
    claimable_amount: Amount = 0

    def __post_init__(self) -> None:
        if self.bucket % self.pool_key.tick_spacing != 0:
            raise ValueError(f"bucket {self.bucket} is not a multiple of {self.pool_key.tick_spacing}")
        if self.total_supply < 0:
            raise ValueError(f"total_supply must be non-negative: {self.total_supply}")
        if self.claimable_amount < 0:
            raise ValueError(f"claimable_amount must be non-negative: {self.claimable_amount}")

    @property
    def input_asset(self) -> str:
        return self.pool_key.asset_in(self.direction)

    @property
    def output_asset(self) -> str:
        return self.pool_key.asset_out(self.direction)


class OrderLedger:
    def __init__(self) -> None:
        # Signed counters; check_all flags any entry below zero.
        self._pending: Dict[BucketKey, int] = {}
        self._records: Dict[OrderId, OrderRecord] = {}
        self._last_bucket: Dict[str, int] = {}

    # -- pending amounts ------------------------------------------------------

    def pending_amount(self, pool_id: str, bucket: int, direction: Direction) -> int:
        return self._pending.get((pool_id, bucket, direction), 0)

    def add_pending(self, pool_id: str, bucket: int, direction: Direction, delta: int) -> int:
        """Apply a signed delta and return the new pending amount."""
        key = (pool_id, bucket, direction)
        new_amount = self._pending.get(key, 0) + delta
        # Entries are never deleted; a zero amount is reused by later placements.
        self._pending[key] = new_amount
        return new_amount

    def pending_entries(self) -> Dict[BucketKey, int]:
        return dict(self._pending)

    # -- order records --------------------------------------------------------

    def get_record(self, order_id: OrderId) -> Optional[OrderRecord]:
        return self._records.get(order_id)

    def require_record(self, order_id: OrderId) -> OrderRecord:
        record = self._records.get(order_id)
        if record is None:
            raise UnknownOrder(f"unknown order id: {order_id}")
        return record

    def ensure_record(self, pool_key: PoolKey, bucket: int, direction: Direction) -> Tuple[OrderId, OrderRecord]:
        """Return the record for the key, creating it on first placement."""
        order_id = compute_order_id(pool_key.pool_id, bucket, direction)
        record = self._records.get(order_id)
        if record is None:
            record = OrderRecord(pool_key=pool_key, bucket=bucket, direction=direction)
            self._records[order_id] = record
        return order_id, record

    def records(self) -> Dict[OrderId, OrderRecord]:
        return dict(self._records)

    # -- last observed bucket -------------------------------------------------

    def has_pool(self, pool_id: str) -> bool:
        return pool_id in self._last_bucket

    def last_bucket_of(self, pool_id: str) -> int:
        try:
            return self._last_bucket[pool_id]
        except KeyError:
            raise PoolNotInitialized(f"pool {pool_id} was never initialized with this hook") from None

    def set_last_bucket(self, pool_id: str, bucket: int) -> None:
        self._last_bucket[pool_id] = bucket

    def last_buckets(self) -> Dict[str, int]:
        return dict(self._last_bucket)

    # -- persistence ----------------------------------------------------------

    def snapshot(self) -> Tuple[Dict[BucketKey, int], Dict[OrderId, OrderRecord], Dict[str, int]]:
        return dict(self._pending), copy.deepcopy(self._records), dict(self._last_bucket)

    def restore(self, snap) -> None:
        pending, records, last_bucket = snap
        self._pending = dict(pending)
        self._records = copy.deepcopy(records)
        self._last_bucket = dict(last_bucket)

    def to_dict(self) -> Dict[str, Any]:
        """Plain, key-sorted serialization (JSON-compatible)."""
        return {
            "pending": [
                {"pool_id": pool_id, "bucket": bucket, "direction": direction.value, "amount": amount}
                for (pool_id, bucket, direction), amount in sorted(
                    self._pending.items(), key=lambda kv: (kv[0][0], kv[0][1], kv[0][2].value)
                )
            ],
            "records": {
                order_id: {
                    "pool_id": record.pool_key.pool_id,
                    "bucket": record.bucket,
                    "direction": record.direction.value,
                    "total_supply": record.total_supply,
                    "claimable_amount": record.claimable_amount,
                }
                for order_id, record in sorted(self._records.items())
            },
            "last_bucket": dict(sorted(self._last_bucket.items())),
        }

    def __repr__(self) -> str:
        return f"OrderLedger({len(self._pending)} buckets, {len(self._records)} orders)"
