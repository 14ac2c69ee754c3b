"""Invariant checkers for the order ledger.

Each function returns True when the invariant holds, and `check_all()` returns
the list of violated invariant IDs (empty = all pass).

Note: these cover the ledger and receipt tables only; asset conservation across
the hook and the pool controller is checked in the integration tests.
"""

from __future__ import annotations

from typing import Callable

from ..state.orders import OrderLedger
from ..state.receipts import ReceiptTable


def inv_pending_non_negative(ledger: OrderLedger, receipts: ReceiptTable) -> bool:
    return all(amount >= 0 for amount in ledger.pending_entries().values())


def inv_claimable_non_negative(ledger: OrderLedger, receipts: ReceiptTable) -> bool:
    return all(r.claimable_amount >= 0 for r in ledger.records().values())


def inv_supply_non_negative(ledger: OrderLedger, receipts: ReceiptTable) -> bool:
    return all(r.total_supply >= 0 for r in ledger.records().values())


def inv_supply_matches_receipts(ledger: OrderLedger, receipts: ReceiptTable) -> bool:
    return all(
        receipts.total_of(order_id) == record.total_supply
        for order_id, record in ledger.records().items()
    )


def inv_bucket_aligned(ledger: OrderLedger, receipts: ReceiptTable) -> bool:
    spacing_by_pool = {r.pool_key.pool_id: r.pool_key.tick_spacing for r in ledger.records().values()}
    for (pool_id, bucket, _direction) in ledger.pending_entries():
        spacing = spacing_by_pool.get(pool_id)
        if spacing is not None and bucket % spacing != 0:
            return False
    for pool_id, bucket in ledger.last_buckets().items():
        spacing = spacing_by_pool.get(pool_id)
        if spacing is not None and bucket % spacing != 0:
            return False
    return True


_ALL_INVARIANTS: list[tuple[str, Callable[[OrderLedger, ReceiptTable], bool]]] = [
    ("pending_non_negative", inv_pending_non_negative),
    ("claimable_non_negative", inv_claimable_non_negative),
    ("supply_non_negative", inv_supply_non_negative),
    ("supply_matches_receipts", inv_supply_matches_receipts),
    ("bucket_aligned", inv_bucket_aligned),
]


def check_all(ledger: OrderLedger, receipts: ReceiptTable) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [name for name, fn in _ALL_INVARIANTS if not fn(ledger, receipts)]
