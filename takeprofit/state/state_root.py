"""
Deterministic ledger root hashing (v1).

This is intended for:
- debugging / audit (stable hashes for the same logical state),
- determinism checks (equal logical state gives an equal root regardless of
  insertion order, and a rolled-back operation leaves the root unchanged).
"""

from __future__ import annotations

from .canonical import (
    domain_sep_bytes,
    encode_bytes,
    encode_str,
    encode_svarint,
    encode_uvarint,
    hex_to_bytes_fixed,
    sha256_hex,
)
from .orders import OrderLedger
from .receipts import ReceiptTable


LEDGER_ROOT_VERSION = 1


def _encode_pending_section(ledger: OrderLedger) -> bytes:
    entries = []
    for (pool_id, bucket, direction), amount in ledger.pending_entries().items():
        pool_b = hex_to_bytes_fixed(pool_id, nbytes=32, name="pool_id")
        entries.append((pool_b, bucket, 1 if direction.zero_for_one else 0, amount))
    entries.sort(key=lambda t: (t[0], t[1], t[2]))

    out = bytearray()
    out += encode_uvarint(len(entries))
    for pool_b, bucket, zfo, amount in entries:
        out += pool_b
        out += encode_svarint(bucket)
        out += encode_uvarint(zfo)
        out += encode_svarint(amount)
    return bytes(out)


def _encode_records_section(ledger: OrderLedger) -> bytes:
    entries = []
    for order_id, record in ledger.records().items():
        order_b = hex_to_bytes_fixed(order_id, nbytes=32, name="order_id")
        for name, v in (
            ("total_supply", record.total_supply),
            ("claimable_amount", record.claimable_amount),
        ):
            if not isinstance(v, int) or isinstance(v, bool) or v < 0:
                raise ValueError(f"invalid record {name}: {v!r}")
        entries.append((order_b, record))
    entries.sort(key=lambda t: t[0])

    out = bytearray()
    out += encode_uvarint(len(entries))
    for order_b, record in entries:
        out += order_b
        out += hex_to_bytes_fixed(record.pool_key.pool_id, nbytes=32, name="pool_id")
        out += encode_svarint(record.bucket)
        out += encode_uvarint(1 if record.direction.zero_for_one else 0)
        out += encode_uvarint(record.total_supply)
        out += encode_uvarint(record.claimable_amount)
    return bytes(out)


def _encode_last_bucket_section(ledger: OrderLedger) -> bytes:
    entries = sorted(
        (hex_to_bytes_fixed(pool_id, nbytes=32, name="pool_id"), bucket)
        for pool_id, bucket in ledger.last_buckets().items()
    )
    out = bytearray()
    out += encode_uvarint(len(entries))
    for pool_b, bucket in entries:
        out += pool_b
        out += encode_svarint(bucket)
    return bytes(out)


def _encode_receipts_section(receipts: ReceiptTable) -> bytes:
    entries = []
    for (holder, order_id), amount in receipts.get_all_balances().items():
        order_b = hex_to_bytes_fixed(order_id, nbytes=32, name="order_id")
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise ValueError(f"invalid receipt amount: {amount!r}")
        entries.append((encode_str(holder), order_b, amount))
    entries.sort(key=lambda t: (t[0], t[1]))

    out = bytearray()
    out += encode_uvarint(len(entries))
    for holder_b, order_b, amount in entries:
        out += holder_b
        out += order_b
        out += encode_uvarint(amount)
    return bytes(out)


def compute_ledger_root(*, ledger: OrderLedger, receipts: ReceiptTable) -> str:
    """
    Compute a deterministic root hash for the order ledger and receipt table.

    Returns a 0x-prefixed sha256 digest.
    """
    if not isinstance(ledger, OrderLedger):
        raise TypeError("ledger must be an OrderLedger")
    if not isinstance(receipts, ReceiptTable):
        raise TypeError("receipts must be a ReceiptTable")

    payload = (
        domain_sep_bytes("ledger_root", version=LEDGER_ROOT_VERSION)
        + b"PND"
        + encode_bytes(_encode_pending_section(ledger))
        + b"ORD"
        + encode_bytes(_encode_records_section(ledger))
        + b"LST"
        + encode_bytes(_encode_last_bucket_section(ledger))
        + b"RCP"
        + encode_bytes(_encode_receipts_section(receipts))
    )
    return sha256_hex(payload)
