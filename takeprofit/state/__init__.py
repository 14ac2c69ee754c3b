"""
State tables for the take-profit hook
"""

from .balances import BalanceTable
from .journal import Journal
from .orders import OrderLedger, OrderRecord, compute_order_id
from .pools import Direction, PoolKey, PoolState
from .receipts import ReceiptTable

__all__ = [
    "BalanceTable",
    "Journal",
    "OrderLedger",
    "OrderRecord",
    "compute_order_id",
    "Direction",
    "PoolKey",
    "PoolState",
    "ReceiptTable",
]
