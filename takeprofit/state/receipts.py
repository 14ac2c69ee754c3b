"""
Receipt token tracking for take-profit orders.

Receipt tokens are scoped per order id (one fungible token per
(pool, bucket, direction)) and are tracked separately from asset balances.
"""

from __future__ import annotations

from typing import Dict, Tuple

from ..errors import InsufficientReceipt
from .balances import Account, Amount

# Type alias
OrderId = str


class ReceiptTable:
    """
    Multi-token ledger mapping (holder, order_id) -> receipt amount.

    Notes:
    - Receipt balances are always non-negative.
    - Zero balances are omitted to keep the table sparse.
    """

    def __init__(self) -> None:
        self._balances: Dict[Tuple[Account, OrderId], Amount] = {}

    def balance_of(self, holder: Account, order_id: OrderId) -> Amount:
        """Get receipt balance for (holder, order_id). Returns 0 if not found."""
        return self._balances.get((holder, order_id), 0)

    def _set(self, holder: Account, order_id: OrderId, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Receipt balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop((holder, order_id), None)
        else:
            self._balances[(holder, order_id)] = amount

    def mint(self, holder: Account, order_id: OrderId, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Mint amount must be non-negative: {amount}")
        self._set(holder, order_id, self.balance_of(holder, order_id) + amount)

    def burn(self, holder: Account, order_id: OrderId, amount: Amount) -> None:
        """
        Burn receipts held by `holder`.

        Raises:
            InsufficientReceipt: If holder holds fewer than amount
        """
        if amount < 0:
            raise ValueError(f"Burn amount must be non-negative: {amount}")
        current = self.balance_of(holder, order_id)
        if current < amount:
            raise InsufficientReceipt(
                f"Insufficient receipts for {holder} on {order_id}: {current} < {amount}"
            )
        self._set(holder, order_id, current - amount)

    def transfer(self, sender: Account, recipient: Account, order_id: OrderId, amount: Amount) -> None:
        """Move receipts between holders; supply is unchanged."""
        self.burn(sender, order_id, amount)
        self.mint(recipient, order_id, amount)

    def total_of(self, order_id: OrderId) -> Amount:
        """Sum of receipt balances over all holders of `order_id`."""
        return sum(amount for (_, oid), amount in self._balances.items() if oid == order_id)

    def holders_of(self, order_id: OrderId) -> Dict[Account, Amount]:
        return {holder: amount for (holder, oid), amount in self._balances.items() if oid == order_id}

    def get_all_balances(self) -> Dict[Tuple[Account, OrderId], Amount]:
        """Return all receipt balances."""
        return dict(self._balances)

    def snapshot(self) -> Dict[Tuple[Account, OrderId], Amount]:
        return dict(self._balances)

    def restore(self, snap: Dict[Tuple[Account, OrderId], Amount]) -> None:
        self._balances = dict(snap)

    def __repr__(self) -> str:
        return f"ReceiptTable({len(self._balances)} entries)"
