"""Guards for the hook's entry points.

`ReentrancyGuard` is the single-entry lock held by every mutating entry point.
The `require_*` functions are pure pre-flight checks; each raises the error the
caller would see and mutates nothing.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from ..errors import (
    InsufficientReceipt,
    InvalidAmount,
    NoActiveOrder,
    NothingClaimable,
    OrderPartiallyFilled,
    ReentrancyRejected,
)
from ..state.orders import OrderRecord


class ReentrancyGuard:
    def __init__(self) -> None:
        self._active: Optional[str] = None

    @property
    def active(self) -> Optional[str]:
        return self._active

    @contextmanager
    def hold(self, entry: str) -> Iterator[None]:
        if self._active is not None:
            raise ReentrancyRejected(f"{entry} rejected while {self._active} is in progress")
        self._active = entry
        try:
            yield
        finally:
            self._active = None


def require_positive_amount(amount: int, *, name: str = "amount") -> None:
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise TypeError(f"{name} must be an int")
    if amount <= 0:
        raise InvalidAmount(f"{name} must be positive: {amount}")


def require_cancellable(record: Optional[OrderRecord], balance: int, pending: int) -> None:
    """
    Every outstanding receipt of the order must still be backed by unfilled
    input. A fill whose output rounded to zero leaves claimable at zero but
    pending below supply, so both counters are checked.
    """
    if record is None or balance == 0:
        raise NoActiveOrder("no active order to cancel")
    if record.claimable_amount > 0 or pending != record.total_supply:
        raise OrderPartiallyFilled("order has already been filled; redeem instead of cancelling")


def require_redeemable(record: OrderRecord, balance: int, burn_amount: int) -> None:
    if record.claimable_amount == 0:
        raise NothingClaimable("order has no claimable output")
    if balance < burn_amount:
        raise InsufficientReceipt(f"receipt balance {balance} < burn amount {burn_amount}")
