"""Data types shared by the pool controller, the fill/sweep engine and the hook.

Conventions:
- `amount_specified < 0` is an exact-input swap of `-amount_specified`,
  `amount_specified > 0` an exact-output swap.
- `BalanceDelta` is seen from the swap caller: negative amounts are owed to
  the pool, positive amounts are owed to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import List, Optional, Tuple

from ..state.pools import Direction


@dataclass(frozen=True)
class SwapParams:
    direction: Direction
    amount_specified: int
    sqrt_price_limit_x96: int

    def __post_init__(self) -> None:
        if not isinstance(self.direction, Direction):
            raise TypeError("direction must be a Direction")
        if self.amount_specified == 0:
            raise ValueError("amount_specified must be non-zero")

    @property
    def exact_input(self) -> bool:
        return self.amount_specified < 0


@dataclass(frozen=True)
class BalanceDelta:
    amount0: int
    amount1: int

    def for_asset(self, zero: bool) -> int:
        return self.amount0 if zero else self.amount1


@dataclass(frozen=True)
class FillResult:
    order_id: str
    bucket: int
    direction: Direction
    amount_in: int
    amount_out: int


@dataclass(frozen=True)
class SweepResult:
    pool_id: str
    from_bucket: int
    to_bucket: int
    fills: Tuple[FillResult, ...] = ()


@unique
class EventKind(Enum):
    ORDER_PLACED = "OrderPlaced"
    ORDER_CANCELLED = "OrderCancelled"
    ORDER_FILLED = "OrderFilled"
    REDEEMED = "Redeemed"
    RECEIPT_TRANSFERRED = "ReceiptTransferred"


@dataclass(frozen=True)
class HookEvent:
    """Observable emitted after a successful hook operation."""

    kind: EventKind
    order_id: str
    amount: int
    account: Optional[str] = None
    counterparty: Optional[str] = None
    amount_out: int = 0


@dataclass
class EventLog:
    """Append-only event list that rolls back with the enclosing transaction."""

    events: List[HookEvent] = field(default_factory=list)

    def append(self, event: HookEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: EventKind) -> List[HookEvent]:
        return [e for e in self.events if e.kind is kind]

    def snapshot(self) -> int:
        return len(self.events)

    def restore(self, snap: int) -> None:
        del self.events[snap:]

    def __len__(self) -> int:
        return len(self.events)
