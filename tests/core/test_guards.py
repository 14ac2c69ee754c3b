from __future__ import annotations

import pytest

from takeprofit.core.guards import (
    ReentrancyGuard,
    require_cancellable,
    require_positive_amount,
    require_redeemable,
)
from takeprofit.errors import (
    InsufficientReceipt,
    InvalidAmount,
    NoActiveOrder,
    NothingClaimable,
    OrderPartiallyFilled,
    ReentrancyRejected,
)
from takeprofit.state.orders import OrderRecord
from takeprofit.state.pools import Direction, PoolKey


KEY = PoolKey(asset0="tokenA", asset1="tokenB", fee_bps=30, tick_spacing=60, hook="hook")


def _record(*, supply: int = 10, claimable: int = 0) -> OrderRecord:
    return OrderRecord(
        pool_key=KEY,
        bucket=60,
        direction=Direction.ZERO_FOR_ONE,
        total_supply=supply,
        claimable_amount=claimable,
    )


class TestReentrancyGuard:
    def test_nested_hold_rejected(self) -> None:
        guard = ReentrancyGuard()
        with guard.hold("place"):
            assert guard.active == "place"
            with pytest.raises(ReentrancyRejected):
                with guard.hold("cancel"):
                    pass
        assert guard.active is None

    def test_released_after_exception(self) -> None:
        guard = ReentrancyGuard()
        with pytest.raises(RuntimeError):
            with guard.hold("redeem"):
                raise RuntimeError("boom")
        with guard.hold("redeem"):
            pass


class TestRequirePositiveAmount:
    def test_accepts_positive(self) -> None:
        require_positive_amount(1)

    @pytest.mark.parametrize("amount", [0, -1])
    def test_rejects_non_positive(self, amount: int) -> None:
        with pytest.raises(InvalidAmount):
            require_positive_amount(amount)

    def test_invalid_amount_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            require_positive_amount(0)

    def test_rejects_bool(self) -> None:
        with pytest.raises(TypeError):
            require_positive_amount(True)


class TestRequireCancellable:
    def test_unfilled_position(self) -> None:
        require_cancellable(_record(), balance=10, pending=10)

    def test_missing_record(self) -> None:
        with pytest.raises(NoActiveOrder):
            require_cancellable(None, balance=0, pending=0)

    def test_zero_balance(self) -> None:
        with pytest.raises(NoActiveOrder):
            require_cancellable(_record(), balance=0, pending=10)

    def test_filled_order(self) -> None:
        with pytest.raises(OrderPartiallyFilled):
            require_cancellable(_record(claimable=5), balance=10, pending=0)

    def test_pending_below_balance(self) -> None:
        with pytest.raises(OrderPartiallyFilled):
            require_cancellable(_record(), balance=10, pending=4)

    def test_pending_below_supply_after_dust_fill(self) -> None:
        # One unit filled for zero output, then ten more placed at the same key.
        with pytest.raises(OrderPartiallyFilled):
            require_cancellable(_record(supply=11), balance=1, pending=10)


class TestRequireRedeemable:
    def test_nothing_claimable(self) -> None:
        with pytest.raises(NothingClaimable):
            require_redeemable(_record(), balance=10, burn_amount=1)

    def test_insufficient_receipt(self) -> None:
        with pytest.raises(InsufficientReceipt):
            require_redeemable(_record(claimable=5), balance=3, burn_amount=4)

    def test_ok(self) -> None:
        require_redeemable(_record(claimable=5), balance=3, burn_amount=3)
