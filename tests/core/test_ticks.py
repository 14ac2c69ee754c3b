from __future__ import annotations

import pytest

from takeprofit.core.ticks import (
    MAX_SQRT_RATIO,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MIN_TICK,
    get_sqrt_ratio_at_tick,
    get_tick_at_sqrt_ratio,
    lower_bound,
    sqrt_price_x96_from_reserves,
)


class TestLowerBound:
    @pytest.mark.parametrize(
        "tick,spacing,expected",
        [
            (100, 60, 60),
            (-100, 60, -120),
            (-60, 60, -60),
            (0, 60, 0),
            (59, 60, 0),
            (60, 60, 60),
            (-1, 60, -60),
            (-61, 60, -120),
            (7, 1, 7),
            (-7, 1, -7),
            (MIN_TICK, 60, -887280),
            (MAX_TICK, 60, 887220),
        ],
    )
    def test_known_values(self, tick: int, spacing: int, expected: int) -> None:
        assert lower_bound(tick, spacing) == expected

    def test_rejects_non_positive_spacing(self) -> None:
        with pytest.raises(ValueError):
            lower_bound(10, 0)
        with pytest.raises(ValueError):
            lower_bound(10, -60)

    def test_rejects_non_int_inputs(self) -> None:
        with pytest.raises(TypeError):
            lower_bound(1.5, 60)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            lower_bound(True, 60)  # type: ignore[arg-type]


class TestSqrtRatio:
    def test_tick_zero_is_unit_price(self) -> None:
        assert get_sqrt_ratio_at_tick(0) == 1 << 96

    def test_extreme_ticks_match_bounds(self) -> None:
        assert get_sqrt_ratio_at_tick(MIN_TICK) == MIN_SQRT_RATIO
        assert get_sqrt_ratio_at_tick(MAX_TICK) == MAX_SQRT_RATIO

    def test_out_of_range_tick_rejected(self) -> None:
        with pytest.raises(ValueError):
            get_sqrt_ratio_at_tick(MAX_TICK + 1)
        with pytest.raises(ValueError):
            get_sqrt_ratio_at_tick(MIN_TICK - 1)

    def test_tick_at_bounds(self) -> None:
        assert get_tick_at_sqrt_ratio(MIN_SQRT_RATIO) == MIN_TICK
        assert get_tick_at_sqrt_ratio(MAX_SQRT_RATIO - 1) == MAX_TICK - 1
        with pytest.raises(ValueError):
            get_tick_at_sqrt_ratio(MAX_SQRT_RATIO)
        with pytest.raises(ValueError):
            get_tick_at_sqrt_ratio(MIN_SQRT_RATIO - 1)

    def test_tick_just_below_unit_price(self) -> None:
        assert get_tick_at_sqrt_ratio((1 << 96) - 1) == -1
        assert get_tick_at_sqrt_ratio(1 << 96) == 0

    def test_equal_reserves_give_tick_zero(self) -> None:
        assert sqrt_price_x96_from_reserves(10**18, 10**18) == 1 << 96
        assert get_tick_at_sqrt_ratio(sqrt_price_x96_from_reserves(10**18, 10**18)) == 0

    def test_reserve_ratio_orders_ticks(self) -> None:
        up = get_tick_at_sqrt_ratio(sqrt_price_x96_from_reserves(10**18, 2 * 10**18))
        down = get_tick_at_sqrt_ratio(sqrt_price_x96_from_reserves(2 * 10**18, 10**18))
        # ln(2) / ln(1.0001) ~= 6931.8
        assert up == 6931
        assert down == -6932

    def test_empty_reserve_rejected(self) -> None:
        with pytest.raises(ValueError):
            sqrt_price_x96_from_reserves(0, 10)

