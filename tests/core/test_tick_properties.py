"""Property tests for bucket normalization and the tick/sqrt-price conversions."""

from __future__ import annotations

import importlib.util

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import given, settings

from takeprofit.core.ticks import MAX_TICK, MIN_TICK, get_sqrt_ratio_at_tick, get_tick_at_sqrt_ratio, lower_bound

_ticks = st.integers(min_value=MIN_TICK, max_value=MAX_TICK)
_spacings = st.integers(min_value=1, max_value=16384)


class TestLowerBoundProperties:
    @given(tick=_ticks, spacing=_spacings)
    def test_matches_floor_division(self, tick: int, spacing: int) -> None:
        assert lower_bound(tick, spacing) == (tick // spacing) * spacing

    @given(tick=_ticks, spacing=_spacings)
    def test_bucket_contains_tick(self, tick: int, spacing: int) -> None:
        bound = lower_bound(tick, spacing)
        assert bound % spacing == 0
        assert bound <= tick < bound + spacing

    @given(tick=_ticks, spacing=_spacings)
    def test_idempotent(self, tick: int, spacing: int) -> None:
        bound = lower_bound(tick, spacing)
        assert lower_bound(bound, spacing) == bound

    @given(a=_ticks, b=_ticks, spacing=_spacings)
    def test_monotone(self, a: int, b: int, spacing: int) -> None:
        lo, hi = min(a, b), max(a, b)
        assert lower_bound(lo, spacing) <= lower_bound(hi, spacing)


class TestSqrtRatioProperties:
    @settings(max_examples=50, deadline=None)
    @given(tick=st.integers(min_value=MIN_TICK, max_value=MAX_TICK - 1))
    def test_round_trip(self, tick: int) -> None:
        assert get_tick_at_sqrt_ratio(get_sqrt_ratio_at_tick(tick)) == tick

    @settings(max_examples=100)
    @given(tick=st.integers(min_value=MIN_TICK, max_value=MAX_TICK - 1))
    def test_strictly_increasing(self, tick: int) -> None:
        assert get_sqrt_ratio_at_tick(tick) < get_sqrt_ratio_at_tick(tick + 1)
