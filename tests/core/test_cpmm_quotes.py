from __future__ import annotations

import pytest

from takeprofit.core.cpmm import compute_fee_total, swap_exact_in, swap_exact_out


def test_fee_rounds_up() -> None:
    assert compute_fee_total(10, 30) == 1
    assert compute_fee_total(10_000, 30) == 30
    assert compute_fee_total(0, 30) == 0


def test_swap_exact_in_keeps_fee_in_pool() -> None:
    quote = swap_exact_in(reserve_in=10**18, reserve_out=10**18, amount_in=10**16, fee_bps=30)

    assert quote.fee_total == 3 * 10**13
    net_in = 10**16 - quote.fee_total
    assert quote.amount_out == (10**18 * net_in) // (10**18 + net_in)
    assert quote.new_reserve_in == 10**18 + 10**16
    assert quote.new_reserve_out == 10**18 - quote.amount_out
    assert quote.new_reserve_in * quote.new_reserve_out >= 10**36


def test_dust_input_may_round_output_to_zero() -> None:
    # A dust order must still be fillable; the input simply enters the pool.
    quote = swap_exact_in(reserve_in=10**18, reserve_out=10, amount_in=5, fee_bps=30)
    assert quote.amount_out == 0
    assert quote.new_reserve_in == 10**18 + 5


def test_swap_exact_in_rejects_bad_inputs() -> None:
    with pytest.raises(ValueError):
        swap_exact_in(reserve_in=0, reserve_out=10, amount_in=1, fee_bps=30)
    with pytest.raises(ValueError):
        swap_exact_in(reserve_in=10, reserve_out=10, amount_in=0, fee_bps=30)
    with pytest.raises(TypeError):
        swap_exact_in(reserve_in=10, reserve_out=10, amount_in=1.0, fee_bps=30)  # type: ignore[arg-type]


def test_swap_exact_out_updates_reserves_for_requested_amount_out() -> None:
    quote = swap_exact_out(reserve_in=1, reserve_out=4, amount_out=1, fee_bps=0)

    assert quote.new_reserve_in == 1 + quote.amount_in
    assert quote.new_reserve_out == 3

    # The paid input must be sufficient to output at least amount_out.
    check = swap_exact_in(reserve_in=1, reserve_out=4, amount_in=quote.amount_in, fee_bps=0)
    assert check.amount_out >= 1


def test_swap_exact_out_cannot_drain_reserve() -> None:
    with pytest.raises(ValueError):
        swap_exact_out(reserve_in=100, reserve_out=100, amount_out=100, fee_bps=30)
