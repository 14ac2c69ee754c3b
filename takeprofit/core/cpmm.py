"""
Constant Product Market Maker (CPMM) pricing for the reference pool controller.

- Fee is charged on the *gross* input amount using ceil rounding.
- Pricing uses `net_in = gross_in - fee_total` (Uniswap-v2 style).
- The fee stays in the pool.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per swap operation
- Invariant: After each swap, x' * y' >= x * y
"""

from __future__ import annotations

from dataclasses import dataclass

from ..state.balances import Amount


BPS_DENOM = 10_000


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def _ceil_div_nonneg(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    if numerator < 0:
        raise ValueError("numerator must be non-negative")
    return (numerator + denominator - 1) // denominator


@dataclass(frozen=True)
class SwapQuote:
    amount_in: Amount
    amount_out: Amount
    fee_total: Amount
    new_reserve_in: Amount
    new_reserve_out: Amount


def compute_fee_total(gross_in: Amount, fee_bps: int) -> Amount:
    """`fee_total = ceil(gross_in * fee_bps / 10_000)`."""
    _require_int("gross_in", gross_in)
    _require_int("fee_bps", fee_bps)
    if gross_in < 0:
        raise ValueError(f"gross_in must be non-negative: {gross_in}")
    if not (0 <= fee_bps <= BPS_DENOM):
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}]: {fee_bps}")
    return _ceil_div_nonneg(gross_in * fee_bps, BPS_DENOM)


def swap_exact_in(
    reserve_in: Amount,
    reserve_out: Amount,
    amount_in: Amount,
    fee_bps: int,
) -> SwapQuote:
    """
    Quote an exact-in swap.

        fee = ceil(amount_in * fee_bps / 10_000)
        net_in = amount_in - fee
        amount_out = floor(reserve_out * net_in / (reserve_in + net_in))

    Post-swap reserves:
        new_reserve_in = reserve_in + amount_in  (fee stays in pool)
        new_reserve_out = reserve_out - amount_out

    `amount_out` may round down to zero for dust inputs; the input still
    enters the pool.

    Raises:
        ValueError: If inputs are invalid or would violate invariants
    """
    for name, v in (
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("amount_in", amount_in),
        ("fee_bps", fee_bps),
    ):
        _require_int(name, v)
    if reserve_in <= 0 or reserve_out <= 0:
        raise ValueError(f"cannot swap against an empty reserve: ({reserve_in}, {reserve_out})")
    if amount_in <= 0:
        raise ValueError(f"amount_in must be positive: {amount_in}")

    fee_total = compute_fee_total(amount_in, fee_bps)
    net_in = amount_in - fee_total
    amount_out = (reserve_out * net_in) // (reserve_in + net_in)

    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - amount_out
    if new_reserve_out <= 0:
        raise ValueError("swap would drain reserve_out")
    if new_reserve_in * new_reserve_out < reserve_in * reserve_out:
        raise ValueError("Invariant violation: k decreased")

    return SwapQuote(
        amount_in=amount_in,
        amount_out=amount_out,
        fee_total=fee_total,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
    )


def swap_exact_out(
    reserve_in: Amount,
    reserve_out: Amount,
    amount_out: Amount,
    fee_bps: int,
) -> SwapQuote:
    """
    Quote an exact-out swap.

        net_in = ceil(reserve_in * amount_out / (reserve_out - amount_out))
        amount_in = ceil(net_in * 10_000 / (10_000 - fee_bps))

    Raises:
        ValueError: If inputs are invalid or would violate invariants
    """
    for name, v in (
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("amount_out", amount_out),
        ("fee_bps", fee_bps),
    ):
        _require_int(name, v)
    if reserve_in <= 0 or reserve_out <= 0:
        raise ValueError(f"cannot swap against an empty reserve: ({reserve_in}, {reserve_out})")
    if amount_out <= 0:
        raise ValueError(f"amount_out must be positive: {amount_out}")
    if amount_out >= reserve_out:
        raise ValueError(
            f"Cannot drain full reserve: amount_out ({amount_out}) >= reserve_out ({reserve_out})"
        )
    if not (0 <= fee_bps < BPS_DENOM):
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}): {fee_bps}")

    net_in = _ceil_div_nonneg(reserve_in * amount_out, reserve_out - amount_out)
    amount_in = _ceil_div_nonneg(net_in * BPS_DENOM, BPS_DENOM - fee_bps)
    fee_total = compute_fee_total(amount_in, fee_bps)

    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - amount_out
    if new_reserve_in * new_reserve_out < reserve_in * reserve_out:
        raise ValueError("Invariant violation: k decreased")

    return SwapQuote(
        amount_in=amount_in,
        amount_out=amount_out,
        fee_total=fee_total,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
    )
