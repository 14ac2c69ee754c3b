"""
Pro-rata redemption of receipt tokens (integer-only).

    payout = floor(burn * claimable / supply)
    claimable' = claimable - payout
    supply'    = supply - burn

Claimable shrinks by the payout while supply shrinks by the full burn, which
keeps claimable / supply for the remaining holders at or above its prior
value. Rounding dust stays in the order and is never over-distributed.
"""

from __future__ import annotations

from typing import Tuple


def compute_payout(burn_amount: int, claimable: int, total_supply: int) -> int:
    for name, v in (
        ("burn_amount", burn_amount),
        ("claimable", claimable),
        ("total_supply", total_supply),
    ):
        if not isinstance(v, int) or isinstance(v, bool):
            raise TypeError(f"{name} must be an int")
        if v < 0:
            raise ValueError(f"{name} must be non-negative: {v}")
    if total_supply == 0:
        raise ValueError("total_supply must be positive")
    if burn_amount > total_supply:
        raise ValueError(f"burn_amount exceeds total_supply: {burn_amount} > {total_supply}")
    return (burn_amount * claimable) // total_supply


def apply_redemption(burn_amount: int, claimable: int, total_supply: int) -> Tuple[int, int, int]:
    """Return (payout, new_claimable, new_total_supply)."""
    payout = compute_payout(burn_amount, claimable, total_supply)
    return payout, claimable - payout, total_supply - burn_amount
