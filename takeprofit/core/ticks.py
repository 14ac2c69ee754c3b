"""
Tick arithmetic.

- `lower_bound` maps any tick to the lower bound of its bucket.
- `get_sqrt_ratio_at_tick` / `get_tick_at_sqrt_ratio` convert between ticks and
  Q64.96 sqrt prices (integer exact, Uniswap TickMath semantics).

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic
- Invariant: lower_bound(t, s) == floor(t / s) * s for every int tick, including negatives
"""

from __future__ import annotations

import math

MIN_TICK = -887272
MAX_TICK = 887272
MIN_SQRT_RATIO = 4295128739
MAX_SQRT_RATIO = 1461446703485210103287273052203988822378723970342

_UINT256_MAX = (1 << 256) - 1

# sqrt(1.0001^-(2^i)) in Q128.128 for bit i of |tick|.
_TICK_RATIOS = (
    0xFFFCB933BD6FAD37AA2D162D1A594001,
    0xFFF97272373D413259A46990580E213A,
    0xFFF2E50F5F656932EF12357CF3C7FDCC,
    0xFFE5CACA7E10E4E61C3624EAA0941CD0,
    0xFFCB9843D60F6159C9DB58835C926644,
    0xFF973B41FA98C081472E6896DFB254C0,
    0xFF2EA16466C96A3843EC78B326B52861,
    0xFE5DEE046A99A2A811C461F1969C3053,
    0xFCBE86C7900A88AEDCFFC83B479AA3A4,
    0xF987A7253AC413176F2B074CF7815E54,
    0xF3392B0822B70005940C7A398E4B70F3,
    0xE7159475A2C29B7443B29C7FA6E889D9,
    0xD097F3BDFD2022B8845AD8F792AA5825,
    0xA9F746462D870FDF8A65DC1F90E061E5,
    0x70D869A156D2A1B890BB3DF62BAF32F7,
    0x31BE135F97D08FD981231505542FCFA6,
    0x9AA508B5B7A84E1C677DE54F3E99BC9,
    0x5D6AF8DEDB81196699C329225EE604,
    0x2216E584F5FA1EA926041BEDFE98,
    0x48A170391F7DC42444E8FA2,
)


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def lower_bound(tick: int, spacing: int) -> int:
    """
    Lower bound of the bucket `[bound, bound + spacing)` containing `tick`.

    Integer division here truncates toward zero, so negative ticks that are not
    on a boundary are stepped down one interval to floor toward -inf:

        lower_bound(100, 60)  == 60
        lower_bound(-100, 60) == -120
        lower_bound(-60, 60)  == -60
    """
    _require_int("tick", tick)
    _require_int("spacing", spacing)
    if spacing <= 0:
        raise ValueError(f"spacing must be positive: {spacing}")

    intervals = abs(tick) // spacing
    if tick < 0:
        intervals = -intervals
    if tick < 0 and tick % spacing != 0:
        intervals -= 1
    return intervals * spacing


def get_sqrt_ratio_at_tick(tick: int) -> int:
    """sqrt(1.0001^tick) * 2^96, rounded up (TickMath.getSqrtRatioAtTick)."""
    _require_int("tick", tick)
    if tick < MIN_TICK or tick > MAX_TICK:
        raise ValueError(f"tick {tick} out of bounds [{MIN_TICK}, {MAX_TICK}]")

    abs_tick = -tick if tick < 0 else tick
    ratio = 1 << 128
    for i, factor in enumerate(_TICK_RATIOS):
        if (abs_tick >> i) & 1:
            ratio = (ratio * factor) >> 128
    if tick > 0:
        ratio = _UINT256_MAX // ratio

    # Q128.128 -> Q64.96, rounding up so the result never understates the price.
    return (ratio >> 32) + (0 if ratio % (1 << 32) == 0 else 1)


def get_tick_at_sqrt_ratio(sqrt_price_x96: int) -> int:
    """Greatest tick whose sqrt ratio is <= sqrt_price_x96 (binary search)."""
    _require_int("sqrt_price_x96", sqrt_price_x96)
    if sqrt_price_x96 < MIN_SQRT_RATIO or sqrt_price_x96 >= MAX_SQRT_RATIO:
        raise ValueError(f"sqrt_price_x96 {sqrt_price_x96} out of bounds")

    lo, hi = MIN_TICK, MAX_TICK
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if get_sqrt_ratio_at_tick(mid) <= sqrt_price_x96:
            lo = mid
        else:
            hi = mid - 1
    return lo


def sqrt_price_x96_from_reserves(reserve0: int, reserve1: int) -> int:
    """floor(sqrt(reserve1 / reserve0) * 2^96) using integer isqrt."""
    _require_int("reserve0", reserve0)
    _require_int("reserve1", reserve1)
    if reserve0 <= 0 or reserve1 <= 0:
        raise ValueError(f"Reserves must be positive: ({reserve0}, {reserve1})")
    return math.isqrt((reserve1 << 192) // reserve0)
