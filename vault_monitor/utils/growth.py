"""
Growth arithmetic for vault balances.
"""
from __future__ import annotations

import math
from decimal import ROUND_DOWN, Decimal, localcontext

DAYS_PER_YEAR = 365
U128_MAX = 2**128 - 1


def daily_growth(principal: int, apy_pct: float) -> int:
    """
    Estimated one-day growth of `principal` (wei) at `apy_pct` percent a year:
    principal * apy / 100 / 365, truncated toward zero.

    Decimal arithmetic keeps 128-bit principals exact. A negative APY gives 0.
    """
    if principal < 0 or principal > U128_MAX:
        raise ValueError(f"principal out of u128 range: {principal}")
    if not math.isfinite(apy_pct):
        raise ValueError(f"apy must be finite: {apy_pct}")
    if apy_pct <= 0:
        return 0
    with localcontext() as ctx:
        ctx.prec = 80
        # str() keeps the rate as written (3.5, not its binary float expansion)
        growth = Decimal(principal) * Decimal(str(apy_pct)) / Decimal(100) / Decimal(DAYS_PER_YEAR)
        return int(growth.to_integral_value(rounding=ROUND_DOWN))
