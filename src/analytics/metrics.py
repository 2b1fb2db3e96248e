from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

TWO_PLACES = Decimal("0.01")
ZERO_PERCENT = Decimal("0.00")


def percentage(achieved: Union[int, Decimal], quota: Union[int, Decimal]) -> Decimal:
    """``achieved / quota * 100`` to two places; zero when there is no quota."""
    if not quota or quota <= 0:
        return ZERO_PERCENT
    value = Decimal(achieved) * 100 / Decimal(quota)
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def remaining(quota: int, achieved: int) -> int:
    return max(quota - achieved, 0)
