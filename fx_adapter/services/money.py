"""Rate rounding helpers.

Centralized so parsing and rendering use identical rounding semantics.
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP

RATE_QUANTUM = Decimal("0.0001")


def round4(value: Decimal) -> Decimal:
    return value.quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP)


def rate_to_float(value: Decimal) -> float:
    return float(round4(value))
