"""Rounding helpers shared by the scoring pipelines."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero.

    Python's ``round`` uses banker's rounding, which would move published
    scores such as ``62.25`` down instead of up.
    """
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


DAYS_PER_MONTH = 30.44


def days_to_months(days: float) -> float:
    """Convert a day count into months rounded to one decimal."""
    return round_half_up(days / DAYS_PER_MONTH, 1)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


__all__ = ["DAYS_PER_MONTH", "clamp", "days_to_months", "round_half_up"]
