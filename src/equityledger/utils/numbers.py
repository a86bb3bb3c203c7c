"""Percentage arithmetic for completion and equity values."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[int, float, Decimal]

HUNDRED = Decimal(100)


def to_decimal(value: Number | None) -> Decimal:
    """Coerce a stored or caller-supplied amount to Decimal (None -> 0)."""
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    # str() keeps 0.1 as 0.1 rather than its binary expansion
    return Decimal(str(value))


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def effort_completion(hours_logged: Number, estimated_hours: Number | None) -> int | None:
    """Completion derived from effort, capped at 100.

    Returns None when there is no positive estimate to derive from.
    """
    estimate = to_decimal(estimated_hours)
    if estimate <= 0:
        return None
    return min(round_half_up(to_decimal(hours_logged) / estimate * HUNDRED), 100)


def weighted_completion(items: list[tuple[Number, Number]]) -> int:
    """Equity-weighted completion of ``(equity_allocation, completion_percentage)`` pairs."""
    total_equity = Decimal(0)
    completed_equity = Decimal(0)
    for equity, completion in items:
        weight = to_decimal(equity)
        total_equity += weight
        completed_equity += weight * to_decimal(completion) / HUNDRED
    if total_equity <= 0:
        return 0
    return round_half_up(completed_equity / total_equity * HUNDRED)
