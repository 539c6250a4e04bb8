# apps/finance/allocation.py
"""
Greedy (FIFO) allocation of a received lump sum across ordered dues.

The first due soaks up as much as it can before anything spills into the
next one, the same way a student receipt is spread across the oldest
invoices first.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from apps.corecode.money import ZERO, _r2


def allocate_received(pool: Decimal, amounts: Iterable[Decimal]) -> list[Decimal]:
    """
    Return how much of *pool* lands on each of *amounts*, in order.

    >>> allocate_received(Decimal(267000), [Decimal(300000), Decimal(150000)])
    [Decimal('267000.00'), Decimal('0.00')]

    Whatever does not fit (pool larger than Σ amounts) is simply left over;
    callers that must not over-collect check ``sum(result) == pool``.
    """
    remaining = _r2(pool)
    if remaining < 0:
        raise ValueError("pool must not be negative")

    out: list[Decimal] = []
    for amount in amounts:
        take = min(remaining, _r2(amount)) if remaining > 0 else ZERO
        out.append(_r2(take))
        remaining -= take
    return out
