from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN
from typing import List, Tuple

from modules.change_calculator.core.denominations import (
    DEFAULT_DENOMINATIONS,
    DenominationSet,
)


@dataclass(frozen=True)
class BreakdownEntry:
    denomination: int
    count: int
    subtotal: int


@dataclass(frozen=True)
class ChangeBreakdown:
    amount: int
    entries: Tuple[BreakdownEntry, ...]
    total_note_count: int
    # Left over only when the set has no unit denomination.
    unpaid: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.entries


def _truncate(amount: Decimal | int | float) -> int:
    if isinstance(amount, Decimal):
        if not amount.is_finite():
            raise ValueError("Change amount must be finite.")
        return int(amount.to_integral_value(rounding=ROUND_DOWN))
    if isinstance(amount, float) and not math.isfinite(amount):
        raise ValueError("Change amount must be finite.")
    return math.trunc(amount)


def breakdown(
    change_amount: Decimal | int | float,
    denominations: DenominationSet = DEFAULT_DENOMINATIONS,
) -> ChangeBreakdown:
    """Split ``change_amount`` into the fewest notes and coins, largest first.

    The fractional part of the amount is dropped, not rounded. Greedy is
    optimal only for canonical sets such as the default rupee series.
    """
    amount = _truncate(change_amount)
    if change_amount < 0:
        raise ValueError("Change amount must be zero or higher.")

    remaining = amount
    entries: List[BreakdownEntry] = []
    for denom in denominations:
        count = remaining // denom
        if count:
            entries.append(BreakdownEntry(denom, count, denom * count))
            remaining %= denom

    return ChangeBreakdown(
        amount=amount,
        entries=tuple(entries),
        total_note_count=sum(entry.count for entry in entries),
        unpaid=remaining,
    )
