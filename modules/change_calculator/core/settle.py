from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Any

from modules.change_calculator.core.breakdown import ChangeBreakdown, breakdown
from modules.change_calculator.core.denominations import (
    DEFAULT_DENOMINATIONS,
    DenominationSet,
)
from modules.change_calculator.core.validate import (
    DEFAULT_CURRENCY_SYMBOL,
    ValidationResult,
    validate,
)


def _exact_difference(minuend: Decimal, subtrahend: Decimal) -> Decimal:
    """Subtract without rounding to the context precision."""
    top = max(minuend.adjusted(), subtrahend.adjusted())
    bottom = min(minuend.as_tuple().exponent, subtrahend.as_tuple().exponent)
    with localcontext() as ctx:
        # One extra digit for a borrow or carry.
        ctx.prec = max(ctx.prec, top - int(bottom) + 2)
        return minuend - subtrahend


@dataclass(frozen=True)
class Settlement:
    validation: ValidationResult
    change: Decimal | None = None
    breakdown: ChangeBreakdown | None = None

    @property
    def remainder(self) -> Decimal | None:
        """Fractional change that is not paid out."""
        if self.change is None or self.breakdown is None:
            return None
        return _exact_difference(self.change, Decimal(self.breakdown.amount))


def settle(
    bill_amount: Any,
    cash_given: Any,
    *,
    denominations: DenominationSet = DEFAULT_DENOMINATIONS,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> Settlement:
    validation = validate(bill_amount, cash_given, currency_symbol=currency_symbol)
    if not validation.accepted:
        return Settlement(validation)

    if validation.bill is None or validation.cash is None:
        raise ValueError("Accepted validation is missing its amounts.")
    change = _exact_difference(validation.cash, validation.bill)
    return Settlement(validation, change, breakdown(change, denominations))
