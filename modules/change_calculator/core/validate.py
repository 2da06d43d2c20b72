from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, List, Tuple

DEFAULT_CURRENCY_SYMBOL = "₹"

BILL_FIELD = "bill_amount"
CASH_FIELD = "cash_given"


class ReasonCode(str, Enum):
    INVALID_BILL_AMOUNT = "invalid_bill_amount"
    INVALID_CASH_AMOUNT = "invalid_cash_amount"
    INSUFFICIENT_CASH = "insufficient_cash"


class Status(str, Enum):
    ACCEPTED = "accepted"
    EXACT = "exact"
    REJECTED = "rejected"


# Upper bound for bill and cash.
MAX_AMOUNT = Decimal("1000000000000000")

EXACT_PAYMENT_MESSAGE = "Exact amount paid! No change to return."


@dataclass(frozen=True)
class Reason:
    code: ReasonCode
    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    status: Status
    reasons: Tuple[Reason, ...] = ()
    bill: Decimal | None = None
    cash: Decimal | None = None

    @property
    def accepted(self) -> bool:
        return self.status is Status.ACCEPTED

    @property
    def exact(self) -> bool:
        return self.status is Status.EXACT

    @property
    def codes(self) -> Tuple[ReasonCode, ...]:
        return tuple(reason.code for reason in self.reasons)

    @property
    def messages(self) -> Tuple[str, ...]:
        return tuple(reason.message for reason in self.reasons)


def parse_amount(value: Any) -> Decimal | None:
    """Parse a form or numeric value; None stands for not-a-number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(repr(value)) if math.isfinite(value) else None

    compact = str(value).strip().replace(" ", "")
    if not compact:
        return None
    if "," in compact and "." in compact:
        last_comma = compact.rfind(",")
        last_dot = compact.rfind(".")
        if last_comma > last_dot:
            compact = compact.replace(".", "")
            compact = compact.replace(",", ".")
        else:
            compact = compact.replace(",", "")
    elif "," in compact:
        compact = compact.replace(",", ".")

    try:
        parsed = Decimal(compact)
    except (InvalidOperation, ValueError):
        return None
    return parsed if parsed.is_finite() else None


def format_plain(value: Decimal) -> str:
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


def validate(
    bill_amount: Any,
    cash_given: Any,
    *,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    max_amount: Decimal = MAX_AMOUNT,
) -> ValidationResult:
    bill = parse_amount(bill_amount)
    cash = parse_amount(cash_given)
    reasons: List[Reason] = []
    limit = f"{currency_symbol}{format_plain(max_amount)}"

    if bill is None or bill <= 0:
        reasons.append(
            Reason(
                ReasonCode.INVALID_BILL_AMOUNT,
                BILL_FIELD,
                "Please enter a valid bill amount greater than 0",
            )
        )
    elif bill > max_amount:
        reasons.append(
            Reason(
                ReasonCode.INVALID_BILL_AMOUNT,
                BILL_FIELD,
                f"Bill amount cannot be more than {limit}",
            )
        )
    if cash is None or cash <= 0:
        reasons.append(
            Reason(
                ReasonCode.INVALID_CASH_AMOUNT,
                CASH_FIELD,
                "Please enter a valid cash amount greater than 0",
            )
        )
    elif cash > max_amount:
        reasons.append(
            Reason(
                ReasonCode.INVALID_CASH_AMOUNT,
                CASH_FIELD,
                f"Cash amount cannot be more than {limit}",
            )
        )
    if reasons:
        return ValidationResult(Status.REJECTED, tuple(reasons), bill, cash)

    if cash < bill:
        message = (
            "Cash given is less than bill amount! "
            f"Please pay at least {currency_symbol}{format_plain(bill)}"
        )
        reason = Reason(ReasonCode.INSUFFICIENT_CASH, CASH_FIELD, message)
        return ValidationResult(Status.REJECTED, (reason,), bill, cash)
    if cash == bill:
        return ValidationResult(Status.EXACT, (), bill, cash)
    return ValidationResult(Status.ACCEPTED, (), bill, cash)
