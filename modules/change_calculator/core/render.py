from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List

from modules.change_calculator.core.settle import Settlement
from modules.change_calculator.core.validate import (
    DEFAULT_CURRENCY_SYMBOL,
    EXACT_PAYMENT_MESSAGE,
    ReasonCode,
    Status,
)

DEFAULT_COIN_THRESHOLD = 10


def _quantize(value: Decimal, decimals: int = 2) -> str:
    quant = Decimal("1") if decimals == 0 else Decimal("1." + "0" * decimals)
    return str(value.quantize(quant, rounding=ROUND_HALF_UP))


def _money(value: Decimal, symbol: str) -> str:
    return f"{symbol}{_quantize(value)}"


def _message(kind: str, text: str) -> Dict[str, str]:
    return {"type": kind, "text": text}


def render_settlement(
    settlement: Settlement,
    *,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    coin_threshold: int = DEFAULT_COIN_THRESHOLD,
) -> Dict[str, Any]:
    validation = settlement.validation
    payload: Dict[str, Any] = {
        "status": validation.status.value,
        "field_errors": {},
        "message": None,
        "summary": None,
        "rows": [],
    }

    if validation.status is Status.REJECTED:
        field_errors: Dict[str, str] = {}
        for reason in validation.reasons:
            if reason.code is ReasonCode.INSUFFICIENT_CASH:
                payload["message"] = _message("error", reason.message)
            else:
                field_errors[reason.field] = reason.message
        payload["field_errors"] = field_errors
        payload["error"] = " ".join(validation.messages)
        return payload

    if validation.status is Status.EXACT:
        payload["message"] = _message("success", EXACT_PAYMENT_MESSAGE)
        return payload

    change = settlement.change
    notes = settlement.breakdown
    if change is None or notes is None:
        raise ValueError("Accepted settlement is missing its breakdown.")

    rows: List[Dict[str, Any]] = []
    for entry in notes.entries:
        kind = "Note" if entry.denomination >= coin_threshold else "Coin"
        rows.append(
            {
                "denomination": entry.denomination,
                "count": entry.count,
                "subtotal": entry.subtotal,
                "kind": kind,
                "label": f"{currency_symbol}{entry.denomination} {kind}",
                "subtotal_label": f"{currency_symbol}{entry.subtotal}",
            }
        )

    payload["rows"] = rows
    payload["summary"] = {
        "bill": _money(validation.bill, currency_symbol),
        "cash": _money(validation.cash, currency_symbol),
        "change": _money(change, currency_symbol),
        "total_notes": notes.total_note_count,
        "remainder": _quantize(settlement.remainder or Decimal("0")),
    }
    payload["message"] = _message(
        "success",
        "Change calculated successfully! "
        f"Return {_money(change, currency_symbol)} to the customer.",
    )
    return payload
