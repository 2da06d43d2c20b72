from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from modules.change_calculator.core.denominations import DenominationSet
from modules.change_calculator.core.render import DEFAULT_COIN_THRESHOLD
from modules.change_calculator.core.validate import DEFAULT_CURRENCY_SYMBOL


def _parse_int(raw: str | None, *, label: str, default: int) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{label} must be a whole number.") from None


@dataclass(frozen=True)
class ChangeSettings:
    denominations: DenominationSet
    currency_symbol: str
    coin_threshold: int


@lru_cache(maxsize=1)
def load_change_settings() -> ChangeSettings:
    denominations = DenominationSet.parse(os.getenv("SPARKY_CHANGE_DENOMINATIONS"))
    symbol = os.getenv("SPARKY_CURRENCY_SYMBOL", "").strip() or DEFAULT_CURRENCY_SYMBOL
    threshold = _parse_int(
        os.getenv("SPARKY_COIN_THRESHOLD"),
        label="SPARKY_COIN_THRESHOLD",
        default=DEFAULT_COIN_THRESHOLD,
    )
    if threshold < 0:
        raise ValueError("SPARKY_COIN_THRESHOLD must be zero or higher.")
    return ChangeSettings(
        denominations=denominations,
        currency_symbol=symbol,
        coin_threshold=threshold,
    )
