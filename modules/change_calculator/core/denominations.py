from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple

DEFAULT_DENOMS = "2000,500,200,100,50,20,10,5,2,1"
MAX_DENOMS = 40
MAX_DENOMINATION = 100_000


@dataclass(frozen=True)
class DenominationSet:
    values: Tuple[int, ...]

    def __post_init__(self) -> None:
        values = tuple(self.values)
        if not values:
            raise ValueError("Denominations are required.")
        if len(values) > MAX_DENOMS:
            raise ValueError(f"Too many denominations (limit {MAX_DENOMS}).")
        for value in values:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError("Denominations must be whole numbers.")
            if value <= 0:
                raise ValueError("Denominations must be positive.")
            if value > MAX_DENOMINATION:
                raise ValueError(
                    f"Denominations cannot be more than {MAX_DENOMINATION}."
                )
        for larger, smaller in zip(values, values[1:]):
            if larger <= smaller:
                raise ValueError("Denominations must be strictly descending.")
        object.__setattr__(self, "values", values)

    @classmethod
    def from_values(cls, values: Iterable[int]) -> "DenominationSet":
        """Build a set from unordered values, rejecting duplicates."""
        items = list(values)
        if len(set(items)) != len(items):
            raise ValueError("Denominations must not repeat.")
        return cls(tuple(sorted(items, reverse=True)))

    @classmethod
    def parse(cls, raw: str | None) -> "DenominationSet":
        text = DEFAULT_DENOMS if raw is None or not raw.strip() else raw
        tokens = [token for token in re.split(r"[,\s]+", text) if token.strip()]
        values: List[int] = []
        for token in tokens:
            try:
                values.append(int(token))
            except ValueError:
                raise ValueError(f"Invalid denomination '{token}'.") from None
        return cls.from_values(values)

    def __iter__(self) -> Iterator[int]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


DEFAULT_DENOMINATIONS = DenominationSet.parse(DEFAULT_DENOMS)


def _greedy_count(amount: int, denominations: DenominationSet) -> int:
    count = 0
    for denom in denominations:
        take, amount = divmod(amount, denom)
        count += take
    # Sets without 1 can leave a remainder; such amounts are not payable.
    return count if amount == 0 else -1


def _optimal_counts(limit: int, denominations: DenominationSet) -> List[int]:
    unreachable = limit + 1
    best = [0] + [unreachable] * limit
    for amount in range(1, limit + 1):
        for denom in denominations:
            if denom <= amount and best[amount - denom] + 1 < best[amount]:
                best[amount] = best[amount - denom] + 1
    return [-1 if value == unreachable else value for value in best]


def is_canonical(denominations: DenominationSet, *, limit: int | None = None) -> bool:
    """Return True when greedy change matches the optimum for every amount.

    Counterexamples to greedy, when any exist, are smaller than the sum of the
    two largest denominations, so that sum is the default search bound.
    """
    values = denominations.values
    if limit is None:
        limit = values[0] + values[1] if len(values) > 1 else values[0]
    optimal = _optimal_counts(limit, denominations)
    for amount in range(1, limit + 1):
        if _greedy_count(amount, denominations) != optimal[amount]:
            return False
    return True
