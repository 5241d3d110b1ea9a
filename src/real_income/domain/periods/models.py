from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, order=True)
class MonthlyPeriod:
    """Ponto mensal normalizado; ordenação lexicográfica em (year, month)."""
    year: int
    month: int

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True, order=True)
class YearlyPeriod:
    """Ponto anual normalizado; ordenação pelo ano."""
    year: int

    def __str__(self) -> str:
        return f"{self.year:04d}"


Period = Union[MonthlyPeriod, YearlyPeriod]
