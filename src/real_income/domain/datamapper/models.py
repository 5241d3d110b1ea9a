from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class YearlyRate:
    """Variação anual (%) de um ano; pode ser negativa (deflação)."""
    year: int
    pct: float
