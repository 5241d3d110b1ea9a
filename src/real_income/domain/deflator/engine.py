from __future__ import annotations

from dataclasses import dataclass

from real_income.domain.errors import InvalidValueError


@dataclass(frozen=True)
class RealValueResult:
    nominal: float
    real: float
    loss: float
    loss_pct: float


def ratio_mode(nominal: float, index_start: float, index_latest: float) -> RealValueResult:
    """real = nominal * (CPI_start / CPI_latest)"""
    if not (index_start > 0 and index_latest > 0):
        raise InvalidValueError("Index levels must be > 0")

    ratio = index_start / index_latest
    real = nominal * ratio
    return RealValueResult(
        nominal=nominal,
        real=real,
        loss=nominal - real,
        loss_pct=(1.0 - ratio) * 100.0,
    )


def chain_mode(nominal: float, deflator: float) -> RealValueResult:
    """real = nominal / Π(1 + pct/100)"""
    if not deflator > 0:
        raise InvalidValueError("Deflator must be > 0")

    real = nominal / deflator
    return RealValueResult(
        nominal=nominal,
        real=real,
        loss=nominal - real,
        loss_pct=(1.0 - 1.0 / deflator) * 100.0,
    )
