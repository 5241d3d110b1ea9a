from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from real_income.domain.datamapper.models import YearlyRate
from real_income.domain.errors import EmptyResultError, InvalidValueError
from real_income.domain.sdmx.models import Observation


def _by_token(o: Observation) -> str:
    return o.period_token


def sort_by_period(
    observations: Iterable[Observation],
    sort_key: Optional[Callable[[Observation], Any]] = None,
) -> List[Observation]:
    """
    Ordena pelo token de período como string.

    "YYYY-Mmm" tem mês com 2 dígitos, então ordem lexicográfica == ordem cronológica
    (dentro da mesma granularidade).
    """
    return sorted(observations, key=sort_key or _by_token)


def pick_start_and_latest(
    observations: Sequence[Observation],
    start_token: str,
    sort_key: Optional[Callable[[Observation], Any]] = None,
) -> Tuple[Observation, Observation]:
    """
    start  = primeira observação com token >= start_token (na ordem de sort_key)
    latest = última observação disponível (pode ser anterior ao fim pedido)
    """
    key = sort_key or _by_token
    obs = sort_by_period(observations, key)
    if not obs:
        raise EmptyResultError("No CPI data found")

    threshold = key(Observation(period_token=start_token, value=0.0))
    start_obs = next((o for o in obs if key(o) >= threshold), None)
    if start_obs is None:
        raise EmptyResultError(
            f"No CPI data found at/after start date {start_token} (start too early?)"
        )
    latest_obs = obs[-1]

    # a extração já filtra <= 0; re-checado aqui no ponto de uso
    if not (start_obs.value > 0 and latest_obs.value > 0):
        raise InvalidValueError("Invalid CPI values (<= 0)")

    return start_obs, latest_obs


@dataclass(frozen=True)
class YearlyChain:
    deflator: float
    latest_year: int
    rates: List[YearlyRate]


def collect_yearly_chain(series_lookup: Mapping[int, float], years: Iterable[int]) -> YearlyChain:
    """
    deflator = Π_y (1 + pct_y / 100), em ordem crescente de ano.

    Ano sem dado é pulado (não conta como 0% nem quebra a cadeia).
    """
    deflator = 1.0
    rates: List[YearlyRate] = []

    for y in sorted(set(years)):
        pct = series_lookup.get(y)
        if pct is None:
            continue
        rates.append(YearlyRate(year=y, pct=pct))
        deflator *= 1.0 + pct / 100.0

    if not rates:
        raise EmptyResultError("No numeric observations found in the requested years")

    return YearlyChain(deflator=deflator, latest_year=rates[-1].year, rates=rates)
