from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from real_income.domain.datamapper.models import YearlyRate
from real_income.domain.datamapper.parsing import parse_countries_json, parse_indicator_series
from real_income.domain.deflator.engine import RealValueResult, chain_mode, ratio_mode
from real_income.domain.errors import EmptyResultError, InputError, InvalidValueError
from real_income.domain.periods.parsing import (
    resolve_monthly_range,
    resolve_yearly_range,
    to_wire_period,
    wire_period_to_label,
)
from real_income.domain.sdmx.models import Item
from real_income.domain.sdmx.parsing import (
    dedupe_items,
    extract_codelist_items,
    extract_observations,
    sort_items_by_name,
)
from real_income.domain.series.resolve import collect_yearly_chain, pick_start_and_latest
from real_income.extractors.imf_datamapper_raw import ImfDataMapperRawExtractor
from real_income.extractors.imf_sdmx_raw import ImfSdmxRawExtractor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SdmxRunResult:
    country_code: str
    country_name: str
    source_label: str
    indicator: str
    start_label: str
    latest_label: str
    cpi_start: float
    cpi_latest: float
    inflation_factor: float
    result: RealValueResult


@dataclass(frozen=True)
class DataMapperRunResult:
    country_code: str
    country_name: str
    source_label: str
    indicator: str
    start_label: str
    latest_label: str
    deflator: float
    rates: List[YearlyRate]
    result: RealValueResult


def _validate_amount(amount: float) -> float:
    if not amount > 0:
        raise InvalidValueError("Amount must be > 0")
    return float(amount)


def _normalize_code(country: Optional[str]) -> str:
    code = (country or "").strip().upper()
    if not code:
        raise InputError("Country code is required (e.g. POL, USA, CHE)")
    return code


# ----------------------------
# Listas de países
# ----------------------------

def list_sdmx_countries(extractor: ImfSdmxRawExtractor) -> List[Item]:
    items = extract_codelist_items(extractor.fetch_countries_codelist())
    return sort_items_by_name(dedupe_items(items))


def list_datamapper_countries(extractor: ImfDataMapperRawExtractor) -> List[Item]:
    items = parse_countries_json(extractor.fetch_countries())
    return sort_items_by_name(dedupe_items(items))


# ----------------------------
# SDMX: índice mensal (modo razão)
# ----------------------------

def run_sdmx(
    extractor: ImfSdmxRawExtractor,
    *,
    country: str,
    start: str,
    amount: float,
    end: Optional[str] = None,
    today: Optional[date] = None,
) -> SdmxRunResult:
    """
    real = nominal * (CPI_start / CPI_latest)

    Com o código informado, o rótulo do país é o próprio código (não depende do codelist).
    """
    amount = _validate_amount(amount)
    code = _normalize_code(country)
    start_p, end_p = resolve_monthly_range(start, end, today=today)

    payload = extractor.fetch_series(code, start_p, end_p)
    observations = extract_observations(payload)
    start_obs, latest_obs = pick_start_and_latest(observations, to_wire_period(start_p))
    logger.info(
        "SDMX %s: %d observações; start=%s latest=%s",
        code,
        len(observations),
        start_obs.period_token,
        latest_obs.period_token,
    )

    return SdmxRunResult(
        country_code=code,
        country_name=code,
        source_label="IMF SDMX",
        indicator=extractor.spec.description,
        start_label=wire_period_to_label(start_obs.period_token),
        latest_label=wire_period_to_label(latest_obs.period_token),
        cpi_start=start_obs.value,
        cpi_latest=latest_obs.value,
        inflation_factor=latest_obs.value / start_obs.value,
        result=ratio_mode(amount, start_obs.value, latest_obs.value),
    )


# ----------------------------
# DataMapper: inflação anual (modo cadeia)
# ----------------------------

def run_datamapper(
    extractor: ImfDataMapperRawExtractor,
    *,
    country: str,
    start: str,
    amount: float,
    end: Optional[str] = None,
    today: Optional[date] = None,
) -> DataMapperRunResult:
    """
    deflator = Π_y (1 + PCPIPCH_y / 100); real = nominal / deflator
    """
    amount = _validate_amount(amount)
    code = _normalize_code(country)
    start_y, end_y = resolve_yearly_range(start, end, today=today)

    countries = list_datamapper_countries(extractor)
    match = next((c for c in countries if c.code == code), None)
    if match is None:
        raise EmptyResultError(f"Country code '{code}' not found in DataMapper countries list")

    payload = extractor.fetch_values(code, start_y.year, end_y.year)
    series = parse_indicator_series(payload, extractor.indicator.key, code)
    chain = collect_yearly_chain(series, range(start_y.year, end_y.year + 1))
    logger.info(
        "DataMapper %s: %d anos com dado; deflator=%.6f latest=%s",
        code,
        len(chain.rates),
        chain.deflator,
        chain.latest_year,
    )

    return DataMapperRunResult(
        country_code=code,
        country_name=match.name,
        source_label="IMF DataMapper",
        indicator=extractor.indicator.key,
        start_label=str(start_y),
        latest_label=str(chain.latest_year),
        deflator=chain.deflator,
        rates=chain.rates,
        result=chain_mode(amount, chain.deflator),
    )
