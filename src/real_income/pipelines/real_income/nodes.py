from __future__ import annotations

from typing import Any, Mapping

import pandas as pd

from real_income.domain.service import run_datamapper, run_sdmx
from real_income.extractors.imf_datamapper_raw import ImfDataMapperRawExtractor
from real_income.extractors.imf_sdmx_raw import ImfSdmxRawExtractor
from real_income.extractors.imf_specs import ImfEndpoints
from real_income.pipelines.real_income.report import RunResult, rates_to_df, render_report
from real_income.utils.io.cache import CacheConfig, DiskCache
from real_income.utils.io.http import HTTPConfig, RequestsTransport

MODES = ("sdmx", "datamapper")


def _make_transport(params: Mapping[str, Any]) -> RequestsTransport:
    http = params.get("http") or {}
    return RequestsTransport(
        HTTPConfig(
            timeout_sec=http.get("timeout_sec", 30),
            max_retries=http.get("max_retries", 4),
            backoff_sec=http.get("backoff_sec", 1.0),
            headers=http.get("headers"),
        )
    )


def _make_cache(params: Mapping[str, Any]) -> DiskCache:
    return DiskCache.from_config(
        CacheConfig(
            enabled=bool(params.get("cache", True)),
            cache_dir=params.get("cache_dir"),
        )
    )


def _make_endpoints(params: Mapping[str, Any]) -> ImfEndpoints:
    return ImfEndpoints(**(params.get("endpoints") or {}))


def compute_real_income(params: Mapping[str, Any]) -> RunResult:
    """
    Executa um modo a partir de params:real_income:
      - sdmx: índice CPI mensal (razão de níveis)
      - datamapper: PCPIPCH anual (cadeia de variações)
    """
    mode = str(params.get("mode", "sdmx")).strip().lower()
    if mode not in MODES:
        raise ValueError(f"mode inválido: {mode!r}. Use 'sdmx' ou 'datamapper'.")

    transport = _make_transport(params)
    cache = _make_cache(params)
    endpoints = _make_endpoints(params)

    kwargs = dict(
        country=params.get("country"),
        start=str(params["start"]),
        amount=float(params["amount"]),
        end=params.get("end"),
    )
    if mode == "sdmx":
        return run_sdmx(ImfSdmxRawExtractor(transport, cache, endpoints=endpoints), **kwargs)
    return run_datamapper(ImfDataMapperRawExtractor(transport, cache, endpoints=endpoints), **kwargs)


def render_real_income_report(result: RunResult) -> str:
    return render_report(result)


def build_yearly_rates_table(result: RunResult) -> pd.DataFrame:
    """Taxas anuais usadas (vazio no modo sdmx)."""
    return rates_to_df(getattr(result, "rates", []))
