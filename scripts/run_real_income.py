from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from real_income.domain.errors import RealIncomeError
from real_income.domain.service import (
    list_datamapper_countries,
    list_sdmx_countries,
    run_datamapper,
    run_sdmx,
)
from real_income.extractors.imf_datamapper_raw import ImfDataMapperRawExtractor
from real_income.extractors.imf_sdmx_raw import ImfSdmxRawExtractor
from real_income.pipelines.real_income.report import render_report
from real_income.utils.io.cache import CacheConfig, DiskCache
from real_income.utils.io.http import HTTPConfig, RequestsTransport


@dataclass(frozen=True)
class RunConfig:
    mode: str = "sdmx"                 # "sdmx" | "datamapper"
    country: Optional[str] = "POL"     # None => só lista os países do modo
    start: str = "2021-01"
    end: Optional[str] = None          # default: mês/ano corrente
    amount: float = 100_000.0
    cache: bool = True
    verbose: bool = False


def main() -> None:
    cfg = RunConfig()
    logging.basicConfig(level=logging.INFO if cfg.verbose else logging.WARNING)

    transport = RequestsTransport(HTTPConfig(timeout_sec=60, max_retries=4, backoff_sec=1.0))
    cache = DiskCache.from_config(CacheConfig(enabled=cfg.cache))

    try:
        if cfg.mode == "sdmx":
            sdmx = ImfSdmxRawExtractor(transport, cache)
            if cfg.country is None:
                for it in list_sdmx_countries(sdmx):
                    print(f"{it.name} - {it.code}")
                return
            res = run_sdmx(sdmx, country=cfg.country, start=cfg.start, amount=cfg.amount, end=cfg.end)
        else:
            dm = ImfDataMapperRawExtractor(transport, cache)
            if cfg.country is None:
                for it in list_datamapper_countries(dm):
                    print(f"{it.name} - {it.code}")
                return
            res = run_datamapper(dm, country=cfg.country, start=cfg.start, amount=cfg.amount, end=cfg.end)
    except RealIncomeError as exc:
        raise SystemExit(f"Erro: {exc}")

    print(render_report(res), end="")


if __name__ == "__main__":
    main()
