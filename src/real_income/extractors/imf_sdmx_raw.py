from __future__ import annotations

import logging
from typing import Optional

from real_income.domain.periods.models import MonthlyPeriod
from real_income.domain.periods.parsing import to_wire_period
from real_income.extractors.imf_specs import (
    CPI_INDEX_MONTHLY,
    SDMX_CL_AREA_CPI,
    SDMX_CODELIST_AGENCY,
    SDMX_COUNTRIES_CACHE_KEY,
    ImfEndpoints,
    SdmxCpiSeriesSpec,
)
from real_income.utils.io.cache import DiskCache
from real_income.utils.io.http import HttpTransport

logger = logging.getLogger(__name__)


class ImfSdmxRawExtractor:
    """
    Extractor RAW do SDMX do IMF (SDMX-ML / XML).

    Responsabilidade única: montar URL + chave de cache e devolver os bytes
    (do cache ou da rede). Parsing fica em domain.sdmx.
    """

    def __init__(
        self,
        transport: HttpTransport,
        cache: DiskCache,
        spec: SdmxCpiSeriesSpec = CPI_INDEX_MONTHLY,
        endpoints: Optional[ImfEndpoints] = None,
    ):
        self.transport = transport
        self.cache = cache
        self.spec = spec
        self.endpoints = endpoints or ImfEndpoints()

    def countries_url(self) -> str:
        base = self.endpoints.sdmx_structure_base.rstrip("/")
        return f"{base}/codelist/{SDMX_CODELIST_AGENCY}/{SDMX_CL_AREA_CPI}/latest"

    def data_url(self, country: str) -> str:
        base = self.endpoints.sdmx_base.rstrip("/")
        return f"{base}/data/{self.spec.dataset}/{self.spec.build_series_key(country)}"

    def fetch_countries_codelist(self) -> bytes:
        url = self.countries_url()
        return self.cache.get_or_fetch(
            SDMX_COUNTRIES_CACHE_KEY,
            lambda: self.transport.fetch(url),
        )

    def fetch_series(self, country: str, start: MonthlyPeriod, end: MonthlyPeriod) -> bytes:
        start_wire = to_wire_period(start)
        end_wire = to_wire_period(end)
        url = self.data_url(country)
        params = {"startPeriod": start_wire, "endPeriod": end_wire}

        logger.info(
            "SDMX %s série=%s intervalo=%s..%s",
            self.spec.dataset,
            self.spec.build_series_key(country),
            start_wire,
            end_wire,
        )
        key = self.spec.build_cache_key(country, start_wire, end_wire)
        return self.cache.get_or_fetch(key, lambda: self.transport.fetch(url, params=params))
