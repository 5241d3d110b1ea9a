from __future__ import annotations

import logging
from typing import Dict, Optional

from real_income.extractors.imf_specs import (
    DATAMAPPER_COUNTRIES_CACHE_KEY,
    PCPIPCH,
    DataMapperIndicatorSpec,
    ImfEndpoints,
)
from real_income.utils.io.cache import DiskCache
from real_income.utils.io.http import DATAMAPPER_HEADERS, HttpTransport

logger = logging.getLogger(__name__)


class ImfDataMapperRawExtractor:
    """
    Extractor RAW do DataMapper do IMF (JSON).

    Manda headers "de navegador" em toda chamada (o endpoint responde 403 sem eles).
    """

    def __init__(
        self,
        transport: HttpTransport,
        cache: DiskCache,
        indicator: DataMapperIndicatorSpec = PCPIPCH,
        endpoints: Optional[ImfEndpoints] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.transport = transport
        self.cache = cache
        self.indicator = indicator
        self.endpoints = endpoints or ImfEndpoints()
        self.headers = headers or DATAMAPPER_HEADERS

    def countries_url(self) -> str:
        return f"{self.endpoints.datamapper_base.rstrip('/')}/countries"

    def values_url(self, country: str, start_year: int, end_year: int) -> str:
        if end_year < start_year:
            raise ValueError("end_year deve ser >= start_year.")
        # vírgulas vão cruas na query, como a API espera
        periods = ",".join(str(y) for y in range(start_year, end_year + 1))
        base = self.endpoints.datamapper_base.rstrip("/")
        return f"{base}/{self.indicator.key}/{country}?periods={periods}"

    def fetch_countries(self) -> bytes:
        url = self.countries_url()
        return self.cache.get_or_fetch(
            DATAMAPPER_COUNTRIES_CACHE_KEY,
            lambda: self.transport.fetch(url, headers=self.headers),
        )

    def fetch_values(self, country: str, start_year: int, end_year: int) -> bytes:
        url = self.values_url(country, start_year, end_year)
        logger.info("DataMapper %s país=%s anos=%s..%s", self.indicator.key, country, start_year, end_year)
        key = self.indicator.build_cache_key(country, start_year, end_year)
        return self.cache.get_or_fetch(key, lambda: self.transport.fetch(url, headers=self.headers))
