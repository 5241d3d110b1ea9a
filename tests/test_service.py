import json
from datetime import date
from typing import Any, Dict, Optional

import pytest

from real_income.domain.errors import (
    EmptyResultError,
    InputError,
    InvalidValueError,
    RangeError,
    RealIncomeError,
)
from real_income.domain.service import (
    list_datamapper_countries,
    list_sdmx_countries,
    run_datamapper,
    run_sdmx,
)
from real_income.extractors.imf_datamapper_raw import ImfDataMapperRawExtractor
from real_income.extractors.imf_sdmx_raw import ImfSdmxRawExtractor
from real_income.utils.io.cache import DiskCache

SDMX_DATA = b"""<?xml version="1.0" encoding="UTF-8"?>
<message:StructureSpecificData xmlns:message="http://www.sdmx.org/resources/sdmxml/schemas/v2_1/message">
  <message:DataSet>
    <Series COUNTRY="POL" FREQUENCY="M">
      <Obs TIME_PERIOD="2021-M03" OBS_VALUE="110"/>
      <Obs TIME_PERIOD="2021-M01" OBS_VALUE="100"/>
      <Obs TIME_PERIOD="2021-M06" OBS_VALUE="125"/>
    </Series>
  </message:DataSet>
</message:StructureSpecificData>
"""

SDMX_CODELIST = b"""<?xml version="1.0" encoding="UTF-8"?>
<m:Structure xmlns:m="urn:m" xmlns:s="urn:s" xmlns:c="urn:c">
  <s:Codelist id="CL_COUNTRY_ISO3">
    <s:Code id="POL"><c:Name xml:lang="en">Poland</c:Name></s:Code>
    <s:Code id="CHE"><c:Name xml:lang="en">Switzerland</c:Name></s:Code>
    <s:Code id="POL"><c:Name xml:lang="en">Poland (dup)</c:Name></s:Code>
    <s:Code id="AUT"><c:Name xml:lang="en">austria</c:Name></s:Code>
  </s:Codelist>
</m:Structure>
"""

DM_COUNTRIES = json.dumps(
    {"countries": {"CHE": {"label": "Switzerland"}, "USA": {"label": "United States"}, "XXX": {}}}
).encode()

DM_VALUES = json.dumps(
    {"values": {"PCPIPCH": {"CHE": {"2020": 10, "2021": -5, "2022": None}}}}
).encode()


# ---------- fakes ----------
class RoutingTransport:
    """Responde por prefixo de URL; registra todas as chamadas."""

    def __init__(self, routes: Dict[str, bytes]):
        self.routes = routes
        self.calls = []

    def fetch(self, url: str, params: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None) -> bytes:
        self.calls.append((url, params, headers))
        for prefix, content in self.routes.items():
            if url.startswith(prefix):
                return content
        raise AssertionError(f"URL inesperada: {url}")


def _no_cache() -> DiskCache:
    return DiskCache(None, enabled=False)


def _sdmx(payload: bytes = SDMX_DATA) -> ImfSdmxRawExtractor:
    transport = RoutingTransport(
        {
            "https://api.imf.org/": payload,
            "https://sdmxcentral.imf.org/": SDMX_CODELIST,
        }
    )
    return ImfSdmxRawExtractor(transport, _no_cache())


def _datamapper() -> ImfDataMapperRawExtractor:
    base = "https://www.imf.org/external/datamapper/api/v1"
    transport = RoutingTransport({f"{base}/countries": DM_COUNTRIES, f"{base}/PCPIPCH/": DM_VALUES})
    return ImfDataMapperRawExtractor(transport, _no_cache())


# ---------- SDMX ----------
def test_run_sdmx_ratio_of_start_and_latest_levels():
    ex = _sdmx()
    res = run_sdmx(ex, country="pol", start="2021-01", amount=100000, today=date(2021, 6, 15))

    assert res.country_code == "POL"
    assert res.country_name == "POL"
    assert res.start_label == "2021-01"
    assert res.latest_label == "2021-06"
    assert res.cpi_start == 100.0
    assert res.cpi_latest == 125.0
    assert res.inflation_factor == pytest.approx(1.25)
    assert res.result.real == pytest.approx(80000.0)
    assert res.result.loss == pytest.approx(20000.0)
    assert res.result.loss_pct == pytest.approx(20.0)

    _, params, _ = ex.transport.calls[0]
    assert params == {"startPeriod": "2021-M01", "endPeriod": "2021-M06"}


def test_run_sdmx_end_after_today_is_clamped(caplog):
    caplog.set_level("WARNING")
    ex = _sdmx()
    run_sdmx(ex, country="POL", start="2021-01", end="2030-12", amount=1, today=date(2021, 6, 15))

    _, params, _ = ex.transport.calls[0]
    assert params["endPeriod"] == "2021-M06"
    assert "depois do período corrente" in caplog.text


def test_run_sdmx_rejects_inverted_range_before_any_request():
    ex = _sdmx()
    with pytest.raises(RangeError):
        run_sdmx(ex, country="POL", start="2021-05", end="2021-01", amount=1, today=date(2021, 6, 15))
    assert ex.transport.calls == []


@pytest.mark.parametrize("amount", [0, -10])
def test_non_positive_amount_is_rejected(amount):
    with pytest.raises(InvalidValueError):
        run_sdmx(_sdmx(), country="POL", start="2021-01", amount=amount, today=date(2021, 6, 15))


def test_run_sdmx_requires_country():
    with pytest.raises(InputError):
        run_sdmx(_sdmx(), country="  ", start="2021-01", amount=1, today=date(2021, 6, 15))


def test_missing_country_is_part_of_the_error_taxonomy():
    with pytest.raises(RealIncomeError):
        run_datamapper(_datamapper(), country=None, start="2020", amount=1, today=date(2022, 3, 1))


def test_run_sdmx_start_after_all_data():
    ex = _sdmx()
    with pytest.raises(EmptyResultError):
        run_sdmx(ex, country="POL", start="2021-07", end="2021-08", amount=1, today=date(2021, 9, 1))


def test_list_sdmx_countries_dedupes_and_sorts_case_insensitively():
    items = list_sdmx_countries(_sdmx())

    assert [i.code for i in items] == ["AUT", "POL", "CHE"]
    assert items[1].name == "Poland"


# ---------- DataMapper ----------
def test_run_datamapper_chains_available_years():
    ex = _datamapper()
    res = run_datamapper(ex, country="CHE", start="2020-05", amount=100000, today=date(2022, 3, 1))

    assert res.country_name == "Switzerland"
    assert res.start_label == "2020"
    assert res.latest_label == "2021"
    assert [(r.year, r.pct) for r in res.rates] == [(2020, 10.0), (2021, -5.0)]
    assert res.deflator == pytest.approx(1.045)
    assert res.result.real == pytest.approx(100000 / 1.045)

    values_url = ex.transport.calls[-1][0]
    assert values_url.endswith("/PCPIPCH/CHE?periods=2020,2021,2022")


def test_run_datamapper_unknown_country():
    with pytest.raises(EmptyResultError, match="not found in DataMapper countries list"):
        run_datamapper(_datamapper(), country="BRA", start="2020", amount=1, today=date(2022, 3, 1))


def test_run_datamapper_country_listed_without_series():
    with pytest.raises(EmptyResultError, match="No data for PCPIPCH / USA"):
        run_datamapper(_datamapper(), country="USA", start="2020", amount=1, today=date(2022, 3, 1))


def test_list_datamapper_countries_label_falls_back_to_code():
    items = list_datamapper_countries(_datamapper())

    assert [i.code for i in items] == ["CHE", "USA", "XXX"]
    assert items[-1].name == "XXX"
