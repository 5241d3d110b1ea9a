from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ImfEndpoints:
    sdmx_base: str = "https://api.imf.org/external/sdmx/2.1"
    sdmx_structure_base: str = "https://sdmxcentral.imf.org/ws/public/sdmxapi/rest"
    datamapper_base: str = "https://www.imf.org/external/datamapper/api/v1"


# Codelist de áreas (ISO3) usada pelo dataset CPI
SDMX_CL_AREA_CPI = "CL_COUNTRY_ISO3"
SDMX_CODELIST_AGENCY = "IMF"


@dataclass(frozen=True)
class SdmxCpiSeriesSpec:
    """
    Spec da série CPI no SDMX do IMF.

    Chave: COUNTRY.INDEX_TYPE.COICOP_1999.TYPE_OF_TRANSFORMATION.FREQUENCY
      ex.: /data/CPI/POL.CPI._T.IX.M?startPeriod=2024-M01
    """
    dataset: str
    index_type: str
    coicop: str
    transformation: str
    frequency: str
    description: str

    def build_series_key(self, country: str) -> str:
        return f"{country}.{self.index_type}.{self.coicop}.{self.transformation}.{self.frequency}"

    def build_cache_key(self, country: str, start_wire: str, end_wire: str) -> str:
        """
        Nome estável do arquivo em cache; inclui tudo que muda o resultado:
          sdmx_cpi_xml_POL_CPI__T_IX_M_2020M01_2024M06.xml
        """
        series_key = self.build_series_key(country).replace(".", "_")
        return f"sdmx_cpi_xml_{series_key}_{start_wire.replace('-', '')}_{end_wire.replace('-', '')}.xml"


@dataclass(frozen=True)
class DataMapperIndicatorSpec:
    key: str
    description: str

    def build_cache_key(self, country: str, start_year: int, end_year: int) -> str:
        return f"dm_{self.key}_{country}_{start_year}_{end_year}.json"


CPI_INDEX_MONTHLY = SdmxCpiSeriesSpec(
    dataset="CPI",
    index_type="CPI",      # família do índice cheio
    coicop="_T",           # todos os itens
    transformation="IX",   # nível do índice
    frequency="M",
    description="CPI index level",
)

PCPIPCH = DataMapperIndicatorSpec(
    key="PCPIPCH",
    description="Annual inflation (%), average consumer prices",
)

SDMX_COUNTRIES_CACHE_KEY = "sdmx_countries_iso3.xml"
DATAMAPPER_COUNTRIES_CACHE_KEY = "dm_countries.json"
