from __future__ import annotations

from typing import List, Union

import pandas as pd

from real_income.domain.datamapper.models import YearlyRate
from real_income.domain.deflator.engine import RealValueResult
from real_income.domain.service import DataMapperRunResult, SdmxRunResult

RunResult = Union[SdmxRunResult, DataMapperRunResult]

RATES_COLUMNS = ["year", "pct", "factor", "cumulative_deflator"]

_RULE = "=" * 69


def fmt_amount(x: float) -> str:
    return f"{x:,.2f}"


def rates_to_df(rates: List[YearlyRate]) -> pd.DataFrame:
    """Uma linha por ano com dado; fator e deflator acumulado em ordem de ano."""
    if not rates:
        return pd.DataFrame(columns=RATES_COLUMNS)

    df = pd.DataFrame([{"year": r.year, "pct": r.pct} for r in rates])
    df = df.sort_values("year").reset_index(drop=True)
    df["year"] = df["year"].astype("int64")
    df["factor"] = 1.0 + df["pct"] / 100.0
    df["cumulative_deflator"] = df["factor"].cumprod()
    return df[RATES_COLUMNS]


def _header(mode: str, res: RunResult) -> List[str]:
    return [
        "================= Real Income (Inflation-Adjusted) =================",
        f"Mode: {mode}",
        f"Country: {res.country_name} ({res.country_code})",
        f"Source: {res.source_label}",
        f"Indicator: {res.indicator}",
        f"Start: {res.start_label}",
        f"Latest: {res.latest_label}",
        _RULE,
    ]


def _amounts(r: RealValueResult) -> List[str]:
    return [
        f"Nominal amount: {fmt_amount(r.nominal)}",
        f"Real value now: {fmt_amount(r.real)}",
        f"Purchasing-power loss: {fmt_amount(r.loss)} ({r.loss_pct:.2f}%)",
    ]


def render_report(res: RunResult) -> str:
    if isinstance(res, SdmxRunResult):
        lines = _header("Sdmx", res) + _amounts(res.result)
        lines += [
            "",
            "CPI index levels used (SDMX):",
            f"  {res.start_label}: {res.cpi_start:.2f}",
            f"  {res.latest_label}: {res.cpi_latest:.2f}",
            f"  Inflation factor: {res.inflation_factor:.4f}",
            "",
            "Formula (SDMX / CPI index level):",
            "  real_value = nominal * (CPI_start / CPI_latest)",
        ]
    else:
        lines = _header("Datamapper", res) + _amounts(res.result)
        lines += ["", f"Annual inflation rates used ({res.indicator}):"]
        lines += [f"  {r.year}: {r.pct:+.2f}%" for r in res.rates]
        lines += [
            "",
            f"Formula (DataMapper / {res.indicator} annual %):",
            f"  deflator = Π_y (1 + {res.indicator}_y / 100) = {res.deflator:.4f}",
            "  real_value = nominal / deflator",
            "",
            "Note: DataMapper mode uses annual inflation rates (not monthly CPI index). "
            "SDMX mode is more precise.",
        ]
    return "\n".join(lines) + "\n"
