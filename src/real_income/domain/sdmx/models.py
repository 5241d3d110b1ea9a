from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ExtractionMode = Literal["codelist", "observations"]

CODELIST: ExtractionMode = "codelist"
OBSERVATIONS: ExtractionMode = "observations"


@dataclass(frozen=True)
class Item:
    """Par código/rótulo (ex.: país ISO3). Códigos repetidos são permitidos."""
    code: str
    name: str


@dataclass(frozen=True)
class Observation:
    """Ponto da série como veio no fio; period_token no encoding da fonte ("2020-M01", "2020")."""
    period_token: str
    value: float
