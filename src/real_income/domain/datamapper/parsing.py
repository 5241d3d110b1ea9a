from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping

from real_income.domain.errors import EmptyResultError, ExtractionError
from real_income.domain.sdmx.models import Item

logger = logging.getLogger(__name__)


def _load_json(payload: bytes, what: str) -> Any:
    try:
        return json.loads(payload)
    except ValueError as exc:
        raise ExtractionError(f"Invalid JSON from DataMapper {what}") from exc


def parse_countries_json(payload: bytes) -> List[Item]:
    """
    { "countries": { "CHE": {"label": "Switzerland", ...}, ... } }

    Sem "label" (ou label não-string), o rótulo vira o próprio código.
    """
    doc = _load_json(payload, "countries")
    obj = doc.get("countries", doc) if isinstance(doc, dict) else doc
    if not isinstance(obj, dict):
        raise ExtractionError("Unexpected DataMapper countries JSON shape")

    out: List[Item] = []
    for code, info in obj.items():
        label = info.get("label") if isinstance(info, dict) else None
        name = label if isinstance(label, str) and label.strip() else code
        out.append(Item(code=code, name=name))

    if not out:
        raise EmptyResultError("Parsed 0 countries from DataMapper")
    return out


def _as_number(v: Any):
    # bool é int em Python; não é um valor numérico válido aqui
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    return float(v)


def parse_indicator_series(payload: bytes, indicator: str, country: str) -> Dict[int, float]:
    """
    { "values": { INDICATOR: { CODE: { "YYYY": number, ... } } } } -> {ano: pct}

    Anos com valor não numérico (null, string) são pulados, não zerados.
    """
    doc = _load_json(payload, "values")
    if not isinstance(doc, dict) or "values" not in doc:
        raise ExtractionError("Unexpected DataMapper response (missing 'values')")

    values = doc["values"]
    by_indicator = values.get(indicator) if isinstance(values, Mapping) else None
    series = by_indicator.get(country) if isinstance(by_indicator, Mapping) else None
    if not isinstance(series, Mapping):
        raise EmptyResultError(f"No data for {indicator} / {country}")

    out: Dict[int, float] = {}
    for key, raw in series.items():
        try:
            year = int(key)
        except (TypeError, ValueError):
            logger.debug("Chave de ano inválida ignorada: %r", key)
            continue
        num = _as_number(raw)
        if num is None:
            logger.debug("Valor não numérico ignorado: %s=%r", key, raw)
            continue
        out[year] = num
    return out
