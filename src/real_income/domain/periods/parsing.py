from __future__ import annotations

import logging
import re
from datetime import date, datetime, timezone
from typing import Optional, Tuple, TypeVar

from real_income.domain.errors import ParseError, RangeError
from real_income.domain.periods.models import MonthlyPeriod, YearlyPeriod

logger = logging.getLogger(__name__)

_RE_YYYY_MM = re.compile(r"^(\d{4})-(\d{2})$")
_RE_WIRE_MONTHLY = re.compile(r"^(\d{4})-M(\d{2})$")
_RE_YEAR = re.compile(r"^[+]?[0-9]+$")

MIN_YEAR = 1800
MAX_YEAR = 3000

P = TypeVar("P", MonthlyPeriod, YearlyPeriod)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


# ----------------------------
# Entrada humana
# ----------------------------

def parse_monthly(text: str) -> MonthlyPeriod:
    """
    Aceita exatamente "YYYY-MM" (espaços nas pontas são ignorados).
    Mês deve estar em [1,12] e (ano, mês) precisa ser uma data real.
    """
    t = (text or "").strip()
    m = _RE_YYYY_MM.match(t)
    if not m:
        raise ParseError(f"Expected YYYY-MM, got {text!r}", ParseError.BAD_FORMAT)

    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        raise ParseError(f"Month out of range in {text!r}", ParseError.BAD_FORMAT)
    try:
        date(year, month, 1)
    except ValueError as exc:
        raise ParseError(f"Invalid date {text!r}", ParseError.BAD_FORMAT) from exc

    return MonthlyPeriod(year=year, month=month)


def parse_year_loose(text: str) -> int:
    """
    "YYYY" ou "YYYY-<qualquer coisa>" (o sufixo, ex. mês, é ignorado).
    O ano precisa estar em [1800, 3000].
    """
    t = (text or "").strip()
    year_part = t.split("-", 1)[0]
    if not _RE_YEAR.match(year_part):
        raise ParseError(f"Expected YYYY or YYYY-MM, got {text!r}", ParseError.BAD_FORMAT)

    year = int(year_part)
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ParseError(
            f"Year {year} out of reasonable range [{MIN_YEAR}, {MAX_YEAR}]",
            ParseError.OUT_OF_RANGE,
        )
    return year


# ----------------------------
# Formato de fio (SDMX): "YYYY-Mmm"
# ----------------------------

def to_wire_period(period: MonthlyPeriod) -> str:
    """MonthlyPeriod(2024, 1) -> "2024-M01" (parâmetro startPeriod/endPeriod do SDMX)."""
    return f"{period.year:04d}-M{period.month:02d}"


def from_wire_period(token: str) -> MonthlyPeriod:
    m = _RE_WIRE_MONTHLY.match(token or "")
    if not m:
        raise ParseError(f"Not a monthly wire period: {token!r}", ParseError.BAD_FORMAT)
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        raise ParseError(f"Month out of range in {token!r}", ParseError.BAD_FORMAT)
    return MonthlyPeriod(year=year, month=month)


def wire_period_to_label(token: str) -> str:
    """"2025-M11" -> "2025-11"; qualquer outro token volta como veio."""
    m = _RE_WIRE_MONTHLY.match(token or "")
    if not m:
        return token
    return f"{m.group(1)}-{m.group(2)}"


# ----------------------------
# Intervalos
# ----------------------------

def current_monthly(today: date) -> MonthlyPeriod:
    return MonthlyPeriod(year=today.year, month=today.month)


def clamp_end_to_today(period: P, today: Optional[date] = None) -> P:
    """Não dá para pedir dado futuro: fim depois de hoje vira o período corrente."""
    today = today or utc_today()
    if isinstance(period, MonthlyPeriod):
        current = current_monthly(today)
    else:
        current = YearlyPeriod(year=today.year)

    if period > current:
        logger.warning("Fim %s depois do período corrente; usando %s", period, current)
        return current
    return period


def resolve_monthly_range(
    start_text: str,
    end_text: Optional[str] = None,
    today: Optional[date] = None,
) -> Tuple[MonthlyPeriod, MonthlyPeriod]:
    today = today or utc_today()
    start = parse_monthly(start_text)

    end_text = (end_text or "").strip()
    end = parse_monthly(end_text) if end_text else current_monthly(today)
    end = clamp_end_to_today(end, today)

    if end < start:
        raise RangeError(f"end ({end}) must be >= start ({start})")
    return start, end


def resolve_yearly_range(
    start_text: str,
    end_text: Optional[str] = None,
    today: Optional[date] = None,
) -> Tuple[YearlyPeriod, YearlyPeriod]:
    today = today or utc_today()
    start = YearlyPeriod(parse_year_loose(start_text))

    end_text = (end_text or "").strip()
    end = YearlyPeriod(parse_year_loose(end_text)) if end_text else YearlyPeriod(today.year)
    end = clamp_end_to_today(end, today)

    if end < start:
        raise RangeError(f"end year ({end}) must be >= start year ({start})")
    return start, end
