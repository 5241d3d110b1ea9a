import pytest

from real_income.domain.errors import EmptyResultError, InvalidValueError
from real_income.domain.sdmx.models import Observation
from real_income.domain.series.resolve import collect_yearly_chain, pick_start_and_latest


def _monthly_obs(first_year: int, last_year: int, last_month: int):
    out = []
    for y in range(first_year, last_year + 1):
        for m in range(1, 13):
            if y == last_year and m > last_month:
                break
            out.append(Observation(f"{y:04d}-M{m:02d}", 100.0 + len(out)))
    return out


# ---------- pick_start_and_latest ----------
def test_pick_start_exact_and_latest_is_last_available():
    obs = _monthly_obs(2020, 2021, 6)
    start, latest = pick_start_and_latest(list(reversed(obs)), "2020-M06")
    assert start.period_token == "2020-M06"
    assert latest.period_token == "2021-M06"


def test_pick_start_uses_first_later_period_when_missing():
    obs = [o for o in _monthly_obs(2020, 2021, 6) if o.period_token != "2020-M06"]
    start, latest = pick_start_and_latest(obs, "2020-M06")
    assert start.period_token == "2020-M07"
    assert latest.period_token == "2021-M06"


def test_pick_start_after_all_data_raises():
    with pytest.raises(EmptyResultError, match="at/after start"):
        pick_start_and_latest(_monthly_obs(2020, 2020, 12), "2021-M01")


def test_pick_start_empty_raises():
    with pytest.raises(EmptyResultError):
        pick_start_and_latest([], "2020-M01")


def test_pick_start_rechecks_positivity():
    obs = [Observation("2020-M01", 0.0), Observation("2020-M02", 101.0)]
    with pytest.raises(InvalidValueError):
        pick_start_and_latest(obs, "2020-M01")


# ---------- collect_yearly_chain ----------
def test_chain_compounds_in_year_order():
    chain = collect_yearly_chain({2021: -5.0, 2020: 10.0}, range(2020, 2022))
    assert chain.deflator == pytest.approx(1.10 * 0.95)
    assert chain.deflator == pytest.approx(1.045)
    assert chain.latest_year == 2021
    assert [(r.year, r.pct) for r in chain.rates] == [(2020, 10.0), (2021, -5.0)]


def test_chain_skips_missing_years_without_zero_filling():
    chain = collect_yearly_chain({2018: 2.0, 2020: 3.0, 2030: 50.0}, range(2018, 2023))
    assert chain.deflator == pytest.approx(1.02 * 1.03)
    assert chain.latest_year == 2020
    assert [r.year for r in chain.rates] == [2018, 2020]


def test_chain_without_any_data_in_range_raises():
    with pytest.raises(EmptyResultError):
        collect_yearly_chain({2010: 1.0}, range(2020, 2023))


def _numeric_period(o: Observation):
    year, month = o.period_token.split("-M")
    return int(year), int(month)


def test_custom_sort_key_also_orders_the_start_threshold():
    # meses sem zero à esquerda: ordem de string ("M10" < "M9") diverge da cronológica
    obs = [Observation("2020-M11", 103.0), Observation("2020-M9", 101.0), Observation("2020-M10", 102.0)]

    start, latest = pick_start_and_latest(obs, "2020-M10", sort_key=_numeric_period)

    assert start == Observation("2020-M10", 102.0)
    assert latest == Observation("2020-M11", 103.0)
