import json

import pytest

from real_income.domain.datamapper.parsing import parse_countries_json, parse_indicator_series
from real_income.domain.errors import EmptyResultError, ExtractionError
from real_income.domain.sdmx.models import Item


def test_countries_label_falls_back_to_code():
    payload = json.dumps(
        {"countries": {"CHE": {"label": "Switzerland"}, "XYZ": {}, "DEU": {"label": None}}}
    ).encode()
    assert parse_countries_json(payload) == [
        Item("CHE", "Switzerland"),
        Item("XYZ", "XYZ"),
        Item("DEU", "DEU"),
    ]


def test_countries_invalid_json_raises():
    with pytest.raises(ExtractionError):
        parse_countries_json(b"<html>403</html>")


def test_countries_empty_is_reported():
    with pytest.raises(EmptyResultError):
        parse_countries_json(b'{"countries": {}}')


def test_indicator_series_skips_non_numeric_years():
    payload = json.dumps(
        {"values": {"PCPIPCH": {"CHE": {"2020": -0.7, "2021": 0.6, "2022": None, "2023": "n/a", "x": 1}}}}
    ).encode()
    assert parse_indicator_series(payload, "PCPIPCH", "CHE") == {2020: -0.7, 2021: 0.6}


def test_indicator_series_missing_values_key_is_extraction_error():
    with pytest.raises(ExtractionError, match="missing 'values'"):
        parse_indicator_series(b'{"foo": 1}', "PCPIPCH", "CHE")


def test_indicator_series_missing_country_is_empty_result():
    payload = json.dumps({"values": {"PCPIPCH": {"USA": {"2020": 1.2}}}}).encode()
    with pytest.raises(EmptyResultError, match="PCPIPCH / CHE"):
        parse_indicator_series(payload, "PCPIPCH", "CHE")
