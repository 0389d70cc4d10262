import math

import pytest

from aqring.classify import (
    NO_DATA_COLOR,
    Parameter,
    as_parameter,
    bands,
    classify,
    color_for,
    label_for,
)


def test_pm25_lower_bound_is_inclusive():
    assert classify(12.0, Parameter.PM2_5).label == "Moderate"
    assert classify(11.999, Parameter.PM2_5).label == "Good"


@pytest.mark.parametrize(
    "parameter, value, expected",
    [
        ("pm2_5", 0.0, "Good"),
        ("pm2_5", 40.0, "Unhealthy"),
        ("pm2_5", 74.9, "Very Unhealthy"),
        ("pm2_5", 75.0, "Hazardous"),
        ("pm2_5", 10_000.0, "Hazardous"),
        ("pm10", 19.99, "Good"),
        ("pm10", 20.0, "Moderate"),
        ("pm10", 100.0, "Very Unhealthy"),
        ("pm10", 150.0, "Hazardous"),
        ("o3", 49.0, "Good"),
        ("o3", 150.0, "Very Unhealthy"),
        ("o3", 200.0, "Hazardous"),
    ],
)
def test_concentration_tables(parameter, value, expected):
    assert classify(value, parameter).label == expected


@pytest.mark.parametrize(
    "category, label, color",
    [
        (1, "Good", "#00E400"),
        (2, "Fair", "#FFFF00"),
        (3, "Moderate", "#FF7E00"),
        (4, "Poor", "#FF0000"),
        (5, "Very Poor", "#8F3F97"),
    ],
)
def test_aqi_categories_map_directly(category, label, color):
    band = classify(category, Parameter.AQI)
    assert band.level == category
    assert band.label == label
    assert band.color == color


def test_aqi_mean_rounds_half_up():
    assert label_for(2.49, "aqi") == "Fair"
    assert label_for(2.5, "aqi") == "Moderate"


def test_unclassifiable_values():
    assert classify(None, Parameter.PM10) is None
    assert classify(math.nan, Parameter.PM10) is None
    assert classify(-1.0, Parameter.PM10) is None
    assert color_for(None, Parameter.O3) == NO_DATA_COLOR


def test_every_table_has_five_ordered_bands():
    for parameter in Parameter:
        table = bands(parameter)
        assert [b.level for b in table] == [1, 2, 3, 4, 5]
        assert math.isinf(table[-1].upper)
        for lower, upper in zip(table, table[1:]):
            assert lower.upper == upper.lower


def test_as_parameter():
    assert as_parameter("PM2_5") is Parameter.PM2_5
    assert as_parameter(Parameter.O3) is Parameter.O3
    with pytest.raises(ValueError, match="Unknown parameter"):
        as_parameter("no2")


@pytest.mark.parametrize(
    "parameter, expected",
    [("pm2_5", "Hazardous"), ("pm10", "Hazardous"), ("o3", "Hazardous"), ("aqi", "Very Poor")],
)
def test_top_band_is_unbounded(parameter, expected):
    assert classify(math.inf, parameter).label == expected
    assert color_for(math.inf, parameter) != NO_DATA_COLOR
