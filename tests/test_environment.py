from datetime import datetime

import pytest

from models import Sky, Weather
from utils.environment import (
    NightWindow, night_factor, parse_clock, segment_temperature, weather_factor,
)


def _at(h, m, s=0):
    return datetime(2025, 6, 1, h, m, s)


@pytest.mark.parametrize("text, expected", [
    ("19:00", 68400),
    ("06:00", 21600),
    ("6:30:15", 23415),
    ("00:00", 0),
    ("bad", None),
    ("25:00", None),
    ("12:60", None),
    ("7", None),
    ("", None),
])
def test_parse_clock(text, expected):
    assert parse_clock(text) == expected


@pytest.mark.parametrize("moment, dark", [
    (_at(18, 59, 59), False),
    (_at(19, 0, 0), True),
    (_at(23, 59, 59), True),
    (_at(0, 0, 0), True),
    (_at(5, 59, 59), True),
    (_at(6, 0, 0), False),
    (_at(12, 0, 0), False),
])
def test_night_window_across_midnight(moment, dark):
    assert NightWindow.from_strings("19:00", "06:00").contains(moment) is dark


@pytest.mark.parametrize("moment, dark", [
    (_at(0, 59), False),
    (_at(1, 0), True),
    (_at(4, 59, 59), True),
    (_at(5, 0), False),
])
def test_night_window_within_one_day(moment, dark):
    assert NightWindow.from_strings("01:00", "05:00").contains(moment) is dark


@pytest.mark.parametrize("night_from, night_to", [("06:00", "06:00"), ("bad", "06:00"), ("19:00", "")])
def test_degenerate_window_is_never_night(night_from, night_to):
    window = NightWindow.from_strings(night_from, night_to)
    assert not any(window.contains(_at(h, 0)) for h in range(24))


def test_night_factor_by_confidence():
    assert night_factor("High") == 1.0
    assert night_factor("Medium") == pytest.approx(1.05)
    assert night_factor("Low") == pytest.approx(1.10)


@pytest.mark.parametrize("temp, humidity, sky, heat, expected", [
    (15, 60, Sky.PARTLY_CLOUDY, 1.0, 1.0),
    (10, 40, Sky.PARTLY_CLOUDY, 1.0, 1.0),
    (25, 70, Sky.SUNNY, 1.0, 1.08),
    (25, 70, Sky.SUNNY, 2.0, 1.04),
    (10, 50, Sky.OVERCAST, 1.0, 0.99),
    (35, 60, "Partly Cloudy", 1.0, 1.10),
])
def test_weather_factor(temp, humidity, sky, heat, expected):
    assert weather_factor(temp, humidity, sky, heat) == pytest.approx(expected)


def test_weather_factor_survives_zero_acclimation():
    factor = weather_factor(30, 80, Sky.SUNNY, 0.0)
    assert factor > 1.0
    assert factor != float("inf")


def test_segment_temperature_drops_at_night():
    weather = Weather(temp_c=22.0, night_temp_drop_c=8.0)
    assert segment_temperature(weather, False) == 22.0
    assert segment_temperature(weather, True) == 14.0


def test_negative_acclimation_divides_as_given():
    assert weather_factor(25, 70, Sky.SUNNY, -1.0) == pytest.approx(0.92)
