"""Tests for seasonal synthesis."""
from datetime import date, datetime, timezone

import pytest

from seasonal import (
    SEASON_BASE_CELSIUS,
    SEASON_CONDITIONS,
    SUMMER,
    SeasonalSynthesizer,
    WINTER,
    epoch_day,
    season_for,
)
from weather_data import Tier
from weather_errors import InvalidParameter


@pytest.fixture
def synthesizer():
    return SeasonalSynthesizer()


@pytest.mark.parametrize("month, latitude, season", [
    (1, 51.5, "winter"),
    (4, 51.5, "spring"),
    (7, 51.5, "summer"),
    (10, 51.5, "autumn"),
    (12, 51.5, "winter"),
    (1, -33.87, "summer"),
    (7, -33.87, "winter"),
    (12, -33.87, "summer"),
    (4, -33.87, "autumn"),
    (10, -33.87, "spring"),
    (6, 0.0, "summer"),
])
def test_season_for(month, latitude, season):
    assert season_for(month, latitude) == season


def test_epoch_day():
    assert epoch_day(date(1970, 1, 1)) == 0
    assert epoch_day(date(2024, 1, 1)) == 19723


def test_same_day_same_record(synthesizer):
    morning = synthesizer.synthesize("London", 51.5, datetime(2023, 7, 4, 1, 0, tzinfo=timezone.utc), "metric")
    evening = synthesizer.synthesize("London", 51.5, datetime(2023, 7, 4, 23, 0, tzinfo=timezone.utc), "metric")

    assert morning.temperature == evening.temperature
    assert morning.feels_like == evening.feels_like
    assert morning.humidity == evening.humidity
    assert morning.pressure == evening.pressure
    assert morning.wind_speed == evening.wind_speed
    assert morning.wind_direction == evening.wind_direction
    assert morning.condition == evening.condition
    assert morning.timestamp != evening.timestamp


def test_imperial_converts_the_metric_value(synthesizer):
    for day in (date(2023, 1, 15), date(2023, 7, 4), date(2020, 10, 31)):
        metric = synthesizer.synthesize("London", 51.5, day, "metric")
        imperial = synthesizer.synthesize("London", 51.5, day, "imperial")

        assert imperial.temperature == round(metric.temperature * 9 / 5 + 32, 1)
        assert imperial.humidity == metric.humidity
        assert imperial.condition == metric.condition
        assert imperial.units == "imperial"


def test_value_ranges(synthesizer):
    for month in range(1, 13):
        for latitude in (64.1, 51.5, 1.35, -33.87):
            day = date(2022, month, 10)
            snapshot = synthesizer.synthesize("Somewhere", latitude, day, "metric")
            season = season_for(month, latitude)
            center = SEASON_BASE_CELSIUS[season] + (90 - abs(latitude)) / 4

            assert abs(snapshot.temperature - center) <= 7.55
            assert snapshot.temperature - 2.05 <= snapshot.feels_like <= snapshot.temperature + 2.05
            assert 40 <= snapshot.humidity <= 79
            assert 1000 <= snapshot.pressure <= 1039
            assert 0.0 <= snapshot.wind_speed <= 15.0
            assert 0 <= snapshot.wind_direction < 360
            assert snapshot.condition.main in SEASON_CONDITIONS[season]
            assert snapshot.visibility == 10000


def test_southern_january_is_summer(synthesizer):
    """Sydney on 2024-01-15 draws from the summer table."""
    snapshot = synthesizer.synthesize("Sydney", -33.87, date(2024, 1, 15), "metric", longitude=151.21, country="AU")

    center = SEASON_BASE_CELSIUS[SUMMER] + (90 - 33.87) / 4
    assert abs(snapshot.temperature - center) <= 7.55
    assert snapshot.condition.main in SEASON_CONDITIONS[SUMMER]
    assert snapshot.longitude == 151.21
    assert snapshot.country == "AU"


def test_northern_january_is_winter(synthesizer):
    snapshot = synthesizer.synthesize("Oslo", 59.91, date(2024, 1, 15), "metric")
    center = SEASON_BASE_CELSIUS[WINTER] + (90 - 59.91) / 4
    assert abs(snapshot.temperature - center) <= 7.55


def test_snapshot_metadata(synthesizer):
    snapshot = synthesizer.synthesize("London", 51.5, date(2023, 7, 4), "metric", longitude=-0.12)

    assert snapshot.tier is Tier.SYNTHETIC
    assert snapshot.location_name == "London"
    assert snapshot.timestamp == datetime(2023, 7, 4, 12, 0, tzinfo=timezone.utc)
    assert snapshot.sunrise is None


def test_rejects_unknown_units(synthesizer):
    with pytest.raises(InvalidParameter):
        synthesizer.synthesize("London", 51.5, date(2023, 7, 4), "kelvin")
