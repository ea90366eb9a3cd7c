"""Tests for the recent-past estimator."""
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from recent_past import ESTIMATE_CONDITIONS, RecentPastEstimator
from weather_data import Tier

TARGET = datetime(2024, 6, 12, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def estimator():
    return RecentPastEstimator()


def test_estimate_is_deterministic(estimator, sample_snapshot):
    first = estimator.estimate(sample_snapshot, TARGET)
    second = estimator.estimate(sample_snapshot, TARGET)
    assert first == second


def test_estimate_bounds(estimator, sample_snapshot):
    for hours in range(0, 24 * 5, 7):
        target = TARGET - timedelta(hours=hours)
        estimate = estimator.estimate(sample_snapshot, target)

        assert abs(estimate.temperature - sample_snapshot.temperature) <= 5.05
        assert estimate.feels_like == round(estimate.temperature - 1, 1)
        assert 20 <= estimate.humidity <= 100
        assert abs(estimate.humidity - sample_snapshot.humidity) <= 10
        assert abs(estimate.pressure - sample_snapshot.pressure) <= 10
        assert 0.0 <= estimate.wind_speed <= sample_snapshot.wind_speed + 2.05
        assert estimate.condition.main in ESTIMATE_CONDITIONS


def test_estimate_clamps_humidity(estimator, sample_snapshot):
    humid = replace(sample_snapshot, humidity=98)
    dry = replace(sample_snapshot, humidity=15)
    for hours in range(0, 48, 5):
        target = TARGET - timedelta(hours=hours)
        assert estimator.estimate(humid, target).humidity <= 100
        assert estimator.estimate(dry, target).humidity >= 20


def test_estimate_wind_never_negative(estimator, sample_snapshot):
    calm = replace(sample_snapshot, wind_speed=0.0)
    for hours in range(0, 48, 3):
        assert estimator.estimate(calm, TARGET - timedelta(hours=hours)).wind_speed >= 0.0


def test_estimate_keeps_location_and_tags_tier(estimator, sample_snapshot):
    estimate = estimator.estimate(sample_snapshot, TARGET)

    assert estimate.tier is Tier.ESTIMATED
    assert estimate.location_name == "London"
    assert estimate.country == "GB"
    assert estimate.latitude == sample_snapshot.latitude
    assert estimate.visibility == sample_snapshot.visibility
    assert estimate.wind_direction == sample_snapshot.wind_direction
    assert estimate.units == "metric"
    assert estimate.timestamp == TARGET
    assert estimate.sunrise is None
    assert sample_snapshot.tier is Tier.LIVE


def test_estimate_seed_is_the_instant_not_the_zone(estimator, sample_snapshot):
    same_instant = TARGET.astimezone(timezone(timedelta(hours=9)))
    assert estimator.estimate(sample_snapshot, same_instant) == estimator.estimate(sample_snapshot, TARGET)


def test_naive_target_is_utc(estimator, sample_snapshot):
    naive = TARGET.replace(tzinfo=None)
    assert estimator.estimate(sample_snapshot, naive) == estimator.estimate(sample_snapshot, TARGET)
