"""Shared fixtures."""
from datetime import datetime, timezone

import pytest

from weather_data import Condition, Tier, WeatherSnapshot


@pytest.fixture
def sample_snapshot():
    """A live London snapshot in metric units."""
    return WeatherSnapshot(
        temperature=15.0,
        feels_like=14.2,
        humidity=72,
        pressure=1012,
        wind_speed=4.1,
        wind_direction=230,
        visibility=10000,
        condition=Condition(main="Clouds", description="broken clouds", icon="04d"),
        location_name="London",
        country="GB",
        latitude=51.5085,
        longitude=-0.1257,
        timestamp=datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc),
        units="metric",
        tier=Tier.LIVE,
        sunrise=datetime(2024, 6, 15, 3, 43, tzinfo=timezone.utc),
        sunset=datetime(2024, 6, 15, 20, 20, tzinfo=timezone.utc),
    )
