"""Recent-past estimator: perturbs a current snapshot to approximate a few days back."""
import logging
from dataclasses import replace
from datetime import datetime, timezone

from seeded_draws import DrawSequence
from weather_data import Tier, WeatherSnapshot
from weather_lookups import condition_for

ESTIMATE_CONDITIONS = ("Clear", "Clouds", "Rain", "Drizzle")

HUMIDITY_MIN = 20
HUMIDITY_MAX = 100


class RecentPastEstimator:
    """
    Approximate conditions 1-5 days ago from a current snapshot.

    The generator is seeded by the target's integer Unix timestamp and is
    consumed in this order:

    1. temperature offset, uniform(-5, 5)
    2. humidity offset, integer(-10, 10)
    3. pressure offset, integer(-10, 10)
    4. wind speed offset, uniform(-2, 2)
    5. condition, choice(Clear, Clouds, Rain, Drizzle)

    Never performs I/O.
    """

    def estimate(self, current: WeatherSnapshot, target: datetime) -> WeatherSnapshot:
        if target.tzinfo is None:
            target = target.replace(tzinfo=timezone.utc)
        draws = DrawSequence(int(target.timestamp()))

        temperature = round(current.temperature + draws.uniform(-5, 5), 1)
        humidity = current.humidity + draws.integer(-10, 10)
        humidity = min(max(humidity, HUMIDITY_MIN), HUMIDITY_MAX)
        pressure = current.pressure + draws.integer(-10, 10)
        wind_speed = round(max(0.0, current.wind_speed + draws.uniform(-2, 2)), 1)
        condition = condition_for(draws.choice(ESTIMATE_CONDITIONS))

        logging.debug(
            f"Estimated {current.location_name} at {target.isoformat()} (seed={draws.seed}): "
            f"{temperature} {condition.main}"
        )
        return replace(
            current,
            temperature=temperature,
            feels_like=round(temperature - 1, 1),
            humidity=humidity,
            pressure=pressure,
            wind_speed=wind_speed,
            condition=condition,
            timestamp=target.astimezone(timezone.utc),
            tier=Tier.ESTIMATED,
            sunrise=None,
            sunset=None,
        )
