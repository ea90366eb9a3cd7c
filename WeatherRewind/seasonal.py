"""Seasonal synthesis: a fully synthetic record from calendar date and latitude."""
import logging
from datetime import date, datetime, time, timezone
from typing import Optional, Union

from seeded_draws import DrawSequence
from weather_data import Tier, WeatherSnapshot, validate_units
from weather_lookups import condition_for

WINTER, SPRING, SUMMER, AUTUMN = "winter", "spring", "summer", "autumn"

# Northern hemisphere; southern latitudes shift by six months.
MONTH_SEASONS = {
    12: WINTER, 1: WINTER, 2: WINTER,
    3: SPRING, 4: SPRING, 5: SPRING,
    6: SUMMER, 7: SUMMER, 8: SUMMER,
    9: AUTUMN, 10: AUTUMN, 11: AUTUMN,
}

SEASON_BASE_CELSIUS = {
    WINTER: -5.0,
    SPRING: 5.0,
    SUMMER: 15.0,
    AUTUMN: 7.0,
}

# Repeated entries are weights: summer is twice as likely to be clear.
SEASON_CONDITIONS = {
    WINTER: ("Clouds", "Rain", "Snow", "Clear", "Drizzle"),
    SPRING: ("Clear", "Clouds", "Rain", "Drizzle"),
    SUMMER: ("Clear", "Clear", "Clouds", "Rain"),
    AUTUMN: ("Clouds", "Rain", "Clear", "Drizzle"),
}

SYNTHETIC_VISIBILITY = 10000

_EPOCH = date(1970, 1, 1)


def season_for(month: int, latitude: float) -> str:
    """Season of a calendar month at the given latitude."""
    if latitude < 0:
        month = (month + 5) % 12 + 1
    return MONTH_SEASONS[month]


def epoch_day(day: date) -> int:
    return (day - _EPOCH).days


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


class SeasonalSynthesizer:
    """
    Build a plausible record for any date without touching the network.

    The generator is seeded by the epoch-day of the target date, so every
    hour of one calendar day synthesizes the same record. Draw order:

    1. daily variation, uniform(-7.5, 7.5)
    2. feels-like offset, uniform(0, 4)
    3. humidity, 40 + below(40)
    4. pressure, 1000 + below(40)
    5. wind speed, uniform(0, 15)
    6. condition, choice(season set)
    7. wind direction, below(360)
    """

    def synthesize(
        self,
        location_name: str,
        latitude: float,
        target: Union[date, datetime],
        units: str,
        longitude: Optional[float] = None,
        country: str = "",
    ) -> WeatherSnapshot:
        units = validate_units(units)
        day = target.date() if isinstance(target, datetime) else target
        draws = DrawSequence(epoch_day(day))

        season = season_for(day.month, latitude)
        latitude_adjustment = (90 - abs(latitude)) / 4
        celsius = round(SEASON_BASE_CELSIUS[season] + latitude_adjustment + draws.uniform(-7.5, 7.5), 1)
        # Conversion happens on the finished Celsius value, never on the inputs
        temperature = celsius if units == "metric" else round(celsius_to_fahrenheit(celsius), 1)
        feels_like = round(temperature - 2 + draws.uniform(0, 4), 1)

        humidity = 40 + draws.below(40)
        pressure = 1000 + draws.below(40)
        wind_speed = round(draws.uniform(0, 15), 1)
        condition = condition_for(draws.choice(SEASON_CONDITIONS[season]))
        wind_direction = draws.below(360)

        logging.debug(
            f"Synthesized {location_name} on {day.isoformat()} ({season}, lat={latitude}): "
            f"{temperature} {units}, {condition.main}"
        )
        return WeatherSnapshot(
            temperature=temperature,
            feels_like=feels_like,
            humidity=humidity,
            pressure=pressure,
            wind_speed=wind_speed,
            wind_direction=wind_direction,
            visibility=SYNTHETIC_VISIBILITY,
            condition=condition,
            location_name=location_name,
            country=country,
            latitude=latitude,
            longitude=longitude if longitude is not None else 0.0,
            timestamp=_as_utc(target),
            units=units,
            tier=Tier.SYNTHETIC,
        )


def _as_utc(target: Union[date, datetime]) -> datetime:
    if not isinstance(target, datetime):
        return datetime.combine(target, time(12, 0), tzinfo=timezone.utc)
    if target.tzinfo is None:
        return target.replace(tzinfo=timezone.utc)
    return target.astimezone(timezone.utc)
