"""Caller-facing operations that wrap engine and service results in WeatherResponse envelopes."""
import logging
from collections import OrderedDict
from datetime import datetime, tzinfo
from typing import Dict, List, Optional

from reconstruction import ReconstructionOrchestrator
from weather_data import ForecastEntry, LocationQuery, Tier, validate_units
from weather_errors import InvalidParameter, LocationNotFound, WeatherProviderError
from weather_lookups import (
    aqi_color,
    aqi_health_impact,
    activity_recommendations,
    aqi_level,
    clothing_recommendations,
    dew_point,
    uv_level,
    uv_recommendation,
    wind_direction_text,
)
from weather_response import WeatherResponse
from weather_service import WeatherService

FORECAST_DAYS = 5
HOURLY_SLOTS = 8  # 24 hours of 3-hour slots

# Used when the UV endpoint is unavailable
ESTIMATED_UV_INDEX = 5.0

MPH_TO_MS = 0.44704


class WeatherReports:
    """Thin façade: every method returns a WeatherResponse and never raises for upstream errors."""

    def __init__(self, service: WeatherService, orchestrator: ReconstructionOrchestrator):
        self.service = service
        self.orchestrator = orchestrator

    @property
    def _tz(self) -> Optional[tzinfo]:
        return self.orchestrator.config.reference_tz

    def reconstruct(self, location: str, target: datetime, units: str = "metric") -> WeatherResponse:
        try:
            snapshot, tier = self.orchestrator.reconstruct(LocationQuery.parse(location), target, units)
        except (InvalidParameter, LocationNotFound) as e:
            return WeatherResponse.failure("historical", str(e))
        data = snapshot.to_dict()
        data["estimated"] = tier in (Tier.ESTIMATED, Tier.SYNTHETIC)
        return WeatherResponse.ok("current" if tier is Tier.LIVE else "historical", data)

    def current(self, location: str, units: str = "metric") -> WeatherResponse:
        try:
            units = validate_units(units)
            snapshot = self.service.get_current(LocationQuery.parse(location), units)
        except (InvalidParameter, WeatherProviderError) as e:
            return WeatherResponse.failure("current", str(e))

        data = snapshot.to_dict()
        data["windDirectionText"] = wind_direction_text(snapshot.wind_direction)
        if snapshot.humidity > 0:
            celsius = snapshot.temperature if units == "metric" else (snapshot.temperature - 32) * 5 / 9
            data["dewPoint"] = dew_point(celsius, snapshot.humidity)
        return WeatherResponse.ok("current", data)

    def recommendations(self, location: str, units: str = "metric") -> WeatherResponse:
        """Activity and clothing suggestions for the current conditions."""
        try:
            units = validate_units(units)
            snapshot = self.service.get_current(LocationQuery.parse(location), units)
        except (InvalidParameter, WeatherProviderError) as e:
            return WeatherResponse.failure("recommendations", str(e))

        if units == "metric":
            celsius, wind_ms = snapshot.temperature, snapshot.wind_speed
        else:
            celsius, wind_ms = (snapshot.temperature - 32) * 5 / 9, snapshot.wind_speed * MPH_TO_MS
        main = snapshot.condition.main
        return WeatherResponse.ok("recommendations", {
            "location": snapshot.location_name,
            "activities": activity_recommendations(main, celsius, wind_ms),
            "clothing": clothing_recommendations(main, celsius, wind_ms, snapshot.humidity),
        })

    def forecast(self, location: str, units: str = "metric") -> WeatherResponse:
        try:
            units = validate_units(units)
            entries = self.service.get_forecast(LocationQuery.parse(location), units)
        except (InvalidParameter, WeatherProviderError) as e:
            return WeatherResponse.failure("forecast", str(e))
        return WeatherResponse.ok("forecast", {"forecasts": daily_summaries(entries, self._tz)})

    def hourly(self, location: str, units: str = "metric") -> WeatherResponse:
        try:
            units = validate_units(units)
            entries = self.service.get_forecast(LocationQuery.parse(location), units)
        except (InvalidParameter, WeatherProviderError) as e:
            return WeatherResponse.failure("hourly", str(e))

        hourly = [
            {
                "datetime": entry.timestamp.isoformat(),
                "temperature": entry.temperature,
                "feelsLike": entry.feels_like,
                "humidity": entry.humidity,
                "windSpeed": entry.wind_speed,
                "description": entry.condition.description,
                "icon": entry.condition.icon,
            }
            for entry in entries[:HOURLY_SLOTS]
        ]
        return WeatherResponse.ok("hourly", {"hourly": hourly})

    def air_quality(self, location: str) -> WeatherResponse:
        try:
            place = self.service.resolve(LocationQuery.parse(location))
            reading = self.service.get_air_quality(place.latitude, place.longitude)
        except (InvalidParameter, WeatherProviderError) as e:
            return WeatherResponse.failure("air_quality", str(e))

        return WeatherResponse.ok("air_quality", {
            "aqi": reading.aqi,
            "aqiLevel": aqi_level(reading.aqi),
            "aqiColor": aqi_color(reading.aqi),
            "healthImpact": aqi_health_impact(reading.aqi),
            "pollutants": dict(reading.components),
        })

    def uv_index(self, location: str) -> WeatherResponse:
        try:
            place = self.service.resolve(LocationQuery.parse(location))
        except (InvalidParameter, WeatherProviderError) as e:
            return WeatherResponse.failure("uv_index", str(e))

        estimated = False
        try:
            value = self.service.get_uv_index(place.latitude, place.longitude)
        except WeatherProviderError as e:
            logging.warning(f"UV index unavailable for {place.name} ({e}); using estimate {ESTIMATED_UV_INDEX}")
            value, estimated = ESTIMATED_UV_INDEX, True

        return WeatherResponse.ok("uv_index", {
            "uvIndex": value,
            "uvLevel": uv_level(value),
            "recommendation": uv_recommendation(value),
            "estimated": estimated,
        })

    def search_cities(self, query: str) -> WeatherResponse:
        if not (query or "").strip():
            return WeatherResponse.failure("city_search", "Search query must not be empty")
        try:
            matches = self.service.geocode(query.strip(), limit=5)
        except WeatherProviderError as e:
            return WeatherResponse.failure("city_search", str(e))

        cities = [
            {"name": m.name, "country": m.country, "state": m.state, "lat": m.latitude, "lon": m.longitude}
            for m in matches
        ]
        return WeatherResponse.ok("city_search", {"cities": cities})


def daily_summaries(entries: List[ForecastEntry], tz: Optional[tzinfo] = None, days: int = FORECAST_DAYS) -> List[Dict[str, object]]:
    """
    Group 3-hourly entries by calendar day (in tz) into at most `days` summaries.

    Each summary spans the day's min/max and takes the condition, humidity and
    wind of the middle entry.
    """
    grouped: "OrderedDict[str, List[ForecastEntry]]" = OrderedDict()
    for entry in entries:
        local = entry.timestamp.astimezone(tz) if tz else entry.timestamp.astimezone()
        grouped.setdefault(local.date().isoformat(), []).append(entry)

    summaries = []
    for day, items in list(grouped.items())[:days]:
        middle = items[len(items) // 2]
        summaries.append({
            "date": day,
            "dayOfWeek": datetime.fromisoformat(day).strftime("%A").upper(),
            "minTemp": min(item.temp_min for item in items),
            "maxTemp": max(item.temp_max for item in items),
            "description": middle.condition.description,
            "main": middle.condition.main,
            "icon": middle.condition.icon,
            "humidity": middle.humidity,
            "windSpeed": middle.wind_speed,
        })
    return summaries
