"""Weather provider abstraction - allows swapping different weather APIs."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from weather_data import AirQualityData, ForecastEntry, GeoLocation, LocationQuery, WeatherSnapshot
from weather_errors import (
    InvalidParameter,
    LocationNotFound,
    UpstreamRateLimited,
    UpstreamUnauthorized,
    UpstreamUnavailable,
    WeatherProviderError,
)


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers."""

    @abstractmethod
    def fetch_current(self, location: LocationQuery, units: str) -> WeatherSnapshot:
        """
        Fetch current conditions for a location.

        Returns:
            WeatherSnapshot: Current weather, tagged live

        Raises:
            LocationNotFound: If the location cannot be resolved
            UpstreamRateLimited: If the provider quota is exhausted
            UpstreamUnavailable: On network, timeout or server errors
        """
        pass

    @abstractmethod
    def fetch_historical(self, lat: float, lon: float, when: datetime, units: str) -> WeatherSnapshot:
        """
        Fetch recorded conditions at a past instant (time-machine endpoint).

        Raises:
            UpstreamUnauthorized: If the subscription lacks historical access
            LocationNotFound: If the provider has no data for the coordinates
            UpstreamUnavailable: On network, timeout or server errors
        """
        pass

    @abstractmethod
    def fetch_forecast(self, location: LocationQuery, units: str) -> List[ForecastEntry]:
        """Fetch the short-range 3-hourly forecast."""
        pass

    @abstractmethod
    def fetch_air_quality(self, lat: float, lon: float) -> AirQualityData:
        pass

    @abstractmethod
    def fetch_uv_index(self, lat: float, lon: float) -> float:
        pass

    @abstractmethod
    def geocode(self, query: str, limit: int = 5) -> List[GeoLocation]:
        """Resolve a place name to candidate coordinates, best match first."""
        pass


__all__ = [
    "WeatherProviderBase",
    "WeatherProviderError",
    "LocationNotFound",
    "UpstreamUnavailable",
    "UpstreamRateLimited",
    "UpstreamUnauthorized",
    "InvalidParameter",
]
