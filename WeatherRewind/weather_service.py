"""Weather service with caching and retries in front of a provider."""
import logging
import time
from datetime import datetime
from typing import Any, Callable, List, Optional

from weather_cache import DEFAULT_TTL_SECONDS, WeatherCache
from weather_data import (
    AirQualityData,
    ForecastEntry,
    GeoLocation,
    LocationQuery,
    Tier,
    WeatherSnapshot,
)
from weather_errors import NON_RETRYABLE_ERRORS, LocationNotFound, WeatherProviderError
from weather_provider import WeatherProviderBase


class WeatherService:
    """
    Service that wraps a weather provider with caching and retries.

    Prevents hammering the API by caching current conditions per location and
    only fetching new data when the cached entry is stale (default: 10 minutes).
    A stale entry is never served when the provider fails.
    """

    def __init__(
        self,
        provider: WeatherProviderBase,
        cache: Optional[WeatherCache] = None,
        cache_ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_retries: int = 3,
        retry_delay_seconds: float = 1.0
    ):
        """
        Initialize weather service.

        Args:
            provider: Weather provider to use
            cache: Shared cache; a new one with cache_ttl_seconds is created if omitted
            cache_ttl_seconds: How long to cache results before fetching new data
            max_retries: Maximum number of attempts on transient errors
            retry_delay_seconds: Base delay between attempts (grows linearly)
        """
        self.provider = provider
        self.cache = cache if cache is not None else WeatherCache(ttl_seconds=cache_ttl_seconds)
        self.max_retries = max(1, max_retries)
        self.retry_delay_seconds = retry_delay_seconds

    @staticmethod
    def cache_key(location: LocationQuery, units: str) -> str:
        return f"{location.cache_key()}|{units}"

    def cached_current(self, location: LocationQuery, units: str) -> Optional[WeatherSnapshot]:
        """Return the fresh cached snapshot for a location, if any, without I/O."""
        return self.cache.get(self.cache_key(location, units))

    def get_current(
        self,
        location: LocationQuery,
        units: str,
        runner: Optional[Callable[..., Any]] = None
    ) -> WeatherSnapshot:
        """
        Get current conditions, using the cache if still fresh.

        Args:
            location: Place name or coordinates
            units: "metric" or "imperial"
            runner: Executes one provider attempt as runner(func, *args); the
                retry loop and its sleeps stay on the calling thread

        Returns:
            WeatherSnapshot: Current weather tagged live (may be cached)

        Raises:
            LocationNotFound: If the provider cannot resolve the location
            WeatherProviderError: If all retries fail
        """
        key = self.cache_key(location, units)
        cached = self.cache.get(key)
        if cached is not None:
            logging.debug(f"Using cached weather data for '{key}'")
            return cached

        logging.info(f"Fetching weather data for '{key}' from provider...")
        last_error = None
        for attempt in range(self.max_retries):
            try:
                logging.debug(f"Weather fetch attempt {attempt + 1}/{self.max_retries}")
                if runner is None:
                    snapshot = self.provider.fetch_current(location, units)
                else:
                    snapshot = runner(self.provider.fetch_current, location, units)
                snapshot = snapshot.with_tier(Tier.LIVE)
                self.cache.put(key, snapshot)
                return snapshot
            except NON_RETRYABLE_ERRORS as e:
                logging.error(f"Non-retryable error for '{key}': {e}")
                raise
            except WeatherProviderError as e:
                last_error = e
                logging.warning(f"Weather fetch attempt {attempt + 1} failed: {e}")
                if attempt < self.max_retries - 1:
                    retry_delay = self.retry_delay_seconds * (attempt + 1)
                    logging.info(f"Retrying in {retry_delay}s...")
                    time.sleep(retry_delay)

        logging.error(f"Failed to fetch weather after {self.max_retries} attempts")
        raise type(last_error)(f"Failed to fetch weather after {self.max_retries} attempts: {last_error}") from last_error

    def get_historical(self, lat: float, lon: float, when: datetime, units: str) -> WeatherSnapshot:
        """Single time-machine attempt; failures are the caller's to degrade."""
        snapshot = self.provider.fetch_historical(lat, lon, when, units)
        return snapshot.with_tier(Tier.PROVIDER_HISTORICAL)

    def geocode(self, query: str, limit: int = 5) -> List[GeoLocation]:
        return self.provider.geocode(query, limit=limit)

    def resolve(self, location: LocationQuery) -> GeoLocation:
        """
        Resolve a query to one place with coordinates.

        Raises:
            LocationNotFound: If geocoding yields no match
        """
        if location.has_coordinates:
            return GeoLocation(
                name=location.label(),
                country="",
                latitude=location.latitude,
                longitude=location.longitude,
            )
        matches = self.geocode(location.name.strip(), limit=1)
        if not matches:
            raise LocationNotFound(f"Could not find coordinates for: {location.name}")
        return matches[0]

    def get_forecast(self, location: LocationQuery, units: str) -> List[ForecastEntry]:
        return self.provider.fetch_forecast(location, units)

    def get_air_quality(self, lat: float, lon: float) -> AirQualityData:
        return self.provider.fetch_air_quality(lat, lon)

    def get_uv_index(self, lat: float, lon: float) -> float:
        return self.provider.fetch_uv_index(lat, lon)
