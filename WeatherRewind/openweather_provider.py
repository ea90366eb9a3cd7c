"""OpenWeather provider implementation (current, time machine, forecast, air, UV, geocoding)."""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from weather_data import (
    AirQualityData,
    Condition,
    ForecastEntry,
    GeoLocation,
    LocationQuery,
    Tier,
    WeatherSnapshot,
    utc_from_timestamp,
)
from weather_provider import (
    LocationNotFound,
    UpstreamRateLimited,
    UpstreamUnauthorized,
    UpstreamUnavailable,
    WeatherProviderBase,
    WeatherProviderError,
)


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using the OpenWeather REST APIs.

    Current conditions, forecast, air pollution and UV use the free 2.5 APIs.
    Historical lookups use One Call 3.0 "timemachine", which answers 401 for
    subscriptions without historical access.
    """

    DEFAULT_BASE_URL = "https://api.openweathermap.org"

    CURRENT_PATH = "/data/2.5/weather"
    FORECAST_PATH = "/data/2.5/forecast"
    AIR_POLLUTION_PATH = "/data/2.5/air_pollution"
    UV_INDEX_PATH = "/data/2.5/uvi"
    TIMEMACHINE_PATH = "/data/3.0/onecall/timemachine"
    GEOCODING_PATH = "/geo/1.0/direct"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        lang: str = "en",
        timeout: int = 10
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key
            base_url: Scheme and host of the API, without a trailing path
            lang: Language code for descriptions (e.g., "en", "de")
            timeout: HTTP request timeout in seconds
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.lang = lang
        self.timeout = timeout

    # Provider interface -------------------------------------------------

    def fetch_current(self, location: LocationQuery, units: str) -> WeatherSnapshot:
        params = self._location_params(location)
        params.update({"units": units, "lang": self.lang})
        data = self._get(self.CURRENT_PATH, params)

        try:
            condition = self._parse_condition(data)
            main_data = data.get("main", {})
            if not main_data:
                raise UpstreamUnavailable("Response missing 'main' block")

            wind_data = data.get("wind") or {}
            sys_data = data.get("sys") or {}
            coord = data.get("coord") or {}
            sunrise = sys_data.get("sunrise")
            sunset = sys_data.get("sunset")

            snapshot = WeatherSnapshot(
                temperature=float(main_data["temp"]),
                feels_like=float(main_data.get("feels_like", main_data["temp"])),
                humidity=int(main_data.get("humidity", 0)),
                pressure=int(main_data.get("pressure", 0)),
                wind_speed=float(wind_data.get("speed", 0.0)),
                wind_direction=int(wind_data.get("deg", 0)),
                visibility=int(data.get("visibility", 0)),
                condition=condition,
                location_name=data.get("name") or location.label(),
                country=sys_data.get("country", ""),
                latitude=float(coord.get("lat", location.latitude or 0.0)),
                longitude=float(coord.get("lon", location.longitude or 0.0)),
                timestamp=utc_from_timestamp(data.get("dt", 0)) if data.get("dt") else datetime.now(timezone.utc),
                units=units,
                tier=Tier.LIVE,
                sunrise=utc_from_timestamp(sunrise) if sunrise else None,
                sunset=utc_from_timestamp(sunset) if sunset else None,
            )
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logging.error(f"Failed to parse current weather response: {e}", exc_info=True)
            raise UpstreamUnavailable(f"Failed to parse response: {str(e)}") from e

        logging.info(f"Current weather for {snapshot.location_name}: {snapshot.temperature} ({units}), {condition.main}")
        return snapshot

    def fetch_historical(self, lat: float, lon: float, when: datetime, units: str) -> WeatherSnapshot:
        params = {
            "lat": lat,
            "lon": lon,
            "dt": int(when.timestamp()),
            "units": units,
            "lang": self.lang,
        }
        data = self._get(self.TIMEMACHINE_PATH, params)

        # 3.0 returns a "data" list, the retired 2.5 endpoint a "current" object
        records = data.get("data")
        record = records[0] if isinstance(records, list) and records else data.get("current")
        if not record:
            raise LocationNotFound(f"No historical data for {lat},{lon} at {when.isoformat()}")

        try:
            condition = self._parse_condition(record)
            sunrise = record.get("sunrise")
            sunset = record.get("sunset")
            return WeatherSnapshot(
                temperature=float(record["temp"]),
                feels_like=float(record.get("feels_like", record["temp"])),
                humidity=int(record.get("humidity", 0)),
                pressure=int(record.get("pressure", 0)),
                wind_speed=float(record.get("wind_speed", 0.0)),
                wind_direction=int(record.get("wind_deg", 0)),
                visibility=int(record.get("visibility", 0)),
                condition=condition,
                location_name="",  # the time machine only echoes coordinates
                country="",
                latitude=float(data.get("lat", lat)),
                longitude=float(data.get("lon", lon)),
                timestamp=utc_from_timestamp(record.get("dt", int(when.timestamp()))),
                units=units,
                tier=Tier.PROVIDER_HISTORICAL,
                sunrise=utc_from_timestamp(sunrise) if sunrise else None,
                sunset=utc_from_timestamp(sunset) if sunset else None,
            )
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logging.error(f"Failed to parse historical response: {e}", exc_info=True)
            raise UpstreamUnavailable(f"Failed to parse response: {str(e)}") from e

    def fetch_forecast(self, location: LocationQuery, units: str) -> List[ForecastEntry]:
        params = self._location_params(location)
        params.update({"units": units, "lang": self.lang})
        data = self._get(self.FORECAST_PATH, params)

        entries = []
        try:
            for item in data.get("list", []):
                main_data = item["main"]
                entries.append(ForecastEntry(
                    timestamp=utc_from_timestamp(item["dt"]),
                    temperature=float(main_data["temp"]),
                    temp_min=float(main_data.get("temp_min", main_data["temp"])),
                    temp_max=float(main_data.get("temp_max", main_data["temp"])),
                    feels_like=float(main_data.get("feels_like", main_data["temp"])),
                    humidity=int(main_data.get("humidity", 0)),
                    wind_speed=float((item.get("wind") or {}).get("speed", 0.0)),
                    condition=self._parse_condition(item),
                ))
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logging.error(f"Failed to parse forecast response: {e}", exc_info=True)
            raise UpstreamUnavailable(f"Failed to parse response: {str(e)}") from e

        logging.debug(f"Forecast returned {len(entries)} entries")
        return entries

    def fetch_air_quality(self, lat: float, lon: float) -> AirQualityData:
        data = self._get(self.AIR_POLLUTION_PATH, {"lat": lat, "lon": lon})
        readings = data.get("list") or []
        if not readings:
            raise UpstreamUnavailable("Response missing 'list' array")
        try:
            reading = readings[0]
            components = {name: float(value) for name, value in (reading.get("components") or {}).items()}
            return AirQualityData(aqi=int(reading["main"]["aqi"]), components=components)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise UpstreamUnavailable(f"Failed to parse response: {str(e)}") from e

    def fetch_uv_index(self, lat: float, lon: float) -> float:
        data = self._get(self.UV_INDEX_PATH, {"lat": lat, "lon": lon})
        try:
            return float(data["value"])
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise UpstreamUnavailable(f"Failed to parse response: {str(e)}") from e

    def geocode(self, query: str, limit: int = 5) -> List[GeoLocation]:
        data = self._get(self.GEOCODING_PATH, {"q": query, "limit": limit}, expected=list)
        try:
            matches = [
                GeoLocation(
                    name=item.get("name", query),
                    country=item.get("country", ""),
                    latitude=float(item["lat"]),
                    longitude=float(item["lon"]),
                    state=item.get("state", ""),
                )
                for item in data
                if isinstance(item, dict) and "lat" in item and "lon" in item
            ]
        except (ValueError, TypeError, AttributeError) as e:
            raise UpstreamUnavailable(f"Failed to parse response: {str(e)}") from e
        logging.debug(f"Geocoding '{query}' returned {len(matches)} match(es)")
        return matches

    # HTTP plumbing --------------------------------------------------------

    def _location_params(self, location: LocationQuery) -> Dict[str, Any]:
        if location.has_coordinates:
            return {"lat": location.latitude, "lon": location.longitude}
        return {"q": location.name.strip()}

    def _get(self, path: str, params: Dict[str, Any], expected: type = dict) -> Any:
        """GET a JSON body of the expected top-level type (dict or list)."""
        url = f"{self.base_url}{path}"
        query = dict(params, appid=self.api_key)
        try:
            logging.info(f"Making OpenWeather API request: {url}")
            logging.debug(f"Request parameters: {params}")

            response = requests.get(url, params=query, timeout=self.timeout)

            logging.debug(f"API response status: {response.status_code}")
            if not response.ok:
                logging.error(f"API request failed with status {response.status_code}")
                self._handle_error_response(response)

            data = response.json()
        except requests.exceptions.Timeout as e:
            logging.error(f"Timed out after {self.timeout}s: {url}")
            raise UpstreamUnavailable(f"Timeout: {str(e)}") from e
        except ValueError as e:
            # requests' JSONDecodeError is also a RequestException; catch it first
            logging.error(f"Failed to decode API response: {e}")
            raise UpstreamUnavailable(f"Failed to parse response: {str(e)}") from e
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise UpstreamUnavailable(f"Network error: {str(e)}") from e

        if not isinstance(data, expected):
            logging.error(f"Unexpected {type(data).__name__} body from {path}, wanted {expected.__name__}")
            raise UpstreamUnavailable(f"Unexpected response body from {path}: {type(data).__name__}")
        return data

    def _parse_condition(self, payload: Dict[str, Any]) -> Condition:
        weather_array = payload.get("weather") if isinstance(payload, dict) else None
        if not weather_array:
            logging.error("Response missing 'weather' array")
            raise UpstreamUnavailable("Response missing 'weather' array")
        weather = weather_array[0]
        return Condition(
            main=weather.get("main", "Unknown"),
            description=weather.get("description", ""),
            icon=weather.get("icon", ""),
        )

    def _handle_error_response(self, response: requests.Response) -> None:
        """Parse an OpenWeather error body and raise the matching typed error."""
        try:
            error_data = response.json()
            message = error_data.get("message", "Unknown error")
        except ValueError:
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            message = response.text[:200]

        error_msg = f"OpenWeather API error {response.status_code}: {message}"
        raise _error_for_status(response.status_code)(error_msg)


def _error_for_status(status_code: int) -> type:
    if status_code == 404:
        return LocationNotFound
    if status_code in (401, 403):
        return UpstreamUnauthorized
    if status_code == 429:
        return UpstreamRateLimited
    return UpstreamUnavailable


__all__ = ["OpenWeatherProvider", "WeatherProviderError"]
