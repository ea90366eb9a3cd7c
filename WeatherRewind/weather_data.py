"""Weather domain model - pure data structures independent of any API."""
from dataclasses import dataclass, field, asdict, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional

from weather_errors import InvalidParameter


VALID_UNITS = ("metric", "imperial")


class Tier(str, Enum):
    """Provenance of a snapshot, from most to least authoritative."""
    LIVE = "live"
    PROVIDER_HISTORICAL = "provider-historical"
    ESTIMATED = "estimated"
    SYNTHETIC = "synthetic"


def validate_units(units: str) -> str:
    """Return the normalized unit system or raise InvalidParameter."""
    normalized = (units or "").strip().lower()
    if normalized not in VALID_UNITS:
        raise InvalidParameter(f"Unsupported units '{units}' (expected one of {', '.join(VALID_UNITS)})")
    return normalized


@dataclass(frozen=True)
class LocationQuery:
    """A place name or a latitude/longitude pair, as typed by the caller."""
    name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def __post_init__(self):
        if self.has_coordinates:
            if not -90.0 <= self.latitude <= 90.0:
                raise InvalidParameter(f"Latitude out of range: {self.latitude}")
            if not -180.0 <= self.longitude <= 180.0:
                raise InvalidParameter(f"Longitude out of range: {self.longitude}")
        elif (self.latitude is None) != (self.longitude is None):
            raise InvalidParameter("Latitude and longitude must be given together")
        elif not (self.name and self.name.strip()):
            raise InvalidParameter("Location must be a place name or coordinates")

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def parse(cls, text: str) -> "LocationQuery":
        """
        Build a query from free text.

        "51.5,-0.12" is read as coordinates, anything else as a place name.

        Raises:
            InvalidParameter: If the text is blank or the coordinates are out of range
        """
        text = (text or "").strip()
        if not text:
            raise InvalidParameter("Location must not be empty")
        parts = [p.strip() for p in text.split(",")]
        if len(parts) == 2:
            try:
                lat, lon = float(parts[0]), float(parts[1])
            except ValueError:
                return cls(name=text)  # "Paris, FR" style names
            return cls(latitude=lat, longitude=lon)
        return cls(name=text)

    def cache_key(self) -> str:
        if self.has_coordinates:
            return f"{self.latitude:.3f},{self.longitude:.3f}"
        return self.name.strip().lower()

    def label(self) -> str:
        if self.name:
            return self.name.strip()
        return f"{self.latitude:.4f},{self.longitude:.4f}"


@dataclass(frozen=True)
class Condition:
    main: str  # e.g., "Clouds", "Rain", "Clear"
    description: str  # e.g., "broken clouds", "light rain"
    icon: str  # provider icon code, e.g., "03d"


@dataclass(frozen=True)
class WeatherSnapshot:
    """One fully-populated observation, estimate or synthesis. Never mutated."""
    temperature: float
    feels_like: float
    humidity: int  # percent
    pressure: int  # hPa
    wind_speed: float
    wind_direction: int  # degrees
    visibility: int  # metres
    condition: Condition
    location_name: str
    country: str
    latitude: float
    longitude: float
    timestamp: datetime  # UTC instant the snapshot describes
    units: str
    tier: Tier

    # Optional fields
    sunrise: Optional[datetime] = None
    sunset: Optional[datetime] = None

    def with_tier(self, tier: Tier) -> "WeatherSnapshot":
        return replace(self, tier=tier)

    def to_dict(self) -> Dict[str, object]:
        """Flatten into JSON-friendly primitives."""
        data = asdict(self)
        data["tier"] = self.tier.value
        data["timestamp"] = self.timestamp.isoformat()
        data["sunrise"] = self.sunrise.isoformat() if self.sunrise else None
        data["sunset"] = self.sunset.isoformat() if self.sunset else None
        return data


@dataclass(frozen=True)
class GeoLocation:
    """One geocoding match."""
    name: str
    country: str
    latitude: float
    longitude: float
    state: str = ""


@dataclass(frozen=True)
class ForecastEntry:
    """One 3-hourly forecast slot."""
    timestamp: datetime
    temperature: float
    temp_min: float
    temp_max: float
    feels_like: float
    humidity: int
    wind_speed: float
    condition: Condition


@dataclass(frozen=True)
class AirQualityData:
    aqi: int  # 1 (good) .. 5 (very poor)
    components: Dict[str, float] = field(default_factory=dict)  # µg/m3 by pollutant


def utc_from_timestamp(value: int) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)
