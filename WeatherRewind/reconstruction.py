"""Reconstruction orchestrator: picks a tier for (location, instant) and degrades on failure."""
import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import dataclass, replace
from datetime import datetime, tzinfo
from typing import Callable, Optional, Tuple, TypeVar

from recent_past import RecentPastEstimator
from seasonal import SeasonalSynthesizer
from tier_selection import ESTIMATE_WINDOW_DAYS, days_difference, local_now, select_tier
from weather_data import GeoLocation, LocationQuery, Tier, WeatherSnapshot, validate_units
from weather_errors import LocationNotFound, UpstreamUnavailable, WeatherProviderError
from weather_service import WeatherService

T = TypeVar("T")


@dataclass
class ReconstructionConfig:
    """Construction-time settings; nothing here is read from globals."""
    historical_enabled: bool = False
    upstream_timeout_seconds: float = 10.0
    max_workers: int = 4
    reference_tz: Optional[tzinfo] = None  # None = system local zone
    estimate_window_days: int = ESTIMATE_WINDOW_DAYS


class ReconstructionOrchestrator:
    """
    Answer "what was the weather at L at T" with the best available tier.

    Only LocationNotFound (and InvalidParameter, raised before any tier runs)
    escape reconstruct(); every other upstream failure degrades to the next
    tier. Upstream calls run on a bounded worker pool with a timeout so one
    slow provider call cannot stall unrelated requests.
    """

    def __init__(
        self,
        service: WeatherService,
        config: Optional[ReconstructionConfig] = None,
        estimator: Optional[RecentPastEstimator] = None,
        synthesizer: Optional[SeasonalSynthesizer] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.service = service
        self.config = config or ReconstructionConfig()
        self.estimator = estimator or RecentPastEstimator()
        self.synthesizer = synthesizer or SeasonalSynthesizer()
        self._clock = clock or (lambda: local_now(self.config.reference_tz))
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="weather-upstream",
        )

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def reconstruct(self, location: LocationQuery, target: datetime, units: str) -> Tuple[WeatherSnapshot, Tier]:
        """
        Reconstruct the weather for a location at a target instant.

        Args:
            location: Place name or coordinates
            target: Instant to describe; naive values are read in the reference zone
            units: "metric" or "imperial"

        Returns:
            (snapshot, tier): snapshot.tier always equals tier

        Raises:
            InvalidParameter: If units are not supported
            LocationNotFound: If the location cannot be resolved by any tier
        """
        units = validate_units(units)
        target = self._aware(target)
        days = days_difference(target, self._clock(), self.config.reference_tz)
        tier = select_tier(days, self.config.historical_enabled, self.config.estimate_window_days)
        logging.info(f"Reconstructing {location.label()} at {target.isoformat()}: daysDifference={days}, tier={tier.value}")

        if tier is Tier.LIVE:
            snapshot = self._live_or_synthetic(location, target, units)
        elif tier is Tier.SYNTHETIC:
            snapshot = self._synthesize(location, target, units)
        else:
            snapshot = self._recent_past(location, target, units, try_provider=tier is Tier.PROVIDER_HISTORICAL)

        logging.info(f"Answered {location.label()} from tier {snapshot.tier.value}")
        return snapshot, snapshot.tier

    # Tiers ----------------------------------------------------------------

    def _live_or_synthetic(self, location: LocationQuery, target: datetime, units: str) -> WeatherSnapshot:
        try:
            return self._fetch_current(location, units)
        except LocationNotFound:
            raise
        except WeatherProviderError as e:
            # Deliberate exception to "today is always live": an unreachable
            # provider still gets an answer, tagged synthetic.
            logging.warning(f"Live fetch failed for {location.label()} ({e}); synthesizing instead")
            return self._synthesize(location, target, units)

    def _recent_past(self, location: LocationQuery, target: datetime, units: str, try_provider: bool) -> WeatherSnapshot:
        try:
            current = self._fetch_current(location, units)
        except LocationNotFound:
            raise
        except WeatherProviderError as e:
            logging.warning(f"No current snapshot for {location.label()} ({e}); synthesizing instead")
            return self._synthesize(location, target, units)

        if try_provider:
            try:
                historical = self._call_upstream(
                    self.service.get_historical, current.latitude, current.longitude, target, units
                )
                return replace(
                    historical,
                    location_name=historical.location_name or current.location_name,
                    country=historical.country or current.country,
                )
            except WeatherProviderError as e:
                logging.warning(f"Historical lookup failed for {location.label()} ({e}); estimating from current")

        return self.estimator.estimate(current, target)

    def _synthesize(self, location: LocationQuery, target: datetime, units: str) -> WeatherSnapshot:
        place = self._place_for(location, units)
        local_target = target.astimezone(self.config.reference_tz) if self.config.reference_tz else target.astimezone()
        return self.synthesizer.synthesize(
            place.name,
            place.latitude,
            local_target,
            units,
            longitude=place.longitude,
            country=place.country,
        )

    def _place_for(self, location: LocationQuery, units: str) -> GeoLocation:
        """Coordinates for synthesis: the query itself, a cached snapshot, then geocoding."""
        if location.has_coordinates:
            return GeoLocation(
                name=location.label(),
                country="",
                latitude=location.latitude,
                longitude=location.longitude,
            )
        cached = self.service.cached_current(location, units)
        if cached is not None:
            return GeoLocation(
                name=cached.location_name,
                country=cached.country,
                latitude=cached.latitude,
                longitude=cached.longitude,
            )
        try:
            return self._call_upstream(self.service.resolve, location)
        except LocationNotFound:
            raise
        except WeatherProviderError as e:
            raise LocationNotFound(f"Could not resolve {location.label()}: {e}") from e

    # Helpers --------------------------------------------------------------

    def _fetch_current(self, location: LocationQuery, units: str) -> WeatherSnapshot:
        """Retries run here; each single provider attempt is one pooled call."""
        return self.service.get_current(location, units, runner=self._call_upstream)

    def _call_upstream(self, func: Callable[..., T], *args) -> T:
        future = self._executor.submit(func, *args)
        try:
            return future.result(timeout=self.config.upstream_timeout_seconds)
        except FutureTimeout as e:
            logging.warning(f"Upstream call {getattr(func, '__name__', func)} timed out after {self.config.upstream_timeout_seconds}s")
            raise UpstreamUnavailable(f"Timed out after {self.config.upstream_timeout_seconds}s") from e

    def _aware(self, target: datetime) -> datetime:
        if target.tzinfo is not None:
            return target
        if self.config.reference_tz is not None:
            return target.replace(tzinfo=self.config.reference_tz)
        return target.astimezone()  # naive means system local time
