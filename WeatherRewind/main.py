"""Command-line entry point for the weather reconstruction engine."""
import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from openweather_provider import OpenWeatherProvider
from reconstruction import ReconstructionConfig, ReconstructionOrchestrator
from tier_selection import local_now
from weather_data import VALID_UNITS
from weather_reports import WeatherReports
from weather_response import WeatherResponse
from weather_service import WeatherService

COMMANDS = ("reconstruct", "current", "forecast", "hourly", "air-quality", "uv", "recommendations", "search")


@dataclass
class AppConfig:
    api_key: str
    base_url: str
    lang: str
    historical_enabled: bool
    reference_tz: Optional[tzinfo]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("Weather at any place and time")
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("location", help='Place name or "lat,lon" (search: free-text query)')
    parser.add_argument("--at", help="Target instant, ISO 8601 (reconstruct only)")
    parser.add_argument("--days-ago", type=int, help="Target this many days before now (reconstruct only)")
    parser.add_argument("--units", choices=VALID_UNITS, default="metric")
    parser.add_argument("--cache-ttl", type=int, default=600)
    parser.add_argument("--max-retries", type=int, default=3)
    parser.add_argument("--retry-delay", type=float, default=1.0)
    parser.add_argument("--timeout", type=int, default=10, help="HTTP timeout in seconds")
    parser.add_argument("--workers", type=int, default=4, help="Upstream worker pool size")
    parser.add_argument("--historical", dest="historical", action="store_true", default=None,
                        help="Try the provider time machine for the recent past")
    parser.add_argument("--no-historical", dest="historical", action="store_false")
    parser.add_argument("--log-file")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def load_config() -> AppConfig:
    load_dotenv()
    api_key = os.getenv("WEATHER_API_KEY")
    if not api_key:
        raise SystemExit("Missing WEATHER_API_KEY in environment")

    tz_name = os.getenv("WEATHER_TZ")
    reference_tz = None
    if tz_name:
        try:
            reference_tz = ZoneInfo(tz_name)
        except ZoneInfoNotFoundError as exc:
            raise SystemExit(f"Invalid WEATHER_TZ: {tz_name}") from exc

    config = AppConfig(
        api_key=api_key,
        base_url=os.getenv("WEATHER_BASE_URL", OpenWeatherProvider.DEFAULT_BASE_URL),
        lang=os.getenv("WEATHER_LANG", "en"),
        historical_enabled=_env_flag("WEATHER_HISTORICAL_ENABLED"),
        reference_tz=reference_tz,
    )
    logging.info(f"Configuration loaded: base_url={config.base_url} historical={config.historical_enabled} tz={tz_name or 'local'}")
    return config


def build_reports(config: AppConfig, args: argparse.Namespace) -> WeatherReports:
    provider = OpenWeatherProvider(
        api_key=config.api_key,
        base_url=config.base_url,
        lang=config.lang,
        timeout=args.timeout,
    )
    service = WeatherService(
        provider=provider,
        cache_ttl_seconds=args.cache_ttl,
        max_retries=args.max_retries,
        retry_delay_seconds=args.retry_delay,
    )
    historical = config.historical_enabled if args.historical is None else args.historical
    orchestrator = ReconstructionOrchestrator(
        service,
        ReconstructionConfig(
            historical_enabled=historical,
            upstream_timeout_seconds=args.timeout + 1,
            max_workers=args.workers,
            reference_tz=config.reference_tz,
        ),
    )
    logging.info(f"Weather engine ready (cache ttl={args.cache_ttl}s, historical={historical})")
    return WeatherReports(service, orchestrator)


def resolve_target(args: argparse.Namespace, reference_tz: Optional[tzinfo]) -> datetime:
    if args.at:
        try:
            return datetime.fromisoformat(args.at)
        except ValueError as exc:
            raise SystemExit(f"Invalid --at value: {exc}") from exc
    return local_now(reference_tz) - timedelta(days=args.days_ago or 0)


def run(reports: WeatherReports, args: argparse.Namespace, reference_tz: Optional[tzinfo]) -> WeatherResponse:
    if args.command == "reconstruct":
        return reports.reconstruct(args.location, resolve_target(args, reference_tz), args.units)
    if args.command == "current":
        return reports.current(args.location, args.units)
    if args.command == "forecast":
        return reports.forecast(args.location, args.units)
    if args.command == "hourly":
        return reports.hourly(args.location, args.units)
    if args.command == "air-quality":
        return reports.air_quality(args.location)
    if args.command == "uv":
        return reports.uv_index(args.location)
    if args.command == "recommendations":
        return reports.recommendations(args.location, args.units)
    return reports.search_cities(args.location)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    config = load_config()
    reports = build_reports(config, args)

    try:
        response = run(reports, args, config.reference_tz)
    finally:
        reports.orchestrator.close()

    print(json.dumps(response.to_dict(), indent=2, default=str))
    return 0 if response.success else 1


if __name__ == "__main__":
    sys.exit(main())
