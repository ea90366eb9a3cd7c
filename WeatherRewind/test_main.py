"""Tests for CLI configuration and dispatch."""
import json
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, patch

import pytest

import main
from weather_response import WeatherResponse


@pytest.fixture
def weather_env(monkeypatch):
    for name in ("WEATHER_API_KEY", "WEATHER_BASE_URL", "WEATHER_HISTORICAL_ENABLED", "WEATHER_TZ", "WEATHER_LANG"):
        monkeypatch.delenv(name, raising=False)
    with patch('main.load_dotenv'):
        yield monkeypatch


def test_load_config_defaults(weather_env):
    weather_env.setenv("WEATHER_API_KEY", "secret")

    config = main.load_config()

    assert config.api_key == "secret"
    assert config.base_url == "https://api.openweathermap.org"
    assert config.lang == "en"
    assert config.historical_enabled is False
    assert config.reference_tz is None


def test_load_config_from_environment(weather_env):
    weather_env.setenv("WEATHER_API_KEY", "secret")
    weather_env.setenv("WEATHER_BASE_URL", "http://localhost:8080")
    weather_env.setenv("WEATHER_HISTORICAL_ENABLED", "true")
    weather_env.setenv("WEATHER_TZ", "UTC")
    weather_env.setenv("WEATHER_LANG", "de")

    config = main.load_config()

    assert config.base_url == "http://localhost:8080"
    assert config.historical_enabled is True
    assert config.reference_tz.key == "UTC"
    assert config.lang == "de"


def test_load_config_requires_api_key(weather_env):
    with pytest.raises(SystemExit):
        main.load_config()


def test_load_config_rejects_unknown_zone(weather_env):
    weather_env.setenv("WEATHER_API_KEY", "secret")
    weather_env.setenv("WEATHER_TZ", "Mars/Olympus_Mons")

    with pytest.raises(SystemExit):
        main.load_config()


def test_parse_args_defaults():
    args = main.parse_args(["reconstruct", "London"])

    assert args.units == "metric"
    assert args.cache_ttl == 600
    assert args.max_retries == 3
    assert args.historical is None


def test_parse_args_historical_flags():
    assert main.parse_args(["reconstruct", "London", "--historical"]).historical is True
    assert main.parse_args(["reconstruct", "London", "--no-historical"]).historical is False


def test_resolve_target_from_iso():
    args = main.parse_args(["reconstruct", "London", "--at", "2024-06-12T15:00:00+00:00"])
    assert main.resolve_target(args, None) == datetime(2024, 6, 12, 15, 0, tzinfo=timezone.utc)


def test_resolve_target_days_ago():
    args = main.parse_args(["reconstruct", "London", "--days-ago", "3"])
    target = main.resolve_target(args, timezone.utc)
    expected = datetime.now(timezone.utc) - timedelta(days=3)
    assert abs((target - expected).total_seconds()) < 5


def test_resolve_target_rejects_garbage():
    args = main.parse_args(["reconstruct", "London", "--at", "last tuesday"])
    with pytest.raises(SystemExit):
        main.resolve_target(args, None)


def test_run_dispatches_commands():
    reports = Mock()
    args = main.parse_args(["air-quality", "London"])
    main.run(reports, args, None)
    reports.air_quality.assert_called_once_with("London")

    args = main.parse_args(["search", "Spring"])
    main.run(reports, args, None)
    reports.search_cities.assert_called_once_with("Spring")


def test_main_prints_envelope(capsys):
    reports = Mock()
    reports.search_cities.return_value = WeatherResponse.ok("city_search", {"cities": []})

    with patch('main.setup_logging'), patch('main.load_config'), \
            patch('main.build_reports', return_value=reports):
        exit_code = main.main(["search", "London"])

    output = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert output["type"] == "city_search"
    assert output["data"] == {"cities": []}
    reports.orchestrator.close.assert_called_once()


def test_main_failure_exit_code(capsys):
    reports = Mock()
    reports.current.return_value = WeatherResponse.failure("current", "city not found")

    with patch('main.setup_logging'), patch('main.load_config'), \
            patch('main.build_reports', return_value=reports):
        exit_code = main.main(["current", "Nowhereville"])

    assert exit_code == 1
    assert json.loads(capsys.readouterr().out)["success"] is False


def test_run_dispatches_recommendations():
    reports = Mock()
    args = main.parse_args(["recommendations", "London", "--units", "imperial"])
    main.run(reports, args, None)
    reports.recommendations.assert_called_once_with("London", "imperial")
