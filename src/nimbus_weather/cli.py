"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import UTC, date, datetime, time
from pathlib import Path
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from nimbus_weather import __version__
from nimbus_weather.analysis.assembler import process
from nimbus_weather.analysis.solar import calculate_sun_times, get_daylight_duration
from nimbus_weather.analysis.units import (
    TemperatureUnit,
    WindSpeedUnit,
    to_temperature,
    to_wind_speed,
)
from nimbus_weather.config import ForecastType, PipelineConfig, Settings, get_settings
from nimbus_weather.datasources import PROVIDERS
from nimbus_weather.exceptions import NimbusError
from nimbus_weather.flows.forecast import forecast_flow
from nimbus_weather.schemas import Location, NormalizedForecast, ProcessedForecast

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="nimbus",
        description="Weather forecast analytics: apparent temperature, extrema, rain totals",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'info' command
    subparsers.add_parser("info", help="Show application info and providers")

    # 'forecast' command - fetch, process and cache
    forecast_parser = subparsers.add_parser("forecast", help="Fetch and process a forecast")
    _add_location_args(forecast_parser)
    forecast_parser.add_argument(
        "--provider",
        choices=sorted(PROVIDERS),
        default=None,
        help="Weather provider (default: weather_provider from settings)",
    )
    forecast_parser.add_argument("--json", action="store_true", help="Print JSON output")

    # 'process' command - run the pipeline on a saved normalized series
    process_parser = subparsers.add_parser(
        "process", help="Run the pipeline on a normalized forecast JSON file"
    )
    process_parser.add_argument("file", type=Path, help="JSON file with data/alerts")
    _add_location_args(process_parser)
    process_parser.add_argument(
        "--forecast-type",
        choices=[t.value for t in ForecastType],
        default=ForecastType.HOURLY.value,
        help="Granularity of the series (default: hourly)",
    )

    # 'sun' command
    sun_parser = subparsers.add_parser("sun", help="Show sunrise, sunset and solar noon")
    _add_location_args(sun_parser)
    sun_parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Date as YYYY-MM-DD (default: today)",
    )

    return parser


def _add_location_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--lat", type=float, default=None, help="Latitude (default: settings)")
    parser.add_argument("--lon", type=float, default=None, help="Longitude (default: settings)")


def _location(args: argparse.Namespace) -> Location:
    settings = get_settings()
    return Location(
        latitude=settings.lat if args.lat is None else args.lat,
        longitude=settings.lon if args.lon is None else args.lon,
    )


TEMPERATURE_LABELS = {"celsius": "C", "fahrenheit": "F", "kelvin": "K"}
WIND_LABELS = {"ms": "m/s", "kmh": "km/h", "mph": "mph", "knots": "kn"}


def _print_series(forecast: ProcessedForecast, settings: Settings) -> None:
    """Print one line per point in the configured display units.

    Series values are always C and m/s; ``temp_unit``, ``wind_unit`` and
    ``show_apparent_temperature`` only change what is printed here.
    """
    temp_label = TEMPERATURE_LABELS.get(settings.temp_unit, settings.temp_unit)
    wind_label = WIND_LABELS.get(settings.wind_unit, settings.wind_unit)

    def temp(value: float) -> str:
        converted = to_temperature(value, TemperatureUnit.CELSIUS, settings.temp_unit)
        return f"{converted:.0f} {temp_label}"

    for point in forecast.data:
        line = f"{point.time:%Y-%m-%d %H:%M}"
        line += f"  {temp(point.temperature)}" if point.temperature is not None else "  -"
        if point.wind_speed is not None:
            speed = to_wind_speed(point.wind_speed, WindSpeedUnit.MS, settings.wind_unit)
            line += f"  wind {speed:.0f} {wind_label}"
        if settings.show_apparent_temperature and point.apparent_temperature is not None:
            line += f"  feels {temp(point.apparent_temperature.avg)}"
        if point.precipitation_group_total is not None:
            line += f"  rain {point.precipitation_group_total:.1f} mm"
        if point.extrema is not None:
            marks = [f"max:{c}" for c in point.extrema.is_maxima]
            marks += [f"min:{c}" for c in point.extrema.is_minima]
            line += "  " + " ".join(marks)
        print(line)
    for alert in forecast.alerts:
        print(f"ALERT {alert.event} ({alert.start:%Y-%m-%d %H:%M} - {alert.end:%Y-%m-%d %H:%M})")


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Provider: {settings.weather_provider}")
    print("Available providers:")
    for name, provider_cls in sorted(PROVIDERS.items()):
        info = provider_cls.info
        key_note = " (API key required)" if info.requires_api_key else ""
        print(f"  {name}: {info.name} - {info.description}{key_note}")
    return 0


def cmd_forecast(args: argparse.Namespace) -> int:
    """Handle the 'forecast' command: run the forecast flow."""
    settings = get_settings()
    location = _location(args)
    try:
        result = forecast_flow(location.latitude, location.longitude, args.provider)
    except NimbusError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(result.model_dump_json(by_alias=True, indent=2))
    else:
        _print_series(result, settings)
    return 0


def cmd_process(args: argparse.Namespace) -> int:
    """Handle the 'process' command: run the pipeline on a JSON file."""
    settings = get_settings()
    try:
        with args.file.open() as f:
            forecast = NormalizedForecast.model_validate(json.load(f))
        config = PipelineConfig(forecast_type=args.forecast_type, timezone=settings.timezone)
        result = process(forecast, _location(args), config)
    except (OSError, json.JSONDecodeError, ValidationError, NimbusError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(result.model_dump_json(by_alias=True, indent=2))
    return 0


def cmd_sun(args: argparse.Namespace) -> int:
    """Handle the 'sun' command."""
    settings = get_settings()
    location = _location(args)
    tz = ZoneInfo(settings.timezone)
    day = args.date or datetime.now(tz).date()
    # Local noon keeps the calculation on the requested calendar day
    instant = datetime.combine(day, time(12), tzinfo=tz).astimezone(UTC)

    sun = calculate_sun_times(location.latitude, location.longitude, instant, tz)
    duration = get_daylight_duration(location.latitude, location.longitude, instant, tz)
    print(f"Location: ({location.latitude}, {location.longitude})  {day.isoformat()}")
    print(f"Sunrise: {sun.sunrise}")
    print(f"Solar noon: {sun.noon}")
    print(f"Sunset: {sun.sunset}")
    print(f"Daylight: {duration:.2f} h")
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if args.debug or settings.debug else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "forecast": cmd_forecast,
        "process": cmd_process,
        "sun": cmd_sun,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
