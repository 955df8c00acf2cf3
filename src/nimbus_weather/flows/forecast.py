"""
Prefect flow that fetches, processes and caches a forecast.

Run locally:
    python -m nimbus_weather.flows.forecast

Run with Prefect dashboard:
    prefect server start &
    python -m nimbus_weather.flows.forecast
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any

from prefect import flow, task

from nimbus_weather.analysis.assembler import process
from nimbus_weather.config import PipelineConfig, Settings, get_settings  # noqa: TC001 - flow signature
from nimbus_weather.datasources import get_provider
from nimbus_weather.schemas import Location, ProcessedForecast  # noqa: TC001 - flow signature
from nimbus_weather.store import ForecastCache

if TYPE_CHECKING:
    from pathlib import Path

    from nimbus_weather.datasources.base import WeatherProvider
    from nimbus_weather.schemas import NormalizedForecast


def default_cache(settings: Settings) -> ForecastCache:
    """Cache under ``settings.cache_dir`` with the location cache TTL."""
    return ForecastCache(
        settings.cache_dir / "forecasts",
        ttl=timedelta(minutes=settings.location_cache_minutes),
    )


@task(name="fetch-forecast", retries=2, retry_delay_seconds=5)
def fetch_raw(provider: WeatherProvider, location: Location) -> dict[str, Any]:
    """Fetch the raw provider payload."""
    return provider.fetch(location)


@task(name="normalize-forecast")
def normalize_raw(provider: WeatherProvider, raw: dict[str, Any]) -> NormalizedForecast:
    """Convert the raw payload into the canonical series."""
    return provider.normalize(raw)


@task(name="process-forecast")
def run_pipeline(
    forecast: NormalizedForecast, location: Location, config: PipelineConfig
) -> ProcessedForecast:
    """Run the analytics pipeline."""
    return process(forecast, location, config)


@task(name="save-forecast")
def save_forecast(
    cache: ForecastCache,
    key: Path,
    forecast: ProcessedForecast,
    provider: WeatherProvider,
    location: Location,
) -> Path:
    """Save the processed forecast via the cache."""
    return cache.put(
        key,
        forecast,
        source=provider.info.website,
        provider=provider.name,
        location={"lat": location.latitude, "lon": location.longitude},
        forecast_type=str(provider.forecast_type),
    )


@flow(name="forecast", log_prints=True)
def forecast_flow(
    lat: float | None = None,
    lon: float | None = None,
    provider_name: str | None = None,
    *,
    settings: Settings | None = None,
    cache: ForecastCache | None = None,
) -> ProcessedForecast:
    """
    Fetch and process a forecast for one location.

    Checks the cache first and skips the provider while the stored result is
    still fresh.

    Args:
        lat: Latitude (default: ``settings.lat``).
        lon: Longitude (default: ``settings.lon``).
        provider_name: Provider to use (default: ``settings.weather_provider``).
        settings: Application settings (default: ``get_settings()``).
        cache: Forecast cache (default: one under ``settings.cache_dir``).
    """
    settings = settings or get_settings()
    cache = cache or default_cache(settings)
    location = Location(
        latitude=settings.lat if lat is None else lat,
        longitude=settings.lon if lon is None else lon,
    )
    provider = get_provider(provider_name or settings.weather_provider, settings)
    config = PipelineConfig(forecast_type=provider.forecast_type, timezone=settings.timezone)
    key = cache.key(provider.name, location, config.fingerprint())

    cached = cache.get(key)
    if cached is not None:
        print(f"{provider.display_name} forecast is fresh, skipping fetch.")
        return cached

    print(f"Fetching {provider.display_name} forecast for ({location.latitude}, {location.longitude})...")
    raw = fetch_raw(provider, location)
    normalized = normalize_raw(provider, raw)
    processed = run_pipeline(normalized, location, config)
    output_path = save_forecast(cache, key, processed, provider, location)
    print(f"Saved {len(processed.data)} points and {len(processed.alerts)} alerts to {output_path}")
    return processed


if __name__ == "__main__":
    result = forecast_flow()
    print(f"Flow complete: {len(result.data)} points")
