"""Provider lookup by name."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nimbus_weather.datasources.dmi import DmiProvider
from nimbus_weather.datasources.openmeteo import OpenMeteoProvider
from nimbus_weather.datasources.openweathermap import OpenWeatherMapProvider
from nimbus_weather.exceptions import UnknownProvider

if TYPE_CHECKING:
    from nimbus_weather.config import Settings
    from nimbus_weather.datasources.base import WeatherProvider

PROVIDERS = {
    OpenMeteoProvider.name: OpenMeteoProvider,
    OpenWeatherMapProvider.name: OpenWeatherMapProvider,
    DmiProvider.name: DmiProvider,
}


def get_provider(name: str, settings: Settings) -> WeatherProvider:
    """
    Instantiate the provider registered under ``name``.

    Raises:
        UnknownProvider: If no provider has that name.
    """
    try:
        provider_cls = PROVIDERS[name]
    except KeyError:
        raise UnknownProvider(name) from None
    provider: WeatherProvider = provider_cls(settings)
    return provider
