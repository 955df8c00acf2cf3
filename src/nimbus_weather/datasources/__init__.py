"""Weather provider integrations.

Each subdirectory is one provider with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, requested variables, provider info
    └── forecast.py       # fetch + normalize functions and the provider class

Every provider satisfies the ``WeatherProvider`` protocol in ``base.py``:
``fetch(location)`` returns the raw API payload and ``normalize(raw)`` turns
it into a ``NormalizedForecast`` in canonical units (C, m/s, mm, percent).

Adding a new provider
---------------------
1. Create ``datasources/{name}/`` with the files above.
   See ``openmeteo/`` for a minimal example, ``openweathermap/`` for one
   with several granularities and alerts.

2. Write a fetch function that goes through the shared session::

       from nimbus_weather.services.http import session

       def fetch_forecast(lat, lon) -> dict[str, Any]:
           resp = session.get(API_URL, params={...})
           resp.raise_for_status()
           return resp.json()

3. Wrap it in a provider class exposing ``name``, ``display_name``,
   ``forecast_type``, ``info``, ``fetch()`` and ``normalize()``.

4. Register the class in ``registry.PROVIDERS`` and its granularity in
   ``config.PROVIDER_FORECAST_TYPES``.

5. Add tests in ``tests/test_{name}.py``.
"""

from nimbus_weather.datasources.base import (
    OPEN_METEO_MODELS,
    ProviderInfo,
    WeatherProvider,
)
from nimbus_weather.datasources.registry import PROVIDERS, get_provider

__all__ = [
    "OPEN_METEO_MODELS",
    "PROVIDERS",
    "ProviderInfo",
    "WeatherProvider",
    "get_provider",
]
