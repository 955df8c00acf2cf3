"""Tests for the Open-Meteo provider."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from unittest.mock import Mock, patch

import pytest
import requests

from nimbus_weather.config import ForecastType, Settings
from nimbus_weather.datasources.openmeteo import (
    HOURLY_VARS,
    OpenMeteoProvider,
    fetch_forecast,
    normalize_forecast,
)
from nimbus_weather.exceptions import ProviderError
from nimbus_weather.schemas import Location

NOW = datetime(2024, 6, 21, 12, 30, tzinfo=UTC)


def _raw() -> dict[str, Any]:
    return {
        "utc_offset_seconds": 7200,
        "hourly": {
            "time": ["2024-06-21T13:00", "2024-06-21T14:00", "2024-06-21T15:00"],
            "temperature_2m": [18.0, 19.5, 20.1],
            "precipitation": [0.0, 0.4, None],
            "wind_speed_10m": [18.0, 36.0, 7.2],
            "wind_gusts_10m": [30.0, 54.0, 14.4],
            "cloud_cover": [20, 30, 120],
            "relative_humidity_2m": [60, 65, 70],
        },
    }


class TestFetchForecast:
    """Test fetching the hourly forecast."""

    @patch("nimbus_weather.datasources.openmeteo.forecast.session.get")
    def test_request_params(self, mock_get: Mock) -> None:
        mock_response = Mock()
        mock_response.json.return_value = _raw()
        mock_response.raise_for_status = Mock()
        mock_get.return_value = mock_response

        result = fetch_forecast(55.49, 9.47)

        assert result == _raw()
        params = mock_get.call_args.kwargs["params"]
        assert params["latitude"] == 55.49
        assert params["longitude"] == 9.47
        assert params["hourly"] == HOURLY_VARS
        assert params["timezone"] == "auto"
        assert "models" not in params

    @patch("nimbus_weather.datasources.openmeteo.forecast.session.get")
    def test_model_selection(self, mock_get: Mock) -> None:
        mock_get.return_value.json.return_value = {}
        fetch_forecast(55.49, 9.47, model="dmi_seamless")
        assert mock_get.call_args.kwargs["params"]["models"] == "dmi_seamless"


class TestNormalizeForecast:
    """Test conversion to the canonical series."""

    def test_drops_past_hours(self) -> None:
        forecast = normalize_forecast(_raw(), now=NOW)
        assert [p.time for p in forecast.data] == [
            datetime(2024, 6, 21, 12, tzinfo=UTC),
            datetime(2024, 6, 21, 13, tzinfo=UTC),
        ]

    def test_wind_converted_to_ms(self) -> None:
        point = normalize_forecast(_raw(), now=NOW).data[0]
        assert point.wind_speed == pytest.approx(10.0)
        assert point.wind_gusts == pytest.approx(15.0)

    def test_sun_hours_from_clouds(self) -> None:
        forecast = normalize_forecast(_raw(), now=NOW)
        assert forecast.data[0].sun_hours == 70
        assert forecast.data[1].sun_hours == 0

    def test_channels_copied(self) -> None:
        point = normalize_forecast(_raw(), now=NOW).data[0]
        assert point.temperature == 19.5
        assert point.temp_min == point.temp_max == 19.5
        assert point.precipitation == 0.4
        assert point.humidity == 65
        assert point.clouds == 30

    def test_missing_values_stay_missing(self) -> None:
        point = normalize_forecast(_raw(), now=NOW).data[1]
        assert point.precipitation is None

    def test_missing_variable(self) -> None:
        raw = _raw()
        del raw["hourly"]["wind_gusts_10m"]
        point = normalize_forecast(raw, now=NOW).data[0]
        assert point.wind_gusts is None

    def test_no_alerts(self) -> None:
        assert normalize_forecast(_raw(), now=NOW).alerts == []

    def test_empty_response(self) -> None:
        assert normalize_forecast({}, now=NOW).data == []


class TestOpenMeteoProvider:
    """Test the provider wrapper."""

    def test_attributes(self) -> None:
        provider = OpenMeteoProvider(Settings())
        assert provider.name == "openmeteo"
        assert provider.forecast_type is ForecastType.HOURLY
        assert provider.info.requires_api_key is False

    @patch("nimbus_weather.datasources.openmeteo.forecast.session.get")
    def test_fetch_uses_configured_model(self, mock_get: Mock) -> None:
        mock_get.return_value.json.return_value = {}
        settings = Settings(open_meteo_model="icon_seamless")
        OpenMeteoProvider(settings).fetch(Location(latitude=55.49, longitude=9.47))
        assert mock_get.call_args.kwargs["params"]["models"] == "icon_seamless"

    @patch("nimbus_weather.datasources.openmeteo.forecast.session.get")
    def test_request_errors_wrapped(self, mock_get: Mock) -> None:
        mock_get.side_effect = requests.ConnectionError("connection refused")
        provider = OpenMeteoProvider(Settings())
        with pytest.raises(ProviderError, match="Open-Meteo API not available"):
            provider.fetch(Location(latitude=55.49, longitude=9.47))

    @patch("nimbus_weather.datasources.openmeteo.forecast.session.get")
    def test_http_errors_wrapped(self, mock_get: Mock) -> None:
        mock_get.return_value.raise_for_status.side_effect = requests.HTTPError("503")
        provider = OpenMeteoProvider(Settings())
        with pytest.raises(ProviderError):
            provider.fetch(Location(latitude=55.49, longitude=9.47))
