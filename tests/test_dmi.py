"""Tests for the DMI provider."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from unittest.mock import Mock, patch

import pytest

from nimbus_weather.config import ForecastType, Settings
from nimbus_weather.datasources.dmi import (
    DMI_EDR_API,
    DmiProvider,
    fetch_forecast,
    normalize_forecast,
)
from nimbus_weather.exceptions import MissingApiToken
from nimbus_weather.schemas import Location


def _geojson() -> dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [9.47, 55.49]},
                "properties": {
                    "step": "2024-06-21T12:00:00.000Z",
                    "temperature-2m": 291.15,
                    "total-precipitation": 0.3,
                    "wind-speed": 5.5,
                    "wind-dir-10m": 240.0,
                    "cloud-transmittance": 0.25,
                },
            },
            {
                "type": "Feature",
                "properties": {"step": "2024-06-21T13:00:00Z", "temperature-2m": 292.15},
            },
        ],
    }


class TestFetchForecast:
    """Test the EDR position query."""

    def test_missing_token(self) -> None:
        with pytest.raises(MissingApiToken, match="DMI API token"):
            fetch_forecast(55.49, 9.47, "")

    @patch("nimbus_weather.datasources.dmi.forecast.session.get")
    def test_request_params(self, mock_get: Mock) -> None:
        mock_get.return_value.json.return_value = _geojson()
        result = fetch_forecast(55.49, 9.47, "secret")

        assert result == _geojson()
        assert mock_get.call_args.args[0] == DMI_EDR_API
        params = mock_get.call_args.kwargs["params"]
        assert params["coords"] == "POINT(9.47 55.49)"
        assert params["crs"] == "crs84"
        assert params["f"] == "GeoJSON"
        assert "cloud-transmittance" in params["parameter-name"]
        assert params["api-key"] == "secret"


class TestNormalizeForecast:
    """Test conversion of GeoJSON features."""

    def test_first_point(self) -> None:
        point = normalize_forecast(_geojson()).data[0]
        assert point.time == datetime(2024, 6, 21, 12, tzinfo=UTC)
        assert point.temperature == pytest.approx(18.0)
        assert point.precipitation == 0.3
        assert point.wind_speed == 5.5
        assert point.wind_direction == 240.0

    def test_clouds_from_transmittance(self) -> None:
        point = normalize_forecast(_geojson()).data[0]
        assert point.clouds == pytest.approx(75.0)
        assert point.sun_hours == pytest.approx(25.0)

    def test_missing_parameters(self) -> None:
        point = normalize_forecast(_geojson()).data[1]
        assert point.temperature == pytest.approx(19.0)
        assert point.clouds is None
        assert point.sun_hours is None
        assert point.wind_speed is None

    def test_no_features(self) -> None:
        forecast = normalize_forecast({"features": []})
        assert forecast.data == []
        assert forecast.alerts == []


class TestDmiProvider:
    """Test the provider wrapper."""

    def test_attributes(self) -> None:
        provider = DmiProvider(Settings())
        assert provider.name == "dmi"
        assert provider.forecast_type is ForecastType.HOURLY
        assert provider.info.requires_api_key is True

    def test_fetch_without_token(self) -> None:
        settings = Settings(dmi_api_token="")
        with pytest.raises(MissingApiToken):
            DmiProvider(settings).fetch(Location(latitude=55.49, longitude=9.47))
