"""
Prefect flows for the forecast pipeline.

Flows:
- forecast: fetch a provider forecast, run the analytics pipeline, cache it

Usage (local):
    python -m nimbus_weather.flows.forecast

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    python -m nimbus_weather.flows.forecast
"""
