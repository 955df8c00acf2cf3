"""Forecast cache with freshness-aware reads.

Processed forecasts are stored as JSON files under ``base_dir``, one file per
(provider, location, pipeline configuration)::

    {base_dir}/{provider}/{lat}_{lon}_{fingerprint}.json

Every file is wrapped in a metadata envelope with ``valid_until`` so the
forecast flow can skip the provider while a stored result is still fresh.
Coordinates are rounded to 2 decimals (about 1 km), so small GPS jitter hits
the same entry.

The cache is an injected collaborator: the flow receives one, nothing in the
package holds a process-wide instance.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from nimbus_weather.schemas import Location, ProcessedForecast

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=15)


class ForecastCache:
    """Reads and writes processed forecasts with a TTL."""

    def __init__(self, base_dir: Path, ttl: timedelta = DEFAULT_TTL) -> None:
        self.base = base_dir
        self.ttl = ttl

    @staticmethod
    def key(provider: str, location: Location, fingerprint: str) -> Path:
        """Relative cache path for a provider, location and pipeline config."""
        loc = location.truncated()
        return Path(provider) / f"{loc.latitude:.2f}_{loc.longitude:.2f}_{fingerprint}.json"

    def get(self, key: Path, now: datetime | None = None) -> ProcessedForecast | None:
        """Return the stored forecast, or None if missing or expired."""
        if not self.is_fresh(key, now):
            logger.debug("Cache miss: %s", key)
            return None
        envelope = self.read_raw(key)
        if envelope is None:
            return None
        logger.debug("Cache hit: %s", key)
        return ProcessedForecast.model_validate(envelope["data"])

    def read_raw(self, key: Path) -> dict[str, Any] | None:
        """Read the full envelope (meta + data), regardless of freshness."""
        full = self._resolve(key)
        if not full.exists():
            return None
        with full.open() as f:
            result: dict[str, Any] = json.load(f)
        return result

    def put(
        self,
        key: Path,
        forecast: ProcessedForecast,
        source: str,
        now: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Write a forecast wrapped in a metadata envelope.

        Args:
            key: Relative path from ``key()``.
            forecast: Pipeline output to store.
            source: Data source identifier (e.g. ``"open-meteo.com"``).
            now: Write time (default: current UTC); ``valid_until`` is
                ``now + ttl``.
            **params: Extra metadata fields (location, forecast type, ...).

        Returns:
            Absolute path of the written file.
        """
        full = self._resolve(key)
        full.parent.mkdir(parents=True, exist_ok=True)

        fetched_at = now or datetime.now(UTC)
        meta: dict[str, Any] = {
            "source": source,
            "fetched_at": fetched_at.isoformat(),
            "valid_until": (fetched_at + self.ttl).isoformat(),
        }
        if params:
            meta.update(params)

        envelope = {"meta": meta, "data": forecast.model_dump(mode="json", by_alias=True)}
        with full.open("w") as f:
            json.dump(envelope, f, indent=2)

        logger.debug("Cached %d points at %s", len(forecast.data), full)
        return full

    def is_fresh(self, key: Path, now: datetime | None = None) -> bool:
        """Check if an entry exists and hasn't expired.

        Returns False if the file is missing, has no ``valid_until``, or the
        expiry time has passed.
        """
        envelope = self.read_raw(key)
        if envelope is None:
            return False

        valid_until = envelope.get("meta", {}).get("valid_until")
        if valid_until is None:
            return False

        expiry = datetime.fromisoformat(valid_until)
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=UTC)
        return (now or datetime.now(UTC)) < expiry

    def _resolve(self, path: Path) -> Path:
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes cache base directory: {path}"
            raise ValueError(msg) from None
        return full
