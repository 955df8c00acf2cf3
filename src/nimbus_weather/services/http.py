"""
Shared HTTP client for weather providers.

``session`` is a ``requests.Session`` that retries transient failures
(connection errors, 429 and 5xx gateway responses) with exponential backoff
and applies a default timeout to every request. Providers call it directly::

    from nimbus_weather.services.http import session

    resp = session.get(OPEN_METEO_API, params={...})
    resp.raise_for_status()
"""

from __future__ import annotations

import logging
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

USER_AGENT = "Nimbus weather/1.0"

#: Weather APIs rate-limit (429) and sit behind gateways (502/503/504).
DEFAULT_RETRY = Retry(
    total=4,
    backoff_factor=2,  # 0s, 2s, 4s, 8s between retries
    status_forcelist=[429, 502, 503, 504],
    allowed_methods=["GET", "HEAD", "OPTIONS"],
    raise_on_status=False,  # let resp.raise_for_status() handle it
)

DEFAULT_TIMEOUT = 30  # seconds


class ProviderSession(requests.Session):
    """Session with a default timeout and JSON request headers."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__()
        self.timeout = timeout
        self.headers["User-Agent"] = USER_AGENT
        self.headers["Accept"] = "application/json"
        self.hooks["response"].append(_log_response)

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        # Session.request passes timeout=None explicitly
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = self.timeout
        return super().send(request, **kwargs)


def _log_response(response: requests.Response, *_args: Any, **_kwargs: Any) -> None:
    logger.debug(
        "%s %s -> %s",
        response.request.method,
        response.url.split("?", 1)[0],
        response.status_code,
    )


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> ProviderSession:
    """
    Build a provider session with the retry adapter mounted.

    Args:
        retry: Custom retry strategy (defaults to ``DEFAULT_RETRY``).
        timeout: Timeout applied when a request doesn't pass one.
    """
    s = ProviderSession(timeout=timeout)
    adapter = HTTPAdapter(max_retries=retry or DEFAULT_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    return s


#: Module-level session, import and use directly.
session: ProviderSession = create_session()
