"""Exception hierarchy.

Parameter errors (bad units, malformed filter arguments, unknown providers)
are caller bugs and raise immediately. Short or sparse series are not errors;
the stages that meet them return their input unchanged.
"""

from __future__ import annotations


class NimbusError(Exception):
    """Base class for all nimbus-weather errors."""


class InvalidUnit(NimbusError, ValueError):
    """A unit conversion was requested with an unrecognized unit string."""

    def __init__(self, unit: object) -> None:
        super().__init__(f"Invalid unit: {unit}")
        self.unit = unit


class InvalidFilterParameters(NimbusError, ValueError):
    """Savitzky-Golay filter called with a malformed window/derivative/polynomial."""


class UnknownProvider(NimbusError, ValueError):
    """No weather provider is registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown weather provider: {name}")
        self.name = name


class MissingApiToken(NimbusError):
    """A provider that needs an API token was used without one."""


class ProviderError(NimbusError):
    """A provider request failed or returned an unusable payload."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider} API not available: {message}")
        self.provider = provider
