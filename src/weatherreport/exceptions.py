"""Custom exception hierarchy for weatherreport.

None of these escape the shared state service: they are raised by the
provider layers and converted into logged messages plus an empty or absent
result at the orchestration boundary.
"""

from __future__ import annotations


class WeatherReportError(Exception):
    """Base exception for all weatherreport errors."""


class WeatherReportConfigError(WeatherReportError):
    """Invalid or missing configuration."""


class TransportError(WeatherReportError):
    """HTTP-level failure (network, timeout, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class GeocodingError(WeatherReportError):
    """Forward or reverse geocoding failed at the provider.

    An empty message means the provider gave no usable description.
    """


class LocationSensorError(WeatherReportError):
    """The location sensor could not produce a fix."""


class PersistenceError(WeatherReportError):
    """The key/value store could not be read or written."""
