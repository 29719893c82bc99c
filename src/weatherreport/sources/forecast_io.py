"""Forecast.io weather source.

Endpoint (https://developer.forecast.io/docs/v2)::

    GET {base}/{api_key}/{latitude},{longitude}[,{YYYY-MM-DDTHH:MM:SS}]

Only the ``currently`` block of the response is used.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from weatherreport._redact import redact_message, redact_url
from weatherreport._transport import Transport
from weatherreport.config import WeatherReportConfig
from weatherreport.exceptions import TransportError
from weatherreport.formatting import CURRENT_CONDITIONS_ROWS, build_rows
from weatherreport.models.conditions import CurrentConditions, ForecastResponse
from weatherreport.models.display import DisplayRow
from weatherreport.sources.base import WeatherSource

_logger = logging.getLogger(__name__)

#: Conditions captured from a real response; served when
#: ``use_canned_data`` is configured.
CANNED_CONDITIONS: dict[str, Any] = {
    "apparentTemperature": "44.23",
    "cloudCover": "0.53",
    "dewPoint": "40.83",
    "humidity": "0.84",
    "icon": "partly-cloudy-day",
    "nearestStormBearing": 345,
    "nearestStormDistance": 155,
    "ozone": "285.65",
    "precipIntensity": 0,
    "precipProbability": 0,
    "pressure": "1026.89",
    "summary": "Partly Cloudy",
    "temperature": "45.49",
    "time": 1419783003,
    "visibility": "8.52",
    "windBearing": 33,
    "windSpeed": "2.14",
}


def forecast_rows(currently: Mapping[str, Any] | CurrentConditions) -> list[DisplayRow]:
    """Build the current-conditions rows from a raw or decoded block."""
    conditions = (
        currently if isinstance(currently, CurrentConditions) else CurrentConditions.model_validate(dict(currently))
    )
    return build_rows(conditions, CURRENT_CONDITIONS_ROWS)


class ForecastIOSource(WeatherSource):
    """Weather source backed by the Forecast.io v2 API."""

    name = "Forecast.IO"

    def __init__(self, config: WeatherReportConfig, transport: Transport | None = None) -> None:
        super().__init__()
        self._config = config
        self._transport = transport

    def forecast_url(self, at: datetime | None = None) -> str | None:
        """Request URL for the current coordinate, ``None`` without one.

        With *at*, the URL targets the time-machine variant of the
        endpoint for that (naive, location-local) moment.
        """
        coord = self.coordinate
        if coord is None:
            return None
        base = self._config.forecast_base_url.rstrip("/")
        url = f"{base}/{self._config.forecast_api_key}/{coord.latitude},{coord.longitude}"
        if at is not None:
            url += f",{at.strftime('%Y-%m-%dT%H:%M:%S')}"
        return url

    def _log_error(self, message: str) -> None:
        _logger.error("%s: %s", self.name, redact_message(message, [self._config.forecast_api_key]))

    async def fetch_conditions(self, *, at: datetime | None = None) -> list[DisplayRow]:
        if self._config.use_canned_data:
            _logger.debug("%s: using canned conditions", self.name)
            return forecast_rows(CANNED_CONDITIONS)

        url = self.forecast_url(at)
        if url is None:
            self._log_error("failed to construct URL (no location)")
            return []
        if not self._config.forecast_api_key:
            self._log_error("no API key configured")
            return []
        if self._transport is None:
            self._log_error("no transport available")
            return []

        _logger.debug("%s: URL: %s", self.name, redact_url(url, [self._config.forecast_api_key]))
        try:
            body = await self._transport.get_json(url)
        except TransportError as exc:
            self._log_error(str(exc))
            return []

        if not isinstance(body, dict):
            self._log_error("unexpected response shape")
            return []
        try:
            response = ForecastResponse.model_validate(body)
        except ValidationError as exc:
            self._log_error(f"unparsable response: {exc.error_count()} error(s)")
            return []
        if response.currently is None:
            self._log_error("failed to access current conditions")
            return []
        return build_rows(response.currently, CURRENT_CONDITIONS_ROWS)
