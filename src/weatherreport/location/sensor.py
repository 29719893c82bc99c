"""Location sensors.

A sensor is started with two callbacks and delivers either one batch of
fixes or one error message, on the running event loop. ``stop()`` is safe
to call at any time, including after delivery.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any, Protocol

from pydantic import ValidationError

from weatherreport._transport import Transport
from weatherreport.config import WeatherReportConfig
from weatherreport.exceptions import TransportError
from weatherreport.models.place import Coordinate
from weatherreport.normalize import safe_float

_logger = logging.getLogger(__name__)

LocationUpdateHandler = Callable[[Sequence[Coordinate]], None]
LocationErrorHandler = Callable[[str], None]


class LocationSensor(Protocol):
    def start(self, on_update: LocationUpdateHandler, on_error: LocationErrorHandler) -> None:
        ...

    def stop(self) -> None:
        ...


class StaticLocationSensor:
    """Sensor that always reports the same coordinate."""

    def __init__(self, coordinate: Coordinate) -> None:
        self.coordinate = coordinate
        self._handle: asyncio.Handle | None = None

    def start(self, on_update: LocationUpdateHandler, on_error: LocationErrorHandler) -> None:
        self.stop()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_soon(on_update, [self.coordinate])

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class GeoIpLocationSensor:
    """Approximate location from the public IP address (ip-api.com format)."""

    def __init__(self, config: WeatherReportConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, on_update: LocationUpdateHandler, on_error: LocationErrorHandler) -> None:
        self.stop()
        self._task = asyncio.get_running_loop().create_task(self._lookup(on_update, on_error))

    def stop(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()

    async def _lookup(self, on_update: LocationUpdateHandler, on_error: LocationErrorHandler) -> None:
        _logger.debug("Requesting GeoIP location...")
        try:
            body: Any = await self._transport.get_json(self._config.geoip_url)
        except TransportError as exc:
            on_error(f"GeoIP lookup failed: {exc}")
            return

        if not isinstance(body, dict) or body.get("status") != "success":
            message = body.get("message") if isinstance(body, dict) else None
            on_error(f"GeoIP lookup failed: {message or 'no location'}")
            return

        lat = safe_float(body.get("lat"))
        lon = safe_float(body.get("lon"))
        if lat is None or lon is None:
            on_error("GeoIP lookup returned no coordinates")
            return
        try:
            coordinate = Coordinate(latitude=lat, longitude=lon)
        except ValidationError:
            on_error(f"GeoIP lookup returned invalid coordinates {lat},{lon}")
            return
        on_update([coordinate])
