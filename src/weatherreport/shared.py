"""Shared place + weather state service.

:class:`SharedData` sequences place resolution, persistence, the weather
source and observer notification on one event loop::

    set_place_to_search / set_place_to_current
        -> PlaceResolver (async)
        -> on_place_resolved: notify place, save, set weather coordinate
        -> refresh_weather: fetch rows, notify weather

A repeating timer started by the first refresh re-runs ``refresh_weather``
independently of place changes.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import aiohttp

from weatherreport._constants import STATE_KEY
from weatherreport._transport import HttpTransport
from weatherreport.config import WeatherReportConfig
from weatherreport.exceptions import PersistenceError, WeatherReportError
from weatherreport.location.geocoding import Geocoder, NominatimGeocoder
from weatherreport.location.resolver import PlaceResolver
from weatherreport.location.sensor import GeoIpLocationSensor, LocationSensor
from weatherreport.models.display import DisplayRow
from weatherreport.models.place import Place
from weatherreport.models.state import PersistedState
from weatherreport.observers import ObserverLogHandler, SharedDataObserver
from weatherreport.sources.base import WeatherSource
from weatherreport.sources.forecast_io import ForecastIOSource
from weatherreport.storage import JsonFileStore, KeyValueStore, MemoryStore

_logger = logging.getLogger(__name__)

_PACKAGE_LOGGER = "weatherreport"

UNKNOWN_PLACE_ERROR = "Unknown error retrieving place."


class SharedData:
    """Owner of the current place, the weather rows and the refresh timer.

    Usage::

        async with SharedData(config) as shared:
            shared.register(observer)
            await shared.load()
            if shared.state.place is None:
                await shared.set_place_to_current()

    Any collaborator not passed in is built from *config* on entry: a
    JSON file or in-memory store, :class:`ForecastIOSource`,
    :class:`NominatimGeocoder` and :class:`GeoIpLocationSensor`, the last
    three sharing one aiohttp session.

    Info and error messages reach observers through a handler on the
    ``weatherreport`` logger. The logger's level is left to the caller;
    set it to INFO to deliver info messages.
    """

    def __init__(
        self,
        config: WeatherReportConfig,
        *,
        store: KeyValueStore | None = None,
        weather_source: WeatherSource | None = None,
        sensor: LocationSensor | None = None,
        geocoder: Geocoder | None = None,
        session: aiohttp.ClientSession | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._config = config
        if store is None:
            store = JsonFileStore(config.state_path) if config.state_path else MemoryStore()
        self._store = store
        self._weather_source = weather_source
        self._sensor = sensor
        self._geocoder = geocoder
        self._external_session = session is not None
        self._http_session = session
        self._resolver: PlaceResolver | None = None
        self._sleep = sleep
        self._observers: list[SharedDataObserver] = []
        self._log_handler: ObserverLogHandler | None = None
        self._refresh_task: asyncio.Task[None] | None = None
        self._refresh_interval_s: float | None = None
        self._weather_generation = 0
        self._place_updates = 0
        self._open = False

        self.state = PersistedState(refresh_interval_minutes=config.refresh_interval_minutes)
        self.weather_items: list[DisplayRow] = []

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SharedData:
        if self._weather_source is None or self._sensor is None or self._geocoder is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            transport = HttpTransport(
                self._http_session,
                user_agent=self._config.user_agent,
                timeout=self._config.request_timeout,
            )
            if self._weather_source is None:
                self._weather_source = ForecastIOSource(self._config, transport)
            if self._geocoder is None:
                self._geocoder = NominatimGeocoder(self._config, transport)
            if self._sensor is None:
                self._sensor = GeoIpLocationSensor(self._config, transport)

        self._resolver = PlaceResolver(self._sensor, self._geocoder, self.on_place_resolved)
        self._install_log_handler()
        self._open = True
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self._open = False
        task = self._refresh_task
        self._refresh_task = None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if self._sensor is not None:
            self._sensor.stop()
        self._remove_log_handler()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    def _install_log_handler(self) -> None:
        # Records below the logger's configured level never reach observers.
        self._log_handler = ObserverLogHandler(lambda: self._observers)
        logging.getLogger(_PACKAGE_LOGGER).addHandler(self._log_handler)

    def _remove_log_handler(self) -> None:
        package_logger = logging.getLogger(_PACKAGE_LOGGER)
        if self._log_handler is not None:
            package_logger.removeHandler(self._log_handler)
            self._log_handler = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_open(self) -> PlaceResolver:
        if not self._open or self._resolver is None:
            raise WeatherReportError("SharedData not initialized. Use 'async with SharedData(...)'")
        return self._resolver

    def _require_weather_source(self) -> WeatherSource:
        self._require_open()
        if self._weather_source is None:
            raise WeatherReportError("SharedData has no weather source")
        return self._weather_source

    def _notify_place(self, place: Place | None) -> None:
        for observer in list(self._observers):
            try:
                observer.on_place_changed(place)
            except Exception:
                _logger.debug("on_place_changed observer failed", exc_info=True)

    def _notify_weather(self, rows: Sequence[DisplayRow]) -> None:
        for observer in list(self._observers):
            try:
                observer.on_weather_changed(list(rows))
            except Exception:
                _logger.debug("on_weather_changed observer failed", exc_info=True)

    async def _run_resolution(self, resolution: Awaitable[None]) -> None:
        updates = self._place_updates
        try:
            await resolution
        except Exception as exc:
            _logger.debug("Place resolution raised", exc_info=True)
            if self._place_updates != updates:
                # The result was already applied; only the follow-up failed.
                _logger.error("Place update failed: %s", exc)
                return
            await self.on_place_resolved(None, f"Place resolution failed: {exc}")

    def _ensure_refresh_timer(self) -> None:
        if self._refresh_task is not None or not self._open:
            return
        interval = float(self.state.refresh_interval_minutes) * 60.0
        self._refresh_interval_s = interval
        self._refresh_task = asyncio.get_running_loop().create_task(
            self._refresh_loop(interval),
            name="weatherreport-refresh",
        )

    async def _refresh_loop(self, interval: float) -> None:
        while True:
            await self._sleep(interval)
            _logger.debug("Weather refresh timer fired")
            await self.refresh_weather()

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def config(self) -> WeatherReportConfig:
        return self._config

    @property
    def observers(self) -> tuple[SharedDataObserver, ...]:
        return tuple(self._observers)

    @property
    def weather_source(self) -> WeatherSource | None:
        return self._weather_source

    @property
    def refresh_interval_seconds(self) -> float | None:
        """Period of the running refresh timer, ``None`` before the first refresh."""
        return self._refresh_interval_s

    def register(self, observer: SharedDataObserver) -> None:
        """Add *observer*; it stays registered for the lifetime of this instance."""
        self._observers.append(observer)

    async def load(self) -> None:
        """Restore the saved state and replay it as a place update.

        A missing or malformed blob leaves the current (default) state in
        place; neither is reported as an error.
        """
        self._require_open()
        try:
            blob = self._store.get(STATE_KEY)
        except PersistenceError as exc:
            _logger.warning("Could not read saved state: %s", exc)
            return
        if blob is None:
            _logger.info("Saved state data not found.")
            return
        state = PersistedState.from_blob(blob)
        if state is None:
            _logger.warning("Ignored bad saved state data.")
            return

        _logger.debug("Loaded saved data.")
        self.state = state
        await self.on_place_resolved(state.place, None)

    def save(self) -> None:
        """Write the current state under the state key."""
        try:
            self._store.set(STATE_KEY, self.state.to_blob())
        except PersistenceError as exc:
            _logger.error("Could not save state: %s", exc)
        except Exception as exc:
            _logger.error("Could not save state: %s", exc)
            _logger.debug("Store traceback", exc_info=True)

    async def set_place_to_search(self, text: str) -> None:
        """Clear the current place and resolve *text* by forward geocoding."""
        resolver = self._require_open()
        self.state = self.state.model_copy(update={"place": None})
        await self._run_resolution(resolver.resolve_by_name(text))

    async def set_place_to_current(self) -> None:
        """Resolve the sensor's current position; the old place stays until then."""
        resolver = self._require_open()
        await self._run_resolution(resolver.resolve_current())

    async def on_place_resolved(self, place: Place | None, error: str | None) -> None:
        """Apply a place resolution result and refresh the weather.

        A failed resolution clears the place and the weather coordinate but
        still triggers one refresh, so observers see an empty weather list.
        """
        source = self._require_weather_source()
        self._place_updates += 1
        self.state = self.state.model_copy(update={"place": place})
        self._notify_place(place)
        self.save()
        if place is not None:
            _logger.debug("Set place to %s", place.short_name)
        else:
            _logger.error("%s", error or UNKNOWN_PLACE_ERROR)
        source.coordinate = place.coordinate if place is not None else None
        await self.refresh_weather()

    async def refresh_weather(self) -> None:
        """Fetch conditions for the current coordinate and notify observers.

        Only the most recently started fetch may publish; a fetch that
        completes after a newer one was started is discarded.
        """
        source = self._require_weather_source()
        self._ensure_refresh_timer()
        self._weather_generation += 1
        generation = self._weather_generation

        _logger.debug("Requesting weather...")
        try:
            rows = await source.fetch_conditions()
        except Exception as exc:
            _logger.error("Weather source failed: %s", exc)
            _logger.debug("Weather source traceback", exc_info=True)
            rows = []

        if generation != self._weather_generation:
            _logger.debug(
                "Discarding superseded weather result (request %d, latest %d)",
                generation,
                self._weather_generation,
            )
            return
        self.weather_items = list(rows)
        _logger.debug("Received weather data.")
        self._notify_weather(self.weather_items)
