"""Place resolution: location sensor + geocoder behind one callback."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from weatherreport.exceptions import GeocodingError, LocationSensorError
from weatherreport.location.geocoding import Geocoder
from weatherreport.location.sensor import LocationSensor
from weatherreport.models.place import Coordinate, Place

_logger = logging.getLogger(__name__)

#: Receives exactly one of ``place`` / ``error`` per completed resolution.
PlaceResolvedHandler = Callable[[Place | None, str | None], Awaitable[None]]

LOOKUP_TAG = "Lookup"
REVERSE_TAG = "Reverse"


class PlaceResolver:
    """Resolve the current position or a free-text query to a :class:`Place`.

    Each call to :meth:`resolve_current` or :meth:`resolve_by_name` starts a
    new request and supersedes any still in flight: when an older request
    completes after a newer one was started, its result is discarded instead
    of being reported.
    """

    def __init__(
        self,
        sensor: LocationSensor,
        geocoder: Geocoder,
        on_resolved: PlaceResolvedHandler,
    ) -> None:
        self._sensor = sensor
        self._geocoder = geocoder
        self._on_resolved = on_resolved
        self._generation = 0
        self._pending_fix: asyncio.Future[Sequence[Coordinate]] | None = None

    @property
    def generation(self) -> int:
        """Number of resolutions started so far."""
        return self._generation

    def _begin(self) -> int:
        self._generation += 1
        pending = self._pending_fix
        self._pending_fix = None
        if pending is not None and not pending.done():
            # The waiting resolution wakes up, sees a stale generation and drops out.
            pending.set_exception(LocationSensorError("superseded"))
            self._sensor.stop()
        return self._generation

    async def _report(self, generation: int, place: Place | None, error: str | None) -> None:
        if generation != self._generation:
            _logger.debug(
                "Discarding superseded place result (request %d, latest %d)",
                generation,
                self._generation,
            )
            return
        if place is None and not error:
            error = "unknown error"
        await self._on_resolved(place, None if place is not None else error)

    async def resolve_current(self) -> None:
        """Take one fix from the sensor and reverse geocode it."""
        generation = self._begin()
        loop = asyncio.get_running_loop()
        fix: asyncio.Future[Sequence[Coordinate]] = loop.create_future()

        def _on_update(locations: Sequence[Coordinate]) -> None:
            if not fix.done():
                fix.set_result(list(locations))

        def _on_error(message: str) -> None:
            if not fix.done():
                fix.set_exception(LocationSensorError(message))

        self._pending_fix = fix
        self._sensor.start(_on_update, _on_error)
        try:
            locations = await fix
        except LocationSensorError as exc:
            await self._report(generation, None, str(exc) or "Location sensor failed.")
            return
        finally:
            if self._pending_fix is fix:
                self._pending_fix = None
                self._sensor.stop()

        if not locations:
            await self._report(generation, None, "Received no locations from location sensor.")
            return
        _logger.debug("Received %d location(s) from location sensor.", len(locations))
        _logger.debug("Reverse geocoding location...")
        await self._complete(generation, REVERSE_TAG, self._geocoder.reverse_geocode(locations[0]))

    async def resolve_by_name(self, text: str) -> None:
        """Forward geocode free text; the sensor is not involved."""
        generation = self._begin()
        _logger.debug("Geocoding address '%s'...", text)
        await self._complete(generation, LOOKUP_TAG, self._geocoder.geocode(text))

    async def _complete(self, generation: int, tag: str, lookup: Awaitable[list[Place]]) -> None:
        """Shared geocoder completion: first candidate wins."""
        try:
            placemarks = await lookup
        except GeocodingError as exc:
            description = str(exc)
            await self._report(generation, None, f"{tag} error: {description or 'unknown error'}")
            return

        if placemarks:
            _logger.debug("Received %d placemark(s) from geocoder.", len(placemarks))
            await self._report(generation, placemarks[0], None)
        else:
            await self._report(generation, None, f"{tag} error: bad placemark")
