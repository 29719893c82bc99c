from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from weatherreport.models.display import DisplayRow
from weatherreport.models.place import Coordinate, Place
from weatherreport.observers import ObserverBase
from weatherreport.sources.base import WeatherSource

MOUNTAIN_VIEW = Place(
    name="Googleplex",
    house_number="1600",
    street="Amphitheatre Pkwy",
    city="Mountain View",
    region="California",
    country="United States",
    country_code="US",
    postal_code="94043",
    coordinate=Coordinate(latitude=37.422, longitude=-122.084),
)

PORTLAND = Place(
    city="Portland",
    region="Oregon",
    country_code="US",
    coordinate=Coordinate(latitude=45.52, longitude=-122.68),
)


@dataclass
class FakeTransport:
    """Queue of canned bodies; exception instances are raised instead."""

    responses: list[Any] = field(default_factory=list)
    calls: list[tuple[str, dict[str, str] | None]] = field(default_factory=list)

    async def get_json(self, url: str, params: Mapping[str, str] | None = None) -> Any:
        self.calls.append((url, dict(params) if params is not None else None))
        if not self.responses:
            raise AssertionError(f"unexpected request to {url}")
        outcome = self.responses.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@dataclass
class FakeGeocoder:
    """Answers by query text; unknown text yields ``default``.

    An :class:`asyncio.Event` in ``gates`` holds that query until set.
    """

    answers: dict[str, list[Place] | Exception] = field(default_factory=dict)
    default: list[Place] | Exception = field(default_factory=list)
    reverse_answer: list[Place] | Exception = field(default_factory=list)
    gates: dict[str, asyncio.Event] = field(default_factory=dict)
    forward_calls: list[str] = field(default_factory=list)
    reverse_calls: list[Coordinate] = field(default_factory=list)

    async def geocode(self, text: str) -> list[Place]:
        self.forward_calls.append(text)
        gate = self.gates.get(text)
        if gate is not None:
            await gate.wait()
        return self._unwrap(self.answers.get(text, self.default))

    async def reverse_geocode(self, coordinate: Coordinate) -> list[Place]:
        self.reverse_calls.append(coordinate)
        return self._unwrap(self.reverse_answer)

    @staticmethod
    def _unwrap(answer: list[Place] | Exception) -> list[Place]:
        if isinstance(answer, Exception):
            raise answer
        return list(answer)


@dataclass
class FakeSensor:
    locations: list[Coordinate] = field(default_factory=list)
    error: str | None = None
    silent: bool = False
    started: int = 0
    stopped: int = 0

    def start(self, on_update: Any, on_error: Any) -> None:
        self.started += 1
        if self.silent:
            return
        loop = asyncio.get_running_loop()
        if self.error is not None:
            loop.call_soon(on_error, self.error)
        else:
            loop.call_soon(on_update, list(self.locations))

    def stop(self) -> None:
        self.stopped += 1


class FakeWeatherSource(WeatherSource):
    """Records the coordinate of every fetch.

    Each fetch pops the next entry of ``gates`` (if any) and waits on it,
    then pops the next entry of ``results`` or falls back to ``rows``.
    """

    name = "Fake weather"

    def __init__(self, rows: list[DisplayRow] | None = None) -> None:
        super().__init__()
        self.rows = rows if rows is not None else [DisplayRow("Summary", "Clear", "clear-day")]
        self.results: list[list[DisplayRow] | Exception] = []
        self.gates: list[asyncio.Event | None] = []
        self.calls: list[Coordinate | None] = []

    async def fetch_conditions(self) -> list[DisplayRow]:
        self.calls.append(self.coordinate)
        gate = self.gates.pop(0) if self.gates else None
        if gate is not None:
            await gate.wait()
        if self.results:
            result = self.results.pop(0)
            if isinstance(result, Exception):
                raise result
            return list(result)
        return list(self.rows) if self.coordinate is not None else []


class RecordingObserver(ObserverBase):
    def __init__(self, *, active: bool = True) -> None:
        self.active = active
        self.events: list[tuple[str, Any]] = []

    def on_place_changed(self, place: Place | None) -> None:
        self.events.append(("place", place))

    def on_weather_changed(self, rows: Any) -> None:
        self.events.append(("weather", list(rows)))

    def on_info(self, message: str) -> None:
        self.events.append(("info", message))

    def on_error(self, message: str) -> None:
        self.events.append(("error", message))

    def of(self, kind: str) -> list[Any]:
        return [payload for event, payload in self.events if event == kind]


@dataclass
class ManualSleep:
    """Stand-in for ``asyncio.sleep`` that only returns when fired."""

    intervals: list[float] = field(default_factory=list)
    _waiters: list[asyncio.Future[None]] = field(default_factory=list)

    async def __call__(self, seconds: float) -> None:
        self.intervals.append(seconds)
        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        await waiter

    def fire(self) -> None:
        self._waiters.pop(0).set_result(None)


async def settle(rounds: int = 5) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)
