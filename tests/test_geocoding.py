from __future__ import annotations

import asyncio

import pytest
from fakes import FakeTransport

from weatherreport.config import WeatherReportConfig
from weatherreport.exceptions import GeocodingError, TransportError
from weatherreport.location import GeoIpLocationSensor, NominatimGeocoder, StaticLocationSensor
from weatherreport.models.place import Coordinate

_GOOGLEPLEX = {
    "lat": "37.4224",
    "lon": "-122.0842",
    "name": "",
    "display_name": "Google Building 40, 1600, Amphitheatre Parkway, Mountain View, California, 94043, United States",
    "address": {
        "house_number": "1600",
        "road": "Amphitheatre Parkway",
        "town": "Mountain View",
        "state": "California",
        "country": "United States",
        "country_code": "us",
        "postcode": "94043",
    },
}


def _geocoder(transport: FakeTransport) -> NominatimGeocoder:
    return NominatimGeocoder(WeatherReportConfig(geocoder_base_url="https://geo.example/"), transport)


@pytest.mark.asyncio
async def test_geocode_maps_nominatim_address() -> None:
    transport = FakeTransport(responses=[[_GOOGLEPLEX, {"lat": "1", "lon": "2", "name": "Elsewhere"}]])

    places = await _geocoder(transport).geocode("1600 Amphitheatre")

    url, params = transport.calls[0]
    assert url == "https://geo.example/search"
    assert params is not None
    assert params["q"] == "1600 Amphitheatre"
    assert params["format"] == "jsonv2"
    assert params["addressdetails"] == "1"

    assert len(places) == 2
    first = places[0]
    assert first.name is None
    assert first.short_name == "Mountain View"
    assert first.country_code == "US"
    assert first.one_line_address == "1600 Amphitheatre Parkway, Mountain View, CA, US 94043"
    assert first.coordinate == Coordinate(latitude=37.4224, longitude=-122.0842)
    assert places[1].short_name == "Elsewhere"


@pytest.mark.asyncio
async def test_geocode_skips_invalid_candidates() -> None:
    transport = FakeTransport(responses=[["junk", {"lat": "95", "lon": "0"}, _GOOGLEPLEX]])

    places = await _geocoder(transport).geocode("anything")

    assert [place.city for place in places] == ["Mountain View"]


@pytest.mark.asyncio
async def test_geocode_empty_result() -> None:
    assert await _geocoder(FakeTransport(responses=[[]])).geocode("nowhere") == []


@pytest.mark.asyncio
async def test_geocode_transport_failure_raises_geocoding_error() -> None:
    transport = FakeTransport(responses=[TransportError("Request timed out")])

    with pytest.raises(GeocodingError, match="Request timed out"):
        await _geocoder(transport).geocode("anything")


@pytest.mark.asyncio
async def test_geocode_unexpected_shape() -> None:
    with pytest.raises(GeocodingError):
        await _geocoder(FakeTransport(responses=[{"error": "bad"}])).geocode("anything")


@pytest.mark.asyncio
async def test_reverse_geocode() -> None:
    transport = FakeTransport(responses=[_GOOGLEPLEX])

    places = await _geocoder(transport).reverse_geocode(Coordinate(latitude=37.4224, longitude=-122.0842))

    url, params = transport.calls[0]
    assert url == "https://geo.example/reverse"
    assert params is not None
    assert params["lat"] == "37.4224"
    assert params["lon"] == "-122.0842"
    assert [place.city for place in places] == ["Mountain View"]


@pytest.mark.asyncio
async def test_reverse_geocode_nothing_found() -> None:
    transport = FakeTransport(responses=[{"error": "Unable to geocode"}])

    assert await _geocoder(transport).reverse_geocode(Coordinate(latitude=0.0, longitude=0.0)) == []


async def _first_report(sensor: GeoIpLocationSensor | StaticLocationSensor) -> tuple[str, object]:
    result: asyncio.Future[tuple[str, object]] = asyncio.get_running_loop().create_future()
    sensor.start(
        lambda locations: result.set_result(("update", list(locations))),
        lambda message: result.set_result(("error", message)),
    )
    return await asyncio.wait_for(result, timeout=1.0)


@pytest.mark.asyncio
async def test_static_sensor_reports_its_coordinate() -> None:
    coordinate = Coordinate(latitude=10.0, longitude=20.0)

    assert await _first_report(StaticLocationSensor(coordinate)) == ("update", [coordinate])


@pytest.mark.asyncio
async def test_static_sensor_stop_before_delivery() -> None:
    delivered: list[object] = []
    sensor = StaticLocationSensor(Coordinate(latitude=10.0, longitude=20.0))

    sensor.start(delivered.append, delivered.append)
    sensor.stop()
    await asyncio.sleep(0)

    assert delivered == []


@pytest.mark.asyncio
async def test_geoip_sensor_success() -> None:
    transport = FakeTransport(responses=[{"status": "success", "lat": 45.52, "lon": -122.68}])
    sensor = GeoIpLocationSensor(WeatherReportConfig(), transport)

    kind, payload = await _first_report(sensor)

    assert kind == "update"
    assert payload == [Coordinate(latitude=45.52, longitude=-122.68)]
    assert transport.calls[0][0] == WeatherReportConfig().geoip_url


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("body", "expected"),
    [
        ({"status": "fail", "message": "private range"}, "GeoIP lookup failed: private range"),
        ({"status": "success"}, "GeoIP lookup returned no coordinates"),
        ({"status": "success", "lat": 123, "lon": 0}, "GeoIP lookup returned invalid coordinates 123.0,0.0"),
        (TransportError("HTTP error 429", status_code=429), "GeoIP lookup failed: HTTP error 429"),
    ],
)
async def test_geoip_sensor_errors(body: object, expected: str) -> None:
    sensor = GeoIpLocationSensor(WeatherReportConfig(), FakeTransport(responses=[body]))

    assert await _first_report(sensor) == ("error", expected)
