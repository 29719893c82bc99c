"""Forward and reverse geocoding.

Endpoints (Nominatim, https://nominatim.org/release-docs/latest/api/):
  - /search  (free text -> candidates)
  - /reverse (coordinate -> at most one candidate)
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from weatherreport._transport import Transport
from weatherreport.config import WeatherReportConfig
from weatherreport.exceptions import GeocodingError, TransportError
from weatherreport.models.place import Coordinate, Place
from weatherreport.normalize import safe_float, safe_str

_logger = logging.getLogger(__name__)

_SEARCH_LIMIT = 5


class Geocoder(Protocol):
    """Geocoding capability used by the place resolver.

    Both calls return the candidates in provider order (possibly none) and
    raise :class:`GeocodingError` when the provider itself fails.
    """

    async def geocode(self, text: str) -> list[Place]:
        ...

    async def reverse_geocode(self, coordinate: Coordinate) -> list[Place]:
        ...


class NominatimAddress(BaseModel):
    """The ``address`` object of a Nominatim result (``addressdetails=1``)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    house_number: str | None = None
    road: str | None = Field(default=None, validation_alias=AliasChoices("road", "pedestrian", "footway"))
    city: str | None = Field(
        default=None,
        validation_alias=AliasChoices("city", "town", "village", "hamlet", "municipality"),
    )
    state: str | None = None
    country: str | None = None
    country_code: str | None = None
    postcode: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> str | None:
        return safe_str(value)


class NominatimResult(BaseModel):
    """One Nominatim ``jsonv2`` result."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    lat: float | None = None
    lon: float | None = None
    name: str | None = None
    display_name: str | None = None
    address: NominatimAddress = Field(default_factory=NominatimAddress)

    @field_validator("lat", "lon", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("name", "display_name", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("address", mode="before")
    @classmethod
    def _require_mapping(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}

    def to_place(self) -> Place:
        coordinate = None
        if self.lat is not None and self.lon is not None:
            coordinate = Coordinate(latitude=self.lat, longitude=self.lon)
        address = self.address
        return Place(
            name=self.name,
            house_number=address.house_number,
            street=address.road,
            city=address.city,
            region=address.state,
            country=address.country,
            country_code=address.country_code.upper() if address.country_code else None,
            postal_code=address.postcode,
            coordinate=coordinate,
        )


def _parse_places(items: list[Any]) -> list[Place]:
    places: list[Place] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            places.append(NominatimResult.model_validate(item).to_place())
        except ValidationError:
            _logger.debug("Skipping unparsable geocoder result", exc_info=True)
    return places


class NominatimGeocoder:
    """Geocoder backed by an OpenStreetMap Nominatim instance."""

    def __init__(self, config: WeatherReportConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    def _url(self, endpoint: str) -> str:
        return f"{self._config.geocoder_base_url.rstrip('/')}/{endpoint}"

    async def _get(self, endpoint: str, params: dict[str, str]) -> Any:
        try:
            return await self._transport.get_json(self._url(endpoint), params=params)
        except TransportError as exc:
            raise GeocodingError(str(exc)) from exc

    async def geocode(self, text: str) -> list[Place]:
        body = await self._get(
            "search",
            {"q": text, "format": "jsonv2", "addressdetails": "1", "limit": str(_SEARCH_LIMIT)},
        )
        if not isinstance(body, list):
            raise GeocodingError("unexpected search response")
        return _parse_places(body)

    async def reverse_geocode(self, coordinate: Coordinate) -> list[Place]:
        body = await self._get(
            "reverse",
            {
                "lat": str(coordinate.latitude),
                "lon": str(coordinate.longitude),
                "format": "jsonv2",
                "addressdetails": "1",
            },
        )
        if not isinstance(body, dict):
            raise GeocodingError("unexpected reverse response")
        # Nominatim answers "nothing here" with 200 and an error member.
        if "error" in body:
            _logger.debug("Reverse geocoder found nothing: %s", body.get("error"))
            return []
        return _parse_places([body])
