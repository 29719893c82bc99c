"""Coordinate and resolved place models."""

from __future__ import annotations

from pydantic import Field

from weatherreport._constants import abbreviate_region
from weatherreport.models._base import WeatherBaseModel


class Coordinate(WeatherBaseModel):
    """A point on the globe in signed decimal degrees."""

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)

    def __str__(self) -> str:
        return f"{self.latitude},{self.longitude}"


class Place(WeatherBaseModel):
    """A resolved, human-addressable location.

    Parameters
    ----------
    name : str or None
        Free-text name reported by the geocoder (a landmark, a street
        address or a city).
    house_number, street, city, region, country, country_code, postal_code
        Structured address components; any may be absent.
    coordinate : Coordinate or None
        Geocoded position of the place.
    """

    name: str | None = None
    house_number: str | None = None
    street: str | None = None
    city: str | None = None
    region: str | None = None
    country: str | None = None
    country_code: str | None = None
    postal_code: str | None = None
    coordinate: Coordinate | None = None

    @property
    def short_name(self) -> str:
        """Best short label for the place."""
        return self.name or self.city or self.one_line_address

    @property
    def one_line_address(self) -> str:
        """Present address components joined on one line.

        Street and postal code attach to the previous component with a
        space; everything else is comma separated. Regions matching a US
        state name are abbreviated to the postal code.
        """
        region = abbreviate_region(self.region) if self.region else None
        parts: tuple[tuple[str | None, bool], ...] = (
            (self.house_number, True),
            (self.street, False),
            (self.city, True),
            (region, True),
            (self.country_code, True),
            (self.postal_code, False),
        )
        address = ""
        for value, with_comma in parts:
            text = value.strip() if value else ""
            if not text:
                continue
            if address:
                address += ", " if with_comma else " "
            address += text
        return address
