from __future__ import annotations

import itertools

import pytest
from pydantic import ValidationError

from weatherreport._constants import abbreviate_region
from weatherreport.models import Coordinate, CurrentConditions, ForecastResponse, PersistedState, Place
from weatherreport.normalize import safe_float, safe_int, safe_str

_COMPONENTS = ("house_number", "street", "city", "region", "country_code", "postal_code")
_SAMPLE = {
    "house_number": "1600",
    "street": "Amphitheatre Pkwy",
    "city": "Mountain View",
    "region": "California",
    "country_code": "US",
    "postal_code": "94043",
}


def test_one_line_address_full() -> None:
    place = Place(**_SAMPLE)
    assert place.one_line_address == "1600 Amphitheatre Pkwy, Mountain View, CA, US 94043"


@pytest.mark.parametrize("present", list(itertools.product((False, True), repeat=len(_COMPONENTS))))
def test_one_line_address_has_clean_separators(present: tuple[bool, ...]) -> None:
    kwargs = {name: _SAMPLE[name] for name, keep in zip(_COMPONENTS, present, strict=True) if keep}
    address = Place(**kwargs).one_line_address

    if not kwargs:
        assert address == ""
        return
    assert address == address.strip()
    assert not address.startswith(",")
    assert not address.endswith(",")
    assert ", ," not in address
    assert ",," not in address
    assert "  " not in address


def test_one_line_address_ignores_blank_components() -> None:
    place = Place(house_number="   ", street="Main St", city="Springfield")
    assert place.one_line_address == "Main St, Springfield"


def test_street_without_number_leads_address() -> None:
    place = Place(street="Main St", postal_code="12345")
    assert place.one_line_address == "Main St 12345"


@pytest.mark.parametrize(
    ("region", "expected"),
    [
        ("California", "CA"),
        ("CALIFORNIA", "CA"),
        ("new york", "NY"),
        ("District of Columbia", "DC"),
        ("Ontario", "Ontario"),
        ("Bavaria", "Bavaria"),
    ],
)
def test_region_abbreviation(region: str, expected: str) -> None:
    assert abbreviate_region(region) == expected


def test_short_name_fallbacks() -> None:
    assert Place(name="Googleplex", city="Mountain View").short_name == "Googleplex"
    assert Place(city="Mountain View", region="California").short_name == "Mountain View"
    assert Place(street="Main St", region="Oregon").short_name == "Main St, OR"


def test_coordinate_range_is_validated() -> None:
    with pytest.raises(ValidationError):
        Coordinate(latitude=91.0, longitude=0.0)
    with pytest.raises(ValidationError):
        Coordinate(latitude=0.0, longitude=-180.5)
    assert str(Coordinate(latitude=37.5, longitude=-122.25)) == "37.5,-122.25"


def test_persisted_state_round_trip() -> None:
    state = PersistedState(
        place=Place(
            **_SAMPLE,
            name="Googleplex",
            country="United States",
            coordinate=Coordinate(latitude=37.422, longitude=-122.084),
        ),
        refresh_interval_minutes=15,
    )

    restored = PersistedState.from_blob(state.to_blob())

    assert restored == state
    assert restored is not None
    assert restored.place is not None
    assert restored.place.coordinate == Coordinate(latitude=37.422, longitude=-122.084)
    assert restored.refresh_interval_minutes == 15


def test_persisted_state_blob_uses_camel_case() -> None:
    blob = PersistedState(place=Place(country_code="US"), refresh_interval_minutes=30).to_blob()
    assert '"refreshIntervalMinutes":30' in blob
    assert '"countryCode":"US"' in blob


@pytest.mark.parametrize(
    "blob",
    [
        None,
        "",
        "{not json",
        "[]",
        '{"refreshIntervalMinutes": 0}',
        '{"refreshIntervalMinutes": "often"}',
        '{"place": {"coordinate": {"latitude": 123, "longitude": 0}}}',
    ],
)
def test_persisted_state_rejects_malformed_blob(blob: str | None) -> None:
    assert PersistedState.from_blob(blob) is None


def test_persisted_state_defaults() -> None:
    state = PersistedState()
    assert state.place is None
    assert state.refresh_interval_minutes == 60


def test_current_conditions_coerces_numeric_strings() -> None:
    conditions = CurrentConditions.model_validate(
        {
            "temperature": "45.49",
            "windBearing": 33,
            "time": "1419783003",
            "humidity": "--",
            "summary": "  Clear  ",
            "pressure": "n/a",
        }
    )

    assert conditions.temperature == 45.49
    assert conditions.wind_bearing == 33.0
    assert conditions.time == 1419783003
    assert conditions.humidity is None
    assert conditions.summary == "Clear"
    assert conditions.pressure is None
    assert conditions.raw["temperature"] == "45.49"


def test_forecast_response_without_current_block() -> None:
    assert ForecastResponse.model_validate({"latitude": 1, "longitude": 2}).currently is None
    assert ForecastResponse.model_validate({"currently": "nope"}).currently is None


def test_safe_normalizers() -> None:
    assert safe_float("1.5") == 1.5
    assert safe_float(True) is None
    assert safe_float("--") is None
    assert safe_float(float("nan")) is None
    assert safe_int("12.9") == 12
    assert safe_str("  ") is None
    assert safe_str(5) == "5"
