"""Internal constants shared across the library."""

FORECAST_BASE_URL = "https://api.forecast.io/forecast"
NOMINATIM_BASE_URL = "https://nominatim.openstreetmap.org"
GEOIP_URL = "http://ip-api.com/json/?fields=status,message,lat,lon"
USER_AGENT = "weatherreport/0.1 (+https://pypi.org/project/weatherreport/)"

#: Key under which the persisted state blob is stored.
STATE_KEY = "SavedState"

DEFAULT_REFRESH_INTERVAL_MINUTES = 60

# ------------------------------------------------------------------
# Compass bearings, clockwise from north, 45 degrees apart
# ------------------------------------------------------------------

BEARINGS: tuple[str, ...] = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")

# ------------------------------------------------------------------
# US state (and DC) name -> postal code, keyed by lowercase name
# ------------------------------------------------------------------

STATE_ABBREVIATIONS: dict[str, str] = {
    "alabama": "AL",
    "alaska": "AK",
    "arizona": "AZ",
    "arkansas": "AR",
    "california": "CA",
    "colorado": "CO",
    "connecticut": "CT",
    "delaware": "DE",
    "district of columbia": "DC",
    "florida": "FL",
    "georgia": "GA",
    "hawaii": "HI",
    "idaho": "ID",
    "illinois": "IL",
    "indiana": "IN",
    "iowa": "IA",
    "kansas": "KS",
    "kentucky": "KY",
    "louisiana": "LA",
    "maine": "ME",
    "maryland": "MD",
    "massachusetts": "MA",
    "michigan": "MI",
    "minnesota": "MN",
    "mississippi": "MS",
    "missouri": "MO",
    "montana": "MT",
    "nebraska": "NE",
    "nevada": "NV",
    "new hampshire": "NH",
    "new jersey": "NJ",
    "new mexico": "NM",
    "new york": "NY",
    "north carolina": "NC",
    "north dakota": "ND",
    "ohio": "OH",
    "oklahoma": "OK",
    "oregon": "OR",
    "pennsylvania": "PA",
    "rhode island": "RI",
    "south carolina": "SC",
    "south dakota": "SD",
    "tennessee": "TN",
    "texas": "TX",
    "utah": "UT",
    "vermont": "VT",
    "virginia": "VA",
    "washington": "WA",
    "west virginia": "WV",
    "wisconsin": "WI",
    "wyoming": "WY",
}


def abbreviate_region(region: str) -> str:
    """Return the postal code for a US state name, or *region* unchanged."""
    return STATE_ABBREVIATIONS.get(region.strip().lower(), region)
