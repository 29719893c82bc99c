"""weatherreport - Async place and current-conditions tracker."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("weatherreport")
except PackageNotFoundError:
    __version__ = "0+local"
from weatherreport.config import WeatherReportConfig
from weatherreport.exceptions import (
    GeocodingError,
    LocationSensorError,
    PersistenceError,
    TransportError,
    WeatherReportConfigError,
    WeatherReportError,
)
from weatherreport.formatting import format_double
from weatherreport.location import (
    GeoIpLocationSensor,
    Geocoder,
    LocationSensor,
    NominatimGeocoder,
    PlaceResolver,
    StaticLocationSensor,
)
from weatherreport.models import (
    Coordinate,
    CurrentConditions,
    DisplayRow,
    ForecastResponse,
    PersistedState,
    Place,
)
from weatherreport.observers import ObserverBase, SharedDataObserver
from weatherreport.shared import SharedData
from weatherreport.sources import ForecastIOSource, WeatherSource
from weatherreport.storage import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "__version__",
    "Coordinate",
    "CurrentConditions",
    "DisplayRow",
    "ForecastIOSource",
    "ForecastResponse",
    "GeoIpLocationSensor",
    "Geocoder",
    "GeocodingError",
    "JsonFileStore",
    "KeyValueStore",
    "LocationSensor",
    "LocationSensorError",
    "MemoryStore",
    "NominatimGeocoder",
    "ObserverBase",
    "PersistedState",
    "PersistenceError",
    "Place",
    "PlaceResolver",
    "SharedData",
    "SharedDataObserver",
    "StaticLocationSensor",
    "TransportError",
    "WeatherReportConfig",
    "WeatherReportConfigError",
    "WeatherReportError",
    "WeatherSource",
    "format_double",
]
