"""Data models for places, provider payloads and persisted state."""

from weatherreport.models._base import WeatherBaseModel
from weatherreport.models.conditions import CurrentConditions, ForecastResponse
from weatherreport.models.display import DisplayRow
from weatherreport.models.place import Coordinate, Place
from weatherreport.models.state import PersistedState

__all__ = [
    "Coordinate",
    "CurrentConditions",
    "DisplayRow",
    "ForecastResponse",
    "PersistedState",
    "Place",
    "WeatherBaseModel",
]
