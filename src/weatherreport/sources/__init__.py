"""Weather sources."""

from weatherreport.sources.base import WeatherSource
from weatherreport.sources.forecast_io import CANNED_CONDITIONS, ForecastIOSource, forecast_rows

__all__ = [
    "CANNED_CONDITIONS",
    "ForecastIOSource",
    "WeatherSource",
    "forecast_rows",
]
