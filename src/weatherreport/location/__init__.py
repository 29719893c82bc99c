"""Location sensing, geocoding and place resolution."""

from weatherreport.location.geocoding import Geocoder, NominatimGeocoder
from weatherreport.location.resolver import LOOKUP_TAG, REVERSE_TAG, PlaceResolver
from weatherreport.location.sensor import GeoIpLocationSensor, LocationSensor, StaticLocationSensor

__all__ = [
    "GeoIpLocationSensor",
    "Geocoder",
    "LOOKUP_TAG",
    "LocationSensor",
    "NominatimGeocoder",
    "PlaceResolver",
    "REVERSE_TAG",
    "StaticLocationSensor",
]
