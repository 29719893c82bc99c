"""Forecast.io current conditions models.

The provider serializes several numeric fields as strings; each field is
coerced once here so formatting works on typed optionals only.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator, model_validator

from weatherreport.models._base import WeatherBaseModel
from weatherreport.normalize import safe_float, safe_int, safe_str


class CurrentConditions(WeatherBaseModel):
    """The ``currently`` data block.

    Numeric fields are ``None`` when the value is absent or unparseable.
    Ratios (``humidity``, ``cloud_cover``, ``precip_probability``) are in
    ``0..1``; ``time`` is unix seconds.
    """

    summary: str | None = None
    icon: str | None = None
    time: int | None = None
    temperature: float | None = None
    apparent_temperature: float | None = None
    precip_type: str | None = None
    precip_probability: float | None = None
    precip_intensity: float | None = None
    wind_speed: float | None = None
    wind_bearing: float | None = None
    humidity: float | None = None
    pressure: float | None = None
    cloud_cover: float | None = None
    visibility: float | None = None
    dew_point: float | None = None
    nearest_storm_distance: float | None = None
    nearest_storm_bearing: float | None = None
    ozone: float | None = None
    raw: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        if isinstance(values, dict) and "raw" not in values:
            values = dict(values)
            values["raw"] = dict(values)
        return values

    @field_validator(
        "temperature",
        "apparent_temperature",
        "precip_probability",
        "precip_intensity",
        "wind_speed",
        "wind_bearing",
        "humidity",
        "pressure",
        "cloud_cover",
        "visibility",
        "dew_point",
        "nearest_storm_distance",
        "nearest_storm_bearing",
        "ozone",
        mode="before",
    )
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("time", mode="before")
    @classmethod
    def _coerce_time(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("summary", "icon", "precip_type", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> str | None:
        return safe_str(value)


class ForecastResponse(WeatherBaseModel):
    """Top-level forecast response; only the current block is consumed."""

    latitude: float | None = None
    longitude: float | None = None
    timezone: str | None = None
    currently: CurrentConditions | None = None

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("currently", mode="before")
    @classmethod
    def _require_mapping(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None
