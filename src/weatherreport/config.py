"""Client configuration for weatherreport."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from weatherreport._constants import (
    DEFAULT_REFRESH_INTERVAL_MINUTES,
    FORECAST_BASE_URL,
    GEOIP_URL,
    NOMINATIM_BASE_URL,
    USER_AGENT,
)
from weatherreport.exceptions import WeatherReportConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class WeatherReportConfig:
    """Service configuration.

    Parameters
    ----------
    forecast_api_key : str
        Forecast.io (Dark Sky v2 API) key. Required unless
        ``use_canned_data`` is set.
    forecast_base_url : str
        Weather provider base URL; requests go to
        ``{forecast_base_url}/{api_key}/{lat},{lon}``.
    geocoder_base_url : str
        Nominatim instance used for forward and reverse geocoding.
    geoip_url : str
        ip-api style endpoint used by the GeoIP location sensor.
    user_agent : str
        User-Agent header sent with every request. Nominatim rejects
        requests without an identifying agent.
    state_path : str or None
        JSON file backing the persisted state. ``None`` keeps state in
        memory only.
    refresh_interval_minutes : int
        Default weather refresh period for a fresh (never saved) state.
        A restored state carries its own interval.
    request_timeout : float
        Total per-request timeout in seconds.
    use_canned_data : bool
        Format a fixed conditions record instead of calling the weather
        provider. Useful offline and in tests.
    """

    forecast_api_key: str = ""
    forecast_base_url: str = FORECAST_BASE_URL
    geocoder_base_url: str = NOMINATIM_BASE_URL
    geoip_url: str = GEOIP_URL
    user_agent: str = USER_AGENT
    state_path: str | None = None
    refresh_interval_minutes: int = DEFAULT_REFRESH_INTERVAL_MINUTES
    request_timeout: float = 10.0
    use_canned_data: bool = False

    def __post_init__(self) -> None:
        if self.refresh_interval_minutes < 1:
            raise WeatherReportConfigError(
                f"refresh_interval_minutes must be >= 1, got {self.refresh_interval_minutes}"
            )
        if self.request_timeout <= 0:
            raise WeatherReportConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    @classmethod
    def from_env(cls, **overrides: Any) -> WeatherReportConfig:
        """Create configuration from ``WEATHERREPORT_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "WEATHERREPORT_FORECAST_API_KEY": "forecast_api_key",
            "WEATHERREPORT_FORECAST_BASE_URL": "forecast_base_url",
            "WEATHERREPORT_GEOCODER_BASE_URL": "geocoder_base_url",
            "WEATHERREPORT_GEOIP_URL": "geoip_url",
            "WEATHERREPORT_USER_AGENT": "user_agent",
            "WEATHERREPORT_STATE_PATH": "state_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        interval_env = env.get("WEATHERREPORT_REFRESH_INTERVAL_MINUTES")
        if interval_env is not None and "refresh_interval_minutes" not in overrides:
            try:
                config_kwargs["refresh_interval_minutes"] = int(interval_env)
            except ValueError as exc:
                raise WeatherReportConfigError(
                    f"WEATHERREPORT_REFRESH_INTERVAL_MINUTES is not an integer: {interval_env!r}"
                ) from exc

        timeout_env = env.get("WEATHERREPORT_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise WeatherReportConfigError(
                    f"WEATHERREPORT_REQUEST_TIMEOUT is not a number: {timeout_env!r}"
                ) from exc

        if "use_canned_data" not in overrides:
            config_kwargs["use_canned_data"] = _env_bool(env.get("WEATHERREPORT_USE_CANNED_DATA"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
