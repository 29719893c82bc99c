"""Persisted state model."""

from __future__ import annotations

import logging

from pydantic import Field, ValidationError

from weatherreport._constants import DEFAULT_REFRESH_INTERVAL_MINUTES
from weatherreport.models._base import WeatherBaseModel
from weatherreport.models.place import Place

_logger = logging.getLogger(__name__)


class PersistedState(WeatherBaseModel):
    """State that survives a restart.

    Parameters
    ----------
    place : Place or None
        The last resolved place, ``None`` if none was resolved or the
        last resolution failed.
    refresh_interval_minutes : int
        Period of the recurring weather refresh.
    """

    place: Place | None = None
    refresh_interval_minutes: int = Field(default=DEFAULT_REFRESH_INTERVAL_MINUTES, ge=1)

    def to_blob(self) -> str:
        """Serialize to the opaque string stored under the state key."""
        return self.model_dump_json(by_alias=True, exclude_none=True)

    @classmethod
    def from_blob(cls, blob: str | bytes | None) -> PersistedState | None:
        """Decode a stored blob; ``None`` when it is missing or malformed."""
        if blob is None:
            return None
        try:
            return cls.model_validate_json(blob)
        except ValidationError as exc:
            _logger.debug("Saved state failed validation: %s", exc)
            return None
