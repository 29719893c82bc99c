"""Weather source capability."""

from __future__ import annotations

import logging

from weatherreport.models.display import DisplayRow
from weatherreport.models.place import Coordinate

_logger = logging.getLogger(__name__)


class WeatherSource:
    """A provider of current-conditions rows for one coordinate.

    The shared state service sets :attr:`coordinate` whenever the place
    changes and awaits :meth:`fetch_conditions` on every refresh.
    Implementations must never raise from :meth:`fetch_conditions`: any
    failure is logged and yields an empty list.
    """

    name = "Weather source"

    def __init__(self) -> None:
        self.coordinate: Coordinate | None = None

    async def fetch_conditions(self) -> list[DisplayRow]:
        _logger.error("%s: implementation is incomplete.", self.name)
        return []
