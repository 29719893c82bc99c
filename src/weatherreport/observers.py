"""Observer interface and log fan-out.

Place and weather notifications go to every registered observer. Log
messages at INFO and above are forwarded as ``on_info`` / ``on_error`` only
to observers whose ``is_active()`` returns true at dispatch time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Protocol, runtime_checkable

from weatherreport.models.display import DisplayRow
from weatherreport.models.place import Place

_logger = logging.getLogger(__name__)


@runtime_checkable
class SharedDataObserver(Protocol):
    def on_place_changed(self, place: Place | None) -> None:
        ...

    def on_weather_changed(self, rows: Sequence[DisplayRow]) -> None:
        ...

    def on_info(self, message: str) -> None:
        ...

    def on_error(self, message: str) -> None:
        ...

    def is_active(self) -> bool:
        ...


class ObserverBase:
    """No-op observer; subclasses override the hooks they care about."""

    active: bool = True

    def on_place_changed(self, place: Place | None) -> None:
        pass

    def on_weather_changed(self, rows: Sequence[DisplayRow]) -> None:
        pass

    def on_info(self, message: str) -> None:
        pass

    def on_error(self, message: str) -> None:
        pass

    def is_active(self) -> bool:
        return self.active


class ObserverLogHandler(logging.Handler):
    """Forward log records to the currently active observers.

    WARNING and INFO records become ``on_info``; ERROR and above become
    ``on_error``. DEBUG records are never forwarded.
    """

    def __init__(self, observers: Callable[[], Sequence[SharedDataObserver]]) -> None:
        super().__init__(level=logging.INFO)
        self._observers = observers

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
        except Exception:
            self.handleError(record)
            return
        is_error = record.levelno >= logging.ERROR
        for observer in list(self._observers()):
            try:
                if not observer.is_active():
                    continue
                if is_error:
                    observer.on_error(message)
                else:
                    observer.on_info(message)
            except Exception:
                _logger.debug("Observer log callback failed", exc_info=True)
