"""Key/value persistence for the shared state blob."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from weatherreport.exceptions import PersistenceError

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal string store; values are opaque blobs."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Process-local store. Used when no state path is configured."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFileStore:
    """Store backed by one JSON object on disk.

    The file is re-read on every ``get`` and replaced atomically on every
    ``set``. A missing or unreadable file behaves like an empty store.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise PersistenceError(f"Cannot read {self._path}: {exc}") from exc
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            _logger.warning("Ignoring corrupt store file %s", self._path)
            return {}
        if not isinstance(data, dict):
            _logger.warning("Ignoring store file %s: top level is not an object", self._path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        values = self._read()
        values[key] = value
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=self._path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(values, handle, indent=2, sort_keys=True)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise PersistenceError(f"Cannot write {self._path}: {exc}") from exc
