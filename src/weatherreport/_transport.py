"""HTTP transport returning decoded JSON bodies."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from weatherreport.exceptions import TransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the provider modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, url: str, params: Mapping[str, str] | None = None) -> Any:
        ...


class HttpTransport:
    """GET-only JSON transport over a shared aiohttp session."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        user_agent: str,
        timeout: float,
    ) -> None:
        self._http = http_session
        self._headers = {
            "accept": "application/json",
            "user-agent": user_agent,
        }
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def get_json(self, url: str, params: Mapping[str, str] | None = None) -> Any:
        """Issue a single GET and decode the JSON body.

        Raises
        ------
        TransportError
            On network failure, timeout, non-200 status or a body that is
            not JSON. ``url`` on the error is the request URL as given,
            so callers holding secrets in the path should redact it.
        """
        try:
            async with self._http.get(url, params=params, headers=self._headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise TransportError(
                        f"HTTP error {resp.status}",
                        status_code=resp.status,
                        url=url,
                    )
        except TransportError:
            raise
        except asyncio.TimeoutError as exc:
            raise TransportError("Request timed out", url=url) from exc
        except aiohttp.ClientError as exc:
            raise TransportError(f"Request failed: {exc}", url=url) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise TransportError(f"Invalid JSON: {text[:200]}", status_code=200, url=url) from exc
