"""Helpers for safe debug logging.

The weather provider carries its API key in the URL path, so request URLs
must be scrubbed before they reach a log record.
"""

from __future__ import annotations

from collections.abc import Iterable

REDACTED = "<redacted>"


def redact_url(url: str, secrets: Iterable[str | None]) -> str:
    """Return *url* with every non-empty secret replaced."""
    redacted = url
    for secret in secrets:
        if secret:
            redacted = redacted.replace(secret, REDACTED)
    return redacted


def redact_message(message: str, secrets: Iterable[str | None], *, max_length: int = 512) -> str:
    """Redact *message* and truncate it for a single log line."""
    text = redact_url(message, secrets)
    if len(text) > max_length:
        return f"{text[:max_length]}…<truncated>"
    return text
