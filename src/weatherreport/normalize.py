"""Normalization helpers.

Centralizes defensive parsing of provider payloads, which freely mix real
numbers with numeric strings (``"45.49"``) and placeholders.
"""

from __future__ import annotations

import math
from typing import Any

_PLACEHOLDERS = frozenset({"", "--"})


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip() in _PLACEHOLDERS:
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None
