"""Display row value type."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DisplayRow:
    """One label/value unit shown to the user.

    ``symbol`` is an icon key (e.g. ``"partly-cloudy-day"``) or ``None``.
    Rows are produced in display order by :func:`weatherreport.formatting.build_rows`.
    """

    label: str
    text: str
    symbol: str | None = None
