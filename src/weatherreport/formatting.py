"""Display row formatting.

Rows are declared as data: a :class:`RowSpec` names the row label, an
optional record field holding the row's icon key, and an ordered tuple of
:class:`SubValue` directives. :func:`build_rows` evaluates the specs against
a decoded record. Sub-values whose source field is absent are skipped, so a
row may end up with empty text; that is not an error.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from weatherreport._constants import BEARINGS
from weatherreport.models.display import DisplayRow

#: Local wall clock, e.g. ``"08:10:03 PST 12-28-2014"``.
TIME_FORMAT = "%H:%M:%S %Z %m-%d-%Y"

Formatter = Callable[[Any, int], str | None]


def format_double(value: float | None, precision: int = 2) -> str | None:
    """Format *value* with *precision* decimals, rounding half up.

    Precision 0 truncates ``value + 0.5`` toward zero. Non-finite values
    format as ``None``.
    """
    if value is None or not math.isfinite(value):
        return None
    if precision == 0:
        return str(int(value + 0.5))
    try:
        quantum = Decimal(1).scaleb(-precision)
        return str(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return f"{value:.{precision}f}"


def bearing_name(degrees: float) -> str:
    """Nearest compass direction; each bucket is centered on its heading."""
    divisor = 360.0 / len(BEARINGS)
    index = math.floor((degrees + divisor / 2.0) / divisor) % len(BEARINGS)
    return BEARINGS[index]


def _with_suffix(suffix: str) -> Formatter:
    def _format(value: Any, precision: int) -> str | None:
        text = format_double(value, precision)
        return None if text is None else f"{text}{suffix}"

    return _format


def as_string(value: Any, _precision: int = 0) -> str | None:
    return None if value is None else str(value)


def as_percent(value: Any, precision: int = 0) -> str | None:
    if value is None:
        return None
    text = format_double(value * 100.0, precision)
    return None if text is None else f"{text}%"


def as_bearing(value: Any, _precision: int = 0) -> str | None:
    if value is None or not math.isfinite(value):
        return None
    return bearing_name(value)


def as_local_time(value: Any, _precision: int = 0) -> str | None:
    if value is None:
        return None
    try:
        moment = datetime.fromtimestamp(value).astimezone()
    except (OverflowError, OSError, ValueError):
        return None
    return moment.strftime(TIME_FORMAT)


as_degrees = _with_suffix("˚")
as_speed = _with_suffix(" MPH")
as_distance = _with_suffix(" miles")
as_pressure = _with_suffix(" millibars")


@dataclass(frozen=True, slots=True)
class SubValue:
    """One formatted value inside a row.

    ``label`` is prefixed inside the value (``"feels like 44˚"``) and
    ``parens`` wraps the labelled value (``"(feels like 44˚)"``).
    """

    field: str
    formatter: Formatter
    label: str | None = None
    parens: bool = False
    precision: int = 0

    def render(self, record: Any) -> str | None:
        text = self.formatter(getattr(record, self.field, None), self.precision)
        if text is None:
            return None
        if self.label:
            text = f"{self.label} {text}"
        if self.parens:
            text = f"({text})"
        return text


@dataclass(frozen=True, slots=True)
class RowSpec:
    label: str
    values: tuple[SubValue, ...]
    symbol_field: str | None = None

    def build(self, record: Any) -> DisplayRow:
        parts = [text for text in (value.render(record) for value in self.values) if text is not None]
        symbol = getattr(record, self.symbol_field, None) if self.symbol_field else None
        return DisplayRow(self.label, " ".join(parts), symbol)


def build_rows(record: Any, specs: Iterable[RowSpec]) -> list[DisplayRow]:
    """Evaluate *specs* in order against *record*."""
    return [spec.build(record) for spec in specs]


CURRENT_CONDITIONS_ROWS: tuple[RowSpec, ...] = (
    RowSpec("Summary", (SubValue("summary", as_string),), symbol_field="icon"),
    RowSpec("Time", (SubValue("time", as_local_time),)),
    RowSpec(
        "Temperature",
        (
            SubValue("temperature", as_degrees),
            SubValue("apparent_temperature", as_degrees, label="feels like", parens=True),
        ),
    ),
    RowSpec(
        "Precipitation",
        (
            SubValue("precip_type", as_string),
            SubValue("precip_probability", as_percent),
        ),
        symbol_field="precip_type",
    ),
    RowSpec(
        "Wind",
        (
            SubValue("wind_speed", as_speed),
            SubValue("wind_bearing", as_bearing, label="from", parens=True),
        ),
    ),
    RowSpec("Humidity", (SubValue("humidity", as_percent),)),
    RowSpec("Pressure", (SubValue("pressure", as_pressure),)),
    RowSpec("Cloud Cover", (SubValue("cloud_cover", as_percent),)),
    RowSpec("Visibility", (SubValue("visibility", as_distance),)),
    RowSpec("Dew Point", (SubValue("dew_point", as_degrees),)),
)
