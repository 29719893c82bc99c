#!/usr/bin/env python3
"""Console weather report.

Wires the real providers together (GeoIP sensor, Nominatim, Forecast.io)
and prints every place, weather, info and error notification to stdout.

Configuration comes from ``WEATHERREPORT_*`` environment variables; the
command line can override the state file and switch to canned data.

Default behavior:
1) restore the saved place (if any),
2) when none was saved, resolve the current location,
3) print the resulting report and exit (``--watch`` keeps refreshing).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from weatherreport import (  # noqa: E402
    DisplayRow,
    ObserverBase,
    Place,
    SharedData,
    WeatherReportConfig,
    WeatherReportConfigError,
)


class ConsoleObserver(ObserverBase):
    """Prints notifications as they arrive."""

    def on_place_changed(self, place: Place | None) -> None:
        if place is None:
            print("Place: (none)")
            return
        print(f"Place: {place.short_name}")
        address = place.one_line_address
        if address and address != place.short_name:
            print(f"       {address}")
        if place.coordinate is not None:
            print(f"       {place.coordinate}")

    def on_weather_changed(self, rows: Sequence[DisplayRow]) -> None:
        if not rows:
            print("Weather: (no data)")
            return
        width = max(len(row.label) for row in rows)
        for row in rows:
            symbol = f"  [{row.symbol}]" if row.symbol else ""
            print(f"  {row.label.ljust(width)}  {row.text}{symbol}")

    def on_info(self, message: str) -> None:
        print(f"info: {message}")

    def on_error(self, message: str) -> None:
        print(f"error: {message}", file=sys.stderr)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print current conditions for a place")
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "--place",
        default=None,
        help="Free-text place to look up instead of the saved or current location.",
    )
    target.add_argument(
        "--current",
        action="store_true",
        help="Resolve the current location even when a place was saved.",
    )
    parser.add_argument(
        "--state-path",
        default=None,
        help="JSON file holding the saved state (default: WEATHERREPORT_STATE_PATH or memory only).",
    )
    parser.add_argument(
        "--canned",
        action="store_true",
        help="Use the built-in conditions record instead of calling the weather provider.",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep running and print each timed refresh until interrupted.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log library debug output to stderr.",
    )
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, object] = {}
    if args.state_path:
        overrides["state_path"] = args.state_path
    if args.canned:
        overrides["use_canned_data"] = True
    try:
        config = WeatherReportConfig.from_env(**overrides)
    except WeatherReportConfigError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    async with SharedData(config) as shared:
        shared.register(ConsoleObserver())
        await shared.load()

        if args.place:
            await shared.set_place_to_search(args.place)
        elif args.current or shared.state.place is None:
            await shared.set_place_to_current()

        if args.watch:
            await asyncio.Event().wait()

    return 0 if shared.state.place is not None else 1


def main() -> int:
    args = _parse_args()
    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    else:
        logging.getLogger("weatherreport").setLevel(logging.INFO)
    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
