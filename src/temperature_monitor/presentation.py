"""Rango del eje, orden y formato para la pantalla de temperatura."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

import pandas as pd
from dateutil import tz

from temperature_monitor.model import TemperatureEntry

TITLE = "Sleep Wrist Temperature"
EMPTY_TITLE = "HealthKit data not permitted or no data available yet"
EMPTY_HINT = "You can check if you have access to the data in the Health app"
OPEN_HEALTH_LABEL = "Open Health app"
RETRY_LABEL = "Try again"

DEFAULT_MIN_TEMP = 34.0
DEFAULT_MAX_TEMP = 41.0
AXIS_PADDING = 0.5
FEVER_THRESHOLD = 36.0

_MIN_SEED = 40.0
_MAX_SEED = 30.0
_DATE_FORMAT = "%d/%m, %I:%M %p"

FRAME_COLUMNS = ["id", "start_date", "end_date", "temperature"]


def min_temp(entries: Sequence[TemperatureEntry]) -> float:
    """Lower chart bound: smallest temperature minus padding.

    The running minimum starts at 40.0, so when every value is at or above
    40.0 the bound stays at 39.5.
    """
    if len(entries) == 0:
        return DEFAULT_MIN_TEMP
    low = _MIN_SEED
    for entry in entries:
        if entry.temperature < low:
            low = entry.temperature
    return low - AXIS_PADDING


def max_temp(entries: Sequence[TemperatureEntry]) -> float:
    """Upper chart bound: largest temperature plus padding (seeded at 30.0)."""
    if len(entries) == 0:
        return DEFAULT_MAX_TEMP
    high = _MAX_SEED
    for entry in entries:
        if entry.temperature > high:
            high = entry.temperature
    return high + AXIS_PADDING


def chart_domain(entries: Sequence[TemperatureEntry]) -> tuple[float, float]:
    """Vertical axis domain for the chart."""
    return min_temp(entries), max_temp(entries)


def sorted_for_display(entries: Sequence[TemperatureEntry]) -> list[TemperatureEntry]:
    """Newest measurement first."""
    return sorted(entries, key=lambda e: e.start_date, reverse=True)


def point_color(temperature: float) -> str:
    return "red" if temperature > FEVER_THRESHOLD else "blue"


def format_temperature(entry: TemperatureEntry) -> str:
    return f"{entry.temperature:.2f}ºC"


def format_date(value: datetime) -> str:
    """Day/month and 12-hour time in the local time zone."""
    if value.tzinfo is not None:
        value = value.astimezone(tz.tzlocal())
    return value.strftime(_DATE_FORMAT)


def format_interval(entry: TemperatureEntry) -> str:
    return (
        f"Measure interval: {format_date(entry.start_date)} - "
        f"{format_date(entry.end_date)}"
    )


def entries_to_frame(entries: Sequence[TemperatureEntry]) -> pd.DataFrame:
    """Entries as a DataFrame in display order (newest first)."""
    rows = [
        {
            "id": str(e.id),
            "start_date": e.start_date,
            "end_date": e.end_date,
            "temperature": e.temperature,
        }
        for e in sorted_for_display(entries)
    ]
    if not rows:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def display_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Prepare a string-renderable DataFrame for the entry list."""
    if df.empty:
        return pd.DataFrame(columns=["temperature", "interval"])
    out = pd.DataFrame(
        {
            "temperature": df["temperature"].map(lambda t: f"{t:.2f}ºC"),
            "interval": [
                f"{format_date(start)} - {format_date(end)}"
                for start, end in zip(df["start_date"], df["end_date"])
            ],
        }
    )
    return out.reset_index(drop=True)
