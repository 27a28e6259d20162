from __future__ import annotations

from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from conftest import T0, make_entry

from temperature_monitor.model import TemperatureEntry
from temperature_monitor.presentation import (
    FRAME_COLUMNS,
    chart_domain,
    display_frame,
    entries_to_frame,
    format_interval,
    format_temperature,
    max_temp,
    min_temp,
    point_color,
    sorted_for_display,
)


def test_chart_domain_empty_uses_default_band() -> None:
    assert chart_domain([]) == (34, 41)


def test_chart_domain_single_entry_inside_seed_band() -> None:
    # 36.0 is below the 40.0 min seed and above the 30.0 max seed.
    low, high = chart_domain([make_entry(36.0)])
    assert low == pytest.approx(35.5)
    assert high == pytest.approx(36.5)


def test_chart_domain_pads_true_extremes() -> None:
    entries = [make_entry(35.2, 0), make_entry(37.8, 1), make_entry(36.0, 2)]
    low, high = chart_domain(entries)
    assert low == pytest.approx(34.7)
    assert high == pytest.approx(38.3)


def test_min_temp_seed_persists_when_all_values_above_it() -> None:
    entries = [make_entry(41.0), make_entry(42.0)]
    assert min_temp(entries) == pytest.approx(39.5)
    assert max_temp(entries) == pytest.approx(42.5)


def test_max_temp_seed_persists_when_all_values_below_it() -> None:
    entries = [make_entry(28.0), make_entry(29.0)]
    assert min_temp(entries) == pytest.approx(27.5)
    assert max_temp(entries) == pytest.approx(30.5)


def test_sorted_for_display_newest_first_regardless_of_arrival() -> None:
    t1, t2, t3 = make_entry(36.1, 1), make_entry(36.2, 2), make_entry(36.3, 3)
    assert sorted_for_display([t2, t1, t3]) == [t3, t2, t1]
    assert sorted_for_display([t1, t2, t3]) == [t3, t2, t1]


def test_point_color_threshold() -> None:
    assert point_color(36.01) == "red"
    assert point_color(36.0) == "blue"
    assert point_color(35.0) == "blue"


def test_format_temperature_two_decimals() -> None:
    assert format_temperature(make_entry(36.123)) == "36.12ºC"


def test_format_interval_naive_dates() -> None:
    entry = TemperatureEntry(
        id=uuid4(),
        temperature=36.0,
        start_date=datetime(2022, 10, 29, 3, 15),
        end_date=datetime(2022, 10, 29, 16, 5),
    )
    assert format_interval(entry) == (
        "Measure interval: 29/10, 03:15 AM - 29/10, 04:05 PM"
    )


def test_entries_to_frame_empty() -> None:
    df = entries_to_frame([])
    assert df.empty
    assert list(df.columns) == FRAME_COLUMNS


def test_entries_to_frame_newest_first() -> None:
    entries = [make_entry(35.0, 0), make_entry(37.0, 5), make_entry(36.0, 2)]
    df = entries_to_frame(entries)
    assert list(df["temperature"]) == [37.0, 36.0, 35.0]
    assert df.iloc[0]["start_date"] == T0 + timedelta(hours=5)


def test_display_frame_formats_rows() -> None:
    df = display_frame(entries_to_frame([make_entry(36.456, 0)]))
    assert list(df.columns) == ["temperature", "interval"]
    assert df.iloc[0]["temperature"] == "36.46ºC"
    assert " - " in df.iloc[0]["interval"]


def test_display_frame_empty() -> None:
    assert display_frame(entries_to_frame([])).empty
