from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest
from conftest import make_entry

from temperature_monitor.app import chart_points, export_paths, wrap_to_size
from temperature_monitor.storage import AppConfig


def test_chart_points_empty() -> None:
    assert chart_points([], (34.0, 41.0), (100, 50)) == []


def test_chart_points_scaled_in_start_order() -> None:
    entries = [make_entry(37.0, 2), make_entry(35.0, 0), make_entry(36.0, 1)]
    points = chart_points(entries, (34.0, 38.0), (200, 40))

    assert [p[0] for p in points] == pytest.approx([0.0, 100.0, 200.0])
    assert [p[1] for p in points] == pytest.approx([10.0, 20.0, 30.0])
    assert [p[2] for p in points] == ["blue", "blue", "red"]


def test_chart_points_single_entry_centered() -> None:
    [(x, y, color)] = chart_points([make_entry(36.5)], (36.0, 37.0), (100, 10))
    assert x == pytest.approx(50.0)
    assert y == pytest.approx(5.0)
    assert color == "red"


def test_main_reports_missing_gui(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    from temperature_monitor import __main__ as entry

    monkeypatch.setitem(sys.modules, "temperature_monitor.app", None)
    assert entry.main() == 1
    assert "pip install kivy" in capsys.readouterr().err


def test_export_paths_unset_logs_hint(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        paths = export_paths(AppConfig(export_path="  "))
    assert paths.root is None
    assert "temperature-monitor --export PATH --save" in caplog.text


def test_export_paths_expands_user() -> None:
    paths = export_paths(AppConfig(export_path="~/export.zip"))
    assert paths.root == Path("~/export.zip").expanduser()


def test_wrap_to_size_binds_text_size() -> None:
    class _Label:
        def __init__(self) -> None:
            self.bound: dict[str, object] = {}
            self.text_size: tuple[float, float] | None = None

        def setter(self, name: str) -> object:
            def _set(_instance: object, value: tuple[float, float]) -> None:
                setattr(self, name, value)

            return _set

        def bind(self, **kwargs: object) -> None:
            self.bound.update(kwargs)

    label = _Label()
    assert wrap_to_size(label) is label
    callback = label.bound["size"]
    assert callable(callback)
    callback(label, (320.0, 48.0))
    assert label.text_size == (320.0, 48.0)
