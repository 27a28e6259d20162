"""App Kivy de una sola pantalla: gráfico y lista de temperaturas."""

from __future__ import annotations

import logging
import webbrowser
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from temperature_monitor.controller import ScreenState, TemperatureScreenController
from temperature_monitor.dispatch import Dispatcher
from temperature_monitor.model import TemperatureEntry
from temperature_monitor.presentation import (
    EMPTY_HINT,
    EMPTY_TITLE,
    OPEN_HEALTH_LABEL,
    RETRY_LABEL,
    TITLE,
    format_interval,
    format_temperature,
    point_color,
)
from temperature_monitor.sources.apple_export import AppleHealthExportStore, ExportPaths
from temperature_monitor.storage import AppConfig, SQLiteStore

logger = logging.getLogger(__name__)

_RGBA: dict[str, tuple[float, float, float, float]] = {
    "red": (0.9, 0.2, 0.2, 1.0),
    "blue": (0.2, 0.4, 0.9, 1.0),
}


def export_paths(config: AppConfig) -> ExportPaths:
    """Export location from saved settings; unset means no data available."""
    if not config.export_path.strip():
        logger.warning(
            "No export configured; run: temperature-monitor --export PATH --save"
        )
        return ExportPaths(root=None)
    return ExportPaths(root=Path(config.export_path).expanduser())


def wrap_to_size(label: Any) -> Any:
    """Bind ``text_size`` to ``size`` so ``halign`` takes effect."""
    label.bind(size=label.setter("text_size"))
    return label


def chart_points(
    entries: Sequence[TemperatureEntry],
    domain: tuple[float, float],
    size: tuple[float, float],
) -> list[tuple[float, float, str]]:
    """Project entries onto a ``size`` box: (x, y, color) in start order.

    x spans the start dates, y spans ``domain``; a single entry sits at the
    horizontal center.
    """
    if not entries:
        return []
    width, height = size
    low, high = domain
    ordered = sorted(entries, key=lambda e: e.start_date)
    first = ordered[0].start_date.timestamp()
    span = ordered[-1].start_date.timestamp() - first
    y_span = (high - low) or 1.0
    out: list[tuple[float, float, str]] = []
    for entry in ordered:
        if span > 0:
            x = (entry.start_date.timestamp() - first) / span * width
        else:
            x = width / 2
        y = (entry.temperature - low) / y_span * height
        out.append((x, y, point_color(entry.temperature)))
    return out


def run_app(db_path: Path | None = None) -> int:
    """Lanza la app Kivy."""
    from kivy.app import App
    from kivy.clock import Clock
    from kivy.graphics import Color, Line
    from kivy.uix.boxlayout import BoxLayout
    from kivy.uix.button import Button
    from kivy.uix.gridlayout import GridLayout
    from kivy.uix.label import Label
    from kivy.uix.scrollview import ScrollView
    from kivy.uix.widget import Widget

    settings_path = db_path or Path.home() / ".temperature_monitor" / "config.sqlite3"

    class ClockDispatcher(Dispatcher):
        """Hands callables to the Kivy main thread."""

        def post(self, fn: Callable[[], None]) -> None:
            Clock.schedule_once(lambda _dt: fn(), 0)

    class TemperatureChart(Widget):
        """Line chart with one colored segment per point."""

        def __init__(self, **kwargs: object) -> None:
            super().__init__(**kwargs)
            self._entries: list[TemperatureEntry] = []
            self._domain = (0.0, 1.0)
            self.bind(pos=self._redraw, size=self._redraw)

        def update(
            self, entries: list[TemperatureEntry], domain: tuple[float, float]
        ) -> None:
            self._entries = entries
            self._domain = domain
            self._redraw()

        def _redraw(self, *_args: object) -> None:
            self.canvas.clear()
            points = chart_points(
                self._entries, self._domain, (self.width, self.height)
            )
            with self.canvas:
                for (x0, y0, color), (x1, y1, _) in zip(points, points[1:]):
                    Color(*_RGBA[color])
                    Line(
                        points=[self.x + x0, self.y + y0, self.x + x1, self.y + y1],
                        width=1.5,
                    )

    class TemperatureMonitorApp(App):
        """Main Kivy app."""

        def __init__(self, **kwargs: object) -> None:
            super().__init__(**kwargs)
            self.settings = SQLiteStore(settings_path)
            self.app_config = self.settings.load_config()
            self.store = AppleHealthExportStore(export_paths(self.app_config))
            self.controller = TemperatureScreenController(
                self.store, ClockDispatcher(), on_change=self._render
            )
            self.root_box: BoxLayout | None = None

        def build(self) -> BoxLayout:
            self.root_box = BoxLayout(orientation="vertical", spacing=8, padding=10)
            self._render(self.controller.state)
            return self.root_box

        def on_start(self) -> None:
            self.controller.on_appear()

        def on_stop(self) -> None:
            self.store.close()

        def _render(self, state: ScreenState) -> None:
            if self.root_box is None:
                return
            self.root_box.clear_widgets()
            if state.has_data:
                self._render_data()
            else:
                self._render_empty()

        def _render_data(self) -> None:
            assert self.root_box is not None
            self.root_box.add_widget(
                Label(text=TITLE, font_size="24sp", size_hint_y=None, height=48)
            )
            chart = TemperatureChart(size_hint_y=None, height=250)
            chart.update(self.controller.state.entries, self.controller.domain())
            self.root_box.add_widget(chart)

            grid = GridLayout(cols=1, spacing=4, size_hint_y=None)
            grid.bind(minimum_height=grid.setter("height"))
            for entry in self.controller.display_entries():
                grid.add_widget(
                    wrap_to_size(
                        Label(
                            text=f"{format_temperature(entry)}\n{format_interval(entry)}",
                            size_hint_y=None,
                            height=48,
                            halign="left",
                        )
                    )
                )
            scroll = ScrollView()
            scroll.add_widget(grid)
            self.root_box.add_widget(scroll)

        def _render_empty(self) -> None:
            assert self.root_box is not None
            self.root_box.add_widget(
                wrap_to_size(Label(text=EMPTY_TITLE, font_size="22sp", halign="center"))
            )
            self.root_box.add_widget(
                wrap_to_size(
                    Label(
                        text=EMPTY_HINT,
                        font_size="13sp",
                        color=(0.6, 0.6, 0.6, 1),
                        halign="center",
                    )
                )
            )
            open_btn = Button(text=OPEN_HEALTH_LABEL, size_hint_y=None, height=48)
            open_btn.bind(on_press=lambda *_args: self._open_health_settings())
            retry_btn = Button(text=RETRY_LABEL, size_hint_y=None, height=40)
            retry_btn.bind(on_press=lambda *_args: self.controller.retry())
            self.root_box.add_widget(open_btn)
            self.root_box.add_widget(Widget(size_hint_y=None, height=20))
            self.root_box.add_widget(retry_btn)

        def _open_health_settings(self) -> None:
            url = self.app_config.health_settings_url
            if not webbrowser.open(url):
                logger.warning("Could not open %s", url)

    TemperatureMonitorApp().run()
    return 0
