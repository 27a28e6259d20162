"""CLI: lee la temperatura de muñeca de una exportación y la lista."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from temperature_monitor.controller import TemperatureScreenController
from temperature_monitor.dispatch import QueueDispatcher
from temperature_monitor.presentation import (
    EMPTY_HINT,
    EMPTY_TITLE,
    TITLE,
    display_frame,
    entries_to_frame,
)
from temperature_monitor.sources.apple_export import AppleHealthExportStore, ExportPaths
from temperature_monitor.storage import AppConfig, SQLiteStore

logger = logging.getLogger(__name__)

DEFAULT_DB = Path.home() / ".temperature_monitor" / "config.sqlite3"


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Sleeping wrist temperature from an Apple Health export."
    )
    parser.add_argument(
        "--export",
        default=None,
        help="export.zip, export.xml or the folder holding it (default: saved).",
    )
    parser.add_argument(
        "--db",
        default=str(DEFAULT_DB),
        help=f"Settings database (default: {DEFAULT_DB}).",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Remember --export for later runs.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=60.0,
        help="Seconds to wait for the store (default: 60).",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args()


def main() -> int:
    """Run the headless reader.

    Returns:
        Exit code (0 on success, 1 on timeout, 2 on missing configuration).
    """
    ns = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = SQLiteStore(Path(ns.db).expanduser())
    config = settings.load_config()
    if ns.save and not ns.export:
        logger.warning("--save ignored: nothing to save without --export PATH")
    export_path = ns.export or config.export_path
    if not export_path:
        print("No export configured: pass --export PATH")
        return 2
    if ns.save and ns.export:
        settings.save_config(
            AppConfig(
                export_path=ns.export,
                health_settings_url=config.health_settings_url,
            )
        )

    store = AppleHealthExportStore(
        ExportPaths(root=Path(export_path).expanduser().resolve())
    )
    dispatcher = QueueDispatcher()
    controller = TemperatureScreenController(store, dispatcher)
    settled = False
    try:
        controller.on_appear()
        settled = dispatcher.run_until(lambda: controller.settled, ns.timeout)
    finally:
        # A timed-out query is abandoned rather than waited for.
        store.close(wait=settled)
    dispatcher.drain()

    if not settled:
        logger.error("Timed out after %gs waiting for the health store", ns.timeout)
        return 1

    if not controller.state.has_data:
        print(EMPTY_TITLE)
        print(EMPTY_HINT)
        print(f"Health settings: {config.health_settings_url}")
        return 0

    low, high = controller.domain()
    print(TITLE)
    print(f"Chart domain: {low:.2f} - {high:.2f} ºC")
    table = display_frame(entries_to_frame(controller.state.entries))
    print(table.to_string(index=False))
    return 0
