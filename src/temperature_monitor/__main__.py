"""Punto de entrada de la app Kivy (pantalla de temperatura de muñeca)."""

from __future__ import annotations

import logging
import sys

from temperature_monitor.controller import UnsupportedPlatformError


def main() -> int:
    """Start the temperature screen; 1 when Kivy or the sample type is missing."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    try:
        from temperature_monitor.app import run_app

        return run_app()
    except ImportError as exc:
        print(f"Kivy could not be started: {exc}", file=sys.stderr)
        print("Install the GUI dependency: pip install kivy", file=sys.stderr)
        return 1
    except UnsupportedPlatformError as exc:
        print(f"Unsupported health store: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
