"""Persistencia SQLite para la configuración de la app."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path

HEALTH_SETTINGS_URL = "x-apple-health://com.jonathanveg.TemperatureMonitor"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS app_config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


@dataclass(frozen=True)
class AppConfig:
    """Configuracion persistida de la app."""

    export_path: str
    health_settings_url: str = HEALTH_SETTINGS_URL


class SQLiteStore:
    """Key/value settings store. Never holds sample data."""

    def __init__(self, db_path: Path) -> None:
        """Create store and ensure schema exists."""
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    def load_config(self) -> AppConfig:
        """Devuelve configuracion guardada o defaults."""
        defaults = {
            "export_path": "",
            "health_settings_url": HEALTH_SETTINGS_URL,
        }
        with self._connect() as conn:
            rows = conn.execute("SELECT key, value FROM app_config").fetchall()
        values = {row["key"]: row["value"] for row in rows}
        merged = {**defaults, **values}
        return AppConfig(
            export_path=merged["export_path"],
            health_settings_url=merged["health_settings_url"] or HEALTH_SETTINGS_URL,
        )

    def save_config(self, config: AppConfig) -> None:
        """Guarda la configuracion en tabla key/value."""
        payload = {
            "export_path": config.export_path,
            "health_settings_url": config.health_settings_url,
        }
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO app_config(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                payload.items(),
            )
            conn.commit()
