"""Modelos tipados para muestras de temperatura de muñeca."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from temperature_monitor.sample_types import convert_temperature


@dataclass(frozen=True)
class RawQuantitySample:
    """One quantity sample as delivered by a health store."""

    uuid: UUID
    sample_type: str
    value: float
    unit: str
    start_date: datetime
    end_date: datetime

    def double_value(self, unit: str) -> float:
        """Return the quantity expressed in ``unit``.

        Raises:
            ValueError: If either unit is not a temperature unit.
        """
        return convert_temperature(self.value, self.unit, unit)


@dataclass(frozen=True)
class TemperatureEntry:
    """One sleeping wrist temperature measurement (degrees Celsius)."""

    id: UUID
    temperature: float
    start_date: datetime
    end_date: datetime
