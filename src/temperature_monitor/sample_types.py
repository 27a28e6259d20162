"""Tipos de muestra y unidades conocidos por el almacén de salud."""

from __future__ import annotations

from dataclasses import dataclass

SLEEPING_WRIST_TEMPERATURE = "HKQuantityTypeIdentifierAppleSleepingWristTemperature"

DEGREE_CELSIUS = "degC"
DEGREE_FAHRENHEIT = "degF"
KELVIN = "K"


@dataclass(frozen=True)
class QuantityType:
    """A quantity sample type and the unit it is recorded in."""

    identifier: str
    canonical_unit: str


_QUANTITY_TYPES: dict[str, QuantityType] = {
    SLEEPING_WRIST_TEMPERATURE: QuantityType(
        identifier=SLEEPING_WRIST_TEMPERATURE,
        canonical_unit=DEGREE_CELSIUS,
    ),
    "HKQuantityTypeIdentifierBodyTemperature": QuantityType(
        identifier="HKQuantityTypeIdentifierBodyTemperature",
        canonical_unit=DEGREE_CELSIUS,
    ),
    "HKQuantityTypeIdentifierBasalBodyTemperature": QuantityType(
        identifier="HKQuantityTypeIdentifierBasalBodyTemperature",
        canonical_unit=DEGREE_CELSIUS,
    ),
}


def quantity_type(identifier: str) -> QuantityType | None:
    """Look up a quantity type; None when this platform does not define it."""
    return _QUANTITY_TYPES.get(identifier)


def known_identifiers() -> frozenset[str]:
    """Identifiers of every quantity type defined on this platform."""
    return frozenset(_QUANTITY_TYPES)


def _to_celsius(value: float, unit: str) -> float:
    if unit == DEGREE_CELSIUS:
        return value
    if unit == DEGREE_FAHRENHEIT:
        return (value - 32.0) * 5.0 / 9.0
    if unit == KELVIN:
        return value - 273.15
    raise ValueError(f"Unsupported temperature unit: {unit!r}")


def _from_celsius(value: float, unit: str) -> float:
    if unit == DEGREE_CELSIUS:
        return value
    if unit == DEGREE_FAHRENHEIT:
        return value * 9.0 / 5.0 + 32.0
    if unit == KELVIN:
        return value + 273.15
    raise ValueError(f"Unsupported temperature unit: {unit!r}")


def convert_temperature(value: float, from_unit: str, to_unit: str) -> float:
    """Convert a temperature between degC, degF and K."""
    celsius = _to_celsius(value, from_unit)
    if from_unit == to_unit:
        return value
    return _from_celsius(celsius, to_unit)
