"""Dimensional quantities -- logged as a magnitude in their base unit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Measure(Protocol):
    """Anything that can report its magnitude in a canonical base unit."""

    def base_unit_magnitude(self) -> float: ...


@dataclass(frozen=True)
class Unit:
    """A unit expressed as a multiple of its dimension's base unit."""

    name: str
    dimension: str
    factor: float = 1.0

    def of(self, magnitude: float) -> Quantity:
        return Quantity(magnitude, self)


@dataclass(frozen=True)
class Quantity:
    magnitude: float
    unit: Unit

    def base_unit_magnitude(self) -> float:
        return self.magnitude * self.unit.factor

    def in_unit(self, unit: Unit) -> float:
        if unit.dimension != self.unit.dimension:
            raise ValueError(
                f"Cannot convert {self.unit.dimension} to {unit.dimension}"
            )
        return self.base_unit_magnitude() / unit.factor


METER = Unit("meter", "distance")
CENTIMETER = Unit("centimeter", "distance", 0.01)
INCH = Unit("inch", "distance", 0.0254)
FOOT = Unit("foot", "distance", 0.3048)

SECOND = Unit("second", "time")
MILLISECOND = Unit("millisecond", "time", 0.001)

RADIAN = Unit("radian", "angle")
DEGREE = Unit("degree", "angle", 0.017453292519943295)
ROTATION = Unit("rotation", "angle", 6.283185307179586)

VOLT = Unit("volt", "voltage")
AMPERE = Unit("ampere", "current")
