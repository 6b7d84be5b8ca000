"""Temperature units, Kelvin-backed temperatures and temperature ranges."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

import numpy as np

KELVIN_OFFSET = 273.15
FAHRENHEIT_SCALE = 1.8
FAHRENHEIT_OFFSET = 32.0


class TemperatureUnit(Enum):
    """Display unit for temperatures; values are always stored in Kelvin."""

    KELVIN = "Kelvin"
    CELSIUS = "Celsius"
    FAHRENHEIT = "Fahrenheit"

    def __str__(self):
        return self.value

    @classmethod
    def default(cls) -> "TemperatureUnit":
        return cls.KELVIN

    @classmethod
    def parse(cls, text: str) -> "TemperatureUnit":
        """Accept a unit name or its first letter ("C", "celsius", "K", ...)."""
        key = text.strip().lower()
        for unit in cls:
            if key in (unit.value.lower(), unit.value[0].lower()):
                return unit
        raise ValueError(f"Unknown temperature unit: {text}")

    @property
    def suffix(self) -> str:
        if self is TemperatureUnit.CELSIUS:
            return "°C"
        if self is TemperatureUnit.FAHRENHEIT:
            return "°F"
        return "K"

    def from_kelvin(self, kelvin):
        """Convert Kelvin (float or array) to this unit."""
        if self is TemperatureUnit.CELSIUS:
            return kelvin - KELVIN_OFFSET
        if self is TemperatureUnit.FAHRENHEIT:
            return (kelvin - KELVIN_OFFSET) * FAHRENHEIT_SCALE + FAHRENHEIT_OFFSET
        return kelvin

    def to_kelvin(self, value):
        """Convert a value (float or array) in this unit to Kelvin."""
        if self is TemperatureUnit.CELSIUS:
            return value + KELVIN_OFFSET
        if self is TemperatureUnit.FAHRENHEIT:
            return (value - FAHRENHEIT_OFFSET) / FAHRENHEIT_SCALE + KELVIN_OFFSET
        return value


@dataclass(frozen=True, order=True)
class Temp:
    """A single temperature, stored in Kelvin."""

    kelvin: float

    @classmethod
    def from_unit(cls, unit: TemperatureUnit, value: float) -> "Temp":
        return cls(float(unit.to_kelvin(value)))

    @classmethod
    def from_celsius(cls, value: float) -> "Temp":
        return cls.from_unit(TemperatureUnit.CELSIUS, value)

    def to_unit(self, unit: TemperatureUnit) -> float:
        return unit.from_kelvin(self.kelvin)

    @property
    def celsius(self) -> float:
        return self.to_unit(TemperatureUnit.CELSIUS)

    def format(self, unit: TemperatureUnit = TemperatureUnit.KELVIN, precision: int = 1) -> str:
        """Return e.g. "36.6°C" or "309.8K"."""
        return f"{self.to_unit(unit):.{precision}f}{unit.suffix}"

    def __str__(self):
        return self.format()


TempLike = Union[Temp, float, np.ndarray]


def _as_kelvin(value: TempLike):
    if isinstance(value, Temp):
        return value.kelvin
    return value


@dataclass(frozen=True)
class TempRange:
    """
    Closed temperature interval [low, high].

    factor() maps a temperature onto [0, 1] relative to the interval. For a
    zero-width range (low == high) there is no meaningful position, so the
    factor is defined as 0.0 for every input.
    """

    low: Temp
    high: Temp

    def __post_init__(self):
        if self.low > self.high:
            raise ValueError(
                f"Invalid temperature range: low {self.low.kelvin}K > high {self.high.kelvin}K"
            )

    @classmethod
    def from_unit(cls, unit: TemperatureUnit, low: float, high: float) -> "TempRange":
        return cls(Temp.from_unit(unit, low), Temp.from_unit(unit, high))

    @classmethod
    def from_kelvin(cls, low: float, high: float) -> "TempRange":
        return cls(Temp(float(low)), Temp(float(high)))

    def to_unit(self, unit: TemperatureUnit) -> Tuple[float, float]:
        return self.low.to_unit(unit), self.high.to_unit(unit)

    @property
    def width(self) -> float:
        """Width of the range in Kelvin."""
        return self.high.kelvin - self.low.kelvin

    def is_degenerate(self) -> bool:
        return self.low == self.high

    def contains(self, temp: TempLike):
        kelvin = _as_kelvin(temp)
        return (kelvin >= self.low.kelvin) & (kelvin <= self.high.kelvin)

    def factor(self, temp: TempLike):
        """Position of temp inside the range; not clamped, 0.0 for a degenerate range."""
        kelvin = _as_kelvin(temp)
        if self.is_degenerate():
            if isinstance(kelvin, np.ndarray):
                return np.zeros(kelvin.shape, dtype=np.float64)
            return 0.0
        return (kelvin - self.low.kelvin) / self.width

    def join(self, other: "TempRange") -> "TempRange":
        """Smallest range containing both ranges."""
        return TempRange(min(self.low, other.low), max(self.high, other.high))

    def format(self, unit: TemperatureUnit = TemperatureUnit.KELVIN, precision: int = 1) -> str:
        return f"[{self.low.format(unit, precision)}, {self.high.format(unit, precision)}]"

    def __str__(self):
        return self.format()
