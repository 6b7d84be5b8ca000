"""Construction-time configuration for the thermal capturer."""

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional

from .auto_range import DEFAULT_ATTACK, DEFAULT_HYSTERESIS, DEFAULT_RELEASE
from .gradients import THERMAL_GRADIENTS, ThermalGradient, get_gradient
from .temperature import TemperatureUnit, TempRange

logger = logging.getLogger(__name__)

OVERFLOW_DROP_OLDEST = "drop_oldest"
OVERFLOW_BLOCK = "block"
OVERFLOW_POLICIES = (OVERFLOW_DROP_OLDEST, OVERFLOW_BLOCK)


def _default_manual_range() -> TempRange:
    return TempRange.from_unit(TemperatureUnit.CELSIUS, 0.0, 100.0)


_INT_FIELDS = ("histogram_buckets", "result_queue_size")
_FLOAT_FIELDS = ("auto_range_attack", "auto_range_release", "auto_range_hysteresis", "stop_timeout")


def _coerce(name: str, value: str, kind):
    try:
        return kind(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


@dataclass
class CapturerConfig:
    """Static configuration; runtime-changeable values live in ThermalCapturerSettings."""

    default_gradient: str = THERMAL_GRADIENTS[0].name
    default_unit: TemperatureUnit = TemperatureUnit.KELVIN
    manual_range: TempRange = field(default_factory=_default_manual_range)
    histogram_buckets: int = 100
    result_queue_size: int = 8
    overflow_policy: str = OVERFLOW_DROP_OLDEST
    auto_range_attack: float = DEFAULT_ATTACK
    auto_range_release: float = DEFAULT_RELEASE
    auto_range_hysteresis: float = DEFAULT_HYSTERESIS
    stop_timeout: Optional[float] = 5.0

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raise ValueError for any field with a wrong type or out-of-range value."""
        for name in _INT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        for name in _FLOAT_FIELDS:
            value = getattr(self, name)
            if value is None and name == "stop_timeout":
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number, got {value!r}")
        if not isinstance(self.default_unit, TemperatureUnit):
            raise ValueError(f"default_unit must be a TemperatureUnit, got {self.default_unit!r}")
        if not isinstance(self.manual_range, TempRange):
            raise ValueError(f"manual_range must be a TempRange, got {self.manual_range!r}")
        if not isinstance(self.default_gradient, str):
            raise ValueError(f"default_gradient must be a gradient name, got {self.default_gradient!r}")

        if self.histogram_buckets < 1:
            raise ValueError(f"histogram_buckets must be >= 1, got {self.histogram_buckets}")
        if self.result_queue_size < 0:
            raise ValueError(f"result_queue_size must be >= 0, got {self.result_queue_size}")
        if self.overflow_policy not in OVERFLOW_POLICIES:
            raise ValueError(
                f"overflow_policy must be one of {', '.join(OVERFLOW_POLICIES)}, got {self.overflow_policy!r}"
            )
        if self.stop_timeout is not None and self.stop_timeout < 0:
            raise ValueError(f"stop_timeout must be >= 0 or None, got {self.stop_timeout}")
        get_gradient(self.default_gradient)

    @property
    def gradient(self) -> ThermalGradient:
        return get_gradient(self.default_gradient)

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "CapturerConfig":
        """
        Build a config from plain values (e.g. parsed JSON).

        Units may be given by name ("C", "celsius"), the manual range as a
        [low, high] pair expressed in default_unit, numbers as numeric strings.
        Unknown keys are ignored. Any bad value raises ValueError.
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in values.items():
            if key not in known:
                logger.warning("Ignoring unknown capturer config key: %s", key)
                continue
            kwargs[key] = value

        for name in _INT_FIELDS:
            if isinstance(kwargs.get(name), str):
                kwargs[name] = _coerce(name, kwargs[name], int)
        for name in _FLOAT_FIELDS:
            if isinstance(kwargs.get(name), str):
                kwargs[name] = _coerce(name, kwargs[name], float)

        unit = kwargs.get("default_unit", TemperatureUnit.KELVIN)
        if isinstance(unit, str):
            unit = TemperatureUnit.parse(unit)
            kwargs["default_unit"] = unit
        manual = kwargs.get("manual_range")
        if manual is not None and not isinstance(manual, TempRange):
            try:
                low, high = manual
                kwargs["manual_range"] = TempRange.from_unit(unit, float(low), float(high))
            except (TypeError, ValueError):
                raise ValueError(f"manual_range must be a [low, high] pair, got {manual!r}") from None
        return cls(**kwargs)
