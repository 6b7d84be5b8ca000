"""Smooth per-frame captured extremes into a flicker-free display range."""

from typing import Optional

from .temperature import Temp, TempRange

DEFAULT_ATTACK = 0.5
DEFAULT_RELEASE = 0.05
DEFAULT_HYSTERESIS = 0.5  # Kelvin


class AutoDisplayRangeController:
    """
    Track the captured [min, max] of successive frames with asymmetric smoothing.

    Each edge moves towards the captured edge by a fraction of the gap: `attack`
    when the scene gets wider than the display range, `release` when it gets
    narrower. Gaps smaller than `hysteresis` (Kelvin) are ignored so sensor noise
    does not make the color mapping shimmer. The first captured range is adopted
    as is.

    Not thread-safe; the capture worker is its only caller.
    """

    def __init__(
        self,
        attack: float = DEFAULT_ATTACK,
        release: float = DEFAULT_RELEASE,
        hysteresis: float = DEFAULT_HYSTERESIS,
    ):
        for name, rate in (("attack", attack), ("release", release)):
            if not 0.0 < rate <= 1.0:
                raise ValueError(f"{name} must be in (0, 1], got {rate}")
        if hysteresis < 0:
            raise ValueError(f"hysteresis must be >= 0, got {hysteresis}")
        self.attack = attack
        self.release = release
        self.hysteresis = hysteresis
        self._current: Optional[TempRange] = None

    @property
    def current(self) -> Optional[TempRange]:
        return self._current

    def reset(self):
        self._current = None

    def _follow(self, current: float, target: float, widening: bool) -> float:
        gap = target - current
        if abs(gap) <= self.hysteresis:
            return current
        rate = self.attack if widening else self.release
        return current + gap * rate

    def compute(self, captured_range: TempRange) -> TempRange:
        """Feed one frame's captured range, return the smoothed display range."""
        if self._current is None:
            self._current = captured_range
            return captured_range

        low = self._current.low.kelvin
        high = self._current.high.kelvin
        new_low = self._follow(low, captured_range.low.kelvin, captured_range.low.kelvin < low)
        new_high = self._follow(high, captured_range.high.kelvin, captured_range.high.kelvin > high)
        # Edges move at different rates and may cross on a sudden jump
        if new_low > new_high:
            new_low = new_high = (new_low + new_high) / 2.0

        self._current = TempRange(Temp(new_low), Temp(new_high))
        return self._current
