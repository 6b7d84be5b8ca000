"""
Data models for decoded thermal frames and their temperature histograms.
"""

from dataclasses import dataclass
from typing import Iterator, List, Tuple

import numpy as np

from .gradients import ThermalGradient
from .temperature import Temp, TempRange

Position = Tuple[int, int]


class ThermalData:
    """One decoded frame: a 2-D grid of per-pixel temperatures in Kelvin."""

    def __init__(self, kelvin: np.ndarray):
        kelvin = np.asarray(kelvin, dtype=np.float64)
        if kelvin.ndim != 2 or kelvin.size == 0:
            raise ValueError(f"Thermal data must be a non-empty 2-D array, got shape {kelvin.shape}")
        self.kelvin = kelvin

    @property
    def width(self) -> int:
        return self.kelvin.shape[1]

    @property
    def height(self) -> int:
        return self.kelvin.shape[0]

    @property
    def pixel_count(self) -> int:
        return self.kelvin.size

    def get_image_shape(self) -> tuple:
        """Return the image dimensions (height, width)."""
        return self.kelvin.shape

    def temperature_at(self, x: int, y: int) -> Temp:
        """Return the temperature at the given pixel."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return Temp(float(self.kelvin[y, x]))
        raise IndexError(f"Pixel coordinates ({x}, {y}) out of image bounds")

    def get_min_max_pos(self) -> Tuple[Position, Position]:
        """Return the (x, y) positions of the first coldest and first hottest pixel."""
        min_y, min_x = np.unravel_index(np.argmin(self.kelvin), self.kelvin.shape)
        max_y, max_x = np.unravel_index(np.argmax(self.kelvin), self.kelvin.shape)
        return (int(min_x), int(min_y)), (int(max_x), int(max_y))

    def captured_range(self) -> TempRange:
        """Return [coldest, hottest] of this frame."""
        (min_x, min_y), (max_x, max_y) = self.get_min_max_pos()
        return TempRange(self.temperature_at(min_x, min_y), self.temperature_at(max_x, max_y))

    def map_to_image(self, mapping_range: TempRange, gradient: ThermalGradient) -> np.ndarray:
        """Color every pixel with gradient(mapping_range.factor(pixel)); returns uint8 (H, W, 3)."""
        return gradient.map(mapping_range.factor(self.kelvin))


@dataclass(frozen=True)
class HistogramBucket:
    range: TempRange
    count: int


class ThermalDataHistogram:
    """Fixed-bucket-count distribution of a frame's temperatures over a range."""

    def __init__(self, histogram_range: TempRange, buckets: List[HistogramBucket]):
        self.range = histogram_range
        self.buckets = buckets

    @classmethod
    def from_thermal_data(
        cls, data: ThermalData, histogram_range: TempRange, bucket_count: int
    ) -> "ThermalDataHistogram":
        """
        Bin every pixel of data into bucket_count equal-width buckets over histogram_range.

        Buckets are half-open except the last one, which also takes pixels lying
        exactly on the upper edge. Pixels outside histogram_range are not counted.
        A zero-width range yields zero-width buckets and all matching pixels are
        put in the first one.
        """
        if bucket_count < 1:
            raise ValueError(f"bucket_count must be >= 1, got {bucket_count}")
        low, high = histogram_range.low.kelvin, histogram_range.high.kelvin
        if histogram_range.is_degenerate():
            counts = np.zeros(bucket_count, dtype=np.int64)
            counts[0] = int(np.count_nonzero(data.kelvin == low))
            edges = np.full(bucket_count + 1, low)
        else:
            counts, edges = np.histogram(data.kelvin, bins=bucket_count, range=(low, high))
        buckets = [
            HistogramBucket(TempRange.from_kelvin(edges[i], edges[i + 1]), int(counts[i]))
            for i in range(bucket_count)
        ]
        return cls(histogram_range, buckets)

    @property
    def counts(self) -> List[int]:
        return [b.count for b in self.buckets]

    @property
    def total(self) -> int:
        return sum(self.counts)

    @property
    def max_count(self) -> int:
        return max(self.counts)

    def __len__(self):
        return len(self.buckets)

    def __iter__(self) -> Iterator[HistogramBucket]:
        return iter(self.buckets)
