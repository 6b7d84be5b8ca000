"""False-color gradients: map a normalized position in [0, 1] to an RGB color."""

from typing import Dict, List, Sequence, Tuple, Union

import numpy as np
from matplotlib import colormaps
from matplotlib.colors import Colormap, LinearSegmentedColormap

# Classic "ironbow" palette used by most handheld thermal cameras
IRON_COLORS = [
    "#000000",
    "#1d0b5b",
    "#5a0b8e",
    "#9b1b8a",
    "#cf3a5c",
    "#f06a26",
    "#fba40a",
    "#fddc4a",
    "#ffffff",
]


class ThermalGradient:
    """Named gradient backed by a matplotlib colormap."""

    def __init__(self, name: str, colormap: Union[str, Colormap]):
        self.name = name
        self.colormap = colormaps[colormap] if isinstance(colormap, str) else colormap

    def get_color(self, factor: float) -> Tuple[int, int, int]:
        """Return the (r, g, b) color at factor; factor is clipped to [0, 1]."""
        r, g, b, _ = self.colormap(float(np.clip(factor, 0.0, 1.0)), bytes=True)
        return int(r), int(g), int(b)

    def map(self, factors: np.ndarray) -> np.ndarray:
        """Map an array of factors to a uint8 RGB array with a trailing channel axis."""
        rgba = self.colormap(np.clip(factors, 0.0, 1.0), bytes=True)
        return np.ascontiguousarray(rgba[..., :3])

    def __call__(self, factor: float) -> Tuple[int, int, int]:
        return self.get_color(factor)

    def __eq__(self, other):
        return (
            isinstance(other, ThermalGradient)
            and other.name == self.name
            and other.colormap == self.colormap
        )

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return f"ThermalGradient({self.name!r})"


def _build_gradients(specs: Sequence[Tuple[str, Union[str, Colormap]]]) -> List[ThermalGradient]:
    return [ThermalGradient(name, cmap) for name, cmap in specs]


THERMAL_GRADIENTS: List[ThermalGradient] = _build_gradients(
    [
        ("Iron", LinearSegmentedColormap.from_list("iron", IRON_COLORS)),
        ("Inferno", "inferno"),
        ("Jet", "jet"),
        ("Hot", "hot"),
        ("Plasma", "plasma"),
        ("Magma", "magma"),
        ("Viridis", "viridis"),
        ("White Hot", "gray"),
        ("Black Hot", "gray_r"),
        ("Bone", "bone"),
    ]
)

_GRADIENTS_BY_NAME: Dict[str, ThermalGradient] = {g.name.lower(): g for g in THERMAL_GRADIENTS}


def get_gradient(name: str) -> ThermalGradient:
    """Look up a built-in gradient by (case-insensitive) name."""
    try:
        return _GRADIENTS_BY_NAME[name.strip().lower()]
    except KeyError:
        available = ", ".join(g.name for g in THERMAL_GRADIENTS)
        raise ValueError(f"Unknown gradient: {name}. Available: {available}") from None


def gradient_names() -> List[str]:
    return [g.name for g in THERMAL_GRADIENTS]
