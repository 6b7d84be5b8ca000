"""
Camera adapter registry: decode raw frames of supported thermal cameras.

Each adapter knows one model's frame layout and how its sensor counts map to
Kelvin, so the capture pipeline stays the same for every model.

To add a new model: subclass CameraAdapter and add one entry to CAMERA_ADAPTERS.
"""
import logging
from typing import Dict, Optional, Tuple, Type

import numpy as np

from .camera import Camera, CameraError
from .thermal_data import ThermalData

logger = logging.getLogger(__name__)

SUPPORT_MESSAGE = (
    " This camera model is not in the registry. Please open an issue on the project "
    "repository with a raw frame sample so support can be added."
)


class FrameDecodeError(CameraError):
    """Raised when a raw frame does not match the adapter's layout."""


class UnsupportedCameraError(ValueError):
    """Raised when the camera model is not in the registry."""

    def __init__(self, message: str, model: Optional[str] = None):
        self.model = model
        full = message + SUPPORT_MESSAGE
        super().__init__(full)


class CameraAdapter:
    """Turns one raw camera frame into calibrated per-pixel temperatures."""

    name = "Generic"

    def capture_thermal_data(self, camera: Camera) -> ThermalData:
        """Read one frame from camera and decode it."""
        return self.decode(camera.frame())

    def decode(self, raw: np.ndarray) -> ThermalData:
        raise NotImplementedError


# -----------------------------------------------------------------------------
# Infiray P2 Pro / Topdon TC001 layout: 256x384 YUYV frame, upper half is the
# preview image, lower half holds 16-bit little-endian counts in 1/64 Kelvin.
# -----------------------------------------------------------------------------
P2_SENSOR_SIZE: Tuple[int, int] = (256, 192)
P2_TEMP_SCALE = 64.0


class InfirayP2ProAdapter(CameraAdapter):
    name = "P2 Pro"
    sensor_size = P2_SENSOR_SIZE
    temp_scale = P2_TEMP_SCALE

    @property
    def frame_bytes(self) -> int:
        width, height = self.sensor_size
        return width * height * 2 * 2

    def decode(self, raw: np.ndarray) -> ThermalData:
        raw = np.ascontiguousarray(raw)
        if raw.nbytes != self.frame_bytes:
            raise FrameDecodeError(
                f"{self.name}: expected a {self.frame_bytes} byte frame, got {raw.nbytes} bytes"
            )
        width, height = self.sensor_size
        words = np.frombuffer(raw.tobytes(), dtype="<u2").reshape((2 * height, width))
        counts = words[height:]
        return ThermalData(counts / self.temp_scale)


class TopdonTC001Adapter(InfirayP2ProAdapter):
    name = "TC001"


# -----------------------------------------------------------------------------
# Registry: one entry per model. Add new models here.
# -----------------------------------------------------------------------------
CAMERA_ADAPTERS: Dict[str, Type[CameraAdapter]] = {
    InfirayP2ProAdapter.name: InfirayP2ProAdapter,
    TopdonTC001Adapter.name: TopdonTC001Adapter,
}

SUPPORTED_MODELS = tuple(CAMERA_ADAPTERS.keys())


def get_camera_adapter(camera_model: Optional[str]) -> CameraAdapter:
    """Return a new adapter for the given model (case and spacing insensitive)."""
    model = (camera_model or "").strip()
    wanted = model.lower().replace(" ", "")
    for canonical, adapter_cls in CAMERA_ADAPTERS.items():
        if canonical.lower().replace(" ", "") == wanted:
            logger.debug("Using %s adapter for model %r", adapter_cls.__name__, model)
            return adapter_cls()
    supported = ", ".join(SUPPORTED_MODELS)
    raise UnsupportedCameraError(
        f"Unknown camera model: {model or '?'}. Supported: {supported}.",
        model=model or None,
    )
