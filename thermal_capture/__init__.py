"""
thermal-capture - background capture pipeline for USB thermal cameras

Pulls raw frames from the camera on a worker thread, converts sensor counts
into temperatures, derives a stable display range, renders a false-color image
and a temperature histogram for every frame.

Main usage:
    from thermal_capture import OpenCVCamera, TemperatureUnit, ThermalCapturer, get_camera_adapter

    capturer = ThermalCapturer(OpenCVCamera(0), get_camera_adapter("P2 Pro"))
    capturer.start()
    result = capturer.wait_result(timeout=5.0)
    print(f"Display range: {result.image_range.format(TemperatureUnit.CELSIUS)}")
    capturer.stop(wait=True)
"""

__version__ = "0.1.0"

from .temperature import Temp, TemperatureUnit, TempRange
from .thermal_data import HistogramBucket, ThermalData, ThermalDataHistogram
from .gradients import THERMAL_GRADIENTS, ThermalGradient, get_gradient
from .auto_range import AutoDisplayRangeController
from .camera import Camera, CameraError, OpenCVCamera
from .camera_adapters import (
    CAMERA_ADAPTERS,
    CameraAdapter,
    FrameDecodeError,
    InfirayP2ProAdapter,
    TopdonTC001Adapter,
    UnsupportedCameraError,
    get_camera_adapter,
)
from .config import CapturerConfig
from .capturer import (
    CapturerState,
    ThermalCapturer,
    ThermalCapturerResult,
    ThermalCapturerSettings,
    ThermalCapturerTerminated,
)

__all__ = [
    "Temp",
    "TemperatureUnit",
    "TempRange",
    "HistogramBucket",
    "ThermalData",
    "ThermalDataHistogram",
    "THERMAL_GRADIENTS",
    "ThermalGradient",
    "get_gradient",
    "AutoDisplayRangeController",
    "Camera",
    "CameraError",
    "OpenCVCamera",
    "CAMERA_ADAPTERS",
    "CameraAdapter",
    "FrameDecodeError",
    "InfirayP2ProAdapter",
    "TopdonTC001Adapter",
    "UnsupportedCameraError",
    "get_camera_adapter",
    "CapturerConfig",
    "CapturerState",
    "ThermalCapturer",
    "ThermalCapturerResult",
    "ThermalCapturerSettings",
    "ThermalCapturerTerminated",
]
