"""
Shared fakes for capture tests.
"""
import time

import numpy as np
import pytest

from thermal_capture.camera import Camera, CameraError
from thermal_capture.camera_adapters import CameraAdapter
from thermal_capture.thermal_data import ThermalData


class FakeCamera(Camera):
    """Serves Kelvin grids in a loop; can fail on a given frame number."""

    def __init__(self, frames, fail_at=None, fail_open=False, delay=0.001, fps=25.0):
        self.frames = [np.asarray(f, dtype=np.float64) for f in frames]
        self.fail_at = fail_at
        self.fail_open = fail_open
        self.delay = delay
        self.fps = fps
        self.reads = 0
        self.opened = False
        self.stopped = False

    def open_stream(self):
        if self.fail_open:
            raise CameraError("device busy")
        self.opened = True

    def stop_stream(self):
        self.stopped = True

    def frame_rate(self):
        return self.fps

    def frame(self):
        if self.fail_at is not None and self.reads >= self.fail_at:
            raise CameraError("USB transfer failed")
        frame = self.frames[self.reads % len(self.frames)]
        self.reads += 1
        if self.delay:
            time.sleep(self.delay)
        return frame


class KelvinAdapter(CameraAdapter):
    """Frames are already Kelvin grids."""

    name = "Fake"

    def decode(self, raw):
        return ThermalData(raw)


def scene(low_c, high_c, shape=(4, 6)):
    """Linear ramp from low_c to high_c (Celsius), returned in Kelvin."""
    return np.linspace(low_c, high_c, shape[0] * shape[1]).reshape(shape) + 273.15


@pytest.fixture
def adapter():
    return KelvinAdapter()


@pytest.fixture
def camera():
    return FakeCamera([scene(20.0, 40.0), scene(22.0, 38.0)])
