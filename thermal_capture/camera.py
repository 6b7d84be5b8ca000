"""Camera handles: the blocking hardware resource owned by the capture worker."""

import logging
from typing import Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class CameraError(RuntimeError):
    """Raised when the camera stream cannot be opened, read or stopped."""


class Camera:
    """
    Minimal camera handle interface.

    A handle is used by a single thread at a time; once a capturer has started,
    only its worker thread touches it.
    """

    def open_stream(self):
        raise NotImplementedError

    def stop_stream(self):
        raise NotImplementedError

    def frame_rate(self) -> float:
        """Frame rate reported by the device (independent of how fast frames are read)."""
        raise NotImplementedError

    def frame(self) -> np.ndarray:
        """Block until the next raw frame is available and return it."""
        raise NotImplementedError


class OpenCVCamera(Camera):
    """
    UVC camera read through OpenCV with RGB conversion disabled, so the raw
    16-bit words of thermal cameras arrive untouched.
    """

    def __init__(
        self,
        index: int = 0,
        width: Optional[int] = None,
        height: Optional[int] = None,
        fps: Optional[float] = None,
        api_preference: int = cv2.CAP_ANY,
    ):
        self.index = index
        self.width = width
        self.height = height
        self.fps = fps
        self.api_preference = api_preference
        self._capture: Optional[cv2.VideoCapture] = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None and self._capture.isOpened()

    def open_stream(self):
        if self.is_open:
            return
        capture = cv2.VideoCapture(self.index, self.api_preference)
        if not capture.isOpened():
            capture.release()
            raise CameraError(f"Cannot open camera {self.index}")
        if self.width:
            capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        if self.height:
            capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        if self.fps:
            capture.set(cv2.CAP_PROP_FPS, self.fps)
        capture.set(cv2.CAP_PROP_CONVERT_RGB, 0)
        self._capture = capture
        logger.info("Opened camera %s at %.1f fps", self.index, self.frame_rate())

    def stop_stream(self):
        if self._capture is None:
            return
        self._capture.release()
        self._capture = None
        logger.info("Closed camera %s", self.index)

    def frame_rate(self) -> float:
        if self._capture is None:
            return 0.0
        return float(self._capture.get(cv2.CAP_PROP_FPS))

    def frame(self) -> np.ndarray:
        if not self.is_open:
            raise CameraError(f"Camera {self.index} stream is not open")
        ok, frame = self._capture.read()
        if not ok or frame is None:
            raise CameraError(f"Failed to read a frame from camera {self.index}")
        return frame
