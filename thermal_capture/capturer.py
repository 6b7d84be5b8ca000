"""
Background thermal capture: decode, range, colorize and bin frames on a worker thread.

ThermalCapturer owns a camera handle until start() is called; from then on the
handle belongs to a single worker thread. The owner talks to the worker only
through a command mailbox (settings replacement, stop) and reads packaged
frames from a result queue.
"""

import logging
import math
import queue
import threading
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Iterator, Optional, Union

import numpy as np

from .auto_range import AutoDisplayRangeController
from .camera import Camera
from .camera_adapters import CameraAdapter
from .config import OVERFLOW_BLOCK, CapturerConfig
from .gradients import ThermalGradient
from .temperature import TemperatureUnit, TempRange
from .thermal_data import ThermalDataHistogram

logger = logging.getLogger(__name__)

ThermalCapturerCallback = Callable[[], None]

# Poll interval while a full queue blocks the worker under the "block" policy
BLOCK_POLL_INTERVAL = 0.05


class CapturerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    FAILED = "failed"


@dataclass(frozen=True)
class ThermalCapturerSettings:
    """Runtime settings; always replaced as a whole, never mutated."""

    auto_range: bool
    manual_range: TempRange
    gradient: ThermalGradient

    def replace(self, **changes) -> "ThermalCapturerSettings":
        return replace(self, **changes)


@dataclass
class ThermalCapturerResult:
    """One processed frame, handed over to whoever reads the result queue."""

    image: np.ndarray
    image_range: TempRange
    captured_range: TempRange
    real_fps: float
    reported_fps: float
    histogram: ThermalDataHistogram
    frame_index: int
    # Display unit chosen in CapturerConfig.default_unit; the ranges stay in Kelvin
    unit: TemperatureUnit = TemperatureUnit.KELVIN


@dataclass(frozen=True)
class ThermalCapturerTerminated:
    """Last item on the result queue: the worker has exited."""

    reason: str  # "stopped" or "failed"
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.reason == "failed"


ResultItem = Union[ThermalCapturerResult, ThermalCapturerTerminated]


@dataclass(frozen=True)
class SetSettings:
    settings: ThermalCapturerSettings


@dataclass(frozen=True)
class Stop:
    pass


Command = Union[SetSettings, Stop]


class _CommandMailbox:
    """
    Owner -> worker commands. Holds at most one pending settings value (a newer
    one replaces it) plus a stop flag; stop is handed out before settings.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._settings: Optional[SetSettings] = None
        self._stop = False

    def put(self, command: Command):
        with self._lock:
            if isinstance(command, Stop):
                self._stop = True
            else:
                self._settings = command

    def take(self) -> Optional[Command]:
        """Return at most one pending command without blocking."""
        with self._lock:
            if self._stop:
                self._stop = False
                return Stop()
            command, self._settings = self._settings, None
            return command

    @property
    def stop_requested(self) -> bool:
        with self._lock:
            return self._stop


class _ResultChannel:
    """Worker -> owner result queue with an explicit overflow policy."""

    def __init__(self, maxsize: int, overflow_policy: str, mailbox: _CommandMailbox):
        self._queue: "queue.Queue[ResultItem]" = queue.Queue(maxsize=maxsize)
        self._block = overflow_policy == OVERFLOW_BLOCK
        self._mailbox = mailbox
        self.dropped = 0

    def send(self, item: ResultItem) -> bool:
        """Enqueue item; returns False if it was not delivered."""
        terminal = isinstance(item, ThermalCapturerTerminated)
        if self._block and not terminal:
            while True:
                try:
                    self._queue.put(item, timeout=BLOCK_POLL_INTERVAL)
                    return True
                except queue.Full:
                    if self._mailbox.stop_requested:
                        logger.debug("Result queue full and stop pending, discarding frame")
                        return False
        while True:
            try:
                self._queue.put_nowait(item)
                return True
            except queue.Full:
                try:
                    self._queue.get_nowait()
                    self.dropped += 1
                    logger.debug("Result queue full, dropped oldest item (%d so far)", self.dropped)
                except queue.Empty:
                    pass

    def poll(self) -> Optional[ResultItem]:
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def wait(self, timeout: Optional[float] = None) -> Optional[ResultItem]:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None


class _Status:
    def __init__(self):
        self._lock = threading.Lock()
        self._state = CapturerState.IDLE

    def get(self) -> CapturerState:
        with self._lock:
            return self._state

    def set(self, state: CapturerState):
        with self._lock:
            self._state = state

    def transition(self, expected: CapturerState, state: CapturerState) -> bool:
        with self._lock:
            if self._state is not expected:
                return False
            self._state = state
            return True


class _CaptureWorker:
    """Everything the worker thread owns. Nothing here is touched by the owner after start()."""

    def __init__(
        self,
        camera: Camera,
        adapter: CameraAdapter,
        callback: Optional[ThermalCapturerCallback],
        settings: ThermalCapturerSettings,
        auto_range_controller: AutoDisplayRangeController,
        histogram_buckets: int,
        unit: TemperatureUnit,
        mailbox: _CommandMailbox,
        results: _ResultChannel,
        status: _Status,
    ):
        self.camera = camera
        self.adapter = adapter
        self.callback = callback
        self.settings = settings
        self.auto_range_controller = auto_range_controller
        self.histogram_buckets = histogram_buckets
        self.unit = unit
        self.mailbox = mailbox
        self.results = results
        self.status = status
        self.frame_index = 0

    def run(self):
        try:
            self.camera.open_stream()
            while self._capture_once():
                pass
        except Exception as error:
            logger.exception("Thermal capture failed after %d frames", self.frame_index)
            self._release_camera()
            self.status.set(CapturerState.FAILED)
            self.results.send(ThermalCapturerTerminated("failed", error))
            return
        self.status.set(CapturerState.STOPPED)
        self.results.send(ThermalCapturerTerminated("stopped"))
        logger.info("Thermal capture stopped after %d frames", self.frame_index)

    def _capture_once(self) -> bool:
        """Process one frame and drain one command; False once stopped."""
        loop_start = time.perf_counter()

        thermal_data = self.adapter.capture_thermal_data(self.camera)
        captured_range = thermal_data.captured_range()

        # Advanced on every frame so auto mode resumes from a warm state
        mapping_range = self.auto_range_controller.compute(captured_range)
        settings = self.settings
        if not settings.auto_range:
            mapping_range = settings.manual_range

        image = thermal_data.map_to_image(mapping_range, settings.gradient)
        histogram = ThermalDataHistogram.from_thermal_data(
            thermal_data, captured_range.join(mapping_range), self.histogram_buckets
        )

        elapsed = time.perf_counter() - loop_start
        result = ThermalCapturerResult(
            image=image,
            image_range=mapping_range,
            captured_range=captured_range,
            real_fps=1.0 / elapsed if elapsed > 0 else math.inf,
            reported_fps=float(self.camera.frame_rate()),
            histogram=histogram,
            frame_index=self.frame_index,
            unit=self.unit,
        )
        self.frame_index += 1
        self.results.send(result)
        self._notify()

        command = self.mailbox.take()
        if isinstance(command, Stop):
            self.camera.stop_stream()
            return False
        if isinstance(command, SetSettings):
            logger.debug("Applying new capture settings: %s", command.settings)
            self.settings = command.settings
        return True

    def _notify(self):
        if self.callback is None:
            return
        try:
            self.callback()
        except Exception:
            logger.exception("Capture callback raised; continuing")

    def _release_camera(self):
        try:
            self.camera.stop_stream()
        except Exception as error:
            logger.warning("Could not stop camera stream after failure: %s", error)


class ThermalCapturer:
    """
    Continuously captures thermal frames from a camera on a background thread.

    Usage example:
        capturer = ThermalCapturer(OpenCVCamera(0), get_camera_adapter("P2 Pro"))
        capturer.start()
        for result in capturer.results():
            show(result.image, result.image_range)
    """

    def __init__(
        self,
        camera: Camera,
        adapter: CameraAdapter,
        callback: Optional[ThermalCapturerCallback] = None,
        config: Optional[CapturerConfig] = None,
        settings: Optional[ThermalCapturerSettings] = None,
    ):
        self.config = config or CapturerConfig()
        self._settings = settings or self.default_settings(self.config)
        self._mailbox = _CommandMailbox()
        self._results = _ResultChannel(
            self.config.result_queue_size, self.config.overflow_policy, self._mailbox
        )
        self._status = _Status()
        self._thread: Optional[threading.Thread] = None
        self._worker: Optional[_CaptureWorker] = _CaptureWorker(
            camera=camera,
            adapter=adapter,
            callback=callback,
            settings=self._settings,
            auto_range_controller=AutoDisplayRangeController(
                attack=self.config.auto_range_attack,
                release=self.config.auto_range_release,
                hysteresis=self.config.auto_range_hysteresis,
            ),
            histogram_buckets=self.config.histogram_buckets,
            unit=self.config.default_unit,
            mailbox=self._mailbox,
            results=self._results,
            status=self._status,
        )

    @staticmethod
    def default_settings(config: CapturerConfig) -> ThermalCapturerSettings:
        """Auto range on, manual range and gradient taken from config."""
        return ThermalCapturerSettings(
            auto_range=True,
            manual_range=config.manual_range,
            gradient=config.gradient,
        )

    @property
    def state(self) -> CapturerState:
        return self._status.get()

    @property
    def settings(self) -> ThermalCapturerSettings:
        """Most recent settings requested by the owner (the worker may lag by one frame)."""
        return self._settings

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        """Hand the camera over to a new worker thread. Can only be called once."""
        worker, self._worker = self._worker, None
        if worker is None:
            raise RuntimeError("ThermalCapturer can only be started once; the camera belongs to the worker")
        self._status.set(CapturerState.RUNNING)
        self._thread = threading.Thread(target=worker.run, name="thermal-capturer", daemon=True)
        self._thread.start()
        logger.info("Thermal capture started")

    def set_settings(self, settings: ThermalCapturerSettings):
        """Queue a full settings replacement; applied after the worker's current frame."""
        self._settings = settings
        self._mailbox.put(SetSettings(settings))

    def stop(self, wait: bool = False, timeout: Optional[float] = None) -> bool:
        """
        Ask the worker to stop and release the camera.

        Returns immediately unless wait is True, in which case it joins the worker
        for up to timeout seconds (config.stop_timeout when None). Returns whether
        the worker has exited.
        """
        if self._thread is None:
            if self._worker is not None:
                self._worker = None
                self._status.set(CapturerState.STOPPED)
                self._results.send(ThermalCapturerTerminated("stopped"))
            return True
        self._mailbox.put(Stop())
        self._status.transition(CapturerState.RUNNING, CapturerState.STOPPING)
        if wait:
            return self.join(self.config.stop_timeout if timeout is None else timeout)
        return not self._thread.is_alive()

    def join(self, timeout: Optional[float] = None) -> bool:
        if self._thread is None:
            return True
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning("Thermal capture worker still running after %.1fs", timeout or 0.0)
            return False
        return True

    def poll_result(self) -> Optional[ResultItem]:
        """Next result or terminal event, or None if nothing is queued."""
        return self._results.poll()

    def wait_result(self, timeout: Optional[float] = None) -> Optional[ResultItem]:
        """Block for the next result or terminal event; None on timeout."""
        return self._results.wait(timeout)

    def results(self, timeout: Optional[float] = None) -> Iterator[ThermalCapturerResult]:
        """
        Yield results until the worker terminates; a failure is re-raised.

        Raises TimeoutError when nothing arrives within timeout seconds.
        """
        while True:
            item = self._results.wait(timeout)
            if item is None:
                raise TimeoutError(f"No thermal capture result within {timeout}s")
            if isinstance(item, ThermalCapturerTerminated):
                if item.failed and item.error is not None:
                    raise item.error
                return
            yield item

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop(wait=True)

    def __del__(self):
        # Fire-and-forget: the worker keeps its own references and exits on its own
        mailbox = getattr(self, "_mailbox", None)
        if mailbox is not None and getattr(self, "_thread", None) is not None:
            mailbox.put(Stop())
