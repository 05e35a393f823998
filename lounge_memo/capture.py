"""
Frame Capture Module for Lounge Memo

Frame sources feeding the pipeline: an OpenCV capture device (capture card
or webcam), a monitor grabbed with mss, or a recorded video file. Every
source delivers RGB uint8 frames at the calibrated resolution.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

import cv2
import mss
from mss.exception import ScreenShotError
import numpy as np

from .probes import FRAME_HEIGHT, FRAME_WIDTH

logger = logging.getLogger(__name__)

# Live sources are throttled to this rate
TARGET_FPS = 30.0

# Device indices probed by list_camera_devices()
MAX_CAMERA_PROBE = 8


class CaptureError(Exception):
    """Raised when a frame source fails and cannot deliver more frames."""


def fit_frame(frame: np.ndarray) -> np.ndarray:
    """Resize a frame to the calibrated resolution if needed."""
    height, width = frame.shape[:2]
    if (width, height) == (FRAME_WIDTH, FRAME_HEIGHT):
        return frame
    return cv2.resize(frame, (FRAME_WIDTH, FRAME_HEIGHT), interpolation=cv2.INTER_AREA)


class FrameSource(ABC):
    """
    Abstract base class for frame sources.

    Attributes:
        live: True for real-time sources, which the producer throttles
    """
    live: bool = True

    @abstractmethod
    def read(self) -> Optional[np.ndarray]:
        """
        Grab the next frame.

        Returns:
            RGB frame at FRAME_WIDTH x FRAME_HEIGHT, or None at end of stream

        Raises:
            CaptureError: If the source failed
        """
        pass

    def release(self) -> None:
        """Release the underlying device. Safe to call more than once."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable source description for the UI."""
        pass


class CameraSource(FrameSource):
    """OpenCV capture device, typically a capture card."""

    def __init__(self, device_index: int = 0):
        self.device_index = device_index
        self._capture: Optional[cv2.VideoCapture] = None

    @property
    def description(self) -> str:
        return f"Camera #{self.device_index}"

    def _open(self) -> cv2.VideoCapture:
        capture = cv2.VideoCapture(self.device_index)
        if not capture.isOpened():
            capture.release()
            raise CaptureError(f"Could not open capture device {self.device_index}")
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, FRAME_WIDTH)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, FRAME_HEIGHT)
        logger.info(f"Opened capture device {self.device_index}")
        return capture

    def read(self) -> Optional[np.ndarray]:
        if self._capture is None:
            self._capture = self._open()
        ok, frame = self._capture.read()
        if not ok or frame is None:
            raise CaptureError(f"Capture device {self.device_index} stopped delivering frames")
        return fit_frame(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))

    def release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None


class VideoFileSource(FrameSource):
    """Replays a recorded video file as fast as the consumer accepts frames."""
    live = False

    def __init__(self, path: Path):
        self.path = Path(path)
        self._capture: Optional[cv2.VideoCapture] = None

    @property
    def description(self) -> str:
        return f"Video {self.path.name}"

    def read(self) -> Optional[np.ndarray]:
        if self._capture is None:
            if not self.path.exists():
                raise CaptureError(f"Video file not found: {self.path}")
            self._capture = cv2.VideoCapture(str(self.path))
            if not self._capture.isOpened():
                raise CaptureError(f"Could not open video file: {self.path}")
            logger.info(f"Replaying {self.path}")
        ok, frame = self._capture.read()
        if not ok or frame is None:
            return None
        return fit_frame(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))

    def release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None


class ScreenSource(FrameSource):
    """
    Monitor grab using mss, for a game shown in a capture software window.

    The mss handle is created lazily on the producer thread.
    """

    def __init__(self, monitor: int = 1):
        self.monitor = monitor
        self._sct: Optional[Any] = None

    @property
    def description(self) -> str:
        return f"Screen #{self.monitor}"

    def read(self) -> Optional[np.ndarray]:
        if self._sct is None:
            self._sct = mss.mss()
        try:
            region = self._sct.monitors[self.monitor]
            screenshot = self._sct.grab(region)
        except (IndexError, ScreenShotError) as e:
            raise CaptureError(f"Screen capture of monitor {self.monitor} failed: {e}") from e
        frame = np.asarray(screenshot)
        return fit_frame(cv2.cvtColor(frame, cv2.COLOR_BGRA2RGB))

    def release(self) -> None:
        if self._sct is not None:
            self._sct.close()
            self._sct = None


def list_camera_devices(max_index: int = MAX_CAMERA_PROBE) -> List[int]:
    """
    Probe OpenCV capture devices.

    Returns:
        Indices of devices that could be opened
    """
    devices = []
    for index in range(max_index):
        capture = cv2.VideoCapture(index)
        if capture.isOpened():
            devices.append(index)
        capture.release()
    logger.debug(f"Capture devices found: {devices}")
    return devices


def create_source(settings: Dict[str, Any]) -> FrameSource:
    """
    Create the frame source selected in settings.

    Args:
        settings: Settings dictionary (see lounge_memo.settings)

    Returns:
        Unopened frame source

    Raises:
        ValueError: If the source type is not recognized
    """
    source = settings.get("source", "camera")
    if source == "camera":
        return CameraSource(int(settings.get("device_index", 0)))
    if source == "screen":
        return ScreenSource(int(settings.get("monitor", 1)))
    if source == "video":
        return VideoFileSource(Path(settings.get("video_path", "")))
    raise ValueError(f"Unknown frame source: {source}. Available: camera, screen, video")
