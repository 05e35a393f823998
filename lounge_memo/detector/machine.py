"""
Detector Machine - drives the detector chain one frame at a time.

State Flow:
    COURSE -> RACE_FINISH -> POSITION -> CAPTURE_TOTAL_SCORES
       ^           |             |                 |
       |      error screen  error screen           |
       |___________|_____________|_________________|
"""

import logging

import numpy as np

from ..mogi_result import MogiResult
from .base import Detector, DetectorState
from .context import DetectorContext
from .course_detector import CourseDetector
from .race_finish_detector import RaceFinishDetector

logger = logging.getLogger(__name__)


class DetectorMachine:
    """
    Holds the live detector and swaps it for the one each frame returns.

    Example:
        machine = DetectorMachine(context, mogi_result)
        for frame in frames:
            machine.update(frame, mogi_result)
    """

    def __init__(self, context: DetectorContext, mogi_result: MogiResult):
        self.context = context
        # Resuming mid-race: the course is already known
        if mogi_result.current_course is not None:
            self._detector: Detector = RaceFinishDetector(context)
        else:
            self._detector = CourseDetector(context)
        logger.info(f"Detector machine starting in {self.state.name}")

    @property
    def state(self) -> DetectorState:
        """Get current state machine state."""
        return self._detector.state

    @property
    def detector(self) -> Detector:
        return self._detector

    def update(self, frame: np.ndarray, mogi_result: MogiResult) -> DetectorState:
        """
        Feed one frame to the live detector.

        Returns:
            State after the frame
        """
        previous = self._detector
        self._detector = previous.detect(frame, mogi_result)
        if self._detector is not previous:
            logger.info(f"State: {previous.state.name} -> {self._detector.state.name}")
        return self._detector.state

    def resync(self, previous: MogiResult, edited: MogiResult) -> bool:
        """
        Align the chain with a manual edit.

        A course supplied by the user where none was known skips course
        detection and goes straight to waiting for the race to finish.

        Returns:
            True if the live detector was replaced
        """
        if previous.current_course is None and edited.current_course is not None:
            logger.info(f"Current course set manually: {edited.current_course}")
            self._detector = RaceFinishDetector(self.context)
            return True
        return False
