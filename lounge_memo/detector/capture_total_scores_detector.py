"""
Capture Total Scores Detector - snapshots the total scores screen.
"""

import logging

import numpy as np

from ..mogi_result import MogiResult
from .base import Detector, DetectorState
from .context import DetectorContext
from .course_detector import CourseDetector

logger = logging.getLogger(__name__)

# Seconds between the first position reading and the total scores screen
TOTAL_SCORES_DELAY_SEC = 4.0


class CaptureTotalScoresDetector(Detector):
    """Absorbs frames until the delay has passed, then saves one snapshot."""
    state = DetectorState.CAPTURE_TOTAL_SCORES

    def __init__(self, context: DetectorContext, started_at: float):
        super().__init__(context)
        self.started_at = started_at

    def detect(self, frame: np.ndarray, mogi_result: MogiResult) -> Detector:
        if self.context.clock() - self.started_at < TOTAL_SCORES_DELAY_SEC:
            return self

        self.context.snapshots.save(frame, "total", mogi_result)
        logger.info("Total scores captured")
        return CourseDetector(self.context)
