"""
Course Detector - reads the course name on the course-select screen.
"""

import logging
from collections import deque

import numpy as np

from ..courses import is_course_candidate
from ..mogi_result import MogiResult
from ..probes import is_top_band_black, to_luma
from .base import Detector, DetectorState
from .context import DetectorContext

logger = logging.getLogger(__name__)

# Consecutive blacked-out frames required before running OCR
BLACKOUT_WINDOW = 5
NEAREST_THRESHOLD = 4


class CourseDetector(Detector):
    """
    Waits for the course-select waiting room, whose top band is black, then
    resolves the course name printed at the bottom of the screen.
    """
    state = DetectorState.COURSE

    def __init__(self, context: DetectorContext):
        super().__init__(context)
        self._blackout = deque(maxlen=BLACKOUT_WINDOW)

    def detect(self, frame: np.ndarray, mogi_result: MogiResult) -> Detector:
        self._blackout.append(is_top_band_black(to_luma(frame)))
        if len(self._blackout) < BLACKOUT_WINDOW or not all(self._blackout):
            return self

        words = self.context.recognize(frame)
        if words is None:
            return self

        candidates = [word for word in words if is_course_candidate(word, frame.shape[0])]
        if not candidates:
            return self
        logger.debug(f"Course candidates: {[word.text for word in candidates]}")

        catalog = self.context.catalog
        course = catalog.resolve_exact(candidates)
        if course is None:
            course = catalog.resolve_nearest(candidates, NEAREST_THRESHOLD)
        if course is None:
            return self

        logger.info(f"Course detected: {course}")
        mogi_result.set_current_course(course)

        from .race_finish_detector import RaceFinishDetector
        return RaceFinishDetector(self.context)
