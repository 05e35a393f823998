"""
Race Finish Detector - waits for the results banner after a race.
"""

import logging
from collections import deque

import numpy as np

from ..mogi_result import MogiResult
from ..probes import in_results_banner_rect, is_flag_visible, to_luma
from .base import Detector, DetectorState
from .context import DetectorContext
from .course_detector import CourseDetector

logger = logging.getLogger(__name__)

BANNER_WINDOW = 4
BANNER_HITS_REQUIRED = 3


class RaceFinishDetector(Detector):
    """
    Watches a running race.

    While the flag icon is visible the race is still on. Otherwise the
    results banner is searched for; 3 hits in the last 4 frames move on to
    reading the finishing position.
    """
    state = DetectorState.RACE_FINISH

    def __init__(self, context: DetectorContext):
        super().__init__(context)
        self._banner_hits = deque(maxlen=BANNER_WINDOW)

    def detect(self, frame: np.ndarray, mogi_result: MogiResult) -> Detector:
        if self.check_error_screen(frame, mogi_result):
            return CourseDetector(self.context)

        if is_flag_visible(frame):
            return self

        height, width = frame.shape[:2]
        location = self.context.banner.locate(to_luma(frame))
        hit = in_results_banner_rect(location, width, height)
        logger.debug(f"Results banner at {location}, hit={hit}")
        self._banner_hits.append(hit)

        if sum(self._banner_hits) >= BANNER_HITS_REQUIRED:
            logger.info("Race finished, reading position")
            from .position_detector import PositionDetector
            return PositionDetector(self.context)
        return self
