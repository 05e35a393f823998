"""
Position Detector - reads the finishing position off the scoreboard.
"""

import logging
from typing import Optional

import numpy as np

from ..mogi_result import MogiResult
from ..probes import find_highlighted_band
from ..race_result import Position
from .base import Detector, DetectorState
from .capture_total_scores_detector import CaptureTotalScoresDetector
from .context import DetectorContext
from .course_detector import CourseDetector

logger = logging.getLogger(__name__)

# Consecutive identical readings required to commit a position
CONFIRM_FRAMES = 4


class PositionDetector(Detector):
    """
    Finds the player's highlighted (yellow) scoreboard row.

    A position is committed once the same row has been read on
    CONFIRM_FRAMES consecutive frames; a different reading restarts the run.
    Frames without a highlighted row leave the run untouched.
    """
    state = DetectorState.POSITION

    def __init__(self, context: DetectorContext):
        super().__init__(context)
        self._candidate: Optional[Position] = None
        self._run_length = 0
        self._first_seen: Optional[float] = None

    def detect(self, frame: np.ndarray, mogi_result: MogiResult) -> Detector:
        if self.check_error_screen(frame, mogi_result):
            return CourseDetector(self.context)

        band = find_highlighted_band(frame)
        if band is None:
            return self

        position = Position.from_index(band)
        if position != self._candidate:
            self._candidate = position
            self._run_length = 1
            self._first_seen = self.context.clock()
        else:
            self._run_length += 1
        logger.debug(f"Position reading: {position} ({self._run_length}/{CONFIRM_FRAMES})")

        if self._run_length < CONFIRM_FRAMES:
            return self

        mogi_result.commit_position(position)
        logger.info(f"Position committed: {position} (race {len(mogi_result.races)})")
        self.context.snapshots.save(frame, "race", mogi_result)
        return CaptureTotalScoresDetector(self.context, self._first_seen)
