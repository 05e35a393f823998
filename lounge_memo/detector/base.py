"""
Detector Base Module - Abstract base class for frame detectors.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Sequence

import numpy as np

from ..mogi_result import MogiResult
from ..ocr.result import Word
from ..text import normalize
from .context import DetectorContext

logger = logging.getLogger(__name__)


class DetectorState(Enum):
    """
    Detector chain states.

    States:
        COURSE: Waiting for the course-select screen to read the course name
        RACE_FINISH: Race running, waiting for the results banner
        POSITION: Results shown, reading the highlighted scoreboard row
        CAPTURE_TOTAL_SCORES: Waiting for the total scores screen to snapshot it
    """
    COURSE = auto()
    RACE_FINISH = auto()
    POSITION = auto()
    CAPTURE_TOTAL_SCORES = auto()


# Fragments of the in-game "communication error occurred" dialog
ERROR_KEYWORDS = tuple(normalize(word) for word in ("エラー", "通信", "はっせい", "しました"))
ERROR_KEYWORD_HITS = 4
MIN_FRAGMENT_CHARS = 2


def detect_error_screen(words: Sequence[Word], mogi_result: MogiResult) -> bool:
    """
    Detect the communication error dialog and drop the in-progress course.

    Hits are counted per (fragment, keyword) pair, summed across fragments,
    so the dialog is recognized even when OCR splits its text.

    Args:
        words: OCR fragments of the frame
        mogi_result: Aggregate whose current course is reset on detection

    Returns:
        True if the error dialog is on screen
    """
    hits = 0
    for word in words:
        if len(word.text) < MIN_FRAGMENT_CHARS:
            continue
        text = normalize(word.text.replace(" ", ""))
        for keyword in ERROR_KEYWORDS:
            if keyword in text:
                hits += 1
            if hits >= ERROR_KEYWORD_HITS:
                logger.warning("Communication error screen detected, dropping current course")
                mogi_result.reset_current_course()
                return True
    return False


class Detector(ABC):
    """
    Abstract base class for all detector states.

    Subclasses implement detect() and set the state class attribute. A
    detector returns itself to stay in its state or a new detector to
    transition; the returned detector replaces the old one.
    """
    state: DetectorState

    def __init__(self, context: DetectorContext):
        self.context = context

    @abstractmethod
    def detect(self, frame: np.ndarray, mogi_result: MogiResult) -> "Detector":
        """
        Consume one frame.

        Args:
            frame: RGB frame, shape (height, width, 3)
            mogi_result: Aggregate, mutated in place on course/position events

        Returns:
            Detector for the next frame
        """
        pass

    def check_error_screen(self, frame: np.ndarray, mogi_result: MogiResult) -> bool:
        """Run OCR and the error-screen check; an OCR failure counts as no error."""
        words = self.context.recognize(frame)
        if words is None:
            return False
        return detect_error_screen(words, mogi_result)
