"""
Detector Context Module - collaborators shared by every detector state.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from ..courses import CourseCatalog
from ..ocr.base import OCREngine, OCRError
from ..ocr.result import Word
from ..snapshots import SnapshotSink
from ..template_matcher import ResultsBanner

logger = logging.getLogger(__name__)


@dataclass
class DetectorContext:
    """
    Context passed to detectors.

    Attributes:
        ocr: Engine used for course names and the error screen
        catalog: Course catalog, read-only
        banner: Results banner template matcher
        snapshots: Sink for race/total snapshots
        clock: Monotonic clock in seconds
    """
    ocr: OCREngine
    catalog: CourseCatalog
    banner: ResultsBanner
    snapshots: SnapshotSink
    clock: Callable[[], float] = field(default=time.monotonic)

    def recognize(self, frame: np.ndarray) -> Optional[List[Word]]:
        """
        Run OCR on a frame.

        Returns:
            Recognized fragments, or None if the engine failed for this frame
        """
        try:
            return self.ocr.recognize(frame)
        except OCRError as e:
            logger.error(f"OCR failed: {e}")
            return None
