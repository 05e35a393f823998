"""
EasyOCR Engine

OCR implementation backed by EasyOCR. The reader is created lazily on the
first frame because model loading takes several seconds.
"""

import logging
from typing import List, Optional, Sequence

import cv2
import numpy as np

from .base import OCREngine, OCRError
from .result import Word

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGES = ("ja", "en")


def words_from_detections(detections: Sequence) -> List[Word]:
    """
    Convert EasyOCR readtext(detail=1) output into Words.

    Args:
        detections: Sequence of (bbox, text, confidence), bbox being four
                    (x, y) corner points

    Returns:
        Words with axis-aligned bounding boxes
    """
    words = []
    for bbox, text, _confidence in detections:
        x_coords = [float(point[0]) for point in bbox]
        y_coords = [float(point[1]) for point in bbox]
        x = min(x_coords)
        y = min(y_coords)
        words.append(Word(
            text=text,
            x=x,
            y=y,
            width=max(x_coords) - x,
            height=max(y_coords) - y,
        ))
    return words


class EasyOCREngine(OCREngine):
    """OCR engine using easyocr.Reader."""

    def __init__(self, languages: Sequence[str] = DEFAULT_LANGUAGES, gpu: bool = False):
        self._languages = list(languages)
        self._gpu = gpu
        self._reader: Optional[object] = None

    @property
    def name(self) -> str:
        return "easyocr"

    def configure(self, **kwargs) -> None:
        """
        Configure engine parameters.

        Args:
            languages: EasyOCR language codes
            gpu: Use the GPU
        """
        if "languages" in kwargs:
            self._languages = list(kwargs["languages"])
            self._reader = None
        if "gpu" in kwargs:
            self._gpu = bool(kwargs["gpu"])
            self._reader = None

    def _ensure_reader(self):
        if self._reader is not None:
            return self._reader
        import easyocr

        logger.info(f"Initialising EasyOCR reader (languages={self._languages}, gpu={self._gpu})")
        try:
            self._reader = easyocr.Reader(self._languages, gpu=self._gpu, verbose=False)
        except Exception as e:
            raise OCRError(f"EasyOCR reader initialisation failed: {e}") from e
        return self._reader

    def recognize(self, frame: np.ndarray) -> List[Word]:
        reader = self._ensure_reader()
        try:
            # EasyOCR reads numpy arrays as BGR
            bgr = cv2.cvtColor(frame, cv2.COLOR_RGB2BGR)
            detections = reader.readtext(bgr, detail=1, paragraph=False)
        except Exception as e:
            raise OCRError(f"EasyOCR readtext failed: {e}") from e
        return words_from_detections(detections)
