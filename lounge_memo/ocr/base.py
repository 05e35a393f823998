"""
OCR Engine Base Interface

Abstract base class defining the OCR engine contract.
"""

from abc import ABC, abstractmethod
from typing import List

import numpy as np

from .result import Word


class OCRError(Exception):
    """Raised when an engine fails to recognize a frame."""


class OCREngine(ABC):
    """
    Abstract base class for OCR engines.

    All OCR implementations must inherit from this class and implement
    recognize(). Engines may fail transiently; they report that by raising
    OCRError, and callers treat it as "no evidence this frame".
    """

    @abstractmethod
    def recognize(self, frame: np.ndarray) -> List[Word]:
        """
        Recognize text fragments in a frame.

        Args:
            frame: RGB frame, shape (height, width, 3), dtype uint8

        Returns:
            Recognized fragments with bounding boxes in frame pixels

        Raises:
            OCRError: If the engine failed for this frame
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Engine identifier.

        Returns:
            String name identifying this engine type (e.g., "easyocr")
        """
        pass

    def configure(self, **kwargs) -> None:
        """
        Configure engine parameters.

        Override in subclasses to support runtime configuration.
        Default implementation does nothing.

        Args:
            **kwargs: Engine-specific configuration options
        """
        pass
