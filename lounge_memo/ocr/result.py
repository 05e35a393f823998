"""
OCR Result Dataclasses

Shared data structures for OCR engine results.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Word:
    """
    One recognized text fragment.

    Coordinates are in frame pixel space; (x, y) is the top-left corner
    of the fragment's bounding box.
    """
    text: str
    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        """Lower edge of the bounding box."""
        return self.y + self.height
