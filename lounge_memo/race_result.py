"""
Race Result Types

Finishing positions with their point values and the per-race record.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .courses import Course

# Points for 1st..12th
SCORES = (15, 12, 10, 9, 8, 7, 6, 5, 4, 3, 2, 1)


class Position(Enum):
    """Finishing rank; the value is the rank 1..12."""
    FIRST = 1
    SECOND = 2
    THIRD = 3
    FOURTH = 4
    FIFTH = 5
    SIXTH = 6
    SEVENTH = 7
    EIGHTH = 8
    NINTH = 9
    TENTH = 10
    ELEVENTH = 11
    TWELFTH = 12

    @classmethod
    def from_index(cls, index: int) -> "Position":
        """
        Position for a zero-based band index.

        Raises:
            ValueError: If index is outside 0..11. An out-of-range index means
                        the scoreboard layout assumptions are broken, so callers
                        must not recover from it.
        """
        if not 0 <= index < len(SCORES):
            raise ValueError(f"invalid position index: {index}")
        return cls(index + 1)

    def to_score(self) -> int:
        return SCORES[self.value - 1]

    def __str__(self) -> str:
        return str(self.value)


@dataclass
class RaceResult:
    """One finished race. Both fields may be edited by the user afterwards."""
    course: Optional[Course]
    position: Position

    def to_score(self) -> int:
        return self.position.to_score()

    def __str__(self) -> str:
        prefix = f"{self.course}\t" if self.course is not None else ""
        return f"{prefix}{self.position}\t{self.to_score()}"
