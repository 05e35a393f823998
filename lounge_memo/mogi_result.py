"""
Mogi Result Aggregate

Accumulating record of every race in one play session plus the course of
the race currently in progress. Serialized to JSON after every change so a
crashed session can be resumed.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .courses import Course, Series
from .race_result import Position, RaceResult

logger = logging.getLogger(__name__)


@dataclass
class MogiResult:
    """
    Session aggregate.

    current_course is set only while a race's course is known and
    its position is not yet recorded.
    """
    races: List[RaceResult] = field(default_factory=list)
    current_course: Optional[Course] = None
    created_at: datetime = field(default_factory=lambda: datetime.now().astimezone())

    def set_current_course(self, course: Course) -> None:
        self.current_course = course

    def reset_current_course(self) -> None:
        self.current_course = None

    def set_current_position(self, position: Position) -> None:
        """Record a position for the current course; no-op without one."""
        if self.current_course is None:
            return
        self.commit_position(position)

    def commit_position(self, position: Position) -> None:
        """Append a race with the current course (possibly None) and clear it."""
        self.races.append(RaceResult(self.current_course, position))
        self.current_course = None

    def set_course(self, index: int, course: Optional[Course]) -> None:
        self.races[index].course = course

    def set_position(self, index: int, position: Position) -> None:
        self.races[index].position = position

    def total_score(self) -> int:
        return sum(race.to_score() for race in self.races)

    def copy(self) -> "MogiResult":
        """Independent copy; Course and Position are immutable so races are rebuilt shallowly."""
        return MogiResult(
            races=[RaceResult(race.course, race.position) for race in self.races],
            current_course=self.current_course,
            created_at=self.created_at,
        )

    def to_clipboard_text(self) -> str:
        """One 'course<TAB>position' line per race."""
        lines = []
        for race in self.races:
            course = str(race.course) if race.course is not None else ""
            lines.append(f"{course}\t{race.position}\n")
        return "".join(lines)

    def __str__(self) -> str:
        lines = [f"{i + 1:02}\t{race}" for i, race in enumerate(self.races)]
        lines.append("---")
        if self.current_course is not None:
            lines.append(f"current course: {self.current_course}")
        lines.append(f"total score: {self.total_score()}")
        return "\n".join(lines) + "\n"

    # --- Serialization ---

    def to_dict(self) -> Dict[str, Any]:
        return {
            "races": [
                {
                    "course": _course_to_dict(race.course),
                    "position": race.position.value,
                }
                for race in self.races
            ],
            "current_course": _course_to_dict(self.current_course),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MogiResult":
        """
        Rebuild an aggregate from to_dict() output.

        Raises:
            KeyError, ValueError: If the document is malformed
        """
        races = [
            RaceResult(_course_from_dict(race.get("course")), Position(race["position"]))
            for race in data.get("races", [])
        ]
        return cls(
            races=races,
            current_course=_course_from_dict(data.get("current_course")),
            created_at=datetime.fromisoformat(data["created_at"]),
        )

    def save(self, path: Path) -> None:
        """
        Write the aggregate as pretty-printed JSON.

        Raises:
            OSError: If the file cannot be written
        """
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, ensure_ascii=False, indent=2)
        logger.debug(f"Result saved to {path}")

    @classmethod
    def load(cls, path: Path) -> "MogiResult":
        """
        Read an aggregate written by save().

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is not a valid result document
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        try:
            result = cls.from_dict(data)
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid result file {path}: {e}") from e
        logger.info(f"Result loaded from {path}: {len(result.races)} races")
        return result


def _course_to_dict(course: Optional[Course]) -> Optional[Dict[str, str]]:
    if course is None:
        return None
    return {"name": course.name, "series": course.series.value}


def _course_from_dict(data: Optional[Dict[str, str]]) -> Optional[Course]:
    if data is None:
        return None
    return Course(data["name"], Series(data["series"]))
