"""
Detector Package - frame classification state machine.

Usage:
    from lounge_memo.detector import DetectorContext, DetectorMachine

    context = DetectorContext(ocr=engine, catalog=CourseCatalog(),
                              banner=banner, snapshots=SnapshotSink())
    machine = DetectorMachine(context, mogi_result)
    machine.update(frame, mogi_result)
"""

from .context import DetectorContext
from .base import Detector, DetectorState, detect_error_screen
from .course_detector import CourseDetector
from .race_finish_detector import RaceFinishDetector
from .position_detector import PositionDetector
from .capture_total_scores_detector import CaptureTotalScoresDetector
from .machine import DetectorMachine

__all__ = [
    "DetectorContext",
    "Detector",
    "DetectorState",
    "detect_error_screen",
    "CourseDetector",
    "RaceFinishDetector",
    "PositionDetector",
    "CaptureTotalScoresDetector",
    "DetectorMachine",
]
