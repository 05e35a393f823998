"""
Shared fixtures: fake collaborators for the detector chain and frame builders.
"""

import sys
from pathlib import Path
from typing import List

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from lounge_memo.courses import CourseCatalog
from lounge_memo.detector import DetectorContext
from lounge_memo.ocr import OCREngine, OCRError, Word
from lounge_memo.probes import FLAG_CHECK_PATTERN, FRAME_HEIGHT, FRAME_WIDTH, band_sample_points
from lounge_memo.snapshots import SnapshotSink

GRAY = 128
YELLOW = (0xF0, 0xE0, 0x20)

# Bottom band where course names are printed (candidate filter threshold is y >= 633)
COURSE_TEXT_Y = 650


class FakeOCR(OCREngine):
    """Returns queued responses; an OCRError instance in the queue is raised."""

    def __init__(self, default=None):
        self.responses: List = []
        self.default = default or []
        self.calls = 0

    @property
    def name(self) -> str:
        return "fake"

    def recognize(self, frame):
        self.calls += 1
        response = self.responses.pop(0) if self.responses else self.default
        if isinstance(response, OCRError):
            raise response
        return list(response)


class FakeBanner:
    """Template matcher stand-in reporting a fixed location."""

    def __init__(self, location=None):
        self.location = location

    def locate(self, luma):
        return self.location


class FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSnapshotSink(SnapshotSink):
    """Records (tag, race count) instead of writing files."""

    def __init__(self):
        super().__init__(Path("unused"))
        self.saved = []

    def save(self, frame, tag, mogi_result):
        self.saved.append((tag, len(mogi_result.races)))
        return self.path_for(tag, mogi_result)


def word(text: str, y: float = COURSE_TEXT_Y, x: float = 400.0) -> Word:
    return Word(text=text, x=x, y=y, width=20.0 * len(text), height=40.0)


def gray_frame() -> np.ndarray:
    """Neither black top band, nor flag icon, nor highlighted row."""
    return np.full((FRAME_HEIGHT, FRAME_WIDTH, 3), GRAY, dtype=np.uint8)


def black_top_frame() -> np.ndarray:
    frame = gray_frame()
    frame[:60] = 0
    return frame


def scoreboard_frame(band: int) -> np.ndarray:
    """Gray frame with scoreboard row `band` (0-based) highlighted."""
    frame = gray_frame()
    x, ys = band_sample_points(FRAME_WIDTH, FRAME_HEIGHT)[band]
    for y in ys:
        frame[y, x] = YELLOW
    return frame


def flag_frame() -> np.ndarray:
    """Gray frame with one light cell of the flag icon showing."""
    frame = gray_frame()
    x, y = FLAG_CHECK_PATTERN[1]
    frame[y, x] = (255, 255, 255)
    return frame


@pytest.fixture
def catalog():
    return CourseCatalog()


@pytest.fixture
def context(catalog):
    return DetectorContext(
        ocr=FakeOCR(),
        catalog=catalog,
        banner=FakeBanner(),
        snapshots=RecordingSnapshotSink(),
        clock=FakeClock(),
    )
