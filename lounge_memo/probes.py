"""
Region and Color Probes

Pure functions sampling fixed pixel coordinates of a frame. Coordinates are
defined at a reference resolution and scaled to the frame's actual size.
"""

from typing import Optional, Sequence, Tuple

import numpy as np

# Calibrated capture resolution
FRAME_WIDTH = 1280
FRAME_HEIGHT = 720

# Course-select waiting room: top rows are uniformly black
TOP_BAND_ROWS = 50
BLACK_LUMA_THRESHOLD = 0.1

# Flag icon shown in the bottom-left corner while a race is running.
# Even entries are expected dark, odd entries expected light. At 1280x720.
FLAG_CHECK_PATTERN: Tuple[Tuple[int, int], ...] = (
    (174, 659), (183, 659), (192, 659),
    (174, 667), (180, 667), (189, 667),
    (173, 675), (182, 675), (191, 675),
)
FLAG_DARK_MAX = 5
FLAG_LIGHT_MIN = 0xD0

# Results banner location window (template top-left), at 1280x720
RESULTS_BANNER_X_RANGE = (555, 568)
RESULTS_BANNER_Y_RANGE = (42, 57)

# Scoreboard rows, at 1920x1080
SCOREBOARD_LINES = 12
SCOREBOARD_LINE_HEIGHT_REF = 78
SCOREBOARD_OFFSET_Y_REF = 81
SCOREBOARD_MARGIN_RIGHT_REF = 220
SCOREBOARD_SAMPLE_PIXELS = 5

# Highlighted (own) scoreboard row color
YELLOW_R_MIN = 0xD0
YELLOW_G_MIN = 0xC8
YELLOW_B_MAX = 0x80

# ITU-R BT.601 luma weights, matching PIL's "L" conversion
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float32)


def to_luma(frame: np.ndarray) -> np.ndarray:
    """
    Convert an RGB uint8 frame to float32 luma in [0, 1].

    Args:
        frame: RGB frame, shape (height, width, 3)

    Returns:
        Luma image, shape (height, width), dtype float32
    """
    return (frame[..., :3].astype(np.float32) @ LUMA_WEIGHTS) / 255.0


def is_top_band_black(luma: np.ndarray) -> bool:
    """True if every pixel of the top TOP_BAND_ROWS rows is near black."""
    band = luma[:TOP_BAND_ROWS]
    return bool(band.size) and bool(np.all(band < BLACK_LUMA_THRESHOLD))


def _scale(x: float, y: float, width: int, height: int,
           ref_width: int = FRAME_WIDTH, ref_height: int = FRAME_HEIGHT) -> Tuple[int, int]:
    return int(x * width / ref_width), int(y * height / ref_height)


def is_flag_visible(frame: np.ndarray) -> bool:
    """
    Check the in-race flag icon.

    Any single probe showing its expected color is enough; the icon animates
    and rarely shows every cell at once.
    """
    height, width = frame.shape[:2]
    for i, (ref_x, ref_y) in enumerate(FLAG_CHECK_PATTERN):
        x, y = _scale(ref_x, ref_y, width, height)
        r, g, b = (int(c) for c in frame[y, x, :3])
        if i % 2 == 0:
            if r < FLAG_DARK_MAX and g < FLAG_DARK_MAX and b < FLAG_DARK_MAX:
                return True
        elif r > FLAG_LIGHT_MIN and g > FLAG_LIGHT_MIN and b > FLAG_LIGHT_MIN:
            return True
    return False


def is_yellow(pixel: Sequence[int]) -> bool:
    r, g, b = int(pixel[0]), int(pixel[1]), int(pixel[2])
    return r > YELLOW_R_MIN and g > YELLOW_G_MIN and b < YELLOW_B_MAX


def band_sample_points(width: int, height: int) -> list:
    """(x, [y0..y4]) sample columns for each scoreboard row, top to bottom."""
    line_height = SCOREBOARD_LINE_HEIGHT_REF / 1080 * height
    offset_y = SCOREBOARD_OFFSET_Y_REF / 1080 * height
    x = int(width - SCOREBOARD_MARGIN_RIGHT_REF / 1920 * width)
    points = []
    for i in range(SCOREBOARD_LINES):
        top = int(offset_y + line_height * i)
        points.append((x, list(range(top, top + SCOREBOARD_SAMPLE_PIXELS))))
    return points


def find_highlighted_band(frame: np.ndarray) -> Optional[int]:
    """
    Index of the first scoreboard row whose sampled pixels are all yellow.

    Returns:
        Row index 0..11, or None if no row is highlighted
    """
    height, width = frame.shape[:2]
    for index, (x, ys) in enumerate(band_sample_points(width, height)):
        if all(is_yellow(frame[y, x]) for y in ys):
            return index
    return None


def in_results_banner_rect(location: Optional[Tuple[int, int]], width: int, height: int) -> bool:
    """True if a template match location falls in the expected banner window."""
    if location is None:
        return False
    x, y = location
    x_min, y_min = _scale(RESULTS_BANNER_X_RANGE[0], RESULTS_BANNER_Y_RANGE[0], width, height)
    x_max, y_max = _scale(RESULTS_BANNER_X_RANGE[1], RESULTS_BANNER_Y_RANGE[1], width, height)
    return x_min <= x <= x_max and y_min <= y <= y_max
