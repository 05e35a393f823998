"""
OCR Debug Utilities

Functions for saving annotated debug images and managing debug output.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .result import Word

logger = logging.getLogger(__name__)

# Debug settings
DEBUG_DIR = Path("./debug")
MAX_DEBUG_IMAGES = 10


def save_debug_image(
    frame: np.ndarray,
    words: Optional[Iterable[Word]],
    path: str,
    debug_dir: Optional[Path] = None,
) -> None:
    """
    Save an annotated debug image showing recognized text fragments.

    Annotations include:
    - Bounding box for every fragment
    - The recognized text above its box

    Args:
        frame: RGB frame, shape (height, width, 3)
        words: Recognized fragments (can be None)
        path: Output file path
        debug_dir: Directory pruned to the newest MAX_DEBUG_IMAGES files
    """
    debug_dir = debug_dir or DEBUG_DIR
    debug_dir.mkdir(parents=True, exist_ok=True)

    debug_img = Image.fromarray(frame)
    draw = ImageDraw.Draw(debug_img)
    font = ImageFont.load_default()

    count = 0
    for word in words or ():
        draw.rectangle(
            [word.x, word.y, word.x + word.width, word.y + word.height],
            outline="lime",
            width=2,
        )
        # Default bitmap font cannot render kana; fall back to a placeholder
        label = word.text if word.text.isascii() else f"#{count}"
        draw.text((word.x, max(0, word.y - 12)), label, fill="lime", font=font)
        count += 1

    draw.text((10, 10), f"Words: {count}", fill="blue", font=font)

    debug_img.save(path, "PNG")

    _cleanup_debug_images(debug_dir)


def _cleanup_debug_images(debug_dir: Path) -> None:
    """Remove old debug images, keeping only the most recent MAX_DEBUG_IMAGES."""
    if not debug_dir.exists():
        return

    debug_files = sorted(
        debug_dir.glob("debug_*.png"),
        key=lambda p: p.stat().st_mtime,
        reverse=True
    )

    for old_file in debug_files[MAX_DEBUG_IMAGES:]:
        try:
            old_file.unlink()
        except OSError as e:
            logger.warning(f"Could not remove old debug image {old_file}: {e}")
