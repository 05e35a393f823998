"""
Results Banner Matcher

Masked template matching used to spot the "results" banner that appears
when a race is over.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

import cv2
import numpy as np

logger = logging.getLogger(__name__)

TEMPLATE_FILE = "results.png"
MASK_FILE = "results_mask.png"


class ResultsBanner:
    """Holds the banner template and mask as float32 luma in [0, 1]."""

    def __init__(self, template: Optional[np.ndarray] = None, mask: Optional[np.ndarray] = None):
        self.template = template
        self.mask = mask

    def is_loaded(self) -> bool:
        """Check if template and mask are loaded."""
        return self.template is not None and self.mask is not None

    def load(self, template_dir: Path) -> bool:
        """
        Load the banner template and its mask from a directory.

        Expected files: results.png, results_mask.png

        Args:
            template_dir: Path to directory containing the template images

        Returns:
            True if both images loaded successfully
        """
        self.template = None
        self.mask = None
        template_dir = Path(template_dir)

        template_path = template_dir / TEMPLATE_FILE
        mask_path = template_dir / MASK_FILE
        if not template_path.exists() or not mask_path.exists():
            logger.warning(f"Results banner template missing in {template_dir}")
            return False

        template = cv2.imread(str(template_path), cv2.IMREAD_GRAYSCALE)
        mask = cv2.imread(str(mask_path), cv2.IMREAD_GRAYSCALE)
        if template is None or mask is None:
            logger.warning(f"Could not decode results banner template in {template_dir}")
            return False
        if template.shape != mask.shape:
            logger.warning(f"Template {template.shape} and mask {mask.shape} differ in size")
            return False

        self.template = template.astype(np.float32) / 255.0
        self.mask = mask.astype(np.float32) / 255.0
        logger.info(f"Results banner template loaded: {template.shape[1]}x{template.shape[0]}")
        return True

    def locate(self, luma: np.ndarray) -> Optional[Tuple[int, int]]:
        """
        Find the best banner match in a luma frame.

        Uses masked sum of squared differences; the best match is the minimum.

        Args:
            luma: float32 luma frame in [0, 1]

        Returns:
            (x, y) of the best match's top-left corner, or None when no template
            is loaded or OpenCV rejects the input
        """
        if not self.is_loaded():
            return None
        try:
            result = cv2.matchTemplate(
                luma.astype(np.float32, copy=False), self.template, cv2.TM_SQDIFF, mask=self.mask
            )
            _min_val, _max_val, min_loc, _max_loc = cv2.minMaxLoc(result)
        except cv2.error as e:
            logger.error(f"Template matching failed: {e}")
            return None
        return int(min_loc[0]), int(min_loc[1])
