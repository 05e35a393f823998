#!/usr/bin/env python3
"""
Template extraction tool for the results banner.

Cuts the "results" banner template and its mask out of a captured
results-screen frame and saves them to assets/templates/.

Usage:
    python tools/extract_templates.py <image_path> --box X Y WIDTH HEIGHT

The script will:
1. Resize the frame to the calibrated 1280x720
2. Crop the banner box and convert it to grayscale
3. Build the mask from the bright banner lettering (dilated by a few pixels)
4. Save results.png and results_mask.png
5. Run the matcher on the same frame and report where the banner is found

Examples:
    python tools/extract_templates.py debug/results_screen.png --box 561 49 160 40
"""

import argparse
import sys
from pathlib import Path

import cv2
import numpy as np
from PIL import Image

sys.path.insert(0, str(Path(__file__).parent.parent))

from lounge_memo.capture import fit_frame
from lounge_memo.probes import in_results_banner_rect, to_luma
from lounge_memo.template_matcher import MASK_FILE, TEMPLATE_FILE, ResultsBanner


TEMPLATE_DIR = Path("./assets/templates")


def build_template(frame: np.ndarray, box: tuple, threshold: int, dilate: int) -> tuple:
    """
    Crop the banner and derive its mask.

    Returns:
        (template, mask) as uint8 grayscale images
    """
    x, y, width, height = box
    gray = cv2.cvtColor(frame, cv2.COLOR_RGB2GRAY)
    template = gray[y:y + height, x:x + width]
    if template.shape != (height, width):
        raise ValueError(f"Box {box} does not fit in the {frame.shape[1]}x{frame.shape[0]} frame")

    mask = np.where(template >= threshold, 255, 0).astype(np.uint8)
    if dilate > 0:
        kernel = np.ones((2 * dilate + 1, 2 * dilate + 1), np.uint8)
        mask = cv2.dilate(mask, kernel)
    return template, mask


def save_templates(template: np.ndarray, mask: np.ndarray, template_dir: Path):
    """Save template and mask PNGs."""
    template_dir.mkdir(parents=True, exist_ok=True)
    for name, image in ((TEMPLATE_FILE, template), (MASK_FILE, mask)):
        path = template_dir / name
        cv2.imwrite(str(path), image)
        print(f"Saved: {path}")


def verify(frame: np.ndarray, template_dir: Path) -> bool:
    """Match the saved template against the source frame."""
    banner = ResultsBanner()
    if not banner.load(template_dir):
        print("ERROR: could not reload the saved template")
        return False
    location = banner.locate(to_luma(frame))
    height, width = frame.shape[:2]
    hit = in_results_banner_rect(location, width, height)
    print(f"Best match at {location}: {'inside' if hit else 'OUTSIDE'} the expected banner window")
    return hit


def main():
    parser = argparse.ArgumentParser(description="Extract the results banner template")
    parser.add_argument("image", help="Results-screen frame (any resolution, 16:9)")
    parser.add_argument("--box", type=int, nargs=4, required=True,
                        metavar=("X", "Y", "WIDTH", "HEIGHT"),
                        help="Banner box at 1280x720")
    parser.add_argument("--threshold", type=int, default=200,
                        help="Gray level above which a pixel belongs to the lettering")
    parser.add_argument("--dilate", type=int, default=2, help="Mask dilation radius in pixels")
    parser.add_argument("--out", type=Path, default=TEMPLATE_DIR, help="Output directory")
    args = parser.parse_args()

    frame = fit_frame(np.array(Image.open(args.image).convert("RGB")))
    print(f"Using image: {args.image}")

    try:
        template, mask = build_template(frame, tuple(args.box), args.threshold, args.dilate)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1

    coverage = 100.0 * np.count_nonzero(mask) / mask.size
    print(f"Template {template.shape[1]}x{template.shape[0]}, mask covers {coverage:.1f}%")

    save_templates(template, mask, args.out)
    return 0 if verify(frame, args.out) else 2


if __name__ == "__main__":
    sys.exit(main())
