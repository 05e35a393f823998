"""
Diagnostic script to check recognition on captured frames.

For each image prints the OCR fragments, the course candidates and the
course they resolve to, the error-screen verdict and every pixel probe.

Usage:
    python tools/debug_ocr.py debug/frame.png [more.png ...] [--save]
"""

import argparse
import sys
from pathlib import Path

import numpy as np
from PIL import Image

sys.path.insert(0, str(Path(__file__).parent.parent))

from lounge_memo.capture import fit_frame
from lounge_memo.courses import CourseCatalog, is_course_candidate
from lounge_memo.detector import detect_error_screen
from lounge_memo.detector.course_detector import NEAREST_THRESHOLD
from lounge_memo.mogi_result import MogiResult
from lounge_memo.ocr import OCRError, create_engine, save_debug_image
from lounge_memo.probes import (
    find_highlighted_band, in_results_banner_rect, is_flag_visible,
    is_top_band_black, to_luma
)
from lounge_memo.settings import load_settings
from lounge_memo.template_matcher import ResultsBanner


def analyze_image(image_path: str, engine, catalog: CourseCatalog, banner: ResultsBanner, save: bool):
    """Analyze an image and report every detector input."""
    print(f"\n{'='*60}")
    print(f"Analyzing: {image_path}")
    print(f"{'='*60}")

    frame = fit_frame(np.array(Image.open(image_path).convert("RGB")))
    height, width = frame.shape[:2]
    luma = to_luma(frame)

    print(f"Top band black:   {is_top_band_black(luma)}")
    print(f"Flag visible:     {is_flag_visible(frame)}")
    location = banner.locate(luma)
    print(f"Banner location:  {location} (hit={in_results_banner_rect(location, width, height)})")
    band = find_highlighted_band(frame)
    print(f"Highlighted band: {band if band is not None else '--'}"
          f"{f' (position {band + 1})' if band is not None else ''}")

    try:
        words = engine.recognize(frame)
    except OCRError as e:
        print(f"OCR failed: {e}")
        return

    print(f"\n{'Y':>6} {'X':>6} {'CAND':>5}  TEXT")
    for word in words:
        flag = "*" if is_course_candidate(word, height) else ""
        print(f"{word.y:>6.0f} {word.x:>6.0f} {flag:>5}  {word.text}")

    candidates = [word for word in words if is_course_candidate(word, height)]
    exact = catalog.resolve_exact(candidates)
    nearest = catalog.resolve_nearest(candidates, NEAREST_THRESHOLD)
    print(f"\nSeries:  {catalog.infer_series(candidates).value}")
    print(f"Exact:   {exact if exact is not None else '--'}")
    print(f"Nearest: {nearest if nearest is not None else '--'}")
    print(f"Error screen: {detect_error_screen(words, MogiResult())}")

    if save:
        out = Path(image_path).with_name(f"debug_{Path(image_path).stem}_ocr.png")
        save_debug_image(frame, words, str(out), debug_dir=out.parent)
        print(f"Annotated image: {out}")


def main():
    parser = argparse.ArgumentParser(description="Run recognition on still frames")
    parser.add_argument("images", nargs="*", help="Frame images (default: latest debug images)")
    parser.add_argument("--save", action="store_true", help="Write annotated OCR images")
    args = parser.parse_args()

    images = args.images
    if not images:
        images = [str(p) for p in sorted(Path("debug").glob("debug_*.png"))[-3:]]
    if not images:
        print("No debug images found!")
        return 1

    settings = load_settings()
    engine = create_engine(settings["ocr_engine"], languages=settings["ocr_languages"],
                           gpu=settings["ocr_gpu"])
    catalog = CourseCatalog()
    banner = ResultsBanner()
    banner.load(Path(settings["template_dir"]))

    for image_path in images:
        analyze_image(image_path, engine, catalog, banner, args.save)
    return 0


if __name__ == "__main__":
    sys.exit(main())
