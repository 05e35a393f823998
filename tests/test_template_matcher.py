"""
Tests for the masked results banner matcher.
"""

import cv2
import numpy as np

from lounge_memo.probes import in_results_banner_rect
from lounge_memo.template_matcher import MASK_FILE, TEMPLATE_FILE, ResultsBanner


def banner_pattern() -> np.ndarray:
    """Striped 24x60 uint8 block standing in for the banner lettering."""
    pattern = np.zeros((24, 60), dtype=np.uint8)
    pattern[4:20, ::6] = 255
    pattern[10:14, :] = 255
    return pattern


def luma_with_banner(x: int, y: int) -> np.ndarray:
    rng = np.random.default_rng(0)
    luma = (rng.random((720, 1280)) * 0.3).astype(np.float32)
    pattern = banner_pattern()
    h, w = pattern.shape
    luma[y:y + h, x:x + w] = pattern.astype(np.float32) / 255.0
    return luma


def write_template(directory, template: np.ndarray, mask: np.ndarray) -> None:
    cv2.imwrite(str(directory / TEMPLATE_FILE), template)
    cv2.imwrite(str(directory / MASK_FILE), mask)


def test_locate_without_template():
    banner = ResultsBanner()
    assert not banner.is_loaded()
    assert banner.locate(np.zeros((720, 1280), dtype=np.float32)) is None


def test_locate_finds_banner():
    pattern = banner_pattern().astype(np.float32) / 255.0
    banner = ResultsBanner(pattern, np.ones_like(pattern))
    location = banner.locate(luma_with_banner(560, 50))
    assert location == (560, 50)
    assert in_results_banner_rect(location, 1280, 720)


def test_locate_outside_window():
    pattern = banner_pattern().astype(np.float32) / 255.0
    banner = ResultsBanner(pattern, np.ones_like(pattern))
    location = banner.locate(luma_with_banner(100, 400))
    assert location == (100, 400)
    assert not in_results_banner_rect(location, 1280, 720)


def test_load_from_directory(tmp_path):
    pattern = banner_pattern()
    write_template(tmp_path, pattern, np.full_like(pattern, 255))

    banner = ResultsBanner()
    assert banner.load(tmp_path)
    assert banner.is_loaded()
    assert banner.template.dtype == np.float32
    assert banner.template.shape == pattern.shape
    assert banner.template.max() <= 1.0
    assert banner.locate(luma_with_banner(562, 45)) == (562, 45)


def test_load_missing_files(tmp_path):
    banner = ResultsBanner()
    assert not banner.load(tmp_path)
    assert not banner.is_loaded()


def test_load_rejects_mismatched_mask(tmp_path):
    pattern = banner_pattern()
    write_template(tmp_path, pattern, np.full((10, 10), 255, dtype=np.uint8))

    banner = ResultsBanner()
    assert not banner.load(tmp_path)
    assert banner.locate(luma_with_banner(560, 50)) is None
