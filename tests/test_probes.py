"""
Tests for the fixed-coordinate pixel probes.
"""

import numpy as np
import pytest

from conftest import black_top_frame, flag_frame, gray_frame, scoreboard_frame
from lounge_memo.probes import (
    FLAG_CHECK_PATTERN, band_sample_points, find_highlighted_band,
    in_results_banner_rect, is_flag_visible, is_top_band_black, is_yellow, to_luma
)


def test_to_luma_range():
    frame = gray_frame()
    frame[0, 0] = (255, 255, 255)
    luma = to_luma(frame)
    assert luma.shape == frame.shape[:2]
    assert luma.dtype == np.float32
    assert luma[0, 0] == pytest.approx(1.0, abs=1e-5)
    assert luma[1, 1] == pytest.approx(128 / 255, abs=1e-5)


def test_top_band_black():
    assert is_top_band_black(to_luma(black_top_frame()))
    assert not is_top_band_black(to_luma(gray_frame()))

    frame = black_top_frame()
    frame[49, 640] = (200, 200, 200)
    assert not is_top_band_black(to_luma(frame))


def test_flag_visible_on_single_cell():
    assert is_flag_visible(flag_frame())
    assert not is_flag_visible(gray_frame())


def test_flag_visible_on_dark_cell():
    frame = gray_frame()
    x, y = FLAG_CHECK_PATTERN[0]
    frame[y, x] = (0, 0, 0)
    assert is_flag_visible(frame)


def test_flag_scaled_to_frame_size():
    frame = np.full((1080, 1920, 3), 128, dtype=np.uint8)
    x, y = FLAG_CHECK_PATTERN[3]
    frame[int(y * 1.5), int(x * 1.5)] = (255, 255, 255)
    assert is_flag_visible(frame)


def test_is_yellow():
    assert is_yellow((0xF0, 0xE0, 0x20))
    assert not is_yellow((0xF0, 0xE0, 0x90))
    assert not is_yellow((0xD0, 0xE0, 0x20))


def test_band_sample_points_layout():
    points = band_sample_points(1280, 720)
    assert len(points) == 12
    x, ys = points[0]
    assert x == 1133
    assert 53 <= ys[0] <= 54
    assert ys == list(range(ys[0], ys[0] + 5))
    assert 51 <= points[1][1][0] - ys[0] <= 53
    assert points[-1][1][-1] < 720


@pytest.mark.parametrize("band", [0, 4, 11])
def test_find_highlighted_band(band):
    assert find_highlighted_band(scoreboard_frame(band)) == band


def test_find_highlighted_band_none():
    assert find_highlighted_band(gray_frame()) is None


def test_partially_yellow_band_is_ignored():
    frame = scoreboard_frame(2)
    x, ys = band_sample_points(1280, 720)[2]
    frame[ys[-1], x] = (128, 128, 128)
    assert find_highlighted_band(frame) is None


def test_results_banner_rect():
    assert in_results_banner_rect((555, 42), 1280, 720)
    assert in_results_banner_rect((568, 57), 1280, 720)
    assert not in_results_banner_rect((554, 50), 1280, 720)
    assert not in_results_banner_rect((560, 58), 1280, 720)
    assert not in_results_banner_rect(None, 1280, 720)
