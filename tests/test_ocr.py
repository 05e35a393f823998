"""
Tests for the OCR package: engine factory, EasyOCR result conversion and
debug image output. The EasyOCR model itself is never loaded.
"""

import os

import numpy as np
import pytest
from PIL import Image

from conftest import gray_frame, word
from lounge_memo.ocr import OCRError, create_engine, save_debug_image
from lounge_memo.ocr.debug import MAX_DEBUG_IMAGES
from lounge_memo.ocr.easyocr_engine import EasyOCREngine, words_from_detections


class BrokenReader:
    def readtext(self, frame, detail=1, paragraph=False):
        raise RuntimeError("CUDA out of memory")


class StaticReader:
    def __init__(self, detections):
        self.detections = detections
        self.frames = []

    def readtext(self, frame, detail=1, paragraph=False):
        self.frames.append(frame)
        return self.detections


DETECTIONS = [
    ([[100, 650], [400, 650], [400, 690], [100, 690]], "マリオカートスタジアム", 0.91),
    ([[10.5, 20], [60, 18], [62, 40], [12, 42]], "GBA", 0.55),
]


def test_words_from_detections():
    words = words_from_detections(DETECTIONS)
    assert [w.text for w in words] == ["マリオカートスタジアム", "GBA"]
    assert (words[0].x, words[0].y, words[0].width, words[0].height) == (100, 650, 300, 40)
    assert words[0].bottom == 690
    assert words[1].x == 10.5
    assert words[1].y == 18
    assert words[1].width == pytest.approx(51.5)
    assert words[1].height == 24


def test_create_default_engine():
    engine = create_engine()
    assert isinstance(engine, EasyOCREngine)
    assert engine.name == "easyocr"


def test_create_engine_with_config():
    engine = create_engine("easyocr", languages=["en"], gpu=True)
    assert engine._languages == ["en"]
    assert engine._gpu is True


def test_create_unknown_engine():
    with pytest.raises(ValueError):
        create_engine("tesseract")


def test_easyocr_recognize_converts_detections():
    engine = EasyOCREngine()
    engine._reader = StaticReader(DETECTIONS)
    words = engine.recognize(gray_frame())
    assert len(words) == 2
    assert words[0].text == "マリオカートスタジアム"


def test_easyocr_failure_raises_ocr_error():
    engine = EasyOCREngine()
    engine._reader = BrokenReader()
    with pytest.raises(OCRError):
        engine.recognize(gray_frame())


def test_configure_resets_reader():
    engine = EasyOCREngine()
    engine._reader = StaticReader([])
    engine.configure(languages=["ja"])
    assert engine._reader is None


def test_save_debug_image(tmp_path):
    path = tmp_path / "debug_frame.png"
    save_debug_image(gray_frame(), [word("GBA"), word("マリオ", y=300)], str(path), debug_dir=tmp_path)

    image = Image.open(path)
    assert image.size == (1280, 720)
    assert np.asarray(image.convert("RGB"))[0, 0].tolist() == [128, 128, 128]


def test_save_debug_image_without_words(tmp_path):
    path = tmp_path / "debug_empty.png"
    save_debug_image(gray_frame(), None, str(path), debug_dir=tmp_path)
    assert path.exists()


def test_debug_images_pruned(tmp_path):
    for i in range(MAX_DEBUG_IMAGES + 3):
        old = tmp_path / f"debug_{i:03}.png"
        old.write_bytes(b"")
        os.utime(old, (1_000_000 + i, 1_000_000 + i))

    save_debug_image(gray_frame(), [], str(tmp_path / "debug_999.png"), debug_dir=tmp_path)

    remaining = sorted(p.name for p in tmp_path.glob("debug_*.png"))
    assert len(remaining) == MAX_DEBUG_IMAGES
    assert "debug_999.png" in remaining
    assert "debug_000.png" not in remaining


def test_easyocr_receives_bgr_frame():
    frame = gray_frame()
    frame[0, 0] = (255, 0, 0)
    reader = StaticReader([])
    engine = EasyOCREngine()
    engine._reader = reader

    engine.recognize(frame)

    assert reader.frames[0][0, 0].tolist() == [0, 0, 255]
    assert frame[0, 0].tolist() == [255, 0, 0]
