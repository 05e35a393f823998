"""
Tests for OCR text normalization.
"""

import pytest

from lounge_memo.text import normalize


def test_normalize_mixed_fragment():
    assert normalize("あがぱ工EｅＥ") == "アカハエeee"


@pytest.mark.parametrize("raw, expected", [
    ("ﾏﾘｵｶｰﾄ", "マリオカート"),
    ("ドッスンいせき", "トツスンイセキ"),
    ("ＧＢＡ", "gba"),
    ("キノピオ", "キノヒオ"),
    ("口ック", "ロツク"),
])
def test_normalize_folds_width_script_and_marks(raw, expected):
    assert normalize(raw) == expected


@pytest.mark.parametrize("raw", ["ドッスンいせき", "ﾏﾘｵｶｰﾄｽﾀｼﾞｱﾑ", "DKジャングル", "ムーンリッジ&ハイウェイ"])
def test_normalize_is_idempotent(raw):
    once = normalize(raw)
    assert normalize(once) == once
