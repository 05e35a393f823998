"""
Text Normalization Module

Canonicalizes OCR text fragments so that fuzzy comparisons against the
course catalog do not depend on width, kana script, voicing marks or case.
"""

import unicodedata

# Kanji that OCR engines frequently return in place of a katakana glyph
KANJI_LOOKALIKES = {
    "工": "エ",
    "口": "ロ",
    "力": "カ",
    "夕": "タ",
    "卜": "ト",
    "二": "ニ",
    "八": "ハ",
    "一": "ー",
}

SMALL_KANA = {
    "ァ": "ア", "ィ": "イ", "ゥ": "ウ", "ェ": "エ", "ォ": "オ",
    "ッ": "ツ", "ャ": "ヤ", "ュ": "ユ", "ョ": "ヨ", "ヮ": "ワ",
    "ヵ": "カ", "ヶ": "ケ",
}

# Combining (U+3099, U+309A) and spacing (U+309B, U+309C) sound marks
SOUND_MARKS = {"゙", "゚", "゛", "゜"}

HIRAGANA_START = 0x3041
HIRAGANA_END = 0x3096
HIRAGANA_TO_KATAKANA_OFFSET = 0x60


def _to_katakana(ch: str) -> str:
    code = ord(ch)
    if HIRAGANA_START <= code <= HIRAGANA_END or ch in ("ゝ", "ゞ"):
        return chr(code + HIRAGANA_TO_KATAKANA_OFFSET)
    return ch


def normalize(text: str) -> str:
    """
    Normalize a recognized text fragment.

    Steps:
    1. NFKC fold (full-width Latin/digits to ASCII, half-width kana to full-width)
    2. Kanji look-alikes to katakana
    3. Hiragana to katakana
    4. Strip voiced/semi-voiced marks (ガ -> カ, パ -> ハ)
    5. Small kana to full kana (ッ -> ツ)
    6. ASCII lower-case

    Args:
        text: Raw text

    Returns:
        Normalized text. normalize(normalize(s)) == normalize(s).

    Example:
        >>> normalize("あがぱ工EｅＥ")
        'アカハエeee'
    """
    text = unicodedata.normalize("NFKC", text)
    text = "".join(_to_katakana(KANJI_LOOKALIKES.get(ch, ch)) for ch in text)

    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if ch not in SOUND_MARKS)
    text = unicodedata.normalize("NFC", stripped)

    chars = []
    for ch in text:
        ch = SMALL_KANA.get(ch, ch)
        if "A" <= ch <= "Z":
            ch = ch.lower()
        chars.append(ch)
    return "".join(chars)
