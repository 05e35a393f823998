"""
OCR Module for Lounge Memo

Pluggable OCR architecture for reading text fragments out of game frames.

Usage:
    from lounge_memo.ocr import create_engine

    # Create an OCR engine (EasyOCR, Japanese + English)
    engine = create_engine()

    # Process an RGB frame
    words = engine.recognize(frame)
    for word in words:
        print(word.text, word.x, word.y)
"""

# Public API - Result types
from .result import Word

# Public API - Base class for engines
from .base import OCREngine, OCRError

# Public API - Factory
from .factory import create_engine

# Debug utilities
from .debug import DEBUG_DIR, save_debug_image

__all__ = [
    # Result types
    "Word",
    # Base class
    "OCREngine",
    "OCRError",
    # Factory
    "create_engine",
    # Debug
    "DEBUG_DIR",
    "save_debug_image",
]
