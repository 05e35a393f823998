"""
OCR Engine Factory

Maps the "ocr_engine" setting to an engine class. Engine modules are
imported on first use so their model libraries load only when needed.
"""

import importlib
from typing import Dict

from .base import OCREngine


# Setting value -> "module.Class" inside this package
_ENGINE_REGISTRY: Dict[str, str] = {
    "easyocr": "easyocr_engine.EasyOCREngine",
}


def create_engine(engine_type: str = "easyocr", **config) -> OCREngine:
    """
    Create an OCR engine by type.

    Args:
        engine_type: Engine type identifier. Available types:
            - "easyocr" (default): EasyOCR reader, Japanese + English
        **config: Engine-specific configuration options:
            For "easyocr":
                - languages: List of EasyOCR language codes
                - gpu: Run the reader on the GPU

    Returns:
        Configured OCREngine instance

    Raises:
        ValueError: If engine_type is not recognized

    Example:
        engine = create_engine("easyocr", languages=["ja", "en"])
        words = engine.recognize(frame)
    """
    if engine_type not in _ENGINE_REGISTRY:
        available = ", ".join(_ENGINE_REGISTRY)
        raise ValueError(f"Unknown engine type: {engine_type}. Available: {available}")

    module_name, class_name = _ENGINE_REGISTRY[engine_type].rsplit(".", 1)
    module = importlib.import_module(f".{module_name}", package=__package__)
    engine = getattr(module, class_name)()

    if config:
        engine.configure(**config)

    return engine
