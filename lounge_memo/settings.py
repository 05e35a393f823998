"""
Settings Module for Lounge Memo

Provides persistent storage for user preferences using JSON.
Settings are stored in config.json in the working directory.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("config.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "source": "camera",
    "device_index": 0,
    "monitor": 1,
    "video_path": "",
    "ocr_engine": "easyocr",
    "ocr_languages": ["ja", "en"],
    "ocr_gpu": False,
    "template_dir": "assets/templates",
    "result_file": "result.json",
    "results_dir": "results",
    "log_level": "INFO",
    "write_log_to_file": False,
}

LOG_LEVELS = ("ERROR", "WARNING", "INFO", "DEBUG")


def default_settings() -> Dict[str, Any]:
    """Fresh copy of the defaults (nested lists are not shared)."""
    return json.loads(json.dumps(DEFAULT_SETTINGS))


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load settings from config.json.

    Args:
        path: Settings file, defaults to SETTINGS_FILE

    Returns:
        Settings dictionary. Returns defaults if file missing or invalid.
    """
    path = Path(path) if path is not None else SETTINGS_FILE
    if not path.exists():
        logger.debug("Settings file not found, using defaults")
        return default_settings()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            settings = json.load(f)

        if not isinstance(settings, dict):
            raise ValueError("settings root must be an object")

        # Merge with defaults to handle missing keys
        result = default_settings()
        result.update(settings)
        logger.debug(f"Settings loaded: {result}")
        return result

    except (ValueError, IOError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return default_settings()


def save_settings(settings: Dict[str, Any], path: Optional[Path] = None) -> None:
    """
    Save settings to config.json.

    Args:
        settings: Settings dictionary to save
        path: Settings file, defaults to SETTINGS_FILE
    """
    path = Path(path) if path is not None else SETTINGS_FILE
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.debug(f"Settings saved: {settings}")
    except IOError as e:
        logger.error(f"Failed to save settings: {e}")
