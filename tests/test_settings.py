"""
Tests for settings persistence.
"""

import json

from lounge_memo.settings import DEFAULT_SETTINGS, default_settings, load_settings, save_settings


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "config.json") == DEFAULT_SETTINGS


def test_defaults_are_not_shared():
    settings = default_settings()
    settings["ocr_languages"].append("ko")
    assert DEFAULT_SETTINGS["ocr_languages"] == ["ja", "en"]


def test_save_and_load_merges_defaults(tmp_path):
    path = tmp_path / "config.json"
    save_settings({"source": "video", "video_path": "race.mp4"}, path)

    settings = load_settings(path)
    assert settings["source"] == "video"
    assert settings["video_path"] == "race.mp4"
    assert settings["log_level"] == DEFAULT_SETTINGS["log_level"]


def test_invalid_file_gives_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_settings(path) == DEFAULT_SETTINGS

    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    assert load_settings(path) == DEFAULT_SETTINGS


def test_save_failure_is_logged(tmp_path, caplog):
    save_settings(default_settings(), tmp_path / "missing" / "config.json")
    assert "Failed to save settings" in caplog.text
