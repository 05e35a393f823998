"""
Tests for positions, race results and the session aggregate.
"""

import json
from datetime import datetime

import pytest

from lounge_memo.courses import Course, Series
from lounge_memo.mogi_result import MogiResult
from lounge_memo.race_result import SCORES, Position, RaceResult

DOLPHIN = Course("ドルフィンみさき", Series.NEW)
YOSHI = Course("ヨッシーアイランド", Series.NEW)
GBA_MC = Course("マリオサーキット", Series.GBA)


def test_position_scores():
    assert [Position.from_index(i).to_score() for i in range(12)] == list(SCORES)
    assert Position.FIRST.to_score() == 15
    assert Position.TWELFTH.to_score() == 1
    assert str(Position.THIRD) == "3"


@pytest.mark.parametrize("index", [-1, 12, 100])
def test_position_from_index_out_of_range(index):
    with pytest.raises(ValueError):
        Position.from_index(index)


def test_race_result_str():
    assert str(RaceResult(GBA_MC, Position.SECOND)) == "GBA マリオサーキット\t2\t12"
    assert str(RaceResult(None, Position.TWELFTH)) == "12\t1"


def test_mogi_result_total_score():
    mogi_result = MogiResult()
    mogi_result.set_current_course(DOLPHIN)
    mogi_result.set_current_position(Position.FIRST)
    assert len(mogi_result.races) == 1
    assert mogi_result.current_course is None

    mogi_result.set_current_course(YOSHI)
    mogi_result.set_current_position(Position.SECOND)
    assert mogi_result.total_score() == 27


def test_reset_current_course():
    mogi_result = MogiResult()
    mogi_result.set_current_course(DOLPHIN)
    mogi_result.reset_current_course()
    assert mogi_result.current_course is None


def test_set_current_position_without_course_is_noop():
    mogi_result = MogiResult()
    mogi_result.set_current_position(Position.FIRST)
    assert mogi_result.races == []


def test_commit_position_without_course():
    mogi_result = MogiResult()
    mogi_result.commit_position(Position.FOURTH)
    assert mogi_result.races == [RaceResult(None, Position.FOURTH)]
    assert mogi_result.total_score() == 9


def test_edit_race():
    mogi_result = MogiResult(races=[RaceResult(None, Position.FIRST)])
    mogi_result.set_course(0, DOLPHIN)
    mogi_result.set_position(0, Position.SIXTH)
    assert mogi_result.races[0] == RaceResult(DOLPHIN, Position.SIXTH)
    assert mogi_result.total_score() == 7


def test_copy_is_independent():
    mogi_result = MogiResult(races=[RaceResult(DOLPHIN, Position.FIRST)], current_course=YOSHI)
    clone = mogi_result.copy()
    assert clone == mogi_result

    clone.set_position(0, Position.TWELFTH)
    clone.reset_current_course()
    assert mogi_result.races[0].position is Position.FIRST
    assert mogi_result.current_course == YOSHI


def test_clipboard_text():
    mogi_result = MogiResult(races=[
        RaceResult(GBA_MC, Position.SECOND),
        RaceResult(None, Position.FIFTH),
    ])
    assert mogi_result.to_clipboard_text() == "GBA マリオサーキット\t2\n\t5\n"


def test_str_lists_races_and_total():
    mogi_result = MogiResult(races=[RaceResult(DOLPHIN, Position.FIRST)], current_course=YOSHI)
    text = str(mogi_result)
    assert text.splitlines() == [
        "01\tドルフィンみさき\t1\t15",
        "---",
        "current course: ヨッシーアイランド",
        "total score: 15",
    ]


def test_save_and_load(tmp_path):
    path = tmp_path / "result.json"
    mogi_result = MogiResult(
        races=[RaceResult(GBA_MC, Position.SECOND), RaceResult(None, Position.NINTH)],
        current_course=DOLPHIN,
    )
    mogi_result.save(path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["races"][0] == {"course": {"name": "マリオサーキット", "series": "GBA"}, "position": 2}
    assert data["races"][1]["course"] is None

    loaded = MogiResult.load(path)
    assert loaded == mogi_result
    assert isinstance(loaded.created_at, datetime)


def test_load_rejects_malformed_document(tmp_path):
    path = tmp_path / "result.json"
    path.write_text(json.dumps({"races": []}), encoding="utf-8")
    with pytest.raises(ValueError):
        MogiResult.load(path)


def test_load_rejects_unknown_position(tmp_path):
    path = tmp_path / "result.json"
    document = MogiResult().to_dict()
    document["races"] = [{"course": None, "position": 13}]
    path.write_text(json.dumps(document), encoding="utf-8")
    with pytest.raises(ValueError):
        MogiResult.load(path)


def test_save_to_missing_directory_raises(tmp_path):
    with pytest.raises(OSError):
        MogiResult().save(tmp_path / "missing" / "result.json")
