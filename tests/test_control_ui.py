"""
Tests for edit mode of the results window, run on the offscreen Qt platform.
"""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt5.QtWidgets import QApplication

from lounge_memo.control_ui import ResultWindow
from lounge_memo.courses import Course, Series
from lounge_memo.mogi_result import MogiResult
from lounge_memo.race_result import Position, RaceResult
from lounge_memo.settings import default_settings

MKS = Course("マリオカートスタジアム", Series.NEW)
WP = Course("ウォーターパーク", Series.NEW)


@pytest.fixture(scope="module")
def qt_app():
    return QApplication.instance() or QApplication([])


@pytest.fixture
def window(qt_app, catalog):
    result_window = ResultWindow(catalog, default_settings())
    yield result_window
    result_window.deleteLater()


def open_editor(window, mogi_result):
    submitted = []
    window.edit_submitted.connect(submitted.append)
    window.set_result(mogi_result)
    window.edit_button.click()
    return submitted


def test_edit_round_trip(window):
    mogi_result = MogiResult(races=[RaceResult(MKS, Position.THIRD)])
    submitted = open_editor(window, mogi_result)

    window.edit_button.click()

    assert len(submitted) == 1
    assert submitted[0].races == mogi_result.races
    assert submitted[0].current_course is None


def test_course_committed_while_editing_is_not_restored(window):
    submitted = open_editor(window, MogiResult(current_course=MKS))

    # The race finishes while the editor is open
    window.set_result(MogiResult(races=[RaceResult(MKS, Position.FIRST)]))
    window.edit_button.click()

    assert submitted[0].current_course is None
    assert submitted[0].races == [RaceResult(MKS, Position.FIRST)]


def test_course_detected_while_editing_is_kept(window):
    submitted = open_editor(window, MogiResult())

    window.set_result(MogiResult(current_course=MKS))
    window.edit_button.click()

    assert submitted[0].current_course == MKS


def test_user_pick_wins_over_detection(window):
    submitted = open_editor(window, MogiResult())
    window.current_course_picker.set_course(WP)

    window.set_result(MogiResult(current_course=MKS))
    window.edit_button.click()

    assert submitted[0].current_course == WP
