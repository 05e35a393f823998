"""
Control UI Module for Lounge Memo

Provides a PyQt5-based window showing the session's race results, with
start/stop controls, capture source settings and a manual edit mode.
"""

from typing import Any, Dict, List, Optional

import numpy as np
from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QLabel, QPushButton, QHBoxLayout,
    QComboBox, QSpinBox, QCheckBox, QTableWidget, QTableWidgetItem,
    QHeaderView, QApplication, QLineEdit, QAbstractItemView
)
from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QFont, QImage, QPixmap

from .courses import Course, CourseCatalog
from .mogi_result import MogiResult
from .race_result import Position
from .settings import LOG_LEVELS

NO_COURSE = "(未設定)"
SOURCES = (("camera", "Capture device"), ("screen", "Screen"), ("video", "Video file"))
PREVIEW_WIDTH = 320

COLUMNS = ("№", "コース", "順位", "得点")


class CoursePicker(QComboBox):
    """
    Course selector for edit mode.

    Editable: typing a display name, part of one or a shorthand alias
    ("mks", "ﾏﾘｶｽ") and pressing Enter picks the first matching course.
    """

    def __init__(self, catalog: CourseCatalog, course: Optional[Course] = None, parent=None):
        super().__init__(parent)
        self._catalog = catalog
        self._courses = catalog.courses
        self.setEditable(True)
        self.setInsertPolicy(QComboBox.NoInsert)
        self.addItem(NO_COURSE)
        for item in self._courses:
            self.addItem(str(item))
        self.set_course(course)
        self.lineEdit().editingFinished.connect(self._on_editing_finished)

    def set_course(self, course: Optional[Course]):
        if course is None or course not in self._courses:
            self.setCurrentIndex(0)
        else:
            self.setCurrentIndex(self._courses.index(course) + 1)

    def course(self) -> Optional[Course]:
        """Course for the current text, resolving aliases; None if empty or unknown."""
        text = self.currentText().strip()
        if not text or text == NO_COURSE:
            return None
        course = self._catalog.from_display(text)
        if course is not None:
            return course
        matches = self._catalog.search(text)
        return matches[0] if matches else None

    def _on_editing_finished(self):
        self.set_course(self.course())


class ResultWindow(QMainWindow):
    """
    Main window for the Lounge Memo application.

    Shows one row per finished race, the course of the race in progress and
    the total score. Edit mode turns every row into a course picker and a
    position spin box; "Save All" sends the edited aggregate to the worker.
    """

    # Signals for worker thread communication
    start_requested = pyqtSignal()
    stop_requested = pyqtSignal()
    shutdown_requested = pyqtSignal()
    debug_requested = pyqtSignal()
    preview_requested = pyqtSignal()
    edit_submitted = pyqtSignal(object)  # Emits the edited MogiResult
    clear_requested = pyqtSignal()
    settings_changed = pyqtSignal(object)  # Emits the settings dict

    def __init__(self, catalog: CourseCatalog, settings: Dict[str, Any]):
        super().__init__()
        self._catalog = catalog
        self._settings = dict(settings)
        self._is_running = False
        self._editing = False
        self._result = MogiResult()
        self._race_pickers: List[CoursePicker] = []
        self._position_spins: List[QSpinBox] = []
        self._init_ui()
        self.set_result(self._result)

    def _init_ui(self):
        """Initialize the user interface components."""
        # Window configuration
        self.setWindowTitle("Lounge Memo")
        self.resize(560, 720)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout()
        layout.setSpacing(8)
        layout.setContentsMargins(16, 16, 16, 16)
        central_widget.setLayout(layout)

        # Status label
        self.status_label = QLabel("Status: Stopped")
        self.status_label.setAlignment(Qt.AlignCenter)
        status_font = QFont()
        status_font.setPointSize(10)
        status_font.setBold(True)
        self.status_label.setFont(status_font)
        layout.addWidget(self.status_label)

        # Source selector
        source_layout = QHBoxLayout()
        source_layout.addWidget(QLabel("Source:"))
        self.source_combo = QComboBox()
        for key, label in SOURCES:
            self.source_combo.addItem(label, key)
        self.source_combo.setCurrentIndex(
            max(0, self.source_combo.findData(self._settings.get("source", "camera")))
        )
        source_layout.addWidget(self.source_combo, 1)

        self.device_spin = QSpinBox()
        self.device_spin.setRange(0, 16)
        self.device_spin.setValue(int(self._settings.get("device_index", 0)))
        self.device_spin.setToolTip("Capture device index / monitor number")
        source_layout.addWidget(self.device_spin)
        layout.addLayout(source_layout)

        self.video_edit = QLineEdit(self._settings.get("video_path", ""))
        self.video_edit.setPlaceholderText("Video file path")
        layout.addWidget(self.video_edit)
        self.source_combo.currentIndexChanged.connect(self._on_source_changed)
        self._on_source_changed()

        # Logging settings
        log_layout = QHBoxLayout()
        log_layout.addWidget(QLabel("Log level:"))
        self.log_combo = QComboBox()
        for level in LOG_LEVELS:
            self.log_combo.addItem(level)
        self.log_combo.setCurrentText(self._settings.get("log_level", "INFO"))
        self.log_combo.currentIndexChanged.connect(self._emit_settings)
        log_layout.addWidget(self.log_combo, 1)
        self.log_file_check = QCheckBox("Write log file")
        self.log_file_check.setChecked(bool(self._settings.get("write_log_to_file", False)))
        self.log_file_check.toggled.connect(self._emit_settings)
        log_layout.addWidget(self.log_file_check)
        layout.addLayout(log_layout)

        # Start/Stop + preview
        control_layout = QHBoxLayout()
        self.toggle_button = QPushButton("START")
        self.toggle_button.setMinimumHeight(40)
        button_font = QFont()
        button_font.setPointSize(11)
        button_font.setBold(True)
        self.toggle_button.setFont(button_font)
        self.toggle_button.clicked.connect(self._on_toggle_clicked)
        control_layout.addWidget(self.toggle_button, 1)

        self.preview_button = QPushButton("Preview")
        self.preview_button.setMinimumHeight(40)
        self.preview_button.clicked.connect(self._on_preview_clicked)
        control_layout.addWidget(self.preview_button)
        layout.addLayout(control_layout)

        self.preview_label = QLabel()
        self.preview_label.setAlignment(Qt.AlignCenter)
        self.preview_label.hide()
        layout.addWidget(self.preview_label)

        # Results table
        self.table = QTableWidget(0, len(COLUMNS))
        self.table.setHorizontalHeaderLabels(COLUMNS)
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        header = self.table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeToContents)
        header.setSectionResizeMode(1, QHeaderView.Stretch)
        header.setSectionResizeMode(2, QHeaderView.ResizeToContents)
        header.setSectionResizeMode(3, QHeaderView.ResizeToContents)
        layout.addWidget(self.table, 1)

        # Current course + total
        course_layout = QHBoxLayout()
        course_layout.addWidget(QLabel("現在のコース:"))
        self.current_course_label = QLabel(NO_COURSE)
        course_layout.addWidget(self.current_course_label, 1)
        self.current_course_picker = CoursePicker(self._catalog)
        self.current_course_picker.hide()
        course_layout.addWidget(self.current_course_picker, 1)
        layout.addLayout(course_layout)

        self.total_label = QLabel("合計得点: 0")
        total_font = QFont()
        total_font.setPointSize(12)
        total_font.setBold(True)
        self.total_label.setFont(total_font)
        layout.addWidget(self.total_label)

        # Result actions
        action_layout = QHBoxLayout()
        self.copy_button = QPushButton("Copy")
        self.copy_button.clicked.connect(self._on_copy_clicked)
        action_layout.addWidget(self.copy_button)

        self.edit_button = QPushButton("Edit")
        self.edit_button.clicked.connect(self._on_edit_clicked)
        action_layout.addWidget(self.edit_button)

        self.clear_button = QPushButton("Clear")
        self.clear_button.clicked.connect(self.clear_requested.emit)
        action_layout.addWidget(self.clear_button)
        layout.addLayout(action_layout)

        self.fps_label = QLabel("FPS:    --")
        self.fps_label.setFont(QFont("", 9))
        layout.addWidget(self.fps_label)

        # Debug button
        self.debug_button = QPushButton("Save Debug Image")
        self.debug_button.setMinimumHeight(30)
        self.debug_button.clicked.connect(self.debug_requested.emit)
        self.debug_button.setEnabled(False)  # Disabled until running
        layout.addWidget(self.debug_button)

        self._apply_styles()

    def _apply_styles(self):
        """Apply clean, minimal styling to the window."""
        style = """
            QMainWindow {
                background-color: #f5f5f5;
            }
            QPushButton {
                background-color: #4CAF50;
                color: white;
                border: none;
                border-radius: 5px;
                padding: 8px;
            }
            QPushButton:hover {
                background-color: #45a049;
            }
            QPushButton:pressed {
                background-color: #3d8b40;
            }
            QPushButton:disabled {
                background-color: #cccccc;
                color: #666666;
            }
            QLabel {
                color: #333333;
            }
        """
        self.setStyleSheet(style)

    # --- Settings ---

    def current_settings(self) -> Dict[str, Any]:
        """Settings dict with the values currently selected in the window."""
        settings = dict(self._settings)
        source = self.source_combo.currentData()
        settings["source"] = source
        if source == "screen":
            settings["monitor"] = self.device_spin.value()
        else:
            settings["device_index"] = self.device_spin.value()
        settings["video_path"] = self.video_edit.text().strip()
        settings["log_level"] = self.log_combo.currentText()
        settings["write_log_to_file"] = self.log_file_check.isChecked()
        return settings

    def _on_source_changed(self, *_):
        source = self.source_combo.currentData()
        self.video_edit.setVisible(source == "video")
        self.device_spin.setVisible(source != "video")
        if source == "screen":
            self.device_spin.setValue(int(self._settings.get("monitor", 1)))
        elif source == "camera":
            self.device_spin.setValue(int(self._settings.get("device_index", 0)))

    def _emit_settings(self, *_):
        self._settings = self.current_settings()
        self.settings_changed.emit(dict(self._settings))

    # --- Results ---

    def set_result(self, mogi_result: MogiResult):
        """
        Show an aggregate snapshot.

        Ignored for the table while edit mode is open so the user's edits are
        not overwritten; the latest snapshot is kept and used when editing ends.
        A current course detected or committed meanwhile is carried into the
        picker unless the user already picked a different one.
        """
        previous_course = self._result.current_course
        self._result = mogi_result.copy()
        if self._editing:
            current = self._result.current_course
            if current != previous_course and self.current_course_picker.course() == previous_course:
                self.current_course_picker.set_course(current)
            return
        self._fill_table()

    def _fill_table(self):
        races = self._result.races
        self.table.setRowCount(len(races))
        self._race_pickers = []
        self._position_spins = []
        for row, race in enumerate(races):
            self.table.setItem(row, 0, QTableWidgetItem(f"{row + 1}"))
            if self._editing:
                picker = CoursePicker(self._catalog, race.course)
                spin = QSpinBox()
                spin.setRange(1, 12)
                spin.setValue(race.position.value)
                self.table.setCellWidget(row, 1, picker)
                self.table.setCellWidget(row, 2, spin)
                self._race_pickers.append(picker)
                self._position_spins.append(spin)
            else:
                self.table.removeCellWidget(row, 1)
                self.table.removeCellWidget(row, 2)
                course = str(race.course) if race.course is not None else ""
                self.table.setItem(row, 1, QTableWidgetItem(course))
                self.table.setItem(row, 2, QTableWidgetItem(str(race.position)))
            self.table.setItem(row, 3, QTableWidgetItem(str(race.to_score())))
        if races and not self._editing:
            self.table.scrollToBottom()

        current = self._result.current_course
        self.current_course_label.setText(str(current) if current is not None else NO_COURSE)
        self.current_course_picker.set_course(current)
        self.total_label.setText(f"合計得点: {self._result.total_score()}")

    def edited_result(self) -> MogiResult:
        """Aggregate built from the edit-mode widgets."""
        edited = self._result.copy()
        for index, (picker, spin) in enumerate(zip(self._race_pickers, self._position_spins)):
            edited.set_course(index, picker.course())
            edited.set_position(index, Position(spin.value()))
        edited.current_course = self.current_course_picker.course()
        return edited

    def _on_edit_clicked(self):
        if self._editing:
            edited = self.edited_result()
            self._editing = False
            self._result = edited
            self.edit_submitted.emit(edited)
        else:
            self._editing = True
        self.edit_button.setText("Save All" if self._editing else "Edit")
        self.current_course_label.setVisible(not self._editing)
        self.current_course_picker.setVisible(self._editing)
        self._fill_table()

    def _on_copy_clicked(self):
        QApplication.clipboard().setText(self._result.to_clipboard_text())
        self.set_status("Copied")

    # --- Status ---

    def _on_toggle_clicked(self):
        """Handle Start/Stop button click."""
        if self._is_running:
            self.stop_requested.emit()
        else:
            self._emit_settings()
            self.start_requested.emit()

    def _on_preview_clicked(self):
        self._emit_settings()
        self.preview_requested.emit()

    def show_preview(self, frame: np.ndarray):
        """Show an RGB frame scaled down under the controls."""
        height, width = frame.shape[:2]
        frame = np.ascontiguousarray(frame)
        image = QImage(frame.data, width, height, 3 * width, QImage.Format_RGB888).copy()
        self.preview_label.setPixmap(
            QPixmap.fromImage(image).scaledToWidth(PREVIEW_WIDTH, Qt.SmoothTransformation)
        )
        self.preview_label.show()

    def set_status(self, status: str):
        """
        Update the status label.

        Args:
            status: Status text to display (e.g., "Stopped", "Running", "Error: message")
        """
        self.status_label.setText(f"Status: {status}")

        # Color coding for different statuses
        if status.lower().startswith("error"):
            self.status_label.setStyleSheet("color: #d32f2f;")
        elif status.lower() == "running":
            self.status_label.setStyleSheet("color: #4CAF50;")
        else:
            self.status_label.setStyleSheet("color: #333333;")

    def set_fps_info(self, current: float, cap: float):
        """
        Update the FPS label.

        Args:
            current: Current FPS value
            cap: FPS cap value
        """
        self.fps_label.setText(f"FPS:    {current:.1f} (cap: {int(cap)})")

    def set_running(self, is_running: bool):
        """
        Toggle the button state and update status.

        Args:
            is_running: True if the pipeline is running, False if stopped
        """
        self._is_running = is_running

        self.debug_button.setEnabled(is_running)
        self.preview_button.setEnabled(not is_running)
        for widget in (self.source_combo, self.device_spin, self.video_edit):
            widget.setEnabled(not is_running)

        if is_running:
            self.toggle_button.setText("STOP")
            self.toggle_button.setStyleSheet("""
                QPushButton {
                    background-color: #f44336;
                    color: white;
                    border: none;
                    border-radius: 5px;
                    padding: 8px;
                }
                QPushButton:hover {
                    background-color: #da190b;
                }
            """)
            self.set_status("Running")
        else:
            self.toggle_button.setText("START")
            self.toggle_button.setStyleSheet("")
            self.set_status("Stopped")
            self.fps_label.setText("FPS:    --")

    def closeEvent(self, event):
        """
        Handle window close event.

        Emits shutdown_requested signal before closing to allow
        graceful cleanup of worker threads.

        Args:
            event: QCloseEvent object
        """
        self.shutdown_requested.emit()
        event.accept()
